from typing import Any, Dict, Optional

from fastapi import status


class InterviewError(Exception):
    """Base error for interview operations; rendered by the app's exception handler."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(detail)
        self.detail = detail
        self.payload = payload or {}

    def to_body(self) -> Dict[str, Any]:
        return {"detail": self.detail, **self.payload}


class InvalidRequestError(InterviewError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthorizationError(InterviewError):
    status_code = status.HTTP_403_FORBIDDEN


class ReattemptNotAllowedError(AuthorizationError):
    pass


class NotFoundError(InterviewError):
    status_code = status.HTTP_404_NOT_FOUND


class InterviewStateError(InterviewError):
    status_code = status.HTTP_409_CONFLICT


class ConcurrentUpdateError(InterviewStateError):
    pass


class AIUnavailableError(InterviewError):
    status_code = status.HTTP_502_BAD_GATEWAY
