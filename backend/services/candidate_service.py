# services/candidate_service.py
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from models.interview import Interview
from services.interview_repository import InterviewRepository
from utils.errors import InvalidRequestError, NotFoundError
from utils.logger import get_logger

logger = get_logger("CandidateService")

MAX_PAGE_SIZE = 100


def _text(value: str) -> str:
    return (value or "").casefold()


# public sort field -> key over an interview
SORT_FIELDS: Dict[str, Callable[[Interview], Any]] = {
    "totalScore": lambda i: i.total_score,
    "candidateName": lambda i: _text(i.candidate_name),
    "candidateEmail": lambda i: _text(i.candidate_email),
    "completedAt": lambda i: i.completed_at or i.created_at,
    "createdAt": lambda i: i.created_at,
}

LIST_FIELDS = (
    "_id",
    "candidateName",
    "candidateEmail",
    "candidatePhone",
    "totalScore",
    "aiSummary",
    "allowReattempt",
    "completedAt",
    "createdAt",
)


def to_list_entry(interview: Interview) -> Dict[str, Any]:
    data = interview.to_public()
    return {field: data.get(field) for field in LIST_FIELDS}


@dataclass
class CandidatePage:
    candidates: List[Interview]
    page: int
    page_size: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0

    def to_public(self) -> Dict[str, Any]:
        return {
            "candidates": [to_list_entry(i) for i in self.candidates],
            "pagination": {
                "current": self.page,
                "pageSize": self.page_size,
                "total": self.total,
                "pages": self.pages,
            },
        }


class CandidateReviewService:
    """Read side for interviewers, plus the reattempt switch."""

    def __init__(self, repository: InterviewRepository):
        self.repository = repository

    async def list_completed(
        self,
        search: Optional[str] = None,
        sort_by: str = "totalScore",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> CandidatePage:
        if sort_by not in SORT_FIELDS:
            raise InvalidRequestError(
                f"Cannot sort by '{sort_by}'",
                payload={"allowedSortFields": sorted(SORT_FIELDS)},
            )
        if sort_order not in ("asc", "desc"):
            raise InvalidRequestError("sortOrder must be 'asc' or 'desc'")
        if page < 1 or not 1 <= limit <= MAX_PAGE_SIZE:
            raise InvalidRequestError(f"page must be >= 1 and limit between 1 and {MAX_PAGE_SIZE}")

        interviews = await self.repository.list_completed()
        needle = _text(search.strip()) if search else ""
        if needle:
            interviews = [
                i for i in interviews
                if needle in _text(i.candidate_name) or needle in _text(i.candidate_email)
            ]

        interviews.sort(key=SORT_FIELDS[sort_by], reverse=sort_order == "desc")
        start = (page - 1) * limit
        return CandidatePage(
            candidates=interviews[start:start + limit],
            page=page,
            page_size=limit,
            total=len(interviews),
        )

    async def get_interview(self, interview_id: str) -> Interview:
        interview = await self.repository.get(interview_id)
        if interview is None:
            raise NotFoundError("Candidate not found")
        return interview

    async def set_reattempt_for_interview(self, interview_id: str, allow: bool) -> Optional[Interview]:
        if await self.repository.get(interview_id) is None:
            return None

        def apply(interview: Interview) -> None:
            interview.allow_reattempt = allow

        updated = await self.repository.update(interview_id, apply)
        logger.info(f"allowReattempt={allow} on interview {interview_id}")
        return updated

    async def set_reattempt_for_candidate(self, candidate_id: str, allow: bool) -> Optional[Interview]:
        """Applies to the candidate's most recent interview."""
        latest = await self.repository.latest_for_candidate(candidate_id)
        if latest is None:
            return None
        return await self.set_reattempt_for_interview(latest.id, allow)
