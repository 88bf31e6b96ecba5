# ========================================
# routes/candidates.py - Interviewer review endpoints
# ========================================

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from dependencies import get_candidate_service, get_interview_service
from services.candidate_service import CandidateReviewService
from services.interview_service import InterviewService
from utils.auth import INTERVIEWER, CurrentUser, get_current_user, require_role
from utils.errors import InterviewError, InvalidRequestError, NotFoundError
from utils.ids import is_object_id
from utils.logger import get_logger

router = APIRouter(prefix="/candidates", tags=["Candidates"])
logger = get_logger("CandidateRoutes")


def _require_object_id(value: str) -> str:
    if not is_object_id(value):
        raise InvalidRequestError("Invalid candidate ID")
    return value


@router.get("")
async def list_candidates(
    search: Optional[str] = None,
    sort_by: str = Query("totalScore", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    _: CurrentUser = Depends(require_role(INTERVIEWER)),
    service: CandidateReviewService = Depends(get_candidate_service),
):
    """Completed interviews, searchable by name/email"""
    try:
        result = await service.list_completed(search, sort_by, sort_order, page, limit)
        return result.to_public()

    except (HTTPException, InterviewError):
        raise
    except Exception as e:
        logger.error(f"Get candidates error: {e}", exc_info=True)
        raise HTTPException(500, "Error fetching candidates")


@router.get("/my/interviews")
async def my_interviews(
    user: CurrentUser = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
):
    """The caller's own interview history, newest first"""
    try:
        interviews = await service.list_for_candidate(user)
        return {"interviews": [i.to_public() for i in interviews]}

    except (HTTPException, InterviewError):
        raise
    except Exception as e:
        logger.error(f"Get my interviews error: {e}", exc_info=True)
        raise HTTPException(500, "Error fetching interviews")


@router.get("/{interview_id}")
async def get_candidate(
    interview_id: str,
    _: CurrentUser = Depends(require_role(INTERVIEWER)),
    service: CandidateReviewService = Depends(get_candidate_service),
):
    _require_object_id(interview_id)
    try:
        interview = await service.get_interview(interview_id)
        return {"interview": interview.to_public()}

    except (HTTPException, InterviewError):
        raise
    except Exception as e:
        logger.error(f"Get candidate details error: {e}", exc_info=True)
        raise HTTPException(500, "Error fetching candidate details")


async def _set_reattempt(service: CandidateReviewService, target_id: str, allow: bool) -> dict:
    # an interview id first, otherwise the id of a candidate (their latest interview)
    interview = await service.set_reattempt_for_interview(target_id, allow)
    if interview is None:
        interview = await service.set_reattempt_for_candidate(target_id, allow)
    if interview is None:
        raise NotFoundError("Interview not found")

    return {
        "message": f"Re-attempt {'enabled' if allow else 'disabled'} for candidate",
        "interview": {
            "_id": interview.id,
            "candidateName": interview.candidate_name,
            "candidateEmail": interview.candidate_email,
            "allowReattempt": interview.allow_reattempt,
        },
    }


@router.put("/{target_id}/enable-reattempt")
async def enable_reattempt(
    target_id: str,
    _: CurrentUser = Depends(require_role(INTERVIEWER)),
    service: CandidateReviewService = Depends(get_candidate_service),
):
    _require_object_id(target_id)
    try:
        return await _set_reattempt(service, target_id, True)

    except (HTTPException, InterviewError):
        raise
    except Exception as e:
        logger.error(f"Enable re-attempt error: {e}", exc_info=True)
        raise HTTPException(500, "Error enabling re-attempt")


@router.put("/{target_id}/disable-reattempt")
async def disable_reattempt(
    target_id: str,
    _: CurrentUser = Depends(require_role(INTERVIEWER)),
    service: CandidateReviewService = Depends(get_candidate_service),
):
    _require_object_id(target_id)
    try:
        return await _set_reattempt(service, target_id, False)

    except (HTTPException, InterviewError):
        raise
    except Exception as e:
        logger.error(f"Disable re-attempt error: {e}", exc_info=True)
        raise HTTPException(500, "Error disabling re-attempt")
