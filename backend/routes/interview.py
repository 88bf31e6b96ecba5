# ========================================
# routes/interview.py - Candidate interview endpoints
# ========================================

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from redis.asyncio import Redis

from config import Settings, get_settings
from db import get_redis
from dependencies import get_interview_service
from models.request import SubmitAnswerRequest, UpdateCandidateRequest
from services.interview_service import InterviewService
from utils.auth import CurrentUser, get_current_user
from utils.errors import InterviewError, InvalidRequestError
from utils.ids import is_object_id
from utils.logger import get_logger
from utils.rate_limit import check_rate_limit

router = APIRouter(prefix="/interview", tags=["Interview"])
logger = get_logger("InterviewRoutes")


def _require_object_id(interview_id: str) -> str:
    if not is_object_id(interview_id):
        raise InvalidRequestError("Invalid interview ID")
    return interview_id


@router.post("/upload-resume")
async def upload_resume(
    resume: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
    settings: Settings = Depends(get_settings),
    redis: Redis = Depends(get_redis),
):
    """Upload a PDF/DOCX resume and create a pending interview with six questions"""
    try:
        await check_rate_limit(
            redis, user.id, "upload",
            limit=settings.upload_rate_limit,
            window_seconds=settings.rate_limit_window_seconds,
        )
        # at most one byte past the limit is enough to reject oversize files
        blob = await resume.read(settings.max_resume_bytes + 1)
        if not blob:
            raise InvalidRequestError("Resume file is required")
        if len(blob) > settings.max_resume_bytes:
            raise HTTPException(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Resume exceeds the 10MB limit")

        result = await service.upload_resume(user, resume.filename, resume.content_type, blob)
        body = result.interview.to_public()
        body["id"] = result.interview.id
        body["candidateInfo"] = result.candidate_info.model_dump(by_alias=True)
        body["missingFields"] = result.candidate_info.missing_fields()

        return {"message": "Resume uploaded successfully", "interview": body}

    except (HTTPException, InterviewError):
        raise
    except Exception as e:
        logger.error(f"Resume upload error: {e}", exc_info=True)
        raise HTTPException(500, "Error processing resume")


@router.put("/update-candidate/{interview_id}")
async def update_candidate(
    interview_id: str,
    request: UpdateCandidateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
):
    """Correct the name/email/phone guessed from the resume"""
    _require_object_id(interview_id)
    try:
        interview = await service.update_candidate(
            user, interview_id, request.name, request.email, request.phone
        )
        return {"message": "Candidate information updated", "interview": interview.to_public()}

    except (HTTPException, InterviewError):
        raise
    except Exception as e:
        logger.error(f"Update candidate error: {e}", exc_info=True)
        raise HTTPException(500, "Error updating candidate information")


@router.post("/start/{interview_id}")
async def start_interview(
    interview_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
):
    """Begin the attempt and return the current question"""
    _require_object_id(interview_id)
    try:
        interview = await service.start(user, interview_id)
        current = interview.current_question
        return {
            "message": "Interview started",
            "interview": interview.to_public(),
            "currentQuestion": current.model_dump(mode="json", by_alias=True) if current else None,
        }

    except (HTTPException, InterviewError):
        raise
    except Exception as e:
        logger.error(f"Start interview error: {e}", exc_info=True)
        raise HTTPException(500, "Error starting interview")


@router.post("/submit-answer/{interview_id}")
async def submit_answer(
    interview_id: str,
    request: SubmitAnswerRequest,
    user: CurrentUser = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
    settings: Settings = Depends(get_settings),
    redis: Redis = Depends(get_redis),
):
    """Score the answer to the current question and move on"""
    _require_object_id(interview_id)
    try:
        await check_rate_limit(
            redis, user.id, "answer",
            limit=settings.answer_rate_limit,
            window_seconds=settings.rate_limit_window_seconds,
        )
        result = await service.submit_answer(
            user,
            interview_id,
            request.answer,
            request.time_spent,
            question_index=request.question_index,
        )
        next_question = result.next_question
        return {
            "message": "Interview completed" if result.is_complete else "Answer submitted",
            "interview": result.interview.to_public(),
            "isComplete": result.is_complete,
            "nextQuestion": next_question.model_dump(mode="json", by_alias=True) if next_question else None,
        }

    except (HTTPException, InterviewError):
        raise
    except Exception as e:
        logger.error(f"Submit answer error: {e}", exc_info=True)
        raise HTTPException(500, "Error submitting answer")


@router.get("/{interview_id}")
async def get_interview(
    interview_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
):
    """Full record of one of the caller's interviews"""
    _require_object_id(interview_id)
    try:
        interview = await service.get_for_candidate(user, interview_id)
        return {"interview": interview.to_public()}

    except (HTTPException, InterviewError):
        raise
    except Exception as e:
        logger.error(f"Get interview error: {e}", exc_info=True)
        raise HTTPException(500, "Error fetching interview")
