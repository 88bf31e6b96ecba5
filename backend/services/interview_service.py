# services/interview_service.py
import math
from dataclasses import dataclass
from typing import List, Optional

from models.interview import (
    MAX_QUESTION_SCORE,
    QUESTIONS_PER_INTERVIEW,
    CandidateInfo,
    Interview,
    InterviewStatus,
    Question,
    utcnow,
)
from services.interview_repository import InterviewRepository
from services.question_service import QuestionProvider
from services.resume_parser import extract_candidate_info, extract_text
from services.scoring_service import AnswerScorer
from services.summary import build_summary
from utils.auth import CurrentUser
from utils.errors import (
    AuthorizationError,
    InterviewStateError,
    NotFoundError,
    ReattemptNotAllowedError,
)
from utils.logger import get_logger

logger = get_logger("InterviewService")


@dataclass
class UploadResult:
    interview: Interview
    candidate_info: CandidateInfo


@dataclass
class SubmitResult:
    interview: Interview
    is_complete: bool
    next_question: Optional[Question]


class InterviewService:
    """Drives an interview through pending -> in_progress -> completed."""

    def __init__(
        self,
        repository: InterviewRepository,
        question_provider: QuestionProvider,
        scorer: AnswerScorer,
    ):
        self.repository = repository
        self.question_provider = question_provider
        self.scorer = scorer

    async def _get_owned(self, user: CurrentUser, interview_id: str) -> Interview:
        interview = await self.repository.get(interview_id)
        if interview is None:
            raise NotFoundError("Interview not found")
        if interview.candidate_id != user.id:
            raise AuthorizationError("This interview belongs to another candidate")
        return interview

    async def _ensure_can_upload(self, user: CurrentUser) -> None:
        history = await self.repository.list_for_candidate(user.id)

        latest_completed = next((i for i in history if i.status == InterviewStatus.COMPLETED), None)
        if latest_completed is not None and not latest_completed.allow_reattempt:
            raise ReattemptNotAllowedError(
                "You have already completed an interview. "
                "Please contact the interviewer to enable re-attempt.",
                payload={
                    "hasCompletedInterview": True,
                    "completedInterview": latest_completed.completion_summary(),
                },
            )

        active = next((i for i in history if i.status != InterviewStatus.COMPLETED), None)
        if active is not None:
            raise InterviewStateError(
                "You already have an interview in progress"
                if active.status == InterviewStatus.IN_PROGRESS
                else "You already have an interview waiting to be started",
                payload={"interviewId": active.id},
            )

    async def upload_resume(
        self,
        user: CurrentUser,
        filename: Optional[str],
        content_type: Optional[str],
        blob: bytes,
    ) -> UploadResult:
        await self._ensure_can_upload(user)

        resume_text = extract_text(blob, filename, content_type)
        info = extract_candidate_info(resume_text)
        questions = await self.question_provider.generate(resume_text)

        interview = Interview(
            candidate_id=user.id,
            candidate_name=info.name or user.name,
            candidate_email=info.email or user.email,
            candidate_phone=info.phone,
            resume_text=resume_text,
            questions=questions,
            status=InterviewStatus.PENDING,
        )
        await self.repository.insert(interview)
        logger.info(f"Resume uploaded for {user.id}; missing fields: {info.missing_fields()}")
        return UploadResult(interview=interview, candidate_info=info)

    async def update_candidate(
        self, user: CurrentUser, interview_id: str, name: str, email: str, phone: str
    ) -> Interview:
        await self._get_owned(user, interview_id)

        def apply(interview: Interview) -> None:
            interview.candidate_name = name.strip()
            interview.candidate_email = email.strip()
            interview.candidate_phone = phone.strip()

        return await self.repository.update(interview_id, apply)

    async def start(self, user: CurrentUser, interview_id: str) -> Interview:
        interview = await self._get_owned(user, interview_id)
        if interview.status == InterviewStatus.IN_PROGRESS:
            # reload of an interview that is already running
            return interview
        if interview.status == InterviewStatus.COMPLETED:
            raise InterviewStateError("Interview already completed")

        history = await self.repository.list_for_candidate(user.id)
        running = next(
            (i for i in history if i.status == InterviewStatus.IN_PROGRESS and i.id != interview_id),
            None,
        )
        if running is not None:
            raise InterviewStateError(
                "Another interview is already in progress",
                payload={"interviewId": running.id},
            )

        now = utcnow()

        def apply(doc: Interview) -> None:
            if doc.status != InterviewStatus.PENDING:
                raise InterviewStateError("Interview was started elsewhere")
            doc.status = InterviewStatus.IN_PROGRESS
            doc.started_at = now
            doc.current_question_index = 0

        started = await self.repository.update(interview_id, apply)
        logger.info(f"Interview {interview_id} started")
        return started

    async def submit_answer(
        self,
        user: CurrentUser,
        interview_id: str,
        answer: str,
        time_spent: float,
        question_index: Optional[int] = None,
    ) -> SubmitResult:
        interview = await self._get_owned(user, interview_id)
        if interview.status != InterviewStatus.IN_PROGRESS:
            raise InterviewStateError(f"Interview is {interview.status.value}, not in progress")

        index = interview.current_question_index
        if question_index is not None and question_index != index:
            raise InterviewStateError(
                f"Question {question_index} is not the current question",
                payload={"currentQuestionIndex": index},
            )
        question = interview.current_question
        if question is None:
            raise InterviewStateError("No question left to answer")

        # scored before the write so a strict-mode AI failure leaves the document untouched
        scored = await self.scorer.score(
            question=question.question,
            answer=answer,
            difficulty=question.difficulty,
            resume_text=interview.resume_text,
        )
        seconds = math.floor((time_spent or 0) + 0.5)
        now = utcnow()

        def apply(doc: Interview) -> None:
            if doc.status != InterviewStatus.IN_PROGRESS or doc.current_question_index != index:
                raise InterviewStateError(
                    f"Question {index} was already answered",
                    payload={"currentQuestionIndex": doc.current_question_index},
                )
            target = doc.questions[index]
            target.answer = answer or ""
            target.time_spent = seconds
            target.score = scored.score
            doc.current_question_index = index + 1

            if doc.current_question_index >= len(doc.questions):
                doc.status = InterviewStatus.COMPLETED
                doc.completed_at = now
                doc.ai_summary = build_summary(doc)

        updated = await self.repository.update(interview_id, apply)
        complete = updated.status == InterviewStatus.COMPLETED
        if complete:
            logger.info(f"Interview {interview_id} completed with {updated.total_score}/{QUESTIONS_PER_INTERVIEW * MAX_QUESTION_SCORE}")
        return SubmitResult(
            interview=updated,
            is_complete=complete,
            next_question=None if complete else updated.current_question,
        )

    async def get_for_candidate(self, user: CurrentUser, interview_id: str) -> Interview:
        return await self._get_owned(user, interview_id)

    async def list_for_candidate(self, user: CurrentUser) -> List[Interview]:
        return await self.repository.list_for_candidate(user.id)
