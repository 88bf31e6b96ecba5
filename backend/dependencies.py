"""FastAPI providers for the services; tests swap these via dependency_overrides."""
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from redis.asyncio import Redis

from config import AIConfig, get_settings
from db import get_redis
from llm_interface.base import LLMClient
from llm_interface.factory import build_llm_client
from services.candidate_service import CandidateReviewService
from services.interview_repository import InterviewRepository
from services.interview_service import InterviewService
from services.question_service import QuestionProvider
from services.scoring_service import AnswerScorer


@lru_cache
def get_ai_config() -> AIConfig:
    return get_settings().ai_config()


@lru_cache
def get_llm_client() -> Optional[LLMClient]:
    return build_llm_client(get_ai_config())


def get_question_provider() -> QuestionProvider:
    return QuestionProvider(get_ai_config(), get_llm_client())


def get_answer_scorer() -> AnswerScorer:
    return AnswerScorer(get_ai_config(), get_llm_client())


def get_repository(redis: Redis = Depends(get_redis)) -> InterviewRepository:
    return InterviewRepository(redis)


def get_interview_service(
    repository: InterviewRepository = Depends(get_repository),
    question_provider: QuestionProvider = Depends(get_question_provider),
    scorer: AnswerScorer = Depends(get_answer_scorer),
) -> InterviewService:
    return InterviewService(repository, question_provider, scorer)


def get_candidate_service(
    repository: InterviewRepository = Depends(get_repository),
) -> CandidateReviewService:
    return CandidateReviewService(repository)
