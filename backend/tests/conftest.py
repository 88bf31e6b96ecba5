import json
from datetime import datetime, timedelta, timezone
from io import BytesIO
from typing import Any, Callable, List, Optional, Sequence

import docx
import pytest
from fakeredis import FakeAsyncRedis, FakeServer
from httpx import ASGITransport, AsyncClient
from jose import jwt

from config import AIConfig, get_settings
from db import get_redis
from dependencies import get_answer_scorer, get_question_provider
from llm_interface.base import LLMClient
from main import app as fastapi_app
from models.interview import Interview, InterviewStatus
from services.interview_repository import InterviewRepository
from services.interview_service import InterviewService
from services.question_service import QuestionProvider, fallback_questions
from services.resume_parser import DOCX_MIME
from services.scoring_service import AnswerScorer
from utils.auth import INTERVIEWEE, INTERVIEWER, CurrentUser
from utils.ids import new_object_id


class FakeLLMClient(LLMClient):
    """Replays canned provider text (or raises) and records the prompts."""

    name = "fake"

    def __init__(self, responses: Sequence[str] = (), error: Optional[Exception] = None):
        self.responses = list(responses)
        self.error = error
        self.calls: List[dict] = []

    async def generate(self, system: str, user: str, *, temperature: float, parse: Callable[[str], Optional[Any]]):
        self.calls.append({"system": system, "user": user, "temperature": temperature})
        if self.error is not None:
            raise self.error
        text = self.responses.pop(0) if self.responses else ""
        return parse(text)


def score_responses(scores: Sequence[int]) -> List[str]:
    return [json.dumps({"score": s, "rationale": f"scored {s}"}) for s in scores]


def make_docx(*lines: str) -> bytes:
    document = docx.Document()
    for line in lines:
        document.add_paragraph(line)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def make_token(user_id: str, role: str = INTERVIEWEE, name: str = "", email: str = "") -> str:
    settings = get_settings()
    claims = {"sub": user_id, "role": role, "name": name, "email": email}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def auth_headers(user_id: str, role: str = INTERVIEWEE, name: str = "", email: str = "") -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, role, name, email)}"}


def docx_upload(*lines: str) -> dict:
    return {"resume": ("resume.docx", make_docx(*lines), DOCX_MIME)}


def completed_interview(
    candidate_id: str,
    name: str,
    email: str,
    scores: Sequence[int],
    created_at: Optional[datetime] = None,
    allow_reattempt: bool = False,
) -> Interview:
    created = created_at or datetime.now(timezone.utc)
    questions = fallback_questions()
    for question, score in zip(questions, scores):
        question.answer = "answer"
        question.score = score
    return Interview(
        candidate_id=candidate_id,
        candidate_name=name,
        candidate_email=email,
        resume_text="resume",
        questions=questions,
        current_question_index=6,
        status=InterviewStatus.COMPLETED,
        started_at=created,
        completed_at=created + timedelta(minutes=10),
        created_at=created,
        allow_reattempt=allow_reattempt,
    )


@pytest.fixture
async def redis():
    client = FakeAsyncRedis(server=FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def repository(redis) -> InterviewRepository:
    return InterviewRepository(redis)


@pytest.fixture
def ai_config() -> AIConfig:
    return AIConfig(provider="openai")


@pytest.fixture
def question_client() -> FakeLLMClient:
    # no canned output: the provider falls back to the fixed questions
    return FakeLLMClient()


@pytest.fixture
def scoring_client() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def service(repository, ai_config, question_client, scoring_client) -> InterviewService:
    return InterviewService(
        repository,
        QuestionProvider(ai_config, question_client),
        AnswerScorer(ai_config, scoring_client),
    )


@pytest.fixture
def candidate() -> CurrentUser:
    return CurrentUser(id=new_object_id(), role=INTERVIEWEE, name="Token Name", email="token@example.com")


@pytest.fixture
def interviewer() -> CurrentUser:
    return CurrentUser(id=new_object_id(), role=INTERVIEWER, name="Reviewer", email="reviewer@example.com")


@pytest.fixture
def app(redis, ai_config, question_client, scoring_client):
    fastapi_app.dependency_overrides[get_redis] = lambda: redis
    fastapi_app.dependency_overrides[get_question_provider] = lambda: QuestionProvider(ai_config, question_client)
    fastapi_app.dependency_overrides[get_answer_scorer] = lambda: AnswerScorer(ai_config, scoring_client)
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http


@pytest.fixture
def candidate_headers(candidate) -> dict:
    return auth_headers(candidate.id, INTERVIEWEE, candidate.name, candidate.email)


@pytest.fixture
def interviewer_headers(interviewer) -> dict:
    return auth_headers(interviewer.id, INTERVIEWER, interviewer.name, interviewer.email)
