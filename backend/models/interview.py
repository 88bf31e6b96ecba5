# ========================================
# models/interview.py - Interview document models
# ========================================

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional
from datetime import datetime, timezone
from enum import Enum

from utils.ids import new_object_id


QUESTIONS_PER_INTERVIEW = 6
MAX_QUESTION_SCORE = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DifficultyLevel(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# seconds allowed per question
TIME_LIMITS: Dict[DifficultyLevel, int] = {
    DifficultyLevel.EASY: 20,
    DifficultyLevel.MEDIUM: 60,
    DifficultyLevel.HARD: 120,
}

# position -> difficulty, fixed for every interview
DIFFICULTY_LAYOUT = (
    DifficultyLevel.EASY,
    DifficultyLevel.EASY,
    DifficultyLevel.MEDIUM,
    DifficultyLevel.MEDIUM,
    DifficultyLevel.HARD,
    DifficultyLevel.HARD,
)


class InterviewStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Question(CamelModel):
    question: str
    difficulty: DifficultyLevel
    time_limit: int
    answer: str = ""
    time_spent: int = 0
    score: int = Field(0, ge=0, le=MAX_QUESTION_SCORE)

    @classmethod
    def for_position(cls, position: int, text: str) -> "Question":
        difficulty = DIFFICULTY_LAYOUT[position]
        return cls(question=text, difficulty=difficulty, time_limit=TIME_LIMITS[difficulty])


class CandidateInfo(CamelModel):
    name: str = ""
    email: str = ""
    phone: str = ""

    def missing_fields(self) -> Dict[str, bool]:
        return {
            "name": not self.name,
            "email": not self.email,
            "phone": not self.phone,
        }


class Interview(CamelModel):
    id: str = Field(default_factory=new_object_id, alias="_id")
    candidate_id: str
    candidate_name: str = ""
    candidate_email: str = ""
    candidate_phone: str = ""
    resume_text: str = ""
    questions: List[Question] = Field(default_factory=list)
    current_question_index: int = Field(0, ge=0, le=QUESTIONS_PER_INTERVIEW)
    status: InterviewStatus = InterviewStatus.PENDING
    ai_summary: str = ""
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    allow_reattempt: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @computed_field(alias="totalScore")
    @property
    def total_score(self) -> int:
        return sum(q.score for q in self.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    def score_by_difficulty(self) -> Dict[DifficultyLevel, int]:
        totals = {level: 0 for level in DifficultyLevel}
        for q in self.questions:
            totals[q.difficulty] += q.score
        return totals

    def to_public(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    def completion_summary(self) -> dict:
        """The slice of a completed interview attached to a rejected upload."""
        return {
            "_id": self.id,
            "totalScore": self.total_score,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }
