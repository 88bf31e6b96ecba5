from pydantic import Field
from typing import Optional

from models.interview import CamelModel

# generous ceiling over the longest per-question limit
MAX_TIME_SPENT_SECONDS = 3600


class UpdateCandidateRequest(CamelModel):
    name: str = Field("", max_length=200, examples=["Jane Doe"])
    email: str = Field("", max_length=320, examples=["jane@example.com"])
    phone: str = Field("", max_length=40, examples=["+1 555-123-4567"])


class SubmitAnswerRequest(CamelModel):
    answer: str = Field("", examples=["Props are read-only inputs to a component..."])
    time_spent: float = Field(0, ge=0, le=MAX_TIME_SPENT_SECONDS, allow_inf_nan=False, examples=[18])
    # optional optimistic check: the index the client believes it is answering
    question_index: Optional[int] = Field(None, ge=0)
