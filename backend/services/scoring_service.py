# services/scoring_service.py
import math
from typing import Any, Optional, Union

from pydantic import BaseModel

from config import AIConfig
from llm_interface.base import LLMClient
from llm_interface.parsing import extract_json
from models.interview import MAX_QUESTION_SCORE, DifficultyLevel
from utils.errors import AIUnavailableError
from utils.logger import get_logger

logger = get_logger("ScoringService")

RESUME_HINT_CHARS = 600

SYSTEM_PROMPT = (
    "You are an interview evaluator. Score answers 0-10 (integer). Consider technical "
    "accuracy, completeness, clarity, and relevance; higher expectations for hard "
    "questions. Return ONLY JSON."
)

KEYWORDS = (
    "react", "component", "hook", "state", "props", "node", "express", "api",
    "database", "async", "await", "promise", "mongodb", "performance", "scalability",
)

DIFFICULTY_ADJUSTMENT = {
    DifficultyLevel.EASY: 0.0,
    DifficultyLevel.MEDIUM: 0.5,
    DifficultyLevel.HARD: 1.0,
}


class ScoreResult(BaseModel):
    score: int
    rationale: str = ""


def clamp_score(value: float) -> int:
    # round half up, not Python's banker's rounding
    return max(0, min(MAX_QUESTION_SCORE, math.floor(value + 0.5)))


def _length_bonus(answer: str) -> int:
    length = len(answer)
    if length > 400:
        return 3
    if length > 200:
        return 2
    if length > 80:
        return 1
    return 0


def heuristic_score(answer: Optional[str], difficulty: Union[DifficultyLevel, str]) -> ScoreResult:
    answer = answer or ""
    lowered = answer.lower()
    matched = sum(1 for k in KEYWORDS if k in lowered)
    keyword_bonus = min(3, matched // 3)
    length_bonus = _length_bonus(answer)
    adjustment = DIFFICULTY_ADJUSTMENT.get(DifficultyLevel(difficulty), 0.0)

    score = clamp_score(5 + length_bonus + keyword_bonus + adjustment)
    return ScoreResult(
        score=score,
        rationale=f"Heuristic score: length bonus {length_bonus}, keyword bonus {keyword_bonus}.",
    )


def _has_numeric_score(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    score = value.get("score")
    return isinstance(score, (int, float)) and not isinstance(score, bool) and math.isfinite(score)


def parse_score(text: str) -> Optional[ScoreResult]:
    data = extract_json(text, accept=_has_numeric_score)
    if data is None:
        return None
    rationale = data.get("rationale") or ""
    return ScoreResult(score=clamp_score(data["score"]), rationale=str(rationale))


class AnswerScorer:
    def __init__(self, config: AIConfig, client: Optional[LLMClient]):
        self.config = config
        self.client = client

    def _user_prompt(self, question: str, answer: str, difficulty: str, resume_text: Optional[str]) -> str:
        resume_hint = f"\nResume excerpt: {resume_text[:RESUME_HINT_CHARS]}" if resume_text else ""
        return (
            f"Question ({difficulty}): {question}{resume_hint}\n"
            f"Candidate Answer: {answer}\n"
            'Return JSON only: {"score": integer 0-10, "rationale": string (<= 200 chars)}'
        )

    async def score(
        self,
        question: str,
        answer: Optional[str],
        difficulty: Union[DifficultyLevel, str],
        resume_text: Optional[str] = None,
    ) -> ScoreResult:
        answer = answer or ""
        level = DifficultyLevel(difficulty)
        require_ai = self.config.require_ai
        try:
            if self.client is not None:
                result = await self.client.generate(
                    SYSTEM_PROMPT,
                    self._user_prompt(question, answer, level.value, resume_text),
                    temperature=self.config.scoring_temperature,
                    parse=parse_score,
                )
                if result is not None:
                    logger.info(f"[AI] Answer scored via {self.client.name}: {result.score}")
                    return result
                if require_ai:
                    raise AIUnavailableError("AI did not return a usable score")
            elif require_ai:
                raise AIUnavailableError("AI is required but not configured")
        except AIUnavailableError:
            raise
        except Exception as e:
            if require_ai:
                logger.error(f"[AI] Scoring failed, REQUIRE_AI=true. Error: {e}", exc_info=True)
                raise AIUnavailableError(f"Answer scoring failed: {e}") from e
            logger.warning(f"[AI] Scoring failed, using heuristic: {e}")

        return heuristic_score(answer, level)
