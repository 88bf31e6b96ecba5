# services/question_service.py
from typing import Any, List, Optional

from config import AIConfig
from llm_interface.base import LLMClient
from llm_interface.parsing import extract_json
from models.interview import DIFFICULTY_LAYOUT, QUESTIONS_PER_INTERVIEW, Question
from utils.errors import AIUnavailableError
from utils.logger import get_logger

logger = get_logger("QuestionService")

RESUME_EXCERPT_CHARS = 1200

SYSTEM_PROMPT = (
    "You are an interview assistant. Generate 6 concise technical questions for a "
    "Full-Stack (React + Node) role: 2 easy (20s), 2 medium (60s), 2 hard (120s). "
    "Return ONLY valid JSON (no prose). Output must be a JSON array of 6 objects with "
    "fields: question (string), difficulty (one of easy|medium|hard), "
    "timeLimit (number: 20|60|120)."
)

FALLBACK_QUESTIONS = (
    "Explain React components and props.",
    "Difference between let/const/var in JavaScript.",
    "Describe closures in JavaScript with an example.",
    "Explain React hooks compared to class components.",
    "Design a scalable real-time chat architecture with React/Node.",
    "Optimize React app performance for large datasets.",
)


def fallback_questions() -> List[Question]:
    return [Question.for_position(i, text) for i, text in enumerate(FALLBACK_QUESTIONS)]


def _is_question_array(value: Any) -> bool:
    return isinstance(value, list) and len(value) == QUESTIONS_PER_INTERVIEW


def normalize_questions(raw: Any) -> Optional[List[Question]]:
    """
    Map six provider entries onto the fixed easy/medium/hard layout.
    Difficulty and time limit always come from the position, not the provider.
    """
    if not _is_question_array(raw):
        return None
    questions = []
    for position, entry in enumerate(raw):
        text = entry.get("question") if isinstance(entry, dict) else entry
        if not isinstance(text, str) or not text.strip():
            return None
        questions.append(Question.for_position(position, text.strip()))
    return questions


def parse_questions(text: str) -> Optional[List[Question]]:
    return normalize_questions(extract_json(text, accept=_is_question_array))


class QuestionProvider:
    def __init__(self, config: AIConfig, client: Optional[LLMClient]):
        self.config = config
        self.client = client

    def _user_prompt(self, resume_text: Optional[str]) -> str:
        context = f"Resume excerpt: {resume_text[:RESUME_EXCERPT_CHARS]}" if resume_text else ""
        return f"{context}\nGenerate the 6 questions now as JSON only."

    async def generate(self, resume_text: Optional[str] = None) -> List[Question]:
        require_ai = self.config.require_ai
        logger.info(f"[AI] Provider={self.config.provider} requireAI={require_ai}")
        try:
            if self.client is not None:
                questions = await self.client.generate(
                    SYSTEM_PROMPT,
                    self._user_prompt(resume_text),
                    temperature=self.config.question_temperature,
                    parse=parse_questions,
                )
                if questions:
                    logger.info(f"[AI] Questions generated via {self.client.name}")
                    return questions
                if require_ai:
                    raise AIUnavailableError("AI did not return 6 questions")
            elif require_ai:
                raise AIUnavailableError("AI is required but not configured")
        except AIUnavailableError:
            logger.error("[AI] Question generation failed and REQUIRE_AI is set")
            raise
        except Exception as e:
            if require_ai:
                logger.error(f"[AI] Question generation failed, REQUIRE_AI=true. Error: {e}", exc_info=True)
                raise AIUnavailableError(f"Question generation failed: {e}") from e
            logger.warning(f"[AI] Question generation failed, using fallback: {e}")

        logger.warning("[AI] Using fallback questions")
        return fallback_questions()
