# backend/llm_interface/gemini.py
from typing import Any, Callable, List, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from llm_interface.base import LLMClient
from utils.logger import get_logger

log = get_logger(__name__)


def _is_model_not_found(exc: Exception) -> bool:
    if isinstance(exc, google_exceptions.NotFound):
        return True
    return getattr(exc, "code", None) == 404 or getattr(exc, "status", None) == 404


def _response_text(resp: Any) -> Optional[str]:
    try:
        return resp.text
    except ValueError:
        # blocked or empty candidates; `text` raises instead of returning ""
        finish = None
        candidates = getattr(resp, "candidates", None) or []
        if candidates:
            finish = getattr(candidates[0], "finish_reason", None)
        log.warning(f"Gemini returned no text. candidates={len(candidates)} finish_reason={finish}")
        return None


class GeminiClient(LLMClient):
    """
    Walks the candidate model ids in order. Unknown models are skipped; the
    first model whose answer parses wins. Any other provider error propagates.
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        models: List[str],
        model_factory: Optional[Callable[[str], Any]] = None,
    ):
        if model_factory is None:
            genai.configure(api_key=api_key)
            model_factory = genai.GenerativeModel
        self.models = models
        self.model_factory = model_factory

    async def generate(
        self,
        system: str,
        user: str,
        *,
        temperature: float,
        parse: Callable[[str], Optional[Any]],
    ) -> Optional[Any]:
        prompt = f"{system}\n{user}"
        last_err: Optional[Exception] = None
        for model_name in self.models:
            try:
                model = self.model_factory(model_name)
                resp = await model.generate_content_async(
                    prompt,
                    generation_config={"temperature": temperature},
                )
            except Exception as exc:
                if _is_model_not_found(exc):
                    log.warning(f"[AI] Gemini model not found: {model_name}")
                    last_err = exc
                    continue
                raise

            text = _response_text(resp)
            parsed = parse(text) if text else None
            if parsed is not None:
                log.info(f"[AI] Gemini model used: {model_name}")
                return parsed
            log.debug(f"Gemini model {model_name} gave an unusable answer; trying next")

        if last_err is not None:
            raise last_err
        return None
