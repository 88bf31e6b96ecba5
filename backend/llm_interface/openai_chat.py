# llm_interface/openai_chat.py
from typing import Any, Callable, Optional

from llm_interface.base import LLMClient
from utils.logger import get_logger

logger = get_logger("ChatCompletions")


class ChatCompletionsClient(LLMClient):
    """
    OpenAI-style chat completions (OpenAI itself, or Groq which exposes the
    same SDK surface). A single attempt per call.
    """

    def __init__(self, client: Any, model: str, name: str = "openai"):
        self.client = client
        self.model = model
        self.name = name

    async def generate(
        self,
        system: str,
        user: str,
        *,
        temperature: float,
        parse: Callable[[str], Optional[Any]],
    ) -> Optional[Any]:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=temperature,
        )
        choice = (completion.choices or [None])[0]
        message = getattr(choice, "message", None) if choice else None
        content = getattr(message, "content", None) if message else None
        if not content:
            logger.warning(f"{self.name} returned an empty completion (model={self.model})")
            return None
        return parse(content)
