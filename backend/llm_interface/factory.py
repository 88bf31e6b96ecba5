from typing import Optional

from groq import AsyncGroq
from openai import AsyncOpenAI

from config import AIConfig
from llm_interface.base import LLMClient
from llm_interface.gemini import GeminiClient
from llm_interface.openai_chat import ChatCompletionsClient
from utils.logger import get_logger

log = get_logger(__name__)


def build_llm_client(config: AIConfig) -> Optional[LLMClient]:
    """Return the client for the configured provider, or None if it has no key."""
    provider = config.provider
    if provider == "openai" and config.openai_api_key:
        sdk = AsyncOpenAI(api_key=config.openai_api_key, base_url=config.openai_base_url)
        return ChatCompletionsClient(sdk, config.openai_model, name="openai")
    if provider == "groq" and config.groq_api_key:
        return ChatCompletionsClient(AsyncGroq(api_key=config.groq_api_key), config.groq_model, name="groq")
    if provider == "gemini" and config.gemini_api_key:
        return GeminiClient(config.gemini_api_key, config.gemini_candidates())

    log.warning(f"AI provider '{provider}' is not configured; heuristic fallbacks only")
    return None
