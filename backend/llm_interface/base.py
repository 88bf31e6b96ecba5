from abc import ABC, abstractmethod
from typing import Any, Callable, Optional


class LLMClient(ABC):
    """A configured provider able to answer one system/user prompt pair."""

    name: str = "llm"

    @abstractmethod
    async def generate(
        self,
        system: str,
        user: str,
        *,
        temperature: float,
        parse: Callable[[str], Optional[Any]],
    ) -> Optional[Any]:
        """
        Ask the provider and run `parse` over the returned text.

        Returns the first parsed value that is not None, or None when the
        provider answered but nothing usable came back. Provider failures raise.
        """
