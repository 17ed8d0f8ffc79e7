from abc import ABC, abstractmethod
from typing import Literal, Optional, TypedDict


class ProviderResult(TypedDict):
    """Outcome of one completion call. Providers return this instead of raising."""

    text: Optional[str]
    provider: str
    model: str
    status: Literal["success", "failed"]
    error: Optional[str]


class BaseProvider(ABC):
    """Abstract base class for text-completion providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The name of this provider (e.g. 'openai')."""
        ...

    @abstractmethod
    async def chat(self, messages: list[dict], model: str | None = None) -> ProviderResult:
        """
        Send a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: Optional model identifier. Provider uses its default if None.

        Returns:
            ProviderResult with keys:
                - text: str | None  — the generated text, trimmed
                - provider: str     — provider name
                - model: str        — model used
                - status: "success" | "failed"
                - error: str | None — error message on failure
        """
        ...

    def _result(self, model: str, text: str | None = None, error: str | None = None) -> ProviderResult:
        return {
            "text": text,
            "provider": self.name,
            "model": model,
            "status": "failed" if error else "success",
            "error": error,
        }
