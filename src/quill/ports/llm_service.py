"""LLM service interface."""

from typing import Protocol


class LLMError(Exception):
    """Raised when the generation backend fails."""

    pass


class LLMService(Protocol):
    """Interface for LLM text generation. Failures raise LLMError."""

    def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Generate text from a prompt. Returns complete response."""
        ...
