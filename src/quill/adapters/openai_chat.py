"""OpenAI adapter - chat completions over HTTP."""

import logging

import requests

from quill.config import Config, load_config
from quill.ports.llm_service import LLMError

logger = logging.getLogger(__name__)


class OpenAIChatService:
    """
    OpenAI-compatible chat completions client.

    Implements LLMService protocol.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self.url = f"{self.config.openai_base_url.rstrip('/')}/v1/chat/completions"
        self._session = session or requests.Session()

    def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Generate text from a prompt. Returns complete response."""
        if not self.config.openai_api_key:
            raise LLMError("OPENAI_API_KEY not configured")

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload: dict = {"model": self.config.openai_model, "messages": messages}
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if temperature is not None:
            payload["temperature"] = temperature

        try:
            resp = self._session.post(
                self.url,
                json=payload,
                headers={"Authorization": f"Bearer {self.config.openai_api_key}"},
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"OpenAI request failed: {e}")
            raise LLMError("Request to generation backend failed") from e

        if resp.status_code >= 400:
            logger.error(f"OpenAI returned {resp.status_code}: {resp.text}")
            raise LLMError(f"Generation backend returned HTTP {resp.status_code}")

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMError("Malformed response from generation backend") from e
        if not isinstance(content, str):
            raise LLMError("Malformed response from generation backend")
        return content
