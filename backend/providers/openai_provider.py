import httpx

from config import (
    OPENAI_API_KEY,
    OPENAI_API_URL,
    OPENAI_MODEL,
    OPENAI_MAX_TOKENS,
    OPENAI_TEMPERATURE,
    LLM_TIMEOUT_SECONDS,
)
from errors import ExternalServiceError
from providers.base import BaseProvider, ProviderResult


class OpenAIProvider(BaseProvider):
    """Provider for an OpenAI-compatible chat completions endpoint using httpx."""

    def __init__(
        self,
        api_key: str = OPENAI_API_KEY,
        endpoint: str = OPENAI_API_URL,
        model: str = OPENAI_MODEL,
        max_tokens: int = OPENAI_MAX_TOKENS,
        temperature: float = OPENAI_TEMPERATURE,
        timeout: float = LLM_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.transport = transport

    @property
    def name(self) -> str:
        return "openai"

    def build_body(self, messages: list[dict], model: str) -> dict:
        return {
            "model": model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": messages,
        }

    @staticmethod
    def extract_text(data) -> str:
        """Pull choices[0].message.content out of a completion response."""
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError(f"Malformed completion response: {e!r}")
        if not isinstance(content, str) or not content.strip():
            raise ExternalServiceError("Completion response had no text content")
        return content.strip()

    async def chat(self, messages: list[dict], model: str | None = None) -> ProviderResult:
        used_model = model or self.model
        if not self.api_key:
            return self._result(used_model, error="API key not configured")

        try:
            headers = {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            }
            body = self.build_body(messages, used_model)

            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, headers=headers, json=body)
                response.raise_for_status()
                text = self.extract_text(response.json())

            return self._result(used_model, text=text)
        except httpx.TimeoutException:
            return self._result(used_model, error="Timeout")
        except httpx.HTTPStatusError as e:
            return self._result(used_model, error=f"HTTP {e.response.status_code}")
        except ExternalServiceError as e:
            return self._result(used_model, error=e.message)
        except Exception as e:
            return self._result(used_model, error=str(e) or type(e).__name__)
