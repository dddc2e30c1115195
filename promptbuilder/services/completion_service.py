"""Client for the chat-completion API that writes the code."""

from functools import lru_cache
from typing import Any

import httpx

from promptbuilder.config import Settings, settings
from promptbuilder.core.exceptions import CompletionServiceError
from promptbuilder.utils.logging import get_logger

logger = get_logger("completion_service")

DEFAULT_SYSTEM_PROMPT = (
    "You are an expert full-stack developer and code generator. "
    "Generate clean, production-ready, well-structured code based on user "
    "requirements. Always return valid JSON when requested."
)


class CompletionClient:
    """Async client for a Grok/OpenAI-style ``/chat/completions`` endpoint.

    A shared ``httpx.AsyncClient`` may be injected (tests pass one backed by
    ``httpx.MockTransport``); otherwise a short-lived client is opened for
    each call.
    """

    def __init__(
        self,
        config: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config or settings
        self._http_client = http_client

        if not self.is_configured():
            logger.warning(
                "completion_service.not_configured",
                hint="Set COMPLETION_API_KEY to enable generation",
            )

    def is_configured(self) -> bool:
        """Check whether an API key is available."""
        return bool(self.config.completion_api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.config.completion_api_url.rstrip('/')}/chat/completions"

    def build_payload(
        self,
        prompt: str,
        system_prompt: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> dict[str, Any]:
        """Build the request body for one completion."""
        return {
            "model": model or self.config.completion_model,
            "messages": [
                {"role": "system", "content": system_prompt or DEFAULT_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens or self.config.completion_max_tokens,
            "temperature": (
                temperature if temperature is not None else self.config.completion_temperature
            ),
        }

    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Send a prompt and return the text of the first choice.

        Raises:
            CompletionServiceError: On missing credentials, transport errors,
                timeouts, non-2xx responses or an unexpected response body.
        """
        if not self.is_configured():
            raise CompletionServiceError(
                "COMPLETION_API_KEY is not configured. Add your API key to the "
                ".env file and restart the server."
            )

        payload = self.build_payload(prompt, system_prompt, model, max_tokens, temperature)
        headers = {
            "Authorization": f"Bearer {self.config.completion_api_key}",
            "Content-Type": "application/json",
        }

        logger.info(
            "completion_service.request",
            model=payload["model"],
            prompt_chars=len(prompt),
        )

        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    self.endpoint,
                    json=payload,
                    headers=headers,
                    timeout=self.config.completion_timeout_seconds,
                )
            else:
                timeout = httpx.Timeout(self.config.completion_timeout_seconds)
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            logger.error("completion_service.timeout", error=str(e))
            raise CompletionServiceError(
                f"Completion request timed out after {self.config.completion_timeout_seconds}s"
            ) from e
        except httpx.HTTPError as e:
            logger.error("completion_service.transport_error", error=str(e))
            raise CompletionServiceError(f"Completion request failed: {e}") from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error(
                "completion_service.api_error",
                status_code=response.status_code,
                error=message,
            )
            raise CompletionServiceError(
                f"Completion API request failed: {message}",
                status=response.status_code,
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("completion_service.malformed_response", error=str(e))
            raise CompletionServiceError("Completion API returned an unexpected body") from e

        if not isinstance(content, str):
            raise CompletionServiceError("Completion API returned no text content")

        usage = data.get("usage") or {}
        logger.info(
            "completion_service.response",
            completion_chars=len(content),
            total_tokens=usage.get("total_tokens"),
        )
        return content

    def _error_message(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:500] or f"HTTP {response.status_code}"

        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        return f"HTTP {response.status_code}"


@lru_cache
def get_completion_client() -> CompletionClient:
    """Get the completion client singleton."""
    return CompletionClient()
