"""
Chat completion proxy

Forwards a conversation to the OpenAI chat-completions endpoint so the API
key never leaves the server. The assistant's reply is returned as opaque
text; parsing it is the caller's business.
"""
from typing import Any, List, Optional

import httpx

from kiosk_backend.config import Settings
from kiosk_backend.errors import ConfigurationError, ExternalServiceError, ValidationError
from kiosk_backend.models.chat import ChatExchange, CompletionResult
from kiosk_backend.utils.http import request_with_retry
from kiosk_backend.utils.logger import get_logger
from kiosk_backend.utils.shape import dig

logger = get_logger(__name__)

GENERIC_FAILURE = "OpenAI proxy failed"


def provider_error_message(body: Any) -> Optional[str]:
    """Message of an embedded ``error`` object, if the body carries one"""
    if not isinstance(body, dict) or not body.get("error"):
        return None
    error = body["error"]
    if isinstance(error, dict):
        return error.get("message") or GENERIC_FAILURE
    return str(error)


def messages_preview(messages: List[Any]) -> str:
    """Roles of a conversation, for log lines that must not carry content"""
    return ",".join(
        str(m.get("role", "?")) if isinstance(m, dict) else "?" for m in messages
    )


class CompletionProxy:
    """Stateless relay to the completion provider"""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = settings.openai_api_key
        self.url = f"{settings.openai_base_url.rstrip('/')}/v1/chat/completions"
        self.default_model = settings.llm_default_model
        self.default_temperature = settings.llm_default_temperature
        self.timeout = settings.http_timeout
        self.max_retries = settings.http_max_retries
        self.transport = transport

    def build_exchange(
        self,
        messages: Any,
        model: Optional[str] = None,
        temperature: Optional[float] = None
    ) -> ChatExchange:
        """
        Validate caller input before anything leaves the process

        Raises:
            ValidationError: messages is not a non-empty list
        """
        if not isinstance(messages, list) or not messages:
            raise ValidationError("messages[] is required")
        try:
            return ChatExchange(
                messages=messages,
                model=model or self.default_model,
                temperature=self.default_temperature if temperature is None else temperature,
            )
        except ValueError as e:
            raise ValidationError("Invalid chat request", detail=str(e)) from e

    async def complete(
        self,
        messages: Any,
        model: Optional[str] = None,
        temperature: Optional[float] = None
    ) -> CompletionResult:
        """
        Send the conversation and return the first choice's content

        Args:
            messages: Ordered role-tagged messages, forwarded verbatim
            model: Provider model id (defaults from settings)
            temperature: Sampling temperature (defaults from settings)

        Returns:
            CompletionResult with the raw assistant text

        Raises:
            ValidationError: Malformed messages, no call issued
            ConfigurationError: Provider credential missing
            ExternalServiceError: Provider failure or embedded error object
        """
        exchange = self.build_exchange(messages, model, temperature)
        if not self.api_key:
            raise ConfigurationError("OPENAI_API_KEY missing in .env")

        body = await self._post(exchange)

        choices = body.get("choices") if isinstance(body, dict) else None
        content = None
        if isinstance(choices, list) and choices:
            content = dig(choices[0], ("message", "content"))
        if content is None:
            content = ""
        elif not isinstance(content, str):
            content = str(content)

        logger.info(
            f"Completion from {exchange.model} for [{messages_preview(exchange.messages)}]: "
            f"{len(content)} chars"
        )
        return CompletionResult(content=content)

    async def _post(self, exchange: ChatExchange) -> Any:
        payload = {
            "model": exchange.model,
            "temperature": exchange.temperature,
            "messages": exchange.messages,
        }
        try:
            response = await request_with_retry(
                "POST",
                self.url,
                label="OpenAI POST /v1/chat/completions",
                timeout=self.timeout,
                max_retries=self.max_retries,
                transport=self.transport,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
            )
        except httpx.HTTPError as e:
            raise ExternalServiceError(GENERIC_FAILURE, detail=str(e)) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ExternalServiceError(GENERIC_FAILURE, detail=response.text) from e

        embedded = provider_error_message(body)
        if not response.is_success or embedded:
            message = embedded or GENERIC_FAILURE
            logger.error(f"Completion provider error (HTTP {response.status_code}): {message}")
            raise ExternalServiceError(message, detail=body)
        return body
