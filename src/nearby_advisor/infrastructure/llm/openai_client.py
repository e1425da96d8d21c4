"""OpenAI completion and chat-completion adapter producing recommendation text."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Protocol, TypeVar
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from pydantic import BaseModel, ValidationError

from nearby_advisor.application.dto.provider_models import (
    ChatCompletionResponsePayload,
    CompletionResponsePayload,
    ProviderErrorPayload,
)
from nearby_advisor.domain.choice_reduction import DEFAULT_TRIM_CHARS, reduce_choices
from nearby_advisor.domain.recommendation_prompt import (
    RecommendationQuery,
    render_recommendation_prompt,
)

DEFAULT_BASE_URL = "https://api.openai.com"
DEFAULT_COMPLETION_MODEL = "gpt-3.5-turbo-instruct"
DEFAULT_CHAT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 256
DEFAULT_TIMEOUT_SECONDS = 60.0

_COMPLETIONS_PATH = "/v1/completions"
_CHAT_COMPLETIONS_PATH = "/v1/chat/completions"

logger = logging.getLogger(__name__)

PayloadModel = TypeVar("PayloadModel", bound=BaseModel)


class ConfigError(RuntimeError):
    """Raised when the client is missing or given invalid configuration."""


class ProviderError(RuntimeError):
    """Raised for transport, HTTP status, or response-shape failures."""

    def __init__(self, operation: str, detail: str, *, status_code: int | None = None) -> None:
        self.operation = operation
        self.detail = detail
        self.status_code = status_code
        if status_code is None:
            message = f"{operation} failed: {detail}"
        else:
            message = f"{operation} failed with status {status_code}: {detail}"
        super().__init__(message)


class RequestCancelledError(ProviderError):
    """Raised when the caller's cancel event fires before the response arrives."""


@dataclass(frozen=True)
class OpenAiHttpResponse:
    """Normalized HTTP response data returned by OpenAI transports."""

    status_code: int
    body_bytes: bytes


class OpenAiHttpTransportPort(Protocol):
    """Transport protocol used by the completion client."""

    async def request(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
        cancel_event: asyncio.Event | None = None,
    ) -> OpenAiHttpResponse:
        """Execute one HTTP request and return normalized response data."""


class UrllibOpenAiHttpTransport:
    """urllib-based async transport implementation for OpenAI HTTP calls."""

    async def request(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
        cancel_event: asyncio.Event | None = None,
    ) -> OpenAiHttpResponse:
        """Execute HTTP request in a worker thread, giving up early if cancelled."""

        request_task = asyncio.ensure_future(
            asyncio.to_thread(
                self._request_sync,
                method=method,
                url=url,
                headers=headers,
                body=body,
                timeout_seconds=timeout_seconds,
            )
        )
        if cancel_event is None:
            return await request_task

        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, cancel_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancel_task.cancel()
            # The worker thread cannot be interrupted; its result is discarded.
            if not request_task.done():
                request_task.cancel()

        if request_task in done:
            return request_task.result()
        raise RequestCancelledError("http_request", "request cancelled by caller")

    def _request_sync(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
    ) -> OpenAiHttpResponse:
        request = Request(url=url, data=body, headers=headers, method=method)
        try:
            with urlopen(request, timeout=timeout_seconds) as response:
                status_code = int(response.getcode())
                payload = response.read()
                return OpenAiHttpResponse(status_code=status_code, body_bytes=payload)
        except HTTPError as error:
            payload = error.read()
            return OpenAiHttpResponse(status_code=int(error.code), body_bytes=payload)
        except (URLError, TimeoutError) as error:
            raise ProviderError(
                "http_request",
                f"transport connection failure: {error}",
            ) from error


@dataclass(frozen=True)
class ClientConfig:
    """Immutable credential and host configuration for one client."""

    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self) -> None:
        if not self.api_key.strip():
            raise ConfigError("api_key must be a non-empty string")

    @classmethod
    def create(cls, api_key: str | None, endpoint: str | None = None) -> ClientConfig:
        """Validate the key and resolve an optional endpoint override to a base URL."""

        api_key_value = (api_key or "").strip()
        if not api_key_value:
            raise ConfigError("api_key must be a non-empty string")
        return cls(api_key=api_key_value, base_url=_normalize_endpoint(endpoint))


class CompletionClient:
    """Recommendation client over OpenAI `/v1/completions` and `/v1/chat/completions`."""

    def __init__(
        self,
        *,
        config: ClientConfig | None = None,
        completion_model: str = DEFAULT_COMPLETION_MODEL,
        chat_model: str = DEFAULT_CHAT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float | None = None,
        trim_chars: str = DEFAULT_TRIM_CHARS,
        transport: OpenAiHttpTransportPort | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        completion_model_value = completion_model.strip()
        chat_model_value = chat_model.strip()
        if not completion_model_value:
            raise ValueError("completion_model must be a non-empty string")
        if not chat_model_value:
            raise ValueError("chat_model must be a non-empty string")
        if max_tokens <= 0:
            raise ValueError("max_tokens must be greater than zero")
        if temperature is not None and not (0.0 <= temperature <= 2.0):
            raise ValueError("temperature must be between 0.0 and 2.0")

        self._config = config
        self._completion_model = completion_model_value
        self._chat_model = chat_model_value
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._trim_chars = trim_chars
        self._transport = transport or UrllibOpenAiHttpTransport()
        self._timeout_seconds = timeout_seconds

    def initialize(self, api_key: str, endpoint: str | None = None) -> None:
        """Configure credential and host once; performs no network call."""

        if self._config is not None:
            raise ConfigError("client is already initialized")
        self._config = ClientConfig.create(api_key, endpoint)
        logger.info("completion_client_initialized base_url=%s", self._config.base_url)

    @property
    def is_initialized(self) -> bool:
        return self._config is not None

    @property
    def base_url(self) -> str:
        """Return the host requests are sent to."""

        return self._require_config().base_url

    @property
    def completion_model_name(self) -> str:
        return self._completion_model

    @property
    def chat_model_name(self) -> str:
        return self._chat_model

    async def request_completion(
        self,
        category: str,
        location: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Ask the legacy completion model for a recommendation and join all choices."""

        config = self._require_config()
        payload: dict[str, object] = {
            "model": self._completion_model,
            "prompt": _render_prompt(category=category, location=location),
            "max_tokens": self._max_tokens,
        }
        if self._temperature is not None:
            payload["temperature"] = self._temperature

        parsed = await self._post_and_parse(
            config=config,
            operation="completions",
            path=_COMPLETIONS_PATH,
            payload=payload,
            response_model=CompletionResponsePayload,
            cancel_event=cancel_event,
        )
        return self._reduce(operation="completions", choices=parsed.choice_texts())

    async def request_chat_completion(
        self,
        category: str,
        location: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Ask the chat model with one stateless user message for a single choice."""

        config = self._require_config()
        payload: dict[str, object] = {
            "model": self._chat_model,
            "messages": [
                {"role": "user", "content": _render_prompt(category=category, location=location)},
            ],
            "n": 1,
        }
        if self._temperature is not None:
            payload["temperature"] = self._temperature

        parsed = await self._post_and_parse(
            config=config,
            operation="chat_completions",
            path=_CHAT_COMPLETIONS_PATH,
            payload=payload,
            response_model=ChatCompletionResponsePayload,
            cancel_event=cancel_event,
        )
        return self._reduce(operation="chat_completions", choices=parsed.choice_texts())

    def _require_config(self) -> ClientConfig:
        if self._config is None:
            raise ConfigError("client must be initialized with an api key before use")
        return self._config

    def _reduce(self, *, operation: str, choices: list[str]) -> str:
        if not choices:
            raise ProviderError(operation, "response contained no choices")
        text = reduce_choices(choices, trim_chars=self._trim_chars)
        if not text.strip():
            raise ProviderError(operation, "response choices contained no text")
        logger.info("completion_request_finished operation=%s choices=%s", operation, len(choices))
        return text

    async def _post_and_parse(
        self,
        *,
        config: ClientConfig,
        operation: str,
        path: str,
        payload: dict[str, object],
        response_model: type[PayloadModel],
        cancel_event: asyncio.Event | None,
    ) -> PayloadModel:
        logger.info(
            "completion_request_started operation=%s model=%s",
            operation,
            payload["model"],
        )
        response = await self._post(
            config=config,
            operation=operation,
            path=path,
            body=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            cancel_event=cancel_event,
        )
        try:
            return response_model.model_validate_json(response.body_bytes)
        except ValidationError as error:
            raise ProviderError(operation, "response payload is not a valid JSON object") from error

    async def _post(
        self,
        *,
        config: ClientConfig,
        operation: str,
        path: str,
        body: bytes,
        cancel_event: asyncio.Event | None,
    ) -> OpenAiHttpResponse:
        headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }
        url = f"{config.base_url}{path}"
        try:
            response = await self._transport.request(
                method="POST",
                url=url,
                headers=headers,
                body=body,
                timeout_seconds=self._timeout_seconds,
                cancel_event=cancel_event,
            )
        except RequestCancelledError as error:
            raise RequestCancelledError(operation, error.detail) from error
        except ProviderError as error:
            raise ProviderError(operation, error.detail) from error
        except Exception as error:  # noqa: BLE001
            raise ProviderError(operation, f"transport failure: {error}") from error

        if response.status_code < 200 or response.status_code >= 300:
            logger.warning(
                "completion_request_rejected operation=%s status_code=%s",
                operation,
                response.status_code,
            )
            raise ProviderError(
                operation,
                _describe_error_payload(response.body_bytes),
                status_code=response.status_code,
            )
        return response


def _render_prompt(*, category: str, location: str) -> str:
    return render_recommendation_prompt(
        RecommendationQuery(subject_category=category, location_text=location)
    )


def _normalize_endpoint(endpoint: str | None) -> str:
    if endpoint is None or not endpoint.strip():
        return DEFAULT_BASE_URL

    value = endpoint.strip().rstrip("/")
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigError(f"endpoint must be an absolute http(s) URL, got {endpoint!r}")
    # Request paths already carry the /v1 prefix.
    if value.endswith("/v1"):
        value = value[: -len("/v1")]
    return value


def _describe_error_payload(payload: bytes) -> str:
    if not payload:
        return "empty response body"
    try:
        envelope = ProviderErrorPayload.model_validate_json(payload)
    except ValidationError:
        envelope = None
    if envelope is not None and envelope.error is not None and envelope.error.message:
        return envelope.error.message
    try:
        decoded = payload.decode("utf-8")
    except UnicodeDecodeError:
        return "<binary>"
    return decoded[:200] or "empty response body"
