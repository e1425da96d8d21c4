"""recommend-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from nearby_advisor.application.dto.recommendation_models import HealthResponse
from nearby_advisor.application.services.recommendation_service import RecommendationService
from nearby_advisor.config.settings import Settings, load_settings
from nearby_advisor.infrastructure.http.recommendation_router import (
    build_recommendation_router,
)
from nearby_advisor.infrastructure.llm.openai_client import (
    CompletionClient,
    ConfigError,
    OpenAiHttpTransportPort,
)
from nearby_advisor.infrastructure.logging import configure_logging

RECOMMEND_API_HOST = "0.0.0.0"
RECOMMEND_API_PORT = 8000
logger = logging.getLogger(__name__)


def build_completion_client(
    settings: Settings,
    *,
    transport: OpenAiHttpTransportPort | None = None,
) -> CompletionClient:
    """Build an initialized completion client; raises ConfigError without an api key."""

    client = _new_completion_client(settings, transport=transport)
    client.initialize(settings.openai_api_key or "", _endpoint_from_settings(settings))
    return client


def create_app(
    *,
    settings: Settings | None = None,
    recommendation_service: RecommendationService | None = None,
) -> FastAPI:
    """Create FastAPI app serving recommendation requests."""

    if recommendation_service is None:
        if settings is None:
            settings = load_settings()
        configure_logging(level=settings.log_level)
        client = _new_completion_client(settings)
        try:
            client.initialize(settings.openai_api_key or "", _endpoint_from_settings(settings))
        except ConfigError as exc:
            # Requests fail with 503 until the process is restarted with a valid key.
            logger.warning("recommend_api_client_unconfigured reason=%s", exc)
        recommendation_service = RecommendationService(client=client)

    app = FastAPI()
    app.include_router(
        build_recommendation_router(recommendation_service=recommendation_service)
    )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    return app


def _new_completion_client(
    settings: Settings,
    *,
    transport: OpenAiHttpTransportPort | None = None,
) -> CompletionClient:
    return CompletionClient(
        completion_model=settings.openai_completion_model,
        chat_model=settings.openai_chat_model,
        max_tokens=settings.openai_max_tokens,
        temperature=settings.openai_temperature,
        trim_chars=settings.recommendation_trim_chars,
        transport=transport,
        timeout_seconds=settings.openai_timeout_seconds,
    )


def _endpoint_from_settings(settings: Settings) -> str | None:
    if settings.openai_base_url is None:
        return None
    return str(settings.openai_base_url)


def run_asgi_server(*, host: str = RECOMMEND_API_HOST, port: int = RECOMMEND_API_PORT) -> None:
    """Run recommend-api as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.recommend_api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run recommend-api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
