"""FastAPI router exposing recommendation requests."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from nearby_advisor.application.dto.recommendation_models import (
    RecommendationRequestPayload,
    RecommendationResponse,
)
from nearby_advisor.application.services.recommendation_service import (
    EmptyRecommendationInputError,
    RecommendationService,
)
from nearby_advisor.infrastructure.llm.openai_client import ConfigError, ProviderError

logger = logging.getLogger(__name__)


def build_recommendation_router(*, recommendation_service: RecommendationService) -> APIRouter:
    """Build router mapping client failures to user-visible HTTP errors."""

    router = APIRouter(tags=["recommendations"])

    @router.post("/recommendations", response_model=RecommendationResponse)
    async def create_recommendation(
        payload: RecommendationRequestPayload,
    ) -> RecommendationResponse:
        try:
            result = await recommendation_service.recommend(
                category=payload.category,
                location=payload.location,
                mode=payload.mode,
            )
        except EmptyRecommendationInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except ConfigError as exc:
            logger.error("recommendation_unavailable reason=%s", exc)
            raise HTTPException(
                status_code=503,
                detail=f"recommendation service is not configured: {exc}",
            ) from exc
        except ProviderError as exc:
            logger.warning(
                "recommendation_provider_failed operation=%s status_code=%s",
                exc.operation,
                exc.status_code,
            )
            raise HTTPException(
                status_code=502,
                detail=f"recommendation provider error: {exc}",
            ) from exc

        return RecommendationResponse(
            category=result.category,
            location=result.location,
            mode=result.mode,
            text=result.text,
        )

    return router
