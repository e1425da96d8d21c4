"""Caller-side recommendation flow: validate input, pick the model family, call the client."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Literal

from nearby_advisor.infrastructure.llm.llm_client import RecommendationClientPort

RecommendationMode = Literal["completion", "chat"]

logger = logging.getLogger(__name__)


class EmptyRecommendationInputError(ValueError):
    """Raised when the user submits a blank location or category."""


@dataclass(frozen=True)
class Recommendation:
    """Recommendation text together with the inputs that produced it."""

    category: str
    location: str
    mode: RecommendationMode
    text: str


class RecommendationService:
    """Run one recommendation request against an injected client."""

    def __init__(self, *, client: RecommendationClientPort) -> None:
        self._client = client

    async def recommend(
        self,
        *,
        category: str,
        location: str,
        mode: RecommendationMode = "completion",
        cancel_event: asyncio.Event | None = None,
    ) -> Recommendation:
        """Validate inputs and return the recommendation for the selected mode.

        Client failures (``ConfigError``, ``ProviderError``) propagate unchanged.
        """

        category_value = category.strip()
        location_value = location.strip()
        if not location_value:
            raise EmptyRecommendationInputError("location must not be empty")
        if not category_value:
            raise EmptyRecommendationInputError("category must not be empty")

        logger.info("recommendation_requested mode=%s category=%s", mode, category_value)
        if mode == "chat":
            text = await self._client.request_chat_completion(
                category_value,
                location_value,
                cancel_event=cancel_event,
            )
        else:
            text = await self._client.request_completion(
                category_value,
                location_value,
                cancel_event=cancel_event,
            )

        return Recommendation(
            category=category_value,
            location=location_value,
            mode=mode,
            text=text,
        )
