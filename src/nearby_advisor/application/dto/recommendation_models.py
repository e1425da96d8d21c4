"""Pydantic models for the recommendation HTTP API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class RecommendationRequestPayload(StrictModel):
    """Body accepted by `POST /recommendations`."""

    category: str = Field(min_length=1)
    location: str
    mode: Literal["completion", "chat"] = "completion"


class RecommendationResponse(StrictModel):
    category: str
    location: str
    mode: Literal["completion", "chat"]
    text: str


class HealthResponse(StrictModel):
    status: Literal["ok"]
