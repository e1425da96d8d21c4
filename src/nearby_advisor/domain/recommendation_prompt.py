"""Prompt rendering for nearby-place recommendation requests."""

from __future__ import annotations

from dataclasses import dataclass

RECOMMENDATION_PROMPT_TEMPLATE = "What is a recommended {category} near {location}"


@dataclass(frozen=True)
class RecommendationQuery:
    """Free-form parameters interpolated into the recommendation prompt."""

    subject_category: str
    location_text: str


def render_recommendation_prompt(
    query: RecommendationQuery,
    *,
    template: str = RECOMMENDATION_PROMPT_TEMPLATE,
) -> str:
    """Render the natural-language prompt sent to the completion provider."""

    return template.format(category=query.subject_category, location=query.location_text)
