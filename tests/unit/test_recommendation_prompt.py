from __future__ import annotations

from nearby_advisor.domain.recommendation_prompt import (
    RECOMMENDATION_PROMPT_TEMPLATE,
    RecommendationQuery,
    render_recommendation_prompt,
)


def test_render_recommendation_prompt_uses_fixed_template() -> None:
    query = RecommendationQuery(subject_category="restaurant", location_text="Lisbon")

    assert render_recommendation_prompt(query) == "What is a recommended restaurant near Lisbon"


def test_render_recommendation_prompt_keeps_free_form_text_verbatim() -> None:
    query = RecommendationQuery(
        subject_category="vegan bakery",
        location_text="Rua Augusta 24, {Baixa}",
    )

    prompt = render_recommendation_prompt(query)

    assert prompt == "What is a recommended vegan bakery near Rua Augusta 24, {Baixa}"


def test_render_recommendation_prompt_accepts_custom_template() -> None:
    query = RecommendationQuery(subject_category="hotel", location_text="Kyoto")

    prompt = render_recommendation_prompt(query, template="Suggest a {category} in {location}.")

    assert prompt == "Suggest a hotel in Kyoto."
    assert "{category}" in RECOMMENDATION_PROMPT_TEMPLATE
