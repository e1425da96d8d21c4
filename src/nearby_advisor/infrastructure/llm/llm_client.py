"""Recommendation client protocol and a static test adapter."""

from __future__ import annotations

import asyncio
from typing import Protocol


class RecommendationClientPort(Protocol):
    """Protocol for clients answering recommendation prompts."""

    async def request_completion(
        self,
        category: str,
        location: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Return recommendation text from the single-turn completion model."""

    async def request_chat_completion(
        self,
        category: str,
        location: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Return recommendation text from the chat-completion model."""


class StaticRecommendationClient:
    """Test-friendly static client returning fixed response text."""

    def __init__(self, response_text: str) -> None:
        self._response_text = response_text
        self.calls: list[tuple[str, str, str]] = []

    async def request_completion(
        self,
        category: str,
        location: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        self.calls.append(("completion", category, location))
        return self._response_text

    async def request_chat_completion(
        self,
        category: str,
        location: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        self.calls.append(("chat", category, location))
        return self._response_text
