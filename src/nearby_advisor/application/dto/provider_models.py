"""Pydantic models for OpenAI-style completion and chat-completion payloads.

Unknown fields are ignored so additive provider changes do not break parsing.
Choices that carry no usable text are dropped by the ``choice_texts``
helpers; callers decide whether an empty result is an error.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProviderModel(BaseModel):
    """Base model tolerating unknown provider fields."""

    model_config = ConfigDict(extra="ignore")


class CompletionChoicePayload(ProviderModel):
    index: int | None = None
    text: str | None = None
    finish_reason: str | None = None


class CompletionResponsePayload(ProviderModel):
    """Body of a `/v1/completions` response."""

    id: str | None = None
    model: str | None = None
    choices: list[CompletionChoicePayload] = Field(default_factory=list)

    def choice_texts(self) -> list[str]:
        return [choice.text for choice in self.choices if isinstance(choice.text, str)]


class ChatContentPart(ProviderModel):
    type: str | None = None
    text: str | None = None


class ChatMessagePayload(ProviderModel):
    role: str | None = None
    content: str | list[ChatContentPart] | None = None

    def content_text(self) -> str | None:
        """Return message text, joining text parts when content is segmented."""

        if isinstance(self.content, str):
            return self.content
        if isinstance(self.content, list):
            text_parts = [
                part.text
                for part in self.content
                if part.type == "text" and isinstance(part.text, str)
            ]
            if text_parts:
                return "".join(text_parts)
        return None


class ChatChoicePayload(ProviderModel):
    index: int | None = None
    message: ChatMessagePayload | None = None
    text: str | None = None
    finish_reason: str | None = None

    def choice_text(self) -> str | None:
        if self.message is not None:
            content = self.message.content_text()
            if content is not None:
                return content
        # Some compatible servers return legacy `text` on chat choices.
        return self.text


class ChatCompletionResponsePayload(ProviderModel):
    """Body of a `/v1/chat/completions` response."""

    id: str | None = None
    model: str | None = None
    choices: list[ChatChoicePayload] = Field(default_factory=list)

    def choice_texts(self) -> list[str]:
        texts: list[str] = []
        for choice in self.choices:
            text = choice.choice_text()
            if text is not None:
                texts.append(text)
        return texts


class ProviderErrorBody(ProviderModel):
    message: str | None = None
    type: str | None = None
    code: str | int | None = None


class ProviderErrorPayload(ProviderModel):
    """Error envelope returned by OpenAI-style APIs on non-2xx responses."""

    error: ProviderErrorBody | None = None
