"""Pydantic models describing the Gemini ``generateContent`` payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GeminiBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Part(GeminiBaseModel):
    text: str | None = None


class Content(GeminiBaseModel):
    parts: list[Part] = Field(default_factory=list[Part])
    role: str | None = None


class WebSource(GeminiBaseModel):
    uri: str | None = None
    title: str | None = None


class GroundingChunk(GeminiBaseModel):
    web: WebSource | None = None


class GroundingMetadata(GeminiBaseModel):
    grounding_chunks: list[GroundingChunk] = Field(
        default_factory=list[GroundingChunk], alias="groundingChunks"
    )


class Candidate(GeminiBaseModel):
    content: Content | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")
    grounding_metadata: GroundingMetadata | None = Field(default=None, alias="groundingMetadata")


class PromptFeedback(GeminiBaseModel):
    block_reason: str | None = Field(default=None, alias="blockReason")


class GenerateContentResponse(GeminiBaseModel):
    candidates: list[Candidate] = Field(default_factory=list[Candidate])
    prompt_feedback: PromptFeedback | None = Field(default=None, alias="promptFeedback")

    @property
    def text(self) -> str:
        """Concatenated text of the first candidate's parts."""

        if not self.candidates or self.candidates[0].content is None:
            return ""
        return "".join(part.text or "" for part in self.candidates[0].content.parts)

    @property
    def grounding_chunks(self) -> list[GroundingChunk]:
        if not self.candidates or self.candidates[0].grounding_metadata is None:
            return []
        return self.candidates[0].grounding_metadata.grounding_chunks


class ErrorDetail(GeminiBaseModel):
    code: int | None = None
    message: str = "Unknown Gemini API error"
    status: str | None = None


class ErrorResponse(GeminiBaseModel):
    error: ErrorDetail


__all__ = [
    "Candidate",
    "Content",
    "ErrorDetail",
    "ErrorResponse",
    "GenerateContentResponse",
    "GroundingChunk",
    "GroundingMetadata",
    "Part",
    "PromptFeedback",
    "WebSource",
]
