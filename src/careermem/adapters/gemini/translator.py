"""Translate Gemini responses into oracle replies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from careermem.domain.model import GroundingCitation
from careermem.domain.oracle import OracleReply

if TYPE_CHECKING:
    from .schema import GenerateContentResponse, GroundingChunk


def parse_oracle_reply(response: GenerateContentResponse) -> OracleReply:
    return OracleReply(
        text=response.text.strip(),
        citations=parse_citations(response.grounding_chunks),
    )


def parse_citations(chunks: list[GroundingChunk]) -> tuple[GroundingCitation, ...]:
    """Web chunks with a uri become citations; duplicates by uri are dropped."""

    citations: list[GroundingCitation] = []
    seen: set[str] = set()
    for chunk in chunks:
        if chunk.web is None or not chunk.web.uri or chunk.web.uri in seen:
            continue
        seen.add(chunk.web.uri)
        citations.append(
            GroundingCitation(uri=chunk.web.uri, title=chunk.web.title or chunk.web.uri)
        )
    return tuple(citations)
