"""Oracle boundary: one minimal text-generation port and the narrow contracts built on it.

The oracle is untrusted. Everything it returns is parsed defensively by
:func:`parse_json_payload` and must go through the sanitizers before it is
merged or shown.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from careermem.domain import prompts
from careermem.domain.errors import MalformedOracleResponseError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from careermem.domain.model import ExternalRepository, GroundingCitation, Payload

log = getLogger(__name__)

_FENCE_PATTERN = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```\s*$", re.S)
_OBJECT_FINDER = re.compile(r"\{.*\}", re.S)
_ARRAY_FINDER = re.compile(r"\[.*\]", re.S)


@dataclass(frozen=True, slots=True)
class OracleReply:
    """Text produced by the oracle plus any grounding citations it attached."""

    text: str
    citations: tuple[GroundingCitation, ...] = ()


@runtime_checkable
class TextOracle(Protocol):
    """Anything that turns a prompt into text."""

    async def complete(
        self,
        prompt: str,
        *,
        expect_json: bool = False,
        grounded: bool = False,
    ) -> OracleReply: ...


def parse_json_payload(text: str) -> object:
    """Parse oracle output that should contain JSON.

    Markdown code fences are removed first. When the whole text is not valid JSON
    the outermost ``{...}`` (then ``[...]``) span is tried.

    Raises:
        MalformedOracleResponseError: when no JSON value can be recovered.
    """

    stripped = text.strip()
    fenced = _FENCE_PATTERN.match(stripped)
    if fenced:
        stripped = fenced.group(1).strip()
    if not stripped:
        raise MalformedOracleResponseError("Oracle returned an empty response", raw=text)
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass
    for finder in (_OBJECT_FINDER, _ARRAY_FINDER):
        match = finder.search(stripped)
        if match is None:
            continue
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            continue
    raise MalformedOracleResponseError("Oracle response is not valid JSON", raw=text)


@dataclass(slots=True)
class OracleAdapter:
    """Narrow request contracts over a :class:`TextOracle`.

    Each method builds its prompt, performs exactly one oracle call and returns
    the parsed (still untrusted) JSON value.
    """

    oracle: TextOracle

    async def request_merge(self, profile_payload: Payload, new_text: str) -> object:
        return await self._json(prompts.build_merge_prompt(profile_payload, new_text))

    async def request_extraction(self, document: str, schema_hint: str) -> object:
        return await self._json(prompts.build_extraction_prompt(document, schema_hint))

    async def request_enrichment(
        self,
        record: ExternalRepository,
        *,
        readme: str | None = None,
        target_role: str | None = None,
    ) -> object:
        return await self._json(
            prompts.build_enrichment_prompt(record, readme=readme, target_role=target_role)
        )

    async def research(self, query: str, context: str) -> OracleReply:
        prompt = prompts.build_research_prompt(query, context)
        return await self.oracle.complete(prompt, grounded=True)

    async def request_questions(self, profile_payload: Payload, count: int) -> object:
        return await self._json(prompts.build_questions_prompt(profile_payload, count))

    async def request_skill_optimization(self, skills: Sequence[str]) -> object:
        return await self._json(prompts.build_skill_optimization_prompt(skills))

    async def request_document(self, profile_payload: Payload, research: str) -> object:
        return await self._json(prompts.build_document_prompt(profile_payload, research))

    async def request_tailoring(
        self, document_payload: Payload, job_description: str, research: str
    ) -> object:
        return await self._json(
            prompts.build_tailor_prompt(document_payload, job_description, research)
        )

    async def request_enhancement(self, content: str, context: str) -> object:
        return await self._json(prompts.build_enhance_prompt(content, context))

    async def request_section(
        self, profile_payload: Payload, section_type: str, context: str
    ) -> str:
        """Return the generated bullets as plain text."""

        prompt = prompts.build_section_prompt(profile_payload, section_type, context)
        reply = await self.oracle.complete(prompt)
        return reply.text

    async def _json(self, prompt: str) -> object:
        reply = await self.oracle.complete(prompt, expect_json=True)
        try:
            return parse_json_payload(reply.text)
        except MalformedOracleResponseError:
            log.warning("Discarding unparseable oracle response (%d chars)", len(reply.text))
            raise
