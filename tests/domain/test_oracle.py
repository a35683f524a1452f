from __future__ import annotations

import asyncio

import pytest

from careermem.domain.errors import MalformedOracleResponseError
from careermem.domain.model import ExternalRepository
from careermem.domain.oracle import OracleAdapter, TextOracle, parse_json_payload
from careermem.domain.prompts import (
    build_enhance_prompt,
    build_enrichment_prompt,
    build_research_prompt,
    format_qna_answers,
)
from tests.support.oracles import StubOracle


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('{"a": 1}', {"a": 1}),
        ('```json\n{"a": 1}\n```', {"a": 1}),
        ("```\n[1, 2]\n```", [1, 2]),
        ('Sure! Here is the profile: {"a": {"b": 2}} Hope that helps.', {"a": {"b": 2}}),
        ("Questions: [1, 2] done", [1, 2]),
        ('"just a string"', "just a string"),
    ],
)
def test_parse_json_payload_recovers_json(text: str, expected: object) -> None:
    assert parse_json_payload(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "```json\n```", "no json here", "{broken"])
def test_parse_json_payload_rejects_garbage(text: str) -> None:
    with pytest.raises(MalformedOracleResponseError) as excinfo:
        parse_json_payload(text)

    assert excinfo.value.raw == text


def test_stub_oracle_satisfies_the_port() -> None:
    assert isinstance(StubOracle(), TextOracle)


def test_adapter_requests_json_and_parses_it() -> None:
    oracle = StubOracle(responses=['```json\n{"skills": ["Go"]}\n```'])

    result = asyncio.run(OracleAdapter(oracle).request_skill_optimization(["go", "Go"]))

    assert result == {"skills": ["Go"]}
    assert oracle.calls[0].expect_json is True
    assert oracle.calls[0].grounded is False
    assert '["go", "Go"]' in oracle.calls[0].prompt


def test_adapter_research_is_grounded_plain_text() -> None:
    oracle = StubOracle(research_text="Companies value reliability.")

    reply = asyncio.run(OracleAdapter(oracle).research("Job Research", "SRE at Acme"))

    assert reply.text == "Companies value reliability."
    assert oracle.calls[0].grounded is True
    assert oracle.calls[0].expect_json is False


def test_adapter_propagates_malformed_output() -> None:
    oracle = StubOracle(responses=["I cannot help with that."])

    with pytest.raises(MalformedOracleResponseError):
        asyncio.run(OracleAdapter(oracle).request_merge({}, "text"))


def test_adapter_section_reply_is_plain_text() -> None:
    oracle = StubOracle(responses=["* Shipped **2** releases"])

    text = asyncio.run(
        OracleAdapter(oracle).request_section({"skills": ["Go"]}, "project", "Go role")
    )

    assert text == "* Shipped **2** releases"
    assert oracle.calls[0].expect_json is False
    assert '{"skills": ["Go"]}' in oracle.calls[0].prompt

def test_enrichment_prompt_lists_repository_facts() -> None:
    repository = ExternalRepository(
        full_name="octo/tool",
        name="tool",
        stars=12,
        topics=["cli", "rust"],
        archived=True,
    )

    prompt = build_enrichment_prompt(repository)

    assert "Repository Name: tool" in prompt
    assert "Full Name: octo/tool" in prompt
    assert "Description: No description provided." in prompt
    assert "Stars: 12" in prompt
    assert "Topics: cli, rust" in prompt
    assert "Archived: Yes" in prompt
    assert "README Content:" not in prompt
    assert "relevanceScore" not in prompt


def test_enrichment_prompt_with_readme_and_role() -> None:
    prompt = build_enrichment_prompt(
        ExternalRepository(full_name="octo/tool"),
        readme="# Tool",
        target_role="Platform Engineer",
    )

    assert "README Content:\n# Tool" in prompt
    assert "Target Role: Platform Engineer" in prompt
    assert "relevanceScore" in prompt


def test_research_prompt() -> None:
    assert build_research_prompt("Job Research", "Data role") == (
        "Research: Job Research. Context: Data role"
    )


def test_format_qna_answers() -> None:
    text = format_qna_answers([("Where?", "Berlin"), ("When?", "2020")])

    assert text == "Question: Where?\nAnswer: Berlin\n\nQuestion: When?\nAnswer: 2020"


def test_enhance_prompt_quotes_content_and_context() -> None:
    prompt = build_enhance_prompt("ran the team", "Summary section")

    assert '"ran the team"' in prompt
    assert "Context: Summary section" in prompt
    assert '"refinedText"' in prompt
    assert '"impactScore"' in prompt
