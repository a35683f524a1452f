from __future__ import annotations

from collections.abc import Callable  # noqa: TC003
from datetime import UTC, datetime, timedelta

import pytest

from careermem.domain.model import (
    COMPANY_PLACEHOLDER,
    DEFAULT_RESUME_TITLE,
    ROLE_PLACEHOLDER,
    MemoryProfile,
    to_epoch_ms,
)
from careermem.domain.sanitize import sanitize_document, sanitize_profile


def _messy_payload() -> dict[str, object]:
    return {
        "lastUpdated": "2024-03-01T10:00:00Z",
        "personalInfo": {"name": "Ada", "linkedIn": "in/ada"},
        "summary": "Backend engineer.",
        "experience": [{"title": "Engineer", "organization": "Acme"}],
        "internships": [{"role": "Intern", "company": "Initech", "description": "Did [X] things"}],
        "educations": [{"degree": "BSc", "institution": "MIT"}, 17, None],
        "projects": ["Compiler"],
        "activities": [{"title": "Chess club"}],
        "skills": ["Python", "python", {"name": "SQL"}, None],
        "rawSourceFiles": ["cv.pdf", "cv.pdf", "notes.txt"],
        "qna": [{"question": "Where?"}, "When?", 5],
        "githubProjects": [{"fullName": "ada/tool"}],
        "unknownKey": {"ignored": True},
    }


def test_sanitize_never_returns_null_structure() -> None:
    for raw in (None, 42, "text", [], {"experiences": "nope", "skills": "Python"}):
        profile = sanitize_profile(raw)

        assert isinstance(profile, MemoryProfile)
        assert profile.experiences == []
        assert profile.skills == []
        assert profile.personal_info.full_name == ""


def test_sanitize_collects_synonym_lists(id_factory: Callable[[], str]) -> None:
    profile = sanitize_profile(_messy_payload(), id_factory=id_factory)

    assert [(e.role, e.company) for e in profile.experiences] == [
        ("Engineer", "Acme"),
        ("Intern", "Initech"),
    ]
    assert profile.experiences[1].description == "Did  things"
    assert [e.school for e in profile.educations] == ["MIT"]
    assert [p.name for p in profile.projects] == ["Compiler"]
    assert [a.name for a in profile.leadership_activities] == ["Chess club"]
    assert profile.skills == ["Python", "python", "SQL"]
    assert profile.raw_source_files == ["cv.pdf", "notes.txt"]
    assert [q.question for q in profile.qna] == ["Where?", "When?"]
    assert [p.id for p in profile.external_projects] == ["ada/tool"]


def test_sanitize_reads_personal_info_synonyms_and_summary_fallback() -> None:
    profile = sanitize_profile(_messy_payload())

    assert profile.personal_info.full_name == "Ada"
    assert profile.personal_info.linkedin == "in/ada"
    assert profile.personal_info.summary == "Backend engineer."


def test_internships_land_in_experiences() -> None:
    profile = sanitize_profile({"internships": [{"role": "Intern", "company": "Acme"}]})

    assert len(profile.experiences) == 1
    assert profile.experiences[0].role == "Intern"


def test_sanitize_is_idempotent(id_factory: Callable[[], str]) -> None:
    once = sanitize_profile(_messy_payload(), id_factory=id_factory)
    twice = sanitize_profile(once.as_payload(), id_factory=id_factory)

    assert twice == once


def test_sanitize_accepts_a_profile_instance(id_factory: Callable[[], str]) -> None:
    once = sanitize_profile(_messy_payload(), id_factory=id_factory)

    assert sanitize_profile(once) == once


def test_last_updated_uses_payload_then_now(fixed_now: datetime) -> None:
    assert sanitize_profile({"lastUpdated": "2024-03-01T10:00:00Z"}).last_updated == datetime(
        2024, 3, 1, 10, tzinfo=UTC
    )
    assert sanitize_profile({"lastUpdated": "garbage"}, now=fixed_now).last_updated == fixed_now
    assert sanitize_profile({"lastUpdated": to_epoch_ms(fixed_now)}).last_updated == fixed_now


def test_explicit_now_is_stored_at_millisecond_precision(fixed_now: datetime) -> None:
    precise = fixed_now + timedelta(microseconds=123_456)

    once = sanitize_profile({}, now=precise)

    assert once.last_updated == fixed_now + timedelta(milliseconds=123)
    assert sanitize_profile(once.as_payload()).last_updated == once.last_updated
    assert sanitize_document({}, now=precise).last_modified == once.last_updated


def test_placeholder_role_and_company_for_empty_experience() -> None:
    profile = sanitize_profile({"experiences": [{"description": "Did things"}]})

    assert profile.experiences[0].role == ROLE_PLACEHOLDER
    assert profile.experiences[0].company == COMPANY_PLACEHOLDER


def test_document_defaults(fixed_now: datetime, id_factory: Callable[[], str]) -> None:
    document = sanitize_document({}, id_factory=id_factory, now=fixed_now)

    assert document.id == "id-1"
    assert document.title == DEFAULT_RESUME_TITLE
    assert document.last_modified == fixed_now
    assert document.ats_score == 0
    assert document.research_context is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (87.5, 87.5),
        ("90", 0),
        (True, 0),
        (None, 0),
        (float("inf"), 0),
        (float("-inf"), 0),
        (float("nan"), 0),
    ],
)
def test_document_ats_score_must_be_numeric(raw: object, expected: float) -> None:
    assert sanitize_document({"atsScore": raw}).ats_score == expected


def test_document_reads_singular_lists_and_research_context() -> None:
    document = sanitize_document(
        {
            "id": "doc-1",
            "title": "Backend CV",
            "experience": [{"role": "Engineer", "company": "Acme"}],
            "experiences": [{"role": "Intern", "company": "Initech"}],
            "education": [{"degree": "BSc"}],
            "hiddenKeywords": ["kafka", ""],
            "researchContext": {
                "summary": "Acme values craft.",
                "sources": [
                    {"web": {"uri": "https://acme.example/about", "title": "About"}},
                    {"uri": "https://acme.example/jobs"},
                    {"title": "no uri"},
                ],
            },
        }
    )

    assert document.id == "doc-1"
    assert document.title == "Backend CV"
    assert [e.role for e in document.experience] == ["Engineer", "Intern"]
    assert [e.degree for e in document.education] == ["BSc"]
    assert document.hidden_keywords == ["kafka"]
    assert document.research_context is not None
    assert [(s.uri, s.title) for s in document.research_context.sources] == [
        ("https://acme.example/about", "About"),
        ("https://acme.example/jobs", "https://acme.example/jobs"),
    ]


def test_document_sanitize_is_idempotent(id_factory: Callable[[], str]) -> None:
    once = sanitize_document(
        {"experience": ["Shipped things"], "researchContext": {"summary": "x"}},
        id_factory=id_factory,
    )

    assert sanitize_document(once.as_payload(), id_factory=id_factory) == once
