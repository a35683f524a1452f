from __future__ import annotations

import pytest

from careermem.domain.model import (
    AnalyzedExternalProject,
    Education,
    Experience,
    LeadershipActivity,
    Project,
)
from careermem.domain.reconciliation.keys import identity_key, normalize_key_text


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("  Acme, Inc.  ", "acme inc"),
        ("ＡＣＭＥ", "acme"),
        ("Straße", "strasse"),
        ("Role", None),
        ("company", None),
        ("...", None),
        (None, None),
    ],
)
def test_normalize_key_text(raw: str | None, expected: str | None) -> None:
    assert normalize_key_text(raw) == expected


def test_experience_key_ignores_case_and_punctuation() -> None:
    first = Experience(role="Software Engineer", company="Acme, Inc.")
    second = Experience(role="software engineer", company="ACME Inc")

    assert identity_key(first) == identity_key(second)


def test_experience_with_placeholder_has_no_key() -> None:
    assert identity_key(Experience(role="Engineer")) is None


def test_keys_are_namespaced_by_kind() -> None:
    assert identity_key(Project(name="Chess")) != identity_key(LeadershipActivity(name="Chess"))


def test_education_requires_degree_and_school() -> None:
    assert identity_key(Education(degree="BSc")) is None
    assert identity_key(Education(degree="BSc", school="MIT")) == ("education", "bsc", "mit")


def test_external_project_key_is_its_id() -> None:
    assert identity_key(AnalyzedExternalProject(id="Octo/Tool")) == (
        "external_project",
        "octotool",
    )


def test_unknown_objects_have_no_key() -> None:
    assert identity_key("not an entity") is None
