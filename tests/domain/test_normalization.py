from __future__ import annotations

from collections.abc import Callable  # noqa: TC003

from careermem.domain.model import (
    COMPANY_PLACEHOLDER,
    DEFAULT_QUESTION,
    ROLE_PLACEHOLDER,
    ActivityLevel,
    EntityKind,
    Experience,
    WorkingStatus,
)
from careermem.domain.normalization import (
    normalize_education,
    normalize_entity,
    normalize_experience,
    normalize_external_project,
    normalize_leadership,
    normalize_project,
    normalize_qna_item,
)


def test_synonym_field_names_normalize_identically() -> None:
    first = normalize_experience({"id": "e1", "title": "Engineer", "organization": "Acme"})
    second = normalize_experience({"id": "e1", "role": "Engineer", "company": "Acme"})

    assert first == second


def test_experience_defaults_fill_missing_fields(id_factory: Callable[[], str]) -> None:
    experience = normalize_experience({}, id_factory=id_factory)

    assert experience == Experience(
        id="id-1",
        role=ROLE_PLACEHOLDER,
        company=COMPANY_PLACEHOLDER,
        start_date="",
        end_date="",
        description="",
    )


def test_experience_description_from_bullet_list() -> None:
    experience = normalize_experience(
        {"position": "Intern", "employer": "Acme", "bullets": ["Built X", "Fixed [X] bugs"]}
    )

    assert experience.role == "Intern"
    assert experience.company == "Acme"
    assert experience.description == "Built X\nFixed  bugs"


def test_existing_id_is_kept_and_missing_id_is_generated(id_factory: Callable[[], str]) -> None:
    assert normalize_project({"id": "p-7", "name": "CLI"}, id_factory=id_factory).id == "p-7"
    assert normalize_project({"name": "CLI"}, id_factory=id_factory).id == "id-1"


def test_numeric_ids_become_strings() -> None:
    assert normalize_education({"id": 12, "degree": "BSc"}).id == "12"


def test_bare_string_becomes_primary_text(id_factory: Callable[[], str]) -> None:
    assert normalize_project("Compiler", id_factory=id_factory).name == "Compiler"
    assert normalize_education("BSc Physics", id_factory=id_factory).degree == "BSc Physics"
    assert normalize_leadership("Chess club", id_factory=id_factory).name == "Chess club"
    assert (
        normalize_experience("Ran the payroll", id_factory=id_factory).description
        == "Ran the payroll"
    )


def test_non_object_input_gives_default_entity(id_factory: Callable[[], str]) -> None:
    education = normalize_education(42, id_factory=id_factory)

    assert education.id == "id-1"
    assert (education.degree, education.school, education.year) == ("", "", "")


def test_project_repo_link_synonyms() -> None:
    project = normalize_project({"title": "Tool", "github": "https://github.com/a/b", "url": "x"})

    assert project.name == "Tool"
    assert project.repo_link == "https://github.com/a/b"
    assert project.link == "x"


def test_leadership_date_range_synonyms() -> None:
    activity = normalize_leadership({"organization": "Robotics", "dates": "2019-2020"})

    assert activity.name == "Robotics"
    assert activity.date_range == "2019-2020"


def test_external_project_uses_full_name_as_id() -> None:
    project = normalize_external_project(
        {
            "fullName": "octo/tool",
            "completenessScore": "85",
            "workingStatus": "Not_Working",
            "activityLevel": "HIGH",
            "advancedTechUsed": ["Rust", "Rust", "WASM"],
            "majorProject": "true",
            "domainSpecific": ["devtools"],
            "aiSummary": "A tool.",
            "suggestedBulletPoints": ["Wrote it", ""],
            "relevanceScore": 120,
        }
    )

    assert project.id == "octo/tool"
    assert project.repo_name == "octo/tool"
    assert project.completeness_score == 85
    assert project.working_status is WorkingStatus.NOT_WORKING
    assert project.activity_level is ActivityLevel.HIGH
    assert project.technologies == ["Rust", "WASM"]
    assert project.major_project is True
    assert project.domain_tags == ["devtools"]
    assert project.summary == "A tool."
    assert project.suggested_bullets == ["Wrote it"]
    assert project.relevance_score == 100


def test_external_project_unknown_enums_fall_back() -> None:
    project = normalize_external_project(
        {"id": "a/b", "workingStatus": "maybe", "activityLevel": 3}
    )

    assert project.working_status is WorkingStatus.UNKNOWN
    assert project.activity_level is ActivityLevel.LOW
    assert project.relevance_score is None
    assert project.technologies == []


def test_external_project_list_defaults_are_not_shared() -> None:
    first = normalize_external_project({"id": "a/b"})
    second = normalize_external_project({"id": "c/d"})

    first.technologies.append("Go")

    assert second.technologies == []


def test_qna_item_defaults_question_text(id_factory: Callable[[], str]) -> None:
    item = normalize_qna_item({"question": 7, "options": ["Yes", " ", "No"]}, id_factory=id_factory)

    assert item.id == "id-1"
    assert item.question == DEFAULT_QUESTION
    assert item.options == ["Yes", "No"]


def test_qna_item_from_bare_string() -> None:
    assert normalize_qna_item("  What stack did you use?  ").question == "What stack did you use?"


def test_normalize_entity_dispatches_by_kind() -> None:
    entity = normalize_entity(EntityKind.PROJECT, {"name": "X"})

    assert entity.kind is EntityKind.PROJECT
