from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from careermem.adapters.gemini import GeminiClient
from careermem.adapters.sqlalchemy import is_started, shutdown
from careermem.app import (
    answer_questions,
    ask_questions,
    build_memory_service,
    build_reconciliation_engine,
    enhance_content,
    generate_resume,
    generate_section,
    ingest_files,
    show_profile,
)
from careermem.config import GeminiConfig, MemoryConfig, MissingConfigurationError
from careermem.domain.model import QnAAnswer
from careermem.domain.reconciliation import ReconciliationEngine
from tests.support.oracles import StubOracle

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from careermem.adapters.sqlalchemy import SqlAlchemyMemoryUnitOfWork
    from careermem.domain.memory_service import MemoryService


def _service(
    oracle: StubOracle, uow_factory: Callable[[], SqlAlchemyMemoryUnitOfWork]
) -> MemoryService:
    return build_memory_service(
        engine_factory=lambda: ReconciliationEngine(oracle),
        unit_of_work_factory=uow_factory,
    )


def test_build_reconciliation_engine_applies_limits() -> None:
    engine = build_reconciliation_engine(
        gemini=GeminiConfig(api_key="k"),
        memory=MemoryConfig(merge_text_limit=10, readme_limit=5),
    )

    assert isinstance(engine.adapter.oracle, GeminiClient)
    assert engine.merge_text_limit == 10
    assert engine.readme_limit == 5


def test_build_reconciliation_engine_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with pytest.raises(MissingConfigurationError):
        build_reconciliation_engine()


def test_build_memory_service_starts_storage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    shutdown()
    try:
        service = build_memory_service(engine_factory=lambda: ReconciliationEngine(StubOracle()))

        assert is_started()
        assert service.load_profile("nobody").skills == []
    finally:
        shutdown()


def test_ingest_files_reads_paths(
    tmp_path: Path, sqlite_unit_of_work: Callable[[], SqlAlchemyMemoryUnitOfWork]
) -> None:
    notes = tmp_path / "notes.md"
    notes.write_text("Python and Go developer", encoding="utf-8")
    image = tmp_path / "photo.png"
    image.write_bytes(b"\x89PNG")
    oracle = StubOracle(responses=[{"skills": ["Python", "Go"]}])
    service = _service(oracle, sqlite_unit_of_work)

    result = ingest_files([notes, image], user_id="u", service=service)

    assert result.merged_files == ["notes.md"]
    assert result.skipped_files == ["photo.png"]
    assert show_profile(user_id="u", service=service).skills == ["Python", "Go"]


def test_questions_and_answers_round(
    sqlite_unit_of_work: Callable[[], SqlAlchemyMemoryUnitOfWork],
) -> None:
    oracle = StubOracle(
        responses=[
            [{"question": "Which cloud provider?"}],
            {"skills": ["AWS"]},
        ]
    )
    service = _service(oracle, sqlite_unit_of_work)

    asked = ask_questions(user_id="u", count=1, service=service)
    (question,) = asked.qna
    answer_questions(
        [QnAAnswer(question=question.question, answer="AWS", question_id=question.id)],
        user_id="u",
        service=service,
    )

    profile = show_profile(user_id="u", service=service)
    assert profile.qna == []
    assert profile.skills == ["AWS"]


def test_generate_resume_saves_document(
    sqlite_unit_of_work: Callable[[], SqlAlchemyMemoryUnitOfWork],
) -> None:
    service = _service(StubOracle(responses=[{"title": "CV"}]), sqlite_unit_of_work)

    document = generate_resume(user_id="u", job_description="Platform role", service=service)

    assert [d.id for d in service.list_documents("u")] == [document.id]


def test_enhance_and_generate_section(
    sqlite_unit_of_work: Callable[[], SqlAlchemyMemoryUnitOfWork],
) -> None:
    oracle = StubOracle(
        responses=[
            {"refinedText": "* Grew revenue **12%**", "impactScore": 9, "changes": "Metric."},
            "* Mentored two interns\n",
        ]
    )
    service = _service(oracle, sqlite_unit_of_work)

    enhancement = enhance_content("helped sales", context="Summary", service=service)
    bullets = generate_section(user_id="u", section_type="leadershipActivity", service=service)

    assert enhancement.as_payload() == {
        "refinedText": "* Grew revenue **12%**",
        "impactScore": 9,
        "changes": "Metric.",
    }
    assert bullets == "* Mentored two interns"
    assert "Context: Summary" in oracle.calls[0].prompt
