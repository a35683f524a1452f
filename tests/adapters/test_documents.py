from __future__ import annotations

import io

import pytest
from docx import Document
from pypdf import PdfWriter

from careermem.adapters.documents import extract_document_text
from careermem.domain.errors import UnsupportedDocumentError


@pytest.mark.parametrize("name", ["notes.txt", "NOTES.MD", "profile.json"])
def test_text_files_are_decoded(name: str) -> None:
    assert extract_document_text(name, "Ingénieur".encode()) == "Ingénieur"


def test_byte_order_mark_is_removed() -> None:
    assert extract_document_text("cv.txt", "\ufeffHello".encode()) == "Hello"


def test_invalid_utf8_is_replaced() -> None:
    assert extract_document_text("cv.txt", b"ok \xff") == "ok \ufffd"


@pytest.mark.parametrize("name", ["photo.png", "archive.zip", "README"])
def test_unsupported_types_raise(name: str) -> None:
    with pytest.raises(UnsupportedDocumentError, match="Unsupported file type"):
        extract_document_text(name, b"data")


def test_docx_paragraphs_are_joined() -> None:
    document = Document()
    document.add_paragraph("Backend Intern at Acme")
    document.add_paragraph("Built a payments API")
    buffer = io.BytesIO()
    document.save(buffer)

    text = extract_document_text("cv.docx", buffer.getvalue())

    assert text == "Backend Intern at Acme\nBuilt a payments API"


def test_blank_pdf_yields_empty_text() -> None:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)

    assert extract_document_text("cv.pdf", buffer.getvalue()).strip() == ""


@pytest.mark.parametrize("name", ["cv.pdf", "cv.docx"])
def test_corrupt_files_yield_empty_text(name: str) -> None:
    assert extract_document_text(name, b"definitely not a document") == ""
