"""Convert uploaded files to plain text."""

from __future__ import annotations

import io
import zipfile
from logging import getLogger
from pathlib import PurePath
from typing import TYPE_CHECKING

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from careermem.domain.errors import UnsupportedDocumentError

if TYPE_CHECKING:
    from collections.abc import Callable

    from careermem.domain.ports import DocumentTextExtractor

log = getLogger(__name__)

TEXT_SUFFIXES = frozenset({".txt", ".md", ".json"})


def _decode_text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").removeprefix("\ufeff")


def _extract_pdf(raw: bytes) -> str:
    reader = PdfReader(io.BytesIO(raw))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _extract_docx(raw: bytes) -> str:
    document = Document(io.BytesIO(raw))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


_EXTRACTORS: dict[str, Callable[[bytes], str]] = {
    ".pdf": _extract_pdf,
    ".docx": _extract_docx,
}


def extract_document_text(name: str, raw: bytes) -> str:
    """Return the text content of ``raw``, interpreted by the suffix of ``name``.

    A supported file that cannot be parsed yields ``""`` and a warning.

    Raises:
        UnsupportedDocumentError: for any suffix other than .txt, .md, .json, .pdf, .docx.
    """

    suffix = PurePath(name).suffix.lower()
    if suffix in TEXT_SUFFIXES:
        return _decode_text(raw)
    extractor = _EXTRACTORS.get(suffix)
    if extractor is None:
        raise UnsupportedDocumentError(
            f"Unsupported file type {suffix or '(none)'!r} for {name!r}; "
            "upload .txt, .md, .json, .pdf or .docx files."
        )
    try:
        return extractor(raw)
    except (PyPdfError, PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
        log.warning("Could not read %s: %s", name, exc)
        return ""


if TYPE_CHECKING:
    _extractor_check: DocumentTextExtractor = extract_document_text
