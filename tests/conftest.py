from __future__ import annotations

from typing import Callable

import fitz
import pytest

from pdf_organizer.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_organizer.domain.models import SourceDocument
from pdf_organizer.infrastructure.config import AppConfig
from pdf_organizer.services.factory import Services, build_services


def _build_pdf(pages: list[str], **save_options: object) -> bytes:
    document = fitz.open()
    try:
        for text in pages:
            page = document.new_page()
            page.insert_text((72, 72), text)
        return document.tobytes(deflate=True, garbage=3, **save_options)
    finally:
        document.close()


def _zero_page_pdf() -> bytes:
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [] /Count 0 >>",
    ]
    body = bytearray(b"%PDF-1.4\n")
    offsets: list[int] = []
    for number, obj in enumerate(objects, start=1):
        offsets.append(len(body))
        body += f"{number} 0 obj\n".encode("ascii") + obj + b"\nendobj\n"
    xref_offset = len(body)
    body += f"xref\n0 {len(objects) + 1}\n".encode("ascii")
    body += b"0000000000 65535 f \n"
    for offset in offsets:
        body += f"{offset:010d} 00000 n \n".encode("ascii")
    body += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n".encode("ascii")
    body += f"startxref\n{xref_offset}\n%%EOF\n".encode("ascii")
    return bytes(body)


@pytest.fixture
def make_pdf() -> Callable[[list[str]], bytes]:
    return _build_pdf


@pytest.fixture
def make_source() -> Callable[..., SourceDocument]:
    def factory(name: str, pages: list[str] | None = None, content: bytes | None = None) -> SourceDocument:
        if content is None:
            content = _build_pdf(pages or [f"{name} page 1"])
        return SourceDocument.from_upload(name, content, modified_at=1700000000)

    return factory


@pytest.fixture
def alpha(make_source) -> SourceDocument:
    return make_source("alpha.pdf", ["Alpha 1", "Alpha 2", "Alpha 3"])


@pytest.fixture
def beta(make_source) -> SourceDocument:
    return make_source("beta.pdf", ["Beta 1", "Beta 2"])


@pytest.fixture
def corrupt(make_source) -> SourceDocument:
    return make_source("broken.pdf", content=b"this is definitely not a pdf file")


@pytest.fixture
def empty(make_source) -> SourceDocument:
    return make_source("empty.pdf", content=_zero_page_pdf())


@pytest.fixture
def encrypted(make_source) -> SourceDocument:
    content = _build_pdf(
        ["Secret 1", "Secret 2"],
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner-secret",
        user_pw="",
        permissions=0,
    )
    return make_source("locked.pdf", content=content)


@pytest.fixture
def adapter() -> PyMuPdfAdapter:
    return PyMuPdfAdapter()


@pytest.fixture
def services(adapter: PyMuPdfAdapter) -> Services:
    built = build_services(AppConfig(max_pdf_size_mb=50, max_batch_size_mb=100), adapter)
    yield built
    built.cache.clear()


@pytest.fixture
def page_texts() -> Callable[[bytes], list[str]]:
    def read(pdf_bytes: bytes) -> list[str]:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
            return [page.get_text("text").strip() for page in document]

    return read
