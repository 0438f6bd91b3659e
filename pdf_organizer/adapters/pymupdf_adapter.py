from __future__ import annotations

from typing import cast

import fitz  # type: ignore[import-untyped]

from pdf_organizer.domain.errors import ParsingError


class PyMuPdfAdapter:
    @staticmethod
    def _optimized_bytes(document: fitz.Document) -> bytes:
        return cast(
            bytes,
            document.tobytes(
                garbage=4,
                clean=True,
                deflate=True,
                deflate_images=True,
                deflate_fonts=True,
            ),
        )

    def open_document(self, pdf_bytes: bytes) -> fitz.Document:
        """Parse ``pdf_bytes`` ignoring encryption where the file allows it.

        Files protected only by an owner password open without a prompt and
        their permission flags are not enforced. Files that need a user
        password are tried with an empty one before giving up.
        """
        try:
            document = fitz.open(stream=pdf_bytes, filetype="pdf")
        except Exception as exc:
            raise ParsingError("Unable to open PDF") from exc
        if document.needs_pass and not document.authenticate(""):
            document.close()
            raise ParsingError("PDF is password protected")
        return document

    def get_page_count(self, pdf_bytes: bytes) -> int:
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
                return int(document.page_count)
        except Exception as exc:
            raise ParsingError("Unable to read PDF page count") from exc

    @staticmethod
    def page_count(document: fitz.Document) -> int:
        return int(document.page_count)

    @staticmethod
    def new_document() -> fitz.Document:
        return fitz.open()

    @staticmethod
    def copy_pages(output: fitz.Document, source: fitz.Document, page_indices: list[int]) -> int:
        if not page_indices:
            return 0
        try:
            run_start = page_indices[0]
            run_end = page_indices[0]
            for index in page_indices[1:]:
                if index == run_end + 1:
                    run_end = index
                    continue
                output.insert_pdf(source, from_page=run_start, to_page=run_end)
                run_start = index
                run_end = index
            output.insert_pdf(source, from_page=run_start, to_page=run_end)
        except Exception as exc:
            raise ParsingError("Unable to copy PDF pages") from exc
        return len(page_indices)

    @staticmethod
    def truncate(document: fitz.Document, page_count: int) -> None:
        if document.page_count > page_count:
            document.delete_pages(from_page=page_count, to_page=document.page_count - 1)

    def finalize(self, output: fitz.Document) -> bytes | None:
        if output.page_count == 0:
            return None
        try:
            return self._optimized_bytes(output)
        except Exception as exc:
            raise ParsingError("Unable to serialize PDF") from exc

    @staticmethod
    def close(document: fitz.Document) -> None:
        if not document.is_closed:
            document.close()
