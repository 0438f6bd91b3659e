from __future__ import annotations

import logging
from typing import Sequence, TypeVar

from pdf_organizer.domain.errors import SourceLoadError, ValidationError
from pdf_organizer.domain.models import PageEntry, SourceDocument
from pdf_organizer.infrastructure.config import AppConfig
from pdf_organizer.services.document_cache import DocumentHandleCache

LOGGER = logging.getLogger("pdf_organizer.workspace")

T = TypeVar("T")

Upload = tuple[str, bytes] | tuple[str, bytes, int | float | None]


def move_item(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy of ``items`` with one element moved from A to B."""
    moved = list(items)
    if not (0 <= from_index < len(moved) and 0 <= to_index < len(moved)):
        return moved
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


class WorkspaceService:
    def __init__(self, cache: DocumentHandleCache, config: AppConfig) -> None:
        self.cache = cache
        self.config = config

    def load_files(self, uploaded_files: list[Upload]) -> list[SourceDocument]:
        if not uploaded_files:
            return []

        total_size = sum(len(upload[1]) for upload in uploaded_files)
        if total_size > self.config.max_batch_size_bytes:
            raise ValidationError(f"Batch size exceeds limit of {self.config.max_batch_size_mb} MB")

        sources: list[SourceDocument] = []
        for upload in uploaded_files:
            name, content = upload[0], upload[1]
            modified_at = upload[2] if len(upload) > 2 else None
            if not name.lower().endswith(".pdf"):
                raise ValidationError(f"Invalid file type for {name}. Only PDF files are allowed.")
            if len(content) > self.config.max_pdf_size_bytes:
                raise ValidationError(
                    f"{name} exceeds per-file limit of {self.config.max_pdf_size_mb} MB"
                )
            sources.append(SourceDocument.from_upload(name, content, modified_at))
        return sources

    @staticmethod
    def add_files(
        existing: list[SourceDocument], new_files: list[SourceDocument]
    ) -> list[SourceDocument]:
        seen = {item.source_id for item in existing}
        combined = list(existing)
        for item in new_files:
            if item.source_id in seen:
                continue
            seen.add(item.source_id)
            combined.append(item)
        return combined

    def remove_file(
        self, sources: list[SourceDocument], entries: list[PageEntry], file_id: str
    ) -> tuple[list[SourceDocument], list[PageEntry]]:
        remaining_files = [item for item in sources if item.source_id != file_id]
        remaining_entries = [item for item in entries if item.file_id != file_id]
        self.cache.evict(file_id)
        return remaining_files, remaining_entries

    @staticmethod
    def move_file(
        sources: list[SourceDocument], from_index: int, to_index: int
    ) -> list[SourceDocument]:
        return move_item(sources, from_index, to_index)

    def move_file_up(self, sources: list[SourceDocument], file_id: str) -> list[SourceDocument]:
        index = next((i for i, item in enumerate(sources) if item.source_id == file_id), -1)
        if index <= 0:
            return list(sources)
        return self.move_file(sources, index, index - 1)

    def move_file_down(self, sources: list[SourceDocument], file_id: str) -> list[SourceDocument]:
        index = next((i for i, item in enumerate(sources) if item.source_id == file_id), -1)
        if index == -1:
            return list(sources)
        return self.move_file(sources, index, index + 1)

    def build_page_entries(self, sources: list[SourceDocument]) -> list[PageEntry]:
        entries: list[PageEntry] = []
        for source in sources:
            try:
                handle = self.cache.get_handle(source)
            except SourceLoadError:
                LOGGER.warning("Failed to process %s; its pages are not listed", source.name)
                continue
            entries.extend(PageEntry.for_page(source, index) for index in range(handle.page_count))
        return entries

    @staticmethod
    def remove_pages(entries: list[PageEntry], page_ids: set[str] | frozenset[str]) -> list[PageEntry]:
        return [entry for entry in entries if entry.page_id not in page_ids]

    @staticmethod
    def move_page(entries: list[PageEntry], from_index: int, to_index: int) -> list[PageEntry]:
        return move_item(entries, from_index, to_index)
