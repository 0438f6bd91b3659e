from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from pdf_organizer.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_organizer.domain.errors import EngineUnavailableError, SourceLoadError
from pdf_organizer.domain.models import SourceDocument

LOGGER = logging.getLogger("pdf_organizer.cache")

Loader = Callable[[bytes], Any]


@dataclass(frozen=True)
class ParsedHandle:
    source_id: str
    source_name: str
    page_count: int
    document: Any = field(repr=False, compare=False)
    adapter: PyMuPdfAdapter = field(repr=False, compare=False)

    def copy_pages_into(self, output: Any, page_indices: list[int]) -> int:
        return self.adapter.copy_pages(output, self.document, page_indices)


class DocumentHandleCache:
    """Parsed documents keyed by source identity, loaded once per session.

    Failed loads are not stored, so a later request retries the parse.
    """

    def __init__(self, adapter: PyMuPdfAdapter | None) -> None:
        self._adapter = adapter
        self._handles: dict[str, ParsedHandle] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    @property
    def adapter(self) -> PyMuPdfAdapter:
        if self._adapter is None:
            raise EngineUnavailableError(
                "PDF engine is not available; no documents can be processed."
            )
        return self._adapter

    def _lock_for(self, source_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(source_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[source_id] = lock
            return lock

    def get_handle(self, source: SourceDocument, loader: Loader | None = None) -> ParsedHandle:
        adapter = self.adapter
        cached = self._handles.get(source.source_id)
        if cached is not None:
            return cached

        with self._lock_for(source.source_id):
            cached = self._handles.get(source.source_id)
            if cached is not None:
                return cached

            load = loader or adapter.open_document
            LOGGER.debug("Parsing %s (%d bytes)", source.name, source.size_bytes)
            try:
                document = load(source.content)
            except Exception as exc:
                raise SourceLoadError(source.name) from exc

            handle = ParsedHandle(
                source_id=source.source_id,
                source_name=source.name,
                page_count=adapter.page_count(document),
                document=document,
                adapter=adapter,
            )
            self._handles[source.source_id] = handle
            return handle

    def evict(self, source_id: str) -> bool:
        with self._lock_for(source_id):
            handle = self._handles.pop(source_id, None)
        if handle is None:
            return False
        handle.adapter.close(handle.document)
        LOGGER.debug("Evicted %s", handle.source_name)
        return True

    def clear(self) -> None:
        for source_id in list(self._handles):
            self.evict(source_id)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __enter__(self) -> "DocumentHandleCache":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.clear()
