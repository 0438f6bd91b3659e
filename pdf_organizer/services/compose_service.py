from __future__ import annotations

import logging
from typing import Iterable, Mapping

from pdf_organizer.domain.errors import SourceLoadError
from pdf_organizer.domain.models import PageRef, SourceDocument
from pdf_organizer.services.document_cache import DocumentHandleCache, ParsedHandle

LOGGER = logging.getLogger("pdf_organizer.compose")

SourceSet = Iterable[SourceDocument] | Mapping[str, SourceDocument]


def index_sources(sources: SourceSet) -> dict[str, SourceDocument]:
    if isinstance(sources, Mapping):
        return dict(sources)
    return {item.source_id: item for item in sources}


class ComposeService:
    def __init__(self, cache: DocumentHandleCache) -> None:
        self.cache = cache

    def _resolve(
        self, by_id: dict[str, SourceDocument], page_ref: PageRef
    ) -> ParsedHandle | None:
        source = by_id.get(page_ref.file_id)
        if source is None:
            LOGGER.warning("Skipping page %d of unknown file %s", page_ref.page_index, page_ref.file_id)
            return None
        try:
            return self.cache.get_handle(source)
        except SourceLoadError:
            LOGGER.warning("Could not load %s for page extraction", source.name, exc_info=True)
            return None

    def compose(self, sources: SourceSet, page_refs: list[PageRef]) -> bytes | None:
        """Build one PDF holding exactly ``page_refs`` in the given order.

        References to unknown or unreadable files and out-of-range page
        indices are dropped. Returns ``None`` when no page survives.
        """
        adapter = self.cache.adapter
        if not page_refs:
            return None

        by_id = index_sources(sources)
        runs: list[tuple[ParsedHandle, list[int]]] = []
        for page_ref in page_refs:
            handle = self._resolve(by_id, page_ref)
            if handle is None:
                continue
            if not 0 <= page_ref.page_index < handle.page_count:
                LOGGER.warning(
                    "Skipping page index %d for %s as it is out of bounds",
                    page_ref.page_index,
                    handle.source_name,
                )
                continue
            if runs and runs[-1][0].source_id == handle.source_id:
                runs[-1][1].append(page_ref.page_index)
            else:
                runs.append((handle, [page_ref.page_index]))

        if not runs:
            return None

        output = adapter.new_document()
        try:
            for handle, page_indices in runs:
                handle.copy_pages_into(output, page_indices)
            return adapter.finalize(output)
        finally:
            adapter.close(output)
