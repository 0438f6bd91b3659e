from __future__ import annotations

import io
import logging
import time
import zipfile
from typing import Mapping

from pdf_organizer.domain.models import PageRef, SplitBundle
from pdf_organizer.services.compose_service import ComposeService, SourceSet, index_sources
from pdf_organizer.services.naming import ensure_pdf_extension, safe_file_name, unique_names

LOGGER = logging.getLogger("pdf_organizer.split")


class SplitService:
    def __init__(self, compose_service: ComposeService, archive_prefix: str = "split-pdfs") -> None:
        self.compose_service = compose_service
        self.archive_prefix = archive_prefix

    def split(
        self,
        sources: SourceSet,
        selected_refs: list[PageRef],
        names: Mapping[PageRef, str],
    ) -> SplitBundle:
        """Compose one single-page PDF per selected reference.

        Entries without a usable name, or whose page cannot be produced, are
        left out of the bundle.
        """
        self.compose_service.cache.adapter  # raises EngineUnavailableError without an engine
        by_id = index_sources(sources)
        accepted_names: list[str] = []
        accepted_bytes: list[bytes] = []
        for page_ref in selected_refs:
            custom_name = safe_file_name(names.get(page_ref) or "")
            if not custom_name:
                LOGGER.warning(
                    "No file name for page %d of %s; skipping", page_ref.page_index, page_ref.file_id
                )
                continue
            pdf_bytes = self.compose_service.compose(by_id, [page_ref])
            if pdf_bytes is None:
                continue
            accepted_names.append(ensure_pdf_extension(custom_name))
            accepted_bytes.append(pdf_bytes)

        entries = dict(zip(unique_names(accepted_names), accepted_bytes))
        LOGGER.info("Split %d of %d selected page(s)", len(entries), len(selected_refs))
        return SplitBundle(entries=entries)

    def archive_name(self) -> str:
        return f"{self.archive_prefix}-{int(time.time() * 1000)}.zip"

    def build_archive(self, bundle: SplitBundle) -> tuple[str, bytes] | None:
        if bundle.is_empty:
            return None

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, pdf_bytes in bundle.entries.items():
                archive.writestr(name, pdf_bytes)
        return self.archive_name(), buffer.getvalue()

    def split_to_archive(
        self,
        sources: SourceSet,
        selected_refs: list[PageRef],
        names: Mapping[PageRef, str],
    ) -> tuple[str, bytes] | None:
        return self.build_archive(self.split(sources, selected_refs, names))
