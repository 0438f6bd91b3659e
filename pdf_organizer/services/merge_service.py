from __future__ import annotations

import logging

from pdf_organizer.domain.errors import ParsingError, SourceLoadError, ValidationError
from pdf_organizer.domain.models import (
    FailedFile,
    MergeOutcome,
    MergeResult,
    OperationMessage,
    PageRef,
    SourceDocument,
    Status,
)
from pdf_organizer.services.compose_service import ComposeService, SourceSet
from pdf_organizer.services.document_cache import DocumentHandleCache

LOGGER = logging.getLogger("pdf_organizer.merge")

UNREADABLE_REASON = "corrupted or unreadable"
EMPTY_REASON = "empty (0 pages)"


class MergeService:
    def __init__(
        self,
        cache: DocumentHandleCache,
        compose_service: ComposeService | None = None,
        output_name: str = "merged.pdf",
    ) -> None:
        self.cache = cache
        self.compose_service = compose_service or ComposeService(cache)
        self.output_name = output_name

    def merge_all(self, sources: list[SourceDocument]) -> MergeOutcome:
        adapter = self.cache.adapter
        failed: list[FailedFile] = []
        output = adapter.new_document()
        try:
            for source in sources:
                try:
                    handle = self.cache.get_handle(source)
                except SourceLoadError:
                    LOGGER.warning("Skipping corrupted or unreadable file: %s", source.name)
                    failed.append(FailedFile(file_name=source.name, reason=UNREADABLE_REASON))
                    continue

                if handle.page_count == 0:
                    LOGGER.warning("Skipping empty file: %s", source.name)
                    failed.append(FailedFile(file_name=source.name, reason=EMPTY_REASON))
                    continue

                pages_before = adapter.page_count(output)
                try:
                    handle.copy_pages_into(output, list(range(handle.page_count)))
                except ParsingError:
                    adapter.truncate(output, pages_before)
                    LOGGER.warning("Could not copy pages from %s", source.name, exc_info=True)
                    failed.append(FailedFile(file_name=source.name, reason=UNREADABLE_REASON))

            merged_pages = adapter.page_count(output)
            merged_bytes = adapter.finalize(output)
        finally:
            adapter.close(output)

        LOGGER.info(
            "Merged %d page(s) from %d file(s); %d skipped",
            merged_pages,
            len(sources) - len(failed),
            len(failed),
        )
        return MergeOutcome(
            merged_pdf_bytes=merged_bytes,
            failed_files=failed,
            merged_pages=merged_pages if merged_bytes is not None else 0,
        )

    def merge_pages(self, sources: SourceSet, page_refs: list[PageRef]) -> MergeResult:
        if not page_refs:
            raise ValidationError("Cannot create an empty PDF. Please add some pages.")

        output = self.compose_service.compose(sources, page_refs)
        if output is None:
            raise ValidationError("None of the arranged pages could be read.")
        return MergeResult(
            output_name=self.output_name,
            output_pdf=output,
            merged_pages=self.cache.adapter.get_page_count(output),
        )

    @staticmethod
    def summarize(outcome: MergeOutcome) -> tuple[Status, list[OperationMessage]]:
        skipped = [
            OperationMessage(level="warning", text=f"{item.file_name}: {item.reason}")
            for item in outcome.failed_files
        ]
        if outcome.merged_pdf_bytes is None:
            if not outcome.failed_files:
                return Status.ERROR, [OperationMessage(level="error", text="No files to merge.")]
            return Status.ERROR, [
                OperationMessage(
                    level="error",
                    text="No pages could be merged: all files unreadable or empty.",
                ),
                *skipped,
            ]
        if outcome.failed_files:
            return Status.WARNING, [
                OperationMessage(
                    level="warning",
                    text=(
                        f"Merged {outcome.merged_pages} page(s); "
                        f"skipped {len(outcome.failed_files)} file(s)."
                    ),
                ),
                *skipped,
            ]
        return Status.SUCCESS, [
            OperationMessage(level="info", text=f"Merged {outcome.merged_pages} page(s).")
        ]
