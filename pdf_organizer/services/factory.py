from __future__ import annotations

from dataclasses import dataclass

from pdf_organizer.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_organizer.infrastructure.config import AppConfig
from pdf_organizer.services.compose_service import ComposeService
from pdf_organizer.services.document_cache import DocumentHandleCache
from pdf_organizer.services.merge_service import MergeService
from pdf_organizer.services.split_service import SplitService
from pdf_organizer.services.workspace_service import WorkspaceService


@dataclass(frozen=True)
class Services:
    config: AppConfig
    cache: DocumentHandleCache
    workspace: WorkspaceService
    compose: ComposeService
    merge: MergeService
    split: SplitService


def build_services(
    config: AppConfig | None = None, adapter: PyMuPdfAdapter | None = None
) -> Services:
    config = config or AppConfig()
    cache = DocumentHandleCache(adapter or PyMuPdfAdapter())
    compose = ComposeService(cache)
    return Services(
        config=config,
        cache=cache,
        workspace=WorkspaceService(cache, config),
        compose=compose,
        merge=MergeService(cache, compose, output_name=config.merged_output_name),
        split=SplitService(compose, archive_prefix=config.archive_prefix),
    )
