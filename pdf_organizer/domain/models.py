from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum


class Status(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


def make_source_id(name: str, content: bytes, modified_at: int | float | None = None) -> str:
    """Build a session-stable identity for an uploaded file.

    Uses the ``name-modified-size`` tuple when a modification time is known,
    otherwise a SHA-256 digest of the content stands in for it.
    """
    if modified_at is None:
        stamp = f"sha256:{hashlib.sha256(content).hexdigest()}"
    else:
        stamp = str(int(modified_at))
    return f"{name}-{stamp}-{len(content)}"


@dataclass(frozen=True)
class SourceDocument:
    source_id: str
    name: str
    content: bytes = field(repr=False)
    size_bytes: int
    modified_at: int | None = None

    @classmethod
    def from_upload(
        cls, name: str, content: bytes, modified_at: int | float | None = None
    ) -> "SourceDocument":
        return cls(
            source_id=make_source_id(name, content, modified_at),
            name=name,
            content=content,
            size_bytes=len(content),
            modified_at=None if modified_at is None else int(modified_at),
        )


@dataclass(frozen=True)
class PageRef:
    file_id: str
    page_index: int


@dataclass(frozen=True)
class PageEntry:
    page_id: str
    file_id: str
    source_name: str
    page_index: int

    @classmethod
    def for_page(cls, source: SourceDocument, page_index: int) -> "PageEntry":
        return cls(
            page_id=f"{source.source_id}-page-{page_index}",
            file_id=source.source_id,
            source_name=source.name,
            page_index=page_index,
        )

    @property
    def ref(self) -> PageRef:
        return PageRef(file_id=self.file_id, page_index=self.page_index)

    @property
    def page_number(self) -> int:
        return self.page_index + 1


@dataclass(frozen=True)
class OperationMessage:
    level: str
    text: str


@dataclass(frozen=True)
class FailedFile:
    file_name: str
    reason: str


@dataclass(frozen=True)
class MergeOutcome:
    merged_pdf_bytes: bytes | None
    failed_files: list[FailedFile] = field(default_factory=list)
    merged_pages: int = 0

    @property
    def is_empty(self) -> bool:
        return self.merged_pdf_bytes is None

    @property
    def is_partial(self) -> bool:
        return self.merged_pdf_bytes is not None and bool(self.failed_files)


@dataclass(frozen=True)
class MergeResult:
    output_name: str
    output_pdf: bytes
    merged_pages: int


@dataclass(frozen=True)
class SplitBundle:
    entries: dict[str, bytes] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def names(self) -> list[str]:
        return list(self.entries)
