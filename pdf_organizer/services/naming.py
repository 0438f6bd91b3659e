from __future__ import annotations

import re
from typing import Iterable

from pdf_organizer.domain.models import PageEntry, PageRef

PDF_EXTENSION = ".pdf"
DEFAULT_SEQUENTIAL_BASE = "document"

_PDF_SUFFIX_PATTERN = re.compile(r"\.pdf$", flags=re.IGNORECASE)
_UNSAFE_CHARS = re.compile(r"[:*?\"<>|\x00-\x1f\x7f]")


def strip_pdf_extension(name: str) -> str:
    return _PDF_SUFFIX_PATTERN.sub("", name)


def ensure_pdf_extension(name: str) -> str:
    if name.lower().endswith(PDF_EXTENSION):
        return name
    return f"{name}{PDF_EXTENSION}"


def _core_name(entry: PageEntry) -> str:
    return f"{strip_pdf_extension(entry.source_name)}-page-{entry.page_number}"


def default_name(entry: PageEntry) -> str:
    return f"{_core_name(entry)}{PDF_EXTENSION}"


def default_names(entries: Iterable[PageEntry]) -> dict[PageRef, str]:
    return {entry.ref: default_name(entry) for entry in entries}


def bulk_rename(entries: Iterable[PageEntry], prefix: str, suffix: str) -> dict[PageRef, str]:
    return {entry.ref: f"{prefix}{_core_name(entry)}{suffix}{PDF_EXTENSION}" for entry in entries}


def _parse_start(start: int | str | None) -> int:
    if isinstance(start, bool):
        return 1
    if isinstance(start, int):
        return start if start >= 0 else 1
    if isinstance(start, str) and start.strip().isdigit():
        return int(start.strip())
    return 1


def sequential_rename(
    entries: Iterable[PageEntry], base_name: str, start: int | str | None = 1
) -> dict[PageRef, str]:
    """Number the entries ``<base>-<n>.pdf`` in display order from ``start``.

    The number follows the entry's position, not its original page number.
    """
    base = base_name.strip() or DEFAULT_SEQUENTIAL_BASE
    first = _parse_start(start)
    return {
        entry.ref: f"{base}-{first + position}{PDF_EXTENSION}"
        for position, entry in enumerate(entries)
    }


def safe_file_name(name: str) -> str:
    clean = name.replace("\\", "/").split("/")[-1]
    clean = _UNSAFE_CHARS.sub("_", clean).strip()
    return clean.lstrip(".")


def unique_names(names: Iterable[str]) -> list[str]:
    """Suffix repeated names with `` (2)``, `` (3)``... before the extension."""
    used: set[str] = set()
    result: list[str] = []
    for name in names:
        stem, dot, extension = name.rpartition(".")
        if not stem:
            stem, dot, extension = name, "", ""
        candidate = name
        sequence = 1
        while candidate.lower() in used:
            sequence += 1
            candidate = f"{stem} ({sequence}){dot}{extension}"
        used.add(candidate.lower())
        result.append(candidate)
    return result
