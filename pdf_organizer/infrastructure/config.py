from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _get_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass(frozen=True)
class AppConfig:
    max_pdf_size_mb: int = _get_int_env("PDF_ORGANIZER_MAX_PDF_MB", 50)
    max_batch_size_mb: int = _get_int_env("PDF_ORGANIZER_MAX_BATCH_MB", 100)
    log_level: str = _get_str_env("PDF_ORGANIZER_LOG_LEVEL", "INFO")
    archive_prefix: str = _get_str_env("PDF_ORGANIZER_ARCHIVE_PREFIX", "split-pdfs")
    merged_output_name: str = _get_str_env("PDF_ORGANIZER_MERGED_NAME", "merged.pdf")

    @property
    def max_pdf_size_bytes(self) -> int:
        return self.max_pdf_size_mb * 1024 * 1024

    @property
    def max_batch_size_bytes(self) -> int:
        return self.max_batch_size_mb * 1024 * 1024
