from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Sequence

from pdf_organizer.domain.models import PageEntry


@dataclass(frozen=True)
class PageSelection:
    """Selected page ids plus the anchor used for range selection.

    ``toggle`` moves the anchor; ``extend_range_to`` never does, so repeated
    range extensions all start from the last plain click.
    """

    selected: frozenset[str] = field(default_factory=frozenset)
    anchor: int | None = None

    def toggle(self, index: int, page_ids: Sequence[str]) -> "PageSelection":
        if not 0 <= index < len(page_ids):
            return self
        page_id = page_ids[index]
        if page_id in self.selected:
            selected = self.selected - {page_id}
        else:
            selected = self.selected | {page_id}
        return PageSelection(selected=selected, anchor=index)

    def extend_range_to(self, index: int, page_ids: Sequence[str]) -> "PageSelection":
        if not 0 <= index < len(page_ids):
            return self
        if self.anchor is None or self.anchor >= len(page_ids):
            return self.toggle(index, page_ids)
        start = min(self.anchor, index)
        end = max(self.anchor, index)
        return replace(self, selected=self.selected | frozenset(page_ids[start : end + 1]))

    def toggle_all(self, page_ids: Sequence[str]) -> "PageSelection":
        if page_ids and self.selected >= frozenset(page_ids):
            return replace(self, selected=frozenset())
        return replace(self, selected=frozenset(page_ids))

    def cleared(self) -> "PageSelection":
        return PageSelection()

    def is_selected(self, page_id: str) -> bool:
        return page_id in self.selected

    def selected_entries(self, entries: Sequence[PageEntry]) -> list[PageEntry]:
        return [entry for entry in entries if entry.page_id in self.selected]

    def __len__(self) -> int:
        return len(self.selected)
