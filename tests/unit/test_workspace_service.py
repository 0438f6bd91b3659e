import pytest

from pdf_organizer.domain.errors import ValidationError
from pdf_organizer.domain.models import SourceDocument, make_source_id
from pdf_organizer.infrastructure.config import AppConfig
from pdf_organizer.services.workspace_service import move_item


@pytest.mark.unit
def test_make_source_id_prefers_modified_time() -> None:
    assert make_source_id("a.pdf", b"12345", 1700000000.7) == "a.pdf-1700000000-5"
    hashed = make_source_id("a.pdf", b"12345")
    assert hashed.startswith("a.pdf-sha256:")
    assert hashed != make_source_id("a.pdf", b"12346")


@pytest.mark.unit
def test_load_files_validates_type_and_size(services, make_pdf) -> None:
    content = make_pdf(["x"])
    loaded = services.workspace.load_files([("a.pdf", content), ("b.PDF", content, 1700000000)])
    assert [item.name for item in loaded] == ["a.pdf", "b.PDF"]
    assert loaded[1].source_id == "b.PDF-1700000000-%d" % len(content)

    with pytest.raises(ValidationError):
        services.workspace.load_files([("notes.txt", content)])


@pytest.mark.unit
def test_load_files_does_not_parse(services) -> None:
    loaded = services.workspace.load_files([("broken.pdf", b"garbage")])
    assert loaded[0].size_bytes == 7


@pytest.mark.unit
def test_load_files_enforces_limits(services) -> None:
    from pdf_organizer.services.workspace_service import WorkspaceService

    tight = WorkspaceService(services.cache, AppConfig(max_pdf_size_mb=1, max_batch_size_mb=1))
    with pytest.raises(ValidationError):
        tight.load_files([("big.pdf", b"0" * (1024 * 1024 + 1))])


@pytest.mark.unit
def test_add_files_skips_duplicates(services, alpha, beta) -> None:
    combined = services.workspace.add_files([alpha], [beta, alpha, beta])
    assert combined == [alpha, beta]


@pytest.mark.unit
def test_move_item_moves_from_a_to_b() -> None:
    assert move_item(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]
    assert move_item(["a", "b", "c", "d"], 3, 0) == ["d", "a", "b", "c"]
    assert move_item(["a", "b"], 0, 5) == ["a", "b"]


@pytest.mark.unit
def test_move_file_up_and_down(services, alpha, beta, make_source) -> None:
    gamma = make_source("gamma.pdf")
    files = [alpha, beta, gamma]
    assert services.workspace.move_file_up(files, gamma.source_id) == [alpha, gamma, beta]
    assert services.workspace.move_file_down(files, alpha.source_id) == [beta, alpha, gamma]
    assert services.workspace.move_file_up(files, alpha.source_id) == files
    assert services.workspace.move_file_down(files, gamma.source_id) == files


@pytest.mark.unit
def test_build_page_entries_skips_unreadable(services, alpha, corrupt, beta) -> None:
    entries = services.workspace.build_page_entries([alpha, corrupt, beta])

    assert [(entry.source_name, entry.page_number) for entry in entries] == [
        ("alpha.pdf", 1),
        ("alpha.pdf", 2),
        ("alpha.pdf", 3),
        ("beta.pdf", 1),
        ("beta.pdf", 2),
    ]
    assert entries[0].page_id == f"{alpha.source_id}-page-0"


@pytest.mark.unit
def test_remove_and_move_pages(services, alpha) -> None:
    entries = services.workspace.build_page_entries([alpha])
    moved = services.workspace.move_page(entries, 2, 0)
    assert [entry.page_index for entry in moved] == [2, 0, 1]

    remaining = services.workspace.remove_pages(moved, {entries[0].page_id})
    assert [entry.page_index for entry in remaining] == [2, 1]


@pytest.mark.unit
def test_remove_file_evicts_cache(services, alpha, beta) -> None:
    files = [alpha, beta]
    entries = services.workspace.build_page_entries(files)
    assert alpha.source_id in services.cache

    new_files, new_entries = services.workspace.remove_file(files, entries, alpha.source_id)

    assert new_files == [beta]
    assert all(entry.file_id == beta.source_id for entry in new_entries)
    assert alpha.source_id not in services.cache


@pytest.mark.unit
def test_source_document_from_upload() -> None:
    source = SourceDocument.from_upload("a.pdf", b"abc", modified_at=5)
    assert source.size_bytes == 3
    assert source.modified_at == 5
    assert "abc" not in repr(source)
