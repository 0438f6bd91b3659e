from __future__ import annotations

import streamlit as st

from pdf_organizer.domain.models import OperationMessage, PageEntry, PageRef, SourceDocument, Status
from pdf_organizer.infrastructure.config import AppConfig
from pdf_organizer.infrastructure.logging_setup import configure_logging
from pdf_organizer.services.factory import Services, build_services
from pdf_organizer.services.naming import bulk_rename, default_names, sequential_rename
from pdf_organizer.services.selection import PageSelection


def _init_services() -> Services:
    if "services" not in st.session_state:
        config = AppConfig()
        configure_logging(config)
        st.session_state.services = build_services(config)
    services: Services = st.session_state.services
    return services


def _init_state() -> None:
    st.session_state.setdefault("workspace_files", [])
    st.session_state.setdefault("page_entries", [])
    st.session_state.setdefault("selection", PageSelection())
    st.session_state.setdefault("split_names", {})
    st.session_state.setdefault("upload_token", 0)


def _render_messages(status: Status, messages: list[OperationMessage]) -> None:
    render = {Status.SUCCESS: st.success, Status.WARNING: st.warning, Status.ERROR: st.error}
    head, *rest = messages
    render[status](head.text)
    for message in rest:
        st.caption(f"- {message.text}")


def _reset_pages(services: Services) -> None:
    st.session_state.page_entries = services.workspace.build_page_entries(
        st.session_state.workspace_files
    )
    st.session_state.selection = PageSelection()
    st.session_state.split_names = {}


def _files_section(services: Services) -> None:
    config = services.config
    st.subheader("1. Choose PDFs", anchor=False)
    uploaded = st.file_uploader(
        (
            "Load one or more PDFs "
            f"(max {config.max_pdf_size_mb} MB each, "
            f"{config.max_batch_size_mb} MB total)"
        ),
        type=["pdf"],
        accept_multiple_files=True,
        key=f"workspace_upload_{st.session_state.upload_token}",
    )

    if st.button("Add Uploaded PDFs", type="primary"):
        try:
            files = [(item.name, item.getvalue()) for item in uploaded] if uploaded else []
            loaded = services.workspace.load_files(files)
            st.session_state.workspace_files = services.workspace.add_files(
                st.session_state.workspace_files, loaded
            )
            st.session_state.upload_token += 1
            _reset_pages(services)
            st.rerun()
        except Exception as exc:
            st.error(str(exc))

    workspace_files: list[SourceDocument] = st.session_state.workspace_files
    if not workspace_files:
        st.info("No PDFs loaded yet.")
        return

    for index, source in enumerate(workspace_files):
        name_col, up_col, down_col, remove_col = st.columns([6, 1, 1, 1])
        name_col.markdown(f"**{index + 1}. {source.name}** ({source.size_bytes / 1024:.0f} KB)")
        if up_col.button("Up", key=f"up_{source.source_id}", disabled=index == 0):
            st.session_state.workspace_files = services.workspace.move_file_up(
                workspace_files, source.source_id
            )
            _reset_pages(services)
            st.rerun()
        if down_col.button(
            "Down", key=f"down_{source.source_id}", disabled=index == len(workspace_files) - 1
        ):
            st.session_state.workspace_files = services.workspace.move_file_down(
                workspace_files, source.source_id
            )
            _reset_pages(services)
            st.rerun()
        if remove_col.button("Remove", key=f"remove_{source.source_id}"):
            new_files, _ = services.workspace.remove_file(
                workspace_files, st.session_state.page_entries, source.source_id
            )
            st.session_state.workspace_files = new_files
            _reset_pages(services)
            st.rerun()

    if st.button("Merge All Files", use_container_width=True):
        outcome = services.merge.merge_all(workspace_files)
        status, messages = services.merge.summarize(outcome)
        _render_messages(status, messages)
        if outcome.merged_pdf_bytes is not None:
            st.download_button(
                "Download Merged PDF",
                data=outcome.merged_pdf_bytes,
                file_name=config.merged_output_name,
                mime="application/pdf",
                type="primary",
            )


def _pages_section(services: Services) -> None:
    entries: list[PageEntry] = st.session_state.page_entries
    selection: PageSelection = st.session_state.selection
    st.subheader("2. Organize Pages", anchor=False)
    if not entries:
        st.info("Add readable PDFs to list their pages.")
        return

    page_ids = [entry.page_id for entry in entries]
    st.caption(
        f"{len(entries)} page(s), {len(selection)} selected. "
        "Use 'Select to here' to extend from the last selected page."
    )
    for index, entry in enumerate(entries):
        label_col, select_col, range_col, up_col, down_col = st.columns([5, 1, 1, 1, 1])
        marker = "[x]" if selection.is_selected(entry.page_id) else "[ ]"
        label_col.text(f"{marker} {index + 1}. {entry.source_name} - page {entry.page_number}")
        if select_col.button("Select", key=f"toggle_{entry.page_id}"):
            st.session_state.selection = selection.toggle(index, page_ids)
            st.rerun()
        if range_col.button("Select to here", key=f"range_{entry.page_id}"):
            st.session_state.selection = selection.extend_range_to(index, page_ids)
            st.rerun()
        if up_col.button("Up", key=f"page_up_{entry.page_id}", disabled=index == 0):
            st.session_state.page_entries = services.workspace.move_page(entries, index, index - 1)
            st.session_state.selection = selection.cleared()
            st.rerun()
        if down_col.button(
            "Down", key=f"page_down_{entry.page_id}", disabled=index == len(entries) - 1
        ):
            st.session_state.page_entries = services.workspace.move_page(entries, index, index + 1)
            st.session_state.selection = selection.cleared()
            st.rerun()

    all_col, delete_col, reset_col = st.columns(3)
    if all_col.button("Select / Deselect All", use_container_width=True):
        st.session_state.selection = selection.toggle_all(page_ids)
        st.rerun()
    if delete_col.button(
        "Delete Selected", use_container_width=True, disabled=len(selection) == 0
    ):
        st.session_state.page_entries = services.workspace.remove_pages(
            entries, selection.selected
        )
        st.session_state.selection = selection.cleared()
        st.rerun()
    if reset_col.button("Restore All Pages", use_container_width=True):
        _reset_pages(services)
        st.rerun()

    if st.button("Create PDF From Pages", type="primary", use_container_width=True):
        try:
            result = services.merge.merge_pages(
                st.session_state.workspace_files, [entry.ref for entry in entries]
            )
            st.success(f"Created a PDF with {result.merged_pages} page(s).")
            st.download_button(
                "Download Arranged PDF",
                data=result.output_pdf,
                file_name=result.output_name,
                mime="application/pdf",
            )
        except Exception as exc:
            st.error(str(exc))


def _split_section(services: Services) -> None:
    selection: PageSelection = st.session_state.selection
    selected = selection.selected_entries(st.session_state.page_entries)
    st.subheader("3. Split Selected Pages", anchor=False)
    if not selected:
        st.info("Select pages above to split them into separate files.")
        return

    names: dict[PageRef, str] = {**default_names(selected), **st.session_state.split_names}
    mode = st.radio(
        "Naming", options=["Custom", "Bulk prefix/suffix", "Sequential"], horizontal=True
    )
    if mode == "Bulk prefix/suffix":
        prefix_col, suffix_col = st.columns(2)
        prefix = prefix_col.text_input("Prefix", key="bulk_prefix")
        suffix = suffix_col.text_input("Suffix", key="bulk_suffix")
        if st.button("Apply Bulk Rename"):
            st.session_state.split_names = bulk_rename(selected, prefix, suffix)
            st.rerun()
    elif mode == "Sequential":
        base_col, start_col = st.columns(2)
        base_name = base_col.text_input("Base name", value="document", key="sequential_base")
        start = start_col.text_input("Start number", value="1", key="sequential_start")
        if st.button("Apply Sequential Rename"):
            st.session_state.split_names = sequential_rename(selected, base_name, start)
            st.rerun()

    for entry in selected:
        edited = st.text_input(
            f"{entry.source_name} - page {entry.page_number}",
            value=names[entry.ref],
            key=f"name_{entry.page_id}_{names[entry.ref]}",
        )
        names[entry.ref] = edited

    if st.button("Split & Package", type="primary", use_container_width=True):
        archive = services.split.split_to_archive(
            st.session_state.workspace_files, [entry.ref for entry in selected], names
        )
        if archive is None:
            st.warning("Nothing to package: none of the selected pages could be produced.")
            return
        archive_name, archive_bytes = archive
        st.download_button(
            "Download Split ZIP",
            data=archive_bytes,
            file_name=archive_name,
            mime="application/zip",
        )


def main() -> None:
    st.set_page_config(page_title="PDF Page Organizer", layout="wide")
    st.title("PDF Page Organizer", anchor=False)

    services = _init_services()
    _init_state()

    _files_section(services)
    st.divider()
    _pages_section(services)
    st.divider()
    _split_section(services)


if __name__ == "__main__":
    main()
