import threading

import pytest

from pdf_organizer.domain.errors import EngineUnavailableError, SourceLoadError
from pdf_organizer.services.document_cache import DocumentHandleCache


@pytest.mark.unit
def test_get_handle_parses_once_per_identity(adapter, alpha) -> None:
    calls: list[int] = []

    def loader(content: bytes):
        calls.append(len(content))
        return adapter.open_document(content)

    with DocumentHandleCache(adapter) as cache:
        first = cache.get_handle(alpha, loader)
        second = cache.get_handle(alpha, loader)

        assert first is second
        assert first.page_count == 3
        assert first.source_name == "alpha.pdf"
        assert len(calls) == 1
        assert alpha.source_id in cache


@pytest.mark.unit
def test_failed_load_is_not_cached_and_names_source(adapter, corrupt) -> None:
    cache = DocumentHandleCache(adapter)
    with pytest.raises(SourceLoadError) as excinfo:
        cache.get_handle(corrupt)
    assert excinfo.value.source_name == "broken.pdf"
    assert corrupt.source_id not in cache
    assert len(cache) == 0


@pytest.mark.unit
def test_encrypted_source_opens(adapter, encrypted) -> None:
    cache = DocumentHandleCache(adapter)
    assert cache.get_handle(encrypted).page_count == 2
    cache.clear()


@pytest.mark.unit
def test_evict_and_clear(adapter, alpha, beta) -> None:
    cache = DocumentHandleCache(adapter)
    cache.get_handle(alpha)
    cache.get_handle(beta)

    assert cache.evict(alpha.source_id)
    assert not cache.evict(alpha.source_id)
    assert alpha.source_id not in cache

    cache.clear()
    assert len(cache) == 0


@pytest.mark.unit
def test_concurrent_requests_share_one_parse(adapter, alpha) -> None:
    calls: list[int] = []
    gate = threading.Event()

    def slow_loader(content: bytes):
        calls.append(1)
        gate.wait(timeout=2)
        return adapter.open_document(content)

    cache = DocumentHandleCache(adapter)
    handles = []
    threads = [
        threading.Thread(target=lambda: handles.append(cache.get_handle(alpha, slow_loader)))
        for _ in range(4)
    ]
    for thread in threads:
        thread.start()
    gate.set()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert len({id(handle) for handle in handles}) == 1
    cache.clear()


@pytest.mark.unit
def test_missing_engine_raises(alpha) -> None:
    cache = DocumentHandleCache(None)
    with pytest.raises(EngineUnavailableError):
        cache.get_handle(alpha)


@pytest.mark.unit
def test_evict_waits_for_in_flight_load_and_keeps_lock(adapter, alpha) -> None:
    loading = threading.Event()
    release = threading.Event()
    calls: list[int] = []

    def slow_loader(content: bytes):
        calls.append(1)
        loading.set()
        release.wait(timeout=2)
        return adapter.open_document(content)

    cache = DocumentHandleCache(adapter)
    lock_before = cache._lock_for(alpha.source_id)
    loader_thread = threading.Thread(target=lambda: cache.get_handle(alpha, slow_loader))
    loader_thread.start()
    loading.wait(timeout=2)

    evicted: list[bool] = []
    evict_thread = threading.Thread(target=lambda: evicted.append(cache.evict(alpha.source_id)))
    evict_thread.start()
    evict_thread.join(timeout=0.2)
    assert evict_thread.is_alive()

    release.set()
    loader_thread.join()
    evict_thread.join()

    assert evicted == [True]
    assert alpha.source_id not in cache
    assert cache._lock_for(alpha.source_id) is lock_before
    assert len(calls) == 1
