import asyncio
import json
import threading
import pytest
from unittest.mock import AsyncMock, MagicMock

from models.models import LatLng, Popup, ResultType, TaskResult
from storage.errors import BackendUnavailableError
from storage.local_backend import LocalSessionBackend
from storage.result_store import ResultStore, build_task_result, parse_timestamp
from utils.local_storage import LocalStorage
from test_data import ISLAND, LEGACY_SESSIONS, POPUP_A, POPUP_B, TRIANGLE


@pytest.fixture
def local_storage(tmp_path):
    return LocalStorage(tmp_path / "local_storage.json")


@pytest.fixture
def store(local_storage):
    return ResultStore(LocalSessionBackend(local_storage))


def test_save_and_read_polygon(store):
    assert asyncio.run(store.save_task_result("sid", 1, [TRIANGLE], "polygon"))
    result = asyncio.run(store.get_task_results("sid", 1))
    assert result == TaskResult(task_id=1, type=ResultType.POLYGON, polygons=[TRIANGLE])


def test_single_ring_payload_is_wrapped(store):
    asyncio.run(store.save_task_result("sid", 1, TRIANGLE, ResultType.POLYGON))
    assert asyncio.run(store.get_task_results("sid", 1)).polygons == [TRIANGLE]


def test_multi_ring_polygon(store):
    asyncio.run(store.save_task_result("sid", 5, [TRIANGLE, ISLAND], "polygon"))
    assert asyncio.run(store.get_task_results("sid", 5)).polygons == [TRIANGLE, ISLAND]


def test_resaving_popups_replaces_previous_result(store):
    asyncio.run(store.save_task_result("sid", 2, [POPUP_A], "popup"))
    asyncio.run(store.save_task_result("sid", 2, [POPUP_A, POPUP_B], "popup"))

    result = asyncio.run(store.get_task_results("sid", 2))
    assert result.popups == [
        Popup(position=LatLng(lat=55.82, lng=37.34), content="A"),
        Popup(position=LatLng(lat=55.83, lng=37.35), content="B"),
    ]
    (session,) = asyncio.run(store.get_all_sessions())
    assert [r.task_id for r in session.results] == [2]


def test_repeated_saves_keep_one_entry_with_last_payload(store):
    payloads = [[TRIANGLE], [ISLAND], [TRIANGLE, ISLAND], [ISLAND]]
    asyncio.run(store.save_task_result("sid", 3, [TRIANGLE], "polygon"))
    asyncio.run(store.save_task_result("sid", 1, [POPUP_A], "popup"))
    for payload in payloads:
        asyncio.run(store.save_task_result("sid", 1, payload, "polygon"))

    (session,) = asyncio.run(store.get_all_sessions())
    assert [r.task_id for r in session.results] == [3, 1]
    assert session.find_result(1).polygons == [ISLAND]
    assert session.find_result(1).type == ResultType.POLYGON
    assert [r.task_id for r in session.sorted_results()] == [1, 3]


def test_saving_keeps_created_at(store):
    asyncio.run(store.save_task_result("sid", 1, [TRIANGLE], "polygon"))
    (first,) = asyncio.run(store.get_all_sessions())
    asyncio.run(store.save_task_result("sid", 2, [POPUP_A], "popup"))
    (second,) = asyncio.run(store.get_all_sessions())
    assert first.created_at == second.created_at
    assert parse_timestamp(first.created_at) is not None


def test_absent_session_and_absent_task_look_the_same(store):
    assert asyncio.run(store.get_task_results("nobody", 1)) is None
    asyncio.run(store.save_task_result("sid", 1, [TRIANGLE], "polygon"))
    assert asyncio.run(store.get_task_results("sid", 2)) is None


def test_empty_payload_is_stored(store):
    asyncio.run(store.save_task_result("sid", 2, [], "popup"))
    result = asyncio.run(store.get_task_results("sid", 2))
    assert result is not None
    assert result.popups == []


def test_sessions_are_isolated(store):
    asyncio.run(store.save_task_result("a", 1, [TRIANGLE], "polygon"))
    asyncio.run(store.save_task_result("b", 1, [ISLAND], "polygon"))
    assert asyncio.run(store.get_task_results("a", 1)).polygons == [TRIANGLE]
    assert asyncio.run(store.get_task_results("b", 1)).polygons == [ISLAND]


def test_delete_session(store):
    asyncio.run(store.save_task_result("a", 1, [TRIANGLE], "polygon"))
    asyncio.run(store.save_task_result("b", 1, [ISLAND], "polygon"))

    assert asyncio.run(store.delete_session("a"))
    assert [s.id for s in asyncio.run(store.get_all_sessions())] == ["b"]

    assert asyncio.run(store.delete_session("missing"))
    assert [s.id for s in asyncio.run(store.get_all_sessions())] == ["b"]


def test_empty_backend_lists_nothing(store):
    assert asyncio.run(store.get_all_sessions()) == []


def test_legacy_records_are_backfilled_and_sorted(store, local_storage):
    local_storage.set_item("sessions", json.dumps(LEGACY_SESSIONS))

    sessions = asyncio.run(store.get_all_sessions())
    assert [s.id for s in sessions] == ["legacy-2", "legacy-1"]
    assert parse_timestamp(sessions[0].created_at) is not None

    legacy = sessions[1]
    assert legacy.find_result(1).polygons == [[(55.8, 37.3), (55.81, 37.31), (55.82, 37.29)]]
    assert legacy.find_result(2).popups[0].position == LatLng(lat=55.82, lng=37.34)


def test_unparseable_blob_reads_as_empty_and_is_overwritten(store, local_storage):
    local_storage.set_item("sessions", "{definitely not json")
    assert asyncio.run(store.get_all_sessions()) == []
    assert asyncio.run(store.get_task_results("sid", 1)) is None

    assert asyncio.run(store.save_task_result("sid", 1, [TRIANGLE], "polygon"))
    assert [s.id for s in asyncio.run(store.get_all_sessions())] == ["sid"]


def test_malformed_session_record_is_skipped(store, local_storage):
    local_storage.set_item(
        "sessions",
        json.dumps([{"results": []}, {"id": "ok", "createdAt": "2024-10-01T00:00:00Z"}]),
    )
    assert [s.id for s in asyncio.run(store.get_all_sessions())] == ["ok"]


@pytest.mark.parametrize(
    "task_id, result_type",
    [(0, "polygon"), (-1, "popup"), (True, "polygon"), (1, "circle")],
)
def test_invalid_arguments_raise(store, task_id, result_type):
    with pytest.raises(ValueError):
        asyncio.run(store.save_task_result("sid", task_id, [TRIANGLE], result_type))


def test_build_task_result_accepts_popup_models():
    popup = Popup(position=LatLng(lat=1, lng=2), content="x")
    assert build_task_result(4, [popup], "popup").popups == [popup]


def test_build_task_result_wraps_a_ring_of_latlng_points():
    ring = [LatLng(lat=lat, lng=lng) for lat, lng in TRIANGLE]
    assert build_task_result(1, ring, "polygon").polygons == [TRIANGLE]


def _failing_backend(raise_on_write_failure: bool):
    backend = MagicMock()
    backend.raise_on_write_failure = raise_on_write_failure
    error = BackendUnavailableError("offline")
    backend.get_session = AsyncMock(side_effect=error)
    backend.put_session = AsyncMock(side_effect=error)
    backend.list_sessions = AsyncMock(side_effect=error)
    backend.delete_session = AsyncMock(side_effect=error)
    return backend


def test_reads_degrade_when_backend_is_down():
    store = ResultStore(_failing_backend(raise_on_write_failure=True))
    assert asyncio.run(store.get_task_results("sid", 1)) is None
    assert asyncio.run(store.get_all_sessions()) == []
    assert asyncio.run(store.delete_session("sid")) is False


def test_save_failure_is_reported():
    store = ResultStore(_failing_backend(raise_on_write_failure=False))
    assert asyncio.run(store.save_task_result("sid", 1, [TRIANGLE], "polygon")) is False


def test_save_failure_is_raised_when_backend_asks():
    store = ResultStore(_failing_backend(raise_on_write_failure=True))
    with pytest.raises(BackendUnavailableError):
        asyncio.run(store.save_task_result("sid", 1, [TRIANGLE], "polygon"))


def test_local_storage_io_error_is_backend_unavailable():
    local_storage = MagicMock()
    local_storage.get_item.side_effect = OSError("disk gone")
    store = ResultStore(LocalSessionBackend(local_storage))
    assert asyncio.run(store.get_all_sessions()) == []
    assert asyncio.run(store.save_task_result("sid", 1, [TRIANGLE], "polygon")) is False


def test_concurrent_saves_from_different_sessions_are_all_kept(local_storage):
    # each browser session gets its own store over the shared file
    workers = 8
    barrier = threading.Barrier(workers)
    outcomes = []

    def save(i):
        store = ResultStore(LocalSessionBackend(LocalStorage(local_storage.path)))
        barrier.wait()
        outcomes.append(asyncio.run(store.save_task_result(f"s{i}", 1, [TRIANGLE], "polygon")))

    threads = [threading.Thread(target=save, args=(i,)) for i in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes == [True] * workers
    sessions = asyncio.run(ResultStore(LocalSessionBackend(local_storage)).get_all_sessions())
    assert sorted(s.id for s in sessions) == sorted(f"s{i}" for i in range(workers))
