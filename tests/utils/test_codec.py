import json
import pytest

from models.models import LatLng, Popup, ResultType, Session, TaskResult
from utils.codec import (
    CodecError,
    decode_polygons,
    decode_popups,
    decode_result,
    decode_session,
    encode_polygons,
    encode_popups,
    encode_result,
    encode_session,
    to_coordinate,
)

RINGS = [
    [(55.80, 37.30), (55.81, 37.31), (55.82, 37.29)],
    [(55.805, 37.302), (55.806, 37.303), (55.807, 37.301)],
]
POPUPS = [
    Popup(position=LatLng(lat=55.82, lng=37.34), content="A"),
    Popup(position=LatLng(lat=55.83, lng=37.35), content="B"),
]


def test_polygons_encode_to_json_text():
    blob = encode_polygons(RINGS[:1])
    assert isinstance(blob, str)
    assert json.loads(blob) == [[[55.80, 37.30], [55.81, 37.31], [55.82, 37.29]]]


def test_polygons_round_trip():
    assert decode_polygons(encode_polygons(RINGS)) == RINGS


def test_popups_round_trip_rebuilds_points():
    encoded = encode_popups(POPUPS)
    assert encoded[0] == {"position": [55.82, 37.34], "content": "A"}
    decoded = decode_popups(encoded)
    assert decoded == POPUPS
    assert isinstance(decoded[0].position, LatLng)


def test_empty_payloads_round_trip():
    assert decode_polygons(encode_polygons([])) == []
    assert decode_popups(encode_popups([])) == []


def test_decode_polygons_accepts_native_lists():
    assert decode_polygons([[[55.8, 37.3], [55.81, 37.31], [55.82, 37.29]]]) == [
        [(55.8, 37.3), (55.81, 37.31), (55.82, 37.29)]
    ]


def test_decode_polygons_rejects_garbage():
    with pytest.raises(CodecError):
        decode_polygons("not json")
    with pytest.raises(CodecError):
        decode_polygons('{"a": 1}')
    with pytest.raises(CodecError):
        decode_polygons([[["x", 1]]])


def test_to_coordinate_accepts_latlng_objects():
    assert to_coordinate({"lat": 55.8, "lng": 37.3}) == (55.8, 37.3)
    assert to_coordinate(LatLng(lat=1, lng=2)) == (1.0, 2.0)
    with pytest.raises(CodecError):
        to_coordinate({"lat": 1})


def test_result_round_trip():
    polygon = TaskResult(task_id=1, type=ResultType.POLYGON, polygons=RINGS)
    popup = TaskResult(task_id=2, type=ResultType.POPUP, popups=POPUPS)
    assert decode_result(encode_result(polygon)) == polygon
    assert decode_result(encode_result(popup)) == popup
    assert encode_result(polygon)["taskId"] == 1


def test_decode_result_reads_single_ring_layout():
    raw = {
        "taskId": 3,
        "type": "polygon",
        "polygon": [[55.8, 37.3], [55.81, 37.31], [55.82, 37.29]],
    }
    result = decode_result(raw)
    assert result.polygons == [[(55.8, 37.3), (55.81, 37.31), (55.82, 37.29)]]


def test_decode_result_reads_latlng_positions():
    raw = {
        "taskId": 2,
        "type": "popup",
        "popups": [{"position": {"lat": 55.82, "lng": 37.34}, "content": "A"}],
    }
    assert decode_result(raw).popups == POPUPS[:1]


@pytest.mark.parametrize(
    "raw",
    [
        {"taskId": 1, "type": "circle", "polygons": "[]"},
        {"taskId": 0, "type": "polygon", "polygons": "[]"},
        {"type": "polygon", "polygons": "[]"},
        {"taskId": 1, "type": "polygon"},
        {"taskId": 1, "type": "popup", "popups": [{"position": [1, 2]}]},
        "nope",
    ],
)
def test_decode_result_rejects_malformed(raw):
    with pytest.raises(CodecError):
        decode_result(raw)


def test_session_round_trip():
    session = Session(
        id="abc",
        created_at="2024-10-01T12:00:00+00:00",
        results=[
            TaskResult(task_id=1, type=ResultType.POLYGON, polygons=RINGS),
            TaskResult(task_id=2, type=ResultType.POPUP, popups=POPUPS),
        ],
    )
    encoded = encode_session(session)
    assert encoded["createdAt"] == "2024-10-01T12:00:00+00:00"
    assert decode_session(encoded) == session


def test_decode_session_drops_malformed_results():
    raw = {
        "id": "abc",
        "createdAt": "2024-10-01T12:00:00+00:00",
        "results": [
            {"taskId": 1, "type": "polygon", "polygons": "broken"},
            {"taskId": 2, "type": "popup", "popups": encode_popups(POPUPS)},
        ],
    }
    session = decode_session(raw)
    assert [r.task_id for r in session.results] == [2]
    with pytest.raises(CodecError):
        decode_session(raw, skip_invalid_results=False)


def test_decode_session_requires_id():
    with pytest.raises(CodecError):
        decode_session({"createdAt": "2024-10-01T12:00:00+00:00", "results": []})
