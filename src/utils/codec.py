"""Conversion between in-memory geometry and the persisted session layout.

Polygons travel as a JSON text blob of ``[[[lat, lng], ...], ...]`` so that
document stores without nested-array support can hold them. Popup positions
are reduced to ``[lat, lng]`` pairs and rebuilt into ``LatLng`` on the way back.

For any ring list or popup list ``x``: ``decode(encode(x)) == x``.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Sequence
from pydantic import ValidationError
from models.models import Coordinate, LatLng, Popup, ResultType, Ring, Session, TaskResult

logger = logging.getLogger(__name__)


class CodecError(ValueError):
    """Stored data does not match the expected session layout."""


def to_coordinate(point: Any) -> Coordinate:
    """Accepts ``[lat, lng]``, ``(lat, lng)``, ``{"lat", "lng"}`` or ``LatLng``."""
    if isinstance(point, LatLng):
        return point.as_pair()
    try:
        if isinstance(point, dict):
            return (float(point["lat"]), float(point["lng"]))
        if isinstance(point, (list, tuple)) and len(point) >= 2:
            return (float(point[0]), float(point[1]))
    except (KeyError, TypeError, ValueError) as e:
        raise CodecError(f"Invalid coordinate: {point!r}") from e
    raise CodecError(f"Invalid coordinate: {point!r}")


def to_latlng(point: Any) -> LatLng:
    lat, lng = to_coordinate(point)
    return LatLng(lat=lat, lng=lng)


def normalize_rings(rings: Iterable[Sequence[Any]]) -> List[Ring]:
    if isinstance(rings, (str, bytes)) or not isinstance(rings, Iterable):
        raise CodecError("Polygon rings must be a list")
    out: List[Ring] = []
    for ring in rings:
        if isinstance(ring, (str, bytes, dict)) or not isinstance(ring, Iterable):
            raise CodecError(f"Invalid ring: {ring!r}")
        out.append([to_coordinate(p) for p in ring])
    return out


def encode_polygons(rings: Iterable[Sequence[Any]]) -> str:
    return json.dumps([[list(p) for p in ring] for ring in normalize_rings(rings)])


def decode_polygons(blob: Any) -> List[Ring]:
    """Decode a JSON text blob, or an already nested list, into rings."""
    if isinstance(blob, str):
        try:
            blob = json.loads(blob)
        except json.JSONDecodeError as e:
            raise CodecError("Polygon blob is not valid JSON") from e
    if not isinstance(blob, list):
        raise CodecError("Polygon blob must hold a list of rings")
    return normalize_rings(blob)


def encode_popups(popups: Iterable[Any]) -> List[Dict[str, Any]]:
    encoded = []
    for popup in popups:
        if isinstance(popup, Popup):
            position, content = popup.position, popup.content
        elif isinstance(popup, dict):
            position, content = popup.get("position"), popup.get("content")
        else:
            raise CodecError(f"Invalid popup: {popup!r}")
        if content is None:
            raise CodecError("Popup content is required")
        encoded.append({"position": list(to_coordinate(position)), "content": str(content)})
    return encoded


def decode_popups(raw: Any) -> List[Popup]:
    if not isinstance(raw, list):
        raise CodecError("Popups must be a list")
    popups = []
    for item in raw:
        if not isinstance(item, dict) or item.get("content") is None:
            raise CodecError(f"Invalid popup: {item!r}")
        popups.append(
            Popup(position=to_latlng(item.get("position")), content=str(item["content"]))
        )
    return popups


def encode_result(result: TaskResult) -> Dict[str, Any]:
    data: Dict[str, Any] = {"taskId": result.task_id, "type": result.type.value}
    if result.type == ResultType.POLYGON:
        data["polygons"] = encode_polygons(result.polygons or [])
    else:
        data["popups"] = encode_popups(result.popups or [])
    return data


def decode_result(raw: Any) -> TaskResult:
    if not isinstance(raw, dict):
        raise CodecError(f"Invalid task result: {raw!r}")
    try:
        result_type = ResultType(raw.get("type"))
    except ValueError as e:
        raise CodecError(f"Unknown result type: {raw.get('type')!r}") from e

    if result_type == ResultType.POLYGON:
        if "polygons" in raw:
            payload = {"polygons": decode_polygons(raw["polygons"])}
        elif "polygon" in raw:
            # single-ring layout written by earlier versions
            payload = {"polygons": normalize_rings([raw["polygon"]])}
        else:
            raise CodecError("Polygon result without geometry")
    else:
        payload = {"popups": decode_popups(raw.get("popups"))}

    try:
        return TaskResult(task_id=raw.get("taskId"), type=result_type, **payload)
    except ValidationError as e:
        raise CodecError(f"Invalid task result: {e}") from e


def encode_session(session: Session) -> Dict[str, Any]:
    return {
        "id": session.id,
        "createdAt": session.created_at,
        "results": [encode_result(r) for r in session.results],
    }


def decode_session(raw: Any, skip_invalid_results: bool = True) -> Session:
    """Decode a stored session record.

    With ``skip_invalid_results`` a malformed result is logged and dropped
    instead of failing the whole session.
    """
    if not isinstance(raw, dict) or not raw.get("id"):
        raise CodecError(f"Invalid session record: {raw!r}")
    raw_results = raw.get("results") or []
    if not isinstance(raw_results, list):
        raise CodecError(f"Session {raw['id']} results must be a list")

    results: List[TaskResult] = []
    for item in raw_results:
        try:
            results.append(decode_result(item))
        except CodecError as e:
            if not skip_invalid_results:
                raise
            logger.warning(f"Dropping malformed result in session {raw['id']}: {e}")

    return Session(id=str(raw["id"]), created_at=str(raw.get("createdAt") or ""), results=results)
