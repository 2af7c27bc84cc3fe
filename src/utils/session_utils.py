import math
from datetime import datetime
from typing import Any, Dict, List, Optional
from models.models import LatLng, Popup, ResultType, Ring, Session, SessionStats, TaskResult
from utils.constants import Label


def compute_session_stats(results: List[TaskResult], total_tasks: int) -> SessionStats:
    completed = len(results)
    return SessionStats(
        progress=round(completed / total_tasks * 100) if total_tasks else 0,
        completed=completed,
        total=total_tasks,
        polygons=sum(1 for r in results if r.type == ResultType.POLYGON),
        popups=sum(1 for r in results if r.type == ResultType.POPUP),
    )


def filter_sessions(sessions: List[Session], search_term: str) -> List[Session]:
    term = (search_term or "").strip().lower()
    if not term:
        return sessions
    return [s for s in sessions if term in s.id.lower()]


def format_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%d %B %Y, %H:%M")
    except ValueError:
        return value


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def result_to_polygon_rows(result: Optional[TaskResult]) -> List[Dict[str, Any]]:
    if result is None or result.type != ResultType.POLYGON:
        return []
    return [
        {Label.RING.value: ring_no, Label.LATITUDE.value: lat, Label.LONGITUDE.value: lng}
        for ring_no, ring in enumerate(result.polygons or [], start=1)
        for lat, lng in ring
    ]


def result_to_popup_rows(result: Optional[TaskResult]) -> List[Dict[str, Any]]:
    if result is None or result.type != ResultType.POPUP:
        return []
    return [
        {
            Label.LATITUDE.value: p.position.lat,
            Label.LONGITUDE.value: p.position.lng,
            Label.CONTENT.value: p.content,
        }
        for p in result.popups or []
    ]


def polygon_rows_to_rings(rows: List[Dict[str, Any]]) -> List[Ring]:
    """Group editor rows by ring number, dropping rows without coordinates."""
    rings: Dict[int, Ring] = {}
    for row in rows:
        lat, lng = row.get(Label.LATITUDE.value), row.get(Label.LONGITUDE.value)
        if _is_blank(lat) or _is_blank(lng):
            continue
        ring_no = row.get(Label.RING.value)
        ring_no = 1 if _is_blank(ring_no) else int(ring_no)
        rings.setdefault(ring_no, []).append((float(lat), float(lng)))
    return [rings[k] for k in sorted(rings)]


def popup_rows_to_popups(rows: List[Dict[str, Any]]) -> List[Popup]:
    popups = []
    for row in rows:
        lat, lng = row.get(Label.LATITUDE.value), row.get(Label.LONGITUDE.value)
        if _is_blank(lat) or _is_blank(lng):
            continue
        content = row.get(Label.CONTENT.value)
        popups.append(
            Popup(
                position=LatLng(lat=float(lat), lng=float(lng)),
                content="" if _is_blank(content) else str(content).strip(),
            )
        )
    return popups


def validate_submission(task_type: ResultType, payload: List[Any]) -> Optional[str]:
    """Return an error message when the payload must not be submitted."""
    if task_type == ResultType.POLYGON:
        if not payload:
            return "Please draw an area on the map before submitting."
        if any(len(ring) < 3 for ring in payload):
            return "Every ring needs at least three vertices."
        return None
    if not payload:
        return "Please place at least one marker on the map before submitting."
    if any(not p.content for p in payload):
        return "Every marker needs a description."
    return None
