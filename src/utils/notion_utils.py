import json
import logging
from typing import Any, Dict, List
from utils.constants import NOTION_RICH_TEXT_LIMIT, NotionProperties

logger = logging.getLogger(__name__)


def chunk_text(text: str, limit: int = NOTION_RICH_TEXT_LIMIT) -> List[str]:
    return [text[i : i + limit] for i in range(0, len(text), limit)]


def _rich_text(text: str) -> List[Dict]:
    # Notion caps a single rich text object at 2000 characters
    return [{"type": "text", "text": {"content": chunk}} for chunk in chunk_text(text)]


def _plain_text(items: List[Dict]) -> str:
    return "".join(
        item.get("plain_text") or item.get("text", {}).get("content", "")
        for item in items or []
    )


def create_session_id_filter(session_id: str) -> Dict:
    return {
        "property": NotionProperties.SESSION_ID.value,
        "title": {"equals": session_id},
    }


def create_results_property(results: List[Dict[str, Any]]) -> Dict:
    return {
        NotionProperties.RESULTS.value: {
            "rich_text": _rich_text(json.dumps(results, ensure_ascii=False))
        }
    }


def create_session_properties(record: Dict[str, Any]) -> Dict:
    props: Dict = {
        NotionProperties.SESSION_ID.value: {"title": _rich_text(record["id"])},
        NotionProperties.CREATED_AT.value: {"date": {"start": record["createdAt"]}},
    }
    props.update(create_results_property(record.get("results") or []))
    return props


def page_to_session_record(page: Dict[str, Any]) -> Dict[str, Any]:
    props = page.get("properties", {})
    session_id = _plain_text(props.get(NotionProperties.SESSION_ID.value, {}).get("title"))
    created_at = (props.get(NotionProperties.CREATED_AT.value, {}).get("date") or {}).get(
        "start"
    )
    results_text = _plain_text(
        props.get(NotionProperties.RESULTS.value, {}).get("rich_text")
    )
    results: Any = []
    if results_text:
        try:
            results = json.loads(results_text)
        except json.JSONDecodeError as e:
            logger.warning(f"Results of session {session_id} are not valid JSON: {e}")
            results = []
    return {"id": session_id, "createdAt": created_at, "results": results}
