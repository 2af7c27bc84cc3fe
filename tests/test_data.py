TRIANGLE = [(55.80, 37.30), (55.81, 37.31), (55.82, 37.29)]

ISLAND = [(55.805, 37.302), (55.806, 37.303), (55.807, 37.301)]

POPUP_A = {"position": (55.82, 37.34), "content": "A"}

POPUP_B = {"position": (55.83, 37.35), "content": "B"}

# Records as written by the browser build of the tutorial
LEGACY_SESSIONS = [
    {
        "id": "legacy-1",
        "createdAt": "2024-09-30T08:15:00.000Z",
        "results": [
            {
                "taskId": 1,
                "type": "polygon",
                "polygon": [[55.8, 37.3], [55.81, 37.31], [55.82, 37.29]],
            },
            {
                "taskId": 2,
                "type": "popup",
                "popups": [
                    {"position": {"lat": 55.82, "lng": 37.34}, "content": "Station"}
                ],
            },
        ],
    },
    {
        "id": "legacy-2",
        "results": [],
    },
]


def notion_page(page_id: str, session_id: str, created_at: str, results_text: str):
    """A sessions database page as returned by the Notion API."""
    return {
        "id": page_id,
        "object": "page",
        "properties": {
            "Session ID": {
                "type": "title",
                "title": [{"type": "text", "plain_text": session_id}],
            },
            "Created At": {"type": "date", "date": {"start": created_at}},
            "Results": {
                "type": "rich_text",
                "rich_text": [{"type": "text", "plain_text": results_text}],
            },
        },
    }
