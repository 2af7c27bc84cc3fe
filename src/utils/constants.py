from enum import Enum
from models.models import ResultType, Task

# Krasnogorsk
DEFAULT_MAP_CENTER = (55.8214, 37.3388)
DEFAULT_MAP_ZOOM = 12

NOTION_RICH_TEXT_LIMIT = 2000

TASKS = [
    Task(
        id=1,
        instruction="Outline the central park of Krasnogorsk as a polygon.",
        type=ResultType.POLYGON,
    ),
    Task(
        id=2,
        instruction="Place markers on two railway stations and label each with its name.",
        type=ResultType.POPUP,
    ),
    Task(
        id=3,
        instruction="Outline the residential block around the city administration building.",
        type=ResultType.POLYGON,
    ),
    Task(
        id=4,
        instruction="Mark three schools and describe each one in a short note.",
        type=ResultType.POPUP,
    ),
    Task(
        id=5,
        instruction="Outline the water body nearest to the city centre. Islands may be drawn as extra rings.",
        type=ResultType.POLYGON,
    ),
    Task(
        id=6,
        instruction="Mark a place you would recommend to a visitor and explain why.",
        type=ResultType.POPUP,
    ),
]

class StorageKeys(Enum):
    SESSIONS = "sessions"
    CURRENT_SESSION_ID = "currentSessionId"


class StorageBackends(Enum):
    LOCAL = "local"
    NOTION = "notion"


class NotionProperties(Enum):
    SESSION_ID = "Session ID"
    CREATED_AT = "Created At"
    RESULTS = "Results"


class Label(Enum):
    SUBMIT_POLYGON = "Submit drawing"
    SUBMIT_POPUPS = "Submit markers"
    RING = "Ring"
    LATITUDE = "Latitude"
    LONGITUDE = "Longitude"
    CONTENT = "Content"
    SEARCH_SESSIONS = "Search by session ID..."


class Pages(Enum):
    TASKS = {
        "key": "tasks",
        "title": ":material/map: Tasks",
    }
    GALLERY = {
        "key": "gallery",
        "title": ":material/photo_library: Gallery",
    }
