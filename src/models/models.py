from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

Coordinate = Tuple[float, float]
Ring = List[Coordinate]


class ResultType(str, Enum):
    POLYGON = "polygon"
    POPUP = "popup"


class LatLng(BaseModel):
    model_config = ConfigDict(frozen=True)
    lat: float
    lng: float

    def as_pair(self) -> Coordinate:
        return (self.lat, self.lng)


class Popup(BaseModel):
    position: LatLng
    content: str


class TaskResult(BaseModel):
    task_id: int = Field(ge=1)
    type: ResultType
    polygons: Optional[List[Ring]] = None
    popups: Optional[List[Popup]] = None


class Session(BaseModel):
    id: str
    created_at: str
    results: List[TaskResult] = Field(default_factory=list)

    def sorted_results(self) -> List[TaskResult]:
        return sorted(self.results, key=lambda r: r.task_id)

    def find_result(self, task_id: int) -> Optional[TaskResult]:
        return next((r for r in self.results if r.task_id == task_id), None)


class Task(BaseModel):
    id: int
    instruction: str
    type: ResultType


class SessionStats(BaseModel):
    progress: int
    completed: int
    total: int
    polygons: int
    popups: int
