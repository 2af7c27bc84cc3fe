from abc import ABC, abstractmethod


class Page(ABC):
    """Abstract base class for tutorial pages."""

    title: str = ""

    @abstractmethod
    def render(self):
        pass
