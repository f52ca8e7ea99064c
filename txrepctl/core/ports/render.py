from typing import Any, Protocol


class Renderer(Protocol):
    """Turns a transaction document into printable text."""

    def render(self, document: dict[str, Any]) -> str:
        ...
