from __future__ import annotations


class GraphError(Exception):
    """Base class for recoverable location graph errors."""


class DuplicateNode(GraphError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Location {name!r} already exists")
        self.name = name


class UnknownNode(GraphError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown location: {name}")
        self.name = name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class InvalidWeight(GraphError, ValueError):
    def __init__(self, weight: object) -> None:
        super().__init__(f"Route weight must be a non-negative integer, got {weight!r}")
        self.weight = weight
