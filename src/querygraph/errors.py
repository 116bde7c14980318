from __future__ import annotations

from typing import Iterable


class QuerygraphError(Exception):
    """Base class for build-configuration failures raised during apply."""


class ConfigError(QuerygraphError):
    pass


class UnknownBackend(QuerygraphError):
    def __init__(self, names: Iterable[str]):
        self.names = sorted(set(names))
        super().__init__("No task template for enabled backend(s): " + ", ".join(self.names))


class InvalidOutputPath(QuerygraphError):
    def __init__(self, path: object, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid output directory {path!r}: {reason}")


class GraphError(QuerygraphError):
    pass


class DuplicateTask(GraphError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Task already defined: {name}")


class MissingPredecessor(GraphError):
    def __init__(self, task: str, missing: str):
        self.task = task
        self.missing = missing
        super().__init__(f"Task {task} depends on unknown task {missing}")


class CycleDetected(GraphError):
    def __init__(self, names: Iterable[str]):
        self.names = sorted(names)
        super().__init__("Cycle detected in DAG among: " + ", ".join(self.names))
