"""In-memory host build session.

Holds what a build engine would own: the task registry, extra source roots,
declared dependencies and the record of which plugins were already applied.
Registrations arrive through `commit`, one whole apply at a time.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .graph import TaskDefinition, TaskGraph
from .logging import get_logger


CLEAN_TASK = "clean"
COMPILE_MAIN_TASK = "compileMain"
COMPILE_CONFIGURATION = "compile"

log = get_logger("querygraph.host")


def _clean(params: dict) -> None:
    log.info("Clean build outputs")


def _compile_main(params: dict) -> None:
    log.info("Compile main sources")


def base_tasks() -> list[TaskDefinition]:
    """Lifecycle tasks every session needs for plugins to hook into."""
    return [
        TaskDefinition(CLEAN_TASK, action=_clean, group="build", description="Deletes build outputs."),
        TaskDefinition(
            COMPILE_MAIN_TASK,
            action=_compile_main,
            group="build",
            description="Compiles main sources.",
        ),
    ]


class ApplicationGuard:
    """Remembers which plugins a session has already applied."""

    def __init__(self):
        self._applied: set[str] = set()

    def is_applied(self, plugin_id: str) -> bool:
        return plugin_id in self._applied

    def mark(self, plugin_id: str) -> None:
        self._applied.add(plugin_id)

    def clear(self) -> None:
        self._applied.clear()


@dataclass(frozen=True)
class Dependency:
    configuration: str
    coordinate: str


@dataclass
class Registration:
    """Everything one apply wants to add to a session, staged before commit."""

    graph: TaskGraph
    source_roots: list[Path]
    dependencies: list[Dependency]


class HostSession:
    def __init__(self, project_dir: str | Path = "."):
        self.project_dir = Path(project_dir)
        self.graph = TaskGraph()
        self.source_roots: list[Path] = []
        self.dependencies: list[Dependency] = []
        self.guard = ApplicationGuard()
        self.lock = threading.RLock()

    def apply_base(self) -> None:
        with self.lock:
            for t in base_tasks():
                if t.name not in self.graph:
                    self.graph.add(t)

    def register_task(self, task: TaskDefinition) -> None:
        """Direct registration, as another plugin would do it."""
        with self.lock:
            staged = self.graph.copy()
            staged.add(task)
            staged.validate()
            self.graph = staged

    def commit(self, registration: Registration, plugin_id: str | None = None) -> None:
        with self.lock:
            registration.graph.validate()
            self.graph = registration.graph
            for root in registration.source_roots:
                if root not in self.source_roots:
                    self.source_roots.append(root)
            for dep in registration.dependencies:
                if dep not in self.dependencies:
                    self.dependencies.append(dep)
            if plugin_id:
                self.guard.mark(plugin_id)

    def dependency_coordinates(self, configuration: str = COMPILE_CONFIGURATION) -> list[str]:
        return [d.coordinate for d in self.dependencies if d.configuration == configuration]

    def close(self) -> None:
        with self.lock:
            self.guard.clear()
            self.graph = TaskGraph()
            self.source_roots = []
            self.dependencies = []

    def describe(self) -> Iterable[str]:
        for name in self.graph.order():
            preds = self.graph.predecessors(name)
            yield f"{name} <- {', '.join(preds)}" if preds else name
