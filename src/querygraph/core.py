from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from .config import QuerydslConfig, coerce_config
from .errors import InvalidOutputPath, UnknownBackend
from .graph import TaskDefinition, TaskGraph
from .host import (
    CLEAN_TASK,
    COMPILE_CONFIGURATION,
    COMPILE_MAIN_TASK,
    Dependency,
    HostSession,
    Registration,
    base_tasks,
)
from .logging import get_logger
from .utils import absolute_path, compile_task_name, output_dir, project_dir


PLUGIN_ID = "querydsl"
TASK_GROUP = "Querydsl tasks"
CLEAN_SOURCES_TASK = "cleanQuerydslSourcesDir"
INIT_SOURCES_TASK = "initQuerydslSourcesDir"

log = get_logger("querygraph.core")


@dataclass(frozen=True)
class BackendSpec:
    """Template for one backend's code-generation task."""

    name: str
    processor: str
    fn: Callable[..., None]
    description: str = ""
    enabled: Optional[Callable[[QuerydslConfig], bool]] = field(default=None, compare=False)

    @property
    def task_name(self) -> str:
        return compile_task_name(self.name)

    def is_enabled(self, config: QuerydslConfig) -> bool:
        if self.enabled is not None:
            return bool(self.enabled(config))
        return config.is_enabled(self.name)

    def instantiate(self, *predecessors: str) -> TaskDefinition:
        return TaskDefinition(
            name=self.task_name,
            predecessors=predecessors,
            action=partial(self.fn, processor=self.processor),
            group=TASK_GROUP,
            description=self.description or f"Generates Querydsl {self.name} sources.",
        )


def _first_line(doc: Optional[str]) -> str:
    lines = (doc or "").strip().splitlines()
    return lines[0].strip() if lines else ""


def backend(name: str, processor: str, description: str = ""):
    """Decorator to declare a backend's code-generation action on a function.

    The wrapped function receives the params dict and the processor class
    name as keyword arguments when its task runs.
    """

    def deco(fn: Callable[..., None]):
        spec = BackendSpec(
            name=name,
            processor=processor,
            fn=fn,
            description=description or _first_line(fn.__doc__),
        )
        setattr(fn, "_backend_spec", spec)
        return fn

    return deco


def clean_sources_dir(params: dict) -> None:
    path = absolute_path(output_dir(params), project_dir(params))
    if path.exists():
        log.info("Delete querydsl sources dir: %s", path)
        shutil.rmtree(path)


def init_sources_dir(params: dict) -> None:
    path = absolute_path(output_dir(params), project_dir(params))
    log.info("Create querydsl sources dir: %s", path)
    path.mkdir(parents=True, exist_ok=True)


def resolve_output_dir(config: QuerydslConfig, base: str | Path) -> Path:
    raw = config.output_directory
    if not raw or not raw.strip():
        raise InvalidOutputPath(raw, "path is empty")
    if "\x00" in raw:
        raise InvalidOutputPath(raw, "path contains a NUL character")
    root = absolute_path(base, ".")
    path = absolute_path(raw.strip(), root)
    # `clean` removes this directory, so it must not contain the project
    if path == root or path in root.parents:
        raise InvalidOutputPath(raw, f"resolves to {path}, which contains the project dir")
    return path


class TaskGraphOrchestrator:
    def __init__(self, session: HostSession, plugin_id: str = PLUGIN_ID):
        self.session = session
        self.plugin_id = plugin_id

    def apply(
        self,
        config: QuerydslConfig | Mapping[str, Any] | None,
        catalog: Mapping[str, BackendSpec] | None = None,
    ) -> TaskGraph:
        with self.session.lock:
            if self.session.guard.is_applied(self.plugin_id):
                log.info("Plugin %r already applied, skipping", self.plugin_id)
                return self.session.graph

            log.info("Applying querydsl plugin")
            cfg = coerce_config(config)
            if catalog is None:
                from .catalog import discover_backends

                catalog = discover_backends()
            registration = self.plan(cfg, catalog)
            self.session.commit(registration, self.plugin_id)
            return self.session.graph

    def plan(self, config: QuerydslConfig, catalog: Mapping[str, BackendSpec]) -> Registration:
        """Stage every registration on a copy of the session graph and validate it."""
        missing = [b for b in config.enabled_backends() if b not in catalog]
        if missing:
            raise UnknownBackend(missing)

        sources_dir = resolve_output_dir(config, self.session.project_dir)
        log.info("Querydsl sources dir: %s", sources_dir)

        graph = self.session.graph.copy()
        # base lifecycle tasks come from the host when present; otherwise provide them
        for t in base_tasks():
            if t.name not in graph:
                graph.add(t)

        graph.add(
            TaskDefinition(
                CLEAN_SOURCES_TASK,
                action=clean_sources_dir,
                group=TASK_GROUP,
                description="Deletes the querydsl generated sources dir.",
            )
        )
        graph.add(
            TaskDefinition(
                INIT_SOURCES_TASK,
                action=init_sources_dir,
                group=TASK_GROUP,
                description="Creates the querydsl generated sources dir.",
            )
        )
        graph.depend(CLEAN_TASK, CLEAN_SOURCES_TASK)

        for name, spec in catalog.items():
            if not spec.is_enabled(config):
                continue
            task = graph.add(spec.instantiate(INIT_SOURCES_TASK))
            graph.depend(COMPILE_MAIN_TASK, task.name)
            log.info("Registered %s (%s)", task.name, spec.processor)

        graph.validate()

        log.info("Querydsl library: %s", config.library)
        return Registration(
            graph=graph,
            source_roots=[sources_dir],
            dependencies=[Dependency(COMPILE_CONFIGURATION, config.library)],
        )


def apply(
    session: HostSession,
    config: QuerydslConfig | Mapping[str, Any] | None,
    catalog: Mapping[str, BackendSpec] | None = None,
) -> TaskGraph:
    return TaskGraphOrchestrator(session).apply(config, catalog)
