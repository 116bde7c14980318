"""Task definitions and the dependency graph they form.

A `TaskGraph` is only a mapping from task name to `TaskDefinition`; edges are
implied by each definition's `predecessors`. Definitions are frozen: wiring a
new dependency replaces the definition with a copy instead of mutating it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Iterator

from .errors import CycleDetected, DuplicateTask, MissingPredecessor


Action = Callable[..., None]


def _noop(params: dict) -> None:
    return None


@dataclass(frozen=True)
class TaskDefinition:
    name: str
    predecessors: tuple[str, ...] = ()
    action: Action = field(default=_noop, compare=False)
    group: str = ""
    description: str = ""

    def __post_init__(self):
        # ordered, de-duplicated
        object.__setattr__(
            self, "predecessors", tuple(dict.fromkeys(self.predecessors))
        )

    def with_predecessors(self, *names: str) -> "TaskDefinition":
        return replace(self, predecessors=self.predecessors + tuple(names))


def topo_sort(nodes: Iterable[str], edges: Iterable[tuple[str, str]]) -> list[str]:
    nodes = list(nodes)
    incoming = {n: set() for n in nodes}
    outgoing = {n: set() for n in nodes}
    for u, v in edges:
        if v not in incoming:
            raise KeyError(v)
        if u not in incoming:
            raise MissingPredecessor(v, u)
        outgoing[u].add(v)
        incoming[v].add(u)
    ordered: list[str] = []
    roots = [n for n in nodes if not incoming[n]]
    while roots:
        n = roots.pop(0)
        ordered.append(n)
        for m in sorted(outgoing[n], key=nodes.index):
            incoming[m].discard(n)
            outgoing[n].discard(m)
            if not incoming[m]:
                roots.append(m)
    stuck = [n for n in nodes if incoming[n]]
    if stuck:
        raise CycleDetected(stuck)
    return ordered


class TaskGraph:
    def __init__(self, tasks: Iterable[TaskDefinition] = ()):
        self._tasks: dict[str, TaskDefinition] = {}
        for t in tasks:
            self.add(t)

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __getitem__(self, name: str) -> TaskDefinition:
        return self._tasks[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __repr__(self) -> str:
        return f"TaskGraph({list(self._tasks)!r})"

    def tasks(self) -> list[TaskDefinition]:
        return list(self._tasks.values())

    def add(self, task: TaskDefinition) -> TaskDefinition:
        if task.name in self._tasks:
            raise DuplicateTask(task.name)
        self._tasks[task.name] = task
        return task

    def depend(self, name: str, *predecessors: str) -> TaskDefinition:
        """Make `name` depend on `predecessors` (replaces the frozen definition)."""
        task = self._tasks[name]
        self._tasks[name] = task.with_predecessors(*predecessors)
        return self._tasks[name]

    def predecessors(self, name: str) -> tuple[str, ...]:
        return self._tasks[name].predecessors

    def successors(self, name: str) -> list[str]:
        return [t.name for t in self._tasks.values() if name in t.predecessors]

    def edges(self) -> list[tuple[str, str]]:
        """(before, after) pairs."""
        return [(p, t.name) for t in self._tasks.values() for p in t.predecessors]

    def copy(self) -> "TaskGraph":
        # definitions are immutable, sharing them is safe
        g = TaskGraph()
        g._tasks = dict(self._tasks)
        return g

    def validate(self) -> list[str]:
        for t in self._tasks.values():
            for p in t.predecessors:
                if p not in self._tasks:
                    raise MissingPredecessor(t.name, p)
        return topo_sort(self._tasks, self.edges())

    def order(self) -> list[str]:
        return self.validate()

    def layers(self) -> list[list[str]]:
        """Group tasks into batches whose members have no edges between them.

        Every task lands in the earliest batch after all its predecessors.
        """
        depth: dict[str, int] = {}
        for name in self.order():
            preds = self._tasks[name].predecessors
            depth[name] = 1 + max((depth[p] for p in preds), default=-1)
        out: list[list[str]] = [[] for _ in range(max(depth.values(), default=-1) + 1)]
        for name in self._tasks:
            out[depth[name]].append(name)
        return out

    def closure(self, name: str) -> set[str]:
        """`name` plus everything it transitively depends on."""
        if name not in self._tasks:
            raise KeyError(f"Unknown task: {name}")
        seen: set[str] = set()
        stack = [name]
        while stack:
            n = stack.pop()
            if n in seen:
                continue
            seen.add(n)
            stack.extend(self._tasks[n].predecessors)
        return seen
