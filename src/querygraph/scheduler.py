"""Reference executor for a committed task graph.

Runs tasks in dependency order. With `jobs > 1` each layer of mutually
independent tasks (e.g. all enabled backend tasks) is fanned out to a thread
pool; the next layer starts only after the whole layer finished.

Tasks reachable from `clean` run as a phase of their own before anything
else, so deleting outputs never overlaps with creating them.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed

from .graph import TaskGraph
from .host import CLEAN_TASK
from .logging import get_logger


class Scheduler:
    def __init__(self, graph: TaskGraph, name: str = "querydsl"):
        self.name = name
        self.graph = graph
        self.layers = graph.layers()
        self.logger = get_logger(f"querygraph.scheduler.{self.name}")

    def _select_subset(self, only: str | None) -> list[list[str]]:
        """Layers to run: the clean phase first, then the build phase."""
        wanted = self.graph.closure(only) if only else set(self.graph)
        cleanup = self.graph.closure(CLEAN_TASK) if CLEAN_TASK in self.graph else set()
        phases = [wanted & cleanup, wanted - cleanup]
        out: list[list[str]] = []
        for phase in phases:
            for layer in self.layers:
                selected = [n for n in layer if n in phase]
                if selected:
                    out.append(selected)
        return out

    def _run_one(self, step_name: str, params: dict) -> str:
        step_logger = get_logger(f"querygraph.scheduler.{self.name}.{step_name}")
        step_logger.info("Run: %s", step_name)
        try:
            self.graph[step_name].action(params=params)
        except Exception:
            step_logger.exception("Step failed (%s)", step_name)
            raise
        return step_name

    def run(
        self,
        params: dict,
        only: str | None = None,
        jobs: int = 1,
        dry_run: bool = False,
    ) -> list[str]:
        """Execute the graph (or `only` and its predecessors); returns the step names run."""
        layers = self._select_subset(only)
        self.logger.info(
            "Selected steps: %s", " → ".join(" | ".join(layer) for layer in layers)
        )
        done: list[str] = []
        if dry_run:
            return [n for layer in layers for n in layer]

        for layer in layers:
            if jobs <= 1 or len(layer) == 1:
                for step_name in layer:
                    done.append(self._run_one(step_name, params))
                continue
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                futures = [executor.submit(self._run_one, n, params) for n in layer]
                for fut in as_completed(futures):
                    done.append(fut.result())  # will raise if the step failed
        return done
