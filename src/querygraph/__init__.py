"""Declarative task graph for Querydsl code generation.

Provides task/graph primitives, the orchestrator that turns a Querydsl
configuration into wired code-generation tasks, a small scheduler and a
Typer CLI.
"""

from .core import BackendSpec, TaskGraphOrchestrator, apply, backend  # re-export for convenience
from .graph import TaskDefinition, TaskGraph
from .host import HostSession

__all__ = [
    "BackendSpec",
    "HostSession",
    "TaskDefinition",
    "TaskGraph",
    "TaskGraphOrchestrator",
    "apply",
    "backend",
]
