"""Small helpers for reading config params and deriving names and paths."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict


def _get(d: Dict, *keys, default=None):
    cur = d
    for k in keys:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(k)
        if cur is None:
            return default
    return cur


def task_suffix(backend: str) -> str:
    """`springDataMongo` -> `SpringDataMongo`; keeps the rest of the camel case."""
    backend = (backend or "").strip()
    return backend[:1].upper() + backend[1:]


def compile_task_name(backend: str) -> str:
    return f"compileQuerydsl{task_suffix(backend)}"


def absolute_path(path: str | Path, project_dir: str | Path) -> Path:
    """Lexically resolve `path` against `project_dir` without touching the filesystem."""
    p = Path(path)
    if not p.is_absolute():
        p = Path(project_dir) / p
    return Path(os.path.normpath(os.path.abspath(p)))


def project_dir(p: Dict) -> str:
    return _get(p, "runtime", "project_dir", default=".")


def output_dir(p: Dict) -> Path:
    return Path(_get(p, "querydsl", "outputDirectory", default="src/querydsl/java"))
