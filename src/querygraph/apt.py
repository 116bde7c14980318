"""Running a Querydsl annotation processor through `javac -proc:only`."""

from __future__ import annotations

import glob
import os
import subprocess
from pathlib import Path
from typing import Iterable

from .logging import get_logger
from .utils import _get, absolute_path, output_dir, project_dir


log = get_logger("querygraph.apt")


def resolve_javac(params: dict) -> str:
    explicit = _get(params, "querydsl", "javac")
    if explicit:
        return str(explicit)
    java_home = os.getenv("JAVA_HOME")
    if java_home:
        return str(Path(java_home) / "bin" / "javac")
    return "javac"


def collect_sources(patterns: Iterable[str], base: str | Path) -> list[Path]:
    found: dict[str, Path] = {}
    for pat in patterns:
        full = pat if os.path.isabs(pat) else os.path.join(str(base), pat)
        for match in glob.glob(full, recursive=True):
            p = Path(match)
            if p.is_file():
                found.setdefault(str(p), p)
    return [found[k] for k in sorted(found)]


def build_command(params: dict, processor: str, sources: list[Path]) -> list[str]:
    out = absolute_path(output_dir(params), project_dir(params))
    cmd = [resolve_javac(params), "-proc:only", "-processor", processor, "-s", str(out)]
    classpath = _get(params, "querydsl", "classpath", default=[])
    if classpath:
        cmd += ["-cp", os.pathsep.join(str(c) for c in classpath)]
    options = _get(params, "querydsl", "processorOptions", default={})
    for key in sorted(options):
        cmd.append(f"-A{key}={options[key]}")
    cmd += [str(s) for s in sources]
    return cmd


def run_processor(params: dict, processor: str) -> list[str] | None:
    """Generate sources with `processor`; returns the command run, or None if no sources."""
    base = project_dir(params)
    patterns = _get(params, "querydsl", "sources", default=[])
    sources = collect_sources(patterns, base)
    if not sources:
        log.warning("No sources matched %s, skipping %s", patterns, processor)
        return None
    cmd = build_command(params, processor, sources)
    log.info("Run %s on %d source file(s)", processor, len(sources))
    log.debug("Command: %s", " ".join(cmd))
    subprocess.run(cmd, check=True, cwd=base)
    return cmd
