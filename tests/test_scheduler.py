from __future__ import annotations

import threading

import pytest

from querygraph.core import apply
from querygraph.graph import TaskDefinition, TaskGraph
from querygraph.host import COMPILE_MAIN_TASK
from querygraph.scheduler import Scheduler


def _recording_graph(calls, fail=None):
    lock = threading.Lock()

    def make(name):
        def action(params):
            if name == fail:
                raise RuntimeError(f"{name} broke")
            with lock:
                calls.append(name)

        return action

    specs = [
        ("init", ()),
        ("jpa", ("init",)),
        ("jdo", ("init",)),
        ("main", ("jpa", "jdo")),
        ("clean", ()),
    ]
    return TaskGraph(TaskDefinition(n, predecessors=p, action=make(n)) for n, p in specs)


def test_runs_in_dependency_order():
    calls = []
    done = Scheduler(_recording_graph(calls)).run({})
    assert done == calls
    assert set(calls) == {"init", "jpa", "jdo", "main", "clean"}
    assert calls.index("init") < calls.index("jpa") < calls.index("main")
    assert calls.index("jdo") < calls.index("main")


def test_only_runs_target_and_predecessors():
    calls = []
    Scheduler(_recording_graph(calls)).run({}, only="jpa")
    assert calls == ["init", "jpa"]


def test_parallel_layers():
    calls = []
    Scheduler(_recording_graph(calls)).run({}, jobs=4)
    assert calls[-1] == "main"
    assert calls.index("init") < calls.index("jpa")


def test_failure_stops_later_steps():
    calls = []
    with pytest.raises(RuntimeError, match="jpa broke"):
        Scheduler(_recording_graph(calls, fail="jpa")).run({})
    assert "main" not in calls


def test_dry_run_executes_nothing():
    calls = []
    steps = Scheduler(_recording_graph(calls)).run({}, only="main", dry_run=True)
    assert calls == []
    assert steps[0] == "init" and steps[-1] == "main"


def test_scaffold_actions_create_and_remove_output_dir(session, catalog, tmp_path):
    from querygraph.config import QuerydslConfig

    cfg = QuerydslConfig.from_mapping({"outputDirectory": "gen/querydsl"})
    graph = apply(session, cfg, catalog)
    params = cfg.to_params(tmp_path)

    Scheduler(graph).run(params, only=COMPILE_MAIN_TASK)
    assert (tmp_path / "gen" / "querydsl").is_dir()

    Scheduler(graph).run(params, only="clean")
    assert not (tmp_path / "gen" / "querydsl").exists()


def test_parallel_full_run_cleans_before_init(session, catalog, tmp_path, monkeypatch):
    import time

    from querygraph import core
    from querygraph.config import QuerydslConfig

    real_rmtree = core.shutil.rmtree

    def slow_rmtree(path, *args, **kwargs):
        time.sleep(0.3)
        real_rmtree(path, *args, **kwargs)

    monkeypatch.setattr(core.shutil, "rmtree", slow_rmtree)
    (tmp_path / "gen" / "querydsl").mkdir(parents=True)
    cfg = QuerydslConfig.from_mapping({"outputDirectory": "gen/querydsl"})
    graph = apply(session, cfg, catalog)

    done = Scheduler(graph).run(cfg.to_params(tmp_path), jobs=2)

    assert done.index("cleanQuerydslSourcesDir") < done.index("initQuerydslSourcesDir")
    assert done.index("clean") < done.index("initQuerydslSourcesDir")
    assert (tmp_path / "gen" / "querydsl").is_dir()
