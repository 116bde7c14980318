from __future__ import annotations

import os
import subprocess

import pytest

from querygraph import apt
from querygraph.config import QuerydslConfig


@pytest.fixture
def project(tmp_path):
    src = tmp_path / "src" / "main" / "java" / "com" / "acme"
    src.mkdir(parents=True)
    (src / "Customer.java").write_text("class Customer {}", encoding="utf-8")
    (src / "Order.java").write_text("class Order {}", encoding="utf-8")
    return tmp_path


def _params(project, **overrides):
    return QuerydslConfig.from_mapping({"jpa": True, **overrides}).to_params(project)


def test_collect_sources(project):
    found = apt.collect_sources(["src/main/java/**/*.java"], project)
    assert [p.name for p in found] == ["Customer.java", "Order.java"]


def test_build_command(project, monkeypatch):
    monkeypatch.delenv("JAVA_HOME", raising=False)
    params = _params(
        project,
        classpath=["a.jar", "b.jar"],
        processorOptions={"querydsl.entityAccessors": "true"},
    )
    cmd = apt.build_command(params, "com.querydsl.apt.jpa.JPAAnnotationProcessor", [project / "X.java"])
    assert cmd[:5] == ["javac", "-proc:only", "-processor", "com.querydsl.apt.jpa.JPAAnnotationProcessor", "-s"]
    assert cmd[5] == str(project / "src" / "querydsl" / "java")
    assert cmd[6:8] == ["-cp", os.pathsep.join(["a.jar", "b.jar"])]
    assert "-Aquerydsl.entityAccessors=true" in cmd
    assert cmd[-1] == str(project / "X.java")


def test_javac_from_java_home(project, monkeypatch):
    monkeypatch.setenv("JAVA_HOME", "/opt/jdk")
    assert apt.resolve_javac(_params(project)) == os.path.join("/opt/jdk", "bin", "javac")
    assert apt.resolve_javac(_params(project, javac="/usr/bin/javac")) == "/usr/bin/javac"


def test_run_processor_invokes_javac(project, monkeypatch):
    seen = {}

    def fake_run(cmd, check, cwd):
        seen["cmd"], seen["check"], seen["cwd"] = cmd, check, cwd
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(apt.subprocess, "run", fake_run)
    cmd = apt.run_processor(_params(project), "P")
    assert seen["cmd"] == cmd
    assert seen["check"] is True
    assert seen["cwd"] == str(project)


def test_run_processor_without_sources(tmp_path, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("javac should not run")

    monkeypatch.setattr(apt.subprocess, "run", fail)
    assert apt.run_processor(_params(tmp_path), "P") is None


def test_backend_task_passes_its_processor(project, monkeypatch, catalog):
    seen = []
    monkeypatch.setattr(apt.subprocess, "run", lambda cmd, **kw: seen.append(cmd))
    task = catalog["springDataMongo"].instantiate("initQuerydslSourcesDir")
    task.action(params=_params(project))
    assert seen[0][3] == "org.springframework.data.mongodb.repository.support.MongoAnnotationProcessor"
