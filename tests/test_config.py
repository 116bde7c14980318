from __future__ import annotations

import pytest

from querygraph.config import (
    BACKEND_FLAGS,
    DEFAULT_LIBRARY,
    DEFAULT_OUTPUT_DIRECTORY,
    QuerydslConfig,
    load_config,
)
from querygraph.errors import ConfigError


def test_defaults():
    cfg = QuerydslConfig.from_mapping({})
    assert cfg.enabled_backends() == []
    assert set(cfg.flags) == set(BACKEND_FLAGS)
    assert cfg.output_directory == DEFAULT_OUTPUT_DIRECTORY
    assert cfg.library == DEFAULT_LIBRARY


def test_flags_and_string_booleans():
    cfg = QuerydslConfig.from_mapping({"jpa": True, "roo": "yes", "jdo": "false"})
    assert sorted(cfg.enabled_backends()) == ["jpa", "roo"]
    assert not cfg.is_enabled("jdo")


def test_unknown_keys_are_backend_flags():
    cfg = QuerydslConfig.from_mapping({"sql": True})
    assert "sql" in cfg.enabled_backends()


def test_bad_flag_value():
    with pytest.raises(ConfigError):
        QuerydslConfig.from_mapping({"jpa": "sometimes"})


def test_config_is_read_only():
    cfg = QuerydslConfig.from_mapping({"jpa": True})
    with pytest.raises(TypeError):
        cfg.flags["jdo"] = True  # type: ignore[index]


def test_load_yaml_nested(tmp_path):
    p = tmp_path / "querydsl.yaml"
    p.write_text(
        "querydsl:\n"
        "  morphia: true\n"
        "  outputDirectory: gen/querydsl\n"
        "  classpath: lib/querydsl-apt.jar\n",
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg.enabled_backends() == ["morphia"]
    assert cfg.output_directory == "gen/querydsl"
    assert cfg.classpath == ("lib/querydsl-apt.jar",)


def test_to_params():
    cfg = QuerydslConfig.from_mapping({"jpa": True, "processorOptions": {"querydsl.prefix": "Q"}})
    params = cfg.to_params("/work")
    assert params["runtime"]["project_dir"] == "/work"
    assert params["querydsl"]["jpa"] is True
    assert params["querydsl"]["processorOptions"] == {"querydsl.prefix": "Q"}


def test_sources_dir_alias():
    cfg = QuerydslConfig.from_mapping({"jpa": True, "querydslSourcesDir": "gen/q"})
    assert cfg.output_directory == "gen/q"
    assert cfg.enabled_backends() == ["jpa"]
    both = QuerydslConfig.from_mapping({"querydslSourcesDir": "gen/q", "outputDirectory": "out"})
    assert both.output_directory == "out"
