"""Querydsl configuration surface.

The configuration is a flat mapping of backend flags plus a handful of
settings. Anything that is not a known setting is treated as a backend flag,
so an enabled flag without a matching catalog entry can be reported as an
unknown backend instead of being silently ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from .errors import ConfigError


DEFAULT_OUTPUT_DIRECTORY = "src/querydsl/java"
DEFAULT_LIBRARY = "com.querydsl:querydsl-apt:4.1.4"
DEFAULT_SOURCES = ("src/main/java/**/*.java",)

BACKEND_FLAGS = ("jpa", "jdo", "hibernate", "morphia", "roo", "springDataMongo")
SETTINGS = (
    "outputDirectory",
    "querydslSourcesDir",
    "library",
    "sources",
    "classpath",
    "javac",
    "processorOptions",
)

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0", ""}


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
    raise ConfigError(f"Backend flag {key!r} must be a boolean, got {value!r}")


def _as_str_list(key: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    raise ConfigError(f"Setting {key!r} must be a string or a list, got {value!r}")


@dataclass(frozen=True)
class QuerydslConfig:
    flags: Mapping[str, bool] = field(
        default_factory=lambda: MappingProxyType({b: False for b in BACKEND_FLAGS})
    )
    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    library: str = DEFAULT_LIBRARY
    sources: tuple[str, ...] = DEFAULT_SOURCES
    classpath: tuple[str, ...] = ()
    javac: str | None = None
    processor_options: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "QuerydslConfig":
        data = dict(data or {})
        if isinstance(data.get("querydsl"), dict):
            data = dict(data["querydsl"])

        flags = {b: False for b in BACKEND_FLAGS}
        for key, value in data.items():
            if key in SETTINGS:
                continue
            flags[str(key)] = _as_bool(key, value)

        # `querydslSourcesDir` is the older name of the same setting
        output_directory = data.get(
            "outputDirectory", data.get("querydslSourcesDir", DEFAULT_OUTPUT_DIRECTORY)
        )
        if output_directory is None:
            output_directory = ""
        library = data.get("library", DEFAULT_LIBRARY)
        if not isinstance(library, str) or not library.strip():
            raise ConfigError(f"Setting 'library' must be a dependency coordinate, got {library!r}")
        options = data.get("processorOptions") or {}
        if not isinstance(options, dict):
            raise ConfigError(f"Setting 'processorOptions' must be a mapping, got {options!r}")

        sources = data.get("sources", DEFAULT_SOURCES)
        return cls(
            flags=MappingProxyType(flags),
            output_directory=str(output_directory),
            library=library.strip(),
            sources=_as_str_list("sources", sources),
            classpath=_as_str_list("classpath", data.get("classpath")),
            javac=data.get("javac"),
            processor_options=MappingProxyType({str(k): str(v) for k, v in options.items()}),
        )

    def enabled_backends(self) -> list[str]:
        return [name for name, on in self.flags.items() if on]

    def is_enabled(self, backend: str) -> bool:
        return bool(self.flags.get(backend, False))

    def to_params(self, project_dir: str | Path = ".") -> dict:
        """Params dict handed to task actions at execution time."""
        return {
            "querydsl": {
                **dict(self.flags),
                "outputDirectory": self.output_directory,
                "library": self.library,
                "sources": list(self.sources),
                "classpath": list(self.classpath),
                "javac": self.javac,
                "processorOptions": dict(self.processor_options),
            },
            "runtime": {"project_dir": str(project_dir)},
        }


def load_config(path: str | Path) -> QuerydslConfig:
    p = Path(path)
    with open(p, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: expected a mapping at the top level")
    return QuerydslConfig.from_mapping(data)


def coerce_config(config: "QuerydslConfig | Mapping[str, Any] | None") -> QuerydslConfig:
    if isinstance(config, QuerydslConfig):
        return config
    return QuerydslConfig.from_mapping(config)
