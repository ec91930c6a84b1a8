"""Application configuration loaded from a YAML file and the environment."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, fields
from datetime import timedelta
from decimal import Decimal
from typing import Any

import yaml

_UNIT_NS = {
    "ns": 1, "us": 1_000, "µs": 1_000, "μs": 1_000, "ms": 1_000_000,
    "s": 1_000_000_000, "m": 60_000_000_000, "h": 3_600_000_000_000,
}
_COMPONENT = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
_DURATION = re.compile(rf"[+-]?(?:{_COMPONENT})+")
_ENV_ATTRS = ("name", "user", "password")


@dataclass
class HTTPConfig:
    """Settings of the HTTP listener."""

    port: str = ""
    read_timeout: timedelta = timedelta(0)
    write_timeout: timedelta = timedelta(0)
    idle_timeout: timedelta = timedelta(0)
    shutdown_timeout: timedelta = timedelta(0)


@dataclass
class DBConfig:
    """Settings of the database connection."""

    host: str = ""
    port: str = ""
    sslmode: str = ""
    max_open_conns: int = 0
    max_idle_conns: int = 0
    conn_max_lifetime: timedelta = timedelta(0)
    name: str = ""
    user: str = ""
    password: str = ""


@dataclass
class Config:
    """Complete application configuration."""

    http: HTTPConfig = field(default_factory=HTTPConfig)
    db: DBConfig = field(default_factory=DBConfig)


def parse_duration(value: Any) -> timedelta:
    """Parse a duration such as ``"1h30m"`` or ``"250ms"``; integers are nanoseconds."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return timedelta(microseconds=value / 1000)
    if value in ("0", "+0", "-0"):
        return timedelta(0)
    if not isinstance(value, str) or not _DURATION.fullmatch(value):
        raise ValueError(f"invalid duration {value!r}")
    nanoseconds = sum(
        int(Decimal(number) * _UNIT_NS[unit]) for number, unit in re.findall(_COMPONENT, value)
    )
    if value.startswith("-"):
        nanoseconds = -nanoseconds
    return timedelta(microseconds=nanoseconds / 1000)


def load_config(path: str | os.PathLike[str]) -> Config:
    """Read the configuration file at ``path`` and apply environment overrides."""
    if not path or os.fspath(path) == "":
        raise ValueError("config file path is empty")
    if not os.path.exists(path):
        raise FileNotFoundError("config file not found")

    try:
        if os.path.splitext(path)[1].lower() not in (".yaml", ".yml", ".json"):
            raise ValueError("file format is not supported")
        with open(path, encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
        if not isinstance(raw, dict):
            raise TypeError("config document must be a mapping")
        cfg = Config(_fill(HTTPConfig(), raw.get("http")), _fill(DBConfig(), raw.get("db")))
    except (OSError, yaml.YAMLError, ValueError, TypeError) as exc:
        raise ValueError(f"failed to read config: {exc}") from exc

    for attr in _ENV_ATTRS:
        variable = f"DB_{attr.upper()}"
        if variable in os.environ:
            setattr(cfg.db, attr, os.environ[variable])
    return cfg


def _fill(section: Any, raw: Any) -> Any:
    if raw is None:
        return section
    if not isinstance(raw, dict):
        raise TypeError("config section must be a mapping")
    for spec in fields(section):
        value = raw.get(spec.name)
        if value is None:
            continue
        if isinstance(spec.default, timedelta):
            value = parse_duration(value)
        elif isinstance(spec.default, int):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"expected an integer, got {value!r}")
        elif isinstance(value, (dict, list)):
            raise TypeError(f"expected a scalar, got {value!r}")
        elif isinstance(value, bool):
            value = "true" if value else "false"
        else:
            value = str(value)
        setattr(section, spec.name, value)
    return section