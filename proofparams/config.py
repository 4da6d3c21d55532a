"""
proofparams configuration loader.

Goals
-----
- Layered config with clear precedence:
    1) Explicit overrides passed to `load()` (highest)
    2) Environment variables (PROOFPARAMS_*, plus FIL_PROOFS_PARAMETER_CACHE)
    3) Config file (TOML or JSON)
    4) Built-in defaults (lowest)
- Frozen, validated dataclass; invalid values raise ConfigError.

Keys
----
  parameter_cache_dir : directory holding "<id>.params" / "<id>.vk" files
  porep_partitions    : {sector_size: partitions} merged over the defaults
  log_level           : DEBUG | INFO | WARNING | ERROR | CRITICAL
  log_format          : "json" | "text" | None (auto)

Environment
-----------
  PROOFPARAMS_CONFIG             path to a .toml/.json file (if none passed)
  PROOFPARAMS_PARAMETER_CACHE    parameter_cache_dir
  FIL_PROOFS_PARAMETER_CACHE     parameter_cache_dir (fallback name)
  PROOFPARAMS_POREP_PARTITIONS   "1024:2,16777216:1" (sizes accept 0x.. too)
  PROOFPARAMS_LOG_LEVEL          log_level
  PROOFPARAMS_LOG_FORMAT         log_format
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .constants import DEFAULT_PARAMETER_CACHE, DEFAULT_POREP_PARTITIONS
from .errors import ConfigError

ENV_CONFIG_FILE = "PROOFPARAMS_CONFIG"
ENV_PARAMETER_CACHE = "PROOFPARAMS_PARAMETER_CACHE"
ENV_PARAMETER_CACHE_FALLBACK = "FIL_PROOFS_PARAMETER_CACHE"
ENV_POREP_PARTITIONS = "PROOFPARAMS_POREP_PARTITIONS"
ENV_LOG_LEVEL = "PROOFPARAMS_LOG_LEVEL"
ENV_LOG_FORMAT = "PROOFPARAMS_LOG_FORMAT"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_LOG_FORMATS = {"json", "text"}


# ------------------------------
# Helpers
# ------------------------------

def _expand(p: str | Path) -> Path:
    return Path(p).expanduser()


def _first_env(*keys: str) -> Optional[str]:
    for k in keys:
        v = os.environ.get(k)
        if v:
            return v
    return None


def _parse_int(v: Any, key: str) -> int:
    if isinstance(v, bool):
        raise ConfigError(f"{key} must be int, got {v!r}", key=key)
    if isinstance(v, int):
        return v
    try:
        return int(str(v).strip(), 0)
    except ValueError as e:
        raise ConfigError(f"{key} must be int, got {v!r}", key=key, cause=e) from e


def _parse_partitions_env(raw: str) -> Dict[int, int]:
    """'1024:2, 0x1000000:1' -> {1024: 2, 16777216: 1}"""
    out: Dict[int, int] = {}
    for item in (s.strip() for s in raw.split(",")):
        if not item:
            continue
        size, sep, count = item.partition(":")
        if not sep:
            raise ConfigError(
                f"{ENV_POREP_PARTITIONS} entries must look like size:count, got {item!r}",
                key=ENV_POREP_PARTITIONS,
            )
        out[_parse_int(size, ENV_POREP_PARTITIONS)] = _parse_int(count, ENV_POREP_PARTITIONS)
    return out


def _normalize_partitions(raw: Any) -> Dict[int, int]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConfigError("porep_partitions must be a mapping", key="porep_partitions")
    out: Dict[int, int] = {}
    for k, v in raw.items():
        size = _parse_int(k, "porep_partitions")
        count = _parse_int(v, "porep_partitions")
        if size <= 0 or count <= 0:
            raise ConfigError(
                f"porep_partitions entries must be positive, got {k!r}: {v!r}",
                key="porep_partitions",
            )
        out[size] = count
    return out


# ------------------------------
# Typed configuration model
# ------------------------------

@dataclass(frozen=True)
class Settings:
    parameter_cache_dir: Path = field(default_factory=lambda: Path(DEFAULT_PARAMETER_CACHE))
    # Sorted (sector_size, partitions) pairs; a tuple keeps Settings hashable.
    porep_partitions: Tuple[Tuple[int, int], ...] = ()
    log_level: str = "INFO"
    log_format: Optional[str] = None

    def partition_table(self) -> Dict[int, int]:
        """Built-in defaults with the configured overrides applied on top."""
        merged = dict(DEFAULT_POREP_PARTITIONS)
        merged.update(self.porep_partitions)
        return merged

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameter_cache_dir": str(self.parameter_cache_dir),
            "porep_partitions": {str(k): v for k, v in self.porep_partitions},
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


# ------------------------------
# File loader (TOML / JSON)
# ------------------------------

def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}", key="config_file")
    suffix = path.suffix.lower()
    try:
        with path.open("rb") as f:
            if suffix in {".toml", ".tml"}:
                data = tomllib.load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigError(
                    f"unsupported config format {suffix!r}; use .toml or .json",
                    key="config_file",
                )
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot parse config file {path}", key="config_file", cause=e) from e
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}", key="config_file", cause=e) from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must hold a table/object", key="config_file")
    # Allow both top-level keys and a [proofparams] section.
    section = data.get("proofparams")
    return dict(section) if isinstance(section, dict) else data


def _merge_dict(a: Dict[str, Any], b: Mapping[str, Any]) -> Dict[str, Any]:
    """Shallow + nested dict merge: values in b override a."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), Mapping):
            out[k] = _merge_dict(dict(out[k]), v)
        else:
            out[k] = v
    return out


# ------------------------------
# Main loader
# ------------------------------

def load(config_file: Optional[str | Path] = None, **overrides: Any) -> Settings:
    """
    Load registry settings.

    Precedence: overrides > env > file > defaults.

    Parameters
    ----------
    config_file : str | Path | None
        Optional .toml/.json file; when None, PROOFPARAMS_CONFIG is consulted.
    overrides : Any
        Keyword overrides, e.g. load(parameter_cache_dir="/tmp/params").
    """
    unknown = set(overrides) - {"parameter_cache_dir", "porep_partitions", "log_level", "log_format"}
    if unknown:
        raise ConfigError(f"unknown settings keys: {sorted(unknown)}", key="overrides")

    # 1) Defaults
    base: Dict[str, Any] = {
        "parameter_cache_dir": DEFAULT_PARAMETER_CACHE,
        "porep_partitions": {},
        "log_level": "INFO",
        "log_format": None,
    }

    # 2) File
    path = config_file or os.environ.get(ENV_CONFIG_FILE)
    if path:
        base = _merge_dict(base, _load_file(_expand(path)))

    # 3) Env
    cache = _first_env(ENV_PARAMETER_CACHE, ENV_PARAMETER_CACHE_FALLBACK)
    if cache:
        base["parameter_cache_dir"] = cache
    if ENV_POREP_PARTITIONS in os.environ:
        base["porep_partitions"] = _merge_dict(
            {str(k): v for k, v in _normalize_partitions(base["porep_partitions"]).items()},
            {str(k): v for k, v in _parse_partitions_env(os.environ[ENV_POREP_PARTITIONS]).items()},
        )
    if ENV_LOG_LEVEL in os.environ:
        base["log_level"] = os.environ[ENV_LOG_LEVEL]
    if ENV_LOG_FORMAT in os.environ:
        base["log_format"] = os.environ[ENV_LOG_FORMAT]

    # 4) Overrides
    explicit = {k: v for k, v in overrides.items() if v is not None}
    if "porep_partitions" in explicit:
        explicit["porep_partitions"] = {
            str(k): v for k, v in _normalize_partitions(explicit["porep_partitions"]).items()
        }
        base["porep_partitions"] = {
            str(k): v for k, v in _normalize_partitions(base["porep_partitions"]).items()
        }
    base = _merge_dict(base, explicit)

    return _build(base)


def _build(d: Mapping[str, Any]) -> Settings:
    cache_raw = d.get("parameter_cache_dir")
    if not cache_raw:
        raise ConfigError("parameter_cache_dir must be non-empty", key="parameter_cache_dir")

    level = str(d.get("log_level") or "INFO").strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"invalid log_level {level!r}", key="log_level")

    fmt = d.get("log_format")
    if fmt is not None:
        fmt = str(fmt).strip().lower()
        if fmt not in _LOG_FORMATS:
            raise ConfigError(f"invalid log_format {fmt!r}", key="log_format")

    return Settings(
        parameter_cache_dir=_expand(cache_raw),
        porep_partitions=tuple(sorted(_normalize_partitions(d.get("porep_partitions")).items())),
        log_level=level,
        log_format=fmt,
    )


__all__ = ["Settings", "load"]
