"""
proofparams.logging
-------------------

Logging setup for processes embedding the registry:
- JSON or concise colored text formats
- Structured extras (`log.warning("...", extra={"identifier": ...})`) rendered
  in both formats
- Safe JSON serialization (bytes → hex, Paths → str, Enums → value)

Library modules only ever call `logging.getLogger(__name__)`; this module is
for the embedding application (and the test-suite) to call once:

    from proofparams import logging as plog

    plog.configure(level="DEBUG")
    plog.configure_from_settings(proofparams.config.load())
"""

from __future__ import annotations

import datetime as _dt
import enum
import io
import json
import logging
import os
import sys
import traceback
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional

ENV_LOG_FORMAT = "PROOFPARAMS_LOG_FORMAT"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RECORD_FIELDS = frozenset(
    (
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    )
)

_RESET = "\x1b[0m"
_GREY = "\x1b[90m"
_CYAN = "\x1b[36m"
_LEVEL_COLOR = {
    logging.DEBUG: "\x1b[90m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[1m\x1b[35m",
}


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _coerce_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, enum.Enum):
        return v.value
    if isinstance(v, (bytes, bytearray)):
        return v.hex()
    if isinstance(v, Path):
        return str(v)
    if isinstance(v, dict):
        return {str(k): _coerce_value(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_coerce_value(x) for x in v]
    if is_dataclass(v) and not isinstance(v, type):
        return _coerce_value(asdict(v))
    return str(v)


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: _coerce_value(v)
        for k, v in record.__dict__.items()
        if not k.startswith("_") and k not in _RECORD_FIELDS
    }


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, separators=(",", ":"), default=str)


class TextFormatter(logging.Formatter):
    """
    Human-friendly one-liner:
      2026-01-05T12:34:56.789+00:00 | WARNING | proofparams.cids identifier=v1-… kind=vk | parameter table has no entry
    """

    def __init__(self, stream: Optional[io.TextIOBase] = None, color: Optional[bool] = None):
        super().__init__()
        self._color = _supports_color(stream) if color is None else color

    def format(self, record: logging.LogRecord) -> str:
        extras = " ".join(f"{k}={v}" for k, v in _extras(record).items())
        lvl = f"{record.levelname:<5}"
        name = record.name
        ts = _utcnow_iso()
        if self._color:
            lvl = f"{_LEVEL_COLOR.get(record.levelno, '')}{lvl}{_RESET}"
            name = f"{_CYAN}{name}{_RESET}"
            ts = f"{_GREY}{ts}{_RESET}"
        line = f"{ts} | {lvl} | {name}"
        if extras:
            line += f" {extras}"
        line += f" | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


def _supports_color(stream: Optional[io.TextIOBase]) -> bool:
    try:
        return bool(stream is not None and stream.isatty() and os.environ.get("NO_COLOR") is None)
    except (AttributeError, ValueError):
        return False


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level {level!r}")
    return value


def _decide_json(json_flag: Optional[bool], stream: Any) -> bool:
    if json_flag is not None:
        return json_flag
    env = (os.environ.get(ENV_LOG_FORMAT) or "").strip().lower()
    if env in {"json", "text"}:
        return env == "json"
    # Machines read non-TTY output.
    try:
        return not stream.isatty()
    except (AttributeError, ValueError):
        return True


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "INFO",
    stream: Any = None,
    logger_name: str = "",
) -> logging.Logger:
    """
    Install a single console handler on `logger_name` (root by default).

    json=None picks the format from PROOFPARAMS_LOG_FORMAT, then TTY
    detection. Re-running replaces the handler installed previously.
    """
    stream = stream if stream is not None else sys.stderr
    target = logging.getLogger(logger_name)
    lvl = _coerce_level(level)
    target.setLevel(lvl)

    for h in list(target.handlers):
        if getattr(h, "_proofparams", False):
            target.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setLevel(lvl)
    handler.setFormatter(JSONFormatter() if _decide_json(json, stream) else TextFormatter(stream))
    handler._proofparams = True  # type: ignore[attr-defined]
    target.addHandler(handler)
    return target


def configure_from_settings(settings: Any, *, stream: Any = None) -> logging.Logger:
    """Apply `Settings.log_level` / `Settings.log_format`."""
    fmt = getattr(settings, "log_format", None)
    return configure(
        json=None if fmt is None else fmt == "json",
        level=getattr(settings, "log_level", "INFO"),
        stream=stream,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = [
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "configure_from_settings",
    "get_logger",
]
