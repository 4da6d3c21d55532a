"""
Typed exceptions for the proofparams registry.

Design goals
- Structured: machine-readable code + human message + contextual fields.
- Separate *defects* (catalog and tables deployed out of sync) from
  *recoverable* lookups (parameters not yet published).
- Stable across processes: to_dict() gives a JSON-friendly view.

The specific subtypes exported here are:
  - RegistryError (base)
  - ConfigurationDefect
  - VersionMismatch
  - MissingParameters
  - DecodeError
  - ConfigError
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class RegistryErrorCode(str, Enum):
    """Canonical error codes for registry lookups & derivations."""

    UNKNOWN = "UNKNOWN"

    # Catalog and Partition Table out of sync (programmer / deploy error)
    CONFIGURATION_DEFECT = "CONFIGURATION_DEFECT"
    # Operation invoked against a proof version it does not understand
    VERSION_MISMATCH = "VERSION_MISMATCH"
    # Parameter Table has no entry for "<identifier>.<suffix>"
    MISSING_PARAMETERS = "MISSING_PARAMETERS"
    # Unknown tag / malformed serialized variant
    DECODE = "DECODE"
    # Invalid settings (env, file, overrides)
    CONFIG = "CONFIG"


@dataclass(eq=False)
class RegistryError(Exception):
    """
    Base structured error for proofparams.

    Fields:
      code:      stable machine code (RegistryErrorCode | str)
      msg:       human-readable summary
      ctx:       small dict of contextual fields (identifiers, sizes, tags)
      retryable: whether the same call may succeed later without code changes
      cause:     optional underlying exception (not serialized)
    """

    code: RegistryErrorCode | str = RegistryErrorCode.UNKNOWN
    msg: str = "registry error"
    ctx: Dict[str, Any] = field(default_factory=dict)
    retryable: bool = False
    cause: Optional[BaseException] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        super().__init__(self.msg)

    def __str__(self) -> str:
        parts = [f"[{_code_str(self.code)}] {self.msg}"]
        if self.ctx:
            parts.append(f"ctx={self.ctx}")
        if self.cause:
            parts.append(f"cause={self.cause!r}")
        return " ".join(parts)

    def with_context(self, **extra: Any) -> "RegistryError":
        """Return a *new* error of the same type with merged context (does not mutate)."""
        merged = dict(self.ctx)
        merged.update(extra)
        return _restore(type(self), self.msg, {**self.__dict__, "ctx": merged})

    def __reduce__(self):
        # Subclass constructors take their own arguments, not (msg,).
        return (_restore, (type(self), self.msg, dict(self.__dict__)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": _code_str(self.code),
            "msg": self.msg,
            "ctx": dict(self.ctx),
            "retryable": self.retryable,
        }

    @classmethod
    def wrap(
        cls,
        code: RegistryErrorCode | str,
        msg: str,
        *,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> "RegistryError":
        return RegistryError(code=code, msg=msg, ctx=dict(ctx or {}), cause=cause)


def _code_str(code: RegistryErrorCode | str) -> str:
    return code.value if isinstance(code, RegistryErrorCode) else str(code)


def _restore(cls: type, msg: str, state: Dict[str, Any]) -> RegistryError:
    err = cls.__new__(cls)
    Exception.__init__(err, msg)
    err.__dict__.update(state)
    return err


class ConfigurationDefect(RegistryError):
    """
    A sector size referenced by the catalog has no Partition Table entry.

    Never expected in a correct deployment; retrying cannot fix it.
    """

    def __init__(
        self,
        sector_size: int,
        *,
        proof: Optional[str] = None,
        ctx: Optional[Mapping[str, Any]] = None,
    ) -> None:
        base_ctx: Dict[str, Any] = {"sector_size": int(sector_size)}
        if proof is not None:
            base_ctx["proof"] = proof
        if ctx:
            base_ctx.update(ctx)
        super().__init__(
            code=RegistryErrorCode.CONFIGURATION_DEFECT,
            msg=f"no partition count for sector size {int(sector_size)}",
            ctx=base_ctx,
        )
        self.sector_size = int(sector_size)


class VersionMismatch(RegistryError):
    """An operation was handed a proof version (or config type) it does not support."""

    def __init__(
        self,
        got: Any,
        *,
        operation: str,
        supported: tuple = (),
        ctx: Optional[Mapping[str, Any]] = None,
    ) -> None:
        base_ctx: Dict[str, Any] = {
            "got": str(got),
            "operation": operation,
            "supported": [str(s) for s in supported],
        }
        if ctx:
            base_ctx.update(ctx)
        super().__init__(
            code=RegistryErrorCode.VERSION_MISMATCH,
            msg=f"{operation}: unsupported version {got}",
            ctx=base_ctx,
        )
        self.got = got
        self.operation = operation


class MissingParameters(RegistryError):
    """
    The Parameter Table has no entry for a derived identifier/kind pair.

    This is the one failure expected during normal operation: the artifacts
    for a catalog variant have not been published yet.
    """

    def __init__(
        self,
        identifier: str,
        kind: Any,
        *,
        key: Optional[str] = None,
        ctx: Optional[Mapping[str, Any]] = None,
    ) -> None:
        kind_s = getattr(kind, "value", str(kind))
        base_ctx: Dict[str, Any] = {"identifier": identifier, "kind": kind_s}
        if key is not None:
            base_ctx["key"] = key
        if ctx:
            base_ctx.update(ctx)
        super().__init__(
            code=RegistryErrorCode.MISSING_PARAMETERS,
            msg=f"missing {kind_s} parameters for {identifier}",
            ctx=base_ctx,
            retryable=True,
        )
        self.identifier = identifier
        self.kind = kind
        self.key = key


class DecodeError(RegistryError):
    """Unknown tag or malformed serialized catalog value."""

    def __init__(
        self,
        msg: str = "decode failed",
        *,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=RegistryErrorCode.DECODE, msg=msg, ctx=dict(ctx or {}), cause=cause
        )


class ConfigError(RegistryError):
    """Invalid settings value (env var, config file, or explicit override)."""

    def __init__(
        self,
        msg: str = "invalid configuration",
        *,
        key: Optional[str] = None,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        base_ctx: Dict[str, Any] = {}
        if key is not None:
            base_ctx["key"] = key
        if ctx:
            base_ctx.update(ctx)
        super().__init__(
            code=RegistryErrorCode.CONFIG, msg=msg, ctx=base_ctx, cause=cause
        )


def rethrow_as(error_cls: type, *, msg: str, **ctx: Any):
    """
    Context-manager converting arbitrary exceptions into a typed RegistryError
    subclass (DecodeError / ConfigError) with the original attached as cause.

      with rethrow_as(DecodeError, msg="bad tag", tag=raw):
          ... code that may raise ...
    """

    class _Ctx:
        def __enter__(self) -> None:
            return None

        def __exit__(self, exc_type, exc, tb) -> bool:
            # KeyboardInterrupt / SystemExit / GeneratorExit pass through untouched.
            if exc is None or not isinstance(exc, Exception) or isinstance(exc, RegistryError):
                return False
            raise error_cls(msg, ctx=ctx, cause=exc) from exc

    return _Ctx()


__all__ = [
    "RegistryErrorCode",
    "RegistryError",
    "ConfigurationDefect",
    "VersionMismatch",
    "MissingParameters",
    "DecodeError",
    "ConfigError",
    "rethrow_as",
]
