"""
Immutable lookup tables and the injected registry context.

- PartitionTable:  sector size → PoRep partition count
- ParameterTable:  "<circuit-identifier>.<suffix>" → ParameterEntry
- RegistryContext: both tables plus the parameter cache root, built once at
                   startup and passed into every catalog operation.

Tables copy their input and expose read-only views, so a context can be
shared by any number of threads without locking. There is no way to mutate
a table after construction; `with_parameters()` / `without()` return new
objects.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Optional, Union

from .config import Settings
from .constants import DEFAULT_PARAMETER_CACHE, DEFAULT_POREP_PARTITIONS
from .errors import ConfigurationDefect
from .types import ParameterEntry

log = logging.getLogger(__name__)

EntryLike = Union[ParameterEntry, Mapping[str, Any], str]


class PartitionTable(Mapping):
    """Read-only {sector_size: partitions} mapping."""

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[int, int]] = None) -> None:
        src = DEFAULT_POREP_PARTITIONS if data is None else data
        checked = {}
        for size, count in src.items():
            if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
                raise ValueError(f"partition table key must be a positive int, got {size!r}")
            if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
                raise ValueError(f"partition count for {size} must be a positive int, got {count!r}")
            checked[size] = count
        self._data = MappingProxyType(checked)

    def __getitem__(self, size: int) -> int:
        return self._data[size]

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"PartitionTable({dict(self._data)!r})"

    def partitions_for(self, sector_size: int, *, proof: Optional[str] = None) -> int:
        """Partition count for a sector size; a missing entry is a ConfigurationDefect."""
        try:
            return self._data[sector_size]
        except KeyError:
            raise ConfigurationDefect(sector_size, proof=proof) from None


def _coerce_entry(key: str, value: EntryLike) -> ParameterEntry:
    if isinstance(value, ParameterEntry):
        return value
    if isinstance(value, str):
        return ParameterEntry(cid=value)
    if isinstance(value, Mapping):
        return ParameterEntry(
            cid=value.get("cid", ""),
            digest=str(value.get("digest", "")),
            sector_size=int(value.get("sector_size", 0)),
        )
    raise TypeError(f"parameter entry for {key!r} must be ParameterEntry, mapping or cid string")


class ParameterTable(Mapping):
    """
    Read-only {filename key: ParameterEntry} mapping.

    Values may be given as ParameterEntry, as manifest-style dicts
    ({"cid": ..., "digest": ..., "sector_size": ...}) or as bare cid strings.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[str, EntryLike]] = None) -> None:
        checked = {}
        for key, value in (data or {}).items():
            if not isinstance(key, str) or not key:
                raise ValueError(f"parameter table key must be a non-empty string, got {key!r}")
            checked[key] = _coerce_entry(key, value)
        self._data = MappingProxyType(checked)

    def __getitem__(self, key: str) -> ParameterEntry:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ParameterTable(<{len(self._data)} entries>)"

    def without(self, *keys: str) -> "ParameterTable":
        """A copy with the given keys dropped (missing keys are ignored)."""
        drop = set(keys)
        return ParameterTable({k: v for k, v in self._data.items() if k not in drop})

    def merged(self, extra: Mapping[str, EntryLike]) -> "ParameterTable":
        """A copy with `extra` entries added or replacing existing ones."""
        out: dict = dict(self._data)
        out.update(extra)
        return ParameterTable(out)


@dataclass(frozen=True)
class RegistryContext:
    """
    Everything catalog operations read: the two tables and the cache root.

    Build one per process (or per test) and pass it to variant methods:

        ctx = RegistryContext.from_settings(config.load(), parameters=manifest)
        RegisteredSealProof.STACKED_DRG_1KIB_V1.parameters_content_id(ctx)
    """

    partitions: PartitionTable = field(default_factory=PartitionTable)
    parameters: ParameterTable = field(default_factory=ParameterTable)
    cache_dir: Path = field(default_factory=lambda: Path(DEFAULT_PARAMETER_CACHE))

    @classmethod
    def build(
        cls,
        *,
        partitions: Optional[Mapping[int, int]] = None,
        parameters: Optional[Mapping[str, EntryLike]] = None,
        cache_dir: Optional[str | Path] = None,
    ) -> "RegistryContext":
        ctx = cls(
            partitions=partitions if isinstance(partitions, PartitionTable) else PartitionTable(partitions),
            parameters=parameters if isinstance(parameters, ParameterTable) else ParameterTable(parameters),
            cache_dir=Path(cache_dir) if cache_dir is not None else Path(DEFAULT_PARAMETER_CACHE),
        )
        log.debug(
            "registry context built",
            extra={
                "partitions": len(ctx.partitions),
                "parameters": len(ctx.parameters),
                "cache_dir": str(ctx.cache_dir),
            },
        )
        return ctx

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        parameters: Optional[Mapping[str, EntryLike]] = None,
    ) -> "RegistryContext":
        return cls.build(
            partitions=settings.partition_table(),
            parameters=parameters,
            cache_dir=settings.parameter_cache_dir,
        )

    def with_parameters(self, parameters: Mapping[str, EntryLike]) -> "RegistryContext":
        table = parameters if isinstance(parameters, ParameterTable) else ParameterTable(parameters)
        return replace(self, parameters=table)

    def with_partitions(self, partitions: Mapping[int, int]) -> "RegistryContext":
        table = partitions if isinstance(partitions, PartitionTable) else PartitionTable(partitions)
        return replace(self, partitions=table)


__all__ = [
    "PartitionTable",
    "ParameterTable",
    "RegistryContext",
]
