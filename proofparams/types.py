"""
Structured types shared by the registry.

This module defines:
  • ProofVersion: open enumeration of proof versions (only V1 today).
  • SectorSize: byte count of a sector class.
  • ParameterKind: which cached artifact a lookup refers to (params / vk).
  • Version-tagged configs:
      - SealConfigV1   (sector size + PoRep partition count)
      - PoStConfigV1   (sector size + challenge shape + priority flag)
  • ParameterEntry: one row of the Parameter Table.

Notes
- Configs are tagged by *type*: a V2 config would be a new dataclass added to
  the SealConfig / PoStConfig unions, never a flag on the V1 ones.
- Validation here is limited to shape checks (positive ints, non-empty
  strings); table consistency belongs to proofparams.tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, NewType, Union

SectorSize = NewType("SectorSize", int)


def check_sector_size(n: int) -> SectorSize:
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise ValueError(f"sector size must be a positive int, got {n!r}")
    return SectorSize(n)


class ProofVersion(str, Enum):
    V1 = "V1"

    @property
    def cache_prefix(self) -> str:
        """Lower-case prefix used in circuit identifiers ("v1")."""
        return self.value.lower()


class ParameterKind(str, Enum):
    """Cached artifact kinds; the value is the filename suffix."""

    PARAMETERS = "params"
    VERIFYING_KEY = "vk"

    @property
    def suffix(self) -> str:
        return self.value


@dataclass(frozen=True)
class SealConfigV1:
    sector_size: SectorSize
    partitions: int

    version: ClassVar[ProofVersion] = ProofVersion.V1
    family: ClassVar[str] = "stacked-proof-of-replication"

    def __post_init__(self) -> None:
        check_sector_size(self.sector_size)
        if isinstance(self.partitions, bool) or not isinstance(self.partitions, int) or self.partitions <= 0:
            raise ValueError(f"partitions must be a positive int, got {self.partitions!r}")


@dataclass(frozen=True)
class PoStConfigV1:
    sector_size: SectorSize
    challenge_count: int
    challenged_nodes: int
    priority: bool

    version: ClassVar[ProofVersion] = ProofVersion.V1
    family: ClassVar[str] = "proof-of-spacetime"

    def __post_init__(self) -> None:
        check_sector_size(self.sector_size)
        for name in ("challenge_count", "challenged_nodes"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
                raise ValueError(f"{name} must be a positive int, got {v!r}")


# One member per version; extend the unions when a new version ships.
SealConfig = Union[SealConfigV1]
PoStConfig = Union[PoStConfigV1]
ProofConfig = Union[SealConfigV1, PoStConfigV1]


@dataclass(frozen=True)
class ParameterEntry:
    """
    Parameter Table row.

    Fields:
      cid:          content identifier of the file in the content-addressed store
      digest:       truncated content digest published alongside the cid (optional)
      sector_size:  sector size the file was generated for (0 if unknown)
    """

    cid: str
    digest: str = ""
    sector_size: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.cid, str) or not self.cid:
            raise ValueError("ParameterEntry.cid must be a non-empty string")


__all__ = [
    "SectorSize",
    "check_sector_size",
    "ProofVersion",
    "ParameterKind",
    "SealConfigV1",
    "PoStConfigV1",
    "SealConfig",
    "PoStConfig",
    "ProofConfig",
    "ParameterEntry",
]
