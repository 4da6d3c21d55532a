"""
proofparams.registry

The two closed catalogs of supported proofs and their per-variant accessors.

- RegisteredSealProof  (PoRep / sealing)       → SealConfigV1
- RegisteredPoStProof  (proof-of-spacetime)    → PoStConfigV1

Each variant is an Enum member whose value is its stable textual
tag ("StackedDrg1KiBV1", ...), so variants are hashable, comparable, copyable
and serialize as that tag (see proofparams.codec).

Per-variant facts (sector size, version, proof length) live in one catalog
row per variant (_SEAL_CATALOG / _POST_CATALOG). Config building dispatches
on version() through a per-version builder table; shipping V2 means adding a
row and a builder, not touching the V1 ones.

Operations that read shared tables take the RegistryContext explicitly:

    ctx = RegistryContext.build(partitions=..., parameters=..., cache_dir=...)
    p = RegisteredSealProof.STACKED_DRG_32GIB_V1
    p.partition_count(ctx)             # Partition Table (ConfigurationDefect if absent)
    p.circuit_identifier(ctx)          # "v1-stacked-proof-of-replication-…"
    p.cache_path_for_parameters(ctx)   # <cache_dir>/<id>.params
    p.verifying_key_content_id(ctx)    # Parameter Table (MissingParameters on miss)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple, Type, TypeVar

from . import cids as _cids
from . import identifiers as _identifiers
from . import paths as _paths
from .constants import (
    POST_CHALLENGE_COUNT,
    POST_CHALLENGED_NODES,
    POST_PARTITIONS,
    POST_PRIORITY,
    SECTOR_SIZE_1_GIB,
    SECTOR_SIZE_1_KIB,
    SECTOR_SIZE_16_MIB,
    SECTOR_SIZE_32_GIB,
    SECTOR_SIZE_256_MIB,
    SINGLE_PARTITION_PROOF_LEN,
)
from .errors import DecodeError, VersionMismatch
from .tables import RegistryContext
from .types import (
    ParameterKind,
    PoStConfig,
    PoStConfigV1,
    ProofConfig,
    ProofVersion,
    SealConfig,
    SealConfigV1,
    SectorSize,
)

P = TypeVar("P", bound="_ProofCatalog")


@dataclass(frozen=True)
class CatalogEntry:
    sector_size: SectorSize
    version: ProofVersion
    proof_len: int = SINGLE_PARTITION_PROOF_LEN


def _require_ctx(ctx: Optional[RegistryContext], op: str) -> RegistryContext:
    if ctx is None:
        raise TypeError(f"{op} requires a RegistryContext")
    return ctx


class _ProofCatalog:
    """Accessors shared by both catalogs (mixed into the Enums below); each catalog defines its own partition_count()."""

    # --- catalog facts ------------------------------------------------------

    def _entry(self) -> CatalogEntry:
        return _CATALOGS[type(self)][self]

    @property
    def tag(self) -> str:
        return self.value  # type: ignore[attr-defined]

    def version(self) -> ProofVersion:
        return self._entry().version

    def sector_size(self) -> SectorSize:
        return self._entry().sector_size

    def single_partition_proof_byte_length(self) -> int:
        return self._entry().proof_len

    # --- config -------------------------------------------------------------

    def to_config(self, ctx: Optional[RegistryContext] = None) -> ProofConfig:
        builders = _BUILDERS[type(self)]
        build = builders.get(self.version())
        if build is None:
            raise VersionMismatch(
                self.version(),
                operation=f"{type(self).__name__}.to_config",
                supported=tuple(builders),
                ctx={"proof": self.tag},
            )
        return build(self, ctx)

    def circuit_identifier(self, ctx: Optional[RegistryContext] = None) -> str:
        return _identifiers.circuit_identifier(self.to_config(ctx))

    # --- cache paths --------------------------------------------------------

    def cache_path(self, kind: ParameterKind, ctx: RegistryContext) -> Path:
        ctx = _require_ctx(ctx, f"{type(self).__name__}.cache_path")
        return _paths.cache_path_for(self.to_config(ctx), kind, ctx.cache_dir)

    def cache_path_for_verifying_key(self, ctx: RegistryContext) -> Path:
        return self.cache_path(ParameterKind.VERIFYING_KEY, ctx)

    def cache_path_for_parameters(self, ctx: RegistryContext) -> Path:
        return self.cache_path(ParameterKind.PARAMETERS, ctx)

    # --- content ids --------------------------------------------------------

    def content_id(self, kind: ParameterKind, ctx: RegistryContext) -> str:
        ctx = _require_ctx(ctx, f"{type(self).__name__}.content_id")
        return _cids.content_id_for(self.to_config(ctx), kind, ctx.parameters)

    def verifying_key_content_id(self, ctx: RegistryContext) -> str:
        return self.content_id(ParameterKind.VERIFYING_KEY, ctx)

    def parameters_content_id(self, ctx: RegistryContext) -> str:
        return self.content_id(ParameterKind.PARAMETERS, ctx)

    # --- lookups ------------------------------------------------------------

    @classmethod
    def from_tag(cls: Type[P], tag: str) -> P:
        try:
            return cls(tag)  # type: ignore[call-arg]
        except ValueError:
            raise DecodeError(
                f"unknown {cls.__name__} tag {tag!r}", ctx={"tag": str(tag)}
            ) from None

    @classmethod
    def from_sector_size(cls: Type[P], size: int) -> P:
        for proof, entry in _CATALOGS[cls].items():
            if entry.sector_size == size:
                return proof  # type: ignore[return-value]
        raise DecodeError(
            f"no {cls.__name__} for sector size {size}", ctx={"sector_size": size}
        )


class RegisteredSealProof(_ProofCatalog, Enum):
    """Available seal (PoRep) proofs."""

    STACKED_DRG_1KIB_V1 = "StackedDrg1KiBV1"
    STACKED_DRG_16MIB_V1 = "StackedDrg16MiBV1"
    STACKED_DRG_256MIB_V1 = "StackedDrg256MiBV1"
    STACKED_DRG_1GIB_V1 = "StackedDrg1GiBV1"
    STACKED_DRG_32GIB_V1 = "StackedDrg32GiBV1"

    def partition_count(self, ctx: Optional[RegistryContext] = None) -> int:
        """Partition Table lookup; ConfigurationDefect if the sector size is absent."""
        ctx = _require_ctx(ctx, "RegisteredSealProof.partition_count")
        return ctx.partitions.partitions_for(self.sector_size(), proof=self.tag)


class RegisteredPoStProof(_ProofCatalog, Enum):
    """Available PoSt proofs."""

    STACKED_DRG_1KIB_V1 = "StackedDrg1KiBV1"
    STACKED_DRG_16MIB_V1 = "StackedDrg16MiBV1"
    STACKED_DRG_256MIB_V1 = "StackedDrg256MiBV1"
    STACKED_DRG_1GIB_V1 = "StackedDrg1GiBV1"
    STACKED_DRG_32GIB_V1 = "StackedDrg32GiBV1"

    def partition_count(self, ctx: Optional[RegistryContext] = None) -> int:
        return POST_PARTITIONS


# ------------------------------------------------------------------------------
# Catalog rows
# ------------------------------------------------------------------------------

_SEAL_CATALOG: Dict[RegisteredSealProof, CatalogEntry] = {
    RegisteredSealProof.STACKED_DRG_1KIB_V1: CatalogEntry(SectorSize(SECTOR_SIZE_1_KIB), ProofVersion.V1),
    RegisteredSealProof.STACKED_DRG_16MIB_V1: CatalogEntry(SectorSize(SECTOR_SIZE_16_MIB), ProofVersion.V1),
    RegisteredSealProof.STACKED_DRG_256MIB_V1: CatalogEntry(SectorSize(SECTOR_SIZE_256_MIB), ProofVersion.V1),
    RegisteredSealProof.STACKED_DRG_1GIB_V1: CatalogEntry(SectorSize(SECTOR_SIZE_1_GIB), ProofVersion.V1),
    RegisteredSealProof.STACKED_DRG_32GIB_V1: CatalogEntry(SectorSize(SECTOR_SIZE_32_GIB), ProofVersion.V1),
}

_POST_CATALOG: Dict[RegisteredPoStProof, CatalogEntry] = {
    RegisteredPoStProof.STACKED_DRG_1KIB_V1: CatalogEntry(SectorSize(SECTOR_SIZE_1_KIB), ProofVersion.V1),
    RegisteredPoStProof.STACKED_DRG_16MIB_V1: CatalogEntry(SectorSize(SECTOR_SIZE_16_MIB), ProofVersion.V1),
    RegisteredPoStProof.STACKED_DRG_256MIB_V1: CatalogEntry(SectorSize(SECTOR_SIZE_256_MIB), ProofVersion.V1),
    RegisteredPoStProof.STACKED_DRG_1GIB_V1: CatalogEntry(SectorSize(SECTOR_SIZE_1_GIB), ProofVersion.V1),
    RegisteredPoStProof.STACKED_DRG_32GIB_V1: CatalogEntry(SectorSize(SECTOR_SIZE_32_GIB), ProofVersion.V1),
}

_CATALOGS: Dict[type, Dict] = {
    RegisteredSealProof: _SEAL_CATALOG,
    RegisteredPoStProof: _POST_CATALOG,
}

# ------------------------------------------------------------------------------
# Per-version config builders
# ------------------------------------------------------------------------------


def _seal_config_v1(proof: RegisteredSealProof, ctx: Optional[RegistryContext]) -> SealConfig:
    return SealConfigV1(sector_size=proof.sector_size(), partitions=proof.partition_count(ctx))


def _post_config_v1(proof: RegisteredPoStProof, ctx: Optional[RegistryContext]) -> PoStConfig:
    return PoStConfigV1(
        sector_size=proof.sector_size(),
        challenge_count=POST_CHALLENGE_COUNT,
        challenged_nodes=POST_CHALLENGED_NODES,
        priority=POST_PRIORITY,
    )


_BUILDERS: Dict[type, Dict[ProofVersion, Callable[..., ProofConfig]]] = {
    RegisteredSealProof: {ProofVersion.V1: _seal_config_v1},
    RegisteredPoStProof: {ProofVersion.V1: _post_config_v1},
}


def all_seal_proofs() -> Tuple[RegisteredSealProof, ...]:
    return tuple(RegisteredSealProof)


def all_post_proofs() -> Tuple[RegisteredPoStProof, ...]:
    return tuple(RegisteredPoStProof)


def all_proofs() -> Tuple[_ProofCatalog, ...]:
    return all_seal_proofs() + all_post_proofs()


__all__ = [
    "CatalogEntry",
    "RegisteredSealProof",
    "RegisteredPoStProof",
    "all_seal_proofs",
    "all_post_proofs",
    "all_proofs",
]
