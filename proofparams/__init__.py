"""
proofparams: proof-parameter registry.

A closed catalog of supported proof configurations (seal/PoRep and PoSt)
with deterministic derivation of each variant's config, circuit-cache
identifier, cache paths, and parameter/verifying-key content identifiers.

Public surface:
- RegisteredSealProof, RegisteredPoStProof: the catalogs
- RegistryContext: injected Partition Table + Parameter Table + cache root
- errors: RegistryError and its subtypes
- config.load(): layered settings
"""

from . import config, errors
from .audit import AuditReport, RequiredFile, audit_catalog, required_parameter_files
from .errors import (
    ConfigError,
    ConfigurationDefect,
    DecodeError,
    MissingParameters,
    RegistryError,
    RegistryErrorCode,
    VersionMismatch,
)
from .identifiers import circuit_identifier, parameter_filename
from .registry import (
    RegisteredPoStProof,
    RegisteredSealProof,
    all_post_proofs,
    all_proofs,
    all_seal_proofs,
)
from .tables import ParameterTable, PartitionTable, RegistryContext
from .types import (
    ParameterEntry,
    ParameterKind,
    PoStConfigV1,
    ProofVersion,
    SealConfigV1,
)
from .version import __version__

__all__ = [
    "__version__",
    "config",
    "errors",
    # catalogs
    "RegisteredSealProof",
    "RegisteredPoStProof",
    "all_seal_proofs",
    "all_post_proofs",
    "all_proofs",
    # tables & context
    "PartitionTable",
    "ParameterTable",
    "RegistryContext",
    # types
    "ProofVersion",
    "ParameterKind",
    "ParameterEntry",
    "SealConfigV1",
    "PoStConfigV1",
    # derivation
    "circuit_identifier",
    "parameter_filename",
    # audit
    "AuditReport",
    "RequiredFile",
    "audit_catalog",
    "required_parameter_files",
    # errors
    "RegistryError",
    "RegistryErrorCode",
    "ConfigurationDefect",
    "VersionMismatch",
    "MissingParameters",
    "DecodeError",
    "ConfigError",
]
