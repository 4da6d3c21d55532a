"""
Catalog constants: sector sizes, default partition counts, proof lengths and
PoSt challenge parameters.

The default Partition Table below is what a process gets when it does not
supply its own; deployments override it through settings
(`PROOFPARAMS_POREP_PARTITIONS`) or by building a RegistryContext directly.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# Sector sizes (bytes)
SECTOR_SIZE_1_KIB = 1 << 10
SECTOR_SIZE_16_MIB = 1 << 24
SECTOR_SIZE_256_MIB = 1 << 28
SECTOR_SIZE_1_GIB = 1 << 30
SECTOR_SIZE_32_GIB = 1 << 35

# Groth16 proof over BLS12-381: A (G1, 48) + B (G2, 96) + C (G1, 48)
SINGLE_PARTITION_PROOF_LEN = 192

# PoSt challenge shape shared by every current PoSt variant.
POST_CHALLENGE_COUNT = 40
POST_CHALLENGED_NODES = 1
POST_PRIORITY = True
POST_PARTITIONS = 1

DEFAULT_POREP_PARTITIONS: Mapping[int, int] = MappingProxyType(
    {
        SECTOR_SIZE_1_KIB: 1,
        SECTOR_SIZE_16_MIB: 1,
        SECTOR_SIZE_256_MIB: 1,
        SECTOR_SIZE_1_GIB: 1,
        SECTOR_SIZE_32_GIB: 10,
    }
)

# Parameter cache root used when neither settings nor env name one.
DEFAULT_PARAMETER_CACHE = "/var/tmp/filecoin-proof-parameters"

__all__ = [
    "SECTOR_SIZE_1_KIB",
    "SECTOR_SIZE_16_MIB",
    "SECTOR_SIZE_256_MIB",
    "SECTOR_SIZE_1_GIB",
    "SECTOR_SIZE_32_GIB",
    "SINGLE_PARTITION_PROOF_LEN",
    "POST_CHALLENGE_COUNT",
    "POST_CHALLENGED_NODES",
    "POST_PRIORITY",
    "POST_PARTITIONS",
    "DEFAULT_POREP_PARTITIONS",
    "DEFAULT_PARAMETER_CACHE",
]
