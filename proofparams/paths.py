"""
proofparams.paths

Cache path resolution. Pure string/path computation under the cache root;
nothing here touches the filesystem, so whether the file exists is the
caller's concern.
"""

from __future__ import annotations

from pathlib import Path

from .identifiers import circuit_identifier, parameter_filename
from .types import ParameterKind, ProofConfig


def cache_path_for_identifier(identifier: str, kind: ParameterKind, cache_dir: str | Path) -> Path:
    return Path(cache_dir) / parameter_filename(identifier, kind)


def cache_path_for(config: ProofConfig, kind: ParameterKind, cache_dir: str | Path) -> Path:
    """<cache_dir>/<circuit_identifier(config)>.<params|vk>"""
    return cache_path_for_identifier(circuit_identifier(config), kind, cache_dir)


def cache_verifying_key_path(config: ProofConfig, cache_dir: str | Path) -> Path:
    return cache_path_for(config, ParameterKind.VERIFYING_KEY, cache_dir)


def cache_params_path(config: ProofConfig, cache_dir: str | Path) -> Path:
    return cache_path_for(config, ParameterKind.PARAMETERS, cache_dir)


__all__ = [
    "cache_path_for_identifier",
    "cache_path_for",
    "cache_verifying_key_path",
    "cache_params_path",
]
