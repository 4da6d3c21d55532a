"""
proofparams.identifiers

Circuit-cache identifier derivation.

An identifier is a pure function of a version-tagged config's fields:

    payload = canonical_cbor({"family", "version", <config fields>})
    digest  = sha3_256( b"proofparams|circuit:id" || 0x00 || LP(payload) )
    id      = "<version prefix>-<family>-<hex(digest)>"

e.g. "v1-stacked-proof-of-replication-3f1c…"

Canonical CBOR (sorted text keys, minimal ints) plus SHA3-256 gives the same
string on every run, machine and Python build, which is what lets a cached
"<id>.params" file be reused across restarts. Every field that changes the
compiled circuit (sector size, partitions, challenge shape, priority) is in
the payload, so configs that differ in any of them get distinct ids.

Dispatch is by config *type*. A config type without a registered deriver is
a VersionMismatch, never a best-effort guess.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

import cbor2

from .errors import VersionMismatch
from .types import ParameterKind, PoStConfigV1, ProofConfig, SealConfigV1
from .utils.hash import DOM_CIRCUIT_ID, sha3_256_tag

log = logging.getLogger(__name__)


def dumps_canonical(obj: Any) -> bytes:
    """Canonical (RFC 8949 §4.2.1) CBOR encoding."""
    return cbor2.dumps(obj, canonical=True)


def _seal_v1_payload(config: SealConfigV1) -> Dict[str, Any]:
    return {
        "family": config.family,
        "version": config.version.value,
        "sector_size": int(config.sector_size),
        "partitions": int(config.partitions),
    }


def _post_v1_payload(config: PoStConfigV1) -> Dict[str, Any]:
    return {
        "family": config.family,
        "version": config.version.value,
        "sector_size": int(config.sector_size),
        "challenge_count": int(config.challenge_count),
        "challenged_nodes": int(config.challenged_nodes),
        "priority": bool(config.priority),
    }


_PAYLOADS: Dict[type, Callable[[Any], Dict[str, Any]]] = {
    SealConfigV1: _seal_v1_payload,
    PoStConfigV1: _post_v1_payload,
}


def identifier_payload(config: ProofConfig) -> Dict[str, Any]:
    """The exact field set hashed into the identifier (useful for diagnostics)."""
    build = _PAYLOADS.get(type(config))
    if build is None:
        raise VersionMismatch(
            type(config).__name__,
            operation="circuit_identifier",
            supported=tuple(t.__name__ for t in _PAYLOADS),
        )
    return build(config)


def circuit_identifier(config: ProofConfig) -> str:
    """Stable circuit-cache identifier for a version-tagged config."""
    payload = identifier_payload(config)
    digest = sha3_256_tag(DOM_CIRCUIT_ID, dumps_canonical(payload))
    ident = f"{config.version.cache_prefix}-{config.family}-{digest.hex()}"
    log.debug("derived circuit identifier", extra={"identifier": ident, "config": payload})
    return ident


def parameter_filename(identifier: str, kind: ParameterKind) -> str:
    """Parameter Table key / cache filename: "<identifier>.<suffix>"."""
    return f"{identifier}.{ParameterKind(kind).suffix}"


__all__ = [
    "dumps_canonical",
    "identifier_payload",
    "circuit_identifier",
    "parameter_filename",
]
