"""
proofparams.utils.hash

Domain-separated SHA3-256 helpers used to derive circuit identifiers.

Design rules
- Always domain-separate bytes with a canonical ASCII tag.
- Never concatenate raw variable-length fields without a length prefix.
"""

from __future__ import annotations

import hashlib
from typing import Union

_PREFIX = b"proofparams|"

# Domains
DOM_CIRCUIT_ID = "circuit:id"

BytesLike = Union[bytes, bytearray, memoryview]


def domain_tag(name: str) -> bytes:
    """
    Return the canonical domain tag bytes for a given ASCII name.
    Example: "circuit:id" -> b"proofparams|circuit:id"
    """
    try:
        name_bytes = name.encode("ascii")
    except UnicodeEncodeError as e:
        raise ValueError("domain name must be ASCII") from e
    return _PREFIX + name_bytes


def _lp(part: BytesLike) -> bytes:
    b = bytes(part)
    return len(b).to_bytes(8, "big") + b


def tag_bytes(tag: str, *parts: BytesLike) -> bytes:
    """
    data = domain_tag(tag) || 0x00 || LP(part1) || LP(part2) || ...
    """
    out = bytearray(domain_tag(tag))
    out += b"\x00"
    for p in parts:
        out += _lp(p)
    return bytes(out)


def sha3_256(data: BytesLike) -> bytes:
    return hashlib.sha3_256(bytes(data)).digest()


def sha3_256_tag(tag: str, *parts: BytesLike) -> bytes:
    return sha3_256(tag_bytes(tag, *parts))


__all__ = [
    "DOM_CIRCUIT_ID",
    "domain_tag",
    "tag_bytes",
    "sha3_256",
    "sha3_256_tag",
]
