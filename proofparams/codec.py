"""
proofparams.codec

Wire forms for catalog values and versioned configs, via msgspec.

- A catalog variant serializes as its textual tag: JSON `"StackedDrg1KiBV1"`,
  MessagePack str. Decoding is strict: an unknown tag raises DecodeError and
  never falls back to some default variant.
- Configs round-trip through a JSON-friendly dict that carries its
  {"version", "family"} tag so the right versioned type can be rebuilt.

Public API
----------
- encode_json(obj) -> bytes          / decode_json(data, type_)
- encode_msgpack(obj) -> bytes       / decode_msgpack(data, type_)
- decode_seal_proof(data) / decode_post_proof(data)   (JSON)
- config_to_dict(config) -> dict     / config_from_dict(d) -> ProofConfig
"""

from __future__ import annotations

from typing import Any, Dict, Type, TypeVar, Union

import msgspec

from .errors import DecodeError, VersionMismatch, rethrow_as
from .registry import RegisteredPoStProof, RegisteredSealProof
from .types import PoStConfigV1, ProofConfig, SealConfigV1

T = TypeVar("T")

BytesLike = Union[bytes, bytearray, memoryview, str]

_json_encoder = msgspec.json.Encoder()
_msgpack_encoder = msgspec.msgpack.Encoder()

# (family, version) → config type
_CONFIG_TYPES: Dict[tuple, type] = {
    (SealConfigV1.family, SealConfigV1.version.value): SealConfigV1,
    (PoStConfigV1.family, PoStConfigV1.version.value): PoStConfigV1,
}


def encode_json(obj: Any) -> bytes:
    return _json_encoder.encode(obj)


def decode_json(data: BytesLike, type_: Type[T]) -> T:
    with rethrow_as(DecodeError, msg=f"cannot decode {getattr(type_, '__name__', type_)} from JSON"):
        return msgspec.json.decode(data, type=type_)


def encode_msgpack(obj: Any) -> bytes:
    return _msgpack_encoder.encode(obj)


def decode_msgpack(data: BytesLike, type_: Type[T]) -> T:
    with rethrow_as(DecodeError, msg=f"cannot decode {getattr(type_, '__name__', type_)} from msgpack"):
        return msgspec.msgpack.decode(data, type=type_)


def decode_seal_proof(data: BytesLike) -> RegisteredSealProof:
    return decode_json(data, RegisteredSealProof)


def decode_post_proof(data: BytesLike) -> RegisteredPoStProof:
    return decode_json(data, RegisteredPoStProof)


def config_to_dict(config: ProofConfig) -> Dict[str, Any]:
    """{"family", "version", <fields>} with only JSON builtins."""
    if type(config) not in _CONFIG_TYPES.values():
        raise VersionMismatch(
            type(config).__name__,
            operation="config_to_dict",
            supported=tuple(t.__name__ for t in _CONFIG_TYPES.values()),
        )
    out: Dict[str, Any] = {"family": config.family, "version": config.version.value}
    out.update(msgspec.to_builtins(config))
    return out


def config_from_dict(d: Dict[str, Any]) -> ProofConfig:
    key = (d.get("family"), d.get("version"))
    cfg_type = _CONFIG_TYPES.get(key)
    if cfg_type is None:
        raise VersionMismatch(
            f"{key[0]}/{key[1]}",
            operation="config_from_dict",
            supported=tuple(f"{f}/{v}" for f, v in _CONFIG_TYPES),
        )
    fields = {k: v for k, v in d.items() if k not in ("family", "version")}
    with rethrow_as(DecodeError, msg=f"invalid {cfg_type.__name__} fields", family=key[0]):
        return msgspec.convert(fields, type=cfg_type)


__all__ = [
    "encode_json",
    "decode_json",
    "encode_msgpack",
    "decode_msgpack",
    "decode_seal_proof",
    "decode_post_proof",
    "config_to_dict",
    "config_from_dict",
]
