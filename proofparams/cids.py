"""
proofparams.cids

Content-identifier resolution against the Parameter Table.

A miss is the registry's one *expected* failure: it means the artifacts for
a catalog variant have not been published yet. It is raised as
MissingParameters (retryable=True) carrying identifier, kind and key; no
retry happens here.
"""

from __future__ import annotations

import logging
from typing import Mapping

from .errors import MissingParameters
from .identifiers import circuit_identifier, parameter_filename
from .types import ParameterEntry, ParameterKind, ProofConfig

log = logging.getLogger(__name__)


def lookup_entry(
    identifier: str,
    kind: ParameterKind,
    parameters: Mapping[str, ParameterEntry],
) -> ParameterEntry:
    """Exact-key lookup of "<identifier>.<suffix>"; MissingParameters on a miss."""
    key = parameter_filename(identifier, kind)
    entry = parameters.get(key)
    if entry is None:
        log.warning(
            "parameter table has no entry",
            extra={"identifier": identifier, "kind": ParameterKind(kind).value, "key": key},
        )
        raise MissingParameters(identifier, ParameterKind(kind), key=key)
    log.debug("parameter table hit", extra={"key": key, "cid": entry.cid})
    return entry


def content_id_for(
    config: ProofConfig,
    kind: ParameterKind,
    parameters: Mapping[str, ParameterEntry],
) -> str:
    return lookup_entry(circuit_identifier(config), kind, parameters).cid


def verifying_key_cid(config: ProofConfig, parameters: Mapping[str, ParameterEntry]) -> str:
    return content_id_for(config, ParameterKind.VERIFYING_KEY, parameters)


def params_cid(config: ProofConfig, parameters: Mapping[str, ParameterEntry]) -> str:
    return content_id_for(config, ParameterKind.PARAMETERS, parameters)


__all__ = [
    "lookup_entry",
    "content_id_for",
    "verifying_key_cid",
    "params_cid",
]
