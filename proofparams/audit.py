"""
proofparams.audit

Catalog ↔ table drift checks.

The catalog is closed and versioned; the Partition Table and Parameter Table
are deployed separately. These helpers walk every catalog variant and report,
without raising:

- sector sizes missing from the Partition Table  (defects)
- "<id>.params" / "<id>.vk" keys missing from the Parameter Table
  (normal while a rollout is in progress)

`required_parameter_files(ctx)` is the list a publisher/fetcher works from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from .errors import ConfigurationDefect
from .identifiers import parameter_filename
from .paths import cache_path_for_identifier
from .registry import all_proofs
from .tables import RegistryContext
from .types import ParameterKind

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequiredFile:
    proof: str          # "<Catalog>.<tag>", e.g. "RegisteredSealProof.StackedDrg1KiBV1"
    kind: ParameterKind
    identifier: str
    filename: str
    path: Path


@dataclass(frozen=True)
class AuditReport:
    checked: int = 0
    defects: Tuple[ConfigurationDefect, ...] = ()
    missing: Tuple[RequiredFile, ...] = ()
    present: Tuple[RequiredFile, ...] = field(default=(), repr=False)

    @property
    def ok(self) -> bool:
        return not self.defects and not self.missing

    def raise_for_defects(self) -> None:
        """Re-raise the first configuration defect, if any."""
        if self.defects:
            raise self.defects[0]

    def summary(self) -> dict:
        return {
            "checked": self.checked,
            "defects": [d.to_dict() for d in self.defects],
            "missing": [f.filename for f in self.missing],
            "present": len(self.present),
            "ok": self.ok,
        }


def _label(proof) -> str:
    return f"{type(proof).__name__}.{proof.tag}"


def required_parameter_files(ctx: RegistryContext) -> List[RequiredFile]:
    """
    Every parameter file the full catalog needs, in catalog order.

    Raises ConfigurationDefect when a seal sector size is absent from the
    Partition Table (the identifier cannot be derived without it).
    """
    out: List[RequiredFile] = []
    for proof in all_proofs():
        ident = proof.circuit_identifier(ctx)
        for kind in (ParameterKind.PARAMETERS, ParameterKind.VERIFYING_KEY):
            out.append(
                RequiredFile(
                    proof=_label(proof),
                    kind=kind,
                    identifier=ident,
                    filename=parameter_filename(ident, kind),
                    path=cache_path_for_identifier(ident, kind, ctx.cache_dir),
                )
            )
    return out


def audit_catalog(ctx: RegistryContext) -> AuditReport:
    defects: List[ConfigurationDefect] = []
    missing: List[RequiredFile] = []
    present: List[RequiredFile] = []
    checked = 0

    for proof in all_proofs():
        checked += 1
        try:
            ident = proof.circuit_identifier(ctx)
        except ConfigurationDefect as e:
            defects.append(e)
            continue
        for kind in (ParameterKind.PARAMETERS, ParameterKind.VERIFYING_KEY):
            filename = parameter_filename(ident, kind)
            rf = RequiredFile(
                proof=_label(proof),
                kind=kind,
                identifier=ident,
                filename=filename,
                path=cache_path_for_identifier(ident, kind, ctx.cache_dir),
            )
            (present if filename in ctx.parameters else missing).append(rf)

    report = AuditReport(
        checked=checked,
        defects=tuple(defects),
        missing=tuple(missing),
        present=tuple(present),
    )
    if report.defects:
        log.error("catalog audit found configuration defects", extra=report.summary())
    elif report.missing:
        log.warning("catalog audit: parameters not yet published", extra={"missing": len(report.missing)})
    else:
        log.info("catalog audit ok", extra={"checked": checked, "present": len(present)})
    return report


__all__ = [
    "RequiredFile",
    "AuditReport",
    "required_parameter_files",
    "audit_catalog",
]
