"""
Common helpers for the proofparams test-suite.

Import from tests like:

    from proofparams.tests import full_context, fake_cid, configure_test_logging

Environment toggles:
- PROOFPARAMS_TEST_LOG=1   → enable DEBUG logging for proofparams.*
- HYPOTHESIS_PROFILE=dev|ci|fast
- CI=true                  → pick the 'ci' Hypothesis profile when none is set
"""

from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from hypothesis import HealthCheck, settings

from proofparams.audit import required_parameter_files
from proofparams.tables import RegistryContext
from proofparams.types import ParameterEntry

THIS_FILE = Path(__file__).resolve()
TESTS_DIR = THIS_FILE.parent
PACKAGE_DIR = TESTS_DIR.parent
REPO_ROOT = PACKAGE_DIR.parent

# Partition Table used across the suite; 1 KiB deliberately differs from the
# built-in default so tests prove the value comes from the injected table.
TEST_PARTITIONS: Dict[int, int] = {
    1 << 10: 2,
    1 << 24: 2,
    1 << 28: 2,
    1 << 30: 4,
    1 << 35: 10,
}


# ---------- environment helpers ----------


def env_flag(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


def configure_test_logging(level: int = logging.DEBUG) -> None:
    """Configure basic logging for proofparams.* when PROOFPARAMS_TEST_LOG is set."""
    if env_flag("PROOFPARAMS_TEST_LOG"):
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
        logging.getLogger("proofparams").setLevel(level)


# ---------- table builders ----------


def fake_cid(filename: str) -> str:
    """Deterministic CID-looking string for a parameter filename."""
    return "Qm" + hashlib.sha256(filename.encode("utf-8")).hexdigest()[:44]


def full_parameter_table(ctx: RegistryContext) -> Dict[str, ParameterEntry]:
    """A Parameter Table covering every file the catalog needs under ctx's partitions."""
    out: Dict[str, ParameterEntry] = {}
    for rf in required_parameter_files(ctx):
        out[rf.filename] = ParameterEntry(
            cid=fake_cid(rf.filename),
            digest=hashlib.sha256(rf.filename.encode("utf-8")).hexdigest()[:32],
        )
    return out


def full_context(
    *,
    partitions: Optional[Dict[int, int]] = None,
    cache_dir: str | Path = "/tmp/proofparams-test-cache",
) -> RegistryContext:
    """A context whose Parameter Table is populated for the full current catalog."""
    base = RegistryContext.build(
        partitions=TEST_PARTITIONS if partitions is None else partitions,
        cache_dir=cache_dir,
    )
    return base.with_parameters(full_parameter_table(base))


# ---------- Hypothesis profiles ----------

settings.register_profile(
    "dev",
    settings(max_examples=100, deadline=None, suppress_health_check=(HealthCheck.too_slow,)),
)
settings.register_profile(
    "ci",
    settings(
        max_examples=200,
        deadline=None,
        derandomize=True,
        suppress_health_check=(HealthCheck.too_slow,),
    ),
)
settings.register_profile("fast", settings(max_examples=25, deadline=None))
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE") or ("ci" if env_flag("CI") else "dev"))

configure_test_logging()

__all__ = [
    "REPO_ROOT",
    "TEST_PARTITIONS",
    "env_flag",
    "configure_test_logging",
    "fake_cid",
    "full_parameter_table",
    "full_context",
]
