"""
Version of the proofparams package.

It can be overridden at build time with the env var PROOFPARAMS_VERSION.
"""

from __future__ import annotations

import os

__version__ = os.getenv("PROOFPARAMS_VERSION", "0.1.0")
