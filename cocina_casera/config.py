"""
Configuration Module for Cocina Casera Orders
=============================================

This module centralizes the settings and environment variables used by the
order core. Values are read once at import time (after loading a local
.env file, if present) and exposed both as module-level constants and as
accessor functions that tests can monkeypatch.

Environment Variables:
----------------------
- GROUPING_DIFF_THRESHOLD: Max differing fields for two items to be grouped
  (default: 3)
- RESTAURANT_NAME: Name used in the order message greeting
  (default: "Cocina Casera")
- PAYMENT_PHONE: Nequi/DaviPlata number shown in payment instructions
  (default: "313 850 5647")
- REQUIRES_REPLACEMENT_ADDITIONS: Comma-separated addition names that need a
  protein or replacement before checkout
- ESTIMATED_DELIVERY_TEXT: Closing line of the order message

Usage:
------
    from cocina_casera.config import get_grouping_threshold, PAYMENT_PHONE
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


# =============================================================================
# Grouping Configuration
# =============================================================================

def _int_env(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


# Items differing in at most this many fields are shown as one group
GROUPING_DIFF_THRESHOLD: int = _int_env("GROUPING_DIFF_THRESHOLD", 3)


def get_grouping_threshold() -> int:
    """
    Return the grouping threshold.

    Read at call time, so patching GROUPING_DIFF_THRESHOLD takes effect
    without reloading the module.
    """
    return GROUPING_DIFF_THRESHOLD


# =============================================================================
# Additions Configuration
# =============================================================================
# Additions whose name is listed here must carry a protein ("Proteína
# adicional") or a replacement (the rest) before the order can be sent.

DEFAULT_REQUIRES_REPLACEMENT_ADDITIONS: List[str] = [
    "Proteína adicional",
    "Sopa adicional",
    "Principio adicional",
    "Bebida adicional",
]

_requires_replacement_env = os.getenv("REQUIRES_REPLACEMENT_ADDITIONS", "")
REQUIRES_REPLACEMENT_ADDITIONS: List[str] = [
    name.strip()
    for name in _requires_replacement_env.split(",")
    if name.strip()
] or list(DEFAULT_REQUIRES_REPLACEMENT_ADDITIONS)


def get_requires_replacement_additions() -> frozenset[str]:
    """Return the addition names that need a protein or replacement."""
    return frozenset(REQUIRES_REPLACEMENT_ADDITIONS)


# =============================================================================
# Message Configuration
# =============================================================================

RESTAURANT_NAME: str = os.getenv("RESTAURANT_NAME", "Cocina Casera")
PAYMENT_PHONE: str = os.getenv("PAYMENT_PHONE", "313 850 5647")
ESTIMATED_DELIVERY_TEXT: str = os.getenv(
    "ESTIMATED_DELIVERY_TEXT",
    "Entrega estimada: 20–30 minutos. Si estás cerca del local, será aún más rápido.",
)
