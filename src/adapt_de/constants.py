"""
Control Subsystem Constants
===========================

This module centralizes the constants shared by the configuration layer,
the Function tree and the control mechanisms.

Constant Categories
-------------------

1. **Tolerances**: floating point comparison threshold
2. **Context Keys**: names of the ambient values passed into every call
3. **Tree Names**: reserved child names used by the built-in nodes
4. **Console Output**: defaults of the run logger

Epsilon Comparisons
-------------------
Every "approximately equal" and "approximately zero" test in the package
uses the machine epsilon of a double:

    |a - b| < EPSILON

It absorbs only the rounding noise of a single arithmetic step, so
configured bounds such as ``[0.0, 1.0]`` accept ``1.0 + 1e-17`` but reject
``1.0 + 1e-9``.
"""

from __future__ import annotations

import numpy as np


# ============================================================================
# Tolerances
# ============================================================================

EPSILON: float = float(np.finfo(float).eps)
"""Machine epsilon of a double (~2.22e-16)."""


# ============================================================================
# Context Keys
# ============================================================================

TARGET_INDEX: str = "target_index"
"""Population slot currently being processed."""

GENERATION: str = "generation"
"""Current generation number, starting at 1."""


# ============================================================================
# Tree Names
# ============================================================================

ROOT_NAME: str = "root"
"""Name given to a Function that is not a child of another node."""

OBJECT_CHILD: str = "object"
"""Child that holds the value being adapted."""

CLASSNAME_KEY: str = "classname"
"""Configuration member resolved through the prototype registry."""


# ============================================================================
# Console Output
# ============================================================================

DEFAULT_LOG_INTERVAL: int = 50
"""Generations between two progress lines of the run logger."""
