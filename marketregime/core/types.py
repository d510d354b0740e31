"""
MarketRegime: Core Type Definitions

This module defines common type aliases shared across the package. It
exists to centralise frequently used type definitions and avoid circular
imports between higher-level modules.

External dependencies:
- typing / numpy.typing: Type primitives only

Thread safety: Thread-safe (no mutable global state)

Author: MarketRegime Team
Created: 2026-02-02
Last Modified: 2026-02-05
Status: Development
Version: v0.1.0
"""

# ============================================================================
# Imports
# ============================================================================

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple, TypeAlias, Union

import numpy as np
from numpy.typing import NDArray

# ============================================================================
# Type Aliases
# ============================================================================

# Any value that survives a JSON round-trip through the key-value store
JSONValue: TypeAlias = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

# Read-only mapping of canonical pair keys ("SPY-TLT") to correlations
PairMapping: TypeAlias = Mapping[str, float]

# Square float matrices (correlation matrices, Cholesky factors)
FloatMatrix: TypeAlias = NDArray[np.float64]

# Supported rolling correlation window lengths (trading days)
WINDOWS: Tuple[int, ...] = (30, 60, 90)
