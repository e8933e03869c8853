from __future__ import annotations

"""
Geometry Contract

Single source of truth for tolerances and unit conventions shared by the
floor-plane validator and the collision engine. All modules should import
from here instead of hardcoding.
"""

# Lengths in feet unless noted; angles in degrees

# Equality / closure tolerance for coordinates
EPS = 1e-6

# Rings
MIN_RING_POINTS = 3

# Collision boxes: floor for non-positive dimensions in the incremental engine
MIN_BOX_DIMENSION_FT = 1e-6

# Orientation is carried with equipment positions but never used in overlap math
ORIENTATION_MIN_DEG = 0.0
ORIENTATION_MAX_DEG = 360.0
