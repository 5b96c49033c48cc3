"""Drag context dataclass for the tool controller.

Unified drag state management: one object exists between pointer-down on a
handle (or layer body) and pointer-up.
"""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np


@dataclass
class DragContext:
    """Unified drag state for tool interactions.

    Everything a tool needs to recompute the gesture from the original
    pointer-down state instead of accumulating per-frame error.
    """
    operation: str  # 'move', 'scale', 'rotate', 'distort'
    layer_uuid: str
    start_mouse: tuple  # (x, y) screen pixels at pointer-down
    handle: Optional[Any] = None

    # Start snapshots
    start_position: Optional[np.ndarray] = None
    start_scale: Optional[np.ndarray] = None
    start_size: Optional[tuple] = None  # (width, height) world units
    start_aspect: float = 1.0

    # Scale anchor (opposite corner)
    anchor_local: Optional[np.ndarray] = None
    anchor_world: Optional[np.ndarray] = None

    # Rotation
    start_angle: float = 0.0
    start_rotation: float = 0.0

    # Distortion
    local_offset: Optional[np.ndarray] = None

