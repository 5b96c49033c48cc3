"""Ephemeral rotation pivot.

The pivot stands in for a temporary parent node during a rotate gesture: the
layer's transform is expressed relative to it while the gesture is live and
the accumulated rotation is baked back into the layer on commit. It is a
plain value held by the layer, not a scene-graph object.
"""

from dataclasses import dataclass, field

import numpy as np

from utils.transform_math import rotation_z_matrix, translation_matrix


@dataclass
class Pivot:
    """Rotation pivot at a world-space center.

    Attributes:
        center: World position of the pivot (bounding-rect center at gesture start)
        rotation: Accumulated rotation about Z in radians
    """
    center: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: float = 0.0

    def matrix(self):
        """Pivot matrix T(center) * Rz(rotation)"""
        return translation_matrix(self.center) @ rotation_z_matrix(self.rotation)

    def reset(self):
        """Return to identity rotation (center kept)"""
        self.rotation = 0.0
