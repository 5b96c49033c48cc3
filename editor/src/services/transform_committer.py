"""
Planar Layer Compositor - Transform Committer

Bakes live-preview transforms into a layer's canonical fields:
- Rotation: pivot setup at gesture start, pivot * layer composition on commit
- Flip: reflection about the world bounds center, decomposed back into
  position/rotation/scale

This module is pure domain logic - no UI dependencies.
"""

import logging

import numpy as np

from models.pivot import Pivot
from utils.transform_math import reflection_matrix


class TransformCommitter:
    """Finalizes rotate gestures and applies flips"""

    def __init__(self):
        self._logger = logging.getLogger('TransformCommitter')

    # ========================================
    # Rotation
    # ========================================

    def begin_rotation(self, layer) -> Pivot:
        """Put the layer under a fresh pivot at its world bounding-rect center

        The layer's position is re-expressed relative to the pivot so its
        world placement is unchanged (the pivot starts with zero rotation).

        Args:
            layer: Layer about to be rotated

        Returns:
            The new Pivot (also stored on layer.pivot)
        """
        assert layer.pivot is None, f"Layer {layer.uuid} already has an active pivot"

        center = layer.world_bounds().center
        pivot = Pivot(center=center.copy(), rotation=0.0)
        layer.transform.position = layer.transform.position - center
        layer.pivot = pivot

        self._logger.debug(f"Pivot created for layer {layer.uuid} at {center.round(4).tolist()}")
        return pivot

    def commit_rotation(self, layer):
        """Bake the pivot rotation into the layer and drop the pivot

        layer.matrix = pivot.matrix * layer.matrix, decomposed back into the
        layer's position/rotation/scale. The pivot is detached even if the
        composition fails; in that case the position is moved back out of
        pivot space and the layer returns to its pre-gesture placement.

        Args:
            layer: Layer with an active pivot
        """
        assert layer.pivot is not None, f"Commit requested for layer {layer.uuid} with no active pivot"

        pivot = layer.pivot
        committed = False
        try:
            composed = pivot.matrix() @ layer.transform.matrix()
            layer.transform.set_from_matrix(composed)
            committed = True
            self._logger.debug(
                f"Committed rotation {np.degrees(pivot.rotation):.2f}° on layer {layer.uuid}"
            )
            pivot.reset()
        finally:
            if not committed:
                layer.transform.position = layer.transform.position + pivot.center
                self._logger.debug(f"Rotation commit failed on layer {layer.uuid}, pivot discarded")
            layer.pivot = None

    # ========================================
    # Flip
    # ========================================

    def flip_layer(self, layer, axis: str):
        """Mirror the layer about its world bounding-box center

        Composes reflection * world matrix, moves the result into the
        parent's space and decomposes it, so already-rotated layers reflect
        correctly (not a plain scale sign toggle).

        Args:
            layer: Layer to flip
            axis: 'x' (mirror left/right) or 'y' (mirror top/bottom)

        Raises:
            ValueError: If axis is not 'x' or 'y'
        """
        center = layer.world_bounds().center
        reflection = reflection_matrix(axis, center)
        world = reflection @ layer.world_matrix()
        local = np.linalg.inv(layer.parent_matrix()) @ world
        layer.transform.set_from_matrix(local)

        self._logger.debug(f"Flipped layer {layer.uuid} on {axis} about {center.round(4).tolist()}")
