"""
Planar Layer Compositor - Layer Data Model

Provides the object-oriented layer used by the transform engine:
- UUID-based identification (stable across reordering)
- Vertex grid geometry (layer-local space)
- Local transform (position, orientation, signed scale)
- Optional rotation pivot while a rotate gesture is live
- Dense z-order maintained by the LayerStore

This is part of the MODEL layer - pure data, no UI logic.

Usage:
    layer = Layer(LayerGeometry(100, 100, 10, 10), name='photo.png')
    world = layer.local_to_world((50, 50, 0))
    bounds = layer.world_bounds()
"""

import uuid as uuid_module
from typing import Any, Dict, Optional

import numpy as np

from constants import DEFAULT_LAYER_NAME
from models.geometry import Bounds, LayerGeometry
from models.pivot import Pivot
from models.transform import Transform
from utils.transform_math import identity_matrix, transform_point


class Layer:
    """Independently transformable planar image quad.

    Attributes:
        geometry: LayerGeometry grid (local space)
        transform: Transform relative to the parent (the scene root, or the
            pivot while a rotate gesture is live)
        pivot: Active rotation Pivot, or None
        z_order: Dense stacking index (0 = bottom), owned by LayerStore
        image: Host-side image handle, opaque to the engine
        metadata: Free-form dict, opaque to the engine
    """

    def __init__(self, geometry: LayerGeometry, transform: Optional[Transform] = None,
                 name: Optional[str] = None, image: Any = None):
        self._uuid = str(uuid_module.uuid4())
        self.name = name or DEFAULT_LAYER_NAME
        self.geometry = geometry
        self.transform = transform.copy() if transform is not None else Transform()
        self.pivot: Optional[Pivot] = None
        self.z_order = 0
        self.image = image
        self.metadata: Dict[str, Any] = {}

    @property
    def uuid(self) -> str:
        """Stable layer identity"""
        return self._uuid

    def __repr__(self) -> str:
        return f"Layer({self.name!r}, uuid={self._uuid[:8]}, z={self.z_order})"

    # ========================================
    # Matrices
    # ========================================

    def parent_matrix(self):
        """World matrix of the parent: the pivot during a rotate gesture, identity otherwise"""
        if self.pivot is not None:
            return self.pivot.matrix()
        return identity_matrix()

    def world_matrix(self):
        """Full model matrix, rebuilt from live fields on every call"""
        return self.parent_matrix() @ self.transform.matrix()

    def inverse_world_matrix(self):
        return np.linalg.inv(self.world_matrix())

    # ========================================
    # Space conversion
    # ========================================

    def local_to_world(self, point):
        return transform_point(self.world_matrix(), point)

    def world_to_local(self, point):
        return transform_point(self.inverse_world_matrix(), point)

    def world_vertices(self):
        return self.geometry.world_vertices(self.world_matrix())

    def world_bounds(self) -> Bounds:
        """World AABB recomputed from every vertex under the live transform"""
        return self.geometry.world_bounds(self.world_matrix())

    def world_corners(self):
        """World positions of the grid corners (top-left, top-right, bottom-right, bottom-left)"""
        m = self.world_matrix()
        return [transform_point(m, v) for v in self.geometry.corner_vertices()]

    def apply_corner_distortion(self, corners_world):
        """Distort the grid so its corners land on ``corners_world``"""
        self.geometry.apply_corner_distortion(corners_world, self.inverse_world_matrix())
