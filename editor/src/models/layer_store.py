"""
Planar Layer Compositor - Layer Store

Ordered layer collection with:
- List-like access (indexing, iteration, len) in z-order (index 0 = bottom)
- Layer management (add, remove, reorder)
- Dense z-order renumbering (also drives each layer's depth)
- Single selection state
- UUID-based lookups
"""

import logging
from typing import List, Optional

from constants import LAYER_DEPTH_SPACING
from models.geometry import LayerGeometry
from models.layer import Layer
from models.transform import Transform


class LayerStore:
    """Collection of Layer objects ordered bottom to top"""

    DIRECTIONS = {'up': 1, 'down': -1}

    def __init__(self):
        self._logger = logging.getLogger('LayerStore')
        self._layers: List[Layer] = []
        self._selected_uuid: Optional[str] = None

    def __len__(self) -> int:
        """Get number of layers"""
        return len(self._layers)

    def __getitem__(self, index: int) -> Layer:
        """Get layer by z-order index"""
        return self._layers[index]

    def __iter__(self):
        """Iterate bottom to top"""
        return iter(self._layers)

    def __repr__(self) -> str:
        return f"LayerStore({len(self._layers)} layers)"

    # ========================================
    # Layer Management
    # ========================================

    def add_layer(self, geometry: LayerGeometry, initial_transform: Optional[Transform] = None,
                  name: Optional[str] = None, image=None) -> str:
        """Add a layer on top of the stack

        Args:
            geometry: Vertex grid for the new layer
            initial_transform: Starting transform (copied), identity if None
            name: Display name
            image: Host-side image handle

        Returns:
            UUID of the new layer
        """
        layer = Layer(geometry, initial_transform, name=name, image=image)
        self._layers.append(layer)
        self._renumber()
        self._logger.debug(f"Added layer {layer.uuid} '{layer.name}' at z={layer.z_order}")
        return layer.uuid

    def remove_layer(self, uuid: str) -> Layer:
        """Remove a layer (clears selection if it was selected)

        Args:
            uuid: Layer UUID

        Returns:
            The removed layer

        Raises:
            ValueError: If UUID not found
        """
        index = self.get_index_by_uuid(uuid)
        layer = self._layers.pop(index)
        if self._selected_uuid == uuid:
            self._selected_uuid = None
        self._renumber()
        self._logger.debug(f"Removed layer {uuid}")
        return layer

    def reorder_layer(self, uuid: str, direction: str) -> bool:
        """Swap a layer with its neighbour above or below

        Args:
            uuid: Layer UUID
            direction: 'up' (towards the viewer) or 'down'

        Returns:
            True if the layer moved, False if already at that end

        Raises:
            ValueError: If UUID not found or direction unknown
        """
        if direction not in self.DIRECTIONS:
            raise ValueError(f"Unknown direction '{direction}', expected 'up' or 'down'")

        index = self.get_index_by_uuid(uuid)
        target = index + self.DIRECTIONS[direction]
        if target < 0 or target >= len(self._layers):
            return False

        self._layers[index], self._layers[target] = self._layers[target], self._layers[index]
        self._renumber()
        self._logger.debug(f"Moved layer {uuid} {direction}: {index} -> {target}")
        return True

    def _renumber(self):
        """Rewrite dense z-order and the matching depth of every layer"""
        for z, layer in enumerate(self._layers):
            layer.z_order = z
            layer.transform.position[2] = z * LAYER_DEPTH_SPACING

    # ========================================
    # Selection
    # ========================================

    def set_selection(self, uuid: Optional[str]):
        """Select a layer by UUID, or clear the selection with None

        Raises:
            ValueError: If UUID not found
        """
        if uuid is not None:
            self.get_index_by_uuid(uuid)
        self._selected_uuid = uuid

    @property
    def selected_uuid(self) -> Optional[str]:
        return self._selected_uuid

    @property
    def selected_layer(self) -> Optional[Layer]:
        if self._selected_uuid is None:
            return None
        return self.get_by_uuid(self._selected_uuid)

    # ========================================
    # Lookups
    # ========================================

    def get_by_uuid(self, uuid: str) -> Optional[Layer]:
        """Find layer by UUID

        Returns:
            Layer with matching UUID, or None if not found
        """
        for layer in self._layers:
            if layer.uuid == uuid:
                return layer
        return None

    def get_index_by_uuid(self, uuid: str) -> int:
        """Get z-order index of layer with given UUID

        Raises:
            ValueError: If UUID not found
        """
        for i, layer in enumerate(self._layers):
            if layer.uuid == uuid:
                return i
        raise ValueError(f"Layer with UUID '{uuid}' not found")

    def top_to_bottom(self) -> List[Layer]:
        """Layers ordered for hit testing (front-most first)"""
        return list(reversed(self._layers))
