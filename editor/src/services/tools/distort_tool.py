"""Corner distort: free-form bilinear warp of the vertex grid."""

from components.transform_widgets import DragContext
from constants import CORNER_NAMES, TOOL_DISTORT
from utils.coordinate_transforms import layer_plane, screen_to_world
from .base_tool import BaseTool


class DistortTool(BaseTool):
    """Drag one grid corner; every vertex is re-interpolated from all four.

    Pointer positions are raycast onto the layer's live plane and handled
    in layer-local space, so rotated or scaled layers distort in their own
    plane.
    """

    name = TOOL_DISTORT

    def _pointer_on_layer(self, layer, screen_x, screen_y):
        hit = screen_to_world((screen_x, screen_y), self.camera, layer_plane(layer))
        if hit is None:
            return None
        return layer.world_to_local(hit)

    def begin(self, layer, handle, screen_x, screen_y, handle_set):
        assert handle is not None, "Distort drag needs a corner handle"
        assert handle_set is not None and handle_set.handles.get(CORNER_NAMES[handle.corner_index]) is handle, (
            f"Distort handle {handle!r} is not part of the active handle set"
        )

        pointer_local = self._pointer_on_layer(layer, screen_x, screen_y)
        if pointer_local is None:
            self._logger.debug("Distort start ray missed the layer plane")
            return None

        return DragContext(
            operation=TOOL_DISTORT,
            layer_uuid=layer.uuid,
            start_mouse=(screen_x, screen_y),
            handle=handle,
            local_offset=pointer_local - layer.world_to_local(handle.position),
        )

    def update(self, drag, layer, screen_x, screen_y, handle_set):
        pointer_local = self._pointer_on_layer(layer, screen_x, screen_y)
        if pointer_local is None:
            return

        target_local = pointer_local - drag.local_offset
        target_local[2] = 0.0
        drag.handle.position = layer.local_to_world(target_local)

        layer.apply_corner_distortion(handle_set.corner_positions())
