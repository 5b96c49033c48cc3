"""Corner scale: aspect-locked resize anchored at the opposite corner."""

import math

import numpy as np

from components.transform_widgets import DragContext
from constants import MIN_LAYER_SIZE, TOOL_SCALE
from utils.coordinate_transforms import screen_delta_to_world_delta
from utils.transform_math import transform_point
from .base_tool import BaseTool


class ScaleTool(BaseTool):
    """Resize from a bounding-rect corner while the opposite corner stays put.

    The new width follows the horizontal world displacement of the pointer
    (mirrored for left-side corners) and the height follows the width
    through the aspect ratio captured at drag start. After the scale is
    applied the position is corrected so the anchor lands back on its
    original world point.
    """

    name = TOOL_SCALE

    def begin(self, layer, handle, screen_x, screen_y, handle_set):
        assert handle is not None, "Scale drag needs a corner handle"

        bounds = layer.world_bounds()
        anchor_world = bounds.corners()[handle.opposite_index]
        scale = layer.transform.scale.copy()
        geometry = layer.geometry
        size = (abs(scale[0]) * geometry.width, abs(scale[1]) * geometry.height)

        self._logger.debug(f"Scale start from {handle.corner_name}, size {size[0]:.2f}x{size[1]:.2f}")
        return DragContext(
            operation=TOOL_SCALE,
            layer_uuid=layer.uuid,
            start_mouse=(screen_x, screen_y),
            handle=handle,
            start_position=layer.transform.position.copy(),
            start_scale=scale,
            start_size=size,
            start_aspect=size[0] / size[1],
            anchor_world=anchor_world,
            anchor_local=layer.world_to_local(anchor_world),
        )

    def update(self, drag, layer, screen_x, screen_y, handle_set):
        start_x, start_y = drag.start_mouse
        world_delta = screen_delta_to_world_delta(screen_x - start_x, screen_y - start_y, self.camera)

        direction = -1.0 if drag.handle.is_left else 1.0
        width = max(MIN_LAYER_SIZE, drag.start_size[0] + direction * world_delta[0])
        height = max(MIN_LAYER_SIZE, width / drag.start_aspect)

        geometry = layer.geometry
        scale = drag.start_scale.copy()
        scale[0] = math.copysign(width / geometry.width, drag.start_scale[0])
        scale[1] = math.copysign(height / geometry.height, drag.start_scale[1])

        layer.transform.position = drag.start_position.copy()
        layer.transform.scale = scale

        # Pull the anchor back onto its recorded world point
        parent_inverse = np.linalg.inv(layer.parent_matrix())
        moved_anchor = layer.local_to_world(drag.anchor_local)
        offset = transform_point(parent_inverse, drag.anchor_world) - transform_point(parent_inverse, moved_anchor)
        layer.transform.position = drag.start_position + offset

        if handle_set is not None:
            handle_set.rebuild(layer, self.camera)
