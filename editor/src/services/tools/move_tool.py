"""Body drag: translate the layer in the view plane."""

import numpy as np

from components.transform_widgets import DragContext
from constants import TOOL_MOVE
from utils.coordinate_transforms import screen_delta_to_world_delta
from utils.transform_math import transform_direction
from .base_tool import BaseTool


class MoveTool(BaseTool):
    """Pixel delta -> world delta applied to the start position.

    Depth (position z) is never touched, so stacking order survives a move.
    """

    name = TOOL_MOVE

    def begin(self, layer, handle, screen_x, screen_y, handle_set):
        return DragContext(
            operation=TOOL_MOVE,
            layer_uuid=layer.uuid,
            start_mouse=(screen_x, screen_y),
            start_position=layer.transform.position.copy(),
        )

    def update(self, drag, layer, screen_x, screen_y, handle_set):
        start_x, start_y = drag.start_mouse
        world_delta = screen_delta_to_world_delta(screen_x - start_x, screen_y - start_y, self.camera)

        # Express the displacement in the parent's space
        parent_delta = transform_direction(np.linalg.inv(layer.parent_matrix()), world_delta)

        position = drag.start_position.copy()
        position[0] += parent_delta[0]
        position[1] += parent_delta[1]
        layer.transform.position = position

        if handle_set is not None:
            handle_set.rebuild(layer, self.camera)
