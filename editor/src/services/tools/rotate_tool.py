"""Ring drag: rotate about the bounding-rect center through a pivot."""

import math

import numpy as np

from components.transform_widgets import DragContext
from constants import TOOL_ROTATE
from utils.transform_math import normalize_angle
from .base_tool import BaseTool


def screen_angle(center, screen_x, screen_y):
    """Counter-clockwise angle of a pointer around a screen-space center.

    Screen Y grows downward, so the Y difference is flipped to keep the
    angle in the world's Y-up sense.
    """
    return math.atan2(center[1] - screen_y, screen_x - center[0])


class RotateTool(BaseTool):
    """Live rotation preview on the pivot, baked into the layer on release"""

    name = TOOL_ROTATE

    def begin(self, layer, handle, screen_x, screen_y, handle_set):
        pivot = self.committer.begin_rotation(layer)
        center = self.camera.project_world_to_screen(pivot.center)
        start_angle = screen_angle(center, screen_x, screen_y)

        self._logger.debug(f"Rotate start at {np.degrees(start_angle):.2f}°")
        return DragContext(
            operation=TOOL_ROTATE,
            layer_uuid=layer.uuid,
            start_mouse=(screen_x, screen_y),
            handle=handle,
            start_angle=start_angle,
            start_rotation=pivot.rotation,
        )

    def update(self, drag, layer, screen_x, screen_y, handle_set):
        assert layer.pivot is not None, f"Rotate update on layer {layer.uuid} without a pivot"

        center = self.camera.project_world_to_screen(layer.pivot.center)
        delta = normalize_angle(screen_angle(center, screen_x, screen_y) - drag.start_angle)
        layer.pivot.rotation = drag.start_rotation + delta

        if handle_set is not None:
            handle_set.rebuild(layer, self.camera)

    def finish(self, drag, layer, handle_set):
        if layer.pivot is not None:
            self.committer.commit_rotation(layer)
        super().finish(drag, layer, handle_set)
