"""Base class for gesture tools.

Each tool defines:
- begin(): Snapshot the layer into a DragContext at pointer-down
- update(): Recompute the layer from the snapshot on pointer move
- finish(): Finalize the gesture on pointer-up
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from components.transform_widgets import DragContext


class BaseTool(ABC):
    """Abstract base class for gesture tools.

    Tools never mutate the camera; they only read it to map pointer
    positions into world space.
    """

    name = None

    def __init__(self, camera, committer):
        self.camera = camera
        self.committer = committer
        self._logger = logging.getLogger(type(self).__name__)

    @abstractmethod
    def begin(self, layer, handle, screen_x, screen_y, handle_set) -> Optional[DragContext]:
        """Start a gesture.

        Args:
            layer: Layer being manipulated
            handle: Handle under the pointer, or None for a body drag
            screen_x, screen_y: Pointer position in screen pixels
            handle_set: Active HandleSet, or None

        Returns:
            DragContext, or None if the gesture cannot start
        """
        pass

    @abstractmethod
    def update(self, drag: DragContext, layer, screen_x, screen_y, handle_set):
        """Apply the gesture for the current pointer position.

        Args:
            drag: Context returned by begin()
            layer: Layer being manipulated
            screen_x, screen_y: Pointer position in screen pixels
            handle_set: Active HandleSet, or None
        """
        pass

    def finish(self, drag: DragContext, layer, handle_set):
        """Finalize the gesture (nothing to bake by default)"""
        if handle_set is not None:
            handle_set.rebuild(layer, self.camera)
