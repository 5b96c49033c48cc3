"""
Planar Layer Compositor - Tool Controller

Pointer state machine for the transform engine:
- Tool selection (move / scale / rotate / distort) and layer selection
- Handle set lifecycle (rebuilt on every tool switch or selection change)
- Drag session routing to the active gesture tool
- Layer picking, flip, delete and stacking commands

The controller owns no camera state and never zooms or pans; it reads the
camera capability and asks the renderer capability for a redraw after every
visible change.

Usage:
    controller = ToolController(store, camera, canvas)
    controller.set_tool('scale')
    controller.pointer_down(x, y, PRIMARY_BUTTON)
    controller.pointer_move(x + 10, y)
    controller.pointer_up(PRIMARY_BUTTON)
"""

import logging
from typing import Optional

from components.transform_widgets import DragContext, HandleKind, create_handle_set
from constants import (
    DEFAULT_TOOL, PRIMARY_BUTTON, TOOL_NAMES,
    TOOL_MOVE, TOOL_SCALE, TOOL_ROTATE, TOOL_DISTORT
)
from services.tools import get_tool
from services.transform_committer import TransformCommitter
from utils.coordinate_transforms import layer_contains_screen_point

STATE_IDLE = 'idle'

# Gesture started by each handle kind
HANDLE_OPERATIONS = {
    HandleKind.CORNER_SCALE: TOOL_SCALE,
    HandleKind.CORNER_DISTORT: TOOL_DISTORT,
    HandleKind.ROTATE_RING: TOOL_ROTATE,
}

# Tools that show the translation gizmo on the selected layer
GIZMO_TOOLS = (TOOL_MOVE, TOOL_ROTATE)


class ToolController:
    """Routes pointer input to the active tool and keeps handles in sync.

    Attributes:
        store: LayerStore holding the layers and the selection
        camera: Camera capability (read only)
        renderer: Object with a request_redraw() method
        tool: Active tool name
        handle_set: HandleSet for the active tool and selection, or None
        drag: DragContext of the live gesture, or None
        gizmo_layer_uuid: Layer the translation gizmo is attached to, or None
    """

    def __init__(self, store, camera, renderer, tool: str = DEFAULT_TOOL):
        if tool not in TOOL_NAMES:
            raise ValueError(f"Unknown tool '{tool}'")

        self._logger = logging.getLogger('ToolController')
        self.store = store
        self.camera = camera
        self.renderer = renderer
        self.committer = TransformCommitter()
        self.tools = {name: get_tool(name, camera, self.committer) for name in TOOL_NAMES}

        self.tool = tool
        self.handle_set = None
        self.drag: Optional[DragContext] = None
        self.gizmo_layer_uuid: Optional[str] = None

    @property
    def state(self) -> str:
        """Idle with nothing selected, otherwise the active tool name"""
        if self.store.selected_layer is None:
            return STATE_IDLE
        return self.tool

    @property
    def is_dragging(self) -> bool:
        return self.drag is not None

    def _redraw(self):
        if self.renderer is not None:
            self.renderer.request_redraw()

    # ========================================
    # Tool and selection
    # ========================================

    def set_tool(self, tool: str):
        """Switch the active tool.

        Raises:
            ValueError: If the tool name is unknown
        """
        if tool not in TOOL_NAMES:
            raise ValueError(f"Unknown tool '{tool}'")
        if tool == self.tool:
            return
        self._logger.debug(f"Tool {self.tool} -> {tool}")
        self.tool = tool
        self._enter_state()

    def select_layer(self, uuid: Optional[str]):
        """Select a layer by UUID, or clear the selection with None

        Raises:
            ValueError: If the UUID is not in the store
        """
        if uuid == self.store.selected_uuid:
            return
        self._end_drag()
        self.store.set_selection(uuid)
        self._enter_state()

    def _enter_state(self):
        """Tear down the previous tool's handles and build the current ones"""
        self._end_drag()
        self._clear_handles()

        layer = self.store.selected_layer
        if layer is None:
            self._logger.debug("Entered idle state")
            self._redraw()
            return

        self.handle_set = create_handle_set(self.tool)
        if self.handle_set is not None:
            self.handle_set.rebuild(layer, self.camera)
        self.gizmo_layer_uuid = layer.uuid if self.tool in GIZMO_TOOLS else None

        self._logger.debug(f"Entered {self.tool} state on {layer!r}")
        self._redraw()

    def _clear_handles(self):
        if self.handle_set is not None:
            self.handle_set.clear()
        self.handle_set = None
        self.gizmo_layer_uuid = None

    def refresh_handles(self):
        """Rebuild the active handle set from the selected layer's live state"""
        layer = self.store.selected_layer
        if layer is not None and self.handle_set is not None:
            self.handle_set.rebuild(layer, self.camera)
            self._redraw()

    # ========================================
    # Picking
    # ========================================

    def pick_layer(self, screen_x, screen_y):
        """Top-most layer whose projected mesh contains the screen point, or None"""
        for layer in self.store.top_to_bottom():
            if layer_contains_screen_point(layer, screen_x, screen_y, self.camera):
                return layer
        return None

    def handle_at(self, screen_x, screen_y):
        """Handle under the pointer for hover feedback, or None"""
        if self.handle_set is None:
            return None
        return self.handle_set.get_handle_at_pos(screen_x, screen_y, self.camera)

    # ========================================
    # Pointer events
    # ========================================

    def pointer_down(self, screen_x, screen_y, button=PRIMARY_BUTTON) -> bool:
        """Handle a pointer press.

        Priority: handles of the active set, then the selected layer's body,
        then other layers (selects them), then empty canvas (clears the
        selection). Only the primary button starts gestures.

        Returns:
            bool: True if a drag session started
        """
        if button != PRIMARY_BUTTON:
            self._logger.debug(f"Ignoring pointer down for button {button}")
            return False
        if self.drag is not None:
            return False

        layer = self.store.selected_layer
        handle = self.handle_at(screen_x, screen_y)
        if layer is not None and handle is not None:
            return self._begin_drag(HANDLE_OPERATIONS[handle.kind], layer, handle, screen_x, screen_y)

        picked = self.pick_layer(screen_x, screen_y)
        if picked is None:
            self.select_layer(None)
            return False

        if layer is None or picked.uuid != layer.uuid:
            self.select_layer(picked.uuid)
            if self.tool != TOOL_MOVE:
                return False
            layer = picked

        if self.tool == TOOL_DISTORT:
            return False
        return self._begin_drag(TOOL_MOVE, layer, None, screen_x, screen_y)

    def pointer_move(self, screen_x, screen_y) -> bool:
        """Advance the live gesture, if any.

        Returns:
            bool: True if a layer changed
        """
        if self.drag is None:
            return False

        layer = self.store.get_by_uuid(self.drag.layer_uuid)
        assert layer is not None, f"Drag target {self.drag.layer_uuid} vanished mid-gesture"

        self.tools[self.drag.operation].update(self.drag, layer, screen_x, screen_y, self.handle_set)
        self._redraw()
        return True

    def pointer_up(self, button=PRIMARY_BUTTON) -> bool:
        """Finish the live gesture.

        Returns:
            bool: True if a drag session ended
        """
        if button != PRIMARY_BUTTON or self.drag is None:
            return False
        self._end_drag()
        self._redraw()
        return True

    def _begin_drag(self, operation, layer, handle, screen_x, screen_y) -> bool:
        drag = self.tools[operation].begin(layer, handle, screen_x, screen_y, self.handle_set)
        if drag is None:
            return False
        self.drag = drag
        self._logger.debug(f"Drag started: {operation} on {layer!r}")
        self._redraw()
        return True

    def _end_drag(self):
        """Finalize and drop the drag session (the session is cleared even if finishing fails)"""
        drag = self.drag
        if drag is None:
            return
        self.drag = None

        layer = self.store.get_by_uuid(drag.layer_uuid)
        if layer is not None:
            self.tools[drag.operation].finish(drag, layer, self.handle_set)
        self._logger.debug(f"Drag ended: {drag.operation}")

    def cancel_drag(self):
        """End any live gesture (e.g. when the host loses the pointer)"""
        if self.drag is not None:
            self._end_drag()
            self._redraw()

    # ========================================
    # Layer commands
    # ========================================

    def add_layer(self, geometry, initial_transform=None, name=None, image=None, select=True) -> str:
        """Add a layer on top of the stack and optionally select it

        Returns:
            UUID of the new layer
        """
        self._end_drag()
        uuid = self.store.add_layer(geometry, initial_transform, name=name, image=image)
        if select:
            self.select_layer(uuid)
        else:
            self._redraw()
        return uuid

    def flip_selected(self, axis: str) -> bool:
        """Mirror the selected layer about its world bounds center.

        Args:
            axis: 'x' or 'y'

        Returns:
            bool: True if a layer was flipped

        Raises:
            ValueError: If axis is not 'x' or 'y'
        """
        layer = self.store.selected_layer
        if layer is None:
            return False
        self._end_drag()
        self.committer.flip_layer(layer, axis)
        self.refresh_handles()
        self._redraw()
        return True

    def delete_selected(self) -> bool:
        """Remove the selected layer and return to idle

        Returns:
            bool: True if a layer was removed
        """
        layer = self.store.selected_layer
        if layer is None:
            return False
        self._end_drag()
        self._clear_handles()
        self.store.remove_layer(layer.uuid)
        self._logger.debug(f"Deleted {layer!r}")
        self._enter_state()
        return True

    def move_selected(self, direction: str) -> bool:
        """Move the selected layer one step up or down the stack

        Args:
            direction: 'up' or 'down'

        Returns:
            bool: True if the stacking order changed

        Raises:
            ValueError: If direction is not 'up' or 'down'
        """
        layer = self.store.selected_layer
        if layer is None:
            return False
        self._end_drag()
        moved = self.store.reorder_layer(layer.uuid, direction)
        if moved:
            self.refresh_handles()
            self._redraw()
        return moved
