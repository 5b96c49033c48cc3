"""Tool plugin system.

Each tool is a self-contained gesture handler: it snapshots the layer at
pointer-down into a DragContext, recomputes the layer from that snapshot on
every pointer move, and finalizes on pointer-up.
"""

from .base_tool import BaseTool
from .move_tool import MoveTool
from .scale_tool import ScaleTool
from .rotate_tool import RotateTool
from .distort_tool import DistortTool

from constants import TOOL_MOVE, TOOL_SCALE, TOOL_ROTATE, TOOL_DISTORT

# Registry of available gesture handlers
AVAILABLE_TOOLS = {
    TOOL_MOVE: MoveTool,
    TOOL_SCALE: ScaleTool,
    TOOL_ROTATE: RotateTool,
    TOOL_DISTORT: DistortTool,
}


def get_tool(tool_name: str, camera, committer) -> BaseTool:
    """Get tool instance by name.

    Args:
        tool_name: 'move', 'scale', 'rotate' or 'distort'
        camera: Camera capability the tool reads for pointer mapping
        committer: TransformCommitter used for pivot bookkeeping

    Returns:
        Tool instance or None if not found
    """
    tool_class = AVAILABLE_TOOLS.get(tool_name)
    if tool_class:
        return tool_class(camera, committer)
    return None
