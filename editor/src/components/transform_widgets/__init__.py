"""
Planar Layer Compositor - Transform Widget Components

This package contains the handle architecture used by the tools:
- handles.py: Tagged-variant handle classes (ScaleHandle, DistortHandle, RotateRingHandle)
- modes.py: Handle sets per tool (ScaleHandleSet, RotateHandleSet, DistortHandleSet)
- drag_context.py: Unified drag state management
"""

from .handles import (
    Handle, HandleKind, CornerHandle, ScaleHandle, DistortHandle, RotateRingHandle
)
from .modes import HandleSet, ScaleHandleSet, RotateHandleSet, DistortHandleSet, create_handle_set
from .drag_context import DragContext

__all__ = [
    'Handle', 'HandleKind', 'CornerHandle', 'ScaleHandle', 'DistortHandle', 'RotateRingHandle',
    'HandleSet', 'ScaleHandleSet', 'RotateHandleSet', 'DistortHandleSet', 'create_handle_set',
    'DragContext',
]
