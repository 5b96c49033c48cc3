"""Transform handle system - tagged-variant handle architecture.

Each handle is a small marker in world space that knows:
- Its kind (corner-scale, corner-distort, rotate-ring) and corner index
- How to test if a screen position hits it (through the camera projection)
- How to draw itself with a QPainter
- Which cursor to show while hovered

Handles only back-reference their layer by UUID; they never own it. Handle
sets are rebuilt on every tool switch and selection change.
"""

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import numpy as np

from constants import (
    CORNER_NAMES, TRANSFORM_HANDLE_SIZE, TRANSFORM_HIT_TOLERANCE,
    ROTATE_RING_RADIUS, ROTATE_RING_HIT_TOLERANCE,
    HANDLE_FILL_COLOR, HANDLE_OUTLINE_COLOR
)


class HandleKind(Enum):
    CORNER_SCALE = 'corner_scale'
    CORNER_DISTORT = 'corner_distort'
    ROTATE_RING = 'rotate_ring'


class Handle(ABC):
    """Abstract base class for transform handles."""

    kind: HandleKind = None

    def __init__(self, layer_uuid: str, position, corner_index: Optional[int] = None):
        """
        Args:
            layer_uuid: UUID of the layer this handle controls
            position: World-space position
            corner_index: 0-3 for corner kinds (tl, tr, br, bl), None otherwise
        """
        self.layer_uuid = layer_uuid
        self.position = np.array(position, dtype=float)
        self.corner_index = corner_index

    def __repr__(self) -> str:
        return f"{type(self).__name__}(corner={self.corner_index}, pos={self.position.round(3).tolist()})"

    def screen_position(self, camera):
        """Handle center in screen pixels"""
        return camera.project_world_to_screen(self.position)

    def screen_distance(self, screen_x, screen_y, camera):
        sx, sy = self.screen_position(camera)
        return math.hypot(screen_x - sx, screen_y - sy)

    @abstractmethod
    def hit_test(self, screen_x, screen_y, camera) -> bool:
        """Test if a screen position hits this handle.

        Args:
            screen_x, screen_y: Pointer position in screen pixels
            camera: Camera capability used to project the handle

        Returns:
            bool: True if the pointer hits this handle
        """
        pass

    @abstractmethod
    def draw(self, painter, camera):
        """Draw this handle.

        Args:
            painter: QPainter instance
            camera: Camera capability used to project the handle
        """
        pass

    @abstractmethod
    def get_cursor(self):
        """Get the Qt cursor shape for this handle."""
        pass


class CornerHandle(Handle):
    """Square-ish corner marker shared by scale and distort handles."""

    def __init__(self, layer_uuid, position, corner_index, handle_size=TRANSFORM_HANDLE_SIZE,
                 hit_tolerance=TRANSFORM_HIT_TOLERANCE):
        assert corner_index in (0, 1, 2, 3), f"Invalid corner index {corner_index}"
        super().__init__(layer_uuid, position, corner_index)
        self.handle_size = handle_size
        self.hit_tolerance = hit_tolerance

    @property
    def corner_name(self) -> str:
        return CORNER_NAMES[self.corner_index]

    @property
    def opposite_index(self) -> int:
        """Corner held fixed while this one is dragged"""
        return (self.corner_index + 2) % 4

    @property
    def is_left(self) -> bool:
        return self.corner_index in (0, 3)

    def hit_test(self, screen_x, screen_y, camera):
        return self.screen_distance(screen_x, screen_y, camera) <= (self.handle_size + self.hit_tolerance)

    def draw(self, painter, camera):
        from PyQt5.QtCore import QRectF
        from PyQt5.QtGui import QBrush, QColor, QPen

        sx, sy = self.screen_position(camera)
        size = float(self.handle_size)
        painter.setPen(QPen(QColor(*HANDLE_OUTLINE_COLOR), 1))
        painter.setBrush(QBrush(QColor(*HANDLE_FILL_COLOR)))
        painter.drawRect(QRectF(sx - size, sy - size, size * 2, size * 2))

    def get_cursor(self):
        """Diagonal resize cursor matching the corner direction"""
        from PyQt5.QtCore import Qt
        if self.corner_index in (0, 2):
            return Qt.SizeFDiagCursor
        return Qt.SizeBDiagCursor


class ScaleHandle(CornerHandle):
    """Corner of the world bounding rectangle for anchored scaling."""

    kind = HandleKind.CORNER_SCALE


class DistortHandle(CornerHandle):
    """Grid corner for free-form bilinear distortion."""

    kind = HandleKind.CORNER_DISTORT

    def draw(self, painter, camera):
        from PyQt5.QtCore import QPointF
        from PyQt5.QtGui import QBrush, QColor, QPen

        sx, sy = self.screen_position(camera)
        painter.setPen(QPen(QColor(*HANDLE_OUTLINE_COLOR), 1))
        painter.setBrush(QBrush(QColor(*HANDLE_FILL_COLOR)))
        painter.drawEllipse(QPointF(sx, sy), float(self.handle_size), float(self.handle_size))

    def get_cursor(self):
        from PyQt5.QtCore import Qt
        return Qt.CrossCursor


class RotateRingHandle(Handle):
    """Ring above the bounding rectangle that starts a pivot rotation."""

    kind = HandleKind.ROTATE_RING

    def __init__(self, layer_uuid, position, radius=ROTATE_RING_RADIUS,
                 hit_tolerance=ROTATE_RING_HIT_TOLERANCE):
        super().__init__(layer_uuid, position)
        self.radius = radius
        self.hit_tolerance = hit_tolerance

    def hit_test(self, screen_x, screen_y, camera):
        return self.screen_distance(screen_x, screen_y, camera) <= (self.radius + self.hit_tolerance)

    def draw(self, painter, camera):
        from PyQt5.QtCore import QPointF, Qt
        from PyQt5.QtGui import QColor, QPen

        sx, sy = self.screen_position(camera)
        painter.setPen(QPen(QColor(*HANDLE_FILL_COLOR), 2))
        painter.setBrush(Qt.NoBrush)
        painter.drawEllipse(QPointF(sx, sy), float(self.radius), float(self.radius))

    def get_cursor(self):
        from PyQt5.QtCore import Qt
        return Qt.OpenHandCursor
