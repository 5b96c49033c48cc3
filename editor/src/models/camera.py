"""Orthographic camera capability.

The camera maps between screen pixels (Y-down, origin top-left) and world
space (Y-up). At zoom 1 with no pan the visible world spans
``left=0, right=width, bottom=0, top=height`` so one world unit equals one
pixel. The host widget owns the camera and is the only code that zooms,
pans or resizes it; the transform engine only reads it.
"""

import logging
from dataclasses import dataclass

import numpy as np

from constants import CAMERA_FAR, ZOOM_MAX, ZOOM_MIN


@dataclass
class Ray:
    """Picking ray in world space"""
    origin: np.ndarray
    direction: np.ndarray


class OrthographicCamera:
    """Orthographic projection looking down -Z"""

    def __init__(self, viewport_width: float = 800, viewport_height: float = 600):
        self._logger = logging.getLogger('OrthographicCamera')
        self.viewport_width = float(viewport_width)
        self.viewport_height = float(viewport_height)
        self.zoom = 1.0
        self.pan_x = 0.0  # World-space offset of the view center
        self.pan_y = 0.0

    # ========================================
    # Projection bounds
    # ========================================

    @property
    def center(self):
        return (self.viewport_width / 2.0 + self.pan_x, self.viewport_height / 2.0 + self.pan_y)

    @property
    def left(self):
        return self.center[0] - self.viewport_width / 2.0 / self.zoom

    @property
    def right(self):
        return self.center[0] + self.viewport_width / 2.0 / self.zoom

    @property
    def bottom(self):
        return self.center[1] - self.viewport_height / 2.0 / self.zoom

    @property
    def top(self):
        return self.center[1] + self.viewport_height / 2.0 / self.zoom

    @property
    def viewport_size(self):
        """Viewport size in pixels (width, height)"""
        return self.viewport_width, self.viewport_height

    @property
    def world_size(self):
        """Visible world extent (width, height)"""
        return self.right - self.left, self.top - self.bottom

    # ========================================
    # Projection
    # ========================================

    def project_world_to_screen(self, point):
        """World point -> screen pixel (x, y)"""
        world_w, world_h = self.world_size
        sx = (point[0] - self.left) / world_w * self.viewport_width
        sy = (self.top - point[1]) / world_h * self.viewport_height
        return np.array([sx, sy])

    def unproject_screen_to_world(self, screen_x, screen_y):
        """Screen pixel -> world point on the camera plane (z = 0)"""
        world_w, world_h = self.world_size
        x = self.left + screen_x / self.viewport_width * world_w
        y = self.top - screen_y / self.viewport_height * world_h
        return np.array([x, y, 0.0])

    def ray_from_screen(self, screen_x, screen_y):
        """Picking ray through a screen pixel (parallel rays for orthographic)"""
        origin = self.unproject_screen_to_world(screen_x, screen_y)
        origin[2] = CAMERA_FAR
        return Ray(origin, np.array([0.0, 0.0, -1.0]))

    # ========================================
    # Host-side navigation (never called by the engine)
    # ========================================

    def set_viewport(self, width, height):
        """Resize the viewport; world extent follows the pixel extent"""
        self.viewport_width = float(max(1, width))
        self.viewport_height = float(max(1, height))
        self._logger.debug(f"Viewport resized to {self.viewport_width:.0f}x{self.viewport_height:.0f}")

    def set_zoom(self, zoom):
        self.zoom = max(ZOOM_MIN, min(ZOOM_MAX, float(zoom)))

    def zoom_at(self, factor, screen_x, screen_y):
        """Zoom by ``factor`` keeping the world point under the cursor fixed"""
        before = self.unproject_screen_to_world(screen_x, screen_y)
        self.set_zoom(self.zoom * factor)
        after = self.unproject_screen_to_world(screen_x, screen_y)
        self.pan_x += before[0] - after[0]
        self.pan_y += before[1] - after[1]

    def pan_by_pixels(self, dx, dy):
        """Drag the view by a screen displacement"""
        world_w, world_h = self.world_size
        self.pan_x -= dx * world_w / self.viewport_width
        self.pan_y += dy * world_h / self.viewport_height
