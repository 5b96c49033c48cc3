"""Tool handle sets - defines which handles are active for each tool."""

import numpy as np

from .handles import ScaleHandle, DistortHandle, RotateRingHandle
from utils.coordinate_transforms import screen_delta_to_world_delta
from constants import (
	CORNER_NAMES, ROTATE_RING_OFFSET,
	TOOL_SCALE, TOOL_ROTATE, TOOL_DISTORT,
	BORDER_COLOR
)


class HandleSet:
	"""Base class for tool handle sets."""

	# Hit-test priority (first match wins)
	check_order = ()

	def __init__(self):
		self.handles = {}  # handle_name -> handle_object
		self.layer_uuid = None

	def get_handles(self):
		"""Return all handles for this set."""
		return self.handles

	def is_empty(self):
		return not self.handles

	def rebuild(self, layer, camera):
		"""Recreate every handle from the layer's current geometry and transform.

		The camera is used for handle offsets given in screen pixels.
		"""
		raise NotImplementedError

	def clear(self):
		"""Destroy all handles."""
		self.handles = {}
		self.layer_uuid = None

	def get_handle_at_pos(self, screen_x, screen_y, camera):
		"""Find which handle (if any) is at a screen position.

		Returns:
			Handle object or None
		"""
		for handle_name in self.check_order:
			handle = self.handles.get(handle_name)
			if handle is not None and handle.hit_test(screen_x, screen_y, camera):
				return handle
		return None

	def draw(self, painter, camera):
		for handle_name in self.check_order:
			handle = self.handles.get(handle_name)
			if handle is not None:
				handle.draw(painter, camera)


class ScaleHandleSet(HandleSet):
	"""Four corner handles on the layer's world bounding rectangle."""

	check_order = CORNER_NAMES

	def rebuild(self, layer, camera):
		corners = layer.world_bounds().corners()
		self.layer_uuid = layer.uuid
		self.handles = {
			name: ScaleHandle(layer.uuid, corners[index], index)
			for index, name in enumerate(CORNER_NAMES)
		}

	def corner(self, index):
		return self.handles[CORNER_NAMES[index]]


class RotateHandleSet(HandleSet):
	"""Rotation ring above the bounding rectangle plus the border outline."""

	check_order = ('ring',)

	def __init__(self):
		super().__init__()
		self.border = []  # World corners of the bounding rect (tl, tr, br, bl)

	def rebuild(self, layer, camera):
		bounds = layer.world_bounds()
		center = bounds.center
		# ROTATE_RING_OFFSET is in screen pixels
		offset = screen_delta_to_world_delta(0.0, -ROTATE_RING_OFFSET, camera)[1]
		ring_pos = np.array([center[0], bounds.max[1] + offset, center[2]])

		self.layer_uuid = layer.uuid
		self.border = bounds.corners()
		self.handles = {
			'ring': RotateRingHandle(layer.uuid, ring_pos),
		}

	def clear(self):
		super().clear()
		self.border = []

	def draw(self, painter, camera):
		from PyQt5.QtCore import QPointF, Qt
		from PyQt5.QtGui import QColor, QPen, QPolygonF

		if self.border:
			points = [QPointF(*camera.project_world_to_screen(p)) for p in self.border]
			painter.setPen(QPen(QColor(*BORDER_COLOR), 1, Qt.DashLine))
			painter.setBrush(Qt.NoBrush)
			painter.drawPolygon(QPolygonF(points))

			ring = self.handles.get('ring')
			if ring is not None:
				top_mid = QPointF((points[0].x() + points[1].x()) / 2.0, (points[0].y() + points[1].y()) / 2.0)
				painter.drawLine(top_mid, QPointF(*ring.screen_position(camera)))

		super().draw(painter, camera)


class DistortHandleSet(HandleSet):
	"""Four handles sitting on the grid's corner vertices."""

	check_order = CORNER_NAMES

	def rebuild(self, layer, camera):
		geometry = layer.geometry
		assert len(geometry.vertices) == (geometry.segments_x + 1) * (geometry.segments_y + 1), (
			f"Grid mismatch: {len(geometry.vertices)} vertices for "
			f"{geometry.segments_x}x{geometry.segments_y} segments"
		)
		corners = layer.world_corners()
		self.layer_uuid = layer.uuid
		self.handles = {
			name: DistortHandle(layer.uuid, corners[index], index)
			for index, name in enumerate(CORNER_NAMES)
		}

	def corner_positions(self):
		"""World positions of all four handles in distortion order (tl, tr, br, bl)"""
		assert len(self.handles) == 4, f"Distort handle set has {len(self.handles)} handles"
		return [self.handles[name].position.copy() for name in CORNER_NAMES]


# Tool registry (the move tool has no handles)
HANDLE_SETS = {
	TOOL_SCALE: ScaleHandleSet,
	TOOL_ROTATE: RotateHandleSet,
	TOOL_DISTORT: DistortHandleSet,
}


def create_handle_set(tool_name):
	"""Factory function to create handle set instances.

	Args:
		tool_name: 'scale', 'rotate' or 'distort'

	Returns:
		HandleSet instance, or None for tools without handles
	"""
	handle_set_class = HANDLE_SETS.get(tool_name)
	if handle_set_class is None:
		return None
	return handle_set_class()
