"""
Planar Layer Compositor - Canvas Widget

Qt host for the transform engine. The widget plays three roles:
- Input source: translates Qt mouse events into pointer_down/move/up
- Camera owner: the only code that resizes, zooms or pans the camera
- Renderer: request_redraw() schedules a repaint; paintEvent draws the
  layer meshes, the active handle set and the translation gizmo
"""

import logging

from PyQt5.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QPainter, QPen, QPolygonF, QTransform
from PyQt5.QtWidgets import QWidget

from constants import (
	PRIMARY_BUTTON, PAN_BUTTON, SECONDARY_BUTTON, ZOOM_STEP,
	CANVAS_BACKGROUND_COLOR, LAYER_PLACEHOLDER_COLOR, SELECTION_OUTLINE_COLOR,
	GIZMO_COLOR, GIZMO_ARROW_LENGTH, GIZMO_ORIGIN_RADIUS
)
from models.camera import OrthographicCamera
from models.layer_store import LayerStore
from services.tool_controller import ToolController
from utils.coordinate_transforms import project_points
from utils.logger import loggerRaise

# Qt button -> pointer button id understood by the engine
BUTTON_IDS = {
	Qt.LeftButton: PRIMARY_BUTTON,
	Qt.MiddleButton: PAN_BUTTON,
	Qt.RightButton: SECONDARY_BUTTON,
}


class CanvasWidget(QWidget):
	"""Interactive compositing canvas"""

	selectionChanged = pyqtSignal(object)  # Selected layer UUID or None
	transformEnded = pyqtSignal()  # Emitted when a drag gesture finishes

	def __init__(self, parent=None, store=None):
		super().__init__(parent)
		self._logger = logging.getLogger('CanvasWidget')

		self.store = store if store is not None else LayerStore()
		self.camera = OrthographicCamera(max(1, self.width()), max(1, self.height()))
		self.controller = ToolController(self.store, self.camera, self)

		self.is_panning = False
		self.last_pan_pos = None

		self.setMouseTracking(True)
		self.setFocusPolicy(Qt.StrongFocus)
		self.setMinimumSize(200, 150)

	# ========================================
	# Renderer capability
	# ========================================

	def request_redraw(self):
		"""Schedule a repaint (never paints synchronously)"""
		self.update()

	def resizeEvent(self, event):
		super().resizeEvent(event)
		self.camera.set_viewport(event.size().width(), event.size().height())
		self.request_redraw()

	# ========================================
	# Input
	# ========================================

	def _emit_if_selection_changed(self, before):
		after = self.store.selected_uuid
		if after != before:
			self.selectionChanged.emit(after)

	def mousePressEvent(self, event):
		"""Middle button pans; everything else goes to the tool controller"""
		button = BUTTON_IDS.get(event.button())
		if button is None:
			super().mousePressEvent(event)
			return

		if button == PAN_BUTTON:
			self.is_panning = True
			self.last_pan_pos = event.pos()
			self.setCursor(Qt.ClosedHandCursor)
			event.accept()
			return

		before = self.store.selected_uuid
		try:
			self.controller.pointer_down(event.x(), event.y(), button)
		except Exception as e:
			self.controller.cancel_drag()
			loggerRaise(e, "Failed to start the transform")
		self._emit_if_selection_changed(before)
		event.accept()

	def mouseMoveEvent(self, event):
		if self.is_panning and self.last_pan_pos is not None:
			delta = event.pos() - self.last_pan_pos
			self.last_pan_pos = event.pos()
			self.camera.pan_by_pixels(delta.x(), delta.y())
			self.request_redraw()
			event.accept()
			return

		if self.controller.is_dragging:
			try:
				self.controller.pointer_move(event.x(), event.y())
			except Exception as e:
				self.controller.cancel_drag()
				loggerRaise(e, "Transform failed")
			event.accept()
			return

		# Hover feedback
		handle = self.controller.handle_at(event.x(), event.y())
		self.setCursor(handle.get_cursor() if handle is not None else Qt.ArrowCursor)
		super().mouseMoveEvent(event)

	def mouseReleaseEvent(self, event):
		button = BUTTON_IDS.get(event.button())
		if button == PAN_BUTTON:
			self.is_panning = False
			self.last_pan_pos = None
			self.setCursor(Qt.ArrowCursor)
			event.accept()
			return

		if button is None:
			super().mouseReleaseEvent(event)
			return

		ended = False
		try:
			ended = self.controller.pointer_up(button)
		except Exception as e:
			loggerRaise(e, "Failed to finish the transform")
		if ended:
			self.transformEnded.emit()
		event.accept()

	def wheelEvent(self, event):
		"""Ctrl+wheel zooms about the cursor"""
		if event.modifiers() & Qt.ControlModifier:
			delta = event.angleDelta().y()
			if delta > 0:
				self.zoom_in(event.pos())
			elif delta < 0:
				self.zoom_out(event.pos())
			event.accept()
			return
		super().wheelEvent(event)

	def leaveEvent(self, event):
		self.setCursor(Qt.ArrowCursor)
		super().leaveEvent(event)

	# ========================================
	# Camera navigation
	# ========================================

	def zoom_in(self, cursor_pos=None):
		self._zoom_by(ZOOM_STEP, cursor_pos)

	def zoom_out(self, cursor_pos=None):
		self._zoom_by(1.0 / ZOOM_STEP, cursor_pos)

	def zoom_reset(self):
		self.camera.zoom = 1.0
		self.camera.pan_x = 0.0
		self.camera.pan_y = 0.0
		self.controller.refresh_handles()
		self.request_redraw()

	def _zoom_by(self, factor, cursor_pos=None):
		if cursor_pos is None:
			x, y = self.width() / 2.0, self.height() / 2.0
		else:
			x, y = cursor_pos.x(), cursor_pos.y()
		self.camera.zoom_at(factor, x, y)
		self._logger.debug(f"Zoom {self.camera.zoom:.2f}")
		self.controller.refresh_handles()
		self.request_redraw()

	# ========================================
	# Painting
	# ========================================

	def paintEvent(self, event):
		painter = QPainter(self)
		try:
			painter.setRenderHint(QPainter.Antialiasing)
			painter.setRenderHint(QPainter.SmoothPixmapTransform)
			painter.fillRect(self.rect(), QColor(*CANVAS_BACKGROUND_COLOR))

			for layer in self.store:
				self._paint_layer(painter, layer)

			selected = self.store.selected_layer
			if selected is not None:
				self._paint_outline(painter, selected)

			handle_set = self.controller.handle_set
			if handle_set is not None:
				handle_set.draw(painter, self.camera)

			gizmo_layer = self.store.get_by_uuid(self.controller.gizmo_layer_uuid) \
				if self.controller.gizmo_layer_uuid else None
			if gizmo_layer is not None:
				self._paint_gizmo(painter, gizmo_layer)
		finally:
			painter.end()

	def _paint_layer(self, painter, layer):
		"""Draw the mesh one grid cell at a time (image cells are mapped quad to quad)"""
		geometry = layer.geometry
		screen = project_points(layer.world_vertices(), self.camera)
		columns = geometry.columns
		image = layer.image

		painter.setPen(Qt.NoPen)
		painter.setBrush(QBrush(QColor(*LAYER_PLACEHOLDER_COLOR)))

		for iy in range(geometry.segments_y):
			for ix in range(geometry.segments_x):
				a = iy * columns + ix
				cell = (a, a + 1, a + columns + 1, a + columns)  # tl, tr, br, bl
				target = QPolygonF([QPointF(*screen[k]) for k in cell])

				if image is None:
					painter.drawPolygon(target)
					continue

				u0 = ix / geometry.segments_x * image.width()
				u1 = (ix + 1) / geometry.segments_x * image.width()
				v0 = iy / geometry.segments_y * image.height()
				v1 = (iy + 1) / geometry.segments_y * image.height()
				source = QPolygonF([QPointF(u0, v0), QPointF(u1, v0), QPointF(u1, v1), QPointF(u0, v1)])

				mapping = QTransform()
				if not QTransform.quadToQuad(source, target, mapping):
					continue  # Degenerate cell
				painter.save()
				painter.setTransform(mapping, True)
				source_rect = QRectF(u0, v0, u1 - u0, v1 - v0)
				painter.drawImage(source_rect, image, source_rect)
				painter.restore()

	def _paint_outline(self, painter, layer):
		screen = project_points(layer.world_vertices(), self.camera)
		outline = QPolygonF([QPointF(*screen[k]) for k in layer.geometry.boundary_indices()])
		painter.setPen(QPen(QColor(*SELECTION_OUTLINE_COLOR), 1))
		painter.setBrush(Qt.NoBrush)
		painter.drawPolygon(outline)

	def _paint_gizmo(self, painter, layer):
		"""Screen-aligned X/Y arrows at the layer origin"""
		sx, sy = self.camera.project_world_to_screen(layer.local_to_world((0.0, 0.0, 0.0)))
		origin = QPointF(sx, sy)
		painter.setPen(QPen(QColor(*GIZMO_COLOR), 2))
		painter.setBrush(Qt.NoBrush)
		painter.drawLine(origin, QPointF(sx + GIZMO_ARROW_LENGTH, sy))
		painter.drawLine(origin, QPointF(sx, sy - GIZMO_ARROW_LENGTH))
		painter.drawEllipse(origin, GIZMO_ORIGIN_RADIUS, GIZMO_ORIGIN_RADIUS)
