"""Coordinate transformation utilities for the transform engine.

Provides conversion between the three coordinate systems:
- Screen pixels (Y-down, origin top-left of the viewport)
- World / camera space (Y-up, Z = depth)
- Layer-local space (the layer's vertex grid)

Two displacement strategies exist:
- Plane intersection (screen_to_world with a plane) for distort/rotate,
  where the live orientation of the mesh matters
- Linear pixel scaling (screen_delta_to_world_delta) for move/scale,
  which only needs a delta and never unprojects an absolute point

All functions are pure: they read the camera and layer, never mutate them.
"""

import numpy as np

from constants import RAY_PARALLEL_EPSILON
from utils.transform_math import transform_direction, transform_point

WORLD_XY_PLANE = (np.zeros(3), np.array([0.0, 0.0, 1.0]))


def intersect_ray_plane(ray, plane_point, plane_normal):
	"""Intersect a picking ray with a plane.

	The ray is treated as an infinite line, so planes on either side of the
	camera origin are reachable.

	Args:
		ray: Ray with origin and direction
		plane_point: Any point on the plane
		plane_normal: Plane normal (need not be unit length)

	Returns:
		World point, or None if the ray is parallel to the plane
	"""
	normal = np.asarray(plane_normal, dtype=float)
	denom = float(np.dot(normal, ray.direction))
	if abs(denom) < RAY_PARALLEL_EPSILON:
		return None
	t = float(np.dot(normal, np.asarray(plane_point, dtype=float) - ray.origin)) / denom
	return ray.origin + ray.direction * t


def screen_to_world(screen_point, camera, plane=None):
	"""Unproject a screen pixel onto a world plane.

	Args:
		screen_point: (x, y) in screen pixels
		camera: Camera capability providing ray_from_screen
		plane: (point, normal) tuple; defaults to the world XY plane at z=0

	Returns:
		World point (numpy 3-vector), or None if the ray misses the plane
	"""
	plane_point, plane_normal = plane if plane is not None else WORLD_XY_PLANE
	ray = camera.ray_from_screen(screen_point[0], screen_point[1])
	return intersect_ray_plane(ray, plane_point, plane_normal)


def world_to_screen(world_point, camera):
	"""Project a world point to screen pixels"""
	return camera.project_world_to_screen(world_point)


def world_to_local(world_point, layer):
	"""Convert a world point into the layer's local space.

	Uses the inverse of the layer's live world matrix (rebuilt from the
	current transform fields and pivot on every call).
	"""
	return layer.world_to_local(world_point)


def local_to_world(local_point, layer):
	"""Convert a layer-local point into world space"""
	return layer.local_to_world(local_point)


def screen_delta_to_world_delta(dx_pixels, dy_pixels, camera, viewport_size=None):
	"""Scale a pixel displacement into a world displacement.

	Ratio of the camera's visible world extent to the viewport's pixel
	extent. Screen Y grows downward while world Y grows upward, so the Y
	component is negated.

	Args:
		dx_pixels, dy_pixels: Pointer displacement in pixels
		camera: Camera capability providing world_size
		viewport_size: (width, height) in pixels; defaults to camera.viewport_size

	Returns:
		numpy 3-vector (dx, dy, 0) in world units
	"""
	viewport_w, viewport_h = viewport_size if viewport_size is not None else camera.viewport_size
	world_w, world_h = camera.world_size
	return np.array([
		dx_pixels * world_w / viewport_w,
		-dy_pixels * world_h / viewport_h,
		0.0,
	])


def layer_plane(layer):
	"""Plane coplanar with the layer's live world orientation.

	Returns:
		(point, normal): the layer origin in world space and the world-space
		normal of its local XY plane
	"""
	m = layer.world_matrix()
	origin = transform_point(m, (0.0, 0.0, 0.0))
	axis_x = transform_direction(m, (1.0, 0.0, 0.0))
	axis_y = transform_direction(m, (0.0, 1.0, 0.0))
	normal = np.cross(axis_x, axis_y)
	length = np.linalg.norm(normal)
	if length > 0:
		normal = normal / length
	return origin, normal


def project_points(world_points, camera):
	"""Project an (N, 3) array of world points to an (N, 2) array of screen pixels"""
	return np.array([camera.project_world_to_screen(p) for p in world_points]).reshape(-1, 2)


def _edge_side(px, py, a, b):
	return (px - b[:, 0]) * (a[:, 1] - b[:, 1]) - (a[:, 0] - b[:, 0]) * (py - b[:, 1])


def layer_contains_screen_point(layer, screen_x, screen_y, camera):
	"""Test a screen pixel against the layer's projected triangles.

	Follows the live (possibly distorted) mesh, not its bounding box.

	Returns:
		bool: True if the point lies inside (or on the edge of) any triangle
	"""
	screen = project_points(layer.world_vertices(), camera)
	indices = layer.geometry.indices
	a = screen[indices[:, 0]]
	b = screen[indices[:, 1]]
	c = screen[indices[:, 2]]

	d1 = _edge_side(screen_x, screen_y, a, b)
	d2 = _edge_side(screen_x, screen_y, b, c)
	d3 = _edge_side(screen_x, screen_y, c, a)
	has_neg = (d1 < 0) | (d2 < 0) | (d3 < 0)
	has_pos = (d1 > 0) | (d2 > 0) | (d3 > 0)
	return bool(np.any(~(has_neg & has_pos)))
