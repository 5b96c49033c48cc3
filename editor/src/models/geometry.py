"""
Planar Layer Compositor - Layer Geometry

Subdivided planar grid owned by each layer:
- Vertex grid stored in layer-local space, row-major from the top row
- Fixed vertex count after creation
- Triangle indices and per-vertex normals (cosmetic only)
- Bilinear corner distortion
- World-space axis-aligned bounds (recomputed on demand, never cached)

This is part of the MODEL layer - pure data, no UI logic.
"""

from dataclasses import dataclass

import numpy as np

from utils.transform_math import lerp, transform_points


@dataclass
class Bounds:
    """Axis-aligned bounding box (min/max per axis)"""
    min: np.ndarray
    max: np.ndarray

    @classmethod
    def from_points(cls, points):
        points = np.asarray(points, dtype=float)
        return cls(points.min(axis=0), points.max(axis=0))

    @property
    def center(self):
        return (self.min + self.max) / 2.0

    @property
    def width(self):
        return float(self.max[0] - self.min[0])

    @property
    def height(self):
        return float(self.max[1] - self.min[1])

    def corners(self):
        """Rectangle corners in handle order: top-left, top-right, bottom-right, bottom-left

        World Y points up, so "top" is max Y. Corners sit at the mid depth.
        """
        z = float(self.center[2])
        return [
            np.array([self.min[0], self.max[1], z]),
            np.array([self.max[0], self.max[1], z]),
            np.array([self.max[0], self.min[1], z]),
            np.array([self.min[0], self.min[1], z]),
        ]


class LayerGeometry:
    """Planar grid of ``(segments_x + 1) * (segments_y + 1)`` vertices.

    The grid starts as a ``width`` x ``height`` rectangle centered on the
    local origin in the local XY plane. Vertex ``iy * (segments_x + 1) + ix``
    is column ``ix`` (left to right) of row ``iy`` (top to bottom).

    ``width``/``height`` stay the base size of the layer (used by the scale
    tool) even after the vertices are distorted.
    """

    def __init__(self, width: float, height: float, segments_x: int = 1, segments_y: int = 1):
        if width <= 0 or height <= 0:
            raise ValueError(f"Geometry size must be positive, got {width}x{height}")
        if segments_x < 1 or segments_y < 1:
            raise ValueError(f"Geometry needs at least one segment per axis, got {segments_x}x{segments_y}")

        self.width = float(width)
        self.height = float(height)
        self.segments_x = int(segments_x)
        self.segments_y = int(segments_y)

        self.vertices = self._build_vertices()
        self.indices = self._build_indices()
        self.normals = np.zeros_like(self.vertices)
        self.version = 0
        self.compute_vertex_normals()

    def _build_vertices(self):
        xs = np.linspace(-self.width / 2.0, self.width / 2.0, self.segments_x + 1)
        ys = np.linspace(self.height / 2.0, -self.height / 2.0, self.segments_y + 1)
        grid_x, grid_y = np.meshgrid(xs, ys)
        return np.column_stack([grid_x.ravel(), grid_y.ravel(), np.zeros(grid_x.size)])

    def _build_indices(self):
        columns = self.segments_x + 1
        faces = []
        for iy in range(self.segments_y):
            for ix in range(self.segments_x):
                a = ix + columns * iy
                b = ix + columns * (iy + 1)
                c = (ix + 1) + columns * (iy + 1)
                d = (ix + 1) + columns * iy
                faces.append((a, b, d))
                faces.append((b, c, d))
        return np.array(faces, dtype=int)

    # ========================================
    # Queries
    # ========================================

    @property
    def vertex_count(self) -> int:
        return (self.segments_x + 1) * (self.segments_y + 1)

    @property
    def columns(self) -> int:
        return self.segments_x + 1

    def corner_indices(self):
        """Vertex indices of (top-left, top-right, bottom-right, bottom-left)"""
        return (
            0,
            self.segments_x,
            self.vertex_count - 1,
            self.segments_y * (self.segments_x + 1),
        )

    def corner_vertices(self):
        """Local positions of the four corners in handle order"""
        return [self.vertices[i].copy() for i in self.corner_indices()]

    def boundary_indices(self):
        """Vertex indices around the grid outline, clockwise from the top-left corner"""
        columns = self.columns
        top = list(range(columns))
        right = [iy * columns + self.segments_x for iy in range(1, self.segments_y + 1)]
        bottom = [self.segments_y * columns + ix for ix in range(self.segments_x - 1, -1, -1)]
        left = [iy * columns for iy in range(self.segments_y - 1, 0, -1)]
        return top + right + bottom + left

    def row(self, iy: int):
        """Copy of the vertices in grid row ``iy`` (0 = top)"""
        start = iy * self.columns
        return self.vertices[start:start + self.columns].copy()

    def world_vertices(self, world_matrix):
        """All vertices transformed by ``world_matrix``"""
        return transform_points(world_matrix, self.vertices)

    def world_bounds(self, world_matrix) -> Bounds:
        """World AABB over every vertex (recomputed each call)"""
        return Bounds.from_points(self.world_vertices(world_matrix))

    # ========================================
    # Mutation
    # ========================================

    def set_vertices(self, vertices):
        """Replace every vertex (local space); vertex count must not change"""
        vertices = np.asarray(vertices, dtype=float)
        assert vertices.shape == self.vertices.shape, (
            f"Vertex grid mismatch: expected {self.vertices.shape}, got {vertices.shape}"
        )
        self.vertices = vertices.copy()
        self.mark_dirty()

    def mark_dirty(self):
        """Flag the vertex buffer as changed and refresh normals"""
        self.version += 1
        self.compute_vertex_normals()

    def compute_vertex_normals(self):
        """Area-weighted per-vertex normals from the triangle list"""
        v0 = self.vertices[self.indices[:, 0]]
        v1 = self.vertices[self.indices[:, 1]]
        v2 = self.vertices[self.indices[:, 2]]
        face_normals = np.cross(v1 - v0, v2 - v0)

        normals = np.zeros_like(self.vertices)
        for k in range(3):
            np.add.at(normals, self.indices[:, k], face_normals)

        lengths = np.linalg.norm(normals, axis=1, keepdims=True)
        lengths[lengths == 0] = 1.0
        self.normals = normals / lengths

    def apply_corner_distortion(self, corners_world, inverse_world_matrix):
        """Bilinear patch over four world-space corners

        Every vertex is recomputed from all four corners: for each row
        ``t = iy / segments_y`` the row ends are ``lerp(tl, bl, t)`` and
        ``lerp(tr, br, t)``, and each column ``s = ix / segments_x``
        interpolates between them. Results are stored back in local space.

        Args:
            corners_world: Four world points ordered top-left, top-right,
                bottom-right, bottom-left
            inverse_world_matrix: Current inverse model matrix of the owning layer
        """
        assert len(corners_world) == 4, f"Distortion needs 4 corners, got {len(corners_world)}"
        tl, tr, br, bl = (np.asarray(c, dtype=float) for c in corners_world)

        world = np.empty_like(self.vertices)
        columns = self.columns
        for iy in range(self.segments_y + 1):
            t = iy / self.segments_y
            left = lerp(tl, bl, t)
            right = lerp(tr, br, t)
            for ix in range(columns):
                s = ix / self.segments_x
                world[iy * columns + ix] = lerp(left, right, s)

        self.set_vertices(transform_points(inverse_world_matrix, world))
