"""
Planar Layer Compositor - Transform Math Utilities

This module provides the matrix and quaternion helpers used by every
transform tool: building 4x4 affine matrices from position/rotation/scale,
decomposing them back, reflections, point transformation and angle
normalization.

These pure math functions handle the linear algebra without any UI
dependencies. Matrices are numpy (4, 4) float arrays acting on column
vectors; quaternions are numpy arrays ordered (w, x, y, z).
"""

import math

import numpy as np

from constants import MATRIX_EPSILON


def identity_matrix():
    """Return a fresh 4x4 identity matrix"""
    return np.eye(4, dtype=float)


def translation_matrix(offset):
    """Build a translation matrix

    Args:
        offset: 2- or 3-component translation (missing Z treated as 0)

    Returns:
        4x4 numpy array
    """
    m = np.eye(4, dtype=float)
    offset = np.asarray(offset, dtype=float)
    m[:offset.shape[0], 3] = offset
    return m


def scale_matrix(factors):
    """Build a (possibly non-uniform, possibly negative) scale matrix"""
    m = np.eye(4, dtype=float)
    factors = np.asarray(factors, dtype=float)
    for i, f in enumerate(factors[:3]):
        m[i, i] = f
    return m


def rotation_z_matrix(angle):
    """Build a rotation matrix about the world Z axis

    Args:
        angle: Rotation in radians, counter-clockwise when Y points up

    Returns:
        4x4 numpy array
    """
    c = math.cos(angle)
    s = math.sin(angle)
    m = np.eye(4, dtype=float)
    m[0, 0] = c
    m[0, 1] = -s
    m[1, 0] = s
    m[1, 1] = c
    return m


def reflection_matrix(axis, center):
    """Build a reflection about a point along one axis

    The mirror line passes through ``center``. Flipping on 'x' mirrors the
    horizontal coordinate (left <-> right), 'y' mirrors the vertical one.

    Args:
        axis: 'x' or 'y'
        center: Point the mirror passes through (world space)

    Returns:
        4x4 numpy array equal to T(center) * S(axis) * T(-center)

    Raises:
        ValueError: If axis is not 'x' or 'y'
    """
    if axis == 'x':
        mirror = scale_matrix((-1.0, 1.0, 1.0))
    elif axis == 'y':
        mirror = scale_matrix((1.0, -1.0, 1.0))
    else:
        raise ValueError(f"Unknown flip axis '{axis}', expected 'x' or 'y'")

    center = np.asarray(center, dtype=float)
    return translation_matrix(center) @ mirror @ translation_matrix(-center)


# ======================================================================
# QUATERNIONS
# ======================================================================

def quaternion_identity():
    """Return the identity rotation (w, x, y, z)"""
    return np.array([1.0, 0.0, 0.0, 0.0])


def quaternion_from_z_angle(angle):
    """Quaternion for a rotation of ``angle`` radians about Z"""
    half = angle / 2.0
    return np.array([math.cos(half), 0.0, 0.0, math.sin(half)])


def quaternion_to_matrix(q):
    """Convert a unit quaternion (w, x, y, z) to a 3x3 rotation matrix"""
    w, x, y, z = q
    return np.array([
        [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - z * w), 2.0 * (x * z + y * w)],
        [2.0 * (x * y + z * w), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - x * w)],
        [2.0 * (x * z - y * w), 2.0 * (y * z + x * w), 1.0 - 2.0 * (x * x + y * y)],
    ])


def quaternion_from_matrix(m):
    """Convert a pure 3x3 rotation matrix to a unit quaternion

    Uses the trace method with the largest-diagonal fallback for numerical
    stability. The result is normalized and canonicalized to w >= 0 so that
    the same rotation always decomposes to the same quaternion.

    Args:
        m: 3x3 rotation matrix (orthonormal, determinant +1)

    Returns:
        numpy array (w, x, y, z)
    """
    m00, m01, m02 = m[0]
    m10, m11, m12 = m[1]
    m20, m21, m22 = m[2]
    trace = m00 + m11 + m22

    if trace > 0:
        s = 0.5 / math.sqrt(trace + 1.0)
        q = np.array([0.25 / s, (m21 - m12) * s, (m02 - m20) * s, (m10 - m01) * s])
    elif m00 > m11 and m00 > m22:
        s = 2.0 * math.sqrt(1.0 + m00 - m11 - m22)
        q = np.array([(m21 - m12) / s, 0.25 * s, (m01 + m10) / s, (m02 + m20) / s])
    elif m11 > m22:
        s = 2.0 * math.sqrt(1.0 + m11 - m00 - m22)
        q = np.array([(m02 - m20) / s, (m01 + m10) / s, 0.25 * s, (m12 + m21) / s])
    else:
        s = 2.0 * math.sqrt(1.0 + m22 - m00 - m11)
        q = np.array([(m10 - m01) / s, (m02 + m20) / s, (m12 + m21) / s, 0.25 * s])

    q = q / np.linalg.norm(q)
    if q[0] < 0:
        q = -q
    return q


def z_angle_from_quaternion(q):
    """Rotation about Z (radians, in (-pi, pi]) described by a quaternion

    Reads the angle from the rotated X axis, so it stays meaningful even if
    the orientation carries a tilt.
    """
    r = quaternion_to_matrix(q)
    return normalize_angle(math.atan2(r[1, 0], r[0, 0]))


# ======================================================================
# COMPOSE / DECOMPOSE
# ======================================================================

def compose_matrix(position, rotation, scale):
    """Build T * R * S from transform fields

    Args:
        position: 3-vector
        rotation: quaternion (w, x, y, z)
        scale: 3-vector (signed)

    Returns:
        4x4 numpy array
    """
    m = np.eye(4, dtype=float)
    m[:3, :3] = quaternion_to_matrix(rotation) * np.asarray(scale, dtype=float)
    m[:3, 3] = np.asarray(position, dtype=float)
    return m


# Sign flips tried on the (x, y) scale of the hint; first is "keep the hint"
_SIGN_CANDIDATES = ((1.0, 1.0), (-1.0, 1.0), (1.0, -1.0), (-1.0, -1.0))


def _rotation_from_basis(basis, scale):
    safe = np.where(np.abs(scale) < MATRIX_EPSILON, 1.0, scale)
    return quaternion_from_matrix(basis / safe)


def decompose_matrix(m, sign_hint=None, rotation_hint=None):
    """Split an affine matrix into position, rotation and scale

    The split of a reflection between scale signs and rotation is not
    unique: scale (1, -1) and scale (-1, 1) turned by 180 degrees build the
    same matrix. Without hints a reflection (negative determinant) is
    folded into a negative X scale. With hints, the decomposition keeps
    the hinted scale signs when the determinant allows it; otherwise it
    changes as few signs as possible and prefers the rotation closest to
    ``rotation_hint``.

    Args:
        m: 4x4 affine matrix without shear
        sign_hint: Previous signed scale (3-vector), or None
        rotation_hint: Previous rotation quaternion, or None

    Returns:
        Tuple of (position, quaternion, scale) numpy arrays
    """
    m = np.asarray(m, dtype=float)
    basis = m[:3, :3]
    position = m[:3, 3].copy()

    magnitudes = np.linalg.norm(basis, axis=0)
    reflected = np.linalg.det(basis) < 0

    if sign_hint is None:
        scale = magnitudes.copy()
        if reflected:
            scale[0] = -scale[0]
        return position, _rotation_from_basis(basis, scale), scale

    hint_signs = np.where(np.asarray(sign_hint, dtype=float) < 0, -1.0, 1.0)
    best = None
    for flip_x, flip_y in _SIGN_CANDIDATES:
        signs = hint_signs * np.array([flip_x, flip_y, 1.0])
        if (np.prod(signs) < 0) != reflected:
            continue
        scale = magnitudes * signs
        rotation = _rotation_from_basis(basis, scale)
        changes = int(np.count_nonzero(signs != hint_signs))
        distance = 0.0
        if rotation_hint is not None:
            distance = round(1.0 - abs(float(np.dot(rotation, rotation_hint))), 9)
        if best is None or (changes, distance) < best[0]:
            best = ((changes, distance), scale, rotation)

    _, scale, rotation = best
    return position, rotation, scale


# ======================================================================
# POINTS
# ======================================================================

def transform_point(m, point):
    """Apply an affine 4x4 matrix to a single point

    Args:
        m: 4x4 matrix
        point: 2- or 3-component point (missing Z treated as 0)

    Returns:
        3-component numpy array
    """
    p = np.zeros(3)
    point = np.asarray(point, dtype=float)
    p[:point.shape[0]] = point
    return m[:3, :3] @ p + m[:3, 3]


def transform_points(m, points):
    """Apply an affine 4x4 matrix to an (N, 3) array of points"""
    points = np.asarray(points, dtype=float)
    return points @ m[:3, :3].T + m[:3, 3]


def transform_direction(m, vector):
    """Apply only the linear part of ``m`` to a direction vector"""
    return m[:3, :3] @ np.asarray(vector, dtype=float)


def normalize_angle(angle):
    """Wrap an angle in radians into the half-open range (-pi, pi]"""
    wrapped = math.fmod(angle, 2.0 * math.pi)
    if wrapped <= -math.pi:
        wrapped += 2.0 * math.pi
    elif wrapped > math.pi:
        wrapped -= 2.0 * math.pi
    return wrapped


def lerp(a, b, t):
    """Linear interpolation between two points (works on numpy arrays)"""
    return a + (b - a) * t
