"""Transform data structures for coordinate and state representation."""
from dataclasses import dataclass, field

import numpy as np

from utils.transform_math import (
    compose_matrix, decompose_matrix, quaternion_identity,
    quaternion_from_z_angle, z_angle_from_quaternion
)


def _vec3(values=(0.0, 0.0, 0.0)):
    return np.array(values, dtype=float)


@dataclass
class Transform:
    """Layer transform state: position, orientation and signed scale.

    - position: 3-vector in the parent's space (Z is depth)
    - rotation: unit quaternion (w, x, y, z); the tools only rotate about Z
      but the orientation is kept general
    - scale: 3-vector, X/Y independently signable (negative = flipped)

    The matrix is never cached: matrix() rebuilds it from the live fields.
    """
    position: np.ndarray = field(default_factory=_vec3)
    rotation: np.ndarray = field(default_factory=quaternion_identity)
    scale: np.ndarray = field(default_factory=lambda: _vec3((1.0, 1.0, 1.0)))

    def matrix(self):
        """Local model matrix T * R * S built from the current fields"""
        return compose_matrix(self.position, self.rotation, self.scale)

    def set_from_matrix(self, m):
        """Overwrite position/rotation/scale with the decomposition of ``m``

        The current fields act as hints, so a mirrored axis stays mirrored
        when ``m`` still carries the same reflection.
        """
        self.position, self.rotation, self.scale = decompose_matrix(
            m, sign_hint=self.scale, rotation_hint=self.rotation
        )

    @property
    def rotation_z(self):
        """Rotation about Z in radians, in (-pi, pi]"""
        return z_angle_from_quaternion(self.rotation)

    @rotation_z.setter
    def rotation_z(self, angle):
        self.rotation = quaternion_from_z_angle(angle)

    def copy(self):
        """Independent deep copy"""
        return Transform(self.position.copy(), self.rotation.copy(), self.scale.copy())

    @classmethod
    def from_values(cls, position=(0.0, 0.0, 0.0), rotation_z=0.0, scale=(1.0, 1.0, 1.0)):
        """Convenience constructor from plain tuples and a Z angle (radians)"""
        position = list(position) + [0.0] * (3 - len(position))
        scale = list(scale) + [1.0] * (3 - len(scale))
        return cls(_vec3(position), quaternion_from_z_angle(rotation_z), _vec3(scale))
