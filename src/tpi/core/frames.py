"""Coordinate frame conversion between the scene and the ROS feed.

The scene uses a right / up / forward (RUF) axis convention, ROS uses
forward / left / up (FLU). Both conversions are pure axis permutations with
sign flips, so they preserve vector length and quaternion norm and are exact
inverses of each other.

Quaternions are stored scalar-last (``x, y, z, w``), the order used by ROS
messages and by :class:`scipy.spatial.transform.Rotation`.
"""

from typing import Sequence, Union
import logging

import numpy as np
from scipy.spatial.transform import Rotation as R

from .enums import Frame
from .types import Pose, as_vector, as_quaternion


logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[float], np.ndarray]

FORWARD = np.array([0.0, 0.0, 1.0])
UP = np.array([0.0, 1.0, 0.0])


# ============================================================================
# Axis Permutations
# ============================================================================

def position_to_external(position: ArrayLike) -> np.ndarray:
    """RUF ``(x, y, z)`` -> FLU ``(z, -x, y)``."""
    x, y, z = as_vector(position, 3, "position")
    return np.array([z, -x, y])


def position_to_native(position: ArrayLike) -> np.ndarray:
    """FLU ``(x, y, z)`` -> RUF ``(-y, z, x)``."""
    x, y, z = as_vector(position, 3, "position")
    return np.array([-y, z, x])


def orientation_to_external(orientation: ArrayLike) -> np.ndarray:
    """RUF quaternion ``(x, y, z, w)`` -> FLU ``(z, -x, y, -w)``."""
    x, y, z, w = as_quaternion(orientation)
    return np.array([z, -x, y, -w])


def orientation_to_native(orientation: ArrayLike) -> np.ndarray:
    """FLU quaternion ``(x, y, z, w)`` -> RUF ``(-y, z, x, -w)``."""
    x, y, z, w = as_quaternion(orientation)
    return np.array([-y, z, x, -w])


def to_external(position: ArrayLike, orientation: ArrayLike) -> Pose:
    """Convert a scene pose into the ROS frame."""
    return Pose(
        position_to_external(position),
        orientation_to_external(orientation),
        Frame.EXTERNAL,
    )


def to_native(position: ArrayLike, orientation: ArrayLike) -> Pose:
    """Convert a ROS pose into the scene frame."""
    return Pose(
        position_to_native(position),
        orientation_to_native(orientation),
        Frame.NATIVE,
    )


def convert(pose: Pose, frame: Frame) -> Pose:
    """Return ``pose`` expressed in ``frame`` (a copy if already there)."""
    if pose.frame == frame:
        return Pose(pose.position.copy(), pose.orientation.copy(), frame)
    if frame == Frame.EXTERNAL:
        return to_external(pose.position, pose.orientation)
    return to_native(pose.position, pose.orientation)


# ============================================================================
# Quaternion Helpers
# ============================================================================

def normalize_quaternion(q: ArrayLike) -> np.ndarray:
    q = as_quaternion(q)
    return q / np.linalg.norm(q)


def quaternion_inverse(q: ArrayLike) -> np.ndarray:
    """Inverse of a unit quaternion (its conjugate)."""
    x, y, z, w = normalize_quaternion(q)
    return np.array([-x, -y, -z, w])


def rotate_vector(q: ArrayLike, v: ArrayLike) -> np.ndarray:
    """Rotate ``v`` by quaternion ``q``."""
    return R.from_quat(as_quaternion(q)).apply(as_vector(v, 3, "vector"))


def look_rotation(forward: ArrayLike, up: ArrayLike = UP) -> np.ndarray:
    """Rotation whose local +Z points along ``forward`` and +Y towards ``up``.

    The basis is rebuilt from the two vectors, so ``up`` does not need to be
    orthogonal to ``forward``. A zero ``forward`` gives the identity; an
    ``up`` parallel to ``forward`` falls back to the shortest arc from +Z.
    """
    f = as_vector(forward, 3, "forward")
    u = as_vector(up, 3, "up")
    f_norm = np.linalg.norm(f)
    if f_norm < 1e-9:
        logger.debug("look_rotation called with zero forward vector")
        return np.array([0.0, 0.0, 0.0, 1.0])
    z_axis = f / f_norm
    x_axis = np.cross(u, z_axis)
    x_norm = np.linalg.norm(x_axis)
    if x_norm < 1e-9:
        rot, _ = R.align_vectors([z_axis], [FORWARD])
        return rot.as_quat()
    x_axis /= x_norm
    y_axis = np.cross(z_axis, x_axis)
    basis = np.column_stack([x_axis, y_axis, z_axis])
    return R.from_matrix(basis).as_quat()
