"""Joint vector helpers, pose conversion and SE(3) errors."""

from typing import NamedTuple, Sequence, Tuple, Union

import numpy as np
import pinocchio as pin
from scipy.spatial.transform import Rotation as R

_PI = np.pi
_TWO_PI = 2.0 * np.pi


# -----------------------------------------------------------------------------
# Joint vectors
# -----------------------------------------------------------------------------


def is_valid(q: Sequence[float]) -> bool:
    """Return True if every joint value is finite (no NaN, no +/-inf)."""
    return bool(np.all(np.isfinite(np.asarray(q))))


def harmonize_toward_zero(q: np.ndarray) -> np.ndarray:
    """
    Wrap joint angles toward zero, in place.

    Each value above pi is shifted down by 2*pi once and each value below
    -pi is shifted up by 2*pi once. This is a single correction step, not a
    modulo: only inputs within (-3*pi, 3*pi] end up in [-pi, pi]. Values
    outside that range stay outside it.

    Args:
        q: 1D floating point array of joint angles, modified in place.

    Returns:
        The same array, for convenience.

    Raises:
        TypeError: If ``q`` is not a floating point array; integer storage
            cannot hold a wrapped angle.
    """
    if not isinstance(q, np.ndarray) or not np.issubdtype(q.dtype, np.floating):
        raise TypeError(
            f"Joint angles must be a floating point array, got {getattr(q, 'dtype', type(q))}"
        )
    dtype = q.dtype.type
    pi = dtype(_PI)
    two_pi = dtype(_TWO_PI)

    for i in range(q.size):
        if q[i] > pi:
            q[i] -= two_pi
        elif q[i] < -pi:
            q[i] += two_pi
    return q


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """L1 distance between two joint vectors."""
    return float(np.sum(np.abs(np.asarray(b, dtype=float) - np.asarray(a, dtype=float))))


def angular_distance(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    """Per-joint signed angle difference a - b wrapped to [-pi, pi)."""
    diff = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return (diff + _PI) % _TWO_PI - _PI


# -----------------------------------------------------------------------------
# Pose exchange format
# -----------------------------------------------------------------------------


class Pose(NamedTuple):
    """
    Position plus orientation of the end-effector.

    Attributes:
        position: (x, y, z) in the base frame.
        orientation: Unit quaternion in (x, y, z, w) order.
    """

    position: Tuple[float, float, float]
    orientation: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


PoseLike = Union[Pose, np.ndarray]


def pose_to_matrix(pose: PoseLike, dtype=np.float64) -> np.ndarray:
    """
    Convert a pose to a 4x4 homogeneous matrix.

    Args:
        pose: Either a ``Pose`` or an array-like 4x4 homogeneous matrix.
        dtype: Floating point type of the returned matrix.

    Returns:
        4x4 homogeneous transform.

    Raises:
        ValueError: If a matrix input does not have shape (4, 4).
    """
    if isinstance(pose, Pose):
        T = np.identity(4, dtype=float)
        T[:3, :3] = R.from_quat(np.asarray(pose.orientation, dtype=float)).as_matrix()
        T[:3, 3] = np.asarray(pose.position, dtype=float)
        return T.astype(dtype)

    T = np.asarray(pose, dtype=dtype)
    if T.shape != (4, 4):
        raise ValueError(f"Pose matrix must have shape (4, 4), got {T.shape}")
    return T


def matrix_to_pose(T: np.ndarray) -> Pose:
    """Convert a 4x4 homogeneous matrix to a ``Pose``."""
    T = np.asarray(T, dtype=float)
    quat = R.from_matrix(T[:3, :3]).as_quat()
    return Pose(
        position=tuple(float(v) for v in T[:3, 3]),
        orientation=tuple(float(v) for v in quat),
    )


# -----------------------------------------------------------------------------
# SE(3) errors
# -----------------------------------------------------------------------------


def se3_pos_ori_error(
    T_cur: np.ndarray,
    T_tar: np.ndarray,
) -> Tuple[float, float]:
    """
    How far a reached tool pose is from the requested one.

    The closed-form solver only matches position, so the orientation part
    reports how much the arm's own orientation differs from the request.

    Args:
        T_cur: Tool pose reached by a solution, e.g. ``forward(params, q)``.
        T_tar: Requested tool pose.

    Returns:
        pos_err: Straight-line distance between the tool points.
        ori_err: Angle of the rotation taking the requested orientation to
            the reached one (radians).
    """
    T_cur = np.asarray(T_cur, dtype=float)
    T_tar = np.asarray(T_tar, dtype=float)

    dp = T_cur[:3, 3] - T_tar[:3, 3]

    # Relative rotation R_err = R_cur * R_tar^T, as an axis-angle vector.
    R_err = T_cur[:3, :3] @ T_tar[:3, :3].T
    ang = float(np.linalg.norm(pin.log3(R_err)))

    return float(np.linalg.norm(dp)), ang


def position_residuals(T_cur: np.ndarray, T_tar: np.ndarray, axes: int = 3) -> np.ndarray:
    """Absolute per-axis position difference over the first ``axes`` axes."""
    return np.abs(
        np.asarray(T_tar, dtype=float)[:axes, 3] - np.asarray(T_cur, dtype=float)[:axes, 3]
    )
