"""Closed-form inverse kinematics for the three-joint bot arm."""

import logging
import math
from typing import Iterator, List, Tuple

import numpy as np

from bot_kinematics.common.kinematics import DOF, forward
from bot_kinematics.common.parameters import Parameters
from bot_kinematics.common.utils import (
    PoseLike,
    angular_distance,
    pose_to_matrix,
    position_residuals,
)

logger = logging.getLogger("bot_kinematics.solvers")

# Allowed per-axis position error when verifying a candidate.
DEFAULT_TOLERANCE = 1e-2

# Lengths below this are treated as zero.
_EPS = 1e-12

# Candidates closer than this (per joint, wrapped) are the same solution.
_DUPLICATE_TOL = 1e-9


def _position_branches(
    params: Parameters,
    x: float,
    y: float,
    z: float,
) -> Iterator[Tuple[float, float, float]]:
    """
    Yield trial joint angles for a tool position, one per branch.

    Branch order is fixed: base facing the target (front) before base turned
    away (back), and for each of those the positive elbow root before the
    negative one.

    In the frame after the base joint the tool point is

        (a1 + u, l2 + l3, w)   with   (u, w) = Ry(q2) * (vx, vz)

    where (vx, vz) depends only on q3 and satisfies

        vx^2 + vz^2 = a2^2 + a3^2 + t3^2 + 2 * a2 * (a3 * c3 - t3 * s3).
    """
    height = params.l1 + params.t1
    lateral = params.l2 + params.l3
    a1, a2, a3, t3 = params.a1, params.a2, params.a3, params.t3

    # Reach in the base plane once the lateral offset is removed.
    rho = math.sqrt(max(x * x + y * y - lateral * lateral, 0.0))

    link = math.hypot(a3, t3)
    phi = math.atan2(t3, a3)

    # Front branch reaches forward (+rho), back branch turns the base away.
    for reach in (rho, -rho):
        # Base yaw from the planar direction and the lateral offset.
        q1 = math.atan2(y, x) - math.atan2(lateral, reach)

        u = reach - a1
        w = z - height

        if abs(a2) < _EPS or link < _EPS:
            # The elbow does not change reach; pin it.
            elbows: Tuple[float, ...] = (0.0,)
        else:
            # Elbow from the law of cosines over the upper arm and tool vector.
            k = (u * u + w * w - a2 * a2 - link * link) / (2.0 * a2 * link)
            g = math.acos(min(1.0, max(-1.0, k)))
            elbows = (g - phi, -g - phi)

        # Shoulder aligns the elbow's (vx, vz) with the required (u, w).
        for q3 in elbows:
            vx = t3 * math.cos(q3) + a3 * math.sin(q3)
            vz = a2 - t3 * math.sin(q3) + a3 * math.cos(q3)
            q2 = math.atan2(vz, vx) - math.atan2(w, u)
            yield q1, q2, q3


def _is_duplicate(candidate: np.ndarray, accepted: List[np.ndarray]) -> bool:
    for existing in accepted:
        if np.all(np.abs(angular_distance(candidate, existing)) <= _DUPLICATE_TOL):
            return True
    return False


def inverse(
    params: Parameters,
    target_pose: PoseLike,
    tolerance: float = DEFAULT_TOLERANCE,
    all_branches: bool = False,
) -> List[np.ndarray]:
    """
    Solve joint angles for a target tool position in closed form.

    Every trial from the branch enumeration is rebuilt with ``forward`` and
    accepted only when the absolute error on each solved axis (x, y, z; one
    per joint) is within ``tolerance``. Orientation is not checked.

    Args:
        params: Geometry constants of the arm.
        target_pose: Desired pose as a 4x4 homogeneous matrix or ``Pose``.
        tolerance: Allowed absolute position error per axis.
        all_branches: When False, return at most one candidate (the first
            accepted branch). When True, return every accepted distinct
            branch, up to four.

    Returns:
        List of candidate joint vectors in the parameters' dtype, possibly
        empty when the target is out of reach.
    """
    T_target = pose_to_matrix(target_pose, dtype=params.dtype)
    x, y, z = (float(v) for v in T_target[:3, 3])

    candidates: List[np.ndarray] = []
    for trial in _position_branches(params, x, y, z):
        q = np.asarray(trial, dtype=params.dtype)

        # Rebuild the pose and check every solved axis.
        residuals = position_residuals(forward(params, q), T_target, axes=DOF)
        if not np.all(residuals <= tolerance):
            logger.debug("Rejected trial %s, residuals %s", q, residuals)
            continue

        # Coincident branches (e.g. rho == 0) yield the same joints.
        if _is_duplicate(q, candidates):
            continue

        candidates.append(q)
        if not all_branches:
            break

    return candidates
