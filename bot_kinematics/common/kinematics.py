"""Forward kinematics for the three-joint bot arm."""

from typing import List

import numpy as np

from bot_kinematics.common.parameters import Parameters

# Number of revolute joints in the chain.
DOF = 3


def _joint_array(params: Parameters, q) -> np.ndarray:
    """Validate and convert a joint vector to the parameters' dtype."""
    q = np.asarray(q, dtype=params.dtype).flatten()
    if q.size != DOF:
        raise ValueError(f"FK expects {DOF} joint values, got {q.size}.")
    return q


def stage_transforms(params: Parameters, q) -> List[np.ndarray]:
    """
    Build the per-stage homogeneous transforms of the chain.

    The chain is a base yaw joint, a shoulder pitch joint and an elbow
    pitch joint followed by a fixed tool offset:

        T01 = Trans(0, 0, l1 + t1) * Rz(q1)
        T12 = Trans(a1, l2, 0)     * Ry(q2)
        T23 = Trans(0, l3, a2)     * Ry(q3)
        T34 = Trans(t3, 0, a3)

    Args:
        params: Geometry constants of the arm.
        q: Joint angles [q1, q2, q3] in radians.

    Returns:
        List of the four 4x4 stage transforms, base to tip.
    """
    q = _joint_array(params, q)
    dtype = params.dtype

    s1, s2, s3 = np.sin(q)
    c1, c2, c3 = np.cos(q)

    t01 = np.array(
        [
            [c1, -s1, 0, 0],
            [s1, c1, 0, 0],
            [0, 0, 1, params.l1 + params.t1],
            [0, 0, 0, 1],
        ],
        dtype=dtype,
    )

    t12 = np.array(
        [
            [c2, 0, s2, params.a1],
            [0, 1, 0, params.l2],
            [-s2, 0, c2, 0],
            [0, 0, 0, 1],
        ],
        dtype=dtype,
    )

    t23 = np.array(
        [
            [c3, 0, s3, 0],
            [0, 1, 0, params.l3],
            [-s3, 0, c3, params.a2],
            [0, 0, 0, 1],
        ],
        dtype=dtype,
    )

    t34 = np.array(
        [
            [1, 0, 0, params.t3],
            [0, 1, 0, 0],
            [0, 0, 1, params.a3],
            [0, 0, 0, 1],
        ],
        dtype=dtype,
    )

    return [t01, t12, t23, t34]


def forward(params: Parameters, q) -> np.ndarray:
    """
    Compute the end-effector pose for the given joint angles.

    Non-finite joint values propagate into the returned matrix.

    Args:
        params: Geometry constants of the arm.
        q: Joint angles [q1, q2, q3] in radians.

    Returns:
        4x4 homogeneous transform of the tool point in the base frame.
    """
    t01, t12, t23, t34 = stage_transforms(params, q)
    return t01 @ t12 @ t23 @ t34


def chain_points(params: Parameters, q) -> np.ndarray:
    """
    Get the 3D positions of every stage origin in the chain.

    Args:
        params: Geometry constants of the arm.
        q: Joint angles [q1, q2, q3] in radians.

    Returns:
        (5, 3) array of points in the base frame: the base origin followed
        by the frame origin after each of the four stages (the last one is
        the tool point).
    """
    points: List[np.ndarray] = [np.zeros(3, dtype=params.dtype)]

    T = np.identity(4, dtype=params.dtype)
    for stage in stage_transforms(params, q):
        T = T @ stage
        points.append(T[:3, 3].copy())

    return np.asarray(points, dtype=params.dtype)
