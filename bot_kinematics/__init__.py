"""Closed-form kinematics for a three-joint serial arm."""

from bot_kinematics.common.kinematics import DOF, chain_points, forward, stage_transforms
from bot_kinematics.common.limits import JointLimits
from bot_kinematics.common.parameters import (
    ParameterError,
    Parameters,
    load_parameters,
)
from bot_kinematics.common.utils import (
    Pose,
    harmonize_toward_zero,
    is_valid,
    matrix_to_pose,
    pose_to_matrix,
)
from bot_kinematics.selector import BotKinematicsSolver, IKErrorCode
from bot_kinematics.solvers import inverse

__version__ = "0.1.0"

__all__ = [
    "DOF",
    "BotKinematicsSolver",
    "IKErrorCode",
    "JointLimits",
    "ParameterError",
    "Parameters",
    "Pose",
    "chain_points",
    "forward",
    "harmonize_toward_zero",
    "inverse",
    "is_valid",
    "load_parameters",
    "matrix_to_pose",
    "pose_to_matrix",
    "stage_transforms",
]
