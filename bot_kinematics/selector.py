"""Solution filtering and seed-based selection for the bot arm IK."""

import logging
from enum import IntEnum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from bot_kinematics.common.base import KinematicsBase
from bot_kinematics.common.kinematics import DOF, forward
from bot_kinematics.common.limits import JointLimits
from bot_kinematics.common.parameters import ParameterError, Parameters
from bot_kinematics.common.utils import (
    Pose,
    PoseLike,
    distance,
    harmonize_toward_zero,
    is_valid,
    pose_to_matrix,
)
from bot_kinematics.solvers import DEFAULT_TOLERANCE, inverse


class IKErrorCode(IntEnum):
    """Outcome of a kinematics request."""

    SUCCESS = 1
    NOT_READY = -1
    CONFIGURATION_ERROR = -2
    NO_SOLUTION = -3
    INVALID_NUMERIC = -4


# callback(pose, candidate) -> IKErrorCode; must return promptly.
SolutionCallback = Callable[[np.ndarray, np.ndarray], IKErrorCode]
BoundsCheck = Callable[[np.ndarray], bool]


class BotKinematicsSolver(KinematicsBase):
    """
    Closed-form IK for the three-joint bot arm with solution selection.

    The solver is inactive until ``initialize`` succeeds. After that it only
    holds immutable configuration, so concurrent searches on one instance are
    safe as long as ``initialize`` is not called at the same time.

    Selection pipeline for ``search_position_ik``:
      * solve all closed-form candidates for the single tip pose,
      * drop non-finite candidates and wrap the rest toward zero,
      * drop candidates outside the joint bounds,
      * sort by L1 distance to the seed (stable),
      * return the first one, or the first one the callback accepts.
    """

    def __init__(
        self,
        tolerance: float = DEFAULT_TOLERANCE,
        enumerate_branches: bool = True,
    ) -> None:
        """
        Args:
            tolerance: Per-axis position tolerance used to verify candidates.
            enumerate_branches: Solve every closed-form branch (True) or only
                the first accepted one (False).
        """
        self.logger = logging.getLogger("bot_kinematics.selector")

        self.tolerance = float(tolerance)
        self.enumerate_branches = enumerate_branches

        self.active: bool = False
        self.parameters: Optional[Parameters] = None
        self.dimension: int = DOF
        self.tip_frames: Tuple[str, ...] = ()
        self.joint_limits: Optional[JointLimits] = None

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------
    def initialize(
        self,
        parameters: Union[Parameters, Mapping[str, Any]],
        tip_frames: Sequence[str] = ("tool0",),
        joint_limits: Optional[JointLimits] = None,
    ) -> bool:
        """
        Load geometry constants and activate the solver.

        Args:
            parameters: ``Parameters`` or a mapping of the eight constants.
            tip_frames: Names of the tip frames; exactly one is supported.
            joint_limits: Default bounds used when a search does not pass
                its own predicate. None accepts every configuration.

        Returns:
            True on success. On failure the solver stays inactive.
        """
        self.logger.info("BotKinematicsSolver initializing")
        self.active = False

        if isinstance(tip_frames, str):
            tip_frames = (tip_frames,)
        tip_frames = tuple(tip_frames)
        if len(tip_frames) != 1:
            self.logger.error(
                "Exactly one tip frame is supported, got %d", len(tip_frames)
            )
            return False

        if joint_limits is not None and joint_limits.dof != self.dimension:
            self.logger.error(
                "Joint limits must have size %d instead of size %d",
                self.dimension,
                joint_limits.dof,
            )
            return False

        if not isinstance(parameters, Parameters):
            try:
                parameters = Parameters.from_mapping(parameters)
            except ParameterError as exc:
                self.logger.error("Could not load bot parameters: %s", exc)
                return False

        self.parameters = parameters
        self.tip_frames = tip_frames
        self.joint_limits = joint_limits
        self.logger.info("Loaded parameters for ik solver: %s", parameters)

        self.active = True
        self.logger.debug("Bot kinematics solver initialized")
        return True

    def set_redundant_joints(self, redundant_joints: Sequence[int]) -> bool:
        """Only the empty set is accepted; the closed form has no redundancy."""
        if len(redundant_joints) > 0:
            self.logger.error("This group cannot have redundant joints")
            return False
        return True

    # -------------------------------------------------------------------------
    # Capabilities
    # -------------------------------------------------------------------------
    def forward(self, q: Iterable[float]) -> Optional[np.ndarray]:
        """Tool pose for ``q``, or None while the solver is not initialized."""
        if not self.active:
            self.logger.error("kinematics not active")
            return None
        return forward(self.parameters, list(q))

    def inverse(self, target_pose: PoseLike) -> List[np.ndarray]:
        """Raw closed-form candidates; empty while the solver is not initialized."""
        if not self.active:
            self.logger.error("kinematics not active")
            return []
        return inverse(
            self.parameters,
            target_pose,
            tolerance=self.tolerance,
            all_branches=self.enumerate_branches,
        )

    def bounds_check(self, q: Iterable[float]) -> bool:
        if self.joint_limits is None:
            return True
        return self.joint_limits.satisfies_bounds(q)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def get_all_ik(self, pose: PoseLike) -> List[np.ndarray]:
        """
        All valid candidates for a pose, wrapped toward zero.

        Non-finite candidates are discarded.
        """
        if not self.active:
            self.logger.error("kinematics not active")
            return []

        joint_poses: List[np.ndarray] = []
        for sol in self.inverse(pose):
            if not is_valid(sol):
                self.logger.debug(
                    "Discarding candidate %s (%s)", sol, IKErrorCode.INVALID_NUMERIC.name
                )
                continue
            joint_poses.append(harmonize_toward_zero(sol.copy()))
        return joint_poses

    def get_position_ik(
        self,
        ik_poses: Union[PoseLike, Sequence[PoseLike]],
    ) -> Tuple[List[np.ndarray], bool]:
        """Every valid solution for exactly one pose, without bounds filtering."""
        if not self.active:
            self.logger.error("kinematics not active")
            return [], False

        poses = self._as_pose_list(ik_poses)
        if len(poses) != 1:
            self.logger.error("You can only get all solutions for a single pose.")
            return [], False

        solutions = self.get_all_ik(poses[0])
        return solutions, len(solutions) > 0

    def get_position_fk(self, joint_angles: Sequence[float]) -> Tuple[List[np.ndarray], bool]:
        """Pose of every tip frame for the given joint angles."""
        if not self.active:
            self.logger.error("kinematics not active")
            return [], False

        if len(joint_angles) != self.dimension:
            self.logger.error("Joint angles vector must have size: %d", self.dimension)
            return [], False

        return [self.forward(joint_angles)], True

    def get_ik(
        self,
        pose: PoseLike,
        seed_state: Sequence[float],
    ) -> Tuple[Optional[np.ndarray], bool]:
        """Candidate closest to ``seed_state``, ignoring bounds."""
        if not self.active:
            self.logger.error("kinematics not active")
            return None, False

        joint_poses = self.get_all_ik(pose)
        if not joint_poses:
            return None, False
        return joint_poses[self.closest_joint_pose(seed_state, joint_poses)], True

    @staticmethod
    def closest_joint_pose(
        target: Sequence[float],
        candidates: Sequence[Sequence[float]],
    ) -> int:
        """Index of the candidate with the lowest L1 distance to ``target``."""
        closest = 0
        lowest_cost = np.inf
        for i, candidate in enumerate(candidates):
            cost = distance(target, candidate)
            if cost < lowest_cost:
                closest = i
                lowest_cost = cost
        return closest

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------
    def search_position_ik(
        self,
        ik_poses: Union[PoseLike, Sequence[PoseLike]],
        ik_seed_state: Sequence[float],
        timeout: Optional[float] = None,
        solution_callback: Optional[SolutionCallback] = None,
        bounds_check: Optional[BoundsCheck] = None,
    ) -> Tuple[Optional[np.ndarray], bool, Dict[str, Any]]:
        """
        Find the joint configuration closest to the seed that reaches a pose.

        Args:
            ik_poses: The target tip pose, or a list holding exactly one.
            ik_seed_state: Reference configuration for ranking.
            timeout: Accepted for interface parity; the closed form always
                finishes without it.
            solution_callback: Optional ``callback(pose, q) -> IKErrorCode``.
                Candidates are offered in ascending cost order and the first
                one answered with ``SUCCESS`` is returned. It runs
                synchronously and is expected to return promptly.
            bounds_check: Optional ``predicate(q) -> bool``; defaults to
                ``self.bounds_check``.

        Returns:
            solution: Selected joint vector, or None on failure.
            ok: True on success.
            info: ``error_code`` (``IKErrorCode``) and, once candidates were
                bounds-filtered, ``solutions`` (their count).
        """
        if not self.active:
            self.logger.error("kinematics not active")
            return None, False, {"error_code": IKErrorCode.NOT_READY}

        if len(ik_seed_state) != self.dimension:
            self.logger.error(
                "Seed state must have size %d instead of size %d",
                self.dimension,
                len(ik_seed_state),
            )
            return None, False, {"error_code": IKErrorCode.CONFIGURATION_ERROR}

        poses = self._as_pose_list(ik_poses)
        if len(poses) != len(self.tip_frames):
            self.logger.error(
                "Mismatched number of pose requests (%d) to tip frames (%d) "
                "in search_position_ik",
                len(poses),
                len(self.tip_frames),
            )
            return None, False, {"error_code": IKErrorCode.CONFIGURATION_ERROR}

        # Closed-form candidates, finite and wrapped toward zero.
        pose = pose_to_matrix(poses[0], dtype=self.parameters.dtype)
        solutions = self.get_all_ik(pose)
        if not solutions:
            self.logger.info("Failed to find IK solution")
            return None, False, {"error_code": IKErrorCode.NO_SOLUTION}

        # Keep candidates inside the joint bounds, with their seed distance.
        check = bounds_check if bounds_check is not None else self.bounds_check
        limit_obeying: List[Tuple[float, np.ndarray]] = []
        for sol in solutions:
            if not check(sol):
                self.logger.debug("Solution is outside bounds")
                continue
            limit_obeying.append((distance(sol, ik_seed_state), sol))

        if not limit_obeying:
            self.logger.info("None of the solutions is within joint limits")
            return None, False, {"error_code": IKErrorCode.NO_SOLUTION}

        self.logger.debug("Solutions within limits: %d", len(limit_obeying))

        # Stable sort by distance to seed; equal costs keep solver order.
        limit_obeying.sort(key=lambda item: item[0])
        info: Dict[str, Any] = {"solutions": len(limit_obeying)}

        # Without a callback the nearest candidate wins.
        if solution_callback is None:
            info["error_code"] = IKErrorCode.SUCCESS
            return limit_obeying[0][1].copy(), True, info

        # Otherwise offer candidates nearest first until one is accepted.
        for _, sol in limit_obeying:
            if solution_callback(pose, sol.copy()) == IKErrorCode.SUCCESS:
                self.logger.debug("Solution passes callback")
                info["error_code"] = IKErrorCode.SUCCESS
                return sol.copy(), True, info

        self.logger.info("No solution fulfilled requirements of solution callback")
        info["error_code"] = IKErrorCode.NO_SOLUTION
        return None, False, info

    def solve(
        self,
        target_pose: PoseLike,
        q_seed: Optional[Iterable[float]] = None,
    ) -> Tuple[Optional[np.ndarray], bool, Dict[str, Any]]:
        """Search with the default bounds; the seed defaults to zeros."""
        if q_seed is None:
            q_seed = np.zeros(self.dimension)
        return self.search_position_ik(target_pose, list(q_seed))

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    @staticmethod
    def _as_pose_list(ik_poses: Union[PoseLike, Sequence[PoseLike]]) -> List[PoseLike]:
        """Wrap a single pose into a list; leave lists of poses alone."""
        if isinstance(ik_poses, Pose):
            return [ik_poses]
        # A single 4x4 matrix may arrive as an ndarray or as nested lists.
        if not isinstance(ik_poses, np.ndarray) and any(isinstance(p, Pose) for p in ik_poses):
            return list(ik_poses)
        if np.asarray(ik_poses, dtype=object).shape == (4, 4):
            return [ik_poses]
        return list(ik_poses)
