"""Base class for closed-form kinematics solvers."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np


class KinematicsBase(ABC):
    """
    Abstract base class for kinematics solvers.

    Concrete solvers expose three capabilities to the embedding process:
    ``forward`` (pose from joint angles), ``inverse`` (candidate joint
    vectors for a pose) and ``bounds_check`` (joint limit predicate). The
    ``solve`` entry point combines them into a single best configuration.
    """

    @abstractmethod
    def forward(self, q: Iterable[float]) -> np.ndarray:
        """Return the 4x4 end-effector pose for joint angles ``q``."""
        raise NotImplementedError

    @abstractmethod
    def inverse(self, target_pose: np.ndarray) -> List[np.ndarray]:
        """Return the (possibly empty) list of candidate joint vectors."""
        raise NotImplementedError

    @abstractmethod
    def bounds_check(self, q: Iterable[float]) -> bool:
        """Return True if ``q`` lies within the joint limits."""
        raise NotImplementedError

    @abstractmethod
    def solve(
        self,
        target_pose: np.ndarray,
        q_seed: Optional[Iterable[float]] = None,
    ) -> Tuple[Optional[np.ndarray], bool, Dict[str, Any]]:
        """
        Pick one joint configuration that places the tool at ``target_pose``.

        Args:
            target_pose: Requested tool pose in the base frame. Only its
                position has to be matched.
            q_seed: Configuration the answer should stay close to; candidates
                are ranked by their distance to it. Defaults to all zeros.

        Returns:
            q: Chosen joint vector, or None when nothing qualifies.
            ok: True if a configuration was chosen.
            info: ``error_code`` plus, when candidates were ranked, the
                number that passed the bounds check.
        """
        raise NotImplementedError
