"""Joint travel limits used as the default bounds predicate."""

from typing import Sequence

import numpy as np


class JointLimits:
    """
    Lower/upper position limits for each joint.

    Continuous joints use -inf/+inf. Instances are callable, so they can be
    passed anywhere a ``bounds_check(q) -> bool`` predicate is expected.
    """

    def __init__(
        self,
        lower: Sequence[float],
        upper: Sequence[float],
        tolerance: float = 0.0,
    ) -> None:
        """
        Args:
            lower: Lower limit per joint (radians).
            upper: Upper limit per joint (radians).
            tolerance: Slack allowed past either limit.

        Raises:
            ValueError: On size mismatch or when a lower limit exceeds its
                upper limit.
        """
        self.lower = np.asarray(lower, dtype=float).flatten()
        self.upper = np.asarray(upper, dtype=float).flatten()
        if self.lower.shape != self.upper.shape:
            raise ValueError(
                f"Joint limit size mismatch: {self.lower.size} lower vs "
                f"{self.upper.size} upper"
            )
        if np.any(self.lower > self.upper):
            raise ValueError("Lower joint limits must not exceed upper limits.")
        self.tolerance = float(tolerance)

    @classmethod
    def symmetric(cls, limit: float, dof: int) -> "JointLimits":
        """Limits of [-limit, limit] on every joint."""
        return cls([-limit] * dof, [limit] * dof)

    @property
    def dof(self) -> int:
        return int(self.lower.size)

    def satisfies_bounds(self, q: Sequence[float]) -> bool:
        """
        Check if the given configuration is within the joint limits.

        Args:
            q: Joint configuration.

        Returns:
            True if every joint is within [lower - tol, upper + tol].
        """
        q = np.asarray(q, dtype=float).flatten()
        if q.size != self.dof:
            return False
        return bool(
            np.all(q >= self.lower - self.tolerance)
            and np.all(q <= self.upper + self.tolerance)
        )

    __call__ = satisfies_bounds

    def clamp(self, q: Sequence[float]) -> np.ndarray:
        """Clamp a joint configuration to the joint limits."""
        q = np.asarray(q, dtype=float)
        return np.clip(q, self.lower, self.upper)

    def __repr__(self) -> str:
        return f"JointLimits(lower={self.lower.tolist()}, upper={self.upper.tolist()})"
