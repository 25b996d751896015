import numpy as np
import pytest

from bot_kinematics.common.limits import JointLimits


def test_within_and_outside_limits():
    limits = JointLimits([-1.0, -2.0, -3.0], [1.0, 2.0, 3.0])
    assert limits.satisfies_bounds([0.0, 2.0, -3.0])
    assert not limits.satisfies_bounds([1.1, 0.0, 0.0])
    assert limits([0.5, 0.5, 0.5])
    assert not limits([0.0, 0.0, 3.5])


def test_tolerance_widens_limits():
    limits = JointLimits([-1.0] * 3, [1.0] * 3, tolerance=0.05)
    assert limits.satisfies_bounds([1.04, 0.0, -1.04])
    assert not limits.satisfies_bounds([1.06, 0.0, 0.0])


def test_wrong_size_does_not_satisfy():
    limits = JointLimits.symmetric(np.pi, 3)
    assert limits.dof == 3
    assert not limits.satisfies_bounds([0.0, 0.0])


def test_non_finite_does_not_satisfy():
    limits = JointLimits.symmetric(np.pi, 3)
    assert not limits.satisfies_bounds([np.nan, 0.0, 0.0])


def test_continuous_joints():
    limits = JointLimits([-np.inf] * 3, [np.inf] * 3)
    assert limits.satisfies_bounds([100.0, -100.0, 0.0])


def test_clamp():
    limits = JointLimits.symmetric(1.0, 3)
    np.testing.assert_allclose(limits.clamp([2.0, -3.0, 0.5]), [1.0, -1.0, 0.5])


def test_invalid_limits_rejected():
    with pytest.raises(ValueError):
        JointLimits([0.0, 0.0], [1.0, 1.0, 1.0])
    with pytest.raises(ValueError):
        JointLimits([1.0, 0.0, 0.0], [0.0, 1.0, 1.0])
