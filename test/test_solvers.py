import numpy as np
import pytest

from bot_kinematics.common.kinematics import forward
from bot_kinematics.common.parameters import Parameters
from bot_kinematics.common.utils import Pose, angular_distance, matrix_to_pose
from bot_kinematics.solvers import inverse


def _translation(x, y, z):
    T = np.identity(4)
    T[:3, 3] = (x, y, z)
    return T


def test_zero_pose_recovers_first_two_joints(tip_only_params):
    candidates = inverse(tip_only_params, forward(tip_only_params, (0.0, 0.0, 0.0)), tolerance=1e-2)
    assert len(candidates) == 1
    np.testing.assert_allclose(candidates[0][:2], [0.0, 0.0], atol=1e-2)


def test_elbow_pinned_when_upper_arm_collapses(tip_only_params):
    # With a2 == 0 only q2 + q3 matters, so q3 is fixed at zero.
    candidates = inverse(tip_only_params, forward(tip_only_params, (0.4, 0.3, 0.5)))
    assert len(candidates) == 1
    assert candidates[0][2] == 0.0
    np.testing.assert_allclose(
        forward(tip_only_params, candidates[0])[:3, 3],
        forward(tip_only_params, (0.4, 0.3, 0.5))[:3, 3],
        atol=1e-9,
    )


def test_primary_branch_round_trip(arm_params):
    q = np.array([0.3, 0.4, 0.5])
    candidates = inverse(arm_params, forward(arm_params, q))
    assert len(candidates) == 1
    np.testing.assert_allclose(candidates[0], q, atol=1e-9)


def test_all_branches_reach_target_and_contain_source(arm_params, rng):
    for q in rng.uniform(-2.5, 2.5, size=(50, 3)):
        target = forward(arm_params, q)
        candidates = inverse(arm_params, target, all_branches=True)

        assert 1 <= len(candidates) <= 4
        for cand in candidates:
            err = np.abs(forward(arm_params, cand)[:3, 3] - target[:3, 3])
            assert np.all(err <= 1e-2)

        closest = min(np.max(np.abs(angular_distance(c, q))) for c in candidates)
        assert closest < 1e-6


def test_branches_are_distinct(arm_params):
    candidates = inverse(arm_params, forward(arm_params, (0.1, 0.2, 1.2)), all_branches=True)
    assert len(candidates) >= 2
    for i, a in enumerate(candidates):
        for b in candidates[i + 1:]:
            assert np.max(np.abs(angular_distance(a, b))) > 1e-6


def test_single_branch_is_first_of_all_branches(arm_params):
    target = forward(arm_params, (-0.6, 0.9, -0.4))
    single = inverse(arm_params, target)
    everything = inverse(arm_params, target, all_branches=True)
    assert len(single) == 1
    np.testing.assert_array_equal(single[0], everything[0])


def test_unreachable_target_has_no_solution(arm_params):
    assert inverse(arm_params, _translation(5.0, 5.0, 5.0)) == []
    assert inverse(arm_params, _translation(5.0, 5.0, 5.0), all_branches=True) == []


def test_tolerance_bounds_accepted_error(tip_only_params):
    # Reach is a unit sphere; points just outside snap to its surface.
    assert len(inverse(tip_only_params, _translation(0.0, 0.0, 1.005))) == 1
    assert inverse(tip_only_params, _translation(0.0, 0.0, 1.005), tolerance=1e-3) == []
    assert inverse(tip_only_params, _translation(0.0, 0.0, 1.02)) == []


def test_non_finite_target_has_no_solution(arm_params):
    assert inverse(arm_params, _translation(np.nan, 0.1, 0.2)) == []
    assert inverse(arm_params, _translation(np.inf, 0.1, 0.2), all_branches=True) == []


def test_accepts_pose_exchange_format(arm_params):
    q = np.array([0.3, 0.4, 0.5])
    pose = matrix_to_pose(forward(arm_params, q))
    assert isinstance(pose, Pose)
    candidates = inverse(arm_params, pose)
    np.testing.assert_allclose(candidates[0], q, atol=1e-9)


def test_single_precision_candidates(arm_params):
    params32 = Parameters(dtype=np.float32, **arm_params.as_dict())
    q = np.array([0.3, 0.4, 0.5])
    candidates = inverse(params32, forward(params32, q))
    assert len(candidates) == 1
    assert candidates[0].dtype == np.float32
    np.testing.assert_allclose(candidates[0], q, atol=1e-3)


@pytest.mark.parametrize("q", [(0.0, 0.0, 0.0), (1.0, -0.5, 2.0), (-2.0, 1.0, -1.0)])
def test_orientation_is_not_checked(arm_params, q):
    target = forward(arm_params, q)
    target[:3, :3] = np.identity(3)
    assert len(inverse(arm_params, target)) == 1
