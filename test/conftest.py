import numpy as np
import pytest

from bot_kinematics.common.parameters import Parameters
from bot_kinematics.selector import BotKinematicsSolver


@pytest.fixture
def tip_only_params():
    """Only the forearm length set: the tool sits 1 unit above the base."""
    return Parameters(a1=0.0, a2=0.0, a3=1.0, l1=0.0, l2=0.0, l3=0.0, t1=0.0, t3=0.0)


@pytest.fixture
def arm_params():
    return Parameters(
        a1=0.05, a2=0.30, a3=0.25, l1=0.20, l2=0.04, l3=-0.02, t1=0.05, t3=0.03
    )


@pytest.fixture
def solver(arm_params):
    s = BotKinematicsSolver()
    assert s.initialize(arm_params)
    return s


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
