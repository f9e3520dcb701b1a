"""Shared fixtures: small deterministic MDPs for exercising the agent."""

import pytest

from qlearn.domain.environment import SimulatedEnvironment, TerminalStates, UniformCostReward
from qlearn.domain.hashing import HashableStateCanonicalizer


class TwoStateDomain:
    """State A with actions left (stay) and right (to terminal B)."""

    def legal_actions(self, state):
        if state == "A":
            return ["left", "right"]
        return []

    @staticmethod
    def transition(state, action):
        if action == "right":
            return "B"
        return "A"


class CorridorDomain:
    """Positions 0..length-1; the last position is the goal."""

    def __init__(self, length: int = 5):
        self.length = length
        self.goal = length - 1

    def legal_actions(self, state):
        return ["left", "right"]

    def transition(self, state, action):
        if action == "left":
            return max(0, state - 1)
        return min(self.goal, state + 1)


class RecordingEnvironment(SimulatedEnvironment):
    """Simulated environment that counts resets."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.resets = 0

    def reset_environment(self):
        super().reset_environment()
        self.resets += 1


class ConstantEnumerator:
    def __init__(self, actions):
        self.actions = list(actions)

    def legal_actions(self, state):
        return list(self.actions)


@pytest.fixture
def two_state_domain():
    return TwoStateDomain()


@pytest.fixture
def two_state_env():
    return RecordingEnvironment(
        TwoStateDomain.transition,
        "A",
        reward_function=UniformCostReward(),
        terminal_function=TerminalStates(["B"], HashableStateCanonicalizer())
    )


@pytest.fixture
def looping_env():
    """Environment that never terminates: every action stays in A."""
    return SimulatedEnvironment(lambda state, action: "A", "A")


@pytest.fixture
def corridor_domain():
    return CorridorDomain()


@pytest.fixture
def corridor_env(corridor_domain):
    return RecordingEnvironment(
        corridor_domain.transition,
        0,
        terminal_function=TerminalStates([corridor_domain.goal], HashableStateCanonicalizer())
    )
