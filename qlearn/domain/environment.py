"""Simulated environment built from a transition model."""

from typing import Callable, Iterable, Optional

from .hashing import SimpleStateCanonicalizer
from .types import Action, EnvironmentOutcome, State, StateCanonicalizer


class UniformCostReward:
    """Every transition costs the same amount."""

    def __init__(self, cost: float = 1.0):
        self.cost = cost

    def __call__(self, state: State, action: Action, next_state: State) -> float:
        return -self.cost


class TerminalStates:
    """Terminal function that matches a fixed set of states by canonical key."""

    def __init__(self, states: Iterable[State], canonicalizer: Optional[StateCanonicalizer] = None):
        self.canonicalizer = canonicalizer or SimpleStateCanonicalizer()
        self._keys = {self.canonicalizer.canonicalize(s) for s in states}

    def __call__(self, state: State) -> bool:
        return self.canonicalizer.canonicalize(state) in self._keys


class SimulatedEnvironment:
    """Environment that samples outcomes from a transition model.

    transition(state, action) returns the next state, reward_function(state,
    action, next_state) its reward and terminal_function(state) whether a
    state ends the episode.
    """

    def __init__(self, transition: Callable[[State, Action], State], initial_state: State,
                 reward_function: Optional[Callable[[State, Action, State], float]] = None,
                 terminal_function: Optional[Callable[[State], bool]] = None):
        self.transition = transition
        self.initial_state = initial_state
        self.reward_function = reward_function or UniformCostReward()
        self.terminal_function = terminal_function or (lambda state: False)
        self.current_state = initial_state
        self.last_reward = 0.0
        self.steps_taken = 0

    def current_observation(self) -> State:
        return self.current_state

    def is_in_terminal_state(self) -> bool:
        return self.terminal_function(self.current_state)

    def execute_action(self, action: Action) -> EnvironmentOutcome:
        """Apply an action and return (next_state, reward, terminated)."""
        if self.is_in_terminal_state():
            raise RuntimeError("Cannot execute an action in a terminal state; reset the environment first")

        state = self.current_state
        next_state = self.transition(state, action)
        reward = float(self.reward_function(state, action, next_state))
        terminated = self.terminal_function(next_state)

        self.current_state = next_state
        self.last_reward = reward
        self.steps_taken += 1
        return EnvironmentOutcome(next_state, reward, terminated)

    def reset_environment(self):
        """Return to the initial state."""
        self.current_state = self.initial_state
        self.last_reward = 0.0
        self.steps_taken = 0
