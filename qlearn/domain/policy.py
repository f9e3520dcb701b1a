"""Action selection policies derived from a Q-function."""

from typing import List, Optional

import numpy as np

from .errors import ActionNotFound
from .types import Action, QEntry, QFunction, State, TieBreak, validate_epsilon, validate_tie_break
from ..utils.rng import SeededRNG


class EpsilonGreedyPolicy:
    """Epsilon-greedy policy over a live Q-function.

    With probability epsilon a uniformly random action is taken, otherwise
    the action with the highest Q-value. Ties between maximal actions are
    broken uniformly at random by default; tie_break="first" picks the first
    maximal entry instead, which is deterministic but biases exploration
    toward actions listed earlier.
    """

    def __init__(self, q_function: QFunction, epsilon: float, rng: Optional[SeededRNG] = None,
                 tie_break: TieBreak = "random"):
        validate_epsilon(epsilon)
        validate_tie_break(tie_break)
        self.q_function = q_function
        self.epsilon = epsilon
        self.rng = rng or SeededRNG()
        self.tie_break = tie_break

    def select_action(self, state: State) -> Action:
        """Select an action for the given state."""
        entries = self.q_function.q_values(state)
        if not entries:
            raise ActionNotFound(state, None, f"No legal actions available in state {state!r}")

        if self.epsilon > 0.0 and self.rng.random() < self.epsilon:
            return self.rng.choice(entries).action

        return self._greedy_action(entries)

    def greedy_actions(self, state: State) -> List[Action]:
        """All actions whose Q-value is maximal in the given state."""
        entries = self.q_function.q_values(state)
        return [entries[i].action for i in self._maximal_indices(entries)]

    def _greedy_action(self, entries: List[QEntry]) -> Action:
        best = self._maximal_indices(entries)
        if self.tie_break == "first" or len(best) == 1:
            return entries[int(best[0])].action
        return entries[int(self.rng.choice(best))].action

    @staticmethod
    def _maximal_indices(entries: List[QEntry]) -> np.ndarray:
        if not entries:
            return np.array([], dtype=int)
        values = np.array([entry.value for entry in entries], dtype=float)
        return np.flatnonzero(values == values.max())


class GreedyPolicy(EpsilonGreedyPolicy):
    """Always exploits the learned Q-values."""

    def __init__(self, q_function: QFunction, rng: Optional[SeededRNG] = None,
                 tie_break: TieBreak = "random"):
        super().__init__(q_function, 0.0, rng=rng, tie_break=tie_break)
