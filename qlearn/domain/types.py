"""Core type definitions for the tabular Q-learning agent."""

from dataclasses import dataclass, field
from typing import Any, Hashable, List, Literal, NamedTuple, Optional, Protocol, Tuple, runtime_checkable

from .errors import InvalidConfiguration

# States and actions are opaque to the agent
State = Any
Action = Any
StateKey = Hashable

# How ties between equally valued greedy actions are resolved
TieBreak = Literal["random", "first"]

TIE_BREAK_MODES = ("random", "first")


class EnvironmentOutcome(NamedTuple):
    """Result of executing one action in an environment."""
    next_state: State
    reward: float
    terminated: bool


@runtime_checkable
class Environment(Protocol):
    """Interaction surface the learning loop drives."""

    def current_observation(self) -> State: ...

    def is_in_terminal_state(self) -> bool: ...

    def execute_action(self, action: Action) -> EnvironmentOutcome: ...

    def reset_environment(self) -> None: ...


@runtime_checkable
class ActionEnumerator(Protocol):
    """Lists the legal actions of a state."""

    def legal_actions(self, state: State) -> List[Action]: ...


@runtime_checkable
class StateCanonicalizer(Protocol):
    """Maps a state to a hashable key used for table lookup."""

    def canonicalize(self, state: State) -> StateKey: ...


@runtime_checkable
class ValueInitialization(Protocol):
    """Supplies the initial estimate of a (state, action) pair."""

    def initial_value(self, state: State, action: Action) -> float: ...


@runtime_checkable
class ValueFunction(Protocol):
    """Anything that can estimate the value of a state."""

    def value(self, state: State) -> float: ...


@runtime_checkable
class QFunction(ValueFunction, Protocol):
    """A value function that also exposes per-action estimates."""

    def q_values(self, state: State) -> List["QEntry"]: ...


@dataclass
class QEntry:
    """Estimated value of taking an action in a state."""
    state: State
    action: Action
    value: float = 0.0


@dataclass
class Transition:
    """A single observed step of an episode."""
    state: State
    action: Action
    reward: float
    next_state: State
    terminated: bool = False


@dataclass
class EpisodeRecord:
    """Ordered, append-only trace of one episode.

    Transitions are added only through record_transition(); the transitions
    property is a read-only snapshot.
    """
    initial_state: State
    _transitions: List[Transition] = field(default_factory=list, init=False, repr=False)

    def record_transition(self, action: Action, next_state: State, reward: float,
                          terminated: bool = False) -> Transition:
        """Append a transition from the current last state."""
        transition = Transition(
            state=self.last_state,
            action=action,
            reward=reward,
            next_state=next_state,
            terminated=terminated
        )
        self._transitions.append(transition)
        return transition

    @property
    def transitions(self) -> Tuple[Transition, ...]:
        return tuple(self._transitions)

    @property
    def last_state(self) -> State:
        """State the episode ended in (so far)."""
        if self._transitions:
            return self._transitions[-1].next_state
        return self.initial_state

    @property
    def states(self) -> List[State]:
        """Initial state followed by every visited next state."""
        return [self.initial_state] + [t.next_state for t in self._transitions]

    @property
    def actions(self) -> List[Action]:
        return [t.action for t in self._transitions]

    @property
    def rewards(self) -> List[float]:
        return [t.reward for t in self._transitions]

    @property
    def num_time_steps(self) -> int:
        """Number of states in the episode, including the initial state."""
        return len(self._transitions) + 1

    @property
    def max_time_step(self) -> int:
        """Number of transitions taken."""
        return len(self._transitions)

    @property
    def terminated(self) -> bool:
        """Whether the last transition reached a terminal state."""
        return bool(self._transitions) and self._transitions[-1].terminated

    @property
    def total_reward(self) -> float:
        return float(sum(t.reward for t in self._transitions))

    def state(self, t: int) -> State:
        """State at time step t (0 is the initial state)."""
        if t < 0 or t > self.max_time_step:
            raise IndexError(f"Time step {t} outside episode of {self.max_time_step} steps")
        if t == 0:
            return self.initial_state
        return self._transitions[t - 1].next_state

    def action(self, t: int) -> Action:
        """Action taken at time step t."""
        if t < 0 or t >= self.max_time_step:
            raise IndexError(f"No action at time step {t}")
        return self._transitions[t].action

    def reward(self, t: int) -> float:
        """Reward received on arrival at time step t (t >= 1)."""
        if t < 1 or t > self.max_time_step:
            raise IndexError(f"No reward at time step {t}")
        return self._transitions[t - 1].reward

    def discounted_return(self, gamma: float) -> float:
        """Sum of rewards discounted by gamma from the initial state."""
        total = 0.0
        discount = 1.0
        for transition in self._transitions:
            total += discount * transition.reward
            discount *= gamma
        return total

    def __len__(self) -> int:
        return len(self._transitions)


@dataclass(frozen=True)
class QLearningConfig:
    """Configuration for the Q-learning agent."""
    discount_factor: float = 0.99
    learning_rate: float = 0.1
    epsilon: float = 0.1
    tie_break: TieBreak = "random"  # "first" is deterministic but biases exploration
    seed: Optional[int] = None

    def __post_init__(self):
        validate_parameters(self.discount_factor, self.learning_rate, self.epsilon, self.tie_break)


def validate_parameters(discount_factor: float, learning_rate: float, epsilon: float,
                        tie_break: str = "random") -> None:
    """Reject parameters outside their valid ranges."""
    if not 0.0 <= discount_factor <= 1.0:
        raise InvalidConfiguration(f"discount_factor must be in [0, 1], got {discount_factor}")
    if not 0.0 < learning_rate <= 1.0:
        raise InvalidConfiguration(f"learning_rate must be in (0, 1], got {learning_rate}")
    validate_epsilon(epsilon)
    validate_tie_break(tie_break)


def validate_epsilon(epsilon: float) -> None:
    if not 0.0 <= epsilon <= 1.0:
        raise InvalidConfiguration(f"epsilon must be in [0, 1], got {epsilon}")


def validate_tie_break(tie_break: str) -> None:
    if tie_break not in TIE_BREAK_MODES:
        raise InvalidConfiguration(f"tie_break must be one of {TIE_BREAK_MODES}, got {tie_break!r}")


@dataclass
class TrainingResult:
    """Result of running several learning episodes."""
    episodes: List[EpisodeRecord]
    total_episodes: int
    terminated_episodes: int
    average_reward: float
    average_steps: float

    @property
    def termination_rate(self) -> float:
        """Fraction of episodes that reached a terminal state."""
        return self.terminated_episodes / self.total_episodes if self.total_episodes > 0 else 0.0
