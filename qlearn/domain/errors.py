"""Exception types raised by the Q-learning core."""

from typing import Any


class QLearningError(Exception):
    """Base class for all Q-learning errors."""


class ActionNotFound(QLearningError, LookupError):
    """Raised when an action has no Q-value entry for a state.

    This means the action enumerator and the environment disagree about the
    actions available in a state. It is never recovered from locally.
    """

    def __init__(self, state: Any, action: Any, message: str = ""):
        self.state = state
        self.action = action
        super().__init__(message or f"Could not find matching Q-value for action {action!r} in state {state!r}")


class InvalidConfiguration(QLearningError, ValueError):
    """Raised when an agent parameter is outside its valid range."""
