"""Value initialization rules for newly visited (state, action) pairs."""

from typing import Callable

from .types import Action, State


class ConstantValueInitialization:
    """Initializes every Q-value to the same constant."""

    def __init__(self, value: float = 0.0):
        self.value = float(value)

    def initial_value(self, state: State, action: Action) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"ConstantValueInitialization({self.value})"


class FunctionValueInitialization:
    """Wraps a plain function of (state, action) as an initialization rule."""

    def __init__(self, fn: Callable[[State, Action], float]):
        self.fn = fn

    def initial_value(self, state: State, action: Action) -> float:
        return float(self.fn(state, action))
