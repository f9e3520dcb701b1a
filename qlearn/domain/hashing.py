"""State canonicalization strategies for Q-table lookup."""

import dataclasses
from collections.abc import Mapping
from enum import Enum
from typing import Hashable

import numpy as np

from .types import State, StateKey


class SimpleStateCanonicalizer:
    """Canonicalizes states by value.

    Dataclasses, mappings, sequences, sets, numpy arrays and plain objects are
    converted recursively into nested tuples, so two distinct objects holding
    equal values produce equal keys.
    """

    def canonicalize(self, state: State) -> StateKey:
        return self._freeze(state)

    def __call__(self, state: State) -> StateKey:
        return self.canonicalize(state)

    def _freeze(self, value) -> Hashable:
        if isinstance(value, np.ndarray):
            return ("ndarray", value.shape, tuple(value.ravel().tolist()))
        if isinstance(value, np.generic):
            return value.item()
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            # Only fields taking part in __eq__ identify the state
            fields = tuple(
                (f.name, self._freeze(getattr(value, f.name)))
                for f in dataclasses.fields(value) if f.compare
            )
            return (type(value).__name__, fields)
        if isinstance(value, Mapping):
            items = [(self._freeze(k), self._freeze(v)) for k, v in value.items()]
            return ("mapping", tuple(sorted(items, key=lambda item: _order_key(item[0]))))
        if isinstance(value, (set, frozenset)):
            return frozenset(self._freeze(v) for v in value)
        if isinstance(value, list):
            return ("list", tuple(self._freeze(v) for v in value))
        if isinstance(value, tuple):
            return ("tuple", tuple(self._freeze(v) for v in value))
        if isinstance(value, (str, bytes, int, float, bool, Enum)) or value is None:
            return value
        if hasattr(value, "__dict__"):
            attributes = sorted(vars(value).items())
            return (type(value).__name__, tuple((k, self._freeze(v)) for k, v in attributes))
        hash(value)
        return value


class HashableStateCanonicalizer:
    """Uses the state itself as its key; states must be hashable values."""

    def canonicalize(self, state: State) -> StateKey:
        hash(state)
        return state

    def __call__(self, state: State) -> StateKey:
        return self.canonicalize(state)


def _order_key(frozen: Hashable) -> tuple:
    """Total ordering for frozen values that does not depend on set iteration order."""
    if frozen is None:
        return ("none",)
    if isinstance(frozen, (bool, int, float)):
        return ("number", frozen)
    if isinstance(frozen, str):
        return ("str", frozen)
    if isinstance(frozen, bytes):
        return ("bytes", frozen)
    if isinstance(frozen, tuple):
        return ("tuple", tuple(_order_key(v) for v in frozen))
    if isinstance(frozen, frozenset):
        return ("frozenset", tuple(sorted(_order_key(v) for v in frozen)))
    return ("object", type(frozen).__name__, repr(frozen))
