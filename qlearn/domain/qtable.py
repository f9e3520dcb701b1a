"""Lazily populated action-value table."""

from typing import Dict, List, Optional

from .errors import ActionNotFound
from .types import (
    Action, ActionEnumerator, QEntry, State, StateCanonicalizer, StateKey,
    ValueInitialization
)


class ActionValueTable:
    """Maps canonical state keys to one Q-value entry per legal action.

    Entries for a state are created on its first visit and the set of
    actions recorded for it never changes afterwards. Values change only
    through update().
    """

    def __init__(self, action_enumerator: ActionEnumerator, canonicalizer: StateCanonicalizer,
                 q_init: ValueInitialization):
        self.action_enumerator = action_enumerator
        self.canonicalizer = canonicalizer
        self.q_init = q_init
        self._entries: Dict[StateKey, List[QEntry]] = {}

    def get_entries(self, state: State) -> List[QEntry]:
        """Get the entries for a state, creating them on first visit."""
        key = self.canonicalizer.canonicalize(state)
        entries = self._entries.get(key)
        if entries is None:
            actions = self.action_enumerator.legal_actions(state)
            entries = [
                QEntry(state=state, action=action, value=self.q_init.initial_value(state, action))
                for action in actions
            ]
            self._entries[key] = entries
        return entries

    def find_entry(self, state: State, action: Action) -> Optional[QEntry]:
        """Get the entry for a (state, action) pair, or None if the action is unknown."""
        for entry in self.get_entries(state):
            if entry.action == action:
                return entry
        return None

    def get_entry(self, state: State, action: Action) -> QEntry:
        """Get the entry for a (state, action) pair; raises ActionNotFound on a miss."""
        entry = self.find_entry(state, action)
        if entry is None:
            raise ActionNotFound(state, action)
        return entry

    def update(self, state: State, action: Action, target: float, learning_rate: float) -> float:
        """Move the entry's value toward target and return the new value."""
        entry = self.get_entry(state, action)
        entry.value = entry.value + learning_rate * (target - entry.value)
        return entry.value

    def value(self, state: State) -> float:
        """Maximum Q-value of a state; 0.0 when it has no legal actions."""
        entries = self.get_entries(state)
        if not entries:
            return 0.0
        return max(entry.value for entry in entries)

    def q_values(self, state: State) -> List[QEntry]:
        return self.get_entries(state)

    def reset(self):
        """Forget every stored entry."""
        self._entries.clear()

    def __contains__(self, state: State) -> bool:
        return self.canonicalizer.canonicalize(state) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
