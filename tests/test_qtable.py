"""Tests for the lazily populated action-value table."""

from dataclasses import dataclass

import pytest

from qlearn.domain.errors import ActionNotFound
from qlearn.domain.hashing import HashableStateCanonicalizer, SimpleStateCanonicalizer
from qlearn.domain.initialization import ConstantValueInitialization, FunctionValueInitialization
from qlearn.domain.qtable import ActionValueTable


class CountingEnumerator:
    def __init__(self, actions):
        self.actions = list(actions)
        self.calls = 0

    def legal_actions(self, state):
        self.calls += 1
        return list(self.actions)


@dataclass
class Position:
    x: int
    y: int


def make_table(actions=("up", "down"), q_init=None, canonicalizer=None):
    enumerator = CountingEnumerator(actions)
    table = ActionValueTable(
        enumerator,
        canonicalizer or HashableStateCanonicalizer(),
        q_init or ConstantValueInitialization(0.0)
    )
    return table, enumerator


def test_first_visit_creates_one_entry_per_legal_action():
    q_init = FunctionValueInitialization(lambda s, a: len(a) + s)
    table, _ = make_table(actions=("up", "down", "left"), q_init=q_init)

    entries = table.get_entries(3)

    assert [e.action for e in entries] == ["up", "down", "left"]
    assert [e.value for e in entries] == [5.0, 7.0, 7.0]
    assert all(e.state == 3 for e in entries)


def test_repeated_lookup_returns_stored_entries():
    table, enumerator = make_table()

    first = table.get_entries("s")
    second = table.get_entries("s")

    assert first is second
    assert [e.value for e in first] == [e.value for e in second]
    assert enumerator.calls == 1


def test_action_set_is_fixed_at_first_visit():
    table, enumerator = make_table(actions=("a", "b"))
    table.get_entries("s")

    enumerator.actions = ["a", "b", "c"]

    assert [e.action for e in table.get_entries("s")] == ["a", "b"]
    assert table.find_entry("s", "c") is None


def test_equal_states_share_entries():
    table, _ = make_table(canonicalizer=SimpleStateCanonicalizer())

    table.update(Position(1, 2), "up", target=4.0, learning_rate=1.0)

    assert table.get_entry(Position(1, 2), "up").value == 4.0
    assert len(table) == 1


def test_get_entry_raises_for_unknown_action():
    table, _ = make_table()

    with pytest.raises(ActionNotFound) as excinfo:
        table.get_entry("s", "jump")

    assert excinfo.value.state == "s"
    assert excinfo.value.action == "jump"
    assert isinstance(excinfo.value, LookupError)


def test_find_entry_returns_none_on_miss():
    table, _ = make_table()

    assert table.find_entry("s", "jump") is None
    assert table.find_entry("s", "down").action == "down"


@pytest.mark.parametrize("prior, target, alpha", [
    (0.0, -1.0, 0.5),
    (2.0, 10.0, 0.1),
    (-3.0, -3.0, 0.7),
    (5.0, 1.0, 1.0),
])
def test_update_moves_value_toward_target(prior, target, alpha):
    table, _ = make_table(q_init=ConstantValueInitialization(prior))

    new_value = table.update("s", "up", target, alpha)

    assert new_value == pytest.approx(prior + alpha * (target - prior))
    assert min(prior, target) <= new_value <= max(prior, target)
    assert table.get_entry("s", "up").value == new_value
    assert table.get_entry("s", "down").value == prior


def test_value_is_max_over_entries():
    table, _ = make_table(actions=("a", "b", "c"))
    table.update("s", "a", -2.0, 1.0)
    table.update("s", "b", 3.0, 0.5)

    assert table.value("s") == max(e.value for e in table.get_entries("s"))
    assert table.value("s") == 1.5


def test_value_of_unseen_state_initializes_it():
    table, _ = make_table(q_init=ConstantValueInitialization(2.5))

    assert "new" not in table
    assert table.value("new") == 2.5
    assert "new" in table


def test_value_of_state_without_actions_is_zero():
    table, _ = make_table(actions=())

    assert table.get_entries("end") == []
    assert table.value("end") == 0.0


def test_reset_restores_initial_values():
    table, _ = make_table(q_init=ConstantValueInitialization(1.0))
    table.update("s", "up", 10.0, 0.5)
    table.get_entries("t")

    table.reset()

    assert len(table) == 0
    assert [e.value for e in table.get_entries("s")] == [1.0, 1.0]
