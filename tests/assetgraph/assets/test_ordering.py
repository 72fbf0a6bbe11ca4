# tests/assetgraph/assets/test_ordering.py
from __future__ import annotations

from assetgraph.assets.ordering import RepositioningList


def test_push_appends_new_entries_in_order():
    items = RepositioningList()
    items.push("a")
    items.push("b")
    assert items.toTuple() == ("a", "b")
    assert len(items) == 2
    assert bool(items)


def test_push_existing_entry_moves_it_to_the_end():
    items = RepositioningList(["a", "b", "c"])
    items.push("a")
    assert items.toTuple() == ("b", "c", "a")


def test_extend_applies_reposition_rule_per_entry():
    items = RepositioningList(["a", "b"])
    items.extend(["c", "a", "b"])
    assert list(items) == ["c", "a", "b"]


def test_remove_and_contains():
    items = RepositioningList(["a", "b"])
    assert "a" in items
    assert items.remove("a") is True
    assert items.remove("a") is False
    assert "a" not in items
    assert items.toTuple() == ("b",)


def test_reversed_views():
    items = RepositioningList(["a", "b", "c"])
    assert items.reversedTuple() == ("c", "b", "a")
    assert list(reversed(items)) == ["c", "b", "a"]


def test_empty_list_is_falsy():
    items = RepositioningList()
    assert not items
    assert items.toTuple() == ()
    assert repr(items) == "RepositioningList([])"
