"""Tests for the PendingReferenceTable."""

import pytest

from tree_decoder.components.node import (
    ROOT_SLOT,
    AwaitingContent,
    AwaitingSlot,
    EntryKind,
    Resolved,
    Side,
    Slot,
)
from tree_decoder.components.pending import PendingReferenceTable


LEFT_OF_0 = Slot(owner=0, side=Side.LEFT)
RIGHT_OF_0 = Slot(owner=0, side=Side.RIGHT)


class TestInsert:
    def test_live_entries_count_as_waiting(self):
        table = PendingReferenceTable()
        table.insert(AwaitingSlot(id=2, slot=LEFT_OF_0))
        table.insert(AwaitingContent(id=5, node=3))
        assert table.wait_count == 2
        assert 2 in table and 5 in table
        assert len(table) == 2

    def test_resolved_entries_do_not_wait(self):
        table = PendingReferenceTable()
        table.insert(Resolved(id=1, slot=ROOT_SLOT))
        assert table.wait_count == 0
        assert 1 in table

    def test_entries_keep_arrival_order(self):
        table = PendingReferenceTable()
        first = AwaitingSlot(id=3, slot=LEFT_OF_0)
        second = AwaitingSlot(id=3, slot=RIGHT_OF_0)
        table.insert(first)
        table.insert(second)
        assert table.entries(3) == [first, second]


class TestFindResolvable:
    def test_unknown_id(self):
        assert PendingReferenceTable().find_resolvable(9, include_root=True) is None

    def test_first_live_entry_wins(self):
        table = PendingReferenceTable()
        first = AwaitingSlot(id=3, slot=LEFT_OF_0)
        second = AwaitingSlot(id=3, slot=RIGHT_OF_0)
        table.insert(first)
        table.insert(second)
        assert table.find_resolvable(3, include_root=False) is first

    def test_live_entry_preferred_over_root(self):
        table = PendingReferenceTable()
        table.insert(Resolved(id=3, slot=ROOT_SLOT))
        waiting = AwaitingContent(id=3, node=4)
        table.insert(waiting)
        assert table.find_resolvable(3, include_root=True) is waiting

    def test_root_entry_only_when_requested(self):
        table = PendingReferenceTable()
        root_entry = Resolved(id=1, slot=ROOT_SLOT)
        table.insert(root_entry)
        assert table.find_resolvable(1, include_root=False) is None
        assert table.find_resolvable(1, include_root=True) is root_entry

    def test_resolved_child_entries_are_never_returned(self):
        table = PendingReferenceTable()
        table.insert(Resolved(id=2, slot=LEFT_OF_0))
        assert table.find_resolvable(2, include_root=True) is None


class TestMarkResolved:
    def test_live_entry_decrements_wait_count(self):
        table = PendingReferenceTable()
        entry = AwaitingSlot(id=2, slot=LEFT_OF_0)
        table.insert(entry)

        resolved = table.mark_resolved(entry, LEFT_OF_0)

        assert resolved.kind == EntryKind.RESOLVED
        assert resolved.slot == LEFT_OF_0
        assert table.wait_count == 0
        assert table.entries(2) == [resolved]

    def test_resolved_entry_keeps_wait_count(self):
        table = PendingReferenceTable()
        table.insert(AwaitingSlot(id=9, slot=RIGHT_OF_0))
        root_entry = Resolved(id=1, slot=ROOT_SLOT)
        table.insert(root_entry)

        moved = table.mark_resolved(root_entry, LEFT_OF_0)

        assert moved.slot == LEFT_OF_0
        assert table.wait_count == 1

    def test_replaces_in_place(self):
        table = PendingReferenceTable()
        first = AwaitingSlot(id=3, slot=LEFT_OF_0)
        second = AwaitingSlot(id=3, slot=RIGHT_OF_0)
        table.insert(first)
        table.insert(second)

        table.mark_resolved(second, RIGHT_OF_0)

        entries = table.entries(3)
        assert entries[0] is first
        assert entries[1].kind == EntryKind.RESOLVED

    def test_unknown_entry_raises(self):
        table = PendingReferenceTable()
        with pytest.raises(ValueError):
            table.mark_resolved(AwaitingSlot(id=2, slot=LEFT_OF_0), LEFT_OF_0)


class TestDetached:
    def test_find_content_matches_handle(self):
        table = PendingReferenceTable()
        table.insert(AwaitingContent(id=3, node=4))
        target = AwaitingContent(id=3, node=8)
        table.insert(target)
        assert table.find_content(3, 8) is target
        assert table.find_content(3, 99) is None

    def test_iter_detached_and_clear(self):
        table = PendingReferenceTable()
        table.insert(AwaitingContent(id=3, node=4))
        table.insert(AwaitingSlot(id=5, slot=LEFT_OF_0))
        assert [e.node for e in table.iter_detached()] == [4]

        table.clear()
        assert len(table) == 0
        assert table.wait_count == 0
