"""
components/pending.py - Identifier-keyed table of unresolved slots

Each id maps to the entries recorded for it, in arrival order. Entries are
never reordered; resolving one replaces it in place with a Resolved entry.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from .node import (
    AwaitingContent,
    EntryKind,
    PendingEntry,
    Resolved,
    Slot,
)


class PendingReferenceTable:
    """
    Tracks every id seen so far and what it is still waiting for.

    ``wait_count`` is the number of live (AwaitingContent + AwaitingSlot)
    entries across the table; it reaches zero iff the tree is connected.
    """

    def __init__(self) -> None:
        self._entries: dict[int, List[PendingEntry]] = {}
        self.wait_count: int = 0

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self, node_id: int) -> List[PendingEntry]:
        return list(self._entries.get(node_id, ()))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, entry: PendingEntry) -> None:
        """Append *entry* to the sequence for its id."""
        self._entries.setdefault(entry.id, []).append(entry)
        if entry.kind != EntryKind.RESOLVED:
            self.wait_count += 1

    def mark_resolved(self, entry: PendingEntry, slot: Slot) -> Resolved:
        """Replace *entry* with a Resolved entry pointing at *slot*."""
        sequence = self._entries.get(entry.id, [])
        for index, candidate in enumerate(sequence):
            if candidate is entry:
                break
        else:
            raise ValueError(f"entry for node id {entry.id} is not in the table")

        resolved = Resolved(id=entry.id, slot=slot)
        sequence[index] = resolved
        if entry.kind != EntryKind.RESOLVED:
            self.wait_count -= 1
        return resolved

    def clear(self) -> None:
        self._entries.clear()
        self.wait_count = 0

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_resolvable(self, node_id: int, include_root: bool) -> Optional[PendingEntry]:
        """
        Return the first live entry for *node_id* in arrival order.

        When there is none and *include_root* is set, the Resolved entry
        sitting in the root slot (if it belongs to this id) is returned so
        the root can be re-anchored.
        """
        sequence = self._entries.get(node_id)
        if not sequence:
            return None

        for entry in sequence:
            if entry.kind != EntryKind.RESOLVED:
                return entry

        if include_root:
            for entry in sequence:
                if entry.slot.is_root:
                    return entry
        return None

    def find_content(self, node_id: int, handle: int) -> Optional[AwaitingContent]:
        """Return the AwaitingContent entry holding *handle*, if any."""
        for entry in self._entries.get(node_id, ()):
            if isinstance(entry, AwaitingContent) and entry.node == handle:
                return entry
        return None

    def iter_detached(self) -> Iterator[AwaitingContent]:
        """Yield every entry still holding an unattached node."""
        for sequence in self._entries.values():
            for entry in sequence:
                if isinstance(entry, AwaitingContent):
                    yield entry
