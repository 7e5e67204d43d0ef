"""
components/resolver.py - Stitches node records into a single tree

Records arrive one at a time in input order. Each record either satisfies
a pending reference, becomes a new pending entry, or shows that the
current root is really somebody's child (root re-anchoring).

Nodes are never copied: they are moved between slots, and the node that
loses its slot is freed through TreeMemory.
"""

from __future__ import annotations

import logging
from typing import Optional

from tree_decoder.errors import (
    ConflictingIdentifierError,
    EmptyInputError,
    IncompleteTreeError,
)

from .memory import Owner, TreeMemory
from .node import (
    ROOT_SLOT,
    AwaitingContent,
    AwaitingSlot,
    NodeRecord,
    PendingEntry,
    Resolved,
    Side,
    Slot,
)
from .pending import PendingReferenceTable

logger = logging.getLogger(__name__)


class Resolver:
    """
    Incremental reference-resolution engine.

    The first described record becomes the root. Later described records
    are held as detached subtrees until a reference attaches them, and
    bare child references become placeholders until described.

    Args:
        memory:        Arena that owns every node. A fresh one is created
                       when omitted.
        duplicate_ids: Allow one id to name several distinct nodes. Matches
                       are then taken first-in first-out and an ambiguous
                       record opens a new entry instead of failing.
    """

    def __init__(self, memory: Optional[TreeMemory] = None, duplicate_ids: bool = False) -> None:
        self.memory = memory if memory is not None else TreeMemory()
        self.table = PendingReferenceTable()
        self.duplicate_ids = duplicate_ids
        self._root: Optional[int] = None
        # Union-find links from a node toward the top of its subtree.
        self._anchors: dict[int, int] = {}

    @property
    def root(self) -> Optional[int]:
        return self._root

    @property
    def wait_count(self) -> int:
        return self.table.wait_count

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest(self, record: NodeRecord) -> None:
        """Place *record* and then resolve each child it names, left first."""
        if record.is_reference:
            raise ValueError(f"top-level record for node id {record.id} has no label")

        handle = self._place(record, None, None)

        for side, child_id in ((Side.LEFT, record.left_id), (Side.RIGHT, record.right_id)):
            if child_id is None:
                continue
            self._place(NodeRecord.reference(child_id), Slot(owner=handle, side=side), handle)

    def finalize(self) -> int:
        """Return the root handle once every reference has been satisfied."""
        if self.table.wait_count > 0:
            raise IncompleteTreeError(self.table.wait_count)
        if self._root is None:
            raise EmptyInputError()
        return self._root

    def _place(self, record: NodeRecord, slot: Optional[Slot], parent: Optional[int]) -> int:
        entry = self.table.find_resolvable(record.id, include_root=record.is_reference)

        if entry is None:
            if record.id in self.table and not self.duplicate_ids:
                raise ConflictingIdentifierError(record.id, "node id already resolved")
            return self._insert(record, slot)

        if isinstance(entry, AwaitingSlot):
            if record.is_reference:
                return self._ambiguous(record, slot, "placeholder referenced a second time")
            return self._fill_placeholder(record, entry)

        if isinstance(entry, AwaitingContent):
            if not record.is_reference or slot is None:
                return self._ambiguous(record, slot, "node described a second time")
            return self._attach(entry, slot)

        return self._reanchor(record, entry, slot, parent)

    def _ambiguous(self, record: NodeRecord, slot: Optional[Slot], reason: str) -> int:
        if not self.duplicate_ids:
            raise ConflictingIdentifierError(record.id, reason)
        logger.debug("node id %d: %s, opening a new entry", record.id, reason)
        return self._insert(record, slot)

    def _insert(self, record: NodeRecord, slot: Optional[Slot]) -> int:
        """Record an id with no usable prior trace."""
        if record.is_reference:
            if slot is None:
                raise ValueError(f"reference to node id {record.id} has no slot")
            handle = self.memory.allocate(record.id, "", Owner.SLOT)
            self._write_slot(slot, handle)
            self.table.insert(AwaitingSlot(id=record.id, slot=slot))
            logger.debug("node id %d: placeholder awaiting content", record.id)
            return handle

        if self._root is None:
            handle = self.memory.allocate(record.id, record.label, Owner.SLOT)
            self._write_slot(ROOT_SLOT, handle)
            self.table.insert(Resolved(id=record.id, slot=ROOT_SLOT))
            logger.debug("node id %d: established as root", record.id)
            return handle

        handle = self.memory.allocate(record.id, record.label, Owner.PENDING)
        self.table.insert(AwaitingContent(id=record.id, node=handle))
        logger.debug("node id %d: detached, awaiting a slot", record.id)
        return handle

    def _fill_placeholder(self, record: NodeRecord, entry: AwaitingSlot) -> int:
        """Swap the placeholder in ``entry.slot`` for a described node."""
        handle = self.memory.allocate(record.id, record.label, Owner.SLOT)
        placeholder = self._read_slot(entry.slot)
        self._write_slot(entry.slot, handle)
        self._release(placeholder)
        self.table.mark_resolved(entry, entry.slot)
        logger.debug("node id %d: placeholder replaced", record.id)
        return handle

    def _attach(self, entry: AwaitingContent, slot: Slot) -> int:
        """Move a detached described node into *slot*."""
        handle = entry.node
        if self._top(slot.owner) == handle:
            raise ConflictingIdentifierError(entry.id, "reference would make the node its own ancestor")

        self._write_slot(slot, handle)
        self.memory.transfer(handle, Owner.SLOT)
        self.table.mark_resolved(entry, slot)
        logger.debug("node id %d: attached under node id %d", entry.id, self.memory.get(slot.owner).id)
        return handle

    def _reanchor(
        self,
        record: NodeRecord,
        entry: PendingEntry,
        slot: Optional[Slot],
        parent: Optional[int],
    ) -> int:
        """Demote the current root into *slot* and promote the subtree holding *parent*."""
        if not record.is_reference:
            raise ConflictingIdentifierError(record.id, "root described a second time")
        if parent is None or slot is None:
            raise ConflictingIdentifierError(record.id, "root cannot be re-anchored without a parent")

        top = self._top(parent)
        if top == self._root:
            raise ConflictingIdentifierError(record.id, "reference would make the root its own descendant")

        top_node = self.memory.get(top)
        top_entry = self.table.find_content(top_node.id, top)
        if top_entry is None:
            raise ConflictingIdentifierError(top_node.id, "could not mark parent as resolved")

        old_root = self._root
        self._write_slot(slot, old_root)
        self._write_slot(ROOT_SLOT, top)
        self.memory.transfer(top, Owner.SLOT)
        self.table.mark_resolved(entry, slot)
        self.table.mark_resolved(top_entry, ROOT_SLOT)
        logger.debug("node id %d: root re-anchored under node id %d", record.id, top_node.id)
        return old_root

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    def _read_slot(self, slot: Slot) -> Optional[int]:
        if slot.is_root:
            return self._root
        return getattr(self.memory.get(slot.owner), slot.side.value)

    def _write_slot(self, slot: Slot, handle: int) -> None:
        node = self.memory.get(handle)
        if slot.is_root:
            self._root = handle
            node.parent = None
            self._anchors.pop(handle, None)
            return

        setattr(self.memory.get(slot.owner), slot.side.value, handle)
        node.parent = slot.owner
        self._anchors[handle] = slot.owner

    def _top(self, handle: int) -> int:
        """Return the topmost ancestor of *handle* (path-compressed)."""
        path = []
        while handle in self._anchors:
            path.append(handle)
            handle = self._anchors[handle]
        for step in path:
            self._anchors[step] = handle
        return handle

    def _release(self, handle: int) -> None:
        self._anchors.pop(handle, None)
        self.memory.free(handle)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def dispose(self) -> int:
        """Free the tree and every detached subtree; return how many nodes went."""
        released = 0
        if self._root is not None:
            released += self.memory.free_subtree(self._root)
            self._root = None
        for entry in list(self.table.iter_detached()):
            released += self.memory.free_subtree(entry.node)
        self.table.clear()
        self._anchors.clear()
        if released:
            logger.debug("released %d nodes", released)
        return released
