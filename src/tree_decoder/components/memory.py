"""
components/memory.py - Node arena for the resolver

Every TreeNode lives in the arena and is addressed by an integer handle.
Each live handle is owned either by a slot (the root or a child field) or
by a pending table entry. Freeing a handle twice, or reading one that has
been freed, is a bug in the caller and raises RuntimeError.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Iterator, List, Optional

from .node import TreeNode

logger = logging.getLogger(__name__)


class Owner(StrEnum):
    SLOT    = "slot"
    PENDING = "pending"


class TreeMemory:
    """Owns every node allocated during one decode."""

    def __init__(self) -> None:
        self._nodes: List[Optional[TreeNode]] = []
        self._owners: dict[int, Owner] = {}
        self.allocated: int = 0
        self.freed: int = 0

    @property
    def live(self) -> int:
        return self.allocated - self.freed

    def __contains__(self, handle: int) -> bool:
        return 0 <= handle < len(self._nodes) and self._nodes[handle] is not None

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    def allocate(self, node_id: int, label: str = "", owner: Owner = Owner.SLOT) -> int:
        """Create a node and return its handle."""
        handle = len(self._nodes)
        self._nodes.append(TreeNode(id=node_id, label=label))
        self._owners[handle] = owner
        self.allocated += 1
        return handle

    def get(self, handle: int) -> TreeNode:
        if handle not in self:
            raise RuntimeError(f"handle {handle} does not refer to a live node")
        return self._nodes[handle]  # type: ignore[return-value]

    def owner_of(self, handle: int) -> Owner:
        self.get(handle)
        return self._owners[handle]

    def transfer(self, handle: int, owner: Owner) -> None:
        self.get(handle)
        self._owners[handle] = owner

    # ------------------------------------------------------------------
    # Release
    # ------------------------------------------------------------------

    def free(self, handle: int) -> None:
        """Release a single node. Its children are left untouched."""
        if handle not in self:
            raise RuntimeError(f"double free of handle {handle}")
        self._nodes[handle] = None
        del self._owners[handle]
        self.freed += 1

    def free_subtree(self, handle: int) -> int:
        """Release *handle* and everything below it; return the count."""
        released = 0
        for current in list(self.iter_subtree(handle)):
            self.free(current)
            released += 1
        return released

    def iter_subtree(self, handle: int) -> Iterator[int]:
        """Yield the handles of *handle* and its descendants, parents first."""
        stack = [handle]
        while stack:
            current = stack.pop()
            node = self.get(current)
            yield current
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)
