"""
components/traversal.py - Walks over a decoded tree

All walks use an explicit queue or stack, so tree depth is bounded by
memory rather than by the interpreter's recursion limit.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Dict, Iterator, Optional

from .memory import TreeMemory
from .node import TreeNode


def iter_breadth_first(memory: TreeMemory, root: Optional[int]) -> Iterator[TreeNode]:
    """Yield nodes level by level, left to right."""
    if root is None:
        return
    queue = deque([root])
    while queue:
        node = memory.get(queue.popleft())
        if node.left is not None:
            queue.append(node.left)
        if node.right is not None:
            queue.append(node.right)
        yield node


def iter_in_order(memory: TreeMemory, root: Optional[int]) -> Iterator[TreeNode]:
    """Yield nodes left subtree first, then the node, then the right subtree."""
    stack: list[int] = []
    current = root
    while stack or current is not None:
        while current is not None:
            stack.append(current)
            current = memory.get(current).left
        node = memory.get(stack.pop())
        yield node
        current = node.right


def to_dict(memory: TreeMemory, root: Optional[int]) -> Optional[Dict[str, Any]]:
    """Export the tree as nested ``{id, label, left, right}`` dicts."""
    if root is None:
        return None

    holder: Dict[str, Any] = {}
    stack = [(root, holder, "tree")]
    while stack:
        handle, container, key = stack.pop()
        node = memory.get(handle)
        entry = {"id": node.id, "label": node.label, "left": None, "right": None}
        container[key] = entry
        if node.right is not None:
            stack.append((node.right, entry, "right"))
        if node.left is not None:
            stack.append((node.left, entry, "left"))
    return holder["tree"]
