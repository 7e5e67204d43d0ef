from .memory import Owner, TreeMemory
from .node import (
    ROOT_SLOT,
    AwaitingContent,
    AwaitingSlot,
    EntryKind,
    NodeRecord,
    PendingEntry,
    Resolved,
    Side,
    Slot,
    TreeNode,
)
from .pending import PendingReferenceTable
from .resolver import Resolver
from .scanner import check_file, scan_line, scan_lines

__all__ = [
    "ROOT_SLOT",
    "AwaitingContent",
    "AwaitingSlot",
    "EntryKind",
    "NodeRecord",
    "Owner",
    "PendingEntry",
    "PendingReferenceTable",
    "Resolved",
    "Resolver",
    "Side",
    "Slot",
    "TreeMemory",
    "TreeNode",
    "check_file",
    "scan_line",
    "scan_lines",
]
