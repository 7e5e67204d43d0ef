from enum import StrEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator


class Side(StrEnum):
    LEFT  = "left"
    RIGHT = "right"


class EntryKind(StrEnum):
    AWAITING_CONTENT = "awaiting_content"
    AWAITING_SLOT    = "awaiting_slot"
    RESOLVED         = "resolved"


class NodeRecord(BaseModel):
    """One input line's worth of information about a node.

    ``label`` is ``None`` only for records synthesized because another
    record named this id as a child.
    """

    id: int
    label: str | None = None
    left_id: int | None = None
    right_id: int | None = None

    @model_validator(mode="after")
    def right_needs_left(self) -> "NodeRecord":
        if self.right_id is not None and self.left_id is None:
            raise ValueError("a right child id requires a left child id")
        return self

    @property
    def is_reference(self) -> bool:
        return self.label is None

    @classmethod
    def reference(cls, node_id: int) -> "NodeRecord":
        return cls(id=node_id)


class TreeNode(BaseModel):
    """A node held by :class:`~tree_decoder.components.memory.TreeMemory`.

    ``left``, ``right`` and ``parent`` are arena handles, not nodes.
    """

    id: int
    label: str = ""
    left: int | None = None
    right: int | None = None
    parent: int | None = None


class Slot(BaseModel):
    """The root, or the left/right field of the node behind ``owner``."""

    model_config = {"frozen": True}

    owner: int | None = None
    side: Side | None = None

    @model_validator(mode="after")
    def owner_and_side_together(self) -> "Slot":
        if (self.owner is None) != (self.side is None):
            raise ValueError("a child slot needs both an owner and a side")
        return self

    @property
    def is_root(self) -> bool:
        return self.owner is None


ROOT_SLOT = Slot()


class AwaitingContent(BaseModel):
    model_config = {"frozen": True}

    kind: Literal[EntryKind.AWAITING_CONTENT] = EntryKind.AWAITING_CONTENT
    id: int
    node: int


class AwaitingSlot(BaseModel):
    model_config = {"frozen": True}

    kind: Literal[EntryKind.AWAITING_SLOT] = EntryKind.AWAITING_SLOT
    id: int
    slot: Slot


class Resolved(BaseModel):
    model_config = {"frozen": True}

    kind: Literal[EntryKind.RESOLVED] = EntryKind.RESOLVED
    id: int
    slot: Slot


PendingEntry = Annotated[
    Union[AwaitingContent, AwaitingSlot, Resolved],
    Field(discriminator="kind"),
]
