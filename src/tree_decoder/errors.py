"""
errors.py - Exception hierarchy for tree decoding

Only LineParseError is recovered from (the line is skipped); every other
error aborts the decode and reaches the caller.
"""

from __future__ import annotations


class TreeDecodeError(Exception):
    """Base class for every decode failure."""


class LineParseError(TreeDecodeError):
    """A single line could not be turned into a record."""


class ConflictingIdentifierError(TreeDecodeError):
    """A record cannot be matched unambiguously against what is known."""

    def __init__(self, node_id: int, reason: str) -> None:
        super().__init__(f"node id {node_id}: {reason}")
        self.node_id = node_id
        self.reason = reason


class IncompleteTreeError(TreeDecodeError):
    """Input ended while references were still unresolved."""

    def __init__(self, wait_count: int) -> None:
        super().__init__(f"unresolved node count : {wait_count}")
        self.wait_count = wait_count


class EmptyInputError(TreeDecodeError):
    """No root was ever established."""

    def __init__(self) -> None:
        super().__init__("could not build any tree")


class InputTooLargeError(TreeDecodeError):
    def __init__(self, path: str, size: int, limit: int) -> None:
        super().__init__(f"{path} size : {size} exceeded max size : {limit}")
        self.path = path
        self.size = size
        self.limit = limit


class NotAccessibleError(TreeDecodeError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path} : {reason}")
        self.path = path
        self.reason = reason
