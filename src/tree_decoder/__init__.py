from tree_decoder.build_tree import TreeDecoder, build_tree
from tree_decoder.errors import (
    ConflictingIdentifierError,
    EmptyInputError,
    IncompleteTreeError,
    InputTooLargeError,
    LineParseError,
    NotAccessibleError,
    TreeDecodeError,
)

__all__ = [
    "ConflictingIdentifierError",
    "EmptyInputError",
    "IncompleteTreeError",
    "InputTooLargeError",
    "LineParseError",
    "NotAccessibleError",
    "TreeDecodeError",
    "TreeDecoder",
    "build_tree",
]
