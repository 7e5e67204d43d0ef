"""
TreeDecoder - rebuilds a binary tree from one-node-per-line text records.

Each line describes a node:

    <id> [<left id> [<right id>]] [<label ...>]

Lines may arrive in any order and may name children before describing
them. The decoded tree is printed breadth-first, then in-order:

    1 2 3 root
    2 left          ->  root left right
    3 right             left root right

Usage (CLI):
    tree-decoder -f <file> [-i] [-d] [-o <file.json>]

Usage (library):
    from tree_decoder.build_tree import build_tree
    tree = build_tree("/path/to/records.txt")
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, Iterable, List, Optional, TextIO

from tree_decoder.components.memory import TreeMemory
from tree_decoder.components.node import TreeNode
from tree_decoder.components.resolver import Resolver
from tree_decoder.components.scanner import check_file, scan_lines
from tree_decoder.components.traversal import iter_breadth_first, iter_in_order, to_dict
from tree_decoder.config import configure_logging, settings
from tree_decoder.errors import NotAccessibleError, TreeDecodeError

logger = logging.getLogger(__name__)


class TreeDecoder:
    """Decodes one input into a tree and owns that tree until disposed.

    Example::

        with TreeDecoder(duplicate_ids=True) as decoder:
            decoder.decode_file("records.txt")
            decoder.print_bfs()
            decoder.print_dfs()

    Any failure disposes every node allocated so far before the error is
    raised, so the decoder holds nothing afterwards.
    """

    def __init__(
        self,
        complete_tree: Optional[bool] = None,
        duplicate_ids: Optional[bool] = None,
        max_file_size: Optional[int] = None,
        max_line_length: Optional[int] = None,
    ) -> None:
        self.complete_tree = settings.complete_tree if complete_tree is None else complete_tree
        self.duplicate_ids = settings.duplicate_ids if duplicate_ids is None else duplicate_ids
        self.max_file_size = settings.max_file_size if max_file_size is None else max_file_size
        self.max_line_length = settings.max_line_length if max_line_length is None else max_line_length
        self._resolver = Resolver(duplicate_ids=self.duplicate_ids)

    def set_max_file_size(self, size: int) -> None:
        """Override the file size limit, in bytes."""
        self.max_file_size = size

    @property
    def memory(self) -> TreeMemory:
        return self._resolver.memory

    @property
    def root(self) -> Optional[TreeNode]:
        if self._resolver.root is None:
            return None
        return self.memory.get(self._resolver.root)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode_file(self, path: str) -> TreeNode:
        """Check *path*, then decode it line by line."""
        try:
            check_file(path, self.max_file_size)
            f = self._open_input(path)
        except TreeDecodeError as e:
            logger.error("%s", e)
            raise

        with f:
            return self.decode_lines(f)

    @staticmethod
    def _open_input(path: str) -> TextIO:
        try:
            return open(path, "r", encoding="utf-8", errors="replace")
        except OSError as e:
            raise NotAccessibleError(str(path), e.strerror or str(e)) from e

    def decode_lines(self, lines: Iterable[str]) -> TreeNode:
        """Decode *lines* into a tree and return its root node.

        Fatal errors are logged once, at ERROR, before they are raised.

        Raises:
            TreeDecodeError: On any failure other than a skippable line.
        """
        self.dispose()
        self._resolver = Resolver(duplicate_ids=self.duplicate_ids)

        try:
            for line_number, record in scan_lines(
                lines, complete_tree=self.complete_tree, max_length=self.max_line_length
            ):
                try:
                    self._resolver.ingest(record)
                except TreeDecodeError as e:
                    logger.error("%d : Error line - %s", line_number, e)
                    raise
            try:
                root = self._resolver.finalize()
            except TreeDecodeError as e:
                logger.error("%s", e)
                raise
        except TreeDecodeError:
            self.dispose()
            raise

        logger.info("Decoded tree with %d nodes", self.memory.live)
        return self.memory.get(root)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def bfs_labels(self) -> List[str]:
        return [node.label for node in iter_breadth_first(self.memory, self._resolver.root)]

    def dfs_labels(self) -> List[str]:
        return [node.label for node in iter_in_order(self.memory, self._resolver.root)]

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return to_dict(self.memory, self._resolver.root)

    def print_bfs(self, stream: Optional[TextIO] = None) -> None:
        self._print_labels(self.bfs_labels(), stream or sys.stdout)

    def print_dfs(self, stream: Optional[TextIO] = None) -> None:
        self._print_labels(self.dfs_labels(), stream or sys.stdout)

    @staticmethod
    def _print_labels(labels: List[str], stream: TextIO) -> None:
        for label in labels:
            stream.write(f"{label} ")
        stream.write("\n")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def dispose(self) -> None:
        """Free every node held by the decoder. Safe to call repeatedly."""
        self._resolver.dispose()

    def __enter__(self) -> "TreeDecoder":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.dispose()


def build_tree(
    path: str,
    complete_tree: Optional[bool] = None,
    duplicate_ids: Optional[bool] = None,
) -> Optional[Dict[str, Any]]:
    """Decode *path* and return the tree as nested dicts."""
    with TreeDecoder(complete_tree=complete_tree, duplicate_ids=duplicate_ids) as decoder:
        decoder.decode_file(path)
        return decoder.to_dict()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tree-decoder",
        description="Rebuild a binary tree from one-node-per-line records.",
        add_help=False,
    )
    parser.add_argument("-f", "--file", metavar="FILE", help="Input file of node records")
    parser.add_argument(
        "-i",
        "--incomplete",
        action="store_true",
        help="Support incomplete trees (nodes with a single child)",
    )
    parser.add_argument(
        "-d",
        "--duplicate-ids",
        action="store_true",
        help="Support the same node id naming several nodes",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Also write the decoded tree as JSON to FILE",
    )
    parser.add_argument(
        "-s",
        "--max-file-size",
        metavar="BYTES",
        type=int,
        help="Reject input files larger than BYTES",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every resolution step")
    parser.add_argument("-h", "--help", action="store_true", help="Show usage and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.help or not args.file:
        parser.print_usage(sys.stderr)
        return 1

    configure_logging("DEBUG" if args.verbose else settings.log_level)

    with TreeDecoder(
        complete_tree=False if args.incomplete else None,
        duplicate_ids=True if args.duplicate_ids else None,
        max_file_size=args.max_file_size,
    ) as decoder:
        try:
            decoder.decode_file(args.file)
        except TreeDecodeError:
            # already logged with its context by the decoder
            logger.debug("Decoding %s failed", args.file, exc_info=True)
            print("Error decoding file.", file=sys.stderr)
            return 1

        decoder.print_bfs()
        decoder.print_dfs()

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(decoder.to_dict(), f, indent=2)
            print(f"Tree written to {args.output} ({decoder.memory.live} nodes)", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
