import logging
import os
import re
import stat
from typing import Iterable, Iterator

from tree_decoder.errors import InputTooLargeError, LineParseError, NotAccessibleError

from .node import NodeRecord

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 1024
MAX_FILE_SIZE = 100 * 1024 * 1024

_TOKEN = re.compile(r"[^ ]+")
_INTEGER = re.compile(r"[+-]?[0-9]+")


def scan_line(line: str, complete_tree: bool = True, max_length: int = MAX_LINE_LENGTH) -> NodeRecord:
    """
    Turn one line of input into a NodeRecord.

    The first space-delimited token is the node id. Following tokens that
    are integers become the left then right child ids; the first token that
    is not (or a third integer) starts the label, which runs to the end of
    the line verbatim.

    Args:
        line:          The raw line, with or without its line terminator.
        complete_tree: Treat a lone child id followed by a label as the first
                       word of the label, since complete trees have either
                       zero or two children.
        max_length:    Lines longer than this are rejected.

    Returns:
        The parsed record. Its label is ``""`` when the line has none.

    Raises:
        LineParseError: If the line is too long or has no integer id.
    """
    line = line.rstrip("\r\n")
    if len(line) > max_length:
        raise LineParseError(f"exceeded size : {max_length}")

    tokens = _TOKEN.finditer(line)
    first = next(tokens, None)
    if first is None or not _INTEGER.fullmatch(first.group()):
        raise LineParseError("Cannot parse line")

    children: list[int] = []
    label = ""
    for match in tokens:
        token = match.group()
        if len(children) < 2 and _INTEGER.fullmatch(token):
            children.append(int(token))
            continue

        label = line[match.start():]
        if complete_tree and len(children) == 1:
            label = f"{children.pop()} {label}"
        break

    return NodeRecord(
        id=int(first.group()),
        label=label,
        left_id=children[0] if children else None,
        right_id=children[1] if len(children) > 1 else None,
    )


def scan_lines(
    lines: Iterable[str],
    complete_tree: bool = True,
    max_length: int = MAX_LINE_LENGTH,
) -> Iterator[tuple[int, NodeRecord]]:
    """
    Yield ``(line_number, record)`` for every usable line.

    Empty lines are skipped silently and do not advance the line number;
    lines that fail to parse are logged and skipped.
    """
    line_number = 0
    for line in lines:
        if not line.rstrip("\r\n"):
            continue
        line_number += 1
        try:
            record = scan_line(line, complete_tree=complete_tree, max_length=max_length)
        except LineParseError as e:
            logger.warning("%d : Error line - %s (%s)", line_number, line.rstrip("\r\n"), e)
            continue
        yield line_number, record


def check_file(path: str, max_size: int = MAX_FILE_SIZE) -> int:
    """
    Make sure *path* is a regular file no larger than *max_size* bytes.

    Returns:
        The file size in bytes.

    Raises:
        NotAccessibleError: If the file cannot be stat'ed or is not regular.
        InputTooLargeError: If the file exceeds *max_size*.
    """
    try:
        info = os.stat(path)
    except OSError as e:
        raise NotAccessibleError(str(path), e.strerror or str(e)) from e

    if not stat.S_ISREG(info.st_mode):
        raise NotAccessibleError(str(path), "is not a regular file")

    if info.st_size > max_size:
        raise InputTooLargeError(str(path), info.st_size, max_size)

    return info.st_size
