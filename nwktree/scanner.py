import logging
from typing import IO, AnyStr, Iterator, Optional

from nwktree.config import DEFAULT_CONFIG, NewickConfig
from nwktree.exceptions import EndOfTrees, NewickFormatError
from nwktree.parser.newick_parser import parse_newick
from nwktree.tree import Node, NodeFactory

logger = logging.getLogger(__name__)


def find_tree_start(record: str) -> int:
    """Offset of the first '(' outside bracket comments, or -1 if there is none."""
    depth = 0
    for offset, char in enumerate(record):
        if char == "[":
            depth += 1
        elif char == "]" and depth:
            depth -= 1
        elif char == "(" and not depth:
            return offset
    return -1


class Scanner:
    """
    Reads a stream one ';'-terminated Newick record at a time.

    Bytes in front of the first '(' of a record are discarded, skipping any
    '(' inside a leading bracket comment. Records must decode with the
    configured encoding, otherwise NewickFormatError is raised. A record
    without any '(' holds no tree and ends the scan, as does a stream that
    runs out before the next ';'.

    Usage:
        with open("trees.nwk", "rb") as f:
            for tree in Scanner(f):
                ...
    """

    def __init__(
        self,
        stream: IO[AnyStr],
        factory: Optional[NodeFactory] = None,
        config: NewickConfig = DEFAULT_CONFIG,
    ):
        self._stream = stream
        self._factory = factory
        self._config = config
        self._buffer = bytearray()
        self._text = ""
        self.records_read = 0

    def _read_record(self) -> Optional[str]:
        while True:
            end = self._buffer.find(b";")
            if end >= 0:
                record = bytes(self._buffer[: end + 1])
                del self._buffer[: end + 1]
                try:
                    return record.decode(self._config.encoding)
                except UnicodeDecodeError as e:
                    raise NewickFormatError(
                        f"Record {self.records_read + 1} is not valid "
                        f"{self._config.encoding}: {e.reason}"
                    ) from e
            chunk = self._stream.read(self._config.chunk_size)
            if not chunk:
                if self._buffer.strip():
                    logger.debug(
                        "Dropping %d trailing bytes without ';'", len(self._buffer)
                    )
                self._buffer.clear()
                return None
            if isinstance(chunk, str):
                chunk = chunk.encode(self._config.encoding)
            self._buffer.extend(chunk)

    def advance(self) -> bool:
        """Move to the next record. Returns False once no tree is left."""
        record = self._read_record()
        start = find_tree_start(record) if record is not None else -1
        if start < 0:
            self._text = ""
            return False
        self._text = record[start:]
        self.records_read += 1
        logger.debug("Read record %d (%d chars)", self.records_read, len(self._text))
        return True

    def current_text(self) -> str:
        """Raw text of the most recent record, starting at its first '('."""
        return self._text

    def current_tree(self) -> Optional[Node]:
        """Parse the most recent record. Every call builds a fresh tree."""
        if not self._text:
            return None
        return parse_newick(self._text, self._factory)

    def next_tree(self) -> Node:
        if not self.advance():
            raise EndOfTrees("No further tree in stream")
        tree = self.current_tree()
        if tree is None:
            raise EndOfTrees("No further tree in stream")
        return tree

    def __iter__(self) -> Iterator[Node]:
        while True:
            try:
                yield self.next_tree()
            except EndOfTrees:
                return
