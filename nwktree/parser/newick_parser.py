import logging
import re
from typing import Iterable, Optional

from nwktree.exceptions import NewickFormatError, UnbalancedStructureError
from nwktree.parser.lexer import Token, TokenKind, tokenize
from nwktree.parser.normalizer import normalize_record
from nwktree.tree import Node, NodeFactory, default_factory

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# ===================================================================
# 1. BRANCH LENGTHS
# ===================================================================


def parse_length(text: str) -> float:
    """
    Parse a ':'-prefixed length span into a float.

    Raises:
        NewickFormatError: If the remainder is not a signed decimal number
    """
    number = text[1:] if text.startswith(":") else text
    if not _NUMBER_RE.fullmatch(number):
        raise NewickFormatError(f"Invalid branch length: {number!r}", token=text)
    return float(number)


# ===================================================================
# 2. TREE BUILDER
# ===================================================================


class TreeBuilder:
    """
    Grows a tree from a token stream with a single movable cursor.

    The cursor starts undefined. '(' opens a child under it (creating the
    root first if needed), ')' climbs to the parent, ',' opens the next
    sibling, a length span sets the cursor's branch length, ';' ends the
    record and anything else is appended to the cursor's label. An internal
    node's label follows its ')' and therefore lands on the right node
    without special handling.
    """

    def __init__(self, factory: Optional[NodeFactory] = None):
        self.factory = factory if factory is not None else default_factory
        self.cursor: Optional[Node] = None
        self.root: Optional[Node] = None
        self.finished = False
        self.node_count = 0

    def _new_node(self) -> Node:
        self.node_count += 1
        return self.factory.create()

    def feed(self, token: Token) -> None:
        if self.finished:
            return
        kind = token.kind

        if kind == TokenKind.OPEN:
            if self.cursor is None:
                self.root = self._new_node()
                self.cursor = self.root
            child = self._new_node()
            self.cursor.add_child(child)
            self.cursor = child

        elif kind == TokenKind.CLOSE:
            parent = self.cursor.parent if self.cursor is not None else None
            if parent is None:
                raise UnbalancedStructureError("')' without a matching '('")
            self.cursor = parent

        elif kind == TokenKind.COMMA:
            parent = self.cursor.parent if self.cursor is not None else None
            if parent is None:
                raise UnbalancedStructureError("',' outside of any parentheses")
            sibling = self._new_node()
            sibling.parent = parent
            self.cursor.sib = sibling
            self.cursor = sibling

        elif kind == TokenKind.LENGTH:
            length = parse_length(token.text)
            if self.cursor is None:
                logger.debug("Ignoring branch length before the first '('")
                return
            self.cursor.length = length
            self.cursor.has_length = True

        elif kind == TokenKind.END:
            self.finished = True

        else:
            if self.cursor is None:
                logger.debug("Ignoring label %r before the first '('", token.text)
                return
            self.cursor.label += token.text

    def result(self) -> Optional[Node]:
        """Return the root of the built tree, or None if the record held no tree."""
        if self.cursor is None:
            return None
        return self.cursor.get_root()


def build_tree(
    tokens: Iterable[Token], factory: Optional[NodeFactory] = None
) -> Optional[Node]:
    """
    Build a tree from lexed tokens.

    Returns:
        The root node, or None when no '(' occurs before the terminating ';'
    """
    builder = TreeBuilder(factory)
    for token in tokens:
        builder.feed(token)
        if builder.finished:
            break
    root = builder.result()
    if root is not None:
        logger.debug("Built tree %d with %d nodes", root.id, builder.node_count)
    return root


# ===================================================================
# 3. PUBLIC API
# ===================================================================


def parse_newick(record: str, factory: Optional[NodeFactory] = None) -> Optional[Node]:
    """
    Parse one Newick record into a tree.

    Args:
        record: Newick text of a single tree, normally ending in ';'
        factory: Source of node ids; the module default is used if omitted

    Returns:
        Root node of the tree, or None if the record contains no tree

    Raises:
        NewickFormatError: On malformed quoting or branch lengths
        UnbalancedStructureError: On ')' or ',' without an enclosing '('
    """
    return build_tree(tokenize(normalize_record(record)), factory)
