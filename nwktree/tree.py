from __future__ import annotations

import itertools
import logging
import threading
import weakref
from typing import Dict, Iterator, List, Optional

from typing_extensions import Self

from nwktree.config import DEFAULT_CONFIG, NewickConfig
from nwktree.exceptions import (
    ChildNotFoundError,
    NoChildrenError,
    NotAncestorError,
    TreeStructureError,
)

logger = logging.getLogger(__name__)


class NodeFactory:
    """
    Hands out node ids from a private, monotonically increasing counter.

    Every node remembers the factory that stamped it, so copies of a clade
    draw their fresh ids from the same sequence. The counter is guarded by a
    lock; nodes may be created from several threads.
    """

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._counter)

    def create(
        self, label: str = "", length: float = 0.0, has_length: bool = False
    ) -> "Node":
        return Node(label=label, length=length, has_length=has_length, factory=self)


default_factory = NodeFactory()


class Node:
    """
    Tree node linked through first-child and next-sibling references.

    ``child`` and ``sib`` own the nodes they point to. ``parent`` is a weak
    back reference used for upward walks only; it never keeps a node alive.
    A node is the root of its tree exactly when ``parent`` is None, and a
    root never has a sibling.
    """

    __slots__ = (
        "id",
        "label",
        "length",
        "has_length",
        "child",
        "sib",
        "factory",
        "_parent_ref",
        "__weakref__",
    )

    id: int
    label: str
    length: float
    has_length: bool
    child: Optional[Self]
    sib: Optional[Self]
    factory: NodeFactory
    _parent_ref: Optional["weakref.ReferenceType[Node]"]

    def __init__(
        self,
        label: str = "",
        length: float = 0.0,
        has_length: bool = False,
        factory: Optional[NodeFactory] = None,
    ):
        self.factory = factory if factory is not None else default_factory
        self.id = self.factory.next_id()
        self.label = label
        self.length = length
        self.has_length = has_length
        self.child = None
        self.sib = None
        self._parent_ref = None

    # ------------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------------
    @property
    def parent(self) -> Optional[Self]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent.setter
    def parent(self, node: Optional[Self]) -> None:
        self._parent_ref = weakref.ref(node) if node is not None else None

    @property
    def children(self) -> List[Self]:
        """Snapshot of the sibling chain that starts at ``child``."""
        return list(self.iter_children())

    def iter_children(self) -> Iterator[Self]:
        node = self.child
        while node is not None:
            yield node
            node = node.sib

    @property
    def leaves(self) -> List[Self]:
        return [node for node in self.traverse() if node.child is None]

    def is_leaf(self) -> bool:
        return self.child is None

    def is_root(self) -> bool:
        return self.parent is None

    def same_node(self, other: Optional["Node"]) -> bool:
        return other is not None and self.id == other.id

    def get_root(self) -> Self:
        cur = self
        while cur.parent is not None:
            cur = cur.parent
        return cur

    def traverse(self) -> List[Self]:
        """
        Return every node of the clade rooted here in pre-order.

        Uses an explicit stack so deep trees do not exhaust the call stack.
        The receiver's own siblings are not part of its clade.
        """
        nodes: List[Self] = []
        stack: List[Self] = [self]
        while stack:
            current = stack.pop()
            nodes.append(current)
            stack.extend(reversed(current.children))
        return nodes

    # ------------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------------
    def add_child(self, node: Self) -> None:
        """Append ``node`` to the end of this node's child list."""
        if node.parent is not None or node.sib is not None:
            raise TreeStructureError(
                f"Node {node.id} is already linked into a tree; detach it first."
            )
        node.parent = self
        if self.child is None:
            self.child = node
            return
        last = self.child
        while last.sib is not None:
            last = last.sib
        last.sib = node

    def remove_child(self, child_id: int) -> Self:
        """
        Unlink the direct child with id ``child_id`` and return it.

        The removed node keeps its own descendants but loses its parent and
        sibling links.
        """
        if self.child is None:
            raise NoChildrenError(f"Node {self.id} has no children.")
        removed = self._unlink(lambda node: node.id == child_id)
        if removed is None:
            raise ChildNotFoundError(
                f"Node {child_id} is not a child of node {self.id}.",
                child_id=child_id,
            )
        return removed

    def _unlink(self, matches) -> Optional[Self]:
        first = self.child
        if first is None:
            return None
        if matches(first):
            self.child = first.sib
            first.sib = None
            first.parent = None
            return first
        prev = first
        while prev.sib is not None and not matches(prev.sib):
            prev = prev.sib
        if prev.sib is None:
            return None
        removed = prev.sib
        prev.sib = removed.sib
        removed.sib = None
        removed.parent = None
        return removed

    def remove_clade(self) -> Optional[Self]:
        """
        Detach this node, with everything below it, from its tree.

        Returns the root of the tree that remains. Returns None when the
        receiver was itself a root: the whole tree is gone and the caller
        should drop its handle to it.
        """
        parent = self.parent
        if parent is None:
            logger.debug("Removing clade %d destroys its whole tree", self.id)
            return None
        removed = parent._unlink(lambda node: node is self)
        if removed is None:
            raise TreeStructureError(
                f"Node {self.id} points at parent {parent.id} but is missing "
                "from its child list."
            )
        logger.debug("Removed clade %d from parent %d", self.id, parent.id)
        return parent.get_root()

    def copy_clade(self) -> Self:
        """
        Return an independent copy of the clade rooted at this node.

        Copies get fresh ids from this node's factory; label and branch
        length are copied verbatim. The copy is always a standalone root.
        """
        factory = self.factory
        copy_root: Optional[Node] = None
        last_child: Dict[int, Node] = {}
        stack: List[tuple[Node, Optional[Node]]] = [(self, None)]
        while stack:
            original, dup_parent = stack.pop()
            dup = factory.create(original.label, original.length, original.has_length)
            if dup_parent is None:
                copy_root = dup
            else:
                dup.parent = dup_parent
                tail = last_child.get(dup_parent.id)
                if tail is None:
                    dup_parent.child = dup
                else:
                    tail.sib = dup
                last_child[dup_parent.id] = dup
            for child in reversed(original.children):
                stack.append((child, dup))
        assert copy_root is not None
        return copy_root

    # ------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------
    def lca(self, other: "Node") -> Optional[Self]:
        """
        Find the lowest common ancestor of this node and ``other``.

        Returns None if the two nodes live in different trees.
        """
        if self is other:
            return self

        ancestors: set[Node] = set()
        current: Optional[Node] = self
        while current is not None:
            ancestors.add(current)
            current = current.parent

        current = other
        while current is not None:
            if current in ancestors:
                return current
            current = current.parent
        return None

    def up_distance(self, ancestor: "Node") -> float:
        """Sum of branch lengths on the path from this node up to ``ancestor``."""
        total = 0.0
        current: Optional[Node] = self
        while current is not None and current.id != ancestor.id:
            total += current.length
            current = current.parent
        if current is None:
            logger.debug("Node %d is not an ancestor of node %d", ancestor.id, self.id)
            raise NotAncestorError(
                f"Node {ancestor.id} is not an ancestor of node {self.id}."
            )
        return total

    def uniform_labels(self, prefix: str) -> None:
        """Relabel every node of the clade as ``prefix`` followed by its id."""
        for node in self.traverse():
            node.label = f"{prefix}{node.id}"

    def key(self, separator: str) -> str:
        """Sorted, de-duplicated non-empty labels of the clade, joined."""
        labels = {node.label for node in self.traverse() if node.label}
        return separator.join(sorted(labels))

    # ------------------------------------------------------------------------
    # Text output
    # ------------------------------------------------------------------------
    def to_newick(self, config: NewickConfig = DEFAULT_CONFIG) -> str:
        from nwktree.writer import write_newick

        return write_newick(self, config)

    def print_tree(self, config: NewickConfig = DEFAULT_CONFIG) -> str:
        from nwktree.tree_printer import render_tree

        return render_tree(self, config)

    def __repr__(self) -> str:
        return f"Node({self.id}, '{self.label}')"

    def __str__(self) -> str:
        return self.to_newick()
