"""
Newick writer.

Turns a clade back into canonical Newick text. A comma precedes every node
that is not the first child of its parent, and the closing parenthesis of a
child list is written by the last child of that list, after its own label.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

from nwktree.config import DEFAULT_CONFIG, NewickConfig

if TYPE_CHECKING:
    from nwktree.tree import Node

_VISIT = 0
_LABEL = 1
_CLOSE = 2


def format_length(length: float, precision: int = 3) -> str:
    return f"{length:.{precision}g}"


def format_label(label: str, quote_chars: str = DEFAULT_CONFIG.quote_chars) -> str:
    """Quote labels holding structural characters, otherwise turn blanks into underscores."""
    if any(char in label for char in quote_chars):
        return "'" + label.replace("'", "''") + "'"
    return label.replace(" ", "_")


def write_newick(node: Node, config: NewickConfig = DEFAULT_CONFIG) -> str:
    """
    Serialize the clade rooted at ``node`` as Newick text ending in ';'.

    ``node`` is written as the root of its clade even when it has a parent:
    its siblings are left out and its branch length is not emitted.
    """
    out: List[str] = []
    stack: List[Tuple[int, Node]] = [(_VISIT, node)]

    while stack:
        action, current = stack.pop()

        if action == _LABEL:
            out.append(format_label(current.label, config.quote_chars))
            if current.has_length and current is not node:
                out.append(":" + format_length(current.length, config.length_precision))
            continue

        if action == _CLOSE:
            out.append(")")
            continue

        is_top = current is node
        if not is_top:
            parent = current.parent
            if parent is not None and parent.child is not current:
                out.append(",")
        if current.child is not None:
            out.append("(")

        # Pushed in reverse: children, own label, later siblings, then ')'.
        if not is_top and current.sib is None:
            stack.append((_CLOSE, current))
        if not is_top and current.sib is not None:
            stack.append((_VISIT, current.sib))
        stack.append((_LABEL, current))
        if current.child is not None:
            stack.append((_VISIT, current.child))

    out.append(";")
    return "".join(out)
