"""
Indented text rendering of a clade.

Each depth level adds one indentation unit. A node's later siblings are
listed before the node itself, so siblings appear in reverse declaration
order, each followed by its own children.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

from nwktree.config import DEFAULT_CONFIG, NewickConfig

if TYPE_CHECKING:
    from nwktree.tree import Node


def render_tree_lines(node: Node, config: NewickConfig = DEFAULT_CONFIG) -> List[str]:
    """
    Render the clade rooted at ``node`` as a list of indented lines.

    Args:
        node: Root of the clade to render
        config: Supplies the indentation unit and the placeholder for empty labels

    Returns:
        List[str]: One line per node
    """
    lines: List[str] = []
    stack: List[Tuple[Node, int]] = [(node, 0)]

    while stack:
        current, depth = stack.pop()
        label = current.label if current.label else config.empty_label
        lines.append(f"{config.indent * depth}{label}")
        # Last child is popped first
        for child in current.iter_children():
            stack.append((child, depth + 1))

    return lines


def render_tree(node: Node, config: NewickConfig = DEFAULT_CONFIG) -> str:
    return "".join(f"{line}\n" for line in render_tree_lines(node, config))


def print_tree(node: Node, config: NewickConfig = DEFAULT_CONFIG) -> None:
    """
    Print a clade as indented text.

    Args:
        node: The root node of the clade
    """
    for line in render_tree_lines(node, config):
        print(line)
