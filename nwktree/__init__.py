"""Newick tree parsing, writing and manipulation."""

from nwktree.config import DEFAULT_CONFIG, NewickConfig
from nwktree.exceptions import (
    ChildNotFoundError,
    EndOfTrees,
    NewickError,
    NewickFormatError,
    NoChildrenError,
    NotAncestorError,
    TreeStructureError,
    UnbalancedStructureError,
)
from nwktree.tree import Node, NodeFactory, default_factory
from nwktree.parser import parse_newick
from nwktree.writer import write_newick
from nwktree.tree_printer import print_tree
from nwktree.scanner import Scanner
from nwktree.io import iter_newick, read_newick, write_newick_file

__all__ = [
    "DEFAULT_CONFIG",
    "NewickConfig",
    "NewickError",
    "NewickFormatError",
    "UnbalancedStructureError",
    "TreeStructureError",
    "NoChildrenError",
    "ChildNotFoundError",
    "NotAncestorError",
    "EndOfTrees",
    "Node",
    "NodeFactory",
    "default_factory",
    "parse_newick",
    "write_newick",
    "print_tree",
    "Scanner",
    "iter_newick",
    "read_newick",
    "write_newick_file",
]
