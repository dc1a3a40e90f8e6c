"""
Newick format parser.

Records pass through three stages: the normalizer rewrites comments, quotes
and branch lengths, the lexer splits the result into tokens, and the tree
builder grows a node graph from the token stream.
"""

from .normalizer import normalize_record
from .lexer import Token, TokenKind, tokenize, unquote
from .newick_parser import TreeBuilder, build_tree, parse_length, parse_newick

__all__ = [
    "normalize_record",
    "Token",
    "TokenKind",
    "tokenize",
    "unquote",
    "TreeBuilder",
    "build_tree",
    "parse_length",
    "parse_newick",
]
