"""
Rewrite a raw Newick record into a form the lexer can split safely.

Three passes, in order:

1. Bracket comments become block comments (``[`` -> ``/*``, ``]`` -> ``*/``).
   Brackets inside single-quoted labels are kept as they are.
2. Single quotes become double quotes, and a doubled quote collapses into a
   literal apostrophe, mirroring the Newick ``''`` escape.
3. Each branch length, from its ``:`` up to the next ``,``, ``;``, ``)`` or
   blank, is wrapped in backquotes so it reaches the parser as a single
   token. Comments and quoted labels are left untouched by this pass.
"""

import re
from typing import List

from nwktree.exceptions import NewickFormatError

COMMENT_START = "/*"
COMMENT_END = "*/"
QUOTE = '"'
# Distinct from QUOTE so a quoted label starting with ":" stays a label.
LENGTH_QUOTE = "`"

LENGTH_TERMINATORS = frozenset(",;)")

# Bracket comments and single-quoted labels of the raw record; the leftmost wins.
_RAW_PROTECTED_RE = re.compile(r"(\[[^\]]*\]|'(?:[^']|'')*')")

# Spans the length pass must not touch: comments and complete quoted labels.
_PROTECTED_RE = re.compile(r'(/\*.*?\*/|"(?:[^"\\\n]|\\.)*")', re.DOTALL)


def translate_comments(record: str) -> str:
    """Turn bracket comments into block comments; brackets in quoted labels stay."""
    pieces = _RAW_PROTECTED_RE.split(record)
    out: List[str] = []
    for index, piece in enumerate(pieces):
        if index % 2 and piece.startswith("'"):
            out.append(piece)
            continue
        out.append(piece.replace("[", COMMENT_START).replace("]", COMMENT_END))
    return "".join(out)


def translate_quotes(record: str) -> str:
    return record.replace("'", QUOTE).replace(QUOTE + QUOTE, "'")


def _quote_lengths(segment: str) -> str:
    out: List[str] = []
    in_number = False
    for char in segment:
        if char == ":":
            if in_number:
                out.append(LENGTH_QUOTE)
            in_number = True
            out.append(LENGTH_QUOTE)
        elif in_number and (char in LENGTH_TERMINATORS or char.isspace()):
            in_number = False
            out.append(LENGTH_QUOTE)
        out.append(char)
    # A comment or quoted label cut the number short
    if in_number:
        out.append(LENGTH_QUOTE)
    return "".join(out)


def disambiguate_lengths(text: str) -> str:
    pieces = _PROTECTED_RE.split(text)
    out: List[str] = []
    for index, piece in enumerate(pieces):
        if index % 2:
            out.append(piece)
            continue
        if QUOTE in piece:
            raise NewickFormatError("Unterminated quoted label", token=piece)
        if COMMENT_START in piece:
            raise NewickFormatError("Unterminated comment", token=piece)
        out.append(_quote_lengths(piece))
    return "".join(out)


def normalize_record(record: str) -> str:
    """Apply comment, quote and length translation to one Newick record."""
    return disambiguate_lengths(translate_quotes(translate_comments(record)))
