import ast
import logging
import re
import warnings
from enum import Enum
from typing import Iterator, List, NamedTuple

from nwktree.exceptions import NewickFormatError

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    OPEN = "("
    CLOSE = ")"
    COMMA = ","
    END = ";"
    LENGTH = ":"
    LABEL = "label"


class Token(NamedTuple):
    kind: TokenKind
    text: str


_PUNCTUATION = {
    "(": TokenKind.OPEN,
    ")": TokenKind.CLOSE,
    ",": TokenKind.COMMA,
    ";": TokenKind.END,
}

_TOKEN_RE = re.compile(
    r"""
      (?P<comment>/\*.*?\*/)
    | (?P<length>`:[^`]*`)
    | (?P<quoted>"(?:[^"\\\n]|\\.)*")
    | (?P<punct>[(),;])
    | (?P<space>\s+)
    | (?P<bare>(?:[^\s(),;"/`]|/(?!\*)|`(?!:))+)
    | (?P<error>.)
    """,
    re.VERBOSE | re.DOTALL,
)


def unquote(text: str) -> str:
    """Strip the double quotes from a quoted span and resolve its escapes."""
    try:
        # Unknown escapes such as \q only warn; treat them as malformed too
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            value = ast.literal_eval(text)
    except (ValueError, SyntaxError, Warning) as e:
        raise NewickFormatError(f"Cannot unquote {text!r}: {e}", token=text) from e
    if not isinstance(value, str):
        raise NewickFormatError(f"Cannot unquote {text!r}", token=text)
    return value


def iter_tokens(normalized: str) -> Iterator[Token]:
    """
    Split a normalized record into tokens.

    Comments and blanks between tokens are dropped. Backquoted spans are
    branch lengths and keep their leading ':'. Quoted spans are unquoted and
    always yield labels. Bare label fragments have their underscores turned
    into blanks.
    """
    for match in _TOKEN_RE.finditer(normalized):
        group = match.lastgroup
        text = match.group()
        if group in ("comment", "space"):
            continue
        if group == "punct":
            yield Token(_PUNCTUATION[text], text)
        elif group == "length":
            yield Token(TokenKind.LENGTH, text[1:-1])
        elif group == "quoted":
            yield Token(TokenKind.LABEL, unquote(text))
        elif group == "bare":
            yield Token(TokenKind.LABEL, text.replace("_", " "))
        else:
            if text == '"':
                message = "Unterminated quoted label"
            elif normalized.startswith("/*", match.start()):
                message = "Unterminated comment"
            else:
                message = f"Unexpected character {text!r}"
            raise NewickFormatError(
                f"{message} at offset {match.start()}", token=text
            )


def tokenize(normalized: str) -> List[Token]:
    tokens = list(iter_tokens(normalized))
    logger.debug("Lexed %d tokens", len(tokens))
    return tokens
