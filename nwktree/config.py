from dataclasses import dataclass


@dataclass(frozen=True)
class NewickConfig:
    """Formatting and reading options shared by writer, printer and scanner."""

    length_precision: int = 3
    quote_chars: str = "(),:;[]'_"
    indent: str = "   "
    empty_label: str = "*"
    chunk_size: int = 8192
    encoding: str = "utf-8"


DEFAULT_CONFIG = NewickConfig()
