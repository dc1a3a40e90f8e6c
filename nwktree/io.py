from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from nwktree.config import DEFAULT_CONFIG, NewickConfig
from nwktree.scanner import Scanner
from nwktree.tree import Node, NodeFactory

PathLike = Union[str, Path]


def iter_newick(path: PathLike, factory: Optional[NodeFactory] = None) -> Iterator[Node]:
    with open(path, "rb") as f:
        yield from Scanner(f, factory=factory)


def read_newick(path: PathLike, factory: Optional[NodeFactory] = None) -> List[Node]:
    """Read every tree of a Newick file."""
    return list(iter_newick(path, factory))


def write_newick_file(
    path: PathLike, trees: Iterable[Node], config: NewickConfig = DEFAULT_CONFIG
) -> None:
    """Write one tree per line."""
    with open(path, mode="w", encoding=config.encoding) as f:
        for tree in trees:
            f.write(tree.to_newick(config) + "\n")
