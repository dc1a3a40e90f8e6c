import logging
from pathlib import Path

import pytest

from nwktree.scanner import Scanner
from nwktree.tree import NodeFactory

DATA_DIR = Path(__file__).parent / "data"
REFERENCE_NEWICK = "(((A:0.2,B:0.3):0.3,(D:0.5,E:0.3):0.2):0.3,F:0.7);"


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@pytest.fixture
def factory():
    return NodeFactory()


@pytest.fixture
def reference_path():
    return DATA_DIR / "reference.nwk"


@pytest.fixture
def reference_tree(reference_path):
    """Second tree of the reference file; its nodes carry ids 10..18."""
    with open(reference_path, "rb") as f:
        trees = list(Scanner(f, factory=NodeFactory()))
    assert len(trees) == 2
    return trees[1]
