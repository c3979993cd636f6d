import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def figure_tree():
    """Build a fixed six-leaf tree by hand.

    Structure::

              *
            /   \\
           *     *
          / \\   / \\
         a   b c   *
                  / \\
                 d   *
                    / \\
                   e   f
    """
    from huffman import HuffmanNode

    def leaf(ch):
        return HuffmanNode(symbol=ord(ch), freq=1)

    def node(left, right):
        return HuffmanNode(freq=left.freq + right.freq, left=left, right=right)

    return node(
        node(leaf("a"), leaf("b")),
        node(leaf("c"), node(leaf("d"), node(leaf("e"), leaf("f")))),
    )


@pytest.fixture()
def sample_file(tmp_path: Path):
    """Write a small mixed text/binary file and return its path."""
    path = tmp_path / "sample.bin"
    path.write_bytes(b"Hello World!\n" * 7 + bytes(range(256)) + b"\x00\x00\xff")
    return path
