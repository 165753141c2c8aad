"""
Pytest configuration file.

This file is automatically loaded by pytest and configures the test environment.
It also provides a tiny merge file so the suite does not need the published
CLIP vocabulary.
"""

import gzip
import sys
from pathlib import Path

import pytest

# Add the project root to Python path so we can import cliptok modules
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Merge rules for the test vocabulary. Ids: merged symbols start at 512
# (256 bytes + 256 end-of-word variants), so "hello</w>" = 516, "my</w>" = 517,
# "lady</w>" = 520, "test</w>" = 523, and the special tokens follow at 524, 525.
TEST_MERGES = [
    "h e",
    "l l",
    "l o</w>",
    "he ll",
    "hell o</w>",
    "m y</w>",
    "l a",
    "d y</w>",
    "la dy</w>",
    "t e",
    "s t</w>",
    "te st</w>",
]


def write_merge_file(path: Path, merges, header: str = "#version: 0.2") -> Path:
    """Write a gzip merge file in the CLIP format."""
    content = "\n".join([header] + list(merges)) + "\n"
    with gzip.open(path, "wb") as f:
        f.write(content.encode("utf-8"))
    return path


@pytest.fixture
def bpe_path(tmp_path):
    """Path to a small gzip merge file."""
    return write_merge_file(tmp_path / "bpe_test_vocab.txt.gz", TEST_MERGES)


@pytest.fixture
def tokenizer(bpe_path):
    """Tokenizer with default options over the test merges."""
    from cliptok.tokenization.simple_tokenizer import SimpleTokenizer

    return SimpleTokenizer(bpe_path=str(bpe_path))


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end-to-end tests over files on disk")
