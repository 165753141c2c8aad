"""
Unit tests for tokenizer inspection utilities.
"""

import pytest

from cliptok.tokenization.simple_tokenizer import SimpleTokenizer
from cliptok.tokenization.stats import (
    get_tokenizer_stats,
    inspect_tokens,
    print_tokenizer_report,
)


def test_inspect_tokens(tokenizer):
    """Test each id is paired with its vocabulary symbol."""
    assert inspect_tokens(tokenizer, "Hello my lady") == [
        (516, "hello</w>"),
        (517, "my</w>"),
        (520, "lady</w>"),
    ]


def test_get_tokenizer_stats(bpe_path):
    """Test counts and truncation against the context length."""
    tokenizer = SimpleTokenizer(bpe_path=str(bpe_path), context_length=4)
    texts = ["hello", "hello my lady", "test"]

    stats = get_tokenizer_stats(tokenizer, texts)

    assert stats["vocab_size"] == 526
    assert stats["context_length"] == 4
    assert stats["total_texts"] == 3
    assert stats["total_characters"] == 5 + 13 + 4
    assert stats["total_tokens"] == 5
    assert stats["max_tokens"] == 3
    assert stats["avg_tokens_per_text"] == pytest.approx(5 / 3)
    assert stats["avg_chars_per_token"] == pytest.approx(22 / 5)
    assert stats["truncated_texts"] == 1
    assert stats["truncation_rate"] == pytest.approx(1 / 3)
    # two special tokens plus hello, my, lady, test
    assert stats["cache_size"] == 6


def test_get_tokenizer_stats_empty(tokenizer):
    """Test an empty corpus gives zero averages."""
    stats = get_tokenizer_stats(tokenizer, [])

    assert stats["total_texts"] == 0
    assert stats["avg_tokens_per_text"] == 0
    assert stats["avg_chars_per_token"] == 0
    assert stats["truncation_rate"] == 0
    assert stats["cache_size"] == 2


def test_print_tokenizer_report(tokenizer, capsys):
    """Test the report shows ids, subwords and the decoded text."""
    print_tokenizer_report(tokenizer, ["hello my"])

    out = capsys.readouterr().out
    assert "Tokens (2): [516, 517]" in out
    assert "'hello</w>'" in out
    assert "Decoded: 'hello my '" in out
