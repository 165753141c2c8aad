"""
Unit tests for merge loading and vocabulary construction.
"""

import gzip

import pytest

from conftest import TEST_MERGES, write_merge_file
from cliptok.exceptions import VocabularyLoadError
from cliptok.tokenization.byte_codec import ByteCodec
from cliptok.tokenization.vocab import (
    Vocabulary,
    default_bpe_path,
    max_merges_for,
    read_bpe_merges,
)


class TestReadBPEMerges:
    """Test suite for read_bpe_merges."""

    def test_reads_pairs_in_order(self, bpe_path):
        """Test header is skipped and pairs keep file order."""
        merges = read_bpe_merges(bpe_path)

        assert len(merges) == len(TEST_MERGES)
        assert merges[0] == ("h", "e")
        assert merges[-1] == ("te", "st</w>")

    def test_max_merges_caps_lines(self, bpe_path):
        """Test only the first max_merges lines after the header are used."""
        merges = read_bpe_merges(bpe_path, max_merges=3)

        assert merges == [("h", "e"), ("l", "l"), ("l", "o</w>")]

    def test_blank_lines_count_towards_cap(self, tmp_path):
        """Test blank lines are skipped but still consume the cap."""
        path = write_merge_file(tmp_path / "blank.txt.gz", ["h e", "", "l l"])

        assert read_bpe_merges(path, max_merges=2) == [("h", "e")]
        assert read_bpe_merges(path) == [("h", "e"), ("l", "l")]

    def test_clip_merge_cap(self):
        """Test the default CLIP vocabulary size reads 48894 merges."""
        assert max_merges_for(49152) == 48894

    def test_missing_file(self, tmp_path):
        """Test a missing file raises VocabularyLoadError."""
        missing = tmp_path / "missing.txt.gz"

        with pytest.raises(VocabularyLoadError) as exc_info:
            read_bpe_merges(missing)

        assert exc_info.value.path == str(missing)
        assert isinstance(exc_info.value, OSError)

    def test_not_gzip(self, tmp_path):
        """Test a plain text file is rejected."""
        path = tmp_path / "plain.txt.gz"
        path.write_text("#version: 0.2\nh e\n", encoding="utf-8")

        with pytest.raises(VocabularyLoadError):
            read_bpe_merges(path)

    def test_malformed_line(self, tmp_path):
        """Test a line that is not a pair raises VocabularyLoadError."""
        path = write_merge_file(tmp_path / "bad.txt.gz", ["h e", "a b c"])

        with pytest.raises(VocabularyLoadError) as exc_info:
            read_bpe_merges(path)

        assert "line 3" in str(exc_info.value)

    def test_invalid_utf8(self, tmp_path):
        """Test undecodable content raises VocabularyLoadError."""
        path = tmp_path / "latin1.txt.gz"
        with gzip.open(path, "wb") as f:
            f.write(b"#version: 0.2\n\xff \xfe\n")

        with pytest.raises(VocabularyLoadError):
            read_bpe_merges(path)


class TestVocabulary:
    """Test suite for Vocabulary."""

    def test_layout(self, bpe_path):
        """Test base symbols, end-of-word symbols, merges, then special tokens."""
        vocab = Vocabulary.from_file(bpe_path, ["<start_of_text>", "<end_of_text>"])
        codec = ByteCodec()

        assert len(vocab) == 256 * 2 + len(TEST_MERGES) + 2
        assert vocab.symbols[:256] == codec.symbols
        assert vocab.symbols[256:512] == [s + "</w>" for s in codec.symbols]
        assert vocab.symbols[512] == "he"
        assert vocab.encoder["hello</w>"] == 516
        assert vocab.encoder["<start_of_text>"] == 524
        assert vocab.encoder["<end_of_text>"] == 525

    def test_ids_are_contiguous(self, bpe_path):
        """Test ids are exactly 0..N-1 and decoder inverts encoder."""
        vocab = Vocabulary.from_file(bpe_path, ["<start_of_text>", "<end_of_text>", "<mask>"])

        assert sorted(vocab.decoder) == list(range(len(vocab)))
        for symbol, idx in vocab.encoder.items():
            assert vocab.decoder[idx] == symbol

    def test_merge_ranks(self, bpe_path):
        """Test ranks follow merge order."""
        vocab = Vocabulary.from_file(bpe_path, [])

        assert vocab.bpe_ranks[("h", "e")] == 0
        assert vocab.bpe_ranks[("te", "st</w>")] == len(TEST_MERGES) - 1
        assert vocab.num_merges == len(TEST_MERGES)

    def test_vocab_size_caps_merges(self, bpe_path):
        """Test vocab_size limits the number of merges."""
        vocab = Vocabulary.from_file(bpe_path, ["<start_of_text>", "<end_of_text>"], vocab_size=261)

        assert vocab.num_merges == 3
        assert len(vocab) == 512 + 3 + 2

    def test_duplicate_special_tokens(self):
        """Test repeated special tokens get a single id."""
        vocab = Vocabulary.build(ByteCodec(), [], ["<a>", "<b>", "<a>"])

        assert vocab.special_tokens == ["<a>", "<b>"]
        assert len(vocab) == 514

    def test_special_token_already_in_vocab(self):
        """Test a special token equal to a base symbol gets its own id."""
        vocab = Vocabulary.build(ByteCodec(), [], ["!"])

        assert len(vocab) == 513
        assert vocab.token_to_id("!") == 512
        assert vocab.id_to_token(0) == "!"
        assert vocab.id_to_token(512) == "!"

    def test_lookups(self, bpe_path):
        """Test token_to_id and id_to_token for known and unknown entries."""
        vocab = Vocabulary.from_file(bpe_path, [])

        assert vocab.token_to_id("my</w>") == 517
        assert vocab.id_to_token(517) == "my</w>"
        assert vocab.token_to_id("nope") is None
        assert vocab.id_to_token(10**6) is None
        assert "lady</w>" in vocab


def test_default_bpe_path():
    """Test the bundled merge file location."""
    path = default_bpe_path()

    assert path.name == "bpe_simple_vocab_16e6.txt.gz"
    assert path.parent.name == "data"
