"""
Vocabulary and merge table loading.

The merge artifact is a gzip-compressed UTF-8 text file:

    #version: 0.2
    i n
    t h
    a n</w>
    ...

Line 1 is a version header and is skipped. Every following non-blank line is a
merge rule; its position gives its rank (earlier = applied first).

The vocabulary is then laid out in a fixed order, which is what makes token
ids compatible with published CLIP checkpoints:

1. 256 byte symbols
2. The same 256 symbols with the end-of-word marker
3. One merged symbol per merge rule
4. Special tokens
"""

import gzip
import logging
import zlib
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..exceptions import VocabularyLoadError
from .byte_codec import ByteCodec

logger = logging.getLogger(__name__)

END_OF_WORD = "</w>"
DEFAULT_VOCAB_SIZE = 49152
NUM_BYTE_SYMBOLS = 256
NUM_REQUIRED_SPECIAL_TOKENS = 2

MergePair = Tuple[str, str]


def default_bpe_path() -> Path:
    """Location of the bundled CLIP merge file."""
    return Path(__file__).parent / "data" / "bpe_simple_vocab_16e6.txt.gz"


def bundled_bpe_path() -> Path:
    """
    Return the bundled CLIP merge file.

    Raises:
        VocabularyLoadError: If the merge file has not been installed
    """
    path = default_bpe_path()
    if not path.is_file():
        raise VocabularyLoadError(
            "Bundled CLIP merges are not installed. Download "
            "bpe_simple_vocab_16e6.txt.gz from the OpenAI CLIP repository to this "
            "location, or pass bpe_path",
            path=str(path),
        )
    return path


def max_merges_for(vocab_size: int) -> int:
    """Number of merge lines to consume for a target vocabulary size."""
    return vocab_size - NUM_BYTE_SYMBOLS - NUM_REQUIRED_SPECIAL_TOKENS


def read_bpe_merges(
    bpe_path: Union[str, Path], max_merges: Optional[int] = None
) -> List[MergePair]:
    """
    Read ranked merge rules from a gzip-compressed merge file.

    Args:
        bpe_path: Path to the ``.txt.gz`` merge file
        max_merges: Number of lines after the header to consider (blank lines
            count towards the cap). None reads the whole file.

    Returns:
        List of merge pairs in rank order

    Raises:
        VocabularyLoadError: If the file is missing, not gzip, not UTF-8, or
            contains a line that is not a pair of symbols
    """
    bpe_path = Path(bpe_path)
    try:
        with gzip.open(bpe_path, "rb") as f:
            content = f.read().decode("utf-8")
    except FileNotFoundError:
        raise VocabularyLoadError("BPE merge file not found", path=str(bpe_path)) from None
    except (OSError, EOFError, zlib.error, UnicodeDecodeError) as e:
        raise VocabularyLoadError(
            f"Could not read BPE merge file: {e}", path=str(bpe_path)
        ) from e

    lines = content.split("\n")
    # Skip the "#version" header
    end = None if max_merges is None else max_merges + 1
    lines = lines[1:end]

    merges = []
    for line_num, line in enumerate(lines, start=2):
        if not line.strip():
            continue
        parts = line.split()
        if len(parts) != 2:
            raise VocabularyLoadError(
                f"Malformed merge rule on line {line_num}: {line!r}", path=str(bpe_path)
            )
        merges.append((parts[0], parts[1]))

    return merges


class Vocabulary:
    """
    Ordered symbol table with contiguous ids and merge ranks.

    Built once from a byte codec, a ranked merge list and the special tokens,
    and read-only afterwards.

    Attributes:
        symbols: Symbols in id order
        encoder: Symbol -> id
        decoder: Id -> symbol
        bpe_ranks: Merge pair -> rank (0 = highest priority)
        special_tokens: Special tokens in the order they were registered
    """

    def __init__(
        self,
        symbols: List[str],
        bpe_ranks: Dict[MergePair, int],
        special_tokens: List[str],
    ):
        self.symbols = symbols
        # A symbol listed twice maps to its last id, so special tokens win
        self.encoder: Dict[str, int] = {symbol: idx for idx, symbol in enumerate(symbols)}
        self.decoder: Dict[int, str] = dict(enumerate(symbols))
        self.bpe_ranks = bpe_ranks
        self.special_tokens = special_tokens

    @classmethod
    def build(
        cls,
        codec: ByteCodec,
        merges: List[MergePair],
        special_tokens: Iterable[str],
    ) -> "Vocabulary":
        """
        Lay out the vocabulary in CLIP order.

        Args:
            codec: Byte codec providing the 256 base symbols
            merges: Merge pairs in rank order
            special_tokens: Special tokens appended at the end

        Returns:
            Vocabulary
        """
        symbols = codec.symbols
        symbols = symbols + [s + END_OF_WORD for s in symbols]
        for first, second in merges:
            symbols.append(first + second)

        specials = []
        for token in special_tokens:
            if token in specials:
                continue
            # Always appended, even when the text is already a symbol
            specials.append(token)
            symbols.append(token)

        bpe_ranks = {pair: rank for rank, pair in enumerate(merges)}
        return cls(symbols, bpe_ranks, specials)

    @classmethod
    def from_file(
        cls,
        bpe_path: Union[str, Path],
        special_tokens: Iterable[str],
        vocab_size: int = DEFAULT_VOCAB_SIZE,
        codec: Optional[ByteCodec] = None,
    ) -> "Vocabulary":
        """
        Load merges from disk and build the vocabulary.

        Args:
            bpe_path: Path to the gzip merge file
            special_tokens: Special tokens appended at the end
            vocab_size: Target size; caps the number of merges read
            codec: Byte codec (a fresh one is created when omitted)

        Returns:
            Vocabulary
        """
        codec = codec or ByteCodec()
        merges = read_bpe_merges(bpe_path, max_merges_for(vocab_size))
        vocab = cls.build(codec, merges, special_tokens)
        logger.info(
            f"Loaded {len(merges)} merges from {bpe_path} (vocabulary size: {len(vocab)})"
        )
        return vocab

    def token_to_id(self, symbol: str) -> Optional[int]:
        return self.encoder.get(symbol)

    def id_to_token(self, token_id: int) -> Optional[str]:
        return self.decoder.get(token_id)

    @property
    def num_merges(self) -> int:
        return len(self.bpe_ranks)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self.encoder

    def __len__(self) -> int:
        return len(self.symbols)

    def __repr__(self) -> str:
        return (
            f"Vocabulary(size={len(self)}, "
            f"merges={self.num_merges}, "
            f"special_tokens={len(self.special_tokens)})"
        )
