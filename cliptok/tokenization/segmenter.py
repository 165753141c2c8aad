"""
Pre-tokenization of cleaned text into word-like chunks.

Alternatives are tried in a fixed order at every position, so the order below
decides chunk boundaries and therefore the final token ids:

1. Special tokens (matched literally, never split)
2. English contractions: 's 't 're 've 'm 'll 'd
3. Runs of letters in any script
4. Single digits
5. Runs of anything that is not whitespace, a letter or a digit

Whitespace is never part of a chunk.
"""

from typing import Iterable, List

import regex as re

BASE_PATTERN = r"""'s|'t|'re|'ve|'m|'ll|'d|[\p{L}]+|[\p{N}]|[^\s\p{L}\p{N}]+"""


def build_pattern(special_tokens: Iterable[str] = ()) -> "re.Pattern":
    """
    Compile the segmentation pattern.

    Special tokens are escaped and tried longest first so a token that is a
    prefix of another cannot shadow it.
    """
    specials = sorted(set(special_tokens), key=len, reverse=True)
    alternatives = [re.escape(token) for token in specials]
    alternatives.append(BASE_PATTERN)
    return re.compile("|".join(alternatives), re.IGNORECASE)


class Segmenter:
    """
    Split text into chunks with the fixed-priority pattern.

    Example:
        >>> Segmenter(["<end_of_text>"]).split("it's 42 <end_of_text>!")
        ['it', "'s", '4', '2', '<end_of_text>', '!']
    """

    def __init__(self, special_tokens: Iterable[str] = ()):
        self.special_tokens = list(special_tokens)
        self.pattern = build_pattern(self.special_tokens)

    def split(self, text: str) -> List[str]:
        return self.pattern.findall(text)

    def __repr__(self) -> str:
        return f"Segmenter(special_tokens={self.special_tokens})"
