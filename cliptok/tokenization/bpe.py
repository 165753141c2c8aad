"""
BPE merge engine.

Applies ranked merge rules to a single byte-encoded chunk until no adjacent
pair has a rank. The last character of every chunk carries the end-of-word
marker, so the same letters merge differently at the end of a word than in the
middle of one.

Results are memoized per instance: the set of distinct words seen in practice
is small compared to the number of calls.
"""

import threading
from typing import Dict, Iterable, List, Tuple

from .vocab import END_OF_WORD, MergePair


def get_pairs(word: List[str]) -> List[MergePair]:
    """
    Return adjacent symbol pairs of a word, left to right.

    Args:
        word: Sequence of symbols (variable-length strings)

    Returns:
        List of (left, right) pairs; empty for words shorter than two symbols
    """
    return [(word[i], word[i + 1]) for i in range(len(word) - 1)]


def merge_pair(word: List[str], pair: MergePair) -> List[str]:
    """Merge every non-overlapping occurrence of ``pair``, scanning left to right."""
    first, second = pair
    new_word = []
    i = 0

    while i < len(word):
        try:
            j = word.index(first, i)
        except ValueError:
            new_word.extend(word[i:])
            break

        new_word.extend(word[i:j])
        if j < len(word) - 1 and word[j + 1] == second:
            new_word.append(first + second)
            i = j + 2
        else:
            new_word.append(word[j])
            i = j + 1

    return new_word


class BPEMerger:
    """
    Rank-ordered BPE merging with an instance-owned cache.

    Args:
        bpe_ranks: Merge pair -> rank (lower merges first)
        special_tokens: Tokens that bypass merging entirely

    Example:
        >>> merger = BPEMerger({("h", "i</w>"): 0})
        >>> merger.merge("hi")
        'hi</w>'
        >>> merger.merge("ho")
        'h o</w>'
    """

    def __init__(self, bpe_ranks: Dict[MergePair, int], special_tokens: Iterable[str] = ()):
        self.bpe_ranks = bpe_ranks
        # Special tokens map to themselves so they are never split
        self.cache: Dict[str, str] = {token: token for token in special_tokens}
        self._lock = threading.Lock()

    def _rank(self, pair: MergePair) -> float:
        return self.bpe_ranks.get(pair, float("inf"))

    def merge(self, token: str) -> str:
        """
        Merge a byte-encoded chunk into vocabulary symbols.

        Args:
            token: Chunk already mapped through the byte codec

        Returns:
            Merged symbols joined by single spaces, the last one ending in
            the end-of-word marker
        """
        if not token:
            return ""

        cached = self.cache.get(token)
        if cached is not None:
            return cached

        word = list(token[:-1]) + [token[-1] + END_OF_WORD]
        pairs = get_pairs(word)

        if not pairs:
            return token + END_OF_WORD

        while True:
            # min() keeps the first of equally ranked pairs
            bigram = min(pairs, key=self._rank)
            if bigram not in self.bpe_ranks:
                break

            word = merge_pair(word, bigram)
            if len(word) == 1:
                break
            pairs = get_pairs(word)

        result = " ".join(word)
        with self._lock:
            self.cache[token] = result
        return result

    def merge_symbols(self, token: str) -> List[str]:
        """Like merge(), but return the symbols as a list."""
        merged = self.merge(token)
        return merged.split(" ") if merged else []

    def clear_cache(self, keep: Tuple[str, ...] = ()) -> None:
        """Drop memoized results, keeping the entries listed in ``keep``."""
        with self._lock:
            self.cache = {token: self.cache[token] for token in keep if token in self.cache}

    def cache_info(self) -> Dict[str, int]:
        return {"size": len(self.cache)}

    def __repr__(self) -> str:
        return f"BPEMerger(merges={len(self.bpe_ranks)}, cached={len(self.cache)})"
