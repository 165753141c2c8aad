"""
Content-reduction strategies for inputs longer than the context window.

Instead of cutting an oversized text at the end, a reduction strategy picks
which ``context_length - 2`` tokens to keep (two slots are reserved for the
start and end markers):

- simple: a random contiguous window
- random: random tokens, original order kept
- shuffle: random tokens, in the order they were drawn
- syntax: whole words chosen by part of speech (nouns, then adjectives,
  then verbs, then the rest), original order kept

The syntax strategy needs a part-of-speech tagger. Any object with a
``tag(tokens) -> tags`` method works; NltkPosTagger is used by default.
"""

from enum import Enum
from functools import partial
from typing import Callable, List, Optional, Protocol, Sequence

import numpy as np
import regex as re

from ..exceptions import ConfigurationError

_WORD_RE = re.compile(r"\w+")


class ReductionStrategy(str, Enum):
    """Oversized-input reduction strategies."""
    SIMPLE = "simple"
    RANDOM = "random"
    SHUFFLE = "shuffle"
    SYNTAX = "syntax"

    @classmethod
    def from_name(
        cls, name: "Optional[str | ReductionStrategy]"
    ) -> "Optional[ReductionStrategy]":
        """Resolve a strategy name; None disables reduction."""
        if name is None:
            return None
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(
                f"Unknown reduction strategy {name!r}",
                option="reduction_mask",
                available=[s.value for s in cls],
            ) from None


class PosTagger(Protocol):
    """Part-of-speech tagging collaborator used by the syntax strategy."""

    def tag(self, tokens: List[str]) -> List[str]:
        """Return one Penn Treebank tag per token."""
        ...


class NltkPosTagger:
    """
    POS tagger backed by NLTK's averaged perceptron tagger.

    Note: Requires ``nltk`` and its tagger data to be installed:
        pip install nltk
        python -m nltk.downloader averaged_perceptron_tagger_eng
    """

    def __init__(self, lang: str = "eng"):
        try:
            import nltk
        except ImportError:
            raise ImportError(
                "The 'syntax' reduction strategy requires 'nltk'. "
                "Install with: pip install nltk"
            )
        self._nltk = nltk
        self.lang = lang

    def tag(self, tokens: List[str]) -> List[str]:
        if not tokens:
            return []
        return [tag for _, tag in self._nltk.pos_tag(tokens, lang=self.lang)]


def syntax_order(tag: str) -> int:
    """Priority class of a POS tag; lower is kept first."""
    if tag.startswith("NN"):
        return 1
    if tag.startswith("JJ"):
        return 2
    if tag.startswith("VB"):
        return 3
    return 4


def simple_reduce(ids: Sequence[int], num_keep: int, rng: np.random.Generator) -> List[int]:
    """Keep a random contiguous window of ``num_keep`` ids."""
    ids = list(ids)
    if len(ids) <= num_keep:
        return ids
    start = int(rng.integers(0, len(ids) - num_keep + 1))
    return ids[start:start + num_keep]


def random_reduce(
    ids: Sequence[int],
    num_keep: int,
    rng: np.random.Generator,
    shuffle: bool = False,
) -> List[int]:
    """
    Keep ``num_keep`` ids chosen uniformly without replacement.

    Args:
        ids: Encoded ids
        num_keep: Number of ids to keep
        rng: Random generator
        shuffle: If True, keep the draw order instead of the original order

    Returns:
        Reduced ids
    """
    ids = list(ids)
    if len(ids) <= num_keep:
        return ids
    indices = rng.choice(len(ids), size=num_keep, replace=False)
    if not shuffle:
        indices = np.sort(indices)
    return [ids[int(i)] for i in indices]


def syntax_reduce_text(text: str, num_keep: int, tagger: PosTagger) -> str:
    """
    Reduce text to at most ``num_keep`` words, preferring nouns.

    Words are ranked by POS class; ties keep their original order. The kept
    words are returned in original order, joined by single spaces.
    """
    words = _WORD_RE.findall(text)
    tags = tagger.tag(words)
    if len(tags) != len(words):
        raise ValueError(
            f"POS tagger returned {len(tags)} tags for {len(words)} tokens"
        )

    # sorted() is stable, so equal classes keep their positions
    ranked = sorted(range(len(words)), key=lambda i: syntax_order(tags[i]))
    kept = sorted(ranked[:num_keep])
    return " ".join(words[i] for i in kept)


_ID_REDUCTIONS = {
    ReductionStrategy.SIMPLE: simple_reduce,
    ReductionStrategy.RANDOM: random_reduce,
    ReductionStrategy.SHUFFLE: partial(random_reduce, shuffle=True),
}


def reduce_tokens(
    strategy: ReductionStrategy,
    text: str,
    encode_fn: Callable[[str], List[int]],
    num_keep: int,
    rng: np.random.Generator,
    tagger: Optional[PosTagger] = None,
) -> List[int]:
    """
    Encode ``text`` and reduce it with ``strategy``.

    The syntax strategy reduces words before encoding, so its output can still
    exceed ``num_keep`` ids and relies on the packer's truncation.

    Args:
        strategy: Reduction strategy
        text: Raw input text
        encode_fn: Text -> ids (cleaning included)
        num_keep: Number of ids to keep (context length - 2)
        rng: Random generator for the random strategies
        tagger: POS tagger, required for the syntax strategy

    Returns:
        Ids without start/end markers
    """
    if strategy is ReductionStrategy.SYNTAX:
        if tagger is None:
            raise ConfigurationError(
                "The 'syntax' reduction strategy needs a POS tagger",
                option="reduction_mask",
            )
        return encode_fn(syntax_reduce_text(text, num_keep, tagger))

    return _ID_REDUCTIONS[strategy](encode_fn(text), num_keep, rng)
