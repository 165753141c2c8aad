"""
Text cleaning strategies applied before segmentation.

Three interchangeable strategies, all pure functions of the input text:

- whitespace: fix mojibake, decode HTML entities, NFKC, collapse whitespace
- lower (default): same as whitespace, then lowercase
- canonicalize: same base cleaning, then strip ASCII punctuation, lowercase

The shared base cleaning runs ``ftfy.fix_text`` first, which rewrites more
than entities and whitespace: it repairs mojibake (``"cafÃ©"`` becomes
``"café"``), straightens curly quotes (``"don’t"`` becomes ``"don't"``),
expands Latin ligatures and decodes numeric entities (``"&#xFB01;"`` becomes
``"fi"``). NFKC is applied after the entity decoding, so decoded entities are
normalized too.
"""

import html
import string
import unicodedata
from enum import Enum
from functools import partial
from typing import Callable, Optional

import ftfy
import regex as re

from ..exceptions import ConfigurationError

CleanFn = Callable[[str], str]

PUNCTUATION = string.punctuation
_PUNCTUATION_RE = re.compile(f"[{re.escape(PUNCTUATION)}]")
_WHITESPACE_RE = re.compile(r"\s+")


class CleanStrategy(str, Enum):
    """Text cleaning strategies."""
    WHITESPACE = "whitespace"
    LOWER = "lower"
    CANONICALIZE = "canonicalize"

    @classmethod
    def from_name(cls, name: "str | CleanStrategy") -> "CleanStrategy":
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(
                f"Unknown clean strategy {name!r}",
                option="clean",
                available=[s.value for s in cls],
            ) from None


def basic_clean(text: str) -> str:
    """
    Repair encoding errors and decode HTML entities.

    Entities are decoded twice so double-escaped input like ``&amp;quot;``
    ends up as ``"``.
    """
    text = ftfy.fix_text(text)
    text = html.unescape(html.unescape(text))
    text = unicodedata.normalize("NFKC", text)
    return text.strip()


def whitespace_clean(text: str) -> str:
    """Collapse whitespace runs into single spaces."""
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def canonicalize_text(text: str, keep_punctuation_exact_string: Optional[str] = None) -> str:
    """
    Lowercase text and remove punctuation.

    Args:
        text: Text to canonicalize
        keep_punctuation_exact_string: If given, occurrences of this exact string
            are kept while its characters are still removed elsewhere. For
            example ``"{}"`` keeps every ``{}`` but drops lone ``{`` and ``}``.

    Returns:
        Canonicalized text

    Example:
        >>> canonicalize_text("Hello, world!")
        'hello world'
    """
    text = text.replace("_", " ")
    if keep_punctuation_exact_string:
        text = keep_punctuation_exact_string.join(
            _PUNCTUATION_RE.sub("", part)
            for part in text.split(keep_punctuation_exact_string)
        )
    else:
        text = _PUNCTUATION_RE.sub("", text)
    text = text.lower()
    return whitespace_clean(text)


def clean_whitespace(text: str) -> str:
    return whitespace_clean(basic_clean(text))


def clean_lower(text: str) -> str:
    return whitespace_clean(basic_clean(text)).lower()


def clean_canonicalize(text: str, keep_punctuation_exact_string: Optional[str] = None) -> str:
    return canonicalize_text(basic_clean(text), keep_punctuation_exact_string)


_CLEAN_FUNCTIONS = {
    CleanStrategy.WHITESPACE: clean_whitespace,
    CleanStrategy.LOWER: clean_lower,
    CleanStrategy.CANONICALIZE: clean_canonicalize,
}


def get_clean_fn(
    strategy: "str | CleanStrategy" = CleanStrategy.LOWER,
    keep_punctuation_exact_string: Optional[str] = None,
) -> CleanFn:
    """
    Return the cleaning function for a strategy.

    Args:
        strategy: Strategy name or enum member
        keep_punctuation_exact_string: Only used by the canonicalize strategy

    Returns:
        Callable mapping raw text to cleaned text

    Raises:
        ConfigurationError: If the strategy name is unknown
    """
    strategy = CleanStrategy.from_name(strategy)
    fn = _CLEAN_FUNCTIONS[strategy]
    if strategy is CleanStrategy.CANONICALIZE and keep_punctuation_exact_string:
        return partial(fn, keep_punctuation_exact_string=keep_punctuation_exact_string)
    return fn
