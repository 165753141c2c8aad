"""
Tokenizer configuration.

Options can be given directly, as a dictionary (snake_case or the camelCase
names used by the JavaScript CLIP ports) or as a YAML file:

    context_length: 77
    clean: lower
    reduction_mask: random
    seed: 0
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..exceptions import ConfigurationError
from .normalizer import CleanStrategy
from .reduction import ReductionStrategy
from .vocab import (
    DEFAULT_VOCAB_SIZE,
    NUM_BYTE_SYMBOLS,
    NUM_REQUIRED_SPECIAL_TOKENS,
    bundled_bpe_path,
)

DEFAULT_CONTEXT_LENGTH = 77  # OpenAI CLIP text encoder

_CAMEL_CASE_ALIASES = {
    "bpePath": "bpe_path",
    "additionalSpecialTokens": "additional_special_tokens",
    "contextLength": "context_length",
    "reductionMask": "reduction_mask",
    "vocabSize": "vocab_size",
    "keepPunctuationExactString": "keep_punctuation_exact_string",
}


@dataclass
class TokenizerConfig:
    """Configuration for SimpleTokenizer."""

    bpe_path: Optional[str] = None  # None = bundled CLIP merges
    additional_special_tokens: List[str] = field(default_factory=list)
    context_length: int = DEFAULT_CONTEXT_LENGTH
    clean: str = CleanStrategy.LOWER.value
    reduction_mask: Optional[str] = None  # simple | random | shuffle | syntax
    vocab_size: int = DEFAULT_VOCAB_SIZE  # caps the number of merges read
    keep_punctuation_exact_string: Optional[str] = None  # canonicalize only
    seed: Optional[int] = None  # RNG seed for random reductions

    def __post_init__(self):
        if self.bpe_path is not None:
            self.bpe_path = str(self.bpe_path)
        if isinstance(self.clean, CleanStrategy):
            self.clean = self.clean.value
        if isinstance(self.reduction_mask, ReductionStrategy):
            self.reduction_mask = self.reduction_mask.value
        self.additional_special_tokens = list(self.additional_special_tokens or [])

    @property
    def resolved_bpe_path(self) -> Path:
        return Path(self.bpe_path) if self.bpe_path else bundled_bpe_path()

    def validate(self) -> "TokenizerConfig":
        """
        Check option values.

        Returns:
            self, to allow chaining

        Raises:
            ConfigurationError: If any option is invalid
        """
        CleanStrategy.from_name(self.clean)
        ReductionStrategy.from_name(self.reduction_mask)

        if not isinstance(self.context_length, int) or self.context_length < 2:
            raise ConfigurationError(
                f"context_length must be an integer >= 2, got {self.context_length!r}",
                option="context_length",
            )
        min_vocab = NUM_BYTE_SYMBOLS + NUM_REQUIRED_SPECIAL_TOKENS
        if not isinstance(self.vocab_size, int) or self.vocab_size <= min_vocab:
            raise ConfigurationError(
                f"vocab_size must be an integer > {min_vocab}, got {self.vocab_size!r}",
                option="vocab_size",
            )
        if not all(isinstance(t, str) and t for t in self.additional_special_tokens):
            raise ConfigurationError(
                "additional_special_tokens must be non-empty strings",
                option="additional_special_tokens",
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "TokenizerConfig":
        """
        Create a config from a dictionary.

        Args:
            config_dict: Options keyed by field name or camelCase alias

        Returns:
            TokenizerConfig

        Raises:
            ConfigurationError: On unknown keys
        """
        valid = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in config_dict.items():
            name = _CAMEL_CASE_ALIASES.get(key, key)
            if name not in valid:
                raise ConfigurationError(
                    f"Unknown tokenizer option {key!r}",
                    option=key,
                    available=sorted(valid),
                )
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "TokenizerConfig":
        """
        Load a config from a YAML file.

        Args:
            path: Path to a YAML mapping of options

        Returns:
            TokenizerConfig
        """
        with open(path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f) or {}

        if not isinstance(config_dict, dict):
            raise ConfigurationError(
                f"Tokenizer config must be a mapping, got {type(config_dict).__name__}",
                option=str(path),
            )
        return cls.from_dict(config_dict)

    def replace(self, **overrides: Any) -> "TokenizerConfig":
        """Return a copy with some options overridden (aliases accepted)."""
        merged = self.to_dict()
        merged.update(overrides)
        return self.from_dict(merged)
