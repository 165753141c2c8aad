"""
cliptok: CLIP byte-level BPE text tokenizer.

Turns raw text into fixed-length token id batches for CLIP-style text
encoders and decodes ids back to text.
"""

from .exceptions import (
    ClipTokenizerError,
    VocabularyLoadError,
    ConfigurationError,
    ByteEncodingError,
)
from .tokenization import SimpleTokenizer, TokenizerConfig

__version__ = "0.1.0"

__all__ = [
    'SimpleTokenizer',
    'TokenizerConfig',
    'ClipTokenizerError',
    'VocabularyLoadError',
    'ConfigurationError',
    'ByteEncodingError',
]
