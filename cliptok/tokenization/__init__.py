"""
Tokenization module.

Provides the CLIP byte-level BPE tokenizer and its building blocks:
- Byte-to-unicode codec
- Merge table and vocabulary loading
- Text cleaning and segmentation
- BPE merging, packing and content reduction
"""

from .byte_codec import ByteCodec, bytes_to_unicode
from .vocab import Vocabulary, bundled_bpe_path, default_bpe_path, read_bpe_merges
from .normalizer import CleanStrategy, get_clean_fn
from .segmenter import Segmenter
from .bpe import BPEMerger
from .reduction import NltkPosTagger, PosTagger, ReductionStrategy
from .packing import pack_token_ids
from .config import TokenizerConfig
from .simple_tokenizer import SimpleTokenizer, SOT_TOKEN, EOT_TOKEN

__all__ = [
    'ByteCodec',
    'bytes_to_unicode',
    'Vocabulary',
    'bundled_bpe_path',
    'default_bpe_path',
    'read_bpe_merges',
    'CleanStrategy',
    'get_clean_fn',
    'Segmenter',
    'BPEMerger',
    'NltkPosTagger',
    'PosTagger',
    'ReductionStrategy',
    'pack_token_ids',
    'TokenizerConfig',
    'SimpleTokenizer',
    'SOT_TOKEN',
    'EOT_TOKEN',
]
