"""
CLIP Simple Tokenizer.

Byte-level BPE tokenizer compatible with the vocabulary published with OpenAI
CLIP (``bpe_simple_vocab_16e6.txt.gz``):

- Text is cleaned (HTML entities, unicode normalization, case folding)
- Cleaned text is split into word-like chunks, special tokens kept whole
- Each chunk is byte-encoded and merged with the ranked BPE merge rules
- Ids are wrapped with start/end-of-text markers and packed into a fixed
  ``[batch, context_length]`` int32 buffer

Technical References:
    - Sennrich et al., 2016. "Neural Machine Translation of Rare Words with
      Subword Units" ACL 2016 (BPE foundation)
    - Radford et al., 2021. "Learning Transferable Visual Models From Natural
      Language Supervision" (CLIP)
"""

import logging
import numbers
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union

import numpy as np
import torch

from .bpe import BPEMerger
from .byte_codec import ByteCodec
from .config import TokenizerConfig
from .normalizer import get_clean_fn
from .packing import pack_token_ids, to_tensor, unpack_row
from .reduction import NltkPosTagger, PosTagger, ReductionStrategy, reduce_tokens
from .segmenter import Segmenter
from .vocab import END_OF_WORD, Vocabulary
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SOT_TOKEN = "<start_of_text>"
EOT_TOKEN = "<end_of_text>"

TokenIds = Union[Sequence[int], np.ndarray, torch.Tensor]


class SimpleTokenizer:
    """
    CLIP byte-level BPE tokenizer.

    Args:
        config: Tokenizer configuration (defaults to TokenizerConfig())
        tagger: POS tagger for the 'syntax' reduction strategy
        **overrides: Config options overriding ``config`` (snake_case or
            camelCase names)

    Example:
        >>> tokenizer = SimpleTokenizer(context_length=77)
        >>> batch = tokenizer.tokenize(["a photo of a cat", "a dog"])
        >>> batch.shape
        (2, 77)
        >>> tokenizer.decode(tokenizer.encode("a photo of a cat"))
        'a photo of a cat '
    """

    def __init__(
        self,
        config: Optional[TokenizerConfig] = None,
        *,
        tagger: Optional[PosTagger] = None,
        **overrides: Any,
    ):
        config = config or TokenizerConfig()
        if overrides:
            config = config.replace(**overrides)
        self.config = config.validate()
        self.context_length = config.context_length

        self.sot_token = SOT_TOKEN
        self.eot_token = EOT_TOKEN
        self.special_tokens = [SOT_TOKEN, EOT_TOKEN] + list(config.additional_special_tokens)

        self.codec = ByteCodec()
        self.vocab = Vocabulary.from_file(
            config.resolved_bpe_path,
            self.special_tokens,
            vocab_size=config.vocab_size,
            codec=self.codec,
        )
        self.special_tokens = self.vocab.special_tokens
        self._special_set = frozenset(self.special_tokens)

        self.merger = BPEMerger(self.vocab.bpe_ranks, self.special_tokens)
        self.segmenter = Segmenter(self.special_tokens)

        self.sot_token_id = self.vocab.encoder[SOT_TOKEN]
        self.eot_token_id = self.vocab.encoder[EOT_TOKEN]
        self.all_special_ids = [self.vocab.encoder[t] for t in self.special_tokens]

        self.clean_fn = get_clean_fn(config.clean, config.keep_punctuation_exact_string)
        self.reduction = ReductionStrategy.from_name(config.reduction_mask)
        if self.reduction is ReductionStrategy.SYNTAX and tagger is None:
            tagger = NltkPosTagger()
        self.tagger = tagger
        self.rng = np.random.default_rng(config.seed)

        logger.debug(
            f"SimpleTokenizer ready: vocab={len(self.vocab)}, "
            f"context_length={self.context_length}, clean={config.clean}, "
            f"reduction={config.reduction_mask}"
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path], **kwargs: Any) -> "SimpleTokenizer":
        """Create a tokenizer from a YAML config file."""
        return cls(TokenizerConfig.from_yaml(path), **kwargs)

    def encode(self, text: str) -> List[int]:
        """
        Encode text to token ids (no start/end markers).

        Each chunk is byte-encoded from its UTF-8 bytes, as the published CLIP
        vocabulary was trained. Characters in U+0080..U+00FF therefore take two
        byte symbols (``"é"`` encodes as the symbols for 0xC3 and 0xA9), so ids
        for Latin-1 text differ from tokenizers that look up one symbol per
        UTF-16 code unit.

        Args:
            text: Raw text

        Returns:
            List of token ids; pieces missing from the vocabulary are skipped
        """
        if not isinstance(text, str):
            raise TypeError(f"encode() expects a str, got {type(text).__name__}")

        text = self.clean_fn(text)
        bpe_tokens = []

        for token in self.segmenter.split(text):
            if token in self._special_set:
                bpe_tokens.append(self.vocab.encoder[token])
                continue

            # Byte-level representation of the chunk
            encoded = self.codec.encode_bytes(token.encode("utf-8"))
            for piece in self.merger.merge_symbols(encoded):
                token_id = self.vocab.token_to_id(piece)
                if token_id is not None:
                    bpe_tokens.append(token_id)

        return bpe_tokens

    def tokenize(
        self,
        texts: Union[str, Sequence[str]],
        context_length: Optional[int] = None,
        return_tensors: Optional[str] = "np",
    ) -> Union[np.ndarray, torch.Tensor]:
        """
        Tokenize text(s) into a fixed-shape batch.

        Each row is ``[sot, ids..., eot]`` followed by zeros. Rows that do not
        fit are cut to ``context_length`` with eot in the last slot, unless a
        reduction strategy is configured, in which case it picks the
        ``context_length - 2`` ids to keep.

        Args:
            texts: A string or a sequence of strings
            context_length: Row length (defaults to the configured one)
            return_tensors: "np" for a NumPy array, "pt" for a torch tensor

        Returns:
            int32 batch of shape (len(texts), context_length)
        """
        texts = self._as_text_list(texts)
        context_length = self._resolve_context_length(context_length)

        rows = []
        for text in texts:
            if self.reduction is None:
                ids = self.encode(text)
            else:
                ids = reduce_tokens(
                    self.reduction,
                    text,
                    self.encode,
                    num_keep=context_length - 2,
                    rng=self.rng,
                    tagger=self.tagger,
                )
            rows.append([self.sot_token_id] + ids + [self.eot_token_id])

        packed = pack_token_ids(rows, context_length, self.eot_token_id)
        return to_tensor(packed, return_tensors)

    __call__ = tokenize

    def decode(self, tokens: TokenIds) -> str:
        """
        Decode token ids to text.

        Decoding is lossy: unknown ids and non-codec characters are skipped,
        invalid UTF-8 is replaced, and every end-of-word marker becomes a
        single space.

        Args:
            tokens: Token ids (list, ndarray or tensor)

        Returns:
            Decoded text
        """
        token_ids = self._as_id_list(tokens)
        text = "".join(
            self.vocab.decoder[token_id]
            for token_id in token_ids
            if token_id in self.vocab.decoder
        )
        byte_array = self.codec.decode_symbols(text)
        return byte_array.decode("utf-8", errors="replace").replace(END_OF_WORD, " ")

    def batch_decode(
        self,
        batch: Iterable[TokenIds],
        skip_special_tokens: bool = True,
    ) -> List[str]:
        """
        Decode packed rows, dropping the padding after end-of-text.

        Args:
            batch: Rows of token ids, e.g. the output of tokenize()
            skip_special_tokens: Whether to drop special token ids

        Returns:
            One string per row
        """
        texts = []
        special_ids = set(self.all_special_ids)
        for row in batch:
            ids = unpack_row(row, self.eot_token_id)
            if skip_special_tokens:
                ids = [t for t in ids if t not in special_ids]
            texts.append(self.decode(ids))
        return texts

    def clear_cache(self) -> None:
        """Forget memoized BPE merges (special tokens stay pinned)."""
        self.merger.clear_cache(keep=tuple(self.special_tokens))

    def _resolve_context_length(self, context_length: Optional[int]) -> int:
        if context_length is None:
            return self.context_length
        if isinstance(context_length, bool) or not isinstance(context_length, int) or context_length < 2:
            raise ConfigurationError(
                f"context_length must be an integer >= 2, got {context_length!r}",
                option="context_length",
            )
        return context_length

    @staticmethod
    def _as_text_list(texts: Union[str, Sequence[str]]) -> List[str]:
        if isinstance(texts, str):
            return [texts]
        if isinstance(texts, (bytes, bytearray)) or not isinstance(texts, Sequence):
            raise TypeError(
                f"tokenize() expects a str or a sequence of str, got {type(texts).__name__}"
            )
        texts = list(texts)
        for i, text in enumerate(texts):
            if not isinstance(text, str):
                raise TypeError(
                    f"tokenize() expects a str or a sequence of str, "
                    f"got {type(text).__name__} at index {i}"
                )
        return texts

    @staticmethod
    def _as_id_list(tokens: TokenIds) -> List[int]:
        if isinstance(tokens, torch.Tensor):
            tokens = tokens.reshape(-1).tolist()
        elif isinstance(tokens, np.ndarray):
            tokens = tokens.ravel().tolist()
        elif isinstance(tokens, (str, bytes)):
            raise TypeError(f"decode() expects token ids, got {type(tokens).__name__}")

        token_ids = []
        for token_id in tokens:
            if isinstance(token_id, bool) or not isinstance(token_id, numbers.Integral):
                raise TypeError(
                    f"decode() expects integer token ids, got {type(token_id).__name__}"
                )
            token_ids.append(int(token_id))
        return token_ids

    @property
    def vocab_size(self) -> int:
        """Get vocabulary size."""
        return len(self.vocab)

    def get_vocab(self) -> dict:
        """Get vocabulary dictionary."""
        return self.vocab.encoder.copy()

    def __len__(self) -> int:
        """Return vocabulary size."""
        return len(self.vocab)

    def __repr__(self) -> str:
        return (
            f"SimpleTokenizer(vocab_size={len(self.vocab)}, "
            f"context_length={self.context_length}, "
            f"clean={self.config.clean!r}, "
            f"reduction_mask={self.config.reduction_mask!r})"
        )
