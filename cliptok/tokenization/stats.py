"""
Tokenizer inspection utilities.

Provides functions to:
- Show how a text is split into vocabulary symbols
- Measure token counts and truncation against the context length
- Print a quick encode/decode report for sample texts
"""

from typing import List, Tuple

from tqdm import tqdm

from .simple_tokenizer import SimpleTokenizer


def inspect_tokens(tokenizer: SimpleTokenizer, text: str) -> List[Tuple[int, str]]:
    """
    Return (id, symbol) for every piece of the encoded text.

    Example:
        >>> [symbol for _, symbol in inspect_tokens(tokenizer, "Hello, world")]
        ['hello</w>', ',</w>', 'world</w>']
    """
    return [(token_id, tokenizer.vocab.decoder[token_id]) for token_id in tokenizer.encode(text)]


def get_tokenizer_stats(
    tokenizer: SimpleTokenizer,
    texts: List[str],
    show_progress: bool = False,
) -> dict:
    """
    Get statistics about tokenizer behaviour on a corpus.

    Args:
        tokenizer: Tokenizer to analyze
        texts: List of texts to analyze
        show_progress: Whether to show a progress bar

    Returns:
        Dictionary with statistics
    """
    # sot + eot
    capacity = tokenizer.context_length - 2

    total_chars = 0
    total_tokens = 0
    max_tokens = 0
    truncated = 0

    for text in tqdm(texts, desc="Encoding", disable=not show_progress):
        num_tokens = len(tokenizer.encode(text))
        total_chars += len(text)
        total_tokens += num_tokens
        max_tokens = max(max_tokens, num_tokens)
        if num_tokens > capacity:
            truncated += 1

    return {
        "vocab_size": len(tokenizer),
        "context_length": tokenizer.context_length,
        "total_texts": len(texts),
        "total_characters": total_chars,
        "total_tokens": total_tokens,
        "max_tokens": max_tokens,
        "avg_tokens_per_text": total_tokens / len(texts) if texts else 0,
        "avg_chars_per_token": total_chars / total_tokens if total_tokens > 0 else 0,
        "truncated_texts": truncated,
        "truncation_rate": truncated / len(texts) if texts else 0,
        "cache_size": tokenizer.merger.cache_info()["size"],
    }


def print_tokenizer_report(tokenizer: SimpleTokenizer, texts: List[str]):
    """
    Print encoding/decoding results for sample texts.

    Args:
        tokenizer: Tokenizer to exercise
        texts: List of sample texts
    """
    print("\n" + "=" * 60)
    print("Tokenizer Report")
    print("=" * 60)

    for i, text in enumerate(texts, 1):
        print(f"\nText {i}: '{text}'")

        pieces = inspect_tokens(tokenizer, text)
        print(f"  Tokens ({len(pieces)}): {[token_id for token_id, _ in pieces]}")
        print(f"  Subwords: {[symbol for _, symbol in pieces]}")

        decoded = tokenizer.decode([token_id for token_id, _ in pieces])
        print(f"  Decoded: '{decoded}'")
