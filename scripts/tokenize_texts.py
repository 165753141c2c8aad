"""
Script to tokenize a text file into a fixed-shape token batch.

Usage:
    python scripts/tokenize_texts.py --input captions.txt --output captions.npy --context_length 77
"""

import argparse
import sys
from pathlib import Path

import numpy as np
from tqdm import tqdm

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from cliptok.tokenization.config import TokenizerConfig
from cliptok.tokenization.simple_tokenizer import SimpleTokenizer
from cliptok.tokenization.stats import get_tokenizer_stats


def read_texts(path: str):
    """Read one text per non-empty line."""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\n") for line in f if line.strip()]


def main(argv=None):
    parser = argparse.ArgumentParser(description="Tokenize texts with the CLIP BPE tokenizer")

    # Data
    parser.add_argument("--input", type=str, required=True,
                       help="Text file with one text per line")
    parser.add_argument("--output", type=str, required=True,
                       help="Path to save the token batch (.npy)")

    # Tokenizer config
    parser.add_argument("--config", type=str,
                       help="YAML tokenizer config (command line options override it)")
    parser.add_argument("--bpe_path", type=str,
                       help="Path to BPE merges (default: bundled CLIP merges)")
    parser.add_argument("--context_length", type=int,
                       help="Fixed sequence length (default: 77)")
    parser.add_argument("--clean", type=str, choices=["lower", "whitespace", "canonicalize"],
                       help="Text cleaning strategy (default: lower)")
    parser.add_argument("--reduction_mask", type=str,
                       choices=["simple", "random", "shuffle", "syntax"],
                       help="Strategy for texts longer than the context length")
    parser.add_argument("--seed", type=int,
                       help="Random seed for the random reduction strategies")
    parser.add_argument("--batch_size", type=int, default=1024,
                       help="Texts tokenized per call (default: 1024)")

    # Reporting
    parser.add_argument("--stats", action="store_true",
                       help="Print token statistics after tokenizing")

    args = parser.parse_args(argv)

    config = TokenizerConfig.from_yaml(args.config) if args.config else TokenizerConfig()
    overrides = {
        name: getattr(args, name)
        for name in ("bpe_path", "context_length", "clean", "reduction_mask", "seed")
        if getattr(args, name) is not None
    }
    tokenizer = SimpleTokenizer(config, **overrides)

    texts = read_texts(args.input)

    print("=" * 60)
    print("CLIP Tokenization")
    print("=" * 60)
    print(f"Input: {args.input} ({len(texts)} texts)")
    print(f"Vocabulary size: {len(tokenizer)}")
    print(f"Context length: {tokenizer.context_length}")
    print(f"Clean: {tokenizer.config.clean}")
    print(f"Reduction: {tokenizer.config.reduction_mask}")
    print("=" * 60 + "\n")

    batches = []
    for start in tqdm(range(0, len(texts), args.batch_size), desc="Tokenizing"):
        batches.append(tokenizer.tokenize(texts[start:start + args.batch_size]))

    if batches:
        result = np.concatenate(batches, axis=0)
    else:
        result = np.zeros((0, tokenizer.context_length), dtype=np.int32)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    np.save(output, result)
    print(f"\n✓ Saved token batch {tuple(result.shape)} to {output}")

    if args.stats:
        stats = get_tokenizer_stats(tokenizer, texts)
        print("\nStatistics:")
        for key, value in stats.items():
            if isinstance(value, float):
                print(f"  {key}: {value:.3f}")
            else:
                print(f"  {key}: {value}")

    print("\n✓ Done!")


if __name__ == "__main__":
    main()
