"""
Integration tests for the tokenize_texts script.

Runs the command line entry point end to end over a small merge file and
checks the saved batch.
"""

import sys
from pathlib import Path

import numpy as np
import pytest
import yaml

# Add scripts to path
sys.path.append(str(Path(__file__).parent.parent.parent))

from scripts.tokenize_texts import main  # noqa: E402

SOT_ID = 524
EOT_ID = 525


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "captions.txt"
    path.write_text("Hello my lady\n\n  \ntest\nhello\n", encoding="utf-8")
    return path


@pytest.mark.integration
def test_tokenize_file(tmp_path, bpe_path, input_file, capsys):
    """Test non-empty lines are tokenized into a saved batch."""
    output = tmp_path / "out" / "tokens.npy"

    main([
        "--input", str(input_file),
        "--output", str(output),
        "--bpe_path", str(bpe_path),
        "--context_length", "8",
        "--batch_size", "2",
        "--stats",
    ])

    batch = np.load(output)
    assert batch.shape == (3, 8)
    assert batch.dtype == np.int32
    assert batch[0].tolist() == [SOT_ID, 516, 517, 520, EOT_ID, 0, 0, 0]
    assert batch[1, :3].tolist() == [SOT_ID, 523, EOT_ID]
    assert batch[2, :3].tolist() == [SOT_ID, 516, EOT_ID]

    out = capsys.readouterr().out
    assert "total_tokens: 5" in out
    assert "Done!" in out


@pytest.mark.integration
def test_config_file_with_overrides(tmp_path, bpe_path, input_file):
    """Test command line options override the YAML config."""
    config_path = tmp_path / "tokenizer.yaml"
    config_path.write_text(
        yaml.safe_dump({"bpePath": str(bpe_path), "contextLength": 16, "clean": "whitespace"}),
        encoding="utf-8",
    )
    output = tmp_path / "tokens.npy"

    main([
        "--input", str(input_file),
        "--output", str(output),
        "--config", str(config_path),
        "--context_length", "4",
        "--clean", "lower",
    ])

    batch = np.load(output)
    assert batch.shape == (3, 4)
    assert batch[0].tolist() == [SOT_ID, 516, 517, EOT_ID]


@pytest.mark.integration
def test_empty_input(tmp_path, bpe_path):
    """Test an input without text lines saves an empty batch."""
    input_file = tmp_path / "empty.txt"
    input_file.write_text("\n\n", encoding="utf-8")
    output = tmp_path / "tokens.npy"

    main([
        "--input", str(input_file),
        "--output", str(output),
        "--bpe_path", str(bpe_path),
    ])

    batch = np.load(output)
    assert batch.shape == (0, 77)
    assert batch.dtype == np.int32
