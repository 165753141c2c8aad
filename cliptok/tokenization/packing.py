"""
Packing of token id sequences into fixed-shape integer batches.
"""

from typing import List, Optional, Sequence, Union

import numpy as np
import torch


def pack_token_ids(
    rows: Sequence[Sequence[int]],
    context_length: int,
    eot_token_id: int,
) -> np.ndarray:
    """
    Lay out id sequences in a zero-padded ``[batch, context_length]`` buffer.

    Rows longer than ``context_length`` are cut, and their last slot is
    overwritten with the end-of-text id so every row still terminates.

    Args:
        rows: Id sequences, already wrapped with start/end markers
        context_length: Fixed row length
        eot_token_id: End-of-text id forced into truncated rows

    Returns:
        int32 array of shape (len(rows), context_length)
    """
    result = np.zeros((len(rows), context_length), dtype=np.int32)

    for i, tokens in enumerate(rows):
        tokens = list(tokens)
        if len(tokens) > context_length:
            tokens = tokens[:context_length]
            tokens[-1] = eot_token_id
        result[i, :len(tokens)] = tokens

    return result


def to_tensor(
    array: np.ndarray, return_tensors: Optional[str] = "np"
) -> Union[np.ndarray, torch.Tensor]:
    """
    Convert a packed batch to the requested format.

    Args:
        array: Packed batch
        return_tensors: "np" for NumPy, "pt" for PyTorch

    Returns:
        The batch as ndarray or tensor (int32 either way)
    """
    if return_tensors in (None, "np"):
        return array
    if return_tensors == "pt":
        return torch.from_numpy(array)
    raise ValueError(f"return_tensors must be 'np' or 'pt', got {return_tensors!r}")


def unpack_row(row: Union[Sequence[int], np.ndarray, torch.Tensor], eot_token_id: int) -> List[int]:
    """Strip the zero padding after the end-of-text id of a packed row."""
    if isinstance(row, torch.Tensor):
        row = row.tolist()
    elif isinstance(row, np.ndarray):
        row = row.tolist()
    row = [int(t) for t in row]
    if eot_token_id in row:
        return row[:row.index(eot_token_id) + 1]
    return row
