"""
Byte-to-unicode codec for byte-level BPE.

Published CLIP vocabularies store every symbol as a string of printable
unicode characters, one character per UTF-8 byte. This module rebuilds that
exact lookup table so vocabulary symbols can be matched against raw text:

- Printable ASCII and two printable Latin-1 ranges map to themselves
- The remaining 68 byte values (whitespace, control characters, ...) are
  shifted to code points 256 and up, in ascending byte order
"""

from functools import lru_cache
from typing import Dict, List

from ..exceptions import ByteEncodingError


@lru_cache()
def bytes_to_unicode() -> Dict[int, str]:
    """
    Create bijective mapping from bytes to unicode strings.

    The dictionary preserves construction order (printable bytes first, then the
    remapped ones), which is also the order of the base symbols in the
    vocabulary.

    Returns:
        Dict[int, str]: Mapping from byte (0-255) to unicode character
    """
    bs = (
        list(range(ord("!"), ord("~") + 1))
        + list(range(ord("¡"), ord("¬") + 1))
        + list(range(ord("®"), ord("ÿ") + 1))
    )
    cs = bs[:]
    n = 0

    # Map remaining bytes to unused unicode range
    for b in range(2**8):
        if b not in bs:
            bs.append(b)
            cs.append(2**8 + n)
            n += 1

    cs = [chr(n) for n in cs]
    return dict(zip(bs, cs))


class ByteCodec:
    """
    Two-way lookup between byte values and vocabulary symbols.

    Example:
        >>> codec = ByteCodec()
        >>> codec.encode_bytes("hi there".encode("utf-8"))
        'hiĠthere'
        >>> codec.decode_symbols("hiĠthere").decode("utf-8")
        'hi there'
    """

    def __init__(self):
        # Copy so the memoized table is never mutated through an instance
        self.encoder: Dict[int, str] = dict(bytes_to_unicode())
        self.decoder: Dict[str, int] = {v: k for k, v in self.encoder.items()}

    @property
    def symbols(self) -> List[str]:
        """The 256 base symbols in construction order."""
        return list(self.encoder.values())

    def encode_byte(self, byte_value: int) -> str:
        try:
            return self.encoder[byte_value]
        except KeyError:
            raise ByteEncodingError(byte_value) from None

    def decode_symbol(self, symbol: str) -> int:
        return self.decoder[symbol]

    def encode_bytes(self, data: bytes) -> str:
        """Map every byte of ``data`` to its printable symbol."""
        return "".join(self.encode_byte(b) for b in data)

    def decode_symbols(self, text: str) -> bytes:
        """
        Map printable symbols back to raw bytes.

        Characters that are not codec symbols are dropped rather than raising,
        since decoding arbitrary ids is lossy anyway.
        """
        return bytes(self.decoder[c] for c in text if c in self.decoder)

    def __len__(self) -> int:
        return len(self.encoder)

    def __repr__(self) -> str:
        return f"ByteCodec(size={len(self)})"
