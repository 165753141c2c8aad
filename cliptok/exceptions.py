"""
Exception hierarchy for the CLIP tokenizer.

All errors raised by cliptok derive from ClipTokenizerError so callers can
catch the whole family at once. Each concrete class also derives from the
closest builtin (OSError, ValueError, RuntimeError) so existing handlers keep
working.
"""

from typing import List, Optional


class ClipTokenizerError(Exception):
    """Base exception for all cliptok errors."""


class VocabularyLoadError(ClipTokenizerError, OSError):
    """Raised when the BPE merge artifact is missing, unreadable or corrupt."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        if path:
            message = f"{message} (path: {path})"
        super().__init__(message)
        self.path = path


class ConfigurationError(ClipTokenizerError, ValueError):
    """Raised for unknown strategy names and invalid tokenizer options."""

    def __init__(
        self,
        message: str,
        *,
        option: Optional[str] = None,
        available: Optional[List[str]] = None,
    ) -> None:
        extra = ""
        if option is not None:
            extra += f" (option: {option})"
        if available:
            extra += f" (available: {', '.join(available)})"
        super().__init__(message + extra)
        self.option = option
        self.available = available


class ByteEncodingError(ClipTokenizerError, RuntimeError):
    """Raised when a byte value has no entry in the byte codec."""

    def __init__(self, byte_value: int) -> None:
        super().__init__(
            f"Byte {byte_value} not found in byte encoder. "
            "The byte-to-unicode table must cover all 256 byte values."
        )
        self.byte_value = byte_value
