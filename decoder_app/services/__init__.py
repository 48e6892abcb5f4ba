"""Service layer public exports."""

from .errors import (  # noqa: F401
    DecodeError,
    CharsetDecodeError,
    EscapeSyntaxError,
    Base64SyntaxError,
    QuotedPrintableSyntaxError,
    PatternCompileError,
    RegexRequestError,
)
from .utils import attempt_decode, decode_bytes  # noqa: F401
from .regex import SharedPatternCache, PatternCache  # noqa: F401

__all__ = [
    'DecodeError',
    'CharsetDecodeError',
    'EscapeSyntaxError',
    'Base64SyntaxError',
    'QuotedPrintableSyntaxError',
    'PatternCompileError',
    'RegexRequestError',
    'attempt_decode',
    'decode_bytes',
    'SharedPatternCache',
    'PatternCache',
]
