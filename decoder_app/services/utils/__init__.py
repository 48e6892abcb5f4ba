"""Utility subpackage (charset transcoding and fallback decoding)."""

from .encoding import attempt_decode, decode_bytes, resolve_charset, supported_charsets  # noqa: F401

__all__ = [
    'attempt_decode',
    'decode_bytes',
    'resolve_charset',
    'supported_charsets',
]
