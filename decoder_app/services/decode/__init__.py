"""Payload decoding services (escapes, Base64, Quoted-Printable, RFC 2047)."""

from .escape import unescape_as_bytes, unescape  # noqa: F401
from .primitives import decode_base64, decode_quoted_printable  # noqa: F401
from .mimewords import (  # noqa: F401
    EncodedWordScanner,
    manual_decode_mime_subject,
    decode_mime_header,
    decode_rfc822_header,
)
from .dispatcher import DecodeStrategy, classify, decode_auto, decode_quoted_printable_text  # noqa: F401

__all__ = [
    'unescape_as_bytes',
    'unescape',
    'decode_base64',
    'decode_quoted_printable',
    'EncodedWordScanner',
    'manual_decode_mime_subject',
    'decode_mime_header',
    'decode_rfc822_header',
    'DecodeStrategy',
    'classify',
    'decode_auto',
    'decode_quoted_printable_text',
]
