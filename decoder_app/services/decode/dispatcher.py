"""Auto-detect decoding: choose exactly one strategy for the payload."""

import enum
import logging
from typing import Optional

from decoder_app.services.decode.escape import has_escape_markers, unescape_as_bytes
from decoder_app.services.decode.mimewords import decode_mime_header, normalize_header_text
from decoder_app.services.decode.primitives import decode_quoted_printable
from decoder_app.services.errors import QuotedPrintableSyntaxError
from decoder_app.services.utils.encoding import DEFAULT_CHARSET, attempt_decode

logger = logging.getLogger(__name__)


class DecodeStrategy(enum.Enum):
    ENCODED_WORD = 'encoded-word'
    ESCAPED = 'escaped'
    QUOTED_PRINTABLE = 'quoted-printable'


def classify(normalized: str) -> DecodeStrategy:
    """Priority is fixed: encoded words, then escapes, then quoted-printable."""
    upper = normalized.upper()
    if '?Q?' in upper or '?B?' in upper:
        return DecodeStrategy.ENCODED_WORD
    if has_escape_markers(normalized):
        return DecodeStrategy.ESCAPED
    return DecodeStrategy.QUOTED_PRINTABLE


def decode_quoted_printable_text(text: str, charset: str = DEFAULT_CHARSET,
                                 fallback: str = DEFAULT_CHARSET, original: Optional[str] = None) -> str:
    """QP-decode ``text``; malformed input returns ``original`` (``text`` by default)."""
    try:
        raw = decode_quoted_printable(text)
    except QuotedPrintableSyntaxError as e:
        logger.debug(f"Quoted-Printable 解码失败，原样返回: {e}")
        return text if original is None else original
    return attempt_decode(raw, charset, fallback)


def decode_auto(text: str, charset: str = DEFAULT_CHARSET, fallback: str = DEFAULT_CHARSET) -> str:
    normalized = normalize_header_text(text)
    strategy = classify(normalized)
    logger.debug(f"自动解码策略: {strategy.value}")
    if strategy is DecodeStrategy.ENCODED_WORD:
        return decode_mime_header(text, fallback)
    if strategy is DecodeStrategy.ESCAPED:
        return attempt_decode(unescape_as_bytes(normalized), charset, fallback)
    return decode_quoted_printable_text(normalized, charset, fallback, original=text)


__all__ = ['DecodeStrategy', 'classify', 'decode_auto', 'decode_quoted_printable_text']
