"""Backslash escape sequence decoding.

Supported sequences::

    \\b \\f \\n \\r \\t \\\\ \\' \\"     single characters
    \\xHH                       one byte
    \\uHHHH                     one Unicode scalar (UTF-8 encoded in the bytes variant)
    \\N \\NN \\NNN                octal byte, three digits only when the first one is 0-3

Any other escape, a trailing backslash or missing/invalid digits raise
EscapeSyntaxError and nothing is returned.
"""

import string
from typing import Iterator, Tuple, Union

from decoder_app.services.errors import EscapeSyntaxError

_SIMPLE_ESCAPES = {
    'b': 0x08,
    'f': 0x0C,
    'n': 0x0A,
    'r': 0x0D,
    't': 0x09,
    '\\': 0x5C,
    "'": 0x27,
    '"': 0x22,
}
_HEX_DIGITS = frozenset(string.hexdigits)
_OCT_DIGITS = frozenset(string.octdigits)

# 扫描结果类型
_TEXT = 'text'
_BYTE = 'byte'
_SCALAR = 'scalar'


def _read_hex(text: str, start: int, width: int, marker: str) -> int:
    digits = text[start:start + width]
    if len(digits) < width:
        raise EscapeSyntaxError(f"\\{marker} 需要 {width} 位十六进制数字", start - 2)
    for c in digits:
        if c not in _HEX_DIGITS:
            raise EscapeSyntaxError(f"\\{marker} 后出现非十六进制字符 {c!r}", start - 2)
    return int(digits, 16)


def _read_octal(text: str, start: int) -> Tuple[int, int]:
    n = len(text)
    if (text[start] in '0123' and start + 2 < n
            and text[start + 1] in _OCT_DIGITS and text[start + 2] in _OCT_DIGITS):
        width = 3
    elif start + 1 < n and text[start + 1] in _OCT_DIGITS:
        width = 2
    else:
        width = 1
    return int(text[start:start + width], 8), width


def _scan(text: str) -> Iterator[Tuple[str, Union[str, int]]]:
    n = len(text)
    pos = 0
    while pos < n:
        slash = text.find('\\', pos)
        if slash < 0:
            yield _TEXT, text[pos:]
            return
        if slash > pos:
            yield _TEXT, text[pos:slash]
        if slash + 1 >= n:
            raise EscapeSyntaxError("转义序列以反斜杠结尾", slash)
        marker = text[slash + 1]
        if marker in _SIMPLE_ESCAPES:
            yield _BYTE, _SIMPLE_ESCAPES[marker]
            pos = slash + 2
        elif marker == 'x':
            yield _BYTE, _read_hex(text, slash + 2, 2, 'x')
            pos = slash + 4
        elif marker == 'u':
            yield _SCALAR, _read_hex(text, slash + 2, 4, 'u')
            pos = slash + 6
        elif marker in _OCT_DIGITS:
            value, width = _read_octal(text, slash + 1)
            yield _BYTE, value
            pos = slash + 1 + width
        else:
            raise EscapeSyntaxError(f"不支持的转义序列 \\{marker}", slash)


def unescape_as_bytes(text: str) -> bytes:
    """Decode escapes into raw bytes; literal text is UTF-8 encoded."""
    out = bytearray()
    for kind, value in _scan(text):
        if kind == _TEXT:
            out.extend(value.encode('utf-8', errors='surrogatepass'))
        elif kind == _BYTE:
            out.append(value)
        else:
            out.extend(chr(value).encode('utf-8', errors='surrogatepass'))
    return bytes(out)


def unescape(text: str) -> str:
    """Decode escapes into text, every escape becoming exactly one code point."""
    parts = []
    for kind, value in _scan(text):
        parts.append(value if kind == _TEXT else chr(value))
    return ''.join(parts)


def has_escape_markers(text: str) -> bool:
    return '\\x' in text or '\\u' in text


__all__ = ['unescape_as_bytes', 'unescape', 'has_escape_markers']
