"""Base64 / Quoted-Printable primitives shared by the decode services."""

import base64
import binascii
import re
import string

from decoder_app.services.errors import Base64SyntaxError, QuotedPrintableSyntaxError

_HEX_DIGITS = frozenset(string.hexdigits)
# 空白与转义反斜杠在 Base64 中没有意义
_B64_IGNORED_RE = re.compile(r'[\s\\]+')
_B64_ALPHABET_RE = re.compile(r'^[A-Za-z0-9+/]*={0,2}$')


def decode_base64(text: str) -> bytes:
    """Decode standard Base64, tolerating whitespace, ``\\`` and missing padding."""
    compact = _B64_IGNORED_RE.sub('', text)
    if not _B64_ALPHABET_RE.match(compact):
        raise Base64SyntaxError(f"Base64 含有非法字符: {text[:64]!r}")
    padding = len(compact) % 4
    if padding == 1:
        raise Base64SyntaxError(f"Base64 长度无效: {len(compact)}")
    if padding:
        compact += '=' * (4 - padding)
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise Base64SyntaxError(f"Base64 解码失败: {e}") from e


def decode_quoted_printable(text: str) -> bytes:
    """Strict Quoted-Printable decoding.

    ``=`` must be followed by two hex digits or by a line break (soft break).
    Whitespace at the end of an encoded line is transport padding and is dropped.
    Anything else raises QuotedPrintableSyntaxError.
    """
    data = text.encode('utf-8')
    out = bytearray()
    lines = data.split(b'\n')
    last = len(lines) - 1
    for index, line in enumerate(lines):
        if line.endswith(b'\r'):
            line = line[:-1]
        line = line.rstrip(b' \t')
        soft_break = False
        i = 0
        n = len(line)
        while i < n:
            c = line[i]
            if c != 0x3D:  # '='
                out.append(c)
                i += 1
                continue
            if i + 1 == n:
                soft_break = True
                i += 1
                continue
            pair = line[i + 1:i + 3]
            if len(pair) == 2 and all(chr(b) in _HEX_DIGITS for b in pair):
                out.append(int(pair, 16))
                i += 3
                continue
            raise QuotedPrintableSyntaxError(
                f"无效的 Quoted-Printable 序列 {line[i:i + 3].decode('ascii', 'replace')!r} (行 {index + 1})"
            )
        if index < last and not soft_break:
            out.extend(b'\r\n' if lines[index].endswith(b'\r') else b'\n')
    return bytes(out)


__all__ = ['decode_base64', 'decode_quoted_printable']
