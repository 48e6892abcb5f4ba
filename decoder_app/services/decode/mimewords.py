"""RFC 2047 encoded-word decoding.

``EncodedWordScanner`` walks the text one character at a time through four
states::

    NEW_SCAN -> SCANNING_CHARSET -> SCANNING_ENCODING -> SCANNING_PAYLOAD(kind)

Decoded payload bytes are collected per charset run and only transcoded when
the charset label changes or the input ends, so a multi-byte character split
across two adjacent encoded words is rebuilt correctly.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from email.errors import HeaderParseError
from email.header import decode_header

from decoder_app.services.decode.escape import has_escape_markers, unescape_as_bytes
from decoder_app.services.decode.primitives import decode_base64, decode_quoted_printable
from decoder_app.services.errors import Base64SyntaxError
from decoder_app.services.utils.encoding import DEFAULT_CHARSET, attempt_decode, normalize_charset

logger = logging.getLogger(__name__)

# 仅做行级判断，真正的解析交给状态机
ENCODED_WORD_RE = re.compile(r'=\?[^?\s]+\?[BbQq]\?[^?]*\?=')
_LINE_BREAK_RE = re.compile(r'(\r\n|\n|\r)')
_LITERAL_ESCAPE_RE = re.compile(r'\\([\\nrt=])')
_LITERAL_ESCAPES = {'\\': '\\', 'n': '\n', 'r': '\r', 't': '\t', '=': '='}


class ScanState(enum.Enum):
    NEW_SCAN = 'new_scan'
    SCANNING_CHARSET = 'scanning_charset'
    SCANNING_ENCODING = 'scanning_encoding'
    SCANNING_PAYLOAD = 'scanning_payload'


class PayloadKind(enum.Enum):
    BASE64 = 'B'
    QUOTED_PRINTABLE = 'Q'

    @classmethod
    def from_marker(cls, marker: str) -> Optional['PayloadKind']:
        marker = marker.upper()
        for kind in cls:
            if kind.value == marker:
                return kind
        return None


@dataclass
class EncodedWordSpan:
    start: int
    end: int = -1

    def slice(self, text: str) -> str:
        return text[self.start:self.end]


class EncodedWordScanner:
    """Single-use scanner over one piece of text.

    Characters outside encoded words (including whitespace between adjacent
    words) are dropped. ``scan()`` returns the input unchanged when an
    encoded word has no B/Q marker.
    """

    def __init__(self, text: str, fallback: str = DEFAULT_CHARSET):
        self.text = text
        self.fallback = fallback
        self.state = ScanState.NEW_SCAN
        self.kind: Optional[PayloadKind] = None
        self.charset_span: Optional[EncodedWordSpan] = None
        self.charset: Optional[str] = None
        self.payload: List[str] = []
        self.pending = bytearray()
        self.result: List[str] = []
        self.aborted = False
        self.flushes = 0

    # ---- transitions -------------------------------------------------
    def on_new_scan(self, index: int, ch: str):
        if ch == '?':
            self.charset_span = EncodedWordSpan(start=index + 1)
            self.state = ScanState.SCANNING_CHARSET

    def on_charset(self, index: int, ch: str):
        if ch != '?':
            return
        self.charset_span.end = index
        label = self.charset_span.slice(self.text)
        if self.charset is not None and normalize_charset(self.charset) != normalize_charset(label):
            self.flush(self.charset)
        self.charset = label
        self.kind = None
        self.state = ScanState.SCANNING_ENCODING

    def on_encoding(self, index: int, ch: str):
        if ch != '?':
            kind = PayloadKind.from_marker(ch)
            if kind is not None:
                self.kind = kind
            return
        if self.kind is None:
            logger.debug(f"位置 {index} 处的 encoded-word 缺少 B/Q 标记，原样返回")
            self.aborted = True
            return
        self.payload = []
        self.state = ScanState.SCANNING_PAYLOAD

    def on_payload(self, index: int, ch: str):
        if ch != '?':
            if self.kind is PayloadKind.BASE64 and ch == '\\':
                return
            self.payload.append(ch)
            return
        raw = ''.join(self.payload)
        if self.kind is PayloadKind.BASE64:
            self.pending.extend(decode_base64(raw))
        else:
            # "_" 转为 =20，解码后的空格不属于行尾空白
            raw = raw.replace('\\=', '=').replace('_', '=20')
            self.pending.extend(decode_quoted_printable(raw))
        self.payload = []
        self.state = ScanState.NEW_SCAN

    # ---- helpers ------------------------------------------------------
    def flush(self, label: Optional[str]):
        self.result.append(attempt_decode(bytes(self.pending), label or DEFAULT_CHARSET, self.fallback))
        self.pending.clear()
        self.flushes += 1

    def feed(self, index: int, ch: str):
        if self.state is ScanState.NEW_SCAN:
            self.on_new_scan(index, ch)
        elif self.state is ScanState.SCANNING_CHARSET:
            self.on_charset(index, ch)
        elif self.state is ScanState.SCANNING_ENCODING:
            self.on_encoding(index, ch)
        else:
            self.on_payload(index, ch)

    def finish(self) -> str:
        self.flush(self.charset)
        return ''.join(self.result)

    def scan(self) -> str:
        for index, ch in enumerate(self.text):
            self.feed(index, ch)
            if self.aborted:
                return self.text
        return self.finish()


def manual_decode_mime_subject(text: str, fallback: str = DEFAULT_CHARSET) -> str:
    """Decode every encoded word in ``text`` and concatenate the results."""
    return EncodedWordScanner(text, fallback).scan()


def normalize_header_text(text: str) -> str:
    """De-escape literal ``\\\\ \\n \\r \\t \\=`` and put encoded words on their own lines."""
    text = _LITERAL_ESCAPE_RE.sub(lambda m: _LITERAL_ESCAPES[m.group(1)], text)
    return text.replace(' =?', ' \r\n=?').replace('?= ', '?=\r\n ')


def _decode_plain_line(line: str, fallback: str) -> str:
    if has_escape_markers(line):
        return attempt_decode(unescape_as_bytes(line), DEFAULT_CHARSET, fallback)
    return line


def decode_mime_header(text: str, fallback: str = DEFAULT_CHARSET) -> str:
    """Decode a (possibly folded) header containing encoded words.

    Consecutive encoded-word lines are scanned together; whitespace-only lines
    between them are dropped. Other lines are unescaped when they carry
    ``\\x`` / ``\\u`` markers and copied verbatim otherwise. Breaks around
    encoded words are unfolded; two adjacent plain lines keep the line break
    that separated them.
    """
    out: List[str] = []
    run: List[str] = []
    gap: List[str] = []

    def flush_run():
        if run:
            out.append(manual_decode_mime_subject(''.join(run), fallback))
            run.clear()
        out.extend(gap)
        gap.clear()

    pieces = _LINE_BREAK_RE.split(normalize_header_text(text))
    lines = pieces[0::2]
    breaks = pieces[1::2] + ['']
    pending_break = None
    for line, line_break in zip(lines, breaks):
        if ENCODED_WORD_RE.search(line):
            run.append(line)
            gap.clear()
            pending_break = None
        elif run and not line.strip():
            gap.append(line)
        else:
            flush_run()
            if pending_break is not None:
                out.append(pending_break)
            out.append(_decode_plain_line(line, fallback))
            pending_break = line_break
    flush_run()
    return ''.join(out)


def decode_rfc822_header(text: str, fallback: str = DEFAULT_CHARSET) -> str:
    """Decode a raw RFC 822 header value with the standard library parser.

    Only the encoded words go through ``decode_header``; text between them is
    kept as-is, except whitespace-only gaps between two adjacent words.
    """
    parts = []
    pos = 0
    for match in ENCODED_WORD_RE.finditer(text):
        between = text[pos:match.start()]
        # 相邻 encoded-word 之间的空白不输出
        if pos == 0 or between.strip():
            parts.append(between)
        parts.append(_decode_rfc822_word(match.group(0), fallback))
        pos = match.end()
    parts.append(text[pos:])
    return ''.join(parts)


def _decode_rfc822_word(word: str, fallback: str) -> str:
    try:
        pieces = decode_header(word)
    except HeaderParseError as e:
        raise Base64SyntaxError(f"encoded-word 解析失败: {e}") from e
    parts = []
    for raw, charset in pieces:
        if isinstance(raw, str):
            parts.append(raw)
        else:
            parts.append(attempt_decode(raw, charset or DEFAULT_CHARSET, fallback))
    return ''.join(parts)


__all__ = [
    'ENCODED_WORD_RE',
    'ScanState',
    'PayloadKind',
    'EncodedWordSpan',
    'EncodedWordScanner',
    'manual_decode_mime_subject',
    'normalize_header_text',
    'decode_mime_header',
    'decode_rfc822_header',
]
