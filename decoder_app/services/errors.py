"""Decode / regex error types.

DecodeError 及其子类都继承 ValueError，路由层据此区分业务错误与内部错误。
"""


class DecodeError(ValueError):
    """Base class for every payload decoding failure."""


class CharsetDecodeError(DecodeError):
    """A specific codec rejected the bytes (only raised under the strict trap)."""

    def __init__(self, charset: str, reason: str = ''):
        self.charset = charset
        self.reason = reason
        super().__init__(f"无法使用 {charset} 解码: {reason}" if reason else f"无法使用 {charset} 解码")


class EscapeSyntaxError(DecodeError):
    """Malformed backslash escape sequence."""

    def __init__(self, message: str, position: int = -1):
        self.position = position
        if position >= 0:
            message = f"{message} (位置 {position})"
        super().__init__(message)


class Base64SyntaxError(DecodeError):
    """Malformed Base64 payload."""


class QuotedPrintableSyntaxError(DecodeError):
    """Malformed Quoted-Printable payload."""


class PatternCompileError(ValueError):
    """The regular expression could not be compiled."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"正则表达式无效: {reason}")


class RegexRequestError(ValueError):
    """Regex route received a body without the expected fields."""


__all__ = [
    'DecodeError',
    'CharsetDecodeError',
    'EscapeSyntaxError',
    'Base64SyntaxError',
    'QuotedPrintableSyntaxError',
    'PatternCompileError',
    'RegexRequestError',
]
