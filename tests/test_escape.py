import pytest

from decoder_app.services.decode.escape import has_escape_markers, unescape, unescape_as_bytes
from decoder_app.services.errors import DecodeError, EscapeSyntaxError


def test_basic_sequence():
    assert unescape_as_bytes('\\n\\t\\x41') == b'\n\tA'


def test_single_character_escapes():
    assert unescape_as_bytes('\\b\\f\\r\\\\\\\'\\"') == b'\x08\x0c\r\\\'"'


def test_octal_widths():
    # \101 三位; \0 \7 一位; \12 后跟非八进制字符; \477 首位大于 3 只取两位
    assert unescape_as_bytes('\\101\\0\\7\\12x\\477') == b"A\x00\x07\nx'7"


def test_unicode_escape_is_utf8_in_bytes():
    assert unescape_as_bytes('\\u00e9') == b'\xc3\xa9'
    assert unescape_as_bytes('\\u4e2d') == '中'.encode('utf-8')


def test_literal_text_is_utf8_encoded():
    assert unescape_as_bytes('é\\x41') == b'\xc3\xa9A'


def test_unescape_text_variant():
    assert unescape('caf\\xe9 \\u4e2d\\n') == 'café 中\n'


def test_no_escapes_is_identity():
    assert unescape_as_bytes('plain text') == b'plain text'
    assert unescape('') == ''


@pytest.mark.parametrize('text', [
    'abc\\',
    '\\x4',
    '\\xZZ',
    '\\u12',
    '\\u12G4',
    '\\q',
    '\\8',
])
def test_malformed_escapes_raise(text):
    with pytest.raises(EscapeSyntaxError):
        unescape_as_bytes(text)


def test_escape_error_is_decode_error_with_position():
    with pytest.raises(DecodeError) as info:
        unescape('ok \\q')
    assert info.value.position == 3


def test_has_escape_markers():
    assert has_escape_markers('a\\x41')
    assert has_escape_markers('a\\u0041')
    assert not has_escape_markers('a\\n')
