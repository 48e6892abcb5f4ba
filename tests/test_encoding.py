import codecs

import pytest

from decoder_app.services.errors import CharsetDecodeError
from decoder_app.services.utils import encoding
from decoder_app.services.utils.encoding import (
    CHARSET_ALIASES,
    DecoderTrap,
    attempt_decode,
    decode_bytes,
    resolve_charset,
    to_utf8_lossy,
)


def test_decode_utf8():
    assert decode_bytes('中文'.encode('utf-8'), 'utf-8') == '中文'


def test_decode_gb2312():
    data = '测试'.encode('gb2312')
    assert decode_bytes(data, 'GB2312') == '测试'


@pytest.mark.parametrize('label', ['latin1', 'ISO-8859-1', ' ibm819 ', 'iso8859-1', 'L1', 'iso_8859_1'])
def test_latin1_spellings(label):
    assert resolve_charset(label) == 'iso8859_1'


@pytest.mark.parametrize('label', ['windows-1251', 'CP1251', 'win1251', '1251', 'x-cp1251'])
def test_windows_spellings(label):
    assert resolve_charset(label) == 'cp1251'


def test_every_alias_points_to_a_real_codec():
    for label, codec in CHARSET_ALIASES.items():
        assert codecs.lookup(codec), label


def test_legacy_charsets():
    assert decode_bytes(b'\xd0\xd2\xc9\xd7\xc5\xd4', 'koi8-r') == 'привет'
    assert decode_bytes('日本語'.encode('shift_jis'), 'sjis') == '日本語'
    assert decode_bytes('日本語'.encode('euc_jp'), 'EUC-JP') == '日本語'
    assert decode_bytes('한국어'.encode('euc_kr'), 'ks_c_5601-1987') == '한국어'
    assert decode_bytes('ab'.encode('utf-16-be'), 'UTF-16BE') == 'ab'


def test_unknown_label_is_lossy_utf8():
    assert decode_bytes(b'caf\xc3\xa9 \xff', 'x-no-such-charset') == 'caf\xe9 �'


def test_strict_trap_raises():
    with pytest.raises(CharsetDecodeError):
        decode_bytes(b'ok \xff', 'utf-8', DecoderTrap.STRICT)


def test_replace_trap_substitutes():
    assert decode_bytes(b'ok \xff', 'utf-8') == 'ok �'


def test_replace_trap_never_raises():
    samples = [b'', b'\x00\xff\x80', bytes(range(256)), b'\x1b$B', b'~{', b'\xff']
    labels = sorted(CHARSET_ALIASES) + ['bogus', '', '   ']
    for label in labels:
        for data in samples:
            assert isinstance(decode_bytes(data, label, DecoderTrap.REPLACE), str)


def test_attempt_decode_roundtrips_valid_utf8():
    text = 'Grüße, 世界 ✓'
    assert attempt_decode(text.encode('utf-8'), 'utf-8') == text


def test_attempt_decode_unknown_label_equals_lossy():
    data = b'\xe4\xb8\xad \xfe\xff abc'
    assert attempt_decode(data, 'not-a-real-charset') == to_utf8_lossy(data)


def test_attempt_decode_requested_charset():
    assert attempt_decode(b'\xa1Hola', 'iso-8859-1') == '\xa1Hola'


def test_attempt_decode_uses_fallback_on_codec_error(monkeypatch):
    calls = []
    real = encoding.decode_bytes

    def fake(data, charset, trap=DecoderTrap.REPLACE):
        calls.append(charset)
        if charset == 'broken':
            raise CharsetDecodeError(charset, 'codec exploded')
        return real(data, charset, trap)

    monkeypatch.setattr(encoding, 'decode_bytes', fake)
    assert attempt_decode(b'caf\xe9', 'broken', 'windows-1252') == 'caf\xe9'
    assert calls == ['broken', 'windows-1252']


def test_attempt_decode_last_tier_is_lossy_utf8(monkeypatch):
    calls = []

    def always_fail(data, charset, trap=DecoderTrap.REPLACE):
        calls.append(charset)
        raise CharsetDecodeError(charset, 'nope')

    monkeypatch.setattr(encoding, 'decode_bytes', always_fail)
    assert attempt_decode(b'caf\xc3\xa9 \xff', 'a', 'b') == 'caf\xe9 �'
    assert calls == ['a', 'b']
