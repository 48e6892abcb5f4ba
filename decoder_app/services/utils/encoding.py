"""字符集转码工具

提供字符集别名解析、按指定字符集解码，以及三级回退解码（请求字符集 -> 备用字符集 -> UTF-8 替换）。
未知的字符集名称不会报错，统一按 UTF-8 (errors='replace') 处理。
"""

import enum
import logging
from typing import Dict, List, Optional

from decoder_app.services.errors import CharsetDecodeError

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = 'utf-8'


class DecoderTrap(enum.Enum):
    """Recovery policy for invalid input units."""
    REPLACE = 'replace'
    STRICT = 'strict'


DEFAULT_DECODER_TRAP = DecoderTrap.REPLACE


def _iso8859_aliases(n: int, *extra: str) -> Dict[str, str]:
    codec = f'iso8859_{n}'
    labels = [
        f'iso-8859-{n}', f'iso8859-{n}', f'iso_8859-{n}', f'iso_8859_{n}',
        f'iso8859_{n}', f'iso8859{n}', f'iso-8859{n}',
    ]
    labels.extend(extra)
    return {label: codec for label in labels}


def _windows_aliases(page: int, *extra: str) -> Dict[str, str]:
    codec = f'cp{page}'
    labels = [
        f'windows-{page}', f'windows{page}', f'win{page}', f'win-{page}',
        f'cp{page}', f'cp-{page}', f'x-cp{page}', f'ms{page}', str(page),
    ]
    labels.extend(extra)
    return {label: codec for label in labels}


def _build_alias_table() -> Dict[str, str]:
    table: Dict[str, str] = {}

    # ISO-8859 系列 (8859-12 从未发布)
    table.update(_iso8859_aliases(1, 'latin1', 'latin-1', 'l1', 'ibm819', 'cp819', 'iso-ir-100', 'csisolatin1'))
    table.update(_iso8859_aliases(2, 'latin2', 'latin-2', 'l2', 'iso-ir-101', 'csisolatin2'))
    table.update(_iso8859_aliases(3, 'latin3', 'latin-3', 'l3', 'iso-ir-109', 'csisolatin3'))
    table.update(_iso8859_aliases(4, 'latin4', 'latin-4', 'l4', 'iso-ir-110', 'csisolatin4'))
    table.update(_iso8859_aliases(5, 'cyrillic', 'iso-ir-144', 'csisolatincyrillic'))
    table.update(_iso8859_aliases(6, 'arabic', 'asmo-708', 'ecma-114', 'iso-ir-127', 'csisolatinarabic',
                                  'iso-8859-6-e', 'iso-8859-6-i', 'csiso88596e', 'csiso88596i'))
    table.update(_iso8859_aliases(7, 'greek', 'greek8', 'elot_928', 'ecma-118', 'iso-ir-126', 'csisolatingreek', 'sun_eu_greek'))
    table.update(_iso8859_aliases(8, 'hebrew', 'visual', 'iso-ir-138', 'csisolatinhebrew', 'iso-8859-8-e', 'csiso88598e',
                                  'iso-8859-8-i', 'iso8859-8-i', 'csiso88598i', 'logical'))
    table.update(_iso8859_aliases(9, 'latin5', 'latin-5', 'l5', 'iso-ir-148', 'csisolatin5'))
    table.update(_iso8859_aliases(10, 'latin6', 'latin-6', 'l6', 'iso-ir-157', 'csisolatin6'))
    table.update(_iso8859_aliases(11, 'thai'))
    table.update(_iso8859_aliases(13, 'latin7', 'latin-7', 'l7'))
    table.update(_iso8859_aliases(14, 'latin8', 'latin-8', 'l8', 'iso-celtic', 'iso-ir-199'))
    table.update(_iso8859_aliases(15, 'latin9', 'latin-9', 'l9', 'csisolatin9'))
    table.update(_iso8859_aliases(16, 'latin10', 'latin-10', 'l10', 'iso-ir-226'))

    # Windows 代码页
    table.update(_windows_aliases(874, 'tis-620', 'tis620', 'dos-874'))
    table.update(_windows_aliases(1250, 'x-cp1250'))
    table.update(_windows_aliases(1251, 'x-cp1251'))
    table.update(_windows_aliases(1252, 'x-cp1252', 'ansi'))
    table.update(_windows_aliases(1253))
    table.update(_windows_aliases(1254))
    table.update(_windows_aliases(1255))
    table.update(_windows_aliases(1256))
    table.update(_windows_aliases(1257))
    table.update(_windows_aliases(1258))

    # 西里尔 / Mac / DOS
    for label in ('koi8-r', 'koi8r', 'koi8_r', 'koi', 'koi8', 'cskoi8r'):
        table[label] = 'koi8_r'
    for label in ('koi8-u', 'koi8u', 'koi8_u', 'koi8-ru'):
        table[label] = 'koi8_u'
    for label in ('macintosh', 'mac', 'mac-roman', 'macroman', 'mac_roman', 'x-mac-roman', 'csmacintosh'):
        table[label] = 'mac_roman'
    for label in ('mac-cyrillic', 'maccyrillic', 'mac_cyrillic', 'x-mac-cyrillic', 'x-mac-ukrainian'):
        table[label] = 'mac_cyrillic'
    for label in ('ibm866', 'ibm-866', 'cp866', '866', 'csibm866'):
        table[label] = 'cp866'

    for label in ('ascii', 'us-ascii', 'us_ascii', 'usascii', 'us', 'iso646-us', 'iso-646-us',
                  'ansi_x3.4-1968', 'ansi_x3.4-1986', 'cp367', 'ibm367', '646', 'csascii'):
        table[label] = 'ascii'

    # Unicode
    for label in ('utf-8', 'utf8', 'utf_8', 'unicode-1-1-utf-8', 'unicode11utf8', 'unicode20utf8', 'x-unicode20utf8'):
        table[label] = 'utf_8'
    for label in ('utf-16be', 'utf16be', 'utf_16_be', 'utf-16-be', 'unicodefffe'):
        table[label] = 'utf_16_be'
    for label in ('utf-16le', 'utf16le', 'utf_16_le', 'utf-16-le', 'utf-16', 'utf16', 'unicode',
                  'ucs-2', 'csunicode', 'iso-10646-ucs-2', 'unicodefeff'):
        table[label] = 'utf_16_le'

    # 中文
    for label in ('big5', 'big-5', 'big5-2003', 'big5_2003', 'big5-hkscs', 'big5hkscs', 'big5_hkscs',
                  'cn-big5', 'csbig5', 'x-x-big5'):
        table[label] = 'big5hkscs'
    for label in ('gb18030', 'gb-18030', 'gb_18030'):
        table[label] = 'gb18030'
    for label in ('gbk', 'cp936', 'ms936', 'windows-936', 'x-gbk', 'gb2312', 'gb_2312', 'gb_2312-80',
                  'csgb2312', 'euc-cn', 'euccn', 'chinese', 'iso-ir-58', 'csiso58gb231280'):
        table[label] = 'gbk'
    for label in ('hz', 'hz-gb-2312', 'hzgb', 'hz-gb'):
        table[label] = 'hz'

    # 日文
    for label in ('euc-jp', 'eucjp', 'euc_jp', 'ujis', 'x-euc-jp', 'cseucpkdfmtjapanese'):
        table[label] = 'euc_jp'
    for label in ('iso-2022-jp', 'iso2022jp', 'iso2022_jp', 'iso_2022_jp', 'csiso2022jp'):
        table[label] = 'iso2022_jp'
    for label in ('shift_jis', 'shift-jis', 'shiftjis', 'sjis', 'x-sjis', 'csshiftjis', 'ms_kanji',
                  'ms932', 'cp932', 'windows-31j', 'cswindows31j'):
        table[label] = 'cp932'
    for label in ('shift_jis_2004', 'shift-jis-2004', 'sjis-2004', 'sjis_2004'):
        table[label] = 'shift_jis_2004'
    for label in ('shift_jisx0213', 'shift-jisx0213', 'sjisx0213', 's_jisx0213'):
        table[label] = 'shift_jisx0213'

    # 韩文
    for label in ('euc-kr', 'euckr', 'euc_kr', 'cseuckr', 'ks_c_5601-1987', 'ks_c_5601-1989', 'ksc5601',
                  'ksc_5601', 'korean', 'iso-ir-149', 'csksc56011987', 'windows-949', 'cp949', 'uhc', 'ms949'):
        table[label] = 'cp949'

    return table


# 字符集标签 -> Python codec 名称
CHARSET_ALIASES: Dict[str, str] = _build_alias_table()


def normalize_charset(label: Optional[str]) -> str:
    return (label or '').strip().lower()


def resolve_charset(label: Optional[str]) -> Optional[str]:
    """Return the Python codec for ``label``, or None when the label is unknown."""
    return CHARSET_ALIASES.get(normalize_charset(label))


def supported_charsets() -> List[str]:
    return sorted(set(CHARSET_ALIASES.values()))


def to_utf8_lossy(data: bytes) -> str:
    return bytes(data).decode('utf-8', errors='replace')


def decode_bytes(data: bytes, charset: str, trap: DecoderTrap = DEFAULT_DECODER_TRAP) -> str:
    """按指定字符集解码字节。

    未知字符集直接按 UTF-8 替换模式解码，不会抛出异常。
    STRICT 模式下遇到第一个非法字节即抛出 CharsetDecodeError；
    REPLACE 模式下非法字节替换为 U+FFFD，只有 codec 本身报错时才抛出。
    """
    if not data:
        return ''
    codec = resolve_charset(charset)
    if codec is None:
        logger.debug(f"未知字符集 '{charset}'，按 UTF-8 (lossy) 解码")
        return to_utf8_lossy(data)
    try:
        return bytes(data).decode(codec, errors=trap.value)
    except (UnicodeDecodeError, LookupError, ValueError) as e:
        raise CharsetDecodeError(charset, str(e)) from e


def attempt_decode(data: bytes, charset: str = DEFAULT_CHARSET, fallback: str = DEFAULT_CHARSET) -> str:
    """三级回退解码，保证不会抛出异常。

    1. 使用请求的字符集 (REPLACE)
    2. codec 报错时使用配置的备用字符集 (REPLACE)
    3. 仍失败则按 UTF-8 (lossy) 解码
    """
    try:
        return decode_bytes(data, charset, DecoderTrap.REPLACE)
    except CharsetDecodeError as e:
        logger.warning(f"字符集 {charset} 解码失败，尝试备用字符集 {fallback}: {e.reason}")
    try:
        return decode_bytes(data, fallback, DecoderTrap.REPLACE)
    except CharsetDecodeError as e:
        logger.warning(f"备用字符集 {fallback} 解码失败，使用 UTF-8 (lossy): {e.reason}")
    return to_utf8_lossy(data)


__all__ = [
    'DEFAULT_CHARSET',
    'DEFAULT_DECODER_TRAP',
    'CHARSET_ALIASES',
    'DecoderTrap',
    'normalize_charset',
    'resolve_charset',
    'supported_charsets',
    'to_utf8_lossy',
    'decode_bytes',
    'attempt_decode',
]
