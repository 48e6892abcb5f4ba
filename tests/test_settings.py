import pytest

from decoder_app.config.system_settings import Settings


def test_defaults(clean_env):
    s = Settings()
    assert s.HOST == '127.0.0.1'
    assert s.PORT == 8080
    assert s.FALLBACK_ENCODING == 'utf-8'
    assert s.REGEX_PATTERNS_LIMIT == 10000
    assert s.REGEX_PATTERNS_CAPACITY == 10000
    assert s.LOG_LEVEL == 'INFO'
    assert s.validate()


def test_ini_file_values(clean_env, monkeypatch):
    ini = clean_env / 'settings.ini'
    ini.write_text('[cache]\nregex_patterns_limit = 5\n\n[log]\nlog_to_file = false\n', encoding='utf-8')
    monkeypatch.setenv('SETTINGS_FILE', str(ini))
    s = Settings()
    assert s.REGEX_PATTERNS_LIMIT == 5
    assert s.LOG_TO_FILE is False


def test_env_beats_ini(clean_env, monkeypatch):
    ini = clean_env / 'settings.ini'
    ini.write_text('[cache]\nregex_patterns_limit = 5\n', encoding='utf-8')
    monkeypatch.setenv('SETTINGS_FILE', str(ini))
    monkeypatch.setenv('REGEX_PATTERNS_LIMIT', '7')
    monkeypatch.setenv('FALLBACK_ENCODING', 'windows-1252')
    s = Settings()
    assert s.REGEX_PATTERNS_LIMIT == 7
    assert s.FALLBACK_ENCODING == 'windows-1252'


def test_bad_env_int_is_ignored(clean_env, monkeypatch):
    monkeypatch.setenv('APP_PORT', 'eighty')
    assert Settings().PORT == 8080


def test_override_skips_none(clean_env):
    s = Settings().override(PORT=9000, HOST=None)
    assert s.PORT == 9000
    assert s.HOST == '127.0.0.1'


def test_override_unknown_key(clean_env):
    with pytest.raises(ValueError):
        Settings().override(NOPE=1)


@pytest.mark.parametrize('changes', [
    {'REGEX_PATTERNS_LIMIT': -1},
    {'REGEX_PATTERNS_CAPACITY': -1},
    {'PORT': 0},
    {'LOG_LEVEL': 'LOUD'},
    {'DEFAULT_CHARSET': '  '},
])
def test_validate_rejects(clean_env, changes):
    with pytest.raises(ValueError):
        Settings().override(**changes).validate()


def test_to_flask_config(clean_env):
    config = Settings().override(MAX_CONTENT_LENGTH=1024).to_flask_config()
    assert config == {'DEBUG': False, 'MAX_CONTENT_LENGTH': 1024}
