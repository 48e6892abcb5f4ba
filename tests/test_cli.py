import pytest
from flask import Flask

from decoder_app import cli


def test_parser_defaults_are_none():
    args = cli.build_parser().parse_args([])
    assert args.port is None
    assert args.debug is None


def test_settings_from_args(clean_env):
    args = cli.build_parser().parse_args([
        '-l', '0.0.0.0', '-p', '9000', '-a', 'windows-1252',
        '--regex-patterns-limit', '0', '-L', 'debug',
    ])
    s = cli.settings_from_args(args)
    assert s.HOST == '0.0.0.0'
    assert s.PORT == 9000
    assert s.FALLBACK_ENCODING == 'windows-1252'
    assert s.REGEX_PATTERNS_LIMIT == 0
    assert s.LOG_LEVEL == 'DEBUG'
    assert s.DEBUG is False


def test_invalid_log_level():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(['-L', 'loud'])


def test_main_runs_app(clean_env, monkeypatch):
    monkeypatch.setenv('APP_LOG_TO_FILE', 'false')
    calls = {}
    monkeypatch.setattr(Flask, 'run', lambda self, **kwargs: calls.update(kwargs))
    cli.main(['--port', '9001', '--regex-patterns-limit', '2'])
    assert calls['port'] == 9001
    assert calls['host'] == '127.0.0.1'
    assert calls['threaded'] is True
