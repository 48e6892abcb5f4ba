import pytest

from decoder_app import create_app
from decoder_app.config.system_settings import Settings

_ENV_VARS = (
    'APP_HOST', 'APP_PORT', 'APP_DEBUG', 'APP_THREADED', 'MAX_CONTENT_LENGTH',
    'DEFAULT_CHARSET', 'FALLBACK_ENCODING', 'REGEX_PATTERNS_LIMIT', 'REGEX_PATTERNS_CAPACITY',
    'APP_LOG_LEVEL', 'APP_LOG_TO_FILE', 'APP_LOG_DIR', 'APP_LOG_FILE', 'APP_LOG_PATH',
    'APP_LOG_BACKUP', 'APP_USE_WATCHED_LOG',
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No env overrides and an ini path that does not exist."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('SETTINGS_FILE', str(tmp_path / 'missing.ini'))
    return tmp_path


@pytest.fixture
def app(clean_env):
    settings = Settings().override(
        LOG_TO_FILE=False,
        REGEX_PATTERNS_LIMIT=3,
        REGEX_PATTERNS_CAPACITY=3,
        FALLBACK_ENCODING='windows-1252',
    )
    app = create_app(settings)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
