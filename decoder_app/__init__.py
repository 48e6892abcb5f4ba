import os
import logging
from logging.handlers import TimedRotatingFileHandler, WatchedFileHandler
from typing import Optional

from flask import Flask
from flask_cors import CORS

from .config.system_settings import Settings
from .middleware import register_error_handlers, setup_middleware
from .api.routes import register_routes
from .services.regex import SharedPatternCache

__version__ = '1.0.0'


def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or Settings()
    settings.validate()

    app = Flask(__name__)
    app.config.update(settings.to_flask_config())
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    CORS(app, origins="*", methods=["GET", "POST", "OPTIONS"], allow_headers=["Content-Type", "Authorization", "X-Requested-With"])

    _configure_logging(settings)

    # 正则缓存随应用创建，由各请求线程共享
    app.extensions['decoder_settings'] = settings
    app.extensions['pattern_cache'] = SharedPatternCache(
        capacity=settings.REGEX_PATTERNS_CAPACITY,
        limit=settings.REGEX_PATTERNS_LIMIT,
    )

    setup_middleware(app)
    register_error_handlers(app)
    register_routes(app)

    logger = logging.getLogger(__name__)
    logger.debug(f"default_charset = {settings.DEFAULT_CHARSET}")
    logger.debug(f"fallback_encoding = {settings.FALLBACK_ENCODING}")
    logger.debug(f"regex_patterns_capacity = {settings.REGEX_PATTERNS_CAPACITY}")
    logger.debug(f"regex_patterns_limit = {settings.REGEX_PATTERNS_LIMIT}")
    logger.info("应用初始化完成")
    return app


def _configure_logging(settings: Settings):
    root_logger = logging.getLogger()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(level)
    formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s', '%Y-%m-%d %H:%M:%S')
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    if not settings.LOG_TO_FILE:
        return
    try:
        # LOG_PATH 优先，否则由 LOG_DIR + LOG_FILE_NAME 组合
        if settings.LOG_PATH:
            log_file = settings.LOG_PATH
            log_dir = os.path.dirname(log_file) or '.'
        else:
            log_dir = settings.LOG_DIR
            log_file = os.path.join(settings.LOG_DIR, settings.LOG_FILE_NAME)
        os.makedirs(log_dir, exist_ok=True)
        # 多进程部署时使用 WatchedFileHandler，交给 logrotate 等外部工具轮转
        if settings.USE_WATCHED_LOG:
            file_handler = WatchedFileHandler(log_file, encoding='utf-8')
        else:
            file_handler = TimedRotatingFileHandler(log_file, when='midnight', backupCount=settings.LOG_BACKUP_COUNT, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except OSError as e:
        logging.getLogger(__name__).warning(f'文件日志配置失败: {e}')


__all__ = ['create_app', '__version__']
