"""应用配置 - 统一的配置参数管理"""
import os
import sys
import logging
import configparser
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

_LOG_LEVELS = {'CRITICAL', 'ERROR', 'WARNING', 'WARN', 'INFO', 'DEBUG', 'NOTSET'}


def _get_config_file() -> str:
    """获取配置文件路径（环境变量 > 可执行文件目录 > 当前目录 > 项目根目录）"""
    if env_config := os.getenv("SETTINGS_FILE"):
        return env_config

    # PyInstaller 打包后配置文件放在可执行文件同目录
    if getattr(sys, 'frozen', False):
        exe_dir = os.path.dirname(os.path.abspath(sys.executable))
        exe_config = os.path.join(exe_dir, "settings.ini")
        if os.path.exists(exe_config):
            return exe_config

    cwd_config = Path.cwd() / "settings.ini"
    if cwd_config.exists():
        return str(cwd_config)

    root_config = Path(__file__).parent.parent.parent / "settings.ini"
    if root_config.exists():
        return str(root_config)

    return str(cwd_config)


def _load_config() -> configparser.ConfigParser:
    """加载外部配置文件，文件不存在时返回空配置"""
    config = configparser.ConfigParser()
    config_file = _get_config_file()
    if not os.path.exists(config_file):
        return config
    for encoding in ('utf-8', 'utf-8-sig', 'gbk', 'latin-1'):
        try:
            config.read(config_file, encoding=encoding)
            logger.debug(f"[config] Loaded {config_file} with encoding: {encoding}")
            break
        except (UnicodeDecodeError, configparser.Error) as e:
            logger.debug(f"[config] Failed to read with encoding {encoding}: {e}")
            config = configparser.ConfigParser()
    else:
        logger.error(f"[config] Failed to read config file with any encoding: {config_file}")
    return config


def _get_bool(env_name: str, default: bool, config_section: str = None, config_key: str = None) -> bool:
    """解析布尔值：环境变量 > 配置文件 > 默认值"""
    if raw := os.getenv(env_name):
        return str(raw).strip().lower() in {"1", "true", "yes", "y", "on"}

    if config_section and config_key:
        _config = _load_config()
        if _config.has_option(config_section, config_key):
            try:
                return _config.getboolean(config_section, config_key)
            except ValueError:
                logger.warning(f"[config] {config_section}.{config_key} 不是合法的布尔值，使用默认值 {default}")

    return default


def _get_int(env_name: str, default: int, config_section: str = None, config_key: str = None) -> int:
    """解析整数：环境变量 > 配置文件 > 默认值"""
    if raw := os.getenv(env_name):
        try:
            return int(raw) if raw.strip() else default
        except ValueError:
            logger.warning(f"[config] 环境变量 {env_name}={raw!r} 不是整数，忽略")

    if config_section and config_key:
        _config = _load_config()
        if _config.has_option(config_section, config_key):
            try:
                return _config.getint(config_section, config_key)
            except ValueError:
                logger.warning(f"[config] {config_section}.{config_key} 不是整数，使用默认值 {default}")

    return default


def _get_str(env_name: str, default: str, config_section: str = None, config_key: str = None) -> str:
    """解析字符串：环境变量 > 配置文件 > 默认值"""
    if raw := os.getenv(env_name):
        return raw

    if config_section and config_key:
        _config = _load_config()
        if _config.has_option(config_section, config_key):
            return _config.get(config_section, config_key)

    return default


@dataclass
class Settings:
    """应用配置类 - 优先级：命令行 > 环境变量 > settings.ini > 默认值"""

    # ===== 服务器配置 =====
    HOST: str = field(default_factory=lambda: _get_str("APP_HOST", "127.0.0.1", "server", "host"))
    PORT: int = field(default_factory=lambda: _get_int("APP_PORT", 8080, "server", "port"))
    DEBUG: bool = field(default_factory=lambda: _get_bool("APP_DEBUG", False, "server", "debug"))
    THREADED: bool = field(default_factory=lambda: _get_bool("APP_THREADED", True, "server", "threaded"))
    MAX_CONTENT_LENGTH: int = field(default_factory=lambda: _get_int("MAX_CONTENT_LENGTH", 16 * 1024 * 1024, "server", "max_content_length"))

    # ===== 解码配置 =====
    DEFAULT_CHARSET: str = field(default_factory=lambda: _get_str("DEFAULT_CHARSET", "utf-8", "common", "default_charset"))
    FALLBACK_ENCODING: str = field(default_factory=lambda: _get_str("FALLBACK_ENCODING", "utf-8", "common", "fallback_encoding"))

    # ===== 正则缓存配置 =====
    REGEX_PATTERNS_LIMIT: int = field(default_factory=lambda: _get_int("REGEX_PATTERNS_LIMIT", 10000, "cache", "regex_patterns_limit"))
    REGEX_PATTERNS_CAPACITY: int = field(default_factory=lambda: _get_int("REGEX_PATTERNS_CAPACITY", 10000, "cache", "regex_patterns_capacity"))

    # ===== 日志配置 =====
    LOG_LEVEL: str = field(default_factory=lambda: _get_str("APP_LOG_LEVEL", "INFO", "log", "log_level").upper())
    LOG_TO_FILE: bool = field(default_factory=lambda: _get_bool("APP_LOG_TO_FILE", True, "log", "log_to_file"))
    LOG_DIR: str = field(default_factory=lambda: _get_str("APP_LOG_DIR", "logs", "log", "log_dir"))
    LOG_FILE_NAME: str = field(default_factory=lambda: _get_str("APP_LOG_FILE", "app.log", "log", "log_file"))
    LOG_PATH: str = field(default_factory=lambda: _get_str("APP_LOG_PATH", "", "log", "log_path"))
    LOG_BACKUP_COUNT: int = field(default_factory=lambda: _get_int("APP_LOG_BACKUP", 7, "log", "log_backup_count"))
    USE_WATCHED_LOG: bool = field(default_factory=lambda: _get_bool("APP_USE_WATCHED_LOG", False, "log", "use_watched_log"))

    # ===== 方法 =====
    def to_flask_config(self) -> dict:
        """转换为 Flask 配置格式"""
        return {
            "DEBUG": self.DEBUG,
            "MAX_CONTENT_LENGTH": self.MAX_CONTENT_LENGTH,
        }

    def override(self, **overrides: Optional[object]) -> 'Settings':
        """返回覆盖了部分字段的新配置（值为 None 的参数忽略）"""
        known = {f.name for f in fields(self)}
        changes = {}
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in known:
                raise ValueError(f"未知配置项: {key}")
            changes[key] = value
        return replace(self, **changes)

    def validate(self) -> bool:
        """验证配置的有效性，失败时抛出 ValueError"""
        errors = []
        if self.REGEX_PATTERNS_LIMIT < 0:
            errors.append(f"REGEX_PATTERNS_LIMIT 不能为负数: {self.REGEX_PATTERNS_LIMIT}")
        if self.REGEX_PATTERNS_CAPACITY < 0:
            errors.append(f"REGEX_PATTERNS_CAPACITY 不能为负数: {self.REGEX_PATTERNS_CAPACITY}")
        if not 0 < self.PORT < 65536:
            errors.append(f"PORT 超出范围: {self.PORT}")
        if self.LOG_LEVEL.upper() not in _LOG_LEVELS:
            errors.append(f"未知日志级别: {self.LOG_LEVEL}")
        if not self.DEFAULT_CHARSET.strip():
            errors.append("DEFAULT_CHARSET 不能为空")
        if errors:
            raise ValueError("配置验证失败: " + "; ".join(errors))
        return True


__all__ = ['Settings']
