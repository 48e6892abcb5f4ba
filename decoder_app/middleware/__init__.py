"""App middleware: request logging, response envelopes and error handlers."""

from __future__ import annotations

import time
import logging
from functools import wraps
from flask import Flask, Response, request, jsonify, g
from werkzeug.exceptions import HTTPException

from decoder_app.services.errors import DecodeError, PatternCompileError

logger = logging.getLogger(__name__)

TEXT_MIMETYPE = 'text/plain; charset=utf-8'


def setup_middleware(app: Flask):
    @app.before_request
    def before_request():
        g.start_time = time.time()
        logger.info(f"Request: {request.method} {request.path}")
        g.request_id = f"{int(time.time())}-{id(request)}"

    @app.after_request
    def after_request(response):
        if hasattr(g, 'start_time'):
            duration = time.time() - g.start_time
            response.headers['X-Response-Time'] = f"{duration:.3f}s"
        response.headers['X-Request-ID'] = getattr(g, 'request_id', 'unknown')
        response.headers['X-API-Version'] = 'v1'
        return response


def _error(code: str, message: str, details: str | None = None, status: int = 500):
    body = {'success': False, 'error': {'code': code, 'message': message}}
    if details is not None:
        body['error']['details'] = details
    return jsonify(body), status


def _handle_known_errors(func_name: str, e: Exception):
    if isinstance(e, DecodeError):
        logger.warning(f"{func_name} 解码失败: {e}")
        return _error('DECODE_FAILED', '解码失败', str(e), 500)
    if isinstance(e, PatternCompileError):
        return _error('INVALID_PATTERN', str(e), e.reason, 400)
    if isinstance(e, ValueError):
        return _error('INVALID_ARGUMENT', str(e), str(e), 400)
    logger.error(f"Unexpected error in {func_name}: {e}", exc_info=True)
    return _error('INTERNAL', '服务器内部错误，请稍后重试', str(e), 500)


def api_response(func):
    """JSON 路由：成功时原样返回 jsonify 结果，失败时返回统一错误结构。"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)
            if isinstance(result, tuple):
                data, status_code = result
                return jsonify(data), status_code
            return jsonify(result)
        except HTTPException:
            raise
        except Exception as e:
            return _handle_known_errors(func.__name__, e)
    return wrapper


def text_response(func):
    """纯文本路由：成功时返回 200 text/plain，失败时不返回任何部分结果。"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)
            return Response(result, status=200, content_type=TEXT_MIMETYPE)
        except HTTPException:
            raise
        except Exception as e:
            return _handle_known_errors(func.__name__, e)
    return wrapper


def register_error_handlers(app: Flask):
    @app.errorhandler(404)
    def not_found(error):
        return _error('NOT_FOUND', '接口不存在', status=404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _error('METHOD_NOT_ALLOWED', '请求方法不允许', status=405)

    @app.errorhandler(413)
    def payload_too_large(error):
        return _error('PAYLOAD_TOO_LARGE', '请求体过大', status=413)

    @app.errorhandler(500)
    def internal_error(error):
        return _error('INTERNAL', '服务器内部错误', status=500)


__all__ = ['setup_middleware', 'api_response', 'text_response', 'register_error_handlers', 'TEXT_MIMETYPE']
