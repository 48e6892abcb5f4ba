from .misc import misc_bp  # noqa
from .decode import decode_bp  # noqa
from .regex import regex_bp  # noqa


def register_routes(app, url_prefix: str = ''):
    """Register all blueprints under the configured prefix (root by default)."""
    for bp in (misc_bp, decode_bp, regex_bp):
        app.register_blueprint(bp, url_prefix=url_prefix or None)

__all__ = ['register_routes']
