"""Command-line entry point for the decode service."""

from __future__ import annotations

import argparse

from decoder_app import __version__, create_app
from decoder_app.config.system_settings import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="text-decode-service",
        description="HTTP service decoding escaped, Base64, Quoted-Printable and RFC 2047 payloads into UTF-8.",
    )
    parser.add_argument("-l", "--host", help="Listening interface (default: 127.0.0.1)")
    parser.add_argument("-p", "--port", type=int, help="Listening port (default: 8080)")
    parser.add_argument(
        "-a", "--fallback-encoding",
        help="Charset tried when decoding with the requested charset fails (default: utf-8)",
    )
    parser.add_argument("--default-charset", help="Charset used when a route gets none (default: utf-8)")
    parser.add_argument(
        "--regex-patterns-limit", type=int,
        help="Cached regex patterns limit, the cache is cleared once reached; 0 disables the limit (default: 10000)",
    )
    parser.add_argument(
        "--regex-patterns-capacity", type=int,
        help="Initial capacity hint for cached regex patterns (default: 10000)",
    )
    parser.add_argument(
        "-L", "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        type=str.upper,
        help="Log level (default: INFO)",
    )
    parser.add_argument("--debug", action="store_true", default=None, help="Run Flask in debug mode")
    parser.add_argument("--version", action="version", version=f"text-decode-service {__version__}")
    return parser


def settings_from_args(args: argparse.Namespace, base: Settings | None = None) -> Settings:
    base = base or Settings()
    return base.override(
        HOST=args.host,
        PORT=args.port,
        FALLBACK_ENCODING=args.fallback_encoding,
        DEFAULT_CHARSET=args.default_charset,
        REGEX_PATTERNS_LIMIT=args.regex_patterns_limit,
        REGEX_PATTERNS_CAPACITY=args.regex_patterns_capacity,
        LOG_LEVEL=args.log_level,
        DEBUG=args.debug,
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    app = create_app(settings)
    print('-' * 50)
    print(f'text-decode-service {__version__}')
    print(f'http://{settings.HOST}:{settings.PORT}')
    print('-' * 50)
    app.run(host=settings.HOST, port=settings.PORT, debug=settings.DEBUG,
            threaded=settings.THREADED, use_reloader=settings.DEBUG)


if __name__ == "__main__":
    main()
