"""Decode routes: raw request body in, decoded UTF-8 text out."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Blueprint, current_app, request

from decoder_app.middleware import text_response
from decoder_app.services.decode import (
	decode_auto,
	decode_base64,
	decode_mime_header,
	decode_quoted_printable_text,
	decode_rfc822_header,
	unescape_as_bytes,
)
from decoder_app.services.utils.encoding import attempt_decode

decode_bp = Blueprint('decode', __name__)
logger = logging.getLogger(__name__)


def _body() -> str:
	return request.get_data(as_text=True)


def _charsets(charset: Optional[str]) -> tuple[str, str]:
	settings = current_app.extensions['decoder_settings']
	return charset or settings.DEFAULT_CHARSET, settings.FALLBACK_ENCODING


@decode_bp.route('/unescape', methods=['POST'])
@decode_bp.route('/unescape/<charset>', methods=['POST'])
@text_response
def unescape(charset: Optional[str] = None):
	target, fallback = _charsets(charset)
	return attempt_decode(unescape_as_bytes(_body()), target, fallback)


@decode_bp.route('/base64', methods=['POST'])
@decode_bp.route('/base64/<charset>', methods=['POST'])
@text_response
def base64_decode(charset: Optional[str] = None):
	target, fallback = _charsets(charset)
	return attempt_decode(decode_base64(_body()), target, fallback)


@decode_bp.route('/quoted-printable', methods=['POST'])
@decode_bp.route('/quoted-printable/<charset>', methods=['POST'])
@text_response
def quoted_printable(charset: Optional[str] = None):
	target, fallback = _charsets(charset)
	return decode_quoted_printable_text(_body(), target, fallback)


@decode_bp.route('/mime-header', methods=['POST'])
@text_response
def mime_header():
	_, fallback = _charsets(None)
	return decode_mime_header(_body(), fallback)


@decode_bp.route('/mime-header/rfc822', methods=['POST'])
@text_response
def mime_header_rfc822():
	_, fallback = _charsets(None)
	return decode_rfc822_header(_body(), fallback)


@decode_bp.route('/auto', methods=['POST'])
@decode_bp.route('/auto/<charset>', methods=['POST'])
@text_response
def auto(charset: Optional[str] = None):
	target, fallback = _charsets(charset)
	return decode_auto(_body(), target, fallback)


__all__ = ['decode_bp']
