"""Welcome / echo / charset listing routes."""

from __future__ import annotations

from flask import Blueprint, request

from decoder_app.middleware import api_response, text_response
from decoder_app.services.utils.encoding import supported_charsets

misc_bp = Blueprint('misc', __name__)

WELCOME_TEXT = 'Welcome. POST a payload to /auto, /unescape, /base64, /quoted-printable or /mime-header to decode it.'


@misc_bp.route('/', methods=['GET'])
@text_response
def welcome():
	return WELCOME_TEXT


@misc_bp.route('/echo', methods=['POST'])
@text_response
def echo():
	return request.get_data(as_text=True)


@misc_bp.route('/charsets', methods=['GET'])
@api_response
def charsets():
	items = supported_charsets()
	return {'charsets': items, 'total': len(items)}


__all__ = ['misc_bp']
