"""Regex capture routes backed by the application's pattern cache."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from decoder_app.middleware import api_response, text_response
from decoder_app.models import RegexRequest
from decoder_app.services.regex import capture_first_group, capture_named_groups

regex_bp = Blueprint('regex', __name__)


def _regex_request() -> RegexRequest:
	return RegexRequest.from_dict(request.get_json(silent=True))


@regex_bp.route('/regex/capture', methods=['POST'])
@text_response
def regex_capture_group():
	req = _regex_request()
	return capture_first_group(current_app.extensions['pattern_cache'], req.text, req.pattern)


@regex_bp.route('/regex/json', methods=['POST'])
@api_response
def regex_to_json():
	req = _regex_request()
	return capture_named_groups(current_app.extensions['pattern_cache'], req.text, req.pattern)


@regex_bp.route('/cache/stats', methods=['GET'])
@api_response
def cache_stats():
	cache = current_app.extensions['pattern_cache']
	stats = cache.state().to_dict()
	stats['is_limited'] = cache.is_limited
	stats['reached_limit'] = cache.reached_limit
	return stats


__all__ = ['regex_bp']
