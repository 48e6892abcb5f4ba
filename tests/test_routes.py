HOLA = '\xa1Hola, se\xf1or!'


def _text(resp):
    return resp.get_data(as_text=True)


def test_welcome(client):
    resp = client.get('/')
    assert resp.status_code == 200
    assert resp.content_type == 'text/plain; charset=utf-8'
    assert 'Welcome' in _text(resp)


def test_echo(client):
    resp = client.post('/echo', data='héllo')
    assert _text(resp) == 'héllo'


def test_response_headers(client):
    resp = client.get('/')
    assert resp.headers['X-API-Version'] == 'v1'
    assert 'X-Request-ID' in resp.headers


def test_charsets(client):
    body = client.get('/charsets').get_json()
    assert 'iso8859_1' in body['charsets']
    assert body['total'] == len(body['charsets'])


def test_unescape(client):
    resp = client.post('/unescape', data='\\n\\t\\x41')
    assert resp.status_code == 200
    assert _text(resp) == '\n\tA'


def test_unescape_with_charset(client):
    assert _text(client.post('/unescape/iso-8859-1', data='\\xa1Hola')) == '\xa1Hola'


def test_unescape_invalid_sequence(client):
    resp = client.post('/unescape', data='bad \\q')
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['success'] is False
    assert body['error']['code'] == 'DECODE_FAILED'


def test_base64(client):
    assert _text(client.post('/base64/iso-8859-1', data='oUhvbGEsIHNl8W9yIQ==')) == HOLA


def test_base64_invalid(client):
    resp = client.post('/base64', data='@@@@')
    assert resp.status_code == 500
    assert resp.get_json()['error']['code'] == 'DECODE_FAILED'


def test_quoted_printable(client):
    assert _text(client.post('/quoted-printable', data='caf=C3=A9')) == 'café'
    assert _text(client.post('/quoted-printable/latin1', data='caf=E9')) == 'café'


def test_quoted_printable_malformed_is_returned(client):
    resp = client.post('/quoted-printable', data='a=ZZ')
    assert resp.status_code == 200
    assert _text(resp) == 'a=ZZ'


def test_mime_header(client):
    resp = client.post('/mime-header', data='Subject: =?iso-8859-1?Q?=A1Hola,_se=F1or!?=')
    assert _text(resp) == 'Subject: ' + HOLA


def test_mime_header_rfc822(client):
    resp = client.post('/mime-header/rfc822', data='=?iso-8859-1?B?oUhvbGEsIHNl8W9yIQ==?=')
    assert _text(resp) == HOLA


def test_auto(client):
    assert _text(client.post('/auto', data='=?utf-8?Q?caf=C3=A9?=')) == 'café'
    assert _text(client.post('/auto', data='caf\\xc3\\xa9')) == 'café'
    assert _text(client.post('/auto/iso-8859-1', data='caf\\xe9')) == 'café'


def test_regex_json(client):
    resp = client.post('/regex/json', json={
        'text': 'Date: 2024-01-01',
        'pattern': r'(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})',
    })
    assert resp.status_code == 200
    assert resp.get_json() == {'year': '2024', 'month': '01', 'day': '01'}


def test_regex_json_no_match(client):
    resp = client.post('/regex/json', json={'text': 'nothing', 'pattern': r'(?P<x>\d)'})
    assert resp.get_json() == {}


def test_regex_capture(client):
    resp = client.post('/regex/capture', json={'text': 'Date: 2024-01-01', 'pattern': r'(\d{4})'})
    assert resp.status_code == 200
    assert _text(resp) == '2024'


def test_regex_capture_no_match(client):
    resp = client.post('/regex/capture', json={'text': 'abc', 'pattern': r'(\d)'})
    assert resp.status_code == 200
    assert _text(resp) == ''


def test_regex_invalid_pattern(client):
    resp = client.post('/regex/json', json={'text': 'abc', 'pattern': '('})
    assert resp.status_code == 400
    assert resp.get_json()['error']['code'] == 'INVALID_PATTERN'


def test_regex_missing_field(client):
    resp = client.post('/regex/capture', json={'text': 'abc'})
    assert resp.status_code == 400
    assert resp.get_json()['error']['code'] == 'INVALID_ARGUMENT'


def test_regex_non_json_body(client):
    resp = client.post('/regex/json', data='not json')
    assert resp.status_code == 400


def test_cache_stats_reset_on_limit(client):
    for i in range(4):
        client.post('/regex/capture', json={'text': 'x', 'pattern': f'(p{i})'})
    stats = client.get('/cache/stats').get_json()
    assert stats['size'] == 1
    assert stats['limit'] == 3
    assert stats['is_limited'] is True


def test_not_found(client):
    resp = client.get('/nope')
    assert resp.status_code == 404
    assert resp.get_json()['error']['code'] == 'NOT_FOUND'


def test_method_not_allowed(client):
    assert client.get('/echo').status_code == 405


def test_payload_too_large(clean_env):
    from decoder_app import create_app
    from decoder_app.config.system_settings import Settings

    app = create_app(Settings().override(LOG_TO_FILE=False, MAX_CONTENT_LENGTH=16))
    resp = app.test_client().post('/echo', data='x' * 64)
    assert resp.status_code == 413


def test_mime_header_multiline_plain_text(client):
    resp = client.post('/mime-header', data='line one\nline two')
    assert _text(resp) == 'line one\nline two'
