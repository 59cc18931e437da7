import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
import requests

from app.errors import ExternalServiceError
from app.services import whatsapp


class FakeResponse:
    def __init__(self, text):
        self.text = text


@pytest.mark.parametrize('raw, expected', [
    ('0501234567', '966501234567'),
    ('501234567', '966501234567'),
    ('+966 50-123-4567', '966501234567'),
    ('00966501234567', '966501234567'),
    ('(050) 123 4567', '966501234567'),
    ('+44 20 7946 0958', '442079460958'),
    ('', ''),
    (501234567, '966501234567'),
    (None, ''),
])
def test_normalize_phone(raw, expected):
    assert whatsapp.normalize_phone(raw) == expected


def test_template_for_gender():
    assert whatsapp.template_for_gender('stage_passed', 'male') == 'stage_passed_m'
    assert whatsapp.template_for_gender('stage_passed', 'female') == 'stage_passed_f'
    assert whatsapp.template_for_gender('stage_passed', 'other') == 'stage_passed_f'
    assert whatsapp.template_for_gender('stage_passed', None) == 'stage_passed'


def test_send_template_posts_query_params(app, monkeypatch):
    calls = []

    def fake_post(url, params=None, data=None, **kw):
        calls.append((url, params, data))
        return FakeResponse('{"status": "queued", "id": "m1"}')

    monkeypatch.setattr('app.services.whatsapp.requests.post', fake_post)
    out = whatsapp.send_template('966501234567', 'welcome_m', param_1='Sara', image='https://img')
    assert out == {'status': 'queued', 'id': 'm1'}
    url, params, data = calls[0]
    assert url == 'https://wa.example.test/send'
    assert data == ''
    assert params['token'] == 'wa-token'
    assert params['sender_id'] == 'wa-sender'
    assert params['template'] == 'welcome_m'
    assert params['param_1'] == 'Sara'
    assert 'param_2' not in params


def test_plain_text_response_is_success(app, monkeypatch):
    monkeypatch.setattr('app.services.whatsapp.requests.post', lambda *a, **kw: FakeResponse('OK'))
    assert whatsapp.send_template('966501234567', 'welcome') == 'OK'


@pytest.mark.parametrize('body, message', [
    ('{"error": {"message": "Invalid template"}}', 'Invalid template'),
    ('{"error": "Rate limited"}', 'Rate limited'),
    ('{"error": true}', 'Unknown error'),
])
def test_error_key_means_failure(app, monkeypatch, body, message):
    monkeypatch.setattr('app.services.whatsapp.requests.post', lambda *a, **kw: FakeResponse(body))
    with pytest.raises(ExternalServiceError) as exc:
        whatsapp.send_template('966501234567', 'welcome')
    assert exc.value.message == message


def test_network_failure_and_missing_config(app, monkeypatch):
    def boom(*a, **kw):
        raise requests.exceptions.ConnectionError('connection refused')

    monkeypatch.setattr('app.services.whatsapp.requests.post', boom)
    with pytest.raises(ExternalServiceError):
        whatsapp.send_template('966501234567', 'welcome')

    app.config['WHATSAPP_API_TOKEN'] = None
    assert not whatsapp.is_configured()
    with pytest.raises(ExternalServiceError):
        whatsapp.send_template('966501234567', 'welcome')
