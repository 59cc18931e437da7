"""WhatsApp template gateway client.

The gateway takes everything as query-string parameters on a POST with an
empty body and answers with JSON or plain text; a response is a success
unless it carries an ``error`` key.
"""
import json
import re

import requests
from flask import current_app

from ..errors import ExternalServiceError

_PHONE_JUNK = re.compile(r"[\s\-()]")


def normalize_phone(phone) -> str:
    """Normalize a phone number to the gateway's international format (Saudi defaults)."""
    # numbers stored from JSON may arrive as ints
    p = str(phone).strip() if phone is not None else ''
    if p.startswith('+'):
        p = p[1:]
    if p.startswith('00'):
        p = p[2:]
    p = _PHONE_JUNK.sub('', p)
    if p.startswith('05'):
        p = '966' + p[1:]
    elif p.startswith('5') and not p.startswith('966'):
        p = '966' + p
    return p


def template_for_gender(template: str, gender) -> str:
    if not gender:
        return template
    return template + ('_m' if gender == 'male' else '_f')


def is_configured() -> bool:
    cfg = current_app.config
    return bool(cfg.get('WHATSAPP_API') and cfg.get('WHATSAPP_API_TOKEN') and cfg.get('WHATSAPP_SENDER_ID'))


def _parse_body(text):
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return text


def send_template(phone, template, param_1=None, param_2=None, image=None,
                  url_button=None, button_text=None):
    """Send one template message. Returns the parsed gateway response.

    Raises ExternalServiceError when the gateway is not configured, the
    request fails, or the response carries an ``error`` key.
    """
    if not is_configured():
        raise ExternalServiceError('WhatsApp API configuration is missing')
    cfg = current_app.config
    params = {
        'token': cfg['WHATSAPP_API_TOKEN'],
        'sender_id': cfg['WHATSAPP_SENDER_ID'],
        'phone': phone,
        'template': template,
    }
    optional = {'param_1': param_1, 'param_2': param_2, 'image': image,
                'url_button': url_button, 'button_text': button_text}
    params.update({k: v for k, v in optional.items() if v})

    try:
        r = requests.post(cfg['WHATSAPP_API'], params=params, data='', timeout=30, allow_redirects=True)
    except requests.exceptions.RequestException as e:
        raise ExternalServiceError(str(e)) from e

    result = _parse_body(r.text)
    if isinstance(result, dict) and result.get('error'):
        err = result['error']
        msg = err.get('message') if isinstance(err, dict) else None
        if not msg and isinstance(err, str):
            msg = err
        raise ExternalServiceError(msg or 'Unknown error')
    return result
