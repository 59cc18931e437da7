from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from flask import current_app

from ..errors import ExternalServiceError
from .email_template import render_email_html


def send_html(to_email, subject, html):
    api_key = current_app.config.get('SENDGRID_API_KEY')
    if not api_key:
        raise ExternalServiceError('SENDGRID_API_KEY is not configured')
    sg = SendGridAPIClient(api_key=api_key)
    message = Mail(from_email=(current_app.config['MAIL_FROM'], current_app.config['MAIL_FROM_NAME']),
                   to_emails=to_email,
                   subject=subject,
                   html_content=html)
    try:
        resp = sg.send(message)
    except Exception as e:
        raise ExternalServiceError(f'SendGrid send failed: {e}') from e
    if resp.status_code >= 300:
        raise ExternalServiceError(f'SendGrid returned {resp.status_code}')
    return resp.status_code, getattr(resp, 'headers', None)


def send_email(to_email, subject, content):
    """Send plain-text content wrapped in the branded template."""
    return send_html(to_email, subject, render_email_html(content, subject))
