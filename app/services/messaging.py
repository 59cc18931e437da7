"""Sequential email + WhatsApp fan-out with batch pauses.

Recipients are plain dicts with ``user_name``, ``user_email``,
``user_phone`` and ``user_gender``. Every send failure is appended to the
caller's ``errors`` list; nothing here raises past the recipient loop.
"""
import time
from datetime import datetime

from flask import current_app

from ..extensions import db
from ..errors import ExternalServiceError
from ..models.notification import Notification
from . import mail, whatsapp


def personalize(name, content):
    return f"مرحباً {name}\n\n{content}"


def _record(kind, sent_to, group_name, ok, subject=None, template=None, error=None):
    db.session.add(Notification(
        kind=kind, sent_to=None if sent_to is None else str(sent_to), subject=subject, template=template,
        group_name=group_name, status='sent' if ok else 'failed',
        error=error, sent_at=datetime.utcnow(),
    ))


def send_email_to(recipient, subject, content, group_name, errors, prefix=''):
    name = recipient.get('user_name')
    try:
        mail.send_email(recipient['user_email'], subject, personalize(name, content))
    except ExternalServiceError as e:
        errors.append(f"{prefix}Email failed for {name}: {e.message}")
        _record('email', recipient['user_email'], group_name, False, subject=subject, error=e.message)
        return False
    except Exception as e:
        current_app.logger.exception('Email send to %s raised', recipient.get('user_email'))
        errors.append(f"{prefix}Email error for {name}: {e}")
        _record('email', recipient['user_email'], group_name, False, subject=subject, error=str(e))
        return False
    _record('email', recipient['user_email'], group_name, True, subject=subject)
    return True


def send_whatsapp_to(recipient, template, image, group_name, errors, prefix='',
                     param_2=None, url_button=None):
    name = recipient.get('user_name')
    if not whatsapp.is_configured():
        errors.append(f"{prefix}WhatsApp not configured for {name}")
        return False
    phone = recipient.get('user_phone')
    final_template = template
    try:
        phone = whatsapp.normalize_phone(phone)
        final_template = whatsapp.template_for_gender(template, recipient.get('user_gender'))
        whatsapp.send_template(phone, final_template, param_1=name, param_2=param_2,
                               image=image or None, url_button=url_button)
    except ExternalServiceError as e:
        errors.append(f"{prefix}WhatsApp failed for {name}: {e.message}")
        _record('whatsapp', phone, group_name, False, template=final_template, error=e.message)
        return False
    except Exception as e:
        current_app.logger.exception('WhatsApp send to %s raised', phone)
        errors.append(f"{prefix}WhatsApp error for {name}: {e}")
        _record('whatsapp', phone, group_name, False, template=final_template, error=str(e))
        return False
    _record('whatsapp', phone, group_name, True, template=final_template)
    return True


def send_to_group(recipients, email_subject, email_content, whatsapp_template,
                  whatsapp_image, errors, group_name=None):
    """Send to every recipient in order, pausing between batches.

    Returns ``(emails_sent, whatsapps_sent)``.
    """
    cfg = current_app.config
    batch_size = max(1, int(cfg.get('STAGE_BATCH_SIZE', 50)))
    delay = float(cfg.get('STAGE_BATCH_DELAY_SEC', 2))
    prefix = f"[{group_name}] " if group_name else ''

    emails_sent = 0
    whatsapps_sent = 0
    recipients = list(recipients)
    for start in range(0, len(recipients), batch_size):
        for recipient in recipients[start:start + batch_size]:
            if recipient.get('user_email') and email_subject and email_content:
                if send_email_to(recipient, email_subject, email_content, group_name, errors, prefix):
                    emails_sent += 1
            if recipient.get('user_phone') and whatsapp_template:
                if send_whatsapp_to(recipient, whatsapp_template, whatsapp_image, group_name, errors, prefix):
                    whatsapps_sent += 1

        # pause between batches for provider rate limits
        if start + batch_size < len(recipients):
            time.sleep(delay)

    return emails_sent, whatsapps_sent
