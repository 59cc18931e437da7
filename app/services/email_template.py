"""Branded RTL HTML wrapper for outgoing plain-text emails.

Markup lives in ``templates/email/branded.html``; Jinja autoescaping covers
the subject, content and logo URL.
"""
from datetime import datetime

from flask import current_app, render_template


def render_email_html(content: str, subject: str = None) -> str:
    return render_template(
        'email/branded.html',
        subject=subject,
        content=content or '',
        logo_url=current_app.config.get('EMAIL_LOGO_URL'),
        year=datetime.utcnow().year,
    )


def render_otp_content(otp: str, ttl_minutes: int) -> str:
    return (
        "مرحباً،\n\n"
        "استخدم رمز التحقق التالي للدخول إلى نموذج التسجيل:\n\n"
        f"{otp}\n\n"
        f"صالح لمدة {ttl_minutes} دقائق\n\n"
        "ملاحظة: إذا لم تطلب هذا الرمز، يرجى تجاهل هذا البريد الإلكتروني."
    )
