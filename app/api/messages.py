# app/api/messages.py
from flask import Blueprint, jsonify, request

from app.errors import ValidationError
from app.jobs.notify import send_invitations as send_invitations_job
from app.services import mail, whatsapp
from app.utils.decorators import admin_required

bp = Blueprint("messages", __name__)


@bp.route("/api/send-invitations", methods=["POST"])
@admin_required
def send_invitations():
    payload = request.get_json(silent=True) or {}
    ids = payload.get('invitee_ids')
    if not isinstance(ids, list) or not ids:
        raise ValidationError("invitee_ids are required")
    settings = payload.get('settings')
    if settings is not None and not isinstance(settings, dict):
        raise ValidationError("settings must be an object")
    try:
        ids = [int(i) for i in ids]
    except (TypeError, ValueError):
        raise ValidationError("invitee_ids must be integers")
    result = send_invitations_job(ids, settings)
    return jsonify(dict(result, success=True))


@bp.route("/api/send-email", methods=["POST"])
@admin_required
def send_email():
    payload = request.get_json(silent=True) or {}
    to = (payload.get('to') or '').strip()
    subject = payload.get('subject')
    content = payload.get('content')
    if not to or not subject or not content:
        raise ValidationError("to, subject and content are required")
    status, _ = mail.send_email(to, subject, content)
    return jsonify({'success': True, 'status': status})


@bp.route("/api/send-whatsapp", methods=["POST"])
@admin_required
def send_whatsapp():
    payload = request.get_json(silent=True) or {}
    phone = payload.get('phone')
    template = payload.get('template')
    if isinstance(phone, (dict, list, bool)):
        raise ValidationError("phone must be a string")
    if phone in (None, '') or not template:
        raise ValidationError("phone and template are required")
    result = whatsapp.send_template(whatsapp.normalize_phone(str(phone)), template,
                                    param_1=payload.get('param_1'),
                                    param_2=payload.get('param_2'),
                                    url_button=payload.get('url_button'))
    return jsonify({'success': True, 'result': result})
