# app/api/stages.py
from flask import Blueprint, jsonify, request

from app.errors import ValidationError
from app.jobs.end_stage import close_stage
from app.services.messaging import send_to_group
from app.utils.db import commit_or_raise
from app.utils.decorators import admin_required

bp = Blueprint("stages", __name__)


def _stage_number(value):
    try:
        stage = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Stage number and settings are required")
    if stage < 1:
        raise ValidationError("Invalid stage number")
    return stage


@bp.route("/api/end-stage", methods=["POST"])
@admin_required
def end_stage():
    payload = request.get_json(silent=True) or {}
    settings = payload.get('settings')
    if payload.get('stage') in (None, '') or not isinstance(settings, dict):
        raise ValidationError("Stage number and settings are required")
    stage = _stage_number(payload['stage'])

    test_recipients = payload.get('testRecipients')
    if test_recipients is not None and not isinstance(test_recipients, list):
        raise ValidationError("testRecipients must be a list")
    channels = payload.get('channels') or None

    result = close_stage(stage, settings,
                         test_mode=bool(payload.get('testMode')),
                         test_recipients=test_recipients,
                         channels=channels)
    return jsonify({
        'success': True,
        'totalEmailsSent': result['emailsSent'],
        'totalWhatsappsSent': result['whatsappsSent'],
        'nominatedCount': result['nominatedCount'],
        'excludedCount': result['excludedCount'],
        'autoCount': result['autoCount'],
        'errors': result['errors'],
        'movedToNextStage': result['movedToNextStage'],
    })


@bp.route("/api/send-stage-messages", methods=["POST"])
@admin_required
def send_stage_messages():
    """Send one message set to an explicit recipient list (no decisions, no promotion)."""
    payload = request.get_json(silent=True) or {}
    recipients = payload.get('recipients')
    if not isinstance(recipients, list) or not recipients:
        raise ValidationError("recipients are required")
    errors = []
    emails, whatsapps = send_to_group(recipients,
                                      payload.get('emailSubject'),
                                      payload.get('emailContent'),
                                      payload.get('whatsappTemplate'),
                                      payload.get('whatsappImage'),
                                      errors)
    commit_or_raise("Failed to store notification log")
    return jsonify({
        'success': True,
        'totalEmailsSent': emails,
        'totalWhatsappsSent': whatsapps,
        'errors': errors,
    })
