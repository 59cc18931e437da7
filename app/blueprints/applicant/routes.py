from flask import current_app, request, jsonify
from flask_login import login_required, current_user
from . import bp
from ...errors import ValidationError
from ...extensions import db, rq
from ...jobs.evaluate import evaluate_submission
from ...models.form_field import FormField
from ...models.invitee import Invitee
from ...models.stage_setting import StageSetting
from ...models.submission import Submission, STAGE_COLUMNS
from ...services.form_validation import validate_answers
from ...services.stages import stage_is_open
from ...utils.db import commit_or_raise

CONFIRMATION_STAGE = 4
DONE_STAGE = 5


def _current_submission():
    return Submission.query.filter_by(user_email=current_user.email).first()


def _stage_fields(stage):
    return (FormField.query
            .filter_by(stage=stage)
            .order_by(FormField.display_order.asc(), FormField.id.asc())
            .all())


@bp.route("/state", methods=["GET"])
@login_required
def state():
    sub = _current_submission()
    stage = sub.stage if sub else 1
    setting = StageSetting.for_stage(stage)
    return jsonify({
        "stage": stage,
        "submitted": bool(sub and sub.has_submitted(stage)),
        "is_open": setting is None or setting.is_open,
        "settings": setting.to_dict() if setting else None,
    })


@bp.route("/fields", methods=["GET"])
@login_required
def fields():
    sub = _current_submission()
    stage = sub.stage if sub else 1
    return jsonify({"stage": stage, "fields": [f.to_dict() for f in _stage_fields(stage)]})


@bp.route("/submit", methods=["POST"])
@login_required
def submit():
    payload = request.get_json(silent=True) or {}
    data = payload.get('data')
    if not isinstance(data, dict) or not data:
        raise ValidationError("Form data is required")

    sub = _current_submission()
    stage = sub.stage if sub else 1
    if stage not in STAGE_COLUMNS:
        raise ValidationError("There is no form to submit at this stage")
    if not stage_is_open(stage):
        raise ValidationError("This stage is closed")
    if sub and sub.has_submitted(stage):
        raise ValidationError("This stage has already been submitted")

    stage_fields = _stage_fields(stage)
    validate_answers(stage_fields, data)

    if sub is None:
        invitee = Invitee.find_by_email(current_user.email)
        sub = Submission(user_email=current_user.email, stage=1,
                         channel=invitee.channel if invitee else None,
                         note=invitee.note if invitee else None)
        db.session.add(sub)
    sub.set_answers(stage, data)
    commit_or_raise("Failed to save submission")
    current_app.logger.info('Submission %s stored stage %s answers', sub.id, stage)

    if any(f.is_ai_calculated for f in stage_fields):
        # runs inline when Redis is unavailable; failures are logged by the wrapper
        rq.enqueue(evaluate_submission, sub.id, stage, job_timeout=600)

    return jsonify({"success": True, "submission": {"id": sub.id, "stage": sub.stage}})


@bp.route("/confirm", methods=["POST"])
@login_required
def confirm():
    sub = _current_submission()
    if sub is None or sub.stage != CONFIRMATION_STAGE:
        raise ValidationError("Nothing to confirm at this stage")
    sub.stage = DONE_STAGE
    commit_or_raise("Failed to confirm attendance")
    return jsonify({"success": True, "stage": sub.stage})
