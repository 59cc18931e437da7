from flask import request, jsonify
from . import bp
from .forms import StageSettingForm, ActiveStageForm
from ...errors import NotFoundError, ValidationError
from ...models.stage_setting import StageSetting, MESSAGE_KEYS
from ...services.stages import active_stage, set_active_stage
from ...utils.db import commit_or_raise
from ...utils.decorators import admin_required
from ...utils.forms import load_form

MESSAGE_COLUMNS = ("pre_stage_messages", "post_stage_messages")


def _check_stage(stage):
    if stage < 1 or stage > 5:
        raise NotFoundError("Unknown stage")


@bp.route("/stages", methods=["GET"])
@admin_required
def list_stages():
    rows = StageSetting.query.order_by(StageSetting.stage.asc()).all()
    return jsonify({"stages": [r.to_dict() for r in rows], "active_stage": active_stage()})


@bp.route("/stages/<int:stage>", methods=["GET"])
@admin_required
def get_stage(stage):
    _check_stage(stage)
    row = StageSetting.for_stage(stage)
    if row is None:
        return jsonify(StageSetting(stage=stage, status="open").to_dict())
    return jsonify(row.to_dict())


@bp.route("/stages/<int:stage>", methods=["PUT"])
@admin_required
def update_stage(stage):
    _check_stage(stage)
    payload = request.get_json(silent=True) or {}
    row = StageSetting.for_stage(stage, create=True)
    form = load_form(StageSettingForm, dict(row.to_dict(), **payload))
    form.populate_obj(row)
    for column in MESSAGE_COLUMNS:
        if column not in payload:
            continue
        messages = payload[column] or {}
        if not isinstance(messages, dict):
            raise ValidationError("Invalid request", fields={column: "Must be a JSON object"})
        setattr(row, column, {k: messages[k] for k in MESSAGE_KEYS if k in messages})
    commit_or_raise("Failed to update stage settings")
    return jsonify(row.to_dict())


@bp.route("/active-stage", methods=["GET"])
@admin_required
def get_active_stage():
    return jsonify({"active_stage": active_stage()})


@bp.route("/active-stage", methods=["PUT"])
@admin_required
def update_active_stage():
    form = load_form(ActiveStageForm, request.get_json(silent=True))
    set_active_stage(form.stage.data)
    commit_or_raise("Failed to update active stage")
    return jsonify({"active_stage": active_stage()})
