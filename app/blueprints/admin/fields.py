from flask import request, jsonify
from . import bp
from .forms import FieldForm
from ...errors import NotFoundError, ValidationError
from ...extensions import db
from ...models.form_field import FormField
from ...utils.db import commit_or_raise
from ...utils.decorators import admin_required
from ...utils.forms import load_form

# stored as JSON, passed through as-is
JSON_KEYS = ("options", "validation_rules", "ai_prompt")


def _get_field(field_id):
    field = db.session.get(FormField, field_id)
    if field is None:
        raise NotFoundError("Field not found")
    return field


def _apply(field, form, payload):
    json_values = {k: payload[k] for k in JSON_KEYS if k in payload}
    for key, value in json_values.items():
        if value is not None and not isinstance(value, (dict, list)):
            raise ValidationError("Invalid request", fields={key: "Must be a JSON object or list"})
    form.populate_obj(field)
    for key, value in json_values.items():
        setattr(field, key, value)
    if field.display_order is None:
        field.display_order = 0


@bp.route("/fields", methods=["GET"])
@admin_required
def list_fields():
    query = FormField.query
    stage = request.args.get("stage", type=int)
    if stage:
        query = query.filter_by(stage=stage)
    rows = query.order_by(FormField.stage.asc(), FormField.display_order.asc(), FormField.id.asc()).all()
    return jsonify({"fields": [f.to_dict() for f in rows]})


@bp.route("/fields", methods=["POST"])
@admin_required
def create_field():
    payload = request.get_json(silent=True) or {}
    form = load_form(FieldForm, payload)
    field = FormField()
    _apply(field, form, payload)
    db.session.add(field)
    commit_or_raise("Failed to create field")
    return jsonify(field.to_dict()), 201


@bp.route("/fields/<int:field_id>", methods=["PUT"])
@admin_required
def update_field(field_id):
    field = _get_field(field_id)
    payload = request.get_json(silent=True) or {}
    merged = dict(field.to_dict(), **payload)
    form = load_form(FieldForm, merged)
    _apply(field, form, payload)
    commit_or_raise("Failed to update field")
    return jsonify(field.to_dict())


@bp.route("/fields/<int:field_id>", methods=["DELETE"])
@admin_required
def delete_field(field_id):
    field = _get_field(field_id)
    db.session.delete(field)
    commit_or_raise("Failed to delete field")
    return jsonify({"success": True})


@bp.route("/fields/reorder", methods=["POST"])
@admin_required
def reorder_fields():
    """Body: {"order": [field_id, ...]}; position in the list becomes display_order."""
    order = (request.get_json(silent=True) or {}).get("order")
    if not isinstance(order, list) or not order:
        raise ValidationError("order must be a non-empty list of field ids")
    rows = {f.id: f for f in FormField.query.filter(FormField.id.in_(order)).all()}
    for position, field_id in enumerate(order):
        field = rows.get(field_id)
        if field is not None:
            field.display_order = position
    commit_or_raise("Failed to reorder fields")
    return jsonify({"success": True, "updated": len(rows)})
