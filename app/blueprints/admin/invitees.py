from flask import request, jsonify
from . import bp
from .forms import InviteeForm, InvitationSettingForm
from ...errors import NotFoundError, ValidationError
from ...extensions import db
from ...models.invitee import Invitee
from ...models.invitation_setting import InvitationSetting
from ...utils.db import commit_or_raise
from ...utils.decorators import admin_required
from ...utils.forms import load_form


def _get_invitee(invitee_id):
    inv = db.session.get(Invitee, invitee_id)
    if inv is None:
        raise NotFoundError("Invitee not found")
    return inv


def _apply(inv, form):
    form.populate_obj(inv)
    inv.email = inv.email.strip().lower() if inv.email else None
    inv.gender = inv.gender or None


def _check_unique_email(email, current_id=None):
    other = Invitee.find_by_email(email)
    if other is not None and other.id != current_id:
        raise ValidationError("Invalid request", fields={"email": "An invitee with this email already exists"})


@bp.route("/invitees", methods=["GET"])
@admin_required
def list_invitees():
    query = Invitee.query
    channel = request.args.get("channel")
    if channel:
        query = query.filter(Invitee.channel == channel)
    rows = query.order_by(Invitee.id.asc()).all()
    return jsonify({"invitees": [i.to_dict() for i in rows]})


@bp.route("/invitees", methods=["POST"])
@admin_required
def create_invitee():
    form = load_form(InviteeForm, request.get_json(silent=True))
    _check_unique_email(form.email.data)
    inv = Invitee()
    _apply(inv, form)
    db.session.add(inv)
    commit_or_raise("Failed to create invitee")
    return jsonify(inv.to_dict()), 201


@bp.route("/invitees/<int:invitee_id>", methods=["PUT"])
@admin_required
def update_invitee(invitee_id):
    inv = _get_invitee(invitee_id)
    payload = request.get_json(silent=True) or {}
    form = load_form(InviteeForm, dict(inv.to_dict(), **payload))
    _check_unique_email(form.email.data, current_id=inv.id)
    _apply(inv, form)
    commit_or_raise("Failed to update invitee")
    return jsonify(inv.to_dict())


@bp.route("/invitees/<int:invitee_id>", methods=["DELETE"])
@admin_required
def delete_invitee(invitee_id):
    inv = _get_invitee(invitee_id)
    db.session.delete(inv)
    commit_or_raise("Failed to delete invitee")
    return jsonify({"success": True})


@bp.route("/invitation-settings", methods=["GET"])
@admin_required
def get_invitation_settings():
    row = InvitationSetting.current()
    commit_or_raise("Failed to load invitation settings")
    return jsonify(row.to_dict())


@bp.route("/invitation-settings", methods=["PUT"])
@admin_required
def update_invitation_settings():
    row = InvitationSetting.current()
    payload = request.get_json(silent=True) or {}
    form = load_form(InvitationSettingForm, dict(row.to_dict(), **payload))
    for key in InvitationSetting.EDITABLE:
        setattr(row, key, getattr(form, key).data or None)
    commit_or_raise("Failed to update invitation settings")
    return jsonify(row.to_dict())
