from flask import request, jsonify
from . import bp
from ...errors import NotFoundError
from ...extensions import db
from ...models.form_field import FormField
from ...models.submission import Submission
from ...services.filtering import set_decision, bulk_set_decision
from ...services.scoring import score_breakdown
from ...utils.decorators import admin_required


def _summary(sub, fields):
    contact = sub.contact()
    return {
        "id": sub.id,
        "user_email": sub.user_email,
        "user_name": contact["user_name"],
        "user_phone": contact["user_phone"],
        "stage": sub.stage,
        "filtering_decision": sub.filtering_decision or "auto",
        "channel": sub.channel,
        "scores": score_breakdown(sub, fields),
        "created_at": sub.created_at.isoformat() if sub.created_at else None,
    }


@bp.route("/submissions", methods=["GET"])
@admin_required
def list_submissions():
    query = Submission.query
    stage = request.args.get("stage", type=int)
    decision = request.args.get("decision")
    channel = request.args.get("channel")
    if stage:
        query = query.filter(Submission.stage == stage)
    if decision:
        query = query.filter(Submission.filtering_decision == decision)
    if channel:
        query = query.filter(Submission.channel == channel)
    fields = FormField.query.all()
    rows = [_summary(s, fields) for s in query.order_by(Submission.id.asc()).all()]
    if request.args.get("sort") == "score":
        rows.sort(key=lambda r: r["scores"]["total"], reverse=True)
    return jsonify({"submissions": rows, "count": len(rows)})


@bp.route("/submissions/<int:submission_id>", methods=["GET"])
@admin_required
def submission_detail(submission_id):
    sub = db.session.get(Submission, submission_id)
    if sub is None:
        raise NotFoundError("Submission not found")
    out = sub.to_dict()
    out["scores"] = score_breakdown(sub, FormField.query.all())
    return jsonify(out)


@bp.route("/submissions/<int:submission_id>/decision", methods=["PUT"])
@admin_required
def update_decision(submission_id):
    payload = request.get_json(silent=True) or {}
    sub = set_decision(submission_id, payload.get("decision"))
    return jsonify({"success": True, "id": sub.id, "filtering_decision": sub.filtering_decision})


@bp.route("/submissions/decision", methods=["POST"])
@admin_required
def bulk_update_decision():
    payload = request.get_json(silent=True) or {}
    count = bulk_set_decision(payload.get("ids"), payload.get("decision"))
    return jsonify({"success": True, "updated": count})
