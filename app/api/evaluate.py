# app/api/evaluate.py
from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from app.errors import AuthorizationError, NotFoundError, ValidationError
from app.extensions import db
from app.jobs.evaluate import evaluate_submission
from app.models import Admin, Submission

bp = Blueprint("evaluate", __name__)


@bp.route("/api/evaluate-submission", methods=["POST"])
@login_required
def evaluate():
    """Evaluate the stage-1 AI fields of a submission and store the results."""
    payload = request.get_json(silent=True) or {}
    submission_id = payload.get('submissionId')
    user_email = (payload.get('userEmail') or '').strip().lower()
    form_data = payload.get('formData')
    if not submission_id or not user_email:
        raise ValidationError("submissionId and userEmail are required")
    if form_data is not None and not isinstance(form_data, dict):
        raise ValidationError("formData must be an object")

    sub = db.session.get(Submission, int(submission_id))
    if sub is None or sub.user_email.lower() != user_email:
        raise NotFoundError("Submission not found")
    if current_user.email.lower() != user_email and not Admin.is_admin_email(current_user.email):
        raise AuthorizationError("Unauthorized")

    evaluations = evaluate_submission(sub.id, 1, form_data)
    return jsonify({'success': True, 'evaluations': evaluations or {}})
