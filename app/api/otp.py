# app/api/otp.py
import secrets

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_user
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from app.errors import NotFoundError, PersistenceError, ValidationError
from app.extensions import db
from app.models import Invitee, Submission, User
from app.services import mail
from app.services import otp_store
from app.services.email_template import render_otp_content

bp = Blueprint("otp", __name__)

OTP_SUBJECT = "رمز التحقق"


def _email_from(payload):
    return (payload.get('email') or '').strip().lower()


def _is_known_email(email):
    sub = Submission.query.filter(func.lower(Submission.user_email) == email).first()
    return sub is not None or Invitee.find_by_email(email) is not None


def generate_otp():
    return f"{secrets.randbelow(10 ** 6):06d}"


@bp.route("/api/send-otp", methods=["POST"])
def send_otp():
    payload = request.get_json(silent=True) or {}
    email = _email_from(payload)
    if not email:
        raise ValidationError("Email is required")
    if not _is_known_email(email):
        raise NotFoundError("Email is not registered")

    ttl = int(current_app.config.get('OTP_TTL_SEC', 600))
    code = generate_otp()
    otp_store.get_otp_store(current_app).put(email, code, ttl)
    mail.send_email(email, OTP_SUBJECT, render_otp_content(code, max(ttl // 60, 1)))
    current_app.logger.info('OTP sent to %s', email)
    return jsonify({"success": True})


@bp.route("/api/verify-otp", methods=["POST"])
def verify_otp():
    payload = request.get_json(silent=True) or {}
    email = _email_from(payload)
    code = str(payload.get('otp') or '').strip()
    if not email or not code:
        raise ValidationError("Email and OTP are required")

    status = otp_store.get_otp_store(current_app).take_if_valid(email, code)
    if status == otp_store.MISSING:
        raise ValidationError("OTP expired or not found")
    if status == otp_store.MISMATCH:
        raise ValidationError("Invalid OTP")

    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(email=email, role="applicant")
        db.session.add(user)
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError("Failed to create user") from e
    login_user(user)
    return jsonify({"success": True, "redirect_to": current_app.config.get('SITE_URL')})
