from flask import request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from . import bp
from .forms import LoginForm
from ...errors import AuthorizationError
from ...models.admin import Admin
from ...models.user import User
from ...utils.forms import load_form


def _user_payload(user):
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "is_admin": Admin.is_admin_email(user.email),
    }


@bp.route("/login", methods=["POST"])
def login():
    """Staff sign-in with email and password."""
    form = load_form(LoginForm, request.get_json(silent=True))
    email = form.email.data.strip().lower()
    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(form.password.data):
        raise AuthorizationError("Invalid credentials")
    if not Admin.is_admin_email(email):
        raise AuthorizationError("Unauthorized - not an admin")
    login_user(user, remember=form.remember.data)
    return jsonify({"success": True, "user": _user_payload(user)})


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"success": True})


@bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify(_user_payload(current_user))
