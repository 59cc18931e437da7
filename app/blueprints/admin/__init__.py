from flask import Blueprint

bp = Blueprint("admin", __name__)

from . import fields, submissions, stages, invitees  # noqa: E402,F401
