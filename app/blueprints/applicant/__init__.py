from flask import Blueprint

bp = Blueprint("applicant", __name__)

from . import routes  # noqa: E402,F401
