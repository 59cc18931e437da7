from functools import wraps
from flask_login import current_user

from ..errors import AuthorizationError
from ..models.admin import Admin


def admin_required(view):
    """Allow only signed-in users whose email is listed in the admins table."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            raise AuthorizationError("Unauthorized")
        if not Admin.is_admin_email(getattr(current_user, "email", None)):
            raise AuthorizationError("Unauthorized - not an admin")
        return view(*args, **kwargs)
    return wrapped
