from ..extensions import db
from .base import TimestampMixin

class Admin(db.Model, TimestampMixin):
    """Emails allowed to use the staff endpoints."""
    __tablename__ = "admins"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)

    @classmethod
    def is_admin_email(cls, email):
        if not email:
            return False
        return cls.query.filter_by(email=email.strip().lower()).first() is not None
