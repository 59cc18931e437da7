from ..extensions import db
from .base import TimestampMixin

class Notification(db.Model, TimestampMixin):
    __tablename__ = "notifications"
    id = db.Column(db.Integer, primary_key=True)
    kind = db.Column(db.String(20))  # email/whatsapp
    sent_to = db.Column(db.String(255))
    subject = db.Column(db.String(255))
    template = db.Column(db.String(120))
    group_name = db.Column(db.String(50))  # Passed/Failed/Invitation/...
    status = db.Column(db.String(20))  # sent/failed
    error = db.Column(db.Text)
    sent_at = db.Column(db.DateTime)
