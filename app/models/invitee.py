from ..extensions import db
from .base import TimestampMixin

class Invitee(db.Model, TimestampMixin):
    __tablename__ = "invitees"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(254), index=True)
    phone = db.Column(db.String(40))
    city = db.Column(db.String(120))
    gender = db.Column(db.String(20))  # male/female
    channel = db.Column(db.String(100))
    note = db.Column(db.Text)

    email_sent = db.Column(db.Boolean, default=False)
    whatsapp_sent = db.Column(db.Boolean, default=False)
    invited_at = db.Column(db.DateTime)

    @classmethod
    def find_by_email(cls, email):
        if not email:
            return None
        key = email.strip().lower()
        return cls.query.filter(db.func.lower(db.func.trim(cls.email)) == key).first()

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "city": self.city,
            "gender": self.gender,
            "channel": self.channel,
            "note": self.note,
            "email_sent": bool(self.email_sent),
            "whatsapp_sent": bool(self.whatsapp_sent),
            "invited_at": self.invited_at.isoformat() if self.invited_at else None,
        }

    def __repr__(self) -> str:
        return f"<Invitee id={self.id} name={self.name!r}>"
