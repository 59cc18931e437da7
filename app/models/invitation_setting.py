from ..extensions import db
from .base import TimestampMixin

class InvitationSetting(db.Model, TimestampMixin):
    __tablename__ = "invitation_settings"
    id = db.Column(db.Integer, primary_key=True)
    email_subject = db.Column(db.String(255))
    email_content = db.Column(db.Text)
    whatsapp_template = db.Column(db.String(120))
    whatsapp_image = db.Column(db.String(512))
    whatsapp_param_2 = db.Column(db.String(255))
    whatsapp_url_button = db.Column(db.String(512))

    EDITABLE = ("email_subject", "email_content", "whatsapp_template",
                "whatsapp_image", "whatsapp_param_2", "whatsapp_url_button")

    @classmethod
    def current(cls):
        row = cls.query.order_by(cls.id.asc()).first()
        if row is None:
            row = cls()
            db.session.add(row)
            db.session.flush()
        return row

    def to_dict(self):
        out = {k: getattr(self, k) for k in self.EDITABLE}
        out["id"] = self.id
        return out
