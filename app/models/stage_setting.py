from ..extensions import db
from .base import TimestampMixin

# keys of the pre/post stage message payloads
MESSAGE_KEYS = (
    "passedEmailSubject", "passedEmailContent",
    "failedEmailSubject", "failedEmailContent",
    "passedWhatsappTemplate", "passedWhatsappImage",
    "failedWhatsappTemplate", "failedWhatsappImage",
)


class StageSetting(db.Model, TimestampMixin):
    __tablename__ = "stage_settings"

    id = db.Column(db.Integer, primary_key=True)
    stage = db.Column(db.Integer, nullable=False, unique=True, index=True)
    status = db.Column(db.String(20), default="open")  # open/closed
    welcome_message = db.Column(db.Text)
    user_agreement = db.Column(db.Text)
    success_message = db.Column(db.Text)
    pre_stage_messages = db.Column(db.JSON)
    post_stage_messages = db.Column(db.JSON)

    @classmethod
    def for_stage(cls, stage, create=False):
        row = cls.query.filter_by(stage=stage).first()
        if row is None and create:
            row = cls(stage=stage, status="open")
            db.session.add(row)
            db.session.flush()
        return row

    @property
    def is_open(self):
        return (self.status or "open") == "open"

    def to_dict(self):
        return {
            "stage": self.stage,
            "status": self.status or "open",
            "welcome_message": self.welcome_message,
            "user_agreement": self.user_agreement,
            "success_message": self.success_message,
            "pre_stage_messages": self.pre_stage_messages or {},
            "post_stage_messages": self.post_stage_messages or {},
        }

    def __repr__(self):
        return f"<StageSetting stage={self.stage} status={self.status}>"
