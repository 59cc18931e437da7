from ..extensions import db
from .base import TimestampMixin

FILTERING_DECISIONS = ("auto", "nominated", "exclude")

# stage number -> (answers column, AI evaluations column)
STAGE_COLUMNS = {
    1: ("data", "ai_evaluations"),
    2: ("data_stage_2", "ai_evaluations_stage_2"),
    3: ("data_stage_3", "ai_evaluations_stage_3"),
}


class Submission(db.Model, TimestampMixin):
    __tablename__ = "form_submissions"

    id = db.Column(db.Integer, primary_key=True)
    user_email = db.Column(db.String(254), unique=True, nullable=False, index=True)
    # 1..3 scored, 4 confirmation, 5 done
    stage = db.Column(db.Integer, nullable=False, default=1, index=True)

    data = db.Column(db.JSON)
    data_stage_2 = db.Column(db.JSON)
    data_stage_3 = db.Column(db.JSON)
    ai_evaluations = db.Column(db.JSON)
    ai_evaluations_stage_2 = db.Column(db.JSON)
    ai_evaluations_stage_3 = db.Column(db.JSON)

    filtering_decision = db.Column(db.String(20), nullable=False, default="auto", index=True)
    channel = db.Column(db.String(100), index=True)
    note = db.Column(db.Text)

    def answers_for(self, stage):
        cols = STAGE_COLUMNS.get(stage)
        if not cols:
            return {}
        return getattr(self, cols[0], None) or {}

    def evaluations_for(self, stage):
        cols = STAGE_COLUMNS.get(stage)
        if not cols:
            return {}
        return getattr(self, cols[1], None) or {}

    def set_answers(self, stage, answers):
        setattr(self, STAGE_COLUMNS[stage][0], dict(answers))

    def set_evaluations(self, stage, evaluations):
        setattr(self, STAGE_COLUMNS[stage][1], dict(evaluations))

    def has_submitted(self, stage):
        return bool(self.answers_for(stage))

    def contact(self):
        """Name, phone and gender always come from the stage-1 answers."""
        d = self.data or {}
        return {
            "user_name": d.get("fullName") or "مستخدم",
            "user_email": self.user_email,
            "user_phone": d.get("phoneNumber") or d.get("phone") or None,
            "user_gender": d.get("gender") or None,
            "filtering_decision": self.filtering_decision or "auto",
        }

    def to_dict(self):
        return {
            "id": self.id,
            "user_email": self.user_email,
            "stage": self.stage,
            "data": self.data or {},
            "data_stage_2": self.data_stage_2 or {},
            "data_stage_3": self.data_stage_3 or {},
            "ai_evaluations": self.ai_evaluations or {},
            "ai_evaluations_stage_2": self.ai_evaluations_stage_2 or {},
            "ai_evaluations_stage_3": self.ai_evaluations_stage_3 or {},
            "filtering_decision": self.filtering_decision or "auto",
            "channel": self.channel,
            "note": self.note,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<Submission id={self.id} email={self.user_email!r} stage={self.stage}>"
