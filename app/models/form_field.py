from ..extensions import db
from .base import TimestampMixin

FIELD_TYPES = ("text", "email", "tel", "select", "radio", "textarea", "date", "number")


class FormField(db.Model, TimestampMixin):
    __tablename__ = "form_fields"

    id = db.Column(db.Integer, primary_key=True)
    field_name = db.Column(db.String(120), nullable=False, index=True)
    label = db.Column(db.String(255), nullable=False)
    field_type = db.Column(db.String(20), nullable=False, default="text")
    placeholder = db.Column(db.String(255))
    # [{"value": "...", "label": "...", "weight": 10}] or {"options": [...]}
    options = db.Column(db.JSON)
    validation_rules = db.Column(db.JSON)  # {"minLength":..,"maxLength":..,"pattern":..,"errorMessage":..}
    is_required = db.Column(db.Boolean, default=False)
    display_order = db.Column(db.Integer, default=0)
    stage = db.Column(db.Integer, nullable=False, default=1, index=True)

    # scoring
    has_weight = db.Column(db.Boolean, default=False)
    is_ai_calculated = db.Column(db.Boolean, default=False)
    ai_prompt = db.Column(db.JSON)  # {"instruction","context","rubric":{"headers","rows"},"examples"}
    question_title = db.Column(db.String(255))

    def option_list(self):
        opts = self.options
        if not opts:
            return []
        if isinstance(opts, list):
            return opts
        if isinstance(opts, dict) and isinstance(opts.get("options"), list):
            return opts["options"]
        return []

    def to_dict(self):
        return {
            "id": self.id,
            "field_name": self.field_name,
            "label": self.label,
            "field_type": self.field_type,
            "placeholder": self.placeholder,
            "options": self.options,
            "validation_rules": self.validation_rules,
            "is_required": bool(self.is_required),
            "display_order": self.display_order,
            "stage": self.stage,
            "has_weight": bool(self.has_weight),
            "is_ai_calculated": bool(self.is_ai_calculated),
            "ai_prompt": self.ai_prompt,
            "question_title": self.question_title,
        }

    def __repr__(self) -> str:
        return f"<FormField id={self.id} stage={self.stage} name={self.field_name!r}>"
