from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, BooleanField, SelectField, TextAreaField
from wtforms.validators import DataRequired, Optional, Email, Length, NumberRange, Regexp

from ...models.form_field import FIELD_TYPES


class FieldForm(FlaskForm):
    field_name = StringField("Field name", validators=[
        DataRequired(), Length(max=120),
        Regexp(r"^[A-Za-z_][A-Za-z0-9_]*$", message="Use letters, digits and underscores only")])
    label = StringField("Label", validators=[DataRequired(), Length(max=255)])
    field_type = SelectField("Type", choices=[(t, t) for t in FIELD_TYPES], default="text")
    placeholder = StringField("Placeholder", validators=[Optional(), Length(max=255)])
    stage = IntegerField("Stage", default=1, validators=[NumberRange(min=1, max=3)])
    display_order = IntegerField("Order", default=0, validators=[Optional()])
    is_required = BooleanField("Required")
    has_weight = BooleanField("Weighted")
    is_ai_calculated = BooleanField("AI evaluated")
    question_title = StringField("Question title", validators=[Optional(), Length(max=255)])


class InviteeForm(FlaskForm):
    name = StringField("Name", validators=[DataRequired(), Length(max=120)])
    email = StringField("Email", validators=[Optional(), Email()])
    phone = StringField("Phone", validators=[Optional(), Length(max=40)])
    city = StringField("City", validators=[Optional(), Length(max=120)])
    gender = StringField("Gender", validators=[Optional(), Length(max=20)])  # male/female
    channel = StringField("Channel", validators=[Optional(), Length(max=100)])
    note = TextAreaField("Note", validators=[Optional()])


class StageSettingForm(FlaskForm):
    status = SelectField("Status", choices=[("open", "open"), ("closed", "closed")], default="open")
    welcome_message = TextAreaField("Welcome message", validators=[Optional()])
    user_agreement = TextAreaField("User agreement", validators=[Optional()])
    success_message = TextAreaField("Success message", validators=[Optional()])


class InvitationSettingForm(FlaskForm):
    email_subject = StringField("Email subject", validators=[Optional(), Length(max=255)])
    email_content = TextAreaField("Email content", validators=[Optional()])
    whatsapp_template = StringField("WhatsApp template", validators=[Optional(), Length(max=120)])
    whatsapp_image = StringField("WhatsApp image", validators=[Optional(), Length(max=512)])
    whatsapp_param_2 = StringField("WhatsApp second parameter", validators=[Optional(), Length(max=255)])
    whatsapp_url_button = StringField("WhatsApp URL button", validators=[Optional(), Length(max=512)])


class ActiveStageForm(FlaskForm):
    stage = IntegerField("Stage", validators=[NumberRange(min=1, max=5)])
