"""Applicant answer validation.

Each stage's FormField rows become a throwaway Flask-WTF form; the Arabic
messages shown to applicants are the validators' ``message`` values.
"""
import re

from flask import current_app
from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Optional, Length, Regexp, Email
from wtforms.validators import ValidationError as FieldError

from ..errors import ValidationError
from ..utils.forms import load_form

# answers of these types must be JSON strings
TEXT_TYPES = ("text", "email", "tel", "textarea")
MIN_PHONE_DIGITS = 10


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class PhoneDigits:
    def __init__(self, minimum=MIN_PHONE_DIGITS, message=None):
        self.minimum = minimum
        self.message = message

    def __call__(self, form, field):
        if len(re.sub(r"\D", "", field.data or "")) < self.minimum:
            raise FieldError(self.message)


def _int_rule(rules, key):
    try:
        return int(rules[key]) if rules.get(key) else None
    except (TypeError, ValueError):
        return None


def field_validators(field):
    label = field.label
    rules = field.validation_rules or {}
    if field.is_required:
        validators = [DataRequired(message=f"{label} مطلوب")]
    else:
        validators = [Optional()]

    min_len = _int_rule(rules, 'minLength')
    if min_len:
        validators.append(Length(min=min_len, message=f"{label} يجب أن يكون {min_len} أحرف على الأقل"))
    max_len = _int_rule(rules, 'maxLength')
    if max_len:
        validators.append(Length(max=max_len, message=f"{label} يجب ألا يتجاوز {max_len} حرف"))

    # phone numbers are checked by digit count instead of by pattern
    if rules.get('pattern') and field.field_type != 'tel':
        try:
            # search semantics: the pattern may match anywhere unless anchored
            regex = re.compile(f".*?(?:{rules['pattern']})", re.DOTALL)
        except re.error:
            current_app.logger.warning('Invalid pattern on field %s: %r', field.field_name, rules['pattern'])
        else:
            validators.append(Regexp(regex, message=rules.get('errorMessage') or f"{label} غير صحيح"))

    if field.field_type == 'tel':
        validators.append(PhoneDigits(message="رقم الجوال يجب أن يحتوي على 10 أرقام على الأقل"))
    if field.field_type == 'email':
        validators.append(Email(message="البريد الإلكتروني غير صحيح"))
    return validators


def build_answers_form(fields):
    """Return (form class, {form attribute: field_name}) for one stage's fields."""
    class AnswersForm(FlaskForm):
        pass

    keys = {}
    for i, field in enumerate(fields):
        attr = f"answer_{i}"
        keys[attr] = field.field_name
        setattr(AnswersForm, attr, StringField(field.label, validators=field_validators(field),
                                               filters=[_strip]))
    return AnswersForm, keys


def _type_errors(fields, answers):
    errors = {}
    for field in fields:
        value = answers.get(field.field_name)
        if field.field_type in TEXT_TYPES and value is not None and not isinstance(value, str):
            errors[field.field_name] = f"{field.label} غير صحيح"
    return errors


def validate_answers(fields, answers):
    """Check submitted answers against the stage's field definitions.

    Raises ValidationError whose ``fields`` map field_name -> Arabic message.
    """
    fields = list(fields)
    form_cls, keys = build_answers_form(fields)
    errors = {}
    try:
        load_form(form_cls, {attr: answers.get(name) for attr, name in keys.items()})
    except ValidationError as e:
        errors = {keys[attr]: message for attr, message in e.fields.items()}
    errors.update(_type_errors(fields, answers))
    if errors:
        raise ValidationError("Invalid answers", fields=errors)
    return answers
