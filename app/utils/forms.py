from werkzeug.datastructures import MultiDict

from ..errors import ValidationError


def json_formdata(payload):
    """Flatten a JSON object into form data for WTForms.

    Nested values are left out (forms only carry scalar fields) and booleans
    are mapped to checkbox values.
    """
    out = MultiDict()
    for key, value in (payload or {}).items():
        if value is None or isinstance(value, (dict, list)):
            continue
        if isinstance(value, bool):
            value = 'y' if value else ''
        out[key] = str(value)
    return out


def load_form(form_cls, payload):
    """Validate a JSON payload with a Flask-WTF form class.

    Raises ValidationError carrying the first message per field.
    """
    form = form_cls(formdata=json_formdata(payload))
    if not form.validate():
        raise ValidationError("Invalid request", fields={k: v[0] for k, v in form.errors.items()})
    return form
