"""Forms for decoding JSON request bodies."""

from typing import Any, Optional, Type, TypeVar

from werkzeug.exceptions import BadRequest
from wtforms import Field, Form, StringField
from wtforms.validators import ValidationError

from .domain import User

MALFORMED_BODY = 'request body must be a JSON object'

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1

F = TypeVar('F', bound=Form)


def string(form: Form, field: Any) -> None:
    """Reject values that are neither strings nor absent."""
    if field.data is not None and not isinstance(field.data, str):
        raise ValidationError('must be a string')


def present(form: Form, field: Any) -> None:
    """Reject fields that are missing from the body."""
    if field.data is None:
        raise ValidationError('is required')


def int64(form: Form, field: Any) -> None:
    """Reject values that are not JSON integers in the signed 64-bit range."""
    if field.data is None:
        return
    if isinstance(field.data, bool) or not isinstance(field.data, int):
        raise ValidationError('must be an integer')
    if not INT64_MIN <= field.data <= INT64_MAX:
        raise ValidationError('is out of range')


class RegistrationForm(Form):
    """Body of ``POST /users``."""

    email = StringField('E-mail', validators=[string])
    password = StringField('Password', validators=[string])
    confirm_password = StringField('Confirm password', validators=[string])
    phone = StringField('Phone', validators=[string])

    def to_domain(self) -> User:
        """Generate a :class:`.User` from this form's data."""
        return User(
            email=self.email.data or None,
            phone=self.phone.data or None,
            password=self.password.data or ''
        )


class LoginForm(Form):
    """Body of ``POST /sessions``."""

    email = StringField('E-mail', validators=[string])
    password = StringField('Password', validators=[string])


class TelegramCheckForm(Form):
    """Body of ``POST /telegram/check``."""

    # Plain field: the decoded JSON value is validated as is, never coerced.
    id_telegram = Field('Telegram id', validators=[present, int64])


def load(form_class: Type[F], payload: Optional[Any]) -> F:
    """
    Decode a JSON payload with ``form_class``.

    Raises
    ------
    :class:`.BadRequest`
        If the payload is not a JSON object, or does not validate.

    """
    if not isinstance(payload, dict):
        raise BadRequest(MALFORMED_BODY)
    form = form_class(data=payload)
    if not form.validate():
        name, messages = next(iter(form.errors.items()))
        raise BadRequest(f'{name}: {messages[0]}')
    return form
