"""Defines the user record and its credential rules."""

import re
import string
from dataclasses import dataclass
from typing import Any, Dict, Optional

import bcrypt
from email_validator import validate_email, EmailNotValidError

from .exceptions import ValidationError, HashError

HASH_ROUNDS = 4
"""bcrypt cost factor.

This is bcrypt's minimum cost. It keeps registration and login cheap, at the
expense of resistance to offline attacks on leaked hashes.
"""

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 30

PHONE_PATTERN = re.compile(r'^\+?[0-9]{7,15}$')

BLANK = 'cannot be blank'


@dataclass
class User:
    """
    A user account.

    A user is identified by an e-mail address (and password), by a Telegram
    user id, or by both. ``password`` holds the plaintext password only while
    a registration or login request is being handled; only
    ``encrypted_password`` is ever stored.
    """

    id: int = 0
    id_telegram: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: str = ''
    encrypted_password: Optional[str] = None

    def validate(self) -> None:
        """
        Check the user against the credential rules.

        All rules are evaluated and the failures are collected, so that the
        caller gets every problem at once. A rule that only applies under a
        condition (e.g. the e-mail address is required only if there is no
        Telegram id) is skipped when the condition does not hold.

        Raises
        ------
        :class:`.ValidationError`
            If any rule fails. ``errors`` maps field names to messages.

        """
        errors: Dict[str, str] = {}

        if self.email is None:
            if self.id_telegram is None:
                errors['id_telegram'] = BLANK
            elif self.id_telegram < 0:
                errors['id_telegram'] = 'must be no less than 0'

        if self.id_telegram is None:
            if not self.email:
                errors['email'] = BLANK
            else:
                try:
                    validate_email(self.email, check_deliverability=False)
                except EmailNotValidError:
                    errors['email'] = 'must be a valid email address'

        if not self.password:
            if not self.encrypted_password and self.email is not None:
                errors['password'] = BLANK
        elif not (PASSWORD_MIN_LENGTH <= len(self.password)
                  <= PASSWORD_MAX_LENGTH):
            errors['password'] = (f'the length must be between '
                                  f'{PASSWORD_MIN_LENGTH} and '
                                  f'{PASSWORD_MAX_LENGTH}')

        if self.phone is not None and not PHONE_PATTERN.match(self.phone):
            errors['phone'] = 'must be a valid phone number'

        if errors:
            raise ValidationError(errors)

    def prepare_for_storage(self) -> None:
        """Replace the plaintext password with its hash, if there is one."""
        if self.password:
            self.encrypted_password = hash_password(self.password)

    def sanitize(self) -> None:
        """Drop the plaintext password."""
        self.password = ''

    def compare_password(self, password: str) -> bool:
        """Check ``password`` against the stored hash."""
        if not self.encrypted_password:
            return False
        try:
            return bcrypt.checkpw(password.encode('utf-8'),
                                  self.encrypted_password.encode('utf-8'))
        except (ValueError, TypeError, AttributeError):
            return False

    def to_dict(self) -> Dict[str, Any]:
        """Outward-facing representation; never includes the hash."""
        data: Dict[str, Any] = {
            'id': self.id,
            'id_telegram': self.id_telegram,
            'email': self.email,
            'phone': self.phone,
        }
        if self.password:
            data['password'] = self.password
        return data


def hash_password(password: str) -> str:
    """Generate a bcrypt hash of a password."""
    try:
        salt = bcrypt.gensalt(rounds=HASH_ROUNDS)
        return bcrypt.hashpw(password.encode('utf-8'), salt).decode('ascii')
    except (ValueError, TypeError) as e:
        raise HashError(f'Could not hash password: {e}') from e


def check_password_strength(password: str) -> bool:
    """
    Determine whether a password is hard enough to guess.

    A strong password is at least six characters long, mixes upper and lower
    case letters, and contains at least one digit. A password without any
    cased characters is rejected along with single-case ones, since folding
    its case leaves it unchanged.
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        return False
    if password == password.lower().upper() \
            or password == password.upper().lower():
        return False
    if not any(char in string.digits for char in password):
        return False
    return True
