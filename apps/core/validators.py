# apps/core/validators.py
import re

from django.core.exceptions import ValidationError

PASSWORD_POLICY = re.compile(r'^(?=.*[A-Za-z])(?=.*\d).{8,}$')
PASSWORD_POLICY_MESSAGE = "Password policy: at least 8 characters, including a letter and a digit"


class LetterAndDigitPasswordValidator:
    """Min. 8 znaków, co najmniej jedna litera i jedna cyfra."""

    def validate(self, password, user=None):
        if not PASSWORD_POLICY.match(password or ''):
            raise ValidationError(PASSWORD_POLICY_MESSAGE, code='password_policy')

    def get_help_text(self):
        return PASSWORD_POLICY_MESSAGE
