import re

import attrs

from src.platform.exception.exceptions import ValidationError


EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
PHONE_PATTERN = re.compile(r'^\+?[0-9][0-9 ()\-]*$')
MIN_PHONE_DIGITS = 3


@attrs.define(frozen=True)
class ContactInfo:
    name: str
    email: str
    phone: str

    @classmethod
    def create(cls, *, name: str, email: str, phone: str) -> 'ContactInfo':
        """
        Build a validated contact

        Raises:
            ValidationError: When a field is empty or malformed
        """
        name, email, phone = (name or '').strip(), (email or '').strip(), (phone or '').strip()

        if not name:
            raise ValidationError('Contact name is required')
        if not email:
            raise ValidationError('Contact email is required')
        if not EMAIL_PATTERN.match(email):
            raise ValidationError(f'Invalid email address: {email}')
        if not phone:
            raise ValidationError('Contact phone is required')
        if not PHONE_PATTERN.match(phone) or sum(c.isdigit() for c in phone) < MIN_PHONE_DIGITS:
            raise ValidationError(f'Invalid phone number: {phone}')

        return cls(name=name, email=email, phone=phone)
