"""Business logic for the contact form."""
import re
import time
from typing import Any, Dict, Optional

from .email_service import EmailService

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
MIN_MESSAGE_LENGTH = 10
MAX_MESSAGE_LENGTH = 2000


class ContactValidationError(ValueError):
    """A contact submission failed validation; ``str(exc)`` is user-facing."""


def validate_contact(email: Any, message: Any) -> Optional[str]:
    """Validate a contact submission.

    Returns:
        ``None`` when valid, otherwise a human-readable error message.
    """
    if not isinstance(email, str) or not isinstance(message, str):
        if email in (None, '') or message in (None, ''):
            return 'Email and message are required fields.'
        return 'Email and message must be strings.'
    if not email.strip() or not message.strip():
        return 'Email and message are required fields.'
    if not EMAIL_PATTERN.match(email.strip()):
        return 'Invalid email format provided.'
    length = len(message.strip())
    if length < MIN_MESSAGE_LENGTH:
        return f'Message must be at least {MIN_MESSAGE_LENGTH} characters long.'
    if length > MAX_MESSAGE_LENGTH:
        return f'Message cannot exceed {MAX_MESSAGE_LENGTH} characters.'
    return None


class ContactService:
    """Validates contact submissions and relays them through
    :class:`~app.services.email_service.EmailService`.

    Rules
    -----
    * Email and message are required.
    * Email must look like ``local@domain.tld``.
    * The stripped message must be 10 to 2000 characters long.
    * Delivery is attempted once; errors from the email service propagate.
    """

    def __init__(self, email_service: EmailService) -> None:
        self._email = email_service

    @property
    def email_configured(self) -> bool:
        return self._email.is_configured()

    def submit(self, email: Any, message: Any) -> Dict[str, Any]:
        """Validate and deliver a contact submission.

        Returns:
            ``{'success': True, 'message': ..., 'id': <ms timestamp>}``

        Raises:
            ContactValidationError:  The submission is invalid.
            EmailNotConfiguredError: SMTP credentials are missing.
            EmailDeliveryError:      The SMTP provider failed.
        """
        error = validate_contact(email, message)
        if error:
            raise ContactValidationError(error)

        self._email.send_contact(email.strip(), message)
        return {
            'success': True,
            'message': 'Email has been sent successfully.',
            'id': int(time.time() * 1000),
        }
