"""Services package — expose all concrete services from one import."""
from .game_service import GameService
from .email_service import (
    EmailService, EmailServiceError, EmailNotConfiguredError, EmailDeliveryError,
)
from .contact_service import ContactService, ContactValidationError

__all__ = [
    'GameService',
    'EmailService',
    'EmailServiceError',
    'EmailNotConfiguredError',
    'EmailDeliveryError',
    'ContactService',
    'ContactValidationError',
]
