"""SMTP transport for contact-form messages."""
import html
import logging
import smtplib
from email.message import EmailMessage
from typing import Any, Dict

from gaminute import is_placeholder_value, parse_bool

logger = logging.getLogger('gaminute.email')

_DEFAULT_TIMEOUT = 10  # seconds


class EmailServiceError(Exception):
    """Base class for email delivery problems."""


class EmailNotConfiguredError(EmailServiceError):
    """SMTP credentials are missing, so nothing can be sent."""


class EmailDeliveryError(EmailServiceError):
    """The SMTP provider rejected the message or could not be reached."""


class EmailService:
    """Send contact-form submissions to the studio mailbox over SMTP.

    Args:
        config: The application configuration dict (see
                :func:`gaminute.load_config`).  Reads ``email_user``,
                ``email_pass``, ``contact_recipient``, ``smtp_host``,
                ``smtp_port``, ``smtp_ssl``, ``smtp_starttls`` and
                ``smtp_timeout``.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self._cfg = config or {}
        self.user: str = self._cfg.get('email_user') or ''
        self.password: str = self._cfg.get('email_pass') or ''
        self.recipient: str = self._cfg.get('contact_recipient') or 'gaminutestudio@gmail.com'
        self.host: str = self._cfg.get('smtp_host') or 'smtp.gmail.com'
        self.port: int = int(self._cfg.get('smtp_port') or 465)
        self.use_ssl: bool = parse_bool(self._cfg.get('smtp_ssl', True))
        self.use_starttls: bool = parse_bool(self._cfg.get('smtp_starttls', False))
        self.timeout: int = int(self._cfg.get('smtp_timeout') or _DEFAULT_TIMEOUT)

    def is_configured(self) -> bool:
        """Return ``True`` when both SMTP user and password are set."""
        return not (is_placeholder_value(self.user) or is_placeholder_value(self.password))

    def build_message(self, reply_to: str, message: str) -> EmailMessage:
        """Build the notification email for a contact submission.

        The submitter goes into ``Reply-To``; the message is sent from the
        configured SMTP account.  The HTML part escapes the submitted text.
        """
        msg = EmailMessage()
        msg['From'] = self.user
        msg['To'] = self.recipient
        msg['Reply-To'] = reply_to
        msg['Subject'] = f"Gaminute Portfolio: New Message from {reply_to}"
        msg.set_content(f"Name/Email: {reply_to}\n\nMessage:\n{message}")

        safe_from = html.escape(reply_to)
        safe_body = html.escape(message).replace('\n', '<br>')
        msg.add_alternative(
            "<h3>New Contact Form Submission</h3>\n"
            f"<p><strong>From:</strong> {safe_from}</p>\n"
            "<p><strong>Message:</strong></p>\n"
            '<blockquote style="background: #f0f0f0; padding: 10px; '
            'border-left: 4px solid #00d4ff;">\n'
            f"  {safe_body}\n"
            "</blockquote>\n",
            subtype='html',
        )
        return msg

    def send_contact(self, reply_to: str, message: str) -> None:
        """Deliver a contact submission.

        Raises:
            EmailNotConfiguredError: SMTP credentials are missing.
            EmailDeliveryError:      The SMTP exchange failed.
        """
        if not self.is_configured():
            raise EmailNotConfiguredError('EMAIL_USER or EMAIL_PASS is not configured')

        msg = self.build_message(reply_to, message)
        try:
            self._deliver(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Email send error: %s", e)
            raise EmailDeliveryError(str(e)) from e
        logger.info("Email sent successfully from %s", reply_to)

    def _deliver(self, msg: EmailMessage) -> None:
        smtp_cls = smtplib.SMTP_SSL if self.use_ssl else smtplib.SMTP
        with smtp_cls(self.host, self.port, timeout=self.timeout) as smtp:
            if not self.use_ssl and self.use_starttls:
                smtp.starttls()
            smtp.login(self.user, self.password)
            smtp.send_message(msg)
