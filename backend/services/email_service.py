"""Email service for account lifecycle notifications.

Providers:
- console: Logs emails (development, tests)
- smtp: Standard SMTP delivery

All sends are best-effort: a provider failure is logged and reported as
``False``, never raised into the calling request.
"""

import html
import re
import smtplib
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from loguru import logger

from models.config import settings


class EmailProvider(ABC):
    """Abstract base class for email providers."""

    @abstractmethod
    def send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        """Send an email."""
        pass


class SMTPProvider(EmailProvider):
    """SMTP email provider."""

    def __init__(self) -> None:
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.from_email = settings.SMTP_FROM_EMAIL
        self.from_name = settings.SMTP_FROM_NAME
        self.use_tls = settings.SMTP_USE_TLS
        self.use_ssl = settings.SMTP_USE_SSL

    def send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        """Send email via SMTP.

        Supports both:
        - Implicit SSL (port 465): use SMTP_USE_SSL=true
        - STARTTLS (port 587): use SMTP_USE_TLS=true
        """
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email
        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            if self.use_ssl:
                server = smtplib.SMTP_SSL(self.host, self.port)
            else:
                server = smtplib.SMTP(self.host, self.port)
                if self.use_tls:
                    server.starttls()

            if self.user and self.password:
                server.login(self.user, self.password)

            server.sendmail(self.from_email, to_email, msg.as_string())
            server.quit()
            logger.info(f"Email '{subject}' sent to {to_email}")
            return True

        except smtplib.SMTPRecipientsRefused as e:
            logger.error(f"SMTP: Recipients refused - {e.recipients}")
            return False
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP: Authentication failed - {e.smtp_code}: {e.smtp_error}")
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False


class ConsoleProvider(EmailProvider):
    """Console email provider for development/testing."""

    def send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        """Log email to console."""
        logger.info(
            f"\n{'=' * 60}\n"
            f"EMAIL (Console Provider)\n"
            f"To: {to_email}\n"
            f"Subject: {subject}\n"
            f"{'-' * 60}\n"
            f"{text_body}\n"
            f"{'=' * 60}"
        )
        return True


def get_email_provider() -> EmailProvider:
    """Get the configured email provider."""
    provider_name = settings.EMAIL_PROVIDER.lower()

    if provider_name == "smtp":
        return SMTPProvider()
    elif provider_name == "console":
        return ConsoleProvider()
    else:
        logger.warning(f"Unknown email provider '{provider_name}', using console")
        return ConsoleProvider()


class EmailService:
    """Builds CampusCard notification emails and hands them to a provider."""

    def __init__(self, provider: EmailProvider | None = None) -> None:
        self.provider = provider or get_email_provider()

    @staticmethod
    def _sanitize_name(name: str) -> str:
        """Strip markup from a user-supplied name and cap its length."""
        if not name:
            return "Student"
        sanitized = re.sub(r"<[^>]+>", "", name).strip()[:100]
        return sanitized or "Student"

    @staticmethod
    def _wrap_html(title: str, paragraphs: list[str]) -> str:
        body = "".join(f"<p>{p}</p>" for p in paragraphs)
        return (
            '<!DOCTYPE html><html><head><meta charset="UTF-8"></head>'
            '<body style="font-family: sans-serif; max-width: 600px; '
            'margin: 0 auto; padding: 20px;">'
            f'<h2 style="color: #333;">{title}</h2>{body}'
            "<p>Best regards,<br>CampusCard Team</p></body></html>"
        )

    def _send_with_retry(
        self,
        send_func: Callable[[], bool],
        max_attempts: int = 2,
        base_delay: float = 0.5,
    ) -> bool:
        """
        Send with exponential backoff.

        Args:
            send_func: Sends the email and returns success status
            max_attempts: Maximum number of send attempts
            base_delay: Base delay in seconds (doubles each retry)

        Returns:
            True if the email was sent, False after all attempts fail
        """
        for attempt in range(max_attempts):
            try:
                if send_func():
                    return True
            except Exception as e:
                logger.warning(f"Email send attempt {attempt + 1} failed: {e}")

            if attempt < max_attempts - 1:
                time.sleep(base_delay * (2**attempt))

        logger.error(f"Email send failed after {max_attempts} attempts")
        return False

    @staticmethod
    def verification_link(user_id: int, token: str) -> str:
        return f"{settings.FRONTEND_URL}/verify?token={token}&userId={user_id}"

    def send_verification_email(self, to_email: str, user_id: int, token: str) -> bool:
        """
        Send the email-verification link.

        Args:
            to_email: Recipient address
            user_id: Account being verified
            token: Verification token stored on the account

        Returns:
            True if the provider accepted the message
        """
        link = self.verification_link(user_id, token)
        hours = settings.EMAIL_VERIFICATION_EXPIRE_HOURS
        subject = "CampusCard - Email Verification Required"
        text_body = (
            "Dear Student,\n\n"
            "Thank you for registering with CampusCard.\n\n"
            "Please verify your email address by opening the link below:\n\n"
            f"{link}\n\n"
            f"This link will expire in {hours} hours.\n\n"
            "If you did not register for CampusCard, please ignore this email.\n\n"
            "Best regards,\nCampusCard Team"
        )
        html_body = self._wrap_html(
            "Verify your email",
            [
                "Thank you for registering with CampusCard.",
                f'<a href="{html.escape(link)}">Verify my email address</a>',
                f"This link will expire in {hours} hours.",
            ],
        )
        return self._send_with_retry(
            lambda: self.provider.send(to_email, subject, html_body, text_body)
        )

    def send_approval_email(self, to_email: str, first_name: str) -> bool:
        name = self._sanitize_name(first_name)
        subject = "CampusCard - Account Approved"
        text_body = (
            f"Dear {name},\n\n"
            "Congratulations! Your CampusCard account has been approved.\n\n"
            "You can now log in and access all features.\n\n"
            f"Login here: {settings.FRONTEND_URL}/login\n\n"
            "Best regards,\nCampusCard Team"
        )
        html_body = self._wrap_html(
            "Account approved",
            [
                f"Dear {html.escape(name)},",
                "Congratulations! Your CampusCard account has been approved.",
                f'<a href="{settings.FRONTEND_URL}/login">Log in</a>',
            ],
        )
        return self._send_with_retry(
            lambda: self.provider.send(to_email, subject, html_body, text_body)
        )

    def send_rejection_email(
        self, to_email: str, first_name: str, reason: str | None
    ) -> bool:
        name = self._sanitize_name(first_name)
        reason_text = reason or "No reason provided"
        subject = "CampusCard - Account Status Update"
        text_body = (
            f"Dear {name},\n\n"
            "Unfortunately, your CampusCard registration has not been approved.\n\n"
            f"Reason: {reason_text}\n\n"
            "You can update your profile to resubmit it for review, or contact "
            "the administration for assistance.\n\n"
            "Best regards,\nCampusCard Team"
        )
        html_body = self._wrap_html(
            "Registration not approved",
            [
                f"Dear {html.escape(name)},",
                "Unfortunately, your CampusCard registration has not been approved.",
                f"Reason: {html.escape(reason_text)}",
            ],
        )
        return self._send_with_retry(
            lambda: self.provider.send(to_email, subject, html_body, text_body)
        )


def get_email_service() -> EmailService:
    """FastAPI dependency returning a service bound to the configured provider."""
    return EmailService()
