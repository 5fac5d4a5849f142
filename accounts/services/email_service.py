"""Service for sending account emails."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)


class EmailService:
    """Sends verification and password-reset emails via SMTP."""

    def __init__(
        self,
        base_url: str,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: str = "Accounts",
    ):
        self.base_url = base_url.rstrip("/")
        self.smtp_host = smtp_host or ""
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username or ""
        self.smtp_password = smtp_password or ""
        self.from_email = from_email or ""
        self.from_name = from_name
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)

    def send_verification_email(self, to_email: str, verification_token: str) -> bool:
        """
        Send the email-verification link.

        Args:
            to_email: Recipient email
            verification_token: Token issued by the User aggregate

        Returns:
            True if sent (or logged in development), False otherwise
        """
        url = f"{self.base_url}/auth/verify-email?token={verification_token}"
        if not self.enabled:
            logger.info("SMTP disabled; verification URL for %s: %s", to_email, url)
            return True

        subject = f"Verify your email - {self.from_name}"
        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #1e293b;">Welcome to {self.from_name}!</h2>
                <p style="color: #475569; line-height: 1.6;">
                    Please confirm your email address by clicking the button below:
                </p>
                <p style="text-align: center; margin: 30px 0;">
                    <a href="{url}"
                       style="background-color: #3b82f6; color: white; padding: 15px 30px;
                              text-decoration: none; border-radius: 5px; font-weight: bold;">
                        Verify email
                    </a>
                </p>
                <p style="color: #64748b; font-size: 14px;">This link expires in 24 hours.</p>
                <p style="color: #64748b; font-size: 14px;">
                    If you did not create an account you can ignore this email.
                </p>
            </body>
        </html>
        """
        text_body = f"""
        Welcome to {self.from_name}!

        Confirm your email address by opening the link below:
        {url}

        This link expires in 24 hours.
        """
        return self._send_email(to_email, subject, html_body, text_body)

    def send_password_reset_email(self, to_email: str, reset_token: str) -> bool:
        """Send the password-reset link. The link is valid for one hour."""
        url = f"{self.base_url}/auth/reset-password?token={reset_token}"
        if not self.enabled:
            logger.info("SMTP disabled; password reset URL for %s: %s", to_email, url)
            return True

        subject = f"Reset your password - {self.from_name}"
        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #1e293b;">Password reset</h2>
                <p style="color: #475569; line-height: 1.6;">
                    Someone asked to reset the password of your account. Use the button below to choose a new one:
                </p>
                <p style="text-align: center; margin: 30px 0;">
                    <a href="{url}"
                       style="background-color: #3b82f6; color: white; padding: 15px 30px;
                              text-decoration: none; border-radius: 5px; font-weight: bold;">
                        Reset password
                    </a>
                </p>
                <p style="color: #64748b; font-size: 14px;">This link expires in 1 hour.</p>
                <p style="color: #64748b; font-size: 14px;">
                    If you did not ask for a reset you can ignore this email.
                </p>
            </body>
        </html>
        """
        text_body = f"""
        Password reset

        Choose a new password by opening the link below:
        {url}

        This link expires in 1 hour.
        """
        return self._send_email(to_email, subject, html_body, text_body)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.from_name} <{self.from_email}>"
            msg["To"] = to_email

            msg.attach(MIMEText(text_body, "plain", "utf-8"))
            msg.attach(MIMEText(html_body, "html", "utf-8"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            return True

        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send email to %s", to_email)
            return False
