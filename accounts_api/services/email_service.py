"""Service for sending emails."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP."""

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

    def verification_url(self, verification_token: str) -> str:
        return f"{self.base_url}/api/auth/verify/{verification_token}"

    def send_verification_email(self, to_email: str, verification_token: str) -> bool:
        """
        Send email verification email.

        Args:
            to_email: Recipient email
            verification_token: Verification token

        Returns:
            True if sent successfully, False otherwise
        """
        verification_url = self.verification_url(verification_token)

        if not self.enabled:
            # Development mode: no SMTP relay configured.
            logger.info("Verification URL for %s: %s", to_email, verification_url)
            return True

        subject = "Verify email"
        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #1e293b;">Welcome!</h2>
                <p style="color: #475569; line-height: 1.6;">
                    Please confirm your email address to activate your account.
                </p>
                <p style="text-align: center; margin: 30px 0;">
                    <a target="_blank" href="{verification_url}"
                       style="background-color: #3b82f6; color: white; padding: 15px 30px;
                              text-decoration: none; border-radius: 5px; display: inline-block;">
                        Click here to verify.
                    </a>
                </p>
                <p style="color: #64748b; font-size: 14px;">
                    If you did not create an account, you can ignore this email.
                </p>
            </body>
        </html>
        """

        text_body = f"""
        Welcome!

        Please confirm your email address by opening the link below:
        {verification_url}

        If you did not create an account, you can ignore this email.
        """

        return self._send_email(to_email, subject, html_body, text_body)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        """
        Send an email via SMTP.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_body: HTML body
            text_body: Plain text body

        Returns:
            True if sent successfully, False otherwise
        """
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.from_name} <{self.from_email}>"
            msg["To"] = to_email

            part1 = MIMEText(text_body, "plain", "utf-8")
            part2 = MIMEText(html_body, "html", "utf-8")

            msg.attach(part1)
            msg.attach(part2)

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            return True

        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", to_email, exc)
            return False
