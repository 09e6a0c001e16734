"""
Authentication utility functions: verification codes, notification emails
and refresh cookie handling.
"""
import random
import logging
import smtplib
import ssl
import socket
import time
from datetime import datetime, timedelta
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from fastapi import Response

from ..config import settings

# Set up logging
logger = logging.getLogger(__name__)

# Connection timeout settings
SMTP_TIMEOUT = 30  # 30 seconds timeout
MAX_RETRIES = 3
RETRY_DELAY = 2  # 2 seconds between retries

CLINIC_NAME = "Kinross Dental Clinic"

def generate_verification_code() -> str:
    """
    Generates a random six digit verification code.

    Returns:
        A numeric string between 100000 and 999999
    """
    return str(random.randint(100000, 999999))

def validate_email_config() -> bool:
    """
    Validates that all required email configuration variables are set.

    Returns:
        bool: True if all required config is present, False otherwise
    """
    required_configs = [
        settings.mail_username,
        settings.mail_password,
        settings.mail_server
    ]

    missing_configs = [config for config in required_configs if not config]

    if missing_configs:
        logger.error(f"Missing email configuration: {len(missing_configs)} items")
        return False

    return True

def _deliver(msg: MIMEMultipart, recipient: str) -> None:
    """
    Send a prepared message with retry logic.

    Port 465 uses implicit TLS, anything else upgrades with STARTTLS.

    Raises:
        Exception: If the message could not be sent after all retries
    """
    last_exception = None

    for attempt in range(1, MAX_RETRIES + 1):
        try:
            logger.info(f"Email send attempt {attempt}/{MAX_RETRIES} to {recipient}")
            context = ssl.create_default_context()

            if settings.mail_port == 465:
                server = smtplib.SMTP_SSL(settings.mail_server, settings.mail_port, timeout=SMTP_TIMEOUT, context=context)
            else:
                server = smtplib.SMTP(settings.mail_server, settings.mail_port, timeout=SMTP_TIMEOUT)

            with server:
                if settings.mail_port != 465:
                    server.ehlo()
                    server.starttls(context=context)
                    server.ehlo()
                server.login(settings.mail_username, settings.mail_password)
                server.send_message(msg)

            logger.info(f"Email sent successfully to {recipient} on attempt {attempt}")
            return

        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP Authentication failed on attempt {attempt}: {str(e)}")
            last_exception = e
            break  # Don't retry authentication errors

        except smtplib.SMTPRecipientsRefused as e:
            logger.error(f"SMTP Recipients refused on attempt {attempt}: {str(e)}")
            last_exception = e
            break  # Don't retry recipient errors

        except (smtplib.SMTPException, socket.timeout, socket.gaierror, OSError) as e:
            logger.warning(f"SMTP error on attempt {attempt}: {str(e)}")
            last_exception = e
            if attempt < MAX_RETRIES:
                logger.info(f"Retrying in {RETRY_DELAY} seconds...")
                time.sleep(RETRY_DELAY)

    error_msg = f"Failed to send email after {MAX_RETRIES} attempts. Last error: {str(last_exception)}"
    logger.error(error_msg)
    raise Exception(error_msg)

def send_verification_email(email: str, code: str) -> None:
    """
    Sends a verification code to the given address.

    Meant to run as a background task, so it is a plain blocking function.

    Args:
        email: Address being verified
        code: Verification code to be sent

    Raises:
        Exception: If email configuration is incomplete or sending fails
    """
    if not validate_email_config():
        raise Exception("Email configuration is incomplete")

    logger.info(f"Attempting to send verification email to {email}")

    html_content = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: auto; border: 1px solid #e0e0e0; padding: 20px; border-radius: 10px;">
        <h2 style="color: #4A90E2;">{CLINIC_NAME} Email Verification</h2>
        <p>Dear user,</p>
        <p>Please use the following verification code to verify your email address:</p>
        <div style="text-align: center; margin: 30px 0;">
            <span style="display: inline-block; background-color: #4A90E2; color: white; font-size: 24px; padding: 10px 20px; border-radius: 5px; letter-spacing: 3px;">
                {code}
            </span>
        </div>
        <p>If you did not request this, you can safely ignore this email.</p>
        <p>Best regards,<br><strong>{CLINIC_NAME} Team</strong></p>
        <hr style="margin-top: 40px;">
        <p style="font-size: 12px; color: #888;">&copy; {datetime.now().year} {CLINIC_NAME}</p>
    </div>
    """

    msg = MIMEMultipart()
    msg["From"] = f'"{CLINIC_NAME}" <{settings.mail_from or settings.mail_username}>'
    msg["To"] = email
    msg["Subject"] = f"Verification Code for Your {CLINIC_NAME} Account"
    msg.attach(MIMEText(html_content, "html"))

    _deliver(msg, email)

def send_password_changed_notification(email: str, name: Optional[str]) -> None:
    """
    Send notification when a password has been reset.

    Args:
        email: Account email address
        name: Display name for personalization
    """
    if not validate_email_config():
        raise Exception("Email configuration is incomplete")

    html_content = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: auto; border: 1px solid #e0e0e0; padding: 20px; border-radius: 10px;">
        <h2 style="color: #2ecc71;">Password Changed</h2>
        <p>Hello {name or "there"},</p>
        <p>This email confirms that the password for your {CLINIC_NAME} account has been changed.</p>
        <p style="color: #e74c3c; font-weight: bold;">If you did not make this change, please contact the clinic immediately.</p>
        <p>Best regards,<br><strong>{CLINIC_NAME} Team</strong></p>
    </div>
    """

    msg = MIMEMultipart()
    msg["From"] = f'"{CLINIC_NAME}" <{settings.mail_from or settings.mail_username}>'
    msg["To"] = email
    msg["Subject"] = f"{CLINIC_NAME} - Password Changed"
    msg.attach(MIMEText(html_content, "html"))

    _deliver(msg, email)

def set_refresh_cookie(response: Response, refresh_token: str, persistent: bool) -> None:
    """
    Attach the refresh token as an HTTP-only cookie.

    Args:
        response: Outgoing response
        refresh_token: Encoded refresh token
        persistent: Give the cookie a Max-Age matching the token lifetime;
            otherwise it lasts for the browser session only
    """
    max_age = None
    if persistent:
        max_age = int(timedelta(days=settings.refresh_token_expire_days).total_seconds())

    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=refresh_token,
        max_age=max_age,
        httponly=True,
        samesite="none",
        secure=True,
    )

def clear_refresh_cookie(response: Response) -> None:
    """Expire the refresh cookie on the client."""
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        httponly=True,
        samesite="none",
        secure=True,
    )
