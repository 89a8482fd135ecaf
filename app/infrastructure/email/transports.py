"""Mail transports that hand a rendered email to an external provider."""

from __future__ import annotations

import json
import logging
import smtplib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Any

import boto3
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.domain.exceptions import TransportError

logger = logging.getLogger(__name__)

SENDER_NAME = "ConnecTone"


@dataclass(frozen=True)
class OutgoingEmail:
    """Fully rendered message ready for a transport."""

    to: str
    from_email: str
    subject: str
    html: str
    text: str


class MailTransport(ABC):
    """Deliver an :class:`OutgoingEmail` or raise :class:`TransportError`."""

    name: str = "transport"

    @abstractmethod
    def deliver(self, message: OutgoingEmail) -> None:
        """Hand ``message`` to the provider."""


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                help_link = item.get("help")
                if message and help_link:
                    messages.append(f"{message} (help: {help_link})")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_sendgrid_failure(status_code: Any, details: str | None) -> str:
    if status_code and details:
        return f"SendGrid API request failed with status {status_code}: {details}"
    if status_code:
        return f"SendGrid API request failed with status {status_code}"
    if details:
        return f"SendGrid API request failed: {details}"
    return "SendGrid API request failed"


class SendGridTransport(MailTransport):
    """Send through the SendGrid v3 REST API."""

    name = "sendgrid"

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    def deliver(self, message: OutgoingEmail) -> None:
        mail = Mail(
            from_email=message.from_email,
            to_emails=message.to,
            subject=message.subject,
            html_content=message.html,
            plain_text_content=message.text,
        )
        try:
            client = SendGridAPIClient(self._api_key)
            response = client.send(mail)
        except Exception as exc:
            details = _extract_sendgrid_error_details(getattr(exc, "body", None))
            description = _describe_sendgrid_failure(
                getattr(exc, "status_code", None), details
            )
            logger.error("%s", description)
            raise TransportError(self.name, description) from exc

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            details = _extract_sendgrid_error_details(getattr(response, "body", None))
            description = _describe_sendgrid_failure(status_code, details)
            logger.error("%s", description)
            raise TransportError(self.name, description)


class SESTransport(MailTransport):
    """Send through Amazon SES with explicit access keys."""

    name = "ses"

    def __init__(
        self,
        *,
        access_key_id: str,
        secret_access_key: str,
        region: str = "us-east-1",
    ) -> None:
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._region = region
        self._client = None

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client(
                "ses",
                region_name=self._region,
                aws_access_key_id=self._access_key_id,
                aws_secret_access_key=self._secret_access_key,
            )
        return self._client

    def deliver(self, message: OutgoingEmail) -> None:
        try:
            response = self._get_client().send_email(
                Source=formataddr((SENDER_NAME, message.from_email)),
                Destination={"ToAddresses": [message.to]},
                Message={
                    "Subject": {"Charset": "UTF-8", "Data": message.subject},
                    "Body": {
                        "Html": {"Charset": "UTF-8", "Data": message.html},
                        "Text": {"Charset": "UTF-8", "Data": message.text},
                    },
                },
            )
        except Exception as exc:
            logger.error("SES send_email failed: %s", exc)
            raise TransportError(self.name, str(exc)) from exc
        logger.debug("SES accepted message %s", response.get("MessageId"))


class SMTPTransport(MailTransport):
    """Send through an authenticated SMTP server using STARTTLS."""

    name = "smtp"

    def __init__(
        self,
        *,
        username: str,
        password: str,
        host: str = "smtp.gmail.com",
        port: int = 587,
        timeout: float | None = None,
    ) -> None:
        self._username = username
        self._password = password
        self._host = host
        self._port = port
        self._timeout = timeout

    def _build_mime(self, message: OutgoingEmail) -> MIMEMultipart:
        mime = MIMEMultipart("alternative")
        mime["From"] = formataddr((SENDER_NAME, self._username))
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.attach(MIMEText(message.text, "plain", "utf-8"))
        mime.attach(MIMEText(message.html, "html", "utf-8"))
        return mime

    def deliver(self, message: OutgoingEmail) -> None:
        mime = self._build_mime(message)
        kwargs: dict[str, Any] = {}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        try:
            with smtplib.SMTP(self._host, self._port, **kwargs) as server:
                server.starttls()
                server.login(self._username, self._password)
                server.sendmail(self._username, [message.to], mime.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("SMTP delivery through %s failed: %s", self._host, exc)
            raise TransportError(self.name, str(exc)) from exc


class SimulatedTransport(MailTransport):
    """Log the message instead of sending it.

    Used for the built-in fallback provider and for hosts that cannot run the
    real transports.
    """

    def __init__(self, name: str = "fallback") -> None:
        self.name = name

    def deliver(self, message: OutgoingEmail) -> None:
        logger.info(
            "[%s] simulated email to %s: %s", self.name, message.to, message.subject
        )


__all__ = [
    "MailTransport",
    "OutgoingEmail",
    "SESTransport",
    "SMTPTransport",
    "SendGridTransport",
    "SimulatedTransport",
]
