"""Provider selection and delivery for notification emails.

Providers are considered in a fixed order: SendGrid, AWS SES, SMTP and
finally the built-in fallback. The first provider whose credentials are
configured is the only one tried for a message; when it fails the send fails.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from app.config import Settings
from app.domain.entities import BatchResult, EmailNotification, EmailStatus

from .renderer import TemplateRenderer
from .transports import (
    MailTransport,
    OutgoingEmail,
    SESTransport,
    SMTPTransport,
    SendGridTransport,
    SimulatedTransport,
)

logger = logging.getLogger(__name__)

PROVIDER_SENDGRID = "sendgrid"
PROVIDER_SES = "ses"
PROVIDER_SMTP = "smtp"
PROVIDER_FALLBACK = "fallback"


@dataclass(frozen=True)
class AWSCredentials:
    access_key_id: str
    secret_access_key: str
    region: str = "us-east-1"


@dataclass(frozen=True)
class SMTPCredentials:
    username: str
    password: str
    host: str = "smtp.gmail.com"
    port: int = 587


@dataclass(frozen=True)
class EmailProviderConfig:
    """Credentials that decide which provider delivers notification emails."""

    from_email: str = "noreply@connectone.com"
    sendgrid_api_key: str | None = None
    aws_credentials: AWSCredentials | None = None
    smtp_credentials: SMTPCredentials | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailProviderConfig":
        aws_credentials = None
        if settings.aws_access_key_id and settings.aws_secret_access_key:
            aws_credentials = AWSCredentials(
                access_key_id=settings.aws_access_key_id,
                secret_access_key=settings.aws_secret_access_key,
                region=settings.aws_region,
            )
        smtp_credentials = None
        if settings.smtp_username and settings.smtp_password:
            smtp_credentials = SMTPCredentials(
                username=settings.smtp_username,
                password=settings.smtp_password,
                host=settings.smtp_host,
                port=settings.smtp_port,
            )
        return cls(
            from_email=settings.from_email,
            sendgrid_api_key=settings.sendgrid_api_key or None,
            aws_credentials=aws_credentials,
            smtp_credentials=smtp_credentials,
        )

    def selected_provider(self) -> str:
        """Return the name of the provider that will deliver emails."""

        if self.sendgrid_api_key:
            return PROVIDER_SENDGRID
        if self.aws_credentials is not None:
            return PROVIDER_SES
        if self.smtp_credentials is not None:
            return PROVIDER_SMTP
        return PROVIDER_FALLBACK


class TransportFactory:
    """Build the real transports; used by hosts that can reach the providers."""

    def sendgrid(self, api_key: str) -> MailTransport:
        return SendGridTransport(api_key)

    def ses(self, credentials: AWSCredentials) -> MailTransport:
        return SESTransport(
            access_key_id=credentials.access_key_id,
            secret_access_key=credentials.secret_access_key,
            region=credentials.region,
        )

    def smtp(self, credentials: SMTPCredentials) -> MailTransport:
        return SMTPTransport(
            username=credentials.username,
            password=credentials.password,
            host=credentials.host,
            port=credentials.port,
        )

    def fallback(self) -> MailTransport:
        return SimulatedTransport(PROVIDER_FALLBACK)


class SimulatedTransportFactory(TransportFactory):
    """Every provider is simulated; for hosts that must not load provider SDKs."""

    def sendgrid(self, api_key: str) -> MailTransport:
        return SimulatedTransport(PROVIDER_SENDGRID)

    def ses(self, credentials: AWSCredentials) -> MailTransport:
        return SimulatedTransport(PROVIDER_SES)

    def smtp(self, credentials: SMTPCredentials) -> MailTransport:
        return SimulatedTransport(PROVIDER_SMTP)


def transport_factory_for(server_context: bool) -> TransportFactory:
    return TransportFactory() if server_context else SimulatedTransportFactory()


class DeliveryProviderChain:
    """Render notification emails and deliver them through one provider."""

    def __init__(
        self,
        config: EmailProviderConfig,
        renderer: TemplateRenderer,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self._config = config
        self._renderer = renderer
        self._factory = transport_factory or TransportFactory()
        self._transport: MailTransport | None = None

    @property
    def provider_name(self) -> str:
        return self._config.selected_provider()

    def _select_transport(self) -> MailTransport:
        if self._transport is not None:
            return self._transport

        config = self._config
        provider = config.selected_provider()
        if provider == PROVIDER_SENDGRID:
            transport = self._factory.sendgrid(config.sendgrid_api_key or "")
        elif provider == PROVIDER_SES and config.aws_credentials is not None:
            transport = self._factory.ses(config.aws_credentials)
        elif provider == PROVIDER_SMTP and config.smtp_credentials is not None:
            transport = self._factory.smtp(config.smtp_credentials)
        else:
            transport = self._factory.fallback()
        logger.info("Email provider: %s", transport.name)
        self._transport = transport
        return transport

    def send(self, email: EmailNotification) -> bool:
        """Deliver ``email``; return whether the provider accepted it."""

        try:
            transport = self._select_transport()
            message = OutgoingEmail(
                to=email.user_id,
                from_email=self._config.from_email,
                subject=email.title,
                html=self._renderer.render_html(email),
                text=self._renderer.render_text(email),
            )
            transport.deliver(message)
        except Exception as exc:
            email.status = EmailStatus.FAILED
            logger.error(
                "Email %s (%s) to %s failed via %s: %s",
                email.id,
                email.type,
                email.user_id,
                self.provider_name,
                exc,
            )
            return False

        email.status = EmailStatus.COMPLETED
        logger.info(
            "Email %s (%s) sent to %s via %s",
            email.id,
            email.type,
            email.user_id,
            transport.name,
        )
        return True

    def send_batch(self, emails: Iterable[EmailNotification]) -> BatchResult:
        """Send every email on its own; one failure does not stop the rest."""

        results = []
        for email in emails:
            results.append({"id": email.id, "success": self.send(email)})
        succeeded = sum(1 for result in results if result["success"])
        return BatchResult(
            success=succeeded, failed=len(results) - succeeded, results=results
        )


__all__ = [
    "AWSCredentials",
    "DeliveryProviderChain",
    "EmailProviderConfig",
    "PROVIDER_FALLBACK",
    "PROVIDER_SENDGRID",
    "PROVIDER_SES",
    "PROVIDER_SMTP",
    "SMTPCredentials",
    "SimulatedTransportFactory",
    "TransportFactory",
    "transport_factory_for",
]
