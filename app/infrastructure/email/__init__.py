"""Email templating and delivery for notification emails."""

from .providers import (
    AWSCredentials,
    DeliveryProviderChain,
    EmailProviderConfig,
    SMTPCredentials,
    SimulatedTransportFactory,
    TransportFactory,
    transport_factory_for,
)
from .renderer import TemplateRenderer, render
from .templates import EMAIL_TEMPLATES, EmailTemplate, get_template
from .transports import (
    MailTransport,
    OutgoingEmail,
    SESTransport,
    SMTPTransport,
    SendGridTransport,
    SimulatedTransport,
)

__all__ = [
    "AWSCredentials",
    "DeliveryProviderChain",
    "EMAIL_TEMPLATES",
    "EmailProviderConfig",
    "EmailTemplate",
    "MailTransport",
    "OutgoingEmail",
    "SESTransport",
    "SMTPCredentials",
    "SMTPTransport",
    "SendGridTransport",
    "SimulatedTransport",
    "SimulatedTransportFactory",
    "TemplateRenderer",
    "TransportFactory",
    "get_template",
    "render",
    "transport_factory_for",
]
