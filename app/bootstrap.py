"""Construct the notification services from settings."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    ItemStatusReader,
    NotificationPreferenceGate,
    NotificationRecordStore,
    NotificationTriggerService,
)
from app.config import Settings
from app.infrastructure.email import (
    DeliveryProviderChain,
    EmailProviderConfig,
    TemplateRenderer,
    TransportFactory,
    transport_factory_for,
)
from app.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
    NotificationSubscriptionHub,
)

logger = logging.getLogger(__name__)


@dataclass
class NotificationServices:
    records: NotificationRecordStore
    preferences: NotificationPreferenceGate
    renderer: TemplateRenderer
    provider_chain: DeliveryProviderChain
    trigger: NotificationTriggerService
    hub: NotificationSubscriptionHub
    connections: NotificationConnectionManager
    publisher: NotificationPublisher


def build_notification_services(
    settings: Settings,
    session_factory: Callable[[], Session],
    *,
    hub: NotificationSubscriptionHub | None = None,
    transport_factory: TransportFactory | None = None,
) -> NotificationServices:
    """Wire the record store, preference gate, renderer and provider chain together."""

    hub = hub or NotificationSubscriptionHub()
    renderer = TemplateRenderer(settings.app_base_url)
    provider_chain = DeliveryProviderChain(
        EmailProviderConfig.from_settings(settings),
        renderer,
        transport_factory or transport_factory_for(settings.email_server_context),
    )
    records = NotificationRecordStore(session_factory, hub)
    preferences = NotificationPreferenceGate(session_factory)
    trigger = NotificationTriggerService(
        record_store=records,
        preference_gate=preferences,
        renderer=renderer,
        provider_chain=provider_chain,
        item_status_reader=ItemStatusReader(session_factory),
    )
    connections = NotificationConnectionManager()

    logger.info(
        "Notification services ready (email provider: %s, server context: %s)",
        provider_chain.provider_name,
        settings.email_server_context,
    )
    return NotificationServices(
        records=records,
        preferences=preferences,
        renderer=renderer,
        provider_chain=provider_chain,
        trigger=trigger,
        hub=hub,
        connections=connections,
        publisher=NotificationPublisher(connections),
    )


__all__ = ["NotificationServices", "build_notification_services"]
