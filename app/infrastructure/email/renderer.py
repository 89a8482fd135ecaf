"""Placeholder substitution for email templates."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Final
from uuid import uuid4

from app.domain.entities import EmailNotification, EmailStatus, NotificationType
from app.utils import now_in_app_timezone

from .templates import (
    DEFAULT_STATUS_COLOR,
    DEFAULT_TEMPLATE_ID,
    STATUS_COLORS,
    STATUS_DESCRIPTIONS,
    STATUS_LABELS,
    EmailTemplate,
    get_template,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER_PATTERN: Final[re.Pattern[str]] = re.compile(r"\{\{(\w+)\}\}")
DEFAULT_TITLE: Final[str] = "ConnecTone 알림"


def render(template: str, data: Mapping[str, Any]) -> str:
    """Replace every ``{{key}}`` in ``template`` with ``data[key]``.

    Missing keys and ``None`` values become empty strings.
    """

    def _substitute(match: re.Match[str]) -> str:
        value = data.get(match.group(1))
        if value is None:
            return ""
        return str(value)

    return _PLACEHOLDER_PATTERN.sub(_substitute, template)


class TemplateRenderer:
    """Build :class:`EmailNotification` objects and render their bodies."""

    def __init__(self, base_url: str) -> None:
        self._base_url = base_url.rstrip("/")

    def prepare(self, template_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of ``data`` extended with the fields templates derive."""

        prepared = dict(data)
        prepared["unsubscribeUrl"] = f"{self._base_url}/profile/notifications"
        prepared["supportUrl"] = f"{self._base_url}/support"

        if template_id == NotificationType.TRANSACTION_UPDATE.value:
            status = data.get("status")
            status_key = "" if status is None else str(status)
            prepared["statusColor"] = STATUS_COLORS.get(status_key, DEFAULT_STATUS_COLOR)
            prepared["statusLabel"] = STATUS_LABELS.get(status_key, status_key)
            prepared["statusDescription"] = STATUS_DESCRIPTIONS.get(status_key, "")
            prepared["transactionUrl"] = (
                f"{self._base_url}/profile/transactions/{data.get('transactionId') or ''}"
            )
        elif template_id == NotificationType.NEW_MESSAGE.value:
            sender_name = data.get("senderName") or ""
            prepared["senderInitial"] = sender_name[:1] or "?"
            prepared["chatUrl"] = f"{self._base_url}/chat/{data.get('chatId') or ''}"
        elif template_id == NotificationType.LOGISTICS_QUOTE.value:
            prepared["quoteUrl"] = f"{self._base_url}/item/{data.get('productId') or ''}"
            prepared["insuranceIncluded"] = "포함" if data.get("insurance") else "미포함"
        elif template_id == DEFAULT_TEMPLATE_ID:
            if not prepared.get("title"):
                prepared["title"] = DEFAULT_TITLE

        return prepared

    def compose(
        self,
        user_id: str,
        notification_type: NotificationType | str,
        data: Mapping[str, Any],
    ) -> EmailNotification:
        """Resolve the template for ``notification_type`` and render the subject."""

        type_value = getattr(notification_type, "value", notification_type)
        template = get_template(str(type_value))
        if template.id != type_value:
            logger.debug(
                "No email template for %s; using the %s template", type_value, template.id
            )
        prepared = self.prepare(template.id, data)
        return EmailNotification(
            id=f"email_{uuid4().hex}",
            user_id=user_id,
            type=str(type_value),
            template_id=template.id,
            title=render(template.subject, prepared),
            data=prepared,
            status=EmailStatus.PENDING,
            created_at=now_in_app_timezone(),
        )

    def render_html(self, email: EmailNotification) -> str:
        return render(self._template_for(email).html, email.data)

    def render_text(self, email: EmailNotification) -> str:
        return render(self._template_for(email).text, email.data)

    @staticmethod
    def _template_for(email: EmailNotification) -> EmailTemplate:
        return get_template(email.template_id)


__all__ = ["DEFAULT_TITLE", "TemplateRenderer", "render"]
