"""Key-value application settings and owner notifications."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from sqlalchemy.orm import Session

from pastoral.common.models import Config
from pastoral.core.config import settings
from pastoral.core.metrics import emit_business_metric

logger = logging.getLogger(__name__)


class ConfigService:
    @staticmethod
    def get_value(db: Session, key: str) -> Optional[str]:
        row = db.get(Config, key)
        return row.value if row else None

    @staticmethod
    def get_int(db: Session, key: str, default: int) -> int:
        """Read an integer setting, falling back to ``default`` when absent or unparseable."""
        raw = ConfigService.get_value(db, key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Config %s holds a non-integer value %r", key, raw)
            return default

    @staticmethod
    def set_value(db: Session, key: str, value: str) -> Config:
        """Insert or overwrite a setting; previous values are not kept."""
        row = db.get(Config, key)
        if row is None:
            row = Config(key=key, value=value)
            db.add(row)
        else:
            row.value = value
        db.commit()
        db.refresh(row)
        return row


class NotificationService:
    @staticmethod
    def notify_owner(
        title: str,
        content: str,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> bool:
        """Send a message to the parish owner.

        Always logged. When ``owner_notification_url`` is set the message is
        also posted there, and the return value says whether it was accepted.
        """
        logger.warning("Owner notification: %s - %s", title, content)
        emit_business_metric("system.owner_notified")

        if not settings.owner_notification_url:
            return True

        headers = {}
        if settings.owner_notification_token:
            headers["Authorization"] = f"Bearer {settings.owner_notification_token}"
        try:
            with httpx.Client(timeout=10.0, transport=transport) as client:
                response = client.post(
                    settings.owner_notification_url,
                    json={"title": title, "content": content},
                    headers=headers,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Owner notification delivery failed: %s", e)
            return False
        return True
