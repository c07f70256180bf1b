from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertCreated:
    alert_id: str
    type: str
    severity: str
    cow_id: str | None
    title: str
    message: str
    created_at: datetime | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


AlertHandler = Callable[[AlertCreated], None]


class AlertEventSink:
    """Fan-out of alert events to optional subscribers.

    Delivery is best effort: a failing subscriber is logged and never reaches
    the code that created the alert.
    """

    def __init__(self) -> None:
        self._subscribers: list[AlertHandler] = []

    def subscribe(self, handler: AlertHandler) -> None:
        self._subscribers.append(handler)

    def unsubscribe(self, handler: AlertHandler) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    def publish(self, event: AlertCreated) -> None:
        for handler in list(self._subscribers):
            try:
                handler(event)
            except Exception:
                logger.exception("Alert subscriber %r failed for %s", handler, event.alert_id)


def log_notifier(event: AlertCreated) -> None:
    logger.info("Notification queued for %s [%s] cow=%s: %s", event.alert_id, event.severity, event.cow_id, event.message)
