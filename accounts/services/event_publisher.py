"""Domain event publisher that writes events to the application log."""

import logging
from dataclasses import asdict
from typing import Iterable

from ..domain.models.events import DomainEvent

logger = logging.getLogger(__name__)


class LoggingEventPublisher:
    """Publishes domain events as log lines."""

    def publish(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            payload = {key: str(value) for key, value in asdict(event).items()}
            logger.info("event %s %s", event.name, payload)
