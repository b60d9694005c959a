"""Domain events emitted by the survey service.

Each publish is logged and kept in a bounded in-process buffer, which lets
tests assert on what a request emitted without a broker.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List

from survey.logic.timestamps import utc_now_iso

logger = logging.getLogger(__name__)

USER_REGISTERED = "user.registered"
ANSWERS_SUBMITTED = "answers.submitted"

BUFFER_LIMIT = 1000


@dataclass(frozen=True)
class DomainEvent:
    type: str
    payload: Dict[str, Any]
    occurred_at: str = field(default_factory=utc_now_iso)


_buffer: Deque[DomainEvent] = deque(maxlen=BUFFER_LIMIT)


def publish(event_type: str, payload: Dict[str, Any]) -> DomainEvent:
    event = DomainEvent(type=event_type, payload=dict(payload))
    logger.info("event_published type=%s payload=%s", event.type, event.payload)
    _buffer.append(event)
    return event


def get_buffered_events(clear: bool = True) -> List[DomainEvent]:
    """Oldest first. Clears the buffer unless `clear` is False."""
    events = list(_buffer)
    if clear:
        _buffer.clear()
    return events


__all__ = [
    "USER_REGISTERED",
    "ANSWERS_SUBMITTED",
    "DomainEvent",
    "publish",
    "get_buffered_events",
]
