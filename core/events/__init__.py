"""Storage notification events and their normalization."""

from core.events.models import (
    CreatedEvent,
    DeletedEvent,
    EventGridEvent,
    EventKind,
    ObjectKind,
    RenamedEvent,
)
from core.events.normalizer import (
    classify,
    is_subscription_validation,
    parse_created,
    parse_deleted,
    parse_envelope,
    parse_renamed,
    path_from_url,
)

__all__ = [
    "CreatedEvent",
    "DeletedEvent",
    "EventGridEvent",
    "EventKind",
    "ObjectKind",
    "RenamedEvent",
    "classify",
    "is_subscription_validation",
    "parse_created",
    "parse_deleted",
    "parse_envelope",
    "parse_renamed",
    "path_from_url",
]
