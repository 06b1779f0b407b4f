"""Mapping rules for cyber events (CTFtime)."""

from typing import Any

from cyberpulse.models import EventRecord
from cyberpulse.normalization.common import (
    as_bool,
    as_dict,
    as_optional_str,
    as_str,
    clean_html,
    from_epoch_ms,
    optional_epoch_ms,
    optional_from_epoch_ms,
    parse_datetime,
    parse_optional_datetime,
    to_epoch_ms,
)
from cyberpulse.schemas.event import CyberEvent, EventType

_EVENT_TYPES: dict[str, EventType] = {event_type.value: event_type for event_type in EventType}


def resolve_event_type(value: Any, default: EventType = EventType.CTF) -> EventType:
    if not isinstance(value, str):
        return default
    key = value.strip().upper().replace(" ", "_").replace("-", "_")
    return _EVENT_TYPES.get(key, default)


def event_from_ctftime(raw: Any) -> CyberEvent | None:
    """Map a CTFtime event. Every CTFtime event is a CTF."""
    data = as_dict(raw)
    event_id = as_str(data.get("id")).strip()
    if not event_id:
        return None

    organizers = data.get("organizers")
    organizer = "Unknown"
    if isinstance(organizers, list) and organizers:
        organizer = as_str(as_dict(organizers[0]).get("name")).strip() or "Unknown"

    url = as_str(data.get("url")).strip() or as_str(data.get("ctftime_url")).strip()
    return CyberEvent(
        id=event_id,
        name=as_str(data.get("title")).strip() or "Untitled event",
        type=EventType.CTF,
        description=clean_html(as_str(data.get("description"))),
        url=url,
        image_url=as_optional_str(data.get("logo")),
        organizer=organizer,
        start_date=parse_datetime(data.get("start")),
        end_date=parse_optional_datetime(data.get("finish")),
        timezone="UTC",
        is_online=not as_bool(data.get("onsite")),
        location=as_optional_str(data.get("location")),
        prizes=as_optional_str(data.get("prizes")),
        registration_url=url or None,
        registration_deadline=None,
    )


def event_from_record(row: EventRecord) -> CyberEvent:
    return CyberEvent(
        id=row.id,
        name=row.name,
        type=resolve_event_type(row.type),
        description=row.description,
        url=row.url,
        image_url=row.image_url,
        organizer=row.organizer,
        start_date=from_epoch_ms(row.start_date),
        end_date=optional_from_epoch_ms(row.end_date),
        timezone=row.timezone,
        is_online=row.is_online,
        location=row.location,
        prizes=row.prizes,
        registration_url=row.registration_url,
        registration_deadline=optional_from_epoch_ms(row.registration_deadline),
        is_registered=row.is_registered,
        has_reminder=row.has_reminder,
    )


def event_to_record(event: CyberEvent) -> EventRecord:
    return EventRecord(
        id=event.id,
        name=event.name,
        type=event.type.value,
        description=event.description,
        url=event.url,
        image_url=event.image_url,
        organizer=event.organizer,
        start_date=to_epoch_ms(event.start_date),
        end_date=optional_epoch_ms(event.end_date),
        timezone=event.timezone,
        is_online=event.is_online,
        location=event.location,
        prizes=event.prizes,
        registration_url=event.registration_url,
        registration_deadline=optional_epoch_ms(event.registration_deadline),
        is_registered=event.is_registered,
        has_reminder=event.has_reminder,
    )
