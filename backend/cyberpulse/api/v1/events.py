"""Cyber event endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from cyberpulse.api.deps import get_events, stream_results, unwrap
from cyberpulse.repositories import EventRepository
from cyberpulse.schemas.event import CyberEvent, EventType

router = APIRouter()


@router.get("")
async def stream_upcoming(
    type: EventType | None = None,
    force_refresh: bool = False,
    events: EventRepository = Depends(get_events),
) -> StreamingResponse:
    """Stream upcoming events (SSE), soonest first."""
    if type is None:
        return stream_results(events.get_upcoming_events(force_refresh=force_refresh))
    return stream_results(events.get_events_by_type(type, force_refresh=force_refresh))


@router.get("/month", response_model=list[CyberEvent])
async def events_for_month(
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
    events: EventRepository = Depends(get_events),
) -> list[CyberEvent]:
    return unwrap(await events.get_events_for_month(year, month))


@router.get("/reminders", response_model=list[CyberEvent])
async def with_reminders(events: EventRepository = Depends(get_events)) -> list[CyberEvent]:
    return unwrap(await events.get_events_with_reminders())


@router.delete("/past")
async def delete_past(events: EventRepository = Depends(get_events)) -> dict[str, int]:
    return {"removed": unwrap(await events.delete_past_events())}


@router.post("/{event_id}/reminder")
async def toggle_reminder(
    event_id: str, events: EventRepository = Depends(get_events)
) -> dict[str, str | bool]:
    return {"id": event_id, "has_reminder": unwrap(await events.toggle_reminder(event_id))}


@router.post("/{event_id}/registered")
async def toggle_registered(
    event_id: str, events: EventRepository = Depends(get_events)
) -> dict[str, str | bool]:
    return {"id": event_id, "is_registered": unwrap(await events.toggle_registered(event_id))}
