"""Cyber event schemas (CTFs, conferences, webinars)."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class EventType(str, Enum):
    """Kind of event."""

    CTF = "CTF"
    HACKATHON = "HACKATHON"
    WEBINAR = "WEBINAR"
    CONFERENCE = "CONFERENCE"
    WORKSHOP = "WORKSHOP"
    MEETUP = "MEETUP"
    COMPETITION = "COMPETITION"


class CyberEvent(BaseModel):
    """An upcoming or past cybersecurity event."""

    id: str
    name: str
    type: EventType = EventType.CTF
    description: str = ""
    url: str = ""
    image_url: str | None = None
    organizer: str = "Unknown"
    start_date: datetime
    end_date: datetime | None = None
    timezone: str = "UTC"
    is_online: bool = True
    location: str | None = None
    prizes: str | None = None
    registration_url: str | None = None
    registration_deadline: datetime | None = None
    is_registered: bool = False
    has_reminder: bool = False
