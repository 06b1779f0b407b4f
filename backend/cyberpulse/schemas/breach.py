"""Data breach schemas (Have I Been Pwned)."""

from datetime import datetime

from pydantic import BaseModel, Field


class Breach(BaseModel):
    """A known data breach. The id is the HIBP breach name."""

    id: str
    name: str
    domain: str | None = None
    breach_date: datetime
    added_date: datetime
    modified_date: datetime | None = None
    pwn_count: int = Field(default=0, ge=0)
    description: str = ""
    data_classes: list[str] = Field(default_factory=list)
    is_verified: bool = False
    is_fabricated: bool = False
    is_sensitive: bool = False
    is_retired: bool = False
    is_spam_list: bool = False
    logo_path: str | None = None


class Paste(BaseModel):
    """A paste an email address appeared in."""

    id: str
    source: str
    title: str | None = None
    date: datetime | None = None
    email_count: int = 0


class PwnedCheckResult(BaseModel):
    """Outcome of an "Am I pwned?" check."""

    email: str
    is_pwned: bool
    breaches: list[Breach] = Field(default_factory=list)
    pastes: list[Paste] | None = None  # None when the paste lookup failed
    checked_at: datetime
