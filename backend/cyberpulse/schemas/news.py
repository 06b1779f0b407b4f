"""News article schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SourceReliability(str, Enum):
    """How much a news source can be trusted, highest first."""

    OFFICIAL = "OFFICIAL"  # Government / vendor authorities
    VERIFIED = "VERIFIED"  # Well-known security outlets
    COMMUNITY = "COMMUNITY"  # Blogs and community sources
    UNVERIFIED = "UNVERIFIED"


class NewsCategory(str, Enum):
    """Top-level news category."""

    GENERAL = "GENERAL"
    BREACH = "BREACH"
    VULNERABILITY = "VULNERABILITY"
    MALWARE = "MALWARE"
    RANSOMWARE = "RANSOMWARE"
    APT = "APT"
    PRIVACY = "PRIVACY"
    REGULATORY = "REGULATORY"
    TOOLS = "TOOLS"
    RESEARCH = "RESEARCH"


class CyberTag(str, Enum):
    """Closed set of smart tags attached to articles."""

    RANSOMWARE = "RANSOMWARE"
    ZERO_DAY = "ZERO_DAY"
    DATA_BREACH = "DATA_BREACH"
    PATCH_TUESDAY = "PATCH_TUESDAY"
    CVE = "CVE"
    PHISHING = "PHISHING"
    APT = "APT"
    MALWARE = "MALWARE"
    SUPPLY_CHAIN = "SUPPLY_CHAIN"
    CRITICAL = "CRITICAL"

    @property
    def display_name(self) -> str:
        return _TAG_DISPLAY_NAMES[self]


_TAG_DISPLAY_NAMES: dict[CyberTag, str] = {
    CyberTag.RANSOMWARE: "Ransomware",
    CyberTag.ZERO_DAY: "Zero-Day",
    CyberTag.DATA_BREACH: "Data Breach",
    CyberTag.PATCH_TUESDAY: "Patch Tuesday",
    CyberTag.CVE: "CVE",
    CyberTag.PHISHING: "Phishing",
    CyberTag.APT: "APT",
    CyberTag.MALWARE: "Malware",
    CyberTag.SUPPLY_CHAIN: "Supply Chain",
    CyberTag.CRITICAL: "Critical",
}


class NewsSource(BaseModel):
    """Publisher of an article. Reliability is derived from the name."""

    id: str
    name: str
    icon_url: str | None = None
    website: str = ""
    reliability: SourceReliability = SourceReliability.UNVERIFIED


class Article(BaseModel):
    """Canonical cybersecurity news article."""

    id: str
    title: str
    summary: str = ""
    content: str | None = None
    url: str = ""
    image_url: str | None = None
    source: NewsSource
    author: str | None = None
    published_at: datetime
    tags: list[CyberTag] = Field(default_factory=list)
    category: NewsCategory = NewsCategory.GENERAL
    is_saved: bool = False
    is_read: bool = False
