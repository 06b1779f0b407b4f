"""CVE schemas (NIST NVD)."""

import re
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

CVE_ID_PATTERN = re.compile(r"^CVE-\d{4}-\d+$", re.IGNORECASE)


class CVESeverity(str, Enum):
    """CVSS severity band."""

    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class CVEEntry(BaseModel):
    """Common Vulnerabilities and Exposures entry."""

    id: str = Field(..., pattern=r"^CVE-\d{4}-\d+$")
    description: str = ""
    published_date: datetime
    last_modified_date: datetime
    cvss_score: float | None = Field(default=None, ge=0.0, le=10.0)
    severity: CVESeverity = CVESeverity.NONE
    attack_vector: str | None = None
    affected_products: list[str] = Field(default_factory=list, max_length=10)
    references: list[str] = Field(default_factory=list)
    exploit_available: bool = False
    patch_available: bool = False
