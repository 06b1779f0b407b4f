"""Normalizer package - pure, total mappers from remote and stored records to domain models."""

from cyberpulse.normalization.breach import (
    breach_from_record,
    breach_from_remote,
    breach_to_record,
    paste_from_remote,
)
from cyberpulse.normalization.common import (
    clean_html,
    normalize_many,
    parse_datetime,
    parse_optional_datetime,
)
from cyberpulse.normalization.cve import (
    cve_from_record,
    cve_from_remote,
    cve_to_record,
    extract_products,
    severity_of,
)
from cyberpulse.normalization.event import (
    event_from_ctftime,
    event_from_record,
    event_to_record,
    resolve_event_type,
)
from cyberpulse.normalization.news import (
    article_from_record,
    article_from_remote,
    article_to_record,
    resolve_category,
    resolve_tags,
    source_reliability,
)

__all__ = [
    # Common
    "clean_html",
    "normalize_many",
    "parse_datetime",
    "parse_optional_datetime",
    # News
    "article_from_remote",
    "article_from_record",
    "article_to_record",
    "resolve_tags",
    "resolve_category",
    "source_reliability",
    # Breaches
    "breach_from_remote",
    "breach_from_record",
    "breach_to_record",
    "paste_from_remote",
    # CVEs
    "cve_from_remote",
    "cve_from_record",
    "cve_to_record",
    "extract_products",
    "severity_of",
    # Events
    "event_from_ctftime",
    "event_from_record",
    "event_to_record",
    "resolve_event_type",
]
