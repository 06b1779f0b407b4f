"""Mapping rules for NVD CVE entries."""

from typing import Any

from cyberpulse.models import CVERecord
from cyberpulse.normalization.common import (
    as_dict,
    as_float,
    as_list,
    as_optional_str,
    as_str,
    from_epoch_ms,
    parse_datetime,
    to_epoch_ms,
)
from cyberpulse.schemas.cve import CVE_ID_PATTERN, CVEEntry, CVESeverity

MAX_AFFECTED_PRODUCTS = 10

# Preferred first
_CVSS_METRIC_KEYS = ("cvssMetricV31", "cvssMetricV30", "cvssMetricV2")


def severity_of(score: float | None) -> CVESeverity:
    if score is None:
        return CVESeverity.NONE
    if score >= 9.0:
        return CVESeverity.CRITICAL
    if score >= 7.0:
        return CVESeverity.HIGH
    if score >= 4.0:
        return CVESeverity.MEDIUM
    if score >= 0.1:
        return CVESeverity.LOW
    return CVESeverity.NONE


def normalize_cve_id(value: Any) -> str | None:
    cve_id = as_str(value).strip().upper()
    return cve_id if CVE_ID_PATTERN.match(cve_id) else None


def _product_name(criteria: str) -> str:
    # cpe:2.3:a:vendor:product:version:...
    parts = criteria.split(":")
    if len(parts) >= 5:
        return f"{parts[3]} {parts[4]}"
    return criteria


def extract_products(configurations: Any) -> list[str]:
    """Flatten configurations/nodes/cpeMatch into distinct product names."""
    products: list[str] = []
    if not isinstance(configurations, list):
        return products
    for config in configurations:
        for node in as_list(as_dict(config).get("nodes")):
            for match in as_list(as_dict(node).get("cpeMatch")):
                criteria = as_str(as_dict(match).get("criteria")).strip()
                if not criteria:
                    continue
                product = _product_name(criteria)
                if product not in products:
                    products.append(product)
                if len(products) >= MAX_AFFECTED_PRODUCTS:
                    return products
    return products


def _description(descriptions: Any) -> str:
    entries = [as_dict(d) for d in descriptions] if isinstance(descriptions, list) else []
    for entry in entries:
        if as_str(entry.get("lang")).lower() == "en":
            return as_str(entry.get("value"))
    return as_str(entries[0].get("value")) if entries else ""


def _cvss(metrics: Any) -> tuple[float | None, str | None]:
    metrics = as_dict(metrics)
    for key in _CVSS_METRIC_KEYS:
        entries = metrics.get(key)
        if not isinstance(entries, list) or not entries:
            continue
        data = as_dict(as_dict(entries[0]).get("cvssData"))
        score = as_float(data.get("baseScore"))
        if score is not None and not 0.0 <= score <= 10.0:
            score = None
        vector = as_optional_str(data.get("attackVector") or data.get("accessVector"))
        return score, vector
    return None, None


def _reference_tags(references: list[dict[str, Any]]) -> set[str]:
    tags: set[str] = set()
    for ref in references:
        tag_list = ref.get("tags")
        if isinstance(tag_list, list):
            tags.update(as_str(tag) for tag in tag_list)
    return tags


def cve_from_remote(raw: Any) -> CVEEntry | None:
    """Map an NVD 2.0 vulnerability (either ``{"cve": {...}}`` or the inner object)."""
    data = as_dict(raw)
    if "cve" in data:
        data = as_dict(data["cve"])
    cve_id = normalize_cve_id(data.get("id"))
    if cve_id is None:
        return None

    score, attack_vector = _cvss(data.get("metrics"))
    references = [ref for ref in as_list(data.get("references")) if isinstance(ref, dict)]
    ref_tags = _reference_tags(references)

    return CVEEntry(
        id=cve_id,
        description=_description(data.get("descriptions")),
        published_date=parse_datetime(data.get("published")),
        last_modified_date=parse_datetime(data.get("lastModified")),
        cvss_score=score,
        severity=severity_of(score),
        attack_vector=attack_vector,
        affected_products=extract_products(data.get("configurations")),
        references=[url for url in (as_str(ref.get("url")).strip() for ref in references) if url],
        exploit_available="Exploit" in ref_tags or bool(data.get("cisaExploitAdd")),
        patch_available="Patch" in ref_tags,
    )


def cve_from_record(row: CVERecord) -> CVEEntry:
    products: list[str] = []
    for product in row.affected_products or []:
        if product not in products:
            products.append(product)
    return CVEEntry(
        id=row.id,
        description=row.description,
        published_date=from_epoch_ms(row.published_date),
        last_modified_date=from_epoch_ms(row.last_modified_date),
        cvss_score=row.cvss_score,
        severity=severity_of(row.cvss_score),
        attack_vector=row.attack_vector,
        affected_products=products[:MAX_AFFECTED_PRODUCTS],
        references=list(row.reference_urls or []),
        exploit_available=row.exploit_available,
        patch_available=row.patch_available,
    )


def cve_to_record(entry: CVEEntry) -> CVERecord:
    return CVERecord(
        id=entry.id,
        description=entry.description,
        published_date=to_epoch_ms(entry.published_date),
        last_modified_date=to_epoch_ms(entry.last_modified_date),
        cvss_score=entry.cvss_score,
        severity=severity_of(entry.cvss_score).value,
        attack_vector=entry.attack_vector,
        affected_products=list(entry.affected_products),
        reference_urls=list(entry.references),
        exploit_available=entry.exploit_available,
        patch_available=entry.patch_available,
    )
