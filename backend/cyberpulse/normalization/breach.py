"""Mapping rules for Have I Been Pwned breaches and pastes."""

from typing import Any

from cyberpulse.models import BreachRecord
from cyberpulse.normalization.common import (
    as_bool,
    as_dict,
    as_int,
    as_optional_str,
    as_str,
    as_str_list,
    clean_html,
    from_epoch_ms,
    optional_epoch_ms,
    optional_from_epoch_ms,
    parse_datetime,
    parse_optional_datetime,
    to_epoch_ms,
)
from cyberpulse.schemas.breach import Breach, Paste


def breach_from_remote(raw: Any) -> Breach | None:
    """Map an HIBP breach. The breach ``Name`` is the stable id."""
    data = as_dict(raw)
    breach_id = as_str(data.get("Name")).strip()
    if not breach_id:
        return None

    return Breach(
        id=breach_id,
        name=as_str(data.get("Title")).strip() or breach_id,
        domain=as_optional_str(data.get("Domain")),
        breach_date=parse_datetime(data.get("BreachDate")),
        added_date=parse_datetime(data.get("AddedDate")),
        modified_date=parse_optional_datetime(data.get("ModifiedDate")),
        pwn_count=max(as_int(data.get("PwnCount")), 0),
        description=clean_html(as_str(data.get("Description"))),
        data_classes=as_str_list(data.get("DataClasses")),
        is_verified=as_bool(data.get("IsVerified")),
        is_fabricated=as_bool(data.get("IsFabricated")),
        is_sensitive=as_bool(data.get("IsSensitive")),
        is_retired=as_bool(data.get("IsRetired")),
        is_spam_list=as_bool(data.get("IsSpamList")),
        logo_path=as_optional_str(data.get("LogoPath")),
    )


def paste_from_remote(raw: Any) -> Paste | None:
    data = as_dict(raw)
    paste_id = as_str(data.get("Id")).strip()
    if not paste_id:
        return None
    return Paste(
        id=paste_id,
        source=as_str(data.get("Source")).strip() or "Unknown",
        title=as_optional_str(data.get("Title")),
        date=parse_optional_datetime(data.get("Date")),
        email_count=max(as_int(data.get("EmailCount")), 0),
    )


def breach_from_record(row: BreachRecord) -> Breach:
    return Breach(
        id=row.id,
        name=row.name,
        domain=row.domain,
        breach_date=from_epoch_ms(row.breach_date),
        added_date=from_epoch_ms(row.added_date),
        modified_date=optional_from_epoch_ms(row.modified_date),
        pwn_count=max(row.pwn_count, 0),
        description=row.description,
        data_classes=list(row.data_classes or []),
        is_verified=row.is_verified,
        is_fabricated=row.is_fabricated,
        is_sensitive=row.is_sensitive,
        is_retired=row.is_retired,
        is_spam_list=row.is_spam_list,
        logo_path=row.logo_path,
    )


def breach_to_record(breach: Breach) -> BreachRecord:
    return BreachRecord(
        id=breach.id,
        name=breach.name,
        domain=breach.domain,
        breach_date=to_epoch_ms(breach.breach_date),
        added_date=to_epoch_ms(breach.added_date),
        modified_date=optional_epoch_ms(breach.modified_date),
        pwn_count=breach.pwn_count,
        description=breach.description,
        data_classes=list(breach.data_classes),
        is_verified=breach.is_verified,
        is_fabricated=breach.is_fabricated,
        is_sensitive=breach.is_sensitive,
        is_retired=breach.is_retired,
        is_spam_list=breach.is_spam_list,
        logo_path=breach.logo_path,
    )
