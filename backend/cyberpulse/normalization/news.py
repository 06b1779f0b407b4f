"""Mapping rules for news articles."""

from typing import Any

from cyberpulse.models import ArticleRecord
from cyberpulse.normalization.common import (
    as_dict,
    as_optional_str,
    as_str,
    as_str_list,
    clean_html,
    from_epoch_ms,
    parse_datetime,
    stable_id,
    to_epoch_ms,
)
from cyberpulse.schemas.news import (
    Article,
    CyberTag,
    NewsCategory,
    NewsSource,
    SourceReliability,
)

# Checked in order: an official match wins over a verified one.
OFFICIAL_SOURCES = ("NIST", "CISA", "FBI", "NSA", "CERT")
VERIFIED_SOURCES = (
    "The Hacker News",
    "BleepingComputer",
    "Krebs on Security",
    "Dark Reading",
    "SecurityWeek",
    "Threatpost",
    "CISA",
    "Microsoft Security",
    "Google Security Blog",
)


def _lookup_key(value: str) -> str:
    return value.strip().upper().replace(" ", "_").replace("-", "_")


_TAGS: dict[str, CyberTag] = {
    **{_lookup_key(tag.display_name): tag for tag in CyberTag},
    **{tag.value: tag for tag in CyberTag},
}

_CATEGORIES: dict[str, NewsCategory] = {category.value: category for category in NewsCategory}


def resolve_tag(value: Any) -> CyberTag | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return _TAGS.get(_lookup_key(value))


def resolve_tags(values: Any) -> list[CyberTag]:
    """Map free-text tags onto CyberTag, dropping unknown ones and repeats."""
    tags: list[CyberTag] = []
    for value in as_str_list(values):
        tag = resolve_tag(value)
        if tag is not None and tag not in tags:
            tags.append(tag)
    return tags


def resolve_category(value: Any) -> NewsCategory:
    if not isinstance(value, str):
        return NewsCategory.GENERAL
    return _CATEGORIES.get(_lookup_key(value), NewsCategory.GENERAL)


def source_reliability(name: str) -> SourceReliability:
    lowered = name.lower()
    if any(official.lower() in lowered for official in OFFICIAL_SOURCES):
        return SourceReliability.OFFICIAL
    if any(verified.lower() in lowered for verified in VERIFIED_SOURCES):
        return SourceReliability.VERIFIED
    return SourceReliability.COMMUNITY


def source_id_for(name: str) -> str:
    return name.lower().replace(" ", "_")


def build_source(
    name: str,
    source_id: str | None = None,
    icon_url: str | None = None,
    website: str = "",
) -> NewsSource:
    return NewsSource(
        id=source_id or source_id_for(name),
        name=name,
        icon_url=icon_url,
        website=website,
        reliability=source_reliability(name),
    )


def article_from_remote(raw: Any) -> Article | None:
    """Map a news API article. Returns None only when no id can be derived."""
    data = as_dict(raw)
    url = as_str(data.get("url")).strip()
    article_id = as_str(data.get("id")).strip() or (stable_id("article", url) if url else "")
    if not article_id:
        return None

    source_data = as_dict(data.get("source"))
    source_name = as_str(source_data.get("name")).strip() or "Unknown"

    return Article(
        id=article_id,
        title=as_str(data.get("title")).strip() or "Untitled",
        summary=clean_html(as_str(data.get("description"))),
        content=as_optional_str(data.get("content")),
        url=url,
        image_url=as_optional_str(data.get("urlToImage")),
        source=build_source(
            source_name,
            source_id=as_optional_str(source_data.get("id")),
            icon_url=as_optional_str(source_data.get("icon")),
            website=as_str(source_data.get("url")),
        ),
        author=as_optional_str(data.get("author")),
        published_at=parse_datetime(data.get("publishedAt")),
        tags=resolve_tags(data.get("tags")),
        category=resolve_category(data.get("category")),
    )


def article_from_record(row: ArticleRecord) -> Article:
    return Article(
        id=row.id,
        title=row.title,
        summary=row.summary,
        content=row.content,
        url=row.url,
        image_url=row.image_url,
        source=build_source(
            row.source_name,
            source_id=row.source_id or None,
            icon_url=row.source_icon_url,
            website=row.source_website,
        ),
        author=row.author,
        published_at=from_epoch_ms(row.published_at),
        tags=resolve_tags(row.tags),
        category=resolve_category(row.category),
        is_saved=row.is_saved,
        is_read=row.is_read,
    )


def article_to_record(article: Article) -> ArticleRecord:
    return ArticleRecord(
        id=article.id,
        title=article.title,
        summary=article.summary,
        content=article.content,
        url=article.url,
        image_url=article.image_url,
        source_id=article.source.id,
        source_name=article.source.name,
        source_icon_url=article.source.icon_url,
        source_website=article.source.website,
        source_reliability=article.source.reliability.value,
        author=article.author,
        published_at=to_epoch_ms(article.published_at),
        tags=[tag.value for tag in article.tags],
        category=article.category.value,
        is_saved=article.is_saved,
        is_read=article.is_read,
    )
