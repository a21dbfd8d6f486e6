"""Adapters from raw tagged events to typed LocationRecords.

Source events carry heterogeneous ``[name, value, ...]`` tag lists. Named
location fields are pulled out here so nothing past this boundary has to
look at raw tags.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from georecon.models.location import LocationRecord

GEOHASH_TAG = "g"
IMAGE_TAG = "image"
IMETA_TAG = "imeta"

_IMETA_URL_RE = re.compile(r"^url\s+(\S+)")
_CONTENT_IMAGE_URL_RE = re.compile(
    r"https?://[^\s]+\.(?:jpg|jpeg|png|gif|webp|heic|heif)", re.IGNORECASE
)


def _tag_values(tags: Iterable[Sequence[Any]], name: str) -> list[str]:
    """Return the first value of every tag called *name*."""
    values = []
    for tag in tags:
        if len(tag) >= 2 and tag[0] == name and isinstance(tag[1], str):
            values.append(tag[1])
    return values


def _imeta_urls(tags: Iterable[Sequence[Any]]) -> list[str]:
    """Collect ``url`` entries from imeta tags."""
    urls = []
    for tag in tags:
        if not tag or tag[0] != IMETA_TAG:
            continue
        for entry in tag[1:]:
            if not isinstance(entry, str):
                continue
            match = _IMETA_URL_RE.match(entry.strip())
            if match:
                urls.append(match.group(1))
    return urls


def extract_photo_urls(tags: Sequence[Sequence[Any]], content: str = "") -> list[str]:
    """Find photo references in an event's tags and content.

    Order is image tags, then imeta urls, then image links in the content;
    duplicates keep their first position.
    """
    candidates = [
        *_tag_values(tags, IMAGE_TAG),
        *_imeta_urls(tags),
        *_CONTENT_IMAGE_URL_RE.findall(content or ""),
    ]
    return list(dict.fromkeys(url for url in candidates if url))


def record_from_event(event: Mapping[str, Any]) -> LocationRecord:
    """Build a LocationRecord from a raw tagged event.

    The first ``g`` tag is the record's geohash; any further ``g`` tags are
    kept as hints for the precision upgrade matcher.

    Args:
        event: Mapping with ``id``, ``tags`` and optionally ``content``,
            ``pubkey`` and ``created_at``

    Returns:
        LocationRecord for the event
    """
    tags: Sequence[Sequence[Any]] = event.get("tags") or []
    geohashes = [value.strip() for value in _tag_values(tags, GEOHASH_TAG) if value.strip()]

    return LocationRecord(
        id=str(event["id"]),
        geohash=geohashes[0] if geohashes else None,
        geohash_hints=tuple(geohashes[1:]),
        photo_urls=tuple(extract_photo_urls(tags, event.get("content") or "")),
        author=str(event.get("pubkey") or ""),
        created_at=int(event.get("created_at") or 0),
    )


def records_from_events(events: Iterable[Mapping[str, Any]]) -> list[LocationRecord]:
    """Convert a sequence of raw events, preserving order."""
    return [record_from_event(event) for event in events]
