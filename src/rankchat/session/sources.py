"""Citation list helpers."""

from collections.abc import Iterable
from typing import TYPE_CHECKING
from urllib.parse import urlparse

if TYPE_CHECKING:
    from .models import Source


def dedupe_sources(sources: Iterable["Source"]) -> list["Source"]:
    """Drop repeated URIs, keeping the first occurrence and its position."""
    seen: set[str] = set()
    unique = []
    for source in sources:
        if source.uri in seen:
            continue
        seen.add(source.uri)
        unique.append(source)
    return unique


def source_domain(uri: str) -> str:
    """Hostname of a citation without a leading ``www.``, or ``other``."""
    try:
        hostname = urlparse(uri).hostname
    except ValueError:
        return "other"
    if not hostname:
        return "other"
    return hostname.removeprefix("www.")


def group_sources_by_domain(sources: Iterable["Source"]) -> dict[str, list["Source"]]:
    """Group citations by domain, preserving first-seen domain order."""
    groups: dict[str, list[Source]] = {}
    for source in sources:
        groups.setdefault(source_domain(source.uri), []).append(source)
    return groups
