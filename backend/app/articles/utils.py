# backend/app/articles/utils.py
"""Slug derivation and the tag column codec."""
import json
import logging
import re
from typing import Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """
    Derive a URL slug from a title.

    Lower-cases, turns every run of characters outside [a-z0-9] into a single
    hyphen and strips hyphens from both ends: "Hello World!" -> "hello-world".
    Non-ASCII letters are treated like punctuation.
    """
    return _NON_SLUG_CHARS.sub("-", (title or "").lower()).strip("-")


def normalize_tags(tags: Union[str, Iterable[str], None]) -> List[str]:
    """Trim each tag and drop empties, keeping the original order.

    A plain string is read as a comma separated list, which is what the
    article form submits.
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return [t.strip() for t in tags if isinstance(t, str) and t.strip()]


def encode_tags(tags: Union[str, Iterable[str], None]) -> str:
    return json.dumps(normalize_tags(tags))


def decode_tags(raw: Optional[str]) -> List[str]:
    """Decode the stored tag column. Never raises: bad data reads as no tags."""
    if isinstance(raw, list):
        return [t for t in raw if isinstance(t, str)]
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed tags value: %r", raw)
        return []
    if not isinstance(value, list):
        return []
    return [t for t in value if isinstance(t, str)]
