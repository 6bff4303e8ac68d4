"""
Slug generation

Slugs double as the idempotency key for cards, so the algorithm must stay
stable: <slugified-title>-<external id>.
"""
import re
from typing import Optional, Union

MAX_TITLE_LENGTH = 50
FALLBACK_TITLE = "untitled"

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_HYPHEN_RUN = re.compile(r"-+")


def generate_slug(title: Optional[str], external_id: Union[str, int]) -> str:
    """
    Build a deterministic, URL-safe slug from a title and an external id

    Args:
        title: human-readable title (None is treated as empty)
        external_id: id from the source feed, appended verbatim

    Returns:
        e.g. generate_slug("Hello World", 123) -> "hello-world-123"
    """
    slug = (title or "").lower()
    slug = slug.replace("'", "")
    slug = _NON_ALNUM.sub("-", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    slug = slug.strip("-")

    if not slug:
        slug = FALLBACK_TITLE

    if len(slug) > MAX_TITLE_LENGTH:
        slug = slug[:MAX_TITLE_LENGTH].rstrip("-")

    return f"{slug}-{external_id}"
