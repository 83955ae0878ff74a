"""
Text helpers for research posts: tags, titles, summaries, categories and links
"""

import re
from typing import Iterable, List, Optional

SUMMARY_LIMIT = 320
TITLE_LIMIT = 120
MAX_TAGS = 6
DEFAULT_TITLE = "Research update"

HASHTAG_PATTERN = re.compile(r"#([A-Za-z0-9_-]+)")

_CATEGORY_ALIASES = {
    "collaboration": "Collaboration",
    "collaborations": "Collaboration",
    "collab": "Collaboration",
    "team-up": "Collaboration",
    "my research": "My Research",
    "research": "My Research",
    "personal": "My Research",
    "trending": "Trending",
}


def sanitize_tags(tags: Optional[Iterable[str]], limit: int = MAX_TAGS) -> List[str]:
    """
    Strip leading '#', hyphenate spaces and drop case-insensitive duplicates

    >>> sanitize_tags(["#AI", "ai", " Machine Learning "])
    ['AI', 'Machine-Learning']
    """
    seen = set()
    result = []
    for tag in tags or []:
        clean = (tag or "").lstrip("#").strip()
        clean = clean.replace(" ", "-").strip("-_")
        if not clean:
            continue
        key = clean.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(clean)
        if len(result) >= limit:
            break
    return result


def extract_hashtags(text: str) -> List[str]:
    return sanitize_tags(HASHTAG_PATTERN.findall(text or ""))


def merge_unique(primary: Iterable[str], secondary: Iterable[str], limit: int = 0) -> List[str]:
    seen = set()
    result = []
    for values in (primary, secondary):
        for value in values or []:
            value = (value or "").strip()
            if not value or value.lower() in seen:
                continue
            seen.add(value.lower())
            result.append(value)
            if 0 < limit <= len(result):
                return result
    return result


def truncate_text(text: str, limit: int) -> str:
    """Cut to limit characters and mark the cut with an ellipsis"""
    trimmed = (text or "").strip()
    if limit <= 0 or len(trimmed) <= limit:
        return trimmed
    cut = trimmed[:limit].strip()
    if not cut:
        return trimmed[:limit]
    return cut + "…"


def derive_title(body: str) -> str:
    trimmed = (body or "").strip()
    if not trimmed:
        return DEFAULT_TITLE
    for line in trimmed.split("\n"):
        if line.strip():
            return truncate_text(line.strip(), TITLE_LIMIT)
    return truncate_text(trimmed, TITLE_LIMIT)


def normalize_category(raw: str, is_collaboration: bool) -> str:
    category = (raw or "").strip()
    if not category:
        return "Collaboration" if is_collaboration else "My Research"
    return _CATEGORY_ALIASES.get(category.lower(), category)


def ensure_scheme(url: str) -> str:
    url = (url or "").strip()
    if not url:
        return ""
    if url.lower().startswith(("http://", "https://", "data:", "//")):
        return url
    return "https://" + url
