# =============================================================================
# lib/school_feed.py - School Feed Filters
# =============================================================================
# Pure filters applied to school items before they reach a child's profile:
# - Parent-only items (PTA meetings, wine nights) are hidden, unless the
#   title also mentions something kid-related
# - Near-duplicate titles are collapsed
# - Newsletter / no-reply senders are not shown as teacher emails
# =============================================================================

import re
from typing import Any, Iterable

PARENT_ONLY_KEYWORDS = [
    "ladies night",
    "parents night out",
    "parents' night out",
    "parent night out",
    "moms night",
    "dads night",
    "wine",
    "cocktail",
    "happy hour",
    "adult only",
    "adults only",
    "21+",
    "pta meeting",
    "pta board",
    "board meeting",
    "volunteer meeting",
    "parent meeting",
    "parent conference",
]

KID_KEYWORDS = [
    "kids night",
    "kids' night",
    "children",
    "student",
    "field trip",
    "assembly",
    "concert",
    "recital",
    "game",
    "practice",
    "class",
    "grade",
    "recess",
    "lunch",
    "dismissal",
    "bus",
    "homework",
    "test",
    "quiz",
]

NON_TEACHER_SENDERS = [
    "amar chitra",
    "amar chitra katha",
    "ack media",
    "newsletter",
    "noreply",
    "no-reply",
    "donotreply",
    "notifications",
    "updates@",
    "info@",
    "marketing",
]

_CURLY_APOSTROPHES = re.compile(r"[‘’]")
_PUNCTUATION = re.compile(r"[^\w\s']")
_WHITESPACE = re.compile(r"\s+")


def is_parent_only(title: str) -> bool:
    lowered = title.lower()
    return any(keyword in lowered for keyword in PARENT_ONLY_KEYWORDS)


def is_kid_relevant(title: str) -> bool:
    """Kid keywords win; otherwise anything not parent-only is relevant."""
    lowered = title.lower()
    if any(keyword in lowered for keyword in KID_KEYWORDS):
        return True
    return not is_parent_only(title)


def is_actual_teacher(from_name: str | None, from_address: str | None) -> bool:
    combined = f"{from_name or ''} {from_address or ''}".lower()
    return not any(pattern in combined for pattern in NON_TEACHER_SENDERS)


def normalize_title(title: str) -> str:
    """Lowercase, strip punctuation (apostrophes kept), collapse whitespace."""
    normalized = _CURLY_APOSTROPHES.sub("'", title.lower())
    normalized = _PUNCTUATION.sub("", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def deduplicate_by_title(items: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep the first item for each normalized title."""
    seen: set[str] = set()
    unique = []
    for item in items:
        key = normalize_title(item.get("title") or "")
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def kid_relevant_unique(items: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Filter to kid-relevant items, then de-duplicate."""
    return deduplicate_by_title(item for item in items if is_kid_relevant(item.get("title") or ""))
