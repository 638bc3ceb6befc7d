"""Active UI language: explicit choice, then the stored cookie, then the browser."""

from typing import Optional
import logging

from domain.enums import Language

logger = logging.getLogger("cooksmart.language")

LANGUAGE_COOKIE = "cooksmart_language"
# One year
LANGUAGE_COOKIE_MAX_AGE = 365 * 24 * 60 * 60


def parse_language(value: Optional[str]) -> Optional[Language]:
    if not value:
        return None
    try:
        return Language(value.strip().lower()[:2])
    except ValueError:
        return None


def from_accept_language(header: Optional[str]) -> Optional[Language]:
    """First supported language in an ``Accept-Language`` header, by q-weight."""
    if not header:
        return None
    candidates = []
    for position, part in enumerate(header.split(",")):
        tag, _, params = part.strip().partition(";")
        weight = 1.0
        if params.strip().startswith("q="):
            try:
                weight = float(params.strip()[2:])
            except ValueError:
                weight = 0.0
        candidates.append((-weight, position, tag))
    for _, _, tag in sorted(candidates):
        language = parse_language(tag)
        if language is not None:
            return language
    return None


def resolve_language(
    explicit: Optional[str] = None,
    cookie: Optional[str] = None,
    accept_language: Optional[str] = None,
    default: str = Language.BG.value,
) -> Language:
    for candidate in (parse_language(explicit), parse_language(cookie)):
        if candidate is not None:
            return candidate
    return from_accept_language(accept_language) or Language(default)
