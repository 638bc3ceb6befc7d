"""URL slugs for recipe titles.

Cyrillic is transliterated (Bulgarian streamlined system) before anything
is stripped, so ``"Баница"`` becomes ``"banitsa"`` rather than an empty slug.
"""

import re
import unicodedata

CYRILLIC_TO_LATIN = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ж": "zh",
    "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m", "н": "n",
    "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "у": "u", "ф": "f",
    "х": "h", "ц": "ts", "ч": "ch", "ш": "sh", "щ": "sht", "ъ": "a", "ь": "y",
    "ю": "yu", "я": "ya",
    # Russian/Ukrainian letters that show up in imported titles
    "ё": "yo", "ы": "y", "э": "e", "є": "ye", "і": "i", "ї": "yi", "ґ": "g",
}

_NON_WORD = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATORS = re.compile(r"[\s_-]+")


def transliterate(text: str) -> str:
    return "".join(CYRILLIC_TO_LATIN.get(ch, ch) for ch in text)


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def slugify(title: str) -> str:
    """Deterministic, idempotent slug: ``slugify(slugify(t)) == slugify(t)``."""
    text = transliterate(title.lower().strip())
    text = _strip_accents(text)
    text = _NON_WORD.sub("", text)
    text = _SEPARATORS.sub("-", text)
    return text.strip("-")
