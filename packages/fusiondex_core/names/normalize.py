"""Name normalization and fuzzy-match variant generation.

The same variant generator feeds both sides of a lookup: index construction
and query probing. Changing it changes which scraped strings resolve.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Any

_APOSTROPHES = "'’‘`"
_NON_LETTER_RE = re.compile(r"[^a-z]")
_WHITESPACE_RE = re.compile(r"\s+")


def _fold_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _strip_apostrophes(text: str) -> str:
    for ch in _APOSTROPHES:
        text = text.replace(ch, "")
    return text


def create_name_variations(name: Any) -> list[str]:
    """Return the ordered, de-duplicated variant set for ``name``.

    Order is deterministic; resolvers probe variants in this order.
    """

    if not name or not isinstance(name, str):
        return []

    trimmed = name.strip()
    base = [
        name,
        name.lower(),
        trimmed,
        trimmed.lower(),
        name.replace("♀", "F").replace("♂", "M"),
        name.replace("♀", "-f").replace("♂", "-m"),
        name.replace("♀", "").replace("♂", ""),
        name.replace("♀", "").replace("♂", "").strip(),
        name.replace(".", ""),
        _strip_apostrophes(name),
        _strip_apostrophes(name.replace(".", "")),
        _WHITESPACE_RE.sub(" ", trimmed),
        _WHITESPACE_RE.sub("", name),
        _WHITESPACE_RE.sub("", name.replace(".", "")),
        _fold_diacritics(name),
    ]

    out: list[str] = []
    for variation in base:
        lower = variation.lower()
        out.append(variation)
        out.append(variation.upper())
        out.append(lower)
        out.append(_NON_LETTER_RE.sub("", lower))
        out.append(_NON_LETTER_RE.sub("", _fold_diacritics(lower)))

    return [v for v in dict.fromkeys(out) if v]


# Forms that PokeSprite does not ship fall back to the base name ("").
_SPRITE_FORM_RULES: tuple[tuple[str, str], ...] = (
    (r"\s+baile\s+style", ""),
    (r"\s+pom-pom\s+style", "-pom-pom"),
    (r"\s+pau\s+style", "-pau"),
    (r"\s+sensu\s+style", "-sensu"),
    (r"\s+midday\s+form", ""),
    (r"\s+midnight\s+form", "-midnight"),
    (r"\s+dusk\s+form", "-dusk"),
    (r"\s+aria\s+form", ""),
    (r"\s+pirouette\s+form", "-pirouette"),
    (r"\s+meteor\s+form", ""),
    (r"\s+core\s+form", ""),
    (r"\s+ordinary\s+form", ""),
    (r"\s+resolute\s+form", "-resolute"),
    (r"\s+plant\s+cloak", "-plant"),
    (r"\s+sandy\s+cloak", "-sandy"),
    (r"\s+trash\s+cloak", "-trash"),
    (r"\s+heat\s+rotom", "-heat"),
    (r"\s+wash\s+rotom", "-wash"),
    (r"\s+frost\s+rotom", "-frost"),
    (r"\s+fan\s+rotom", "-fan"),
    (r"\s+mow\s+rotom", "-mow"),
    (r"\s+land\s+forme", "-land"),
    (r"\s+sky\s+forme", "-sky"),
    (r"\s+altered\s+forme", "-altered"),
    (r"\s+origin\s+forme", "-origin"),
    (r"\s+incarnate\s+forme", "-incarnate"),
    (r"\s+therian\s+forme", "-therian"),
)

_FORM_SUFFIX_RULES: tuple[str, ...] = (
    r"\s+(baile|pom-pom|pau|sensu)\s+style$",
    r"\s+(midday|midnight|dusk)\s+form$",
    r"\s+(aria|pirouette)\s+form$",
    r"\s+(meteor|core)\s+form$",
    r"\s+(ordinary|resolute)\s+form$",
    r"\s+(plant|sandy|trash)\s+cloak$",
    r"\s+(heat|wash|frost|fan|mow)\s+rotom$",
    r"\s+(land|sky)\s+forme$",
    r"\s+(altered|origin)\s+forme$",
    r"\s+(incarnate|therian)\s+forme$",
    r"\s+(red|blue|yellow|green|orange|indigo|violet)\s+(meteor|core)$",
    r"\s+style$",
    r"\s+form$",
    r"\s+forme$",
    r"\s+cloak$",
    r"\s+rotom$",
)

# PokeAPI only serves one slug per multi-form species.
_API_DEFAULT_FORMS: tuple[tuple[str, str], ...] = (
    ("aegislash", "aegislash-shield"),
    ("oricorio", "oricorio-baile"),
    ("deoxys", "deoxys-normal"),
    ("gourgeist", "gourgeist-average"),
    ("pumpkaboo", "pumpkaboo-average"),
    ("castform", "castform"),
    ("mimikyu", "mimikyu-disguised"),
    ("giratina", "giratina-altered"),
    ("minior", "minior-red-meteor"),
    ("meloetta", "meloetta-aria"),
    ("lycanroc", "lycanroc-midday"),
    ("necrozma", "necrozma"),
)


def _basic_fold(name: str) -> str:
    return (
        name.lower()
        .replace("♀", "-f")
        .replace("♂", "-m")
        .replace(".", "")
        .replace("'", "")
        .replace("’", "")
        .replace("é", "e")
    )


def normalize_for_sprite(name: Any) -> str:
    """Map a display name to the PokeSprite filename stem ("Mr. Mime" -> "mr-mime")."""

    if not name or not isinstance(name, str):
        return ""

    out = _basic_fold(name)
    for pattern, replacement in _SPRITE_FORM_RULES:
        out = re.sub(pattern, replacement, out)

    out = re.sub(r"[^a-z0-9-]", "-", out)
    out = re.sub(r"-+", "-", out)
    return out.strip("-")


def normalize_for_api(name: Any) -> str:
    if not name or not isinstance(name, str):
        return ""

    out = _WHITESPACE_RE.sub("-", _basic_fold(name))
    for prefix, slug in _API_DEFAULT_FORMS:
        if out.startswith(prefix):
            return slug
    return out


def strip_form_suffix(name: Any) -> str:
    """Drop a trailing form qualifier ("Giratina Origin Forme" -> "Giratina")."""

    if not name or not isinstance(name, str):
        return ""

    out = name
    for pattern in _FORM_SUFFIX_RULES:
        out = re.sub(pattern, "", out, flags=re.IGNORECASE)
    return out.strip()
