"""Fuzzy resolution of scraped Pokemon names to canonical IDs."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, Iterable, Mapping

from .normalize import create_name_variations

logger = getLogger("fusiondex_core.names.resolver")

EGG_ID = -1
FOSSIL_ID = -2

# Keys are lowercase-trimmed scraped text.
SPECIAL_CASES: dict[str, int] = {
    "oricorio": 741,
    "fossil pokemon": FOSSIL_ID,
    "fossils items": FOSSIL_ID,
    "egg": EGG_ID,
}

TYPO_CORRECTIONS: dict[str, str] = {
    "cyadaquil": "cyndaquil",
}

_NON_NAME_PATTERNS = (
    re.compile(r"Level", re.IGNORECASE),
    re.compile(r"Rate", re.IGNORECASE),
    re.compile(r"%"),
    re.compile(r"Type", re.IGNORECASE),
    re.compile(r"Pokémon", re.IGNORECASE),
    re.compile(r"^\d+$"),
    re.compile(r"^\d+-\d+$"),
    re.compile(r"^\d+%$"),
)


@dataclass
class NameIndex:
    name_to_id: dict[str, int] = field(default_factory=dict)
    id_to_name: dict[int, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.id_to_name)

    def canonical_name(self, pokemon_id: int | None) -> str | None:
        if pokemon_id is None:
            return None
        return self.id_to_name.get(pokemon_id)


def build_index(records: Iterable[Mapping[str, Any]]) -> NameIndex:
    """Index every name variant of ``records``.

    The first record to claim a variant keeps it; later collisions are
    dropped silently.
    """

    index = NameIndex()
    collisions = 0
    for record in records:
        name = record.get("name")
        pokemon_id = record.get("id")
        if not name or not isinstance(name, str) or pokemon_id is None:
            continue

        pokemon_id = int(pokemon_id)
        index.id_to_name.setdefault(pokemon_id, name)
        for variation in create_name_variations(name):
            existing = index.name_to_id.setdefault(variation, pokemon_id)
            if existing != pokemon_id:
                collisions += 1

    logger.debug(
        "[RESOLVER] Built name index: pokemon=%d, variants=%d, dropped_collisions=%d",
        len(index.id_to_name),
        len(index.name_to_id),
        collisions,
    )
    return index


def resolve(text: Any, index: NameIndex) -> int | None:
    """Return the canonical ID for ``text`` or ``None``; never raises on a miss."""

    for variation in create_name_variations(text):
        pokemon_id = index.name_to_id.get(variation)
        if pokemon_id is not None:
            return pokemon_id
    return None


def resolve_with_special_cases(text: Any, index: NameIndex) -> int | None:
    """Resolve ``text`` and fall back to typo fixes and sentinel entries.

    Used by the gift/trade/quest scrapers, whose tables mix real Pokemon with
    entries like "Egg" or "Fossil Pokemon".
    """

    found = resolve(text, index)
    if found is not None:
        return found
    if not text or not isinstance(text, str):
        return None

    normalized = text.strip().lower()
    if not normalized:
        return None

    corrected = TYPO_CORRECTIONS.get(normalized)
    if corrected:
        found = resolve(corrected, index)
        if found is not None:
            return found

    if normalized in SPECIAL_CASES:
        return SPECIAL_CASES[normalized]

    for key, special_id in SPECIAL_CASES.items():
        if key in normalized or normalized in key:
            return special_id

    logger.debug("[RESOLVER] No match for %r", text)
    return None


def is_potential_pokemon_name(text: Any) -> bool:
    """Cheap filter for table cells that cannot be a Pokemon name."""

    if not text or not isinstance(text, str):
        return False

    trimmed = text.strip()
    if len(trimmed) < 3 or len(trimmed) > 20:
        return False

    return not any(pattern.search(trimmed) for pattern in _NON_NAME_PATTERNS)
