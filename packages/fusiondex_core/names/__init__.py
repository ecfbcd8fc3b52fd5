"""Pokemon name normalization and resolution."""

from .dataset import DatasetError, PokemonDataset, load_pokemon_entries
from .normalize import (
    create_name_variations,
    normalize_for_api,
    normalize_for_sprite,
    strip_form_suffix,
)
from .resolver import (
    EGG_ID,
    FOSSIL_ID,
    NameIndex,
    build_index,
    is_potential_pokemon_name,
    resolve,
    resolve_with_special_cases,
)

__all__ = [
    "DatasetError",
    "PokemonDataset",
    "load_pokemon_entries",
    "create_name_variations",
    "normalize_for_api",
    "normalize_for_sprite",
    "strip_form_suffix",
    "EGG_ID",
    "FOSSIL_ID",
    "NameIndex",
    "build_index",
    "is_potential_pokemon_name",
    "resolve",
    "resolve_with_special_cases",
]
