"""Process-wide access to the canonical dataset and atlas metadata for the API."""

from __future__ import annotations

from functools import lru_cache
from logging import getLogger
from pathlib import Path
from typing import Any, Optional

from packages.fusiondex_core.config import build_paths_from_env
from packages.fusiondex_core.names.dataset import PokemonDataset
from packages.fusiondex_core.sprites.atlas import load_atlas_metadata

logger = getLogger("fusiondex_api.storage.datasets")


@lru_cache(maxsize=1)
def _dataset() -> PokemonDataset:
    path = build_paths_from_env().pokemon_data
    logger.info("[STORAGE] Using Pokemon dataset at '%s'", path)
    return PokemonDataset(path)


@lru_cache(maxsize=4)
def _atlas_metadata(path: Path, mtime_ns: int) -> dict[str, Any]:
    logger.info("[STORAGE] Loading atlas metadata from '%s'", path)
    return load_atlas_metadata(path)


def get_dataset() -> PokemonDataset:
    return _dataset()


def get_atlas_metadata() -> Optional[dict[str, Any]]:
    path = build_paths_from_env().atlas_metadata
    if not path.exists():
        return None
    return _atlas_metadata(path, path.stat().st_mtime_ns)


def reset_cache_for_tests() -> None:
    _dataset.cache_clear()
    _atlas_metadata.cache_clear()
