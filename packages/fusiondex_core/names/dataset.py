"""Loading and caching of the canonical Pokemon dataset."""

from __future__ import annotations

import json
from logging import getLogger
from pathlib import Path
from typing import Any

from .resolver import NameIndex, build_index

logger = getLogger("fusiondex_core.names.dataset")


class DatasetError(RuntimeError):
    pass


def load_pokemon_entries(path: Path) -> list[dict[str, Any]]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        raise DatasetError(f"Pokemon data file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise DatasetError(f"Pokemon data file is not valid JSON: {path}: {exc}") from exc

    if not isinstance(data, list):
        raise DatasetError(f"Pokemon data file does not contain an array: {path}")

    for entry in data:
        if not isinstance(entry, dict) or entry.get("id") is None or not entry.get("name"):
            raise DatasetError(
                f"Invalid Pokemon data entry: missing id or name - {json.dumps(entry, ensure_ascii=False)}"
            )
        if not isinstance(entry["id"], int) or isinstance(entry["id"], bool):
            raise DatasetError(
                f"Invalid Pokemon data entry: id must be an integer - {json.dumps(entry, ensure_ascii=False)}"
            )
    return data


class PokemonDataset:
    """Per-run cache of the canonical list and its derived name index.

    Build one per script invocation and pass it to whatever needs it; call
    ``clear()`` to force the next access to re-read the file.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._entries: list[dict[str, Any]] | None = None
        self._name_index: NameIndex | None = None
        self._dex_entries: list[dict[str, Any]] | None = None

    def entries(self, force_reload: bool = False) -> list[dict[str, Any]]:
        if self._entries is None or force_reload:
            self._entries = load_pokemon_entries(self.path)
            self._name_index = None
            self._dex_entries = None
            logger.info("[DATASET] Loaded %d Pokemon entries from '%s'", len(self._entries), self.path)
        return self._entries

    def name_index(self, force_reload: bool = False) -> NameIndex:
        if self._name_index is None or force_reload:
            self._name_index = build_index(self.entries(force_reload))
        return self._name_index

    def dex_entries(self, force_reload: bool = False) -> list[dict[str, Any]]:
        if self._dex_entries is None or force_reload:
            out: list[dict[str, Any]] = []
            for entry in self.entries(force_reload):
                dex = {"id": int(entry["id"]), "name": str(entry["name"])}
                for key in ("headNamePart", "bodyNamePart"):
                    if entry.get(key):
                        dex[key] = entry[key]
                out.append(dex)
            self._dex_entries = out
        return self._dex_entries

    def clear(self) -> None:
        self._entries = None
        self._name_index = None
        self._dex_entries = None

    def cache_status(self) -> dict[str, bool]:
        return {
            "pokemon_data": self._entries is not None,
            "name_index": self._name_index is not None,
            "dex_entries": self._dex_entries is not None,
        }
