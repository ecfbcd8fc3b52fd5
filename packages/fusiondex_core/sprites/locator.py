"""Sprite file lookup with base-form fallback."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path

from ..names.normalize import normalize_for_sprite, strip_form_suffix

logger = getLogger("fusiondex_core.sprites.locator")


def sprite_filename(name: str) -> str:
    stem = normalize_for_sprite(name)
    return f"{stem}.png" if stem else ""


def find_sprite_file(pokemon_name: str, sprites_dir: Path) -> str | None:
    """Return the sprite filename for ``pokemon_name`` inside ``sprites_dir``.

    Third-party sprite sets skip many in-game forms, so a missing form sprite
    falls back to the base species sprite.
    """

    primary = sprite_filename(pokemon_name)
    if primary and (sprites_dir / primary).is_file():
        return primary

    base_name = strip_form_suffix(pokemon_name)
    if base_name and base_name != pokemon_name:
        fallback = sprite_filename(base_name)
        if fallback and fallback != primary and (sprites_dir / fallback).is_file():
            logger.debug("[LOCATOR] %s: using base form sprite %s", pokemon_name, fallback)
            return fallback

    return None
