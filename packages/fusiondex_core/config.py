"""Environment-driven configuration for FusionDex build tooling.

Every setting has a workspace-relative default so scripts run from a clean
checkout without any environment at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

WORKSPACE_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_POKEMON_DATA = WORKSPACE_ROOT / "data" / "shared" / "pokemon-data.json"
DEFAULT_SPRITES_DIR = WORKSPACE_ROOT / "scripts" / "sprites" / "pokemon-icons"
DEFAULT_ATLAS_IMAGE = WORKSPACE_ROOT / "public" / "images" / "pokemon-spritesheet.png"
DEFAULT_ATLAS_METADATA = WORKSPACE_ROOT / "src" / "assets" / "pokemon-spritesheet-metadata.json"


def _truthy_env(name: str, default: bool = False) -> bool:
    raw = str(os.environ.get(name) or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _first_non_empty(*values: str | None) -> str | None:
    for value in values:
        if value and value.strip():
            return value.strip()
    return None


def _int_env(name: str, default: int) -> int:
    raw = _first_non_empty(os.environ.get(name))
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _float_env(name: str, default: float) -> float:
    raw = _first_non_empty(os.environ.get(name))
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _path_env(name: str, default: Path) -> Path:
    raw = _first_non_empty(os.environ.get(name))
    return Path(raw) if raw else default


@dataclass(frozen=True)
class PackerOptions:
    """Tunables for the growing guillotine packer.

    The defaults reproduce existing atlas dimensions: canvas grows 1.2x per
    failed attempt for the first ``late_after`` attempts and 1.3x afterwards,
    up to ``max_attempts`` attempts in total.
    """

    max_attempts: int = 15
    growth_factor: float = 1.2
    late_growth_factor: float = 1.3
    late_after: int = 10
    margin: int = 4
    area_slack: float = 1.15
    repair_iterations: int = 5
    repair_spacing: int = 1


@dataclass(frozen=True)
class BuildPaths:
    pokemon_data: Path
    sprites_dir: Path
    atlas_image: Path
    atlas_metadata: Path


def packer_options_from_env() -> PackerOptions:
    defaults = PackerOptions()
    return PackerOptions(
        max_attempts=_int_env("FUSIONDEX_PACK_MAX_ATTEMPTS", defaults.max_attempts),
        growth_factor=_float_env("FUSIONDEX_PACK_GROWTH_FACTOR", defaults.growth_factor),
        late_growth_factor=_float_env("FUSIONDEX_PACK_LATE_GROWTH_FACTOR", defaults.late_growth_factor),
        late_after=_int_env("FUSIONDEX_PACK_LATE_AFTER", defaults.late_after),
        margin=_int_env("FUSIONDEX_PACK_MARGIN", defaults.margin),
        repair_iterations=_int_env("FUSIONDEX_PACK_REPAIR_ITERATIONS", defaults.repair_iterations),
    )


def build_paths_from_env() -> BuildPaths:
    return BuildPaths(
        pokemon_data=_path_env("FUSIONDEX_POKEMON_DATA", DEFAULT_POKEMON_DATA),
        sprites_dir=_path_env("FUSIONDEX_SPRITES_DIR", DEFAULT_SPRITES_DIR),
        atlas_image=_path_env("FUSIONDEX_ATLAS_IMAGE", DEFAULT_ATLAS_IMAGE),
        atlas_metadata=_path_env("FUSIONDEX_ATLAS_METADATA", DEFAULT_ATLAS_METADATA),
    )


def cors_origins() -> list[str]:
    raw = os.environ.get("FUSIONDEX_CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


def dev_mode() -> bool:
    return _truthy_env("FUSIONDEX_DEV_MODE", default=False)
