"""Canonical Pokemon listing and name resolution endpoints."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query, Response
from pydantic import BaseModel

from packages.fusiondex_core.config import dev_mode
from packages.fusiondex_core.names.dataset import DatasetError
from packages.fusiondex_core.names.resolver import (
    EGG_ID,
    is_potential_pokemon_name,
    resolve,
    resolve_with_special_cases,
)

from ..storage.datasets import get_dataset

logger = logging.getLogger("fusiondex_api.pokemon")

router = APIRouter(prefix="/api/v1/pokemon", tags=["pokemon"])

EGG_POKEMON: dict[str, Any] = {
    "id": EGG_ID,
    "nationalDexId": EGG_ID,
    "name": "Egg",
    "types": [{"name": "Normal"}],
}


class PokemonListResponse(BaseModel):
    data: list[dict[str, Any]]
    count: int
    total: int


class ResolveResponse(BaseModel):
    query: str
    id: Optional[int] = None
    name: Optional[str] = None
    potential: bool


def _entries() -> list[dict[str, Any]]:
    try:
        return get_dataset().entries()
    except DatasetError as exc:
        logger.error("[API] Pokemon dataset unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Pokemon dataset unavailable") from exc


def _parse_ids(raw: str) -> set[int]:
    try:
        return {int(part) for part in raw.split(",") if part.strip()}
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid ids parameter: {raw}") from exc


def _cache_headers(response: Response) -> None:
    response.headers["Cache-Control"] = "public, max-age=60" if dev_mode() else "public, max-age=86400"
    response.headers["X-Content-Type-Options"] = "nosniff"


@router.get("", response_model=PokemonListResponse)
@router.get("/", response_model=PokemonListResponse)
def list_pokemon(
    response: Response,
    ids: Optional[str] = Query(default=None, description="Comma-separated Pokemon IDs"),
    search: Optional[str] = Query(default=None, description="Case-insensitive name search"),
    limit: Optional[int] = Query(default=None),
) -> dict[str, Any]:
    entries = _entries()
    data = [*entries, EGG_POKEMON]

    if ids:
        wanted = _parse_ids(ids)
        data = [p for p in data if int(p["id"]) in wanted]
    if search:
        needle = search.lower()
        data = [p for p in data if needle in str(p["name"]).lower()]
    if limit and limit > 0:
        data = data[:limit]

    _cache_headers(response)
    logger.info("[API] Pokemon list: returned=%d", len(data))
    return {"data": data, "count": len(data), "total": len(entries) + 1}


@router.get("/resolve", response_model=ResolveResponse)
def resolve_name(
    name: str = Query(min_length=1),
    special_cases: bool = Query(default=True),
) -> dict[str, Any]:
    _entries()
    index = get_dataset().name_index()
    resolver = resolve_with_special_cases if special_cases else resolve
    pokemon_id = resolver(name, index)
    if pokemon_id is None:
        logger.info("[API] Unresolved name: %r", name)
    canonical = index.canonical_name(pokemon_id)
    if canonical is None and pokemon_id == EGG_ID:
        canonical = EGG_POKEMON["name"]
    return {
        "query": name,
        "id": pokemon_id,
        "name": canonical,
        "potential": is_potential_pokemon_name(name),
    }
