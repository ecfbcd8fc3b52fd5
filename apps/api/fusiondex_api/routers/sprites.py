"""Sprite atlas metadata endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from packages.fusiondex_core.sprites.atlas import sprite_rects

from ..storage.datasets import get_atlas_metadata

logger = logging.getLogger("fusiondex_api.sprites")

router = APIRouter(prefix="/api/v1/sprites", tags=["sprites"])


class SpriteRect(BaseModel):
    id: int
    x: int
    y: int
    width: int
    height: int


class SpriteRectsResponse(BaseModel):
    key: str
    rects: list[SpriteRect]


def _metadata() -> dict[str, Any]:
    metadata = get_atlas_metadata()
    if metadata is None:
        raise HTTPException(status_code=404, detail="Sprite atlas metadata not found")
    return metadata


@router.get("/atlas")
def atlas_summary() -> dict[str, Any]:
    metadata = _metadata()
    return {
        "generation": metadata.get("generation"),
        "sheetWidth": metadata.get("sheetWidth"),
        "sheetHeight": metadata.get("sheetHeight"),
        "spaceEfficiency": metadata.get("spaceEfficiency"),
        "totalSprites": metadata.get("totalSprites"),
    }


@router.get("/atlas/{key}", response_model=SpriteRectsResponse)
def atlas_rects(key: str) -> dict[str, Any]:
    metadata = _metadata()
    try:
        rects = sprite_rects(metadata, key)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if rects is None:
        logger.info("[API] No placed sprite for key '%s'", key)
        raise HTTPException(status_code=404, detail=f"No sprite for key: {key}")
    return {"key": key, "rects": rects}
