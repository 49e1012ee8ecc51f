import asyncio
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.api.deps import get_store
from app.api.errors import to_http
from app.core.errors import HierarchyError
from app.db.models.enums import EntityLevel
from app.services.codec import write_csv
from app.services.entities import create_entity, delete_entity, update_entity
from app.services.store import EntityStore

router = APIRouter()


@router.get("/{level}", summary="Listar entidades de un nivel", response_model=List[Dict[str, Any]])
async def list_entities(level: EntityLevel, store: EntityStore = Depends(get_store)):
    try:
        entities = await asyncio.to_thread(store.select, level)
    except HierarchyError as e:
        raise to_http(e)
    return [e.model_dump(mode="json", by_alias=True) for e in entities]


@router.get("/{level}/export", summary="Exportar un nivel como CSV")
async def export_entities(level: EntityLevel, store: EntityStore = Depends(get_store)):
    try:
        entities = await asyncio.to_thread(store.select, level)
    except HierarchyError as e:
        raise to_http(e)
    return Response(
        content=write_csv(level, entities),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{level.value}_export.csv"'},
    )


@router.get("/{level}/{entity_id}", response_model=Dict[str, Any])
async def get_entity(level: EntityLevel, entity_id: str, store: EntityStore = Depends(get_store)):
    try:
        entity = await asyncio.to_thread(store.get, level, entity_id)
    except HierarchyError as e:
        raise to_http(e)
    if entity is None:
        raise HTTPException(status_code=404, detail=f"No existe {level.value} con id '{entity_id}'")
    return entity.model_dump(mode="json", by_alias=True)


@router.post("/{level}", response_model=Dict[str, Any], status_code=201)
async def create(level: EntityLevel, payload: Dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
    try:
        entity = await create_entity(store, level, payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    except HierarchyError as e:
        raise to_http(e)
    return entity.model_dump(mode="json", by_alias=True)


@router.patch("/{level}/{entity_id}", response_model=Dict[str, Any])
async def update(
    level: EntityLevel,
    entity_id: str,
    payload: Dict[str, Any] = Body(...),
    store: EntityStore = Depends(get_store),
):
    try:
        entity = await update_entity(store, level, entity_id, payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    except HierarchyError as e:
        raise to_http(e)
    return entity.model_dump(mode="json", by_alias=True)


@router.delete("/{level}/{entity_id}", status_code=204)
async def delete(level: EntityLevel, entity_id: str, store: EntityStore = Depends(get_store)):
    """Rechaza el borrado (409) si la entidad todavía tiene hijos."""
    try:
        await delete_entity(store, level, entity_id)
    except HierarchyError as e:
        raise to_http(e)
    return Response(status_code=204)
