from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_store
from app.api.errors import to_http
from app.core.errors import HierarchyError
from app.db.models.enums import EntityLevel
from app.services.store import EntityStore
from app.services.tree import HierarchyTree, fetch_tree, search, summarize

router = APIRouter()


async def _load_tree(store: EntityStore) -> HierarchyTree:
    try:
        return await fetch_tree(store)
    except HierarchyError as e:
        raise to_http(e)


@router.get("", summary="Árbol completo de la jerarquía", response_model=Dict[str, Any])
async def get_hierarchy(store: EntityStore = Depends(get_store)):
    tree = await _load_tree(store)
    return tree.to_payload()


@router.get("/search", summary="Buscar entidades por nombre", response_model=List[Dict[str, Any]])
async def search_hierarchy(
    q: str = Query(..., min_length=1),
    level: Optional[EntityLevel] = Query(None, description="organization | portfolio | campus | building | floor | seat_zone"),
    store: EntityStore = Depends(get_store),
):
    tree = await _load_tree(store)
    out = []
    for node in search(tree, q, level):
        item = node.entity.model_dump(mode="json", by_alias=True)
        item["level"] = node.level.value
        out.append(item)
    return out


@router.get("/stats", summary="Totales por nivel", response_model=Dict[str, Any])
async def hierarchy_stats(store: EntityStore = Depends(get_store)):
    tree = await _load_tree(store)
    return summarize(tree).model_dump(mode="json")
