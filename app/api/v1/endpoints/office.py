from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.deps import get_office_store, get_store
from app.api.errors import to_http
from app.core.errors import HierarchyError
from app.db.schemas.office import OfficeSelection
from app.services.office_context import ContextState, OfficeContextStore, display_label, resolve
from app.services.store import EntityStore
from app.services.tree import fetch_tree

router = APIRouter()


async def _describe(selection: OfficeSelection, store: EntityStore) -> Dict[str, Any]:
    try:
        tree = await fetch_tree(store)
    except HierarchyError as e:
        raise to_http(e)
    resolution = resolve(selection, tree)
    return {
        "state": ContextState.set.value,
        "selection": selection.model_dump(mode="json", by_alias=True),
        "resolution": resolution.model_dump(mode="json", by_alias=True),
        "label": display_label(resolution) if resolution.valid else None,
    }


@router.get("", summary="Oficina seleccionada (revalidada contra el árbol)", response_model=Dict[str, Any])
async def get_office_context(
    store: EntityStore = Depends(get_store),
    office_store: OfficeContextStore = Depends(get_office_store),
):
    selection = office_store.load()
    if selection is None:
        return {"state": ContextState.unset.value, "selection": None, "resolution": None, "label": None}
    return await _describe(selection, store)


@router.put("", summary="Guardar la oficina seleccionada", response_model=Dict[str, Any])
async def put_office_context(
    selection: OfficeSelection,
    store: EntityStore = Depends(get_store),
    office_store: OfficeContextStore = Depends(get_office_store),
):
    required = (selection.organization_id, selection.portfolio_id, selection.campus_id, selection.building_id)
    if not all(required):
        raise HTTPException(status_code=400, detail="organizationId, portfolioId, campusId y buildingId son obligatorios")

    described = await _describe(selection, store)
    if not selection.display_name and described["label"]:
        selection = selection.model_copy(update={"display_name": described["label"]})
        described["selection"] = selection.model_dump(mode="json", by_alias=True)
    office_store.persist(selection)
    return described


@router.delete("", status_code=204)
def clear_office_context(office_store: OfficeContextStore = Depends(get_office_store)):
    office_store.clear()
    return Response(status_code=204)
