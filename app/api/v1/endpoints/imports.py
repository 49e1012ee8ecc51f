import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from app.api.deps import get_store
from app.api.errors import to_http
from app.core.errors import HierarchyError
from app.db.models.enums import EntityLevel
from app.services.codec import decode_bytes
from app.services.importer import BulkImporter, template_csv
from app.services.store import EntityStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{level}", summary="Importación masiva desde CSV", response_model=Dict[str, Any], status_code=201)
async def import_csv(level: EntityLevel, file: UploadFile = File(...), store: EntityStore = Depends(get_store)):
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="El archivo debe ser .csv")

    text = decode_bytes(await file.read())
    if not text.strip():
        raise HTTPException(status_code=400, detail="CSV vacío")

    try:
        report = await BulkImporter(store).import_csv(level, text)
    except HierarchyError as e:
        raise to_http(e)
    return report.model_dump(mode="json", by_alias=True)


@router.get("/{level}/template", summary="Plantilla CSV con una fila de ejemplo")
def download_template(level: EntityLevel):
    return Response(
        content=template_csv(level),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{level.value}_template.csv"'},
    )
