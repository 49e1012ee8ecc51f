from fastapi import HTTPException

from app.core.errors import (
    DecodeError,
    EntityNotFound,
    EntityRejected,
    HasChildren,
    HierarchyError,
    ImportTooLarge,
    ReparentNotSupported,
    StoreUnavailable,
)


def to_http(e: HierarchyError) -> HTTPException:
    """Traduce errores del servicio a respuestas HTTP."""
    if isinstance(e, EntityRejected):
        return HTTPException(status_code=400, detail=e.failure.model_dump(mode="json"))
    if isinstance(e, DecodeError):
        return HTTPException(status_code=400, detail={"kind": e.kind.value, "field": e.field, "message": e.message})
    if isinstance(e, ReparentNotSupported):
        return HTTPException(status_code=400, detail=e.message)
    if isinstance(e, EntityNotFound):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, HasChildren):
        return HTTPException(status_code=409, detail=e.message)
    if isinstance(e, ImportTooLarge):
        return HTTPException(status_code=413, detail=e.message)
    if isinstance(e, StoreUnavailable):
        return HTTPException(status_code=503, detail=e.message)
    return HTTPException(status_code=500, detail=e.message)
