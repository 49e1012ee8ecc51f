from fastapi import APIRouter
from app.api.v1.endpoints import entities, imports, hierarchy, office

api_router = APIRouter()
api_router.include_router(entities.router, prefix="/entities", tags=["entities"])
api_router.include_router(imports.router, prefix="/imports", tags=["imports"])
api_router.include_router(hierarchy.router, prefix="/hierarchy", tags=["hierarchy"])
api_router.include_router(office.router, prefix="/office-context", tags=["office-context"])
