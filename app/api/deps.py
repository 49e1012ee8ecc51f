from app.core.config import settings
from app.db.session import SessionLocal
from app.services.office_context import OfficeContextStore
from app.services.store import EntityStore


def get_store() -> EntityStore:
    return EntityStore(SessionLocal)


def get_office_store() -> OfficeContextStore:
    return OfficeContextStore(settings.OFFICE_CONTEXT_FILE)
