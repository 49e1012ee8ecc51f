from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ErrorKind(str, Enum):
    missing_field = "MissingField"
    missing_parent = "MissingParent"
    duplicate_identifier = "DuplicateIdentifier"
    invalid_enum = "InvalidEnum"
    conditional_field_mismatch = "ConditionalFieldMismatch"
    malformed_row = "MalformedRow"
    store_unavailable = "StoreUnavailable"
    orphaned_child = "OrphanedChild"
    stale_path = "StalePath"


class ValidationFailure(BaseModel):
    """Resultado (no excepción) de una validación fallida, corregible por el operador."""

    kind: ErrorKind
    field: Optional[str] = None
    message: str


# ======================================================
# Excepciones del servicio
# ======================================================

class HierarchyError(Exception):
    kind: Optional[ErrorKind] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DecodeError(HierarchyError):
    kind = ErrorKind.malformed_row

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class StoreUnavailable(HierarchyError):
    kind = ErrorKind.store_unavailable


class EntityNotFound(HierarchyError):
    pass


class HasChildren(HierarchyError):
    pass


class ReparentNotSupported(HierarchyError):
    pass


class ImportTooLarge(HierarchyError):
    pass


class EntityRejected(HierarchyError):
    """Una escritura individual que no pasó la validación."""

    def __init__(self, failure: ValidationFailure):
        super().__init__(failure.message)
        self.failure = failure
        self.kind = failure.kind
