from typing import Iterable, Optional

from pydantic.alias_generators import to_camel

from app.core.errors import ErrorKind, ValidationFailure
from app.db.models.enums import EntityLevel, OwnershipType
from app.db.schemas.common import EntityBase
from app.services.levels import label_of, parent_id_of, spec_for
from app.services.tree import HierarchyTree


def _column(level: EntityLevel, name: str) -> str:
    info = spec_for(level).schema.model_fields[name]
    return info.alias or to_camel(name)


def _fail(kind: ErrorKind, field: Optional[str], message: str) -> ValidationFailure:
    return ValidationFailure(kind=kind, field=field, message=message)


def validate_create(
    level: EntityLevel,
    candidate: EntityBase,
    tree: HierarchyTree,
    staged: Iterable[EntityBase] = (),
) -> Optional[ValidationFailure]:
    return _validate(level, candidate, tree, staged)


def validate_update(level: EntityLevel, candidate: EntityBase, tree: HierarchyTree) -> Optional[ValidationFailure]:
    """Igual que validate_create, pero la entidad no choca consigo misma."""
    return _validate(level, candidate, tree, (), ignore_id=candidate.id)


def _validate(
    level: EntityLevel,
    candidate: EntityBase,
    tree: HierarchyTree,
    staged: Iterable[EntityBase],
    ignore_id: Optional[str] = None,
) -> Optional[ValidationFailure]:
    """
    Valida una entidad antes de escribirla. Devuelve None si es válida.

    Solo mira la relación padre-hijo inmediata: el padre declarado y
    sus hijos actuales (más los ya preparados en el mismo lote). La única
    excepción es un id declarado, que se busca en el índice de todo el nivel.
    """
    level = EntityLevel(level)
    spec = spec_for(level)
    staged = list(staged)

    if not label_of(level, candidate).strip():
        return _fail(ErrorKind.missing_field, _column(level, spec.label_field),
                     f"{_column(level, spec.label_field)} es obligatorio")

    parent_id = None
    if spec.parent_key:
        parent_column = _column(level, spec.parent_key)
        parent_id = parent_id_of(level, candidate)
        if not parent_id:
            return _fail(ErrorKind.missing_field, parent_column, f"{parent_column} es obligatorio")
        if tree.find(spec.parent, parent_id) is None:
            return _fail(ErrorKind.missing_parent, parent_column,
                         f"No existe {spec.parent.value} con id '{parent_id}'")

    for name, enum in spec.enum_fields.items():
        value = getattr(candidate, name)
        if value is None:
            continue  # enumeración opcional sin valor
        allowed = [e.value for e in enum]
        if value not in allowed:
            return _fail(ErrorKind.invalid_enum, _column(level, name),
                         f"Valor '{value}' inválido; permitidos: {', '.join(allowed)}")

    if level == EntityLevel.building:
        leased = candidate.ownership_type == OwnershipType.leased.value
        if leased and candidate.lease_details is None:
            return _fail(ErrorKind.conditional_field_mismatch, "leaseDetails",
                         "leaseDetails es obligatorio cuando ownershipType = leased")
        if not leased and candidate.lease_details is not None:
            return _fail(ErrorKind.conditional_field_mismatch, "leaseDetails",
                         "leaseDetails no aplica cuando ownershipType = owned")

    if candidate.id and candidate.id != ignore_id:
        # el id es único en todo el nivel, no solo entre hermanos
        taken = tree.find(level, candidate.id) is not None
        taken = taken or any(w.level == level and w.id == candidate.id for w in tree.warnings)
        taken = taken or any(s.id == candidate.id for s in staged)
        if taken:
            return _fail(ErrorKind.duplicate_identifier, "id",
                         f"Ya existe un {level.value} con id '{candidate.id}'")

    siblings = [node.entity for node in tree.children_of(level, parent_id)]
    siblings.extend(s for s in staged if parent_id_of(level, s) == parent_id)
    for sibling in siblings:
        if ignore_id and sibling.id == ignore_id:
            continue
        if candidate.readable_id and sibling.readable_id == candidate.readable_id:
            return _fail(ErrorKind.duplicate_identifier, "readableId",
                         f"Ya existe un {level.value} '{candidate.readable_id}' bajo el mismo padre")
    return None
