import asyncio
from typing import Any, Dict, Mapping

from app.core.errors import EntityNotFound, EntityRejected, ReparentNotSupported
from app.db.models.enums import EntityLevel
from app.db.schemas.common import EntityBase
from app.services.identifiers import generate_readable_id
from app.services.levels import parent_id_of, spec_for
from app.services.store import EntityStore
from app.services.tree import fetch_tree
from app.services.validator import validate_create, validate_update


def to_field_names(level: EntityLevel, payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Traduce claves camelCase (alias) a nombres de campo Python."""
    by_alias = {
        (info.alias or name): name
        for name, info in spec_for(level).schema.model_fields.items()
    }
    return {by_alias.get(key, key): value for key, value in payload.items()}


async def create_entity(store: EntityStore, level: EntityLevel, payload: Mapping[str, Any]) -> EntityBase:
    level = EntityLevel(level)
    spec = spec_for(level)
    candidate = spec.schema.model_validate(dict(payload))

    tree = await fetch_tree(store)
    parent = None
    if spec.parent is not None:
        node = tree.find(spec.parent, parent_id_of(level, candidate))
        parent = node.entity if node else None
    candidate = candidate.model_copy(update={"readable_id": generate_readable_id(level, candidate, parent)})

    failure = validate_create(level, candidate, tree)
    if failure is not None:
        raise EntityRejected(failure)

    inserted = await asyncio.to_thread(store.insert_batch, level, [candidate])
    return inserted[0]


async def update_entity(store: EntityStore, level: EntityLevel, entity_id: str, payload: Mapping[str, Any]) -> EntityBase:
    level = EntityLevel(level)
    spec = spec_for(level)
    patch = to_field_names(level, payload)

    current = await asyncio.to_thread(store.get, level, entity_id)
    if current is None:
        raise EntityNotFound(f"No existe {level.value} con id '{entity_id}'")
    if spec.parent_key and spec.parent_key in patch and patch[spec.parent_key] != getattr(current, spec.parent_key):
        raise ReparentNotSupported(f"Mover un {level.value} a otro padre no está soportado")

    candidate = spec.schema.model_validate({**current.model_dump(), **patch, "id": entity_id})
    tree = await fetch_tree(store)
    failure = validate_update(level, candidate, tree)
    if failure is not None:
        raise EntityRejected(failure)

    return await asyncio.to_thread(store.update, level, entity_id, patch)


async def delete_entity(store: EntityStore, level: EntityLevel, entity_id: str) -> None:
    await asyncio.to_thread(store.delete, EntityLevel(level), entity_id)
