"""
Codec entre filas planas (columnas con notación de punto, p.ej.
``leaseDetails.monthlyRent``) y entidades anidadas de cada nivel.

Los tipos se toman del esquema pydantic de cada nivel:
- int / float: parseo numérico, 0 si la celda viene vacía o inválida (nunca lanza)
- bool: "true"/"false" sin distinguir mayúsculas, cualquier otra cosa es False
- listas: texto separado por comas -> lista de etiquetas
- objetos anidados: se agrupan por el prefijo antes del punto
"""
import csv
import io
import math
import types
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from app.core.errors import DecodeError
from app.db.models.enums import EntityLevel
from app.db.schemas.common import EntityBase
from app.services.levels import spec_for


# ============================================================
# Introspección del esquema
# ============================================================

def _unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    if get_origin(annotation) in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _is_list(annotation: Any) -> bool:
    return get_origin(annotation) in (list, List)


def _column_name(name: str, info) -> str:
    return info.alias or to_camel(name)


@lru_cache(maxsize=None)
def _flatten(model: Type[BaseModel], prefix: str = "") -> Tuple[str, ...]:
    out: List[str] = []
    for name, info in model.model_fields.items():
        column = prefix + _column_name(name, info)
        annotation, _ = _unwrap_optional(info.annotation)
        if _is_model(annotation):
            out.extend(_flatten(annotation, column + "."))
        else:
            out.append(column)
    return tuple(out)


def columns(level: EntityLevel) -> List[str]:
    """Columnas canónicas (aplanadas) del nivel, en el orden del esquema."""
    return list(_flatten(spec_for(level).schema))


def _top_level_columns(model: Type[BaseModel]) -> Dict[str, Any]:
    return {
        _column_name(name, info): _unwrap_optional(info.annotation)[0]
        for name, info in model.model_fields.items()
    }


# ============================================================
# Coerción de celdas
# ============================================================

def parse_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        return 0
    return int(number) if math.isfinite(number) else 0


def parse_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_bool(value: str) -> bool:
    return value.strip().lower() == "true"


def parse_tags(value: str) -> List[str]:
    tags: List[str] = []
    for token in value.split(","):
        token = token.strip()
        if token and token not in tags:
            tags.append(token)
    return tags


def _coerce(annotation: Any, optional: bool, value: str) -> Any:
    if annotation is bool:
        return parse_bool(value)
    if annotation is int:
        return parse_int(value)
    if annotation is float:
        return parse_float(value)
    if _is_list(annotation):
        return parse_tags(value)
    if value == "" and optional:
        return None
    return value


def _render(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set)):
        return ",".join(str(v) for v in value)
    return str(value)


# ============================================================
# Decode / Encode
# ============================================================

def _decode_model(model: Type[BaseModel], cells: Mapping[str, str], prefix: str) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for name, info in model.model_fields.items():
        column = prefix + _column_name(name, info)
        annotation, optional = _unwrap_optional(info.annotation)

        if _is_model(annotation):
            nested_prefix = column + "."
            present = [v for k, v in cells.items() if k.startswith(nested_prefix)]
            if not present:
                continue  # se conserva el default
            if optional and not any(present):
                data[name] = None
            else:
                data[name] = _decode_model(annotation, cells, nested_prefix)
            continue

        if column in cells:
            data[name] = _coerce(annotation, optional, cells[column])
    return data


def _check_paths(model: Type[BaseModel], cells: Mapping[str, str]) -> None:
    known = set(_flatten(model))
    top = _top_level_columns(model)
    for column in cells:
        if "." not in column or column in known:
            continue
        head = column.split(".", 1)[0]
        if head not in top:
            continue  # columna desconocida: se ignora
        if _is_model(top[head]):
            raise DecodeError(f"Campo anidado desconocido '{column}'", field=column)
        raise DecodeError(f"'{head}' no es un objeto anidado (columna '{column}')", field=column)


def decode(row: Mapping[Optional[str], Any], level: EntityLevel) -> EntityBase:
    """Convierte una fila plana en la entidad del nivel indicado."""
    model = spec_for(level).schema
    cells: Dict[str, str] = {}
    for key, value in row.items():
        if key is None:
            continue  # valores sobrantes de csv.DictReader
        cells[str(key).strip()] = "" if value is None else str(value).strip()

    _check_paths(model, cells)
    data = _decode_model(model, cells, "")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Fila inválida: {e.errors()[0].get('msg')}") from e


def _encode_model(instance: Optional[BaseModel], model: Type[BaseModel], prefix: str, out: Dict[str, str]) -> None:
    for name, info in model.model_fields.items():
        column = prefix + _column_name(name, info)
        annotation, _ = _unwrap_optional(info.annotation)
        value = getattr(instance, name) if instance is not None else None
        if _is_model(annotation):
            _encode_model(value, annotation, column + ".", out)
        else:
            out[column] = _render(value)


def encode(entity: EntityBase) -> Dict[str, str]:
    """Inverso de decode: aplana la entidad con notación de punto."""
    out: Dict[str, str] = {}
    _encode_model(entity, type(entity), "", out)
    return out


# ============================================================
# Frontera CSV
# ============================================================

def decode_bytes(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def read_csv(text: str) -> List[Dict[str, Any]]:
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    if not reader.fieldnames:
        raise DecodeError("El CSV no tiene fila de encabezado")
    return list(reader)


def write_csv(level: EntityLevel, entities: Iterable[EntityBase]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns(level))
    writer.writeheader()
    for entity in entities:
        writer.writerow(encode(entity))
    return buffer.getvalue()
