"""Protobuf field -> TypeScript type expression."""

from __future__ import annotations

import logging
from typing import Dict

from protoc_webapi_ts.errors import UnsupportedFieldTypeError
from protoc_webapi_ts.models import Field, FieldKind, Message
from protoc_webapi_ts.resolver import ImportedTypesContext

logger = logging.getLogger(__name__)

NUMBER_KINDS = frozenset({
    FieldKind.INT32,
    FieldKind.UINT32,
    FieldKind.FIXED32,
    FieldKind.SINT32,
    FieldKind.SFIXED32,
    FieldKind.FLOAT,
    FieldKind.DOUBLE,
})

# proto3 JSON writes 64-bit integers and bytes as strings.
STRING_KINDS = frozenset({
    FieldKind.STRING,
    FieldKind.BYTES,
    FieldKind.INT64,
    FieldKind.UINT64,
    FieldKind.SINT64,
    FieldKind.FIXED64,
    FieldKind.SFIXED64,
})

FALLBACK_TYPE = "string"


def type_of(
    field: Field,
    map_entries: Dict[str, Message],
    current_file: str,
    context: ImportedTypesContext,
    strict: bool = False,
) -> str:
    """Return the TypeScript type of ``field`` as declared inside ``current_file``.

    ``map_entries`` is the map-entry index of the message owning ``field``. A
    field pointing at one of those entries becomes ``{[key: string]: V}``, with
    ``V`` computed from the entry's value field; such a field never gets a
    ``[]`` suffix even though protobuf labels it repeated.
    """
    kind = field.kind
    if kind in NUMBER_KINDS:
        type_str = "number"
    elif kind == FieldKind.BOOL:
        type_str = "boolean"
    elif kind == FieldKind.ENUM:
        type_str = context.resolve_type_name(field.type_name, current_file)
    elif kind == FieldKind.MESSAGE:
        entry = map_entries.get(field.type_name)
        if entry is not None:
            value_type = type_of(entry.fields[1], {}, current_file, context, strict)
            return f"{{[key: string]: {value_type}}}"
        type_str = context.resolve_type_name(field.type_name, current_file)
    elif kind in STRING_KINDS:
        type_str = "string"
    else:
        if strict:
            raise UnsupportedFieldTypeError(
                f"Field '{field.name}' in '{current_file}' has unsupported type {kind!r}"
            )
        logger.debug("Field %s in %s: type %r mapped to %s", field.name, current_file, kind, FALLBACK_TYPE)
        type_str = FALLBACK_TYPE

    if field.is_repeated:
        return f"{type_str}[]"
    return type_str
