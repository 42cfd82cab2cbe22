"""Enum and interface declarations for messages, nested types flattened by name."""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from protoc_webapi_ts.generator.environment import render_template
from protoc_webapi_ts.map_entries import map_entry_index, split_nested_types
from protoc_webapi_ts.models import EnumDef, Message
from protoc_webapi_ts.resolver import ImportedTypesContext
from protoc_webapi_ts.typemap import type_of

logger = logging.getLogger(__name__)


def render_enum(enum_def: EnumDef, prefix: str = "") -> str:
    return render_template(
        "enum.ts.j2",
        name=f"{prefix}{enum_def.name}",
        values=enum_def.values,
    )


def render_enums(enums: Sequence[EnumDef], prefix: str = "") -> List[str]:
    """Render every enum that has at least one value; empty enums are skipped."""
    rendered: List[str] = []
    for enum_def in enums:
        if not enum_def.values:
            logger.debug("Skipping enum %s%s without values", prefix, enum_def.name)
            continue
        rendered.append(render_enum(enum_def, prefix))
    return rendered


def render_message(
    message: Message,
    package: str,
    current_file: str,
    context: ImportedTypesContext,
    prefix: str = "",
    scope: Tuple[str, ...] = (),
    strict: bool = False,
) -> List[str]:
    """Render ``message`` and everything nested in it, innermost declarations first.

    ``prefix`` is the concatenated name of the enclosing messages and ``scope``
    the same names as a tuple, used to build fully-qualified map-entry names.
    """
    flat_name = f"{prefix}{message.name}"
    inner_scope = scope + (message.name,)
    ordinary, _ = split_nested_types(message)

    blocks = render_messages(ordinary, package, current_file, context, flat_name, inner_scope, strict)
    blocks.extend(render_enums(message.nested_enums, flat_name))

    map_entries = map_entry_index(message, package, scope)
    fields = [
        {"name": field.name, "type": type_of(field, map_entries, current_file, context, strict)}
        for field in message.fields
    ]
    blocks.append(render_template("interface.ts.j2", name=flat_name, fields=fields))
    return blocks


def render_messages(
    messages: Sequence[Message],
    package: str,
    current_file: str,
    context: ImportedTypesContext,
    prefix: str = "",
    scope: Tuple[str, ...] = (),
    strict: bool = False,
) -> List[str]:
    blocks: List[str] = []
    for message in messages:
        if message.map_entry:
            continue
        blocks.extend(render_message(message, package, current_file, context, prefix, scope, strict))
    return blocks
