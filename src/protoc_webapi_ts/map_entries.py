"""Classification of nested types into protobuf map entries and ordinary messages."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from protoc_webapi_ts.models import Message
from protoc_webapi_ts.resolver import full_name


def split_nested_types(message: Message) -> Tuple[List[Message], List[Message]]:
    """Split ``message.nested_messages`` into ``(ordinary, map_entries)``, keeping order.

    Every nested type lands in exactly one of the two lists.
    """
    ordinary: List[Message] = []
    map_entries: List[Message] = []
    for nested in message.nested_messages:
        if nested.map_entry:
            map_entries.append(nested)
        else:
            ordinary.append(nested)
    return ordinary, map_entries


def map_entry_index(
    message: Message,
    package: str,
    scope: Sequence[str] = (),
) -> Dict[str, Message]:
    """Index the map entries nested in ``message`` by fully-qualified name.

    ``scope`` holds the names of the messages enclosing ``message``, outermost
    first, so ``.pkg.Outer.Inner.CountsEntry`` is built for a map field of a
    nested ``Inner``.
    """
    _, map_entries = split_nested_types(message)
    return {
        full_name(package, *scope, message.name, entry.name): entry
        for entry in map_entries
    }
