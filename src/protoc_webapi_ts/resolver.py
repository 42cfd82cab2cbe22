"""Cross-file type reference bookkeeping.

An :class:`ImportedTypesContext` lives for one generation session. Every schema
file of the session is registered up front; renderers then ask it for the
local symbol of a fully-qualified type name. References to types defined in
another file get a file-scoped alias, and the context remembers which
``import { origin as alias }`` lines each file needs.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from typing import Dict, Iterator, List, Set, Tuple

from protoc_webapi_ts.errors import ModuleCollisionError, UnresolvedTypeError
from protoc_webapi_ts.models import EnumDef, Message, SchemaFile

logger = logging.getLogger(__name__)

# Bound by the import section of every module with a service.
WEBAPI_SYMBOL = "webapi"
FRAMEWORK_SYMBOL = "Express"
RESERVED_NAMES = frozenset({WEBAPI_SYMBOL, FRAMEWORK_SYMBOL})


@dataclass(frozen=True)
class TypeDefinition:
    full_name: str
    file_name: str
    # Flattened name the declaration is exported under, e.g. OuterInner.
    local_name: str
    module_path: str


@dataclass(frozen=True)
class ImportedType:
    origin: str
    alias: str


def full_name(package: str, *names: str) -> str:
    """Build a protobuf fully-qualified name: ``.pkg.Outer.Inner`` (``.Outer.Inner`` without package)."""
    return "." + ".".join(p for p in (package, *names) if p)


def iter_definitions(schema_file: SchemaFile) -> Iterator[Tuple[str, str]]:
    """Yield ``(full_name, flattened_name)`` for every declared enum and message, any depth.

    Map entries are synthetic and never declared, so they are skipped.
    """
    package = schema_file.package

    def walk_enums(enums: Tuple[EnumDef, ...], scope: Tuple[str, ...]):
        for enum_def in enums:
            yield full_name(package, *scope, enum_def.name), "".join(scope) + enum_def.name

    def walk_messages(messages: Tuple[Message, ...], scope: Tuple[str, ...]):
        for message in messages:
            if message.map_entry:
                continue
            inner = scope + (message.name,)
            yield full_name(package, *inner), "".join(inner)
            yield from walk_messages(message.nested_messages, inner)
            yield from walk_enums(message.nested_enums, inner)

    yield from walk_enums(schema_file.enums, ())
    yield from walk_messages(schema_file.messages, ())


def relative_module(from_module: str, to_module: str) -> str:
    """TypeScript import specifier for ``to_module`` as seen from ``from_module``."""
    start = posixpath.dirname(from_module) or "."
    rel = posixpath.relpath(to_module, start)
    if rel.startswith("../"):
        return rel
    return "./" + rel


class ImportedTypesContext:
    def __init__(self) -> None:
        self._files: Dict[str, SchemaFile] = {}
        self._definitions: Dict[str, TypeDefinition] = {}
        # using file -> names already bound in that file's scope
        self._taken: Dict[str, Set[str]] = {}
        # using file -> full name -> alias
        self._aliases: Dict[str, Dict[str, str]] = {}
        # using file -> import specifier -> imported symbols, in first-resolution order
        self._references: Dict[str, Dict[str, List[ImportedType]]] = {}
        # generated module path -> schema file producing it
        self._modules: Dict[str, str] = {}

    def register_file(self, schema_file: SchemaFile) -> None:
        if schema_file.name in self._files:
            return
        other = self._modules.get(schema_file.module_path)
        if other is not None:
            raise ModuleCollisionError(
                f"'{other}' and '{schema_file.name}' both generate module '{schema_file.module_path}'"
            )
        self._modules[schema_file.module_path] = schema_file.name
        self._files[schema_file.name] = schema_file

        taken = self._taken_for(schema_file.name)
        for name, local_name in iter_definitions(schema_file):
            if name in self._definitions:
                logger.warning(
                    "Type %s defined in both %s and %s; keeping the first",
                    name, self._definitions[name].file_name, schema_file.name,
                )
                continue
            self._definitions[name] = TypeDefinition(
                full_name=name,
                file_name=schema_file.name,
                local_name=local_name,
                module_path=schema_file.module_path,
            )
            taken.add(local_name)

    def get_file(self, file_name: str) -> SchemaFile:
        return self._files[file_name]

    def resolve_type_name(self, name: str, using_file: str) -> str:
        """Return the symbol ``name`` is reachable under inside the generated ``using_file``."""
        definition = self._definitions.get(name)
        if definition is None:
            raise UnresolvedTypeError(name, using_file)

        if definition.file_name == using_file:
            return definition.local_name

        aliases = self._aliases.setdefault(using_file, {})
        alias = aliases.get(name)
        if alias is not None:
            return alias

        alias = self._free_alias(definition.local_name, using_file)
        aliases[name] = alias
        self._taken_for(using_file).add(alias)

        specifier = relative_module(self._module_path_of(using_file), definition.module_path)
        refs = self._references.setdefault(using_file, {}).setdefault(specifier, [])
        refs.append(ImportedType(origin=definition.local_name, alias=alias))
        logger.debug("%s: %s imported as %s from %s", using_file, name, alias, specifier)
        return alias

    def imports_for(self, using_file: str) -> Dict[str, List[ImportedType]]:
        refs = self._references.get(using_file, {})
        return {specifier: list(types) for specifier, types in refs.items()}

    def _free_alias(self, base: str, using_file: str) -> str:
        taken = self._taken_for(using_file)
        if base not in taken:
            return base
        n = 1
        while f"{base}_{n}" in taken:
            n += 1
        return f"{base}_{n}"

    def _taken_for(self, using_file: str) -> Set[str]:
        # Helper imports bind these names in every module that has a service.
        return self._taken.setdefault(using_file, set(RESERVED_NAMES))

    def _module_path_of(self, file_name: str) -> str:
        schema_file = self._files.get(file_name)
        if schema_file is not None:
            return schema_file.module_path
        return SchemaFile(name=file_name).module_path
