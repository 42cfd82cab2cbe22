from __future__ import annotations

import logging
import posixpath
from typing import Dict, Iterable, List, Optional

from google.protobuf import descriptor_pb2 as d2

from protoc_webapi_ts.errors import GeneratorError
from protoc_webapi_ts.generator.environment import render_template
from protoc_webapi_ts.generator.ts_declarations import render_enums, render_messages
from protoc_webapi_ts.generator.ts_service import render_service
from protoc_webapi_ts.models import SchemaFile, from_file_descriptor
from protoc_webapi_ts.options import GeneratorOptions
from protoc_webapi_ts.resolver import FRAMEWORK_SYMBOL, WEBAPI_SYMBOL, ImportedTypesContext, iter_definitions

logger = logging.getLogger(__name__)

OUTPUT_EXTENSION = ".ts"


def webapi_import_path(package: str, webapi_path: str) -> str:
    """Path to the webapi helper from a module generated for ``package``.

    Modules are laid out one directory per package segment, so ``a.b.c``
    climbs three levels before joining ``webapi_path``.
    """
    depth = len(package.split(".")) if package else 0
    if depth == 0:
        return webapi_path
    return posixpath.normpath(posixpath.join("../" * depth, webapi_path))


def output_path(schema_file: SchemaFile) -> str:
    return schema_file.module_path + OUTPUT_EXTENSION


def _check_helper_names(schema_file: SchemaFile, options: GeneratorOptions) -> None:
    """Refuse declarations that would shadow the names bound by the helper imports."""
    bound = {WEBAPI_SYMBOL, FRAMEWORK_SYMBOL} if options.is_server else {WEBAPI_SYMBOL}
    clashes = sorted(bound & {local_name for _, local_name in iter_definitions(schema_file)})
    if clashes:
        raise GeneratorError(
            f"'{schema_file.name}' declares {', '.join(clashes)}, which clashes with the service helper imports"
        )


def render_file(
    schema_file: SchemaFile,
    context: ImportedTypesContext,
    options: Optional[GeneratorOptions] = None,
) -> str:
    """Render the TypeScript module for ``schema_file``.

    Declarations are rendered before the import section so that every
    cross-file reference has been resolved (and aliased) by ``context``.
    """
    options = options or GeneratorOptions()
    context.register_file(schema_file)
    package = schema_file.package
    file_name = schema_file.name

    body: List[str] = []
    body.extend(render_enums(schema_file.enums))
    body.extend(render_messages(schema_file.messages, package, file_name, context, strict=options.strict))

    service = schema_file.services[0] if schema_file.services else None
    if len(schema_file.services) > 1:
        dropped = ", ".join(s.name for s in schema_file.services[1:])
        logger.warning("%s declares %d services; only %s is rendered (dropped: %s)",
                       file_name, len(schema_file.services), service.name, dropped)
    if service is not None:
        _check_helper_names(schema_file, options)
        body.extend(render_service(service, package, file_name, context, options.role))

    imports = render_template(
        "imports.ts.j2",
        references=context.imports_for(file_name),
        is_server=service is not None and options.is_server,
        webapi_path=webapi_import_path(package, options.webapi_path) if service is not None else "",
    )

    sections = [render_template("banner.ts.j2", source=file_name), imports] + body
    return "\n\n".join(s.strip() for s in sections if s.strip()).strip()


def generate(
    file_descriptors: Iterable[d2.FileDescriptorProto],
    files_to_generate: Iterable[str],
    options: Optional[GeneratorOptions] = None,
) -> Dict[str, str]:
    """Generate modules for ``files_to_generate`` in one session.

    Every descriptor in ``file_descriptors`` is registered first so types from
    dependencies resolve. Returns ``{output path: source}`` in request order.
    """
    context = ImportedTypesContext()
    for fdp in file_descriptors:
        context.register_file(from_file_descriptor(fdp))

    generated: Dict[str, str] = {}
    for name in files_to_generate:
        try:
            schema_file = context.get_file(name)
        except KeyError:
            raise GeneratorError(f"No descriptor supplied for '{name}'") from None
        generated[output_path(schema_file)] = render_file(schema_file, context, options)
        logger.debug("Rendered %s -> %s", name, output_path(schema_file))
    return generated
