"""webapi RPC stubs for a service, client or server flavour."""

from __future__ import annotations

import logging
from typing import List

from protoc_webapi_ts.generator.environment import render_template
from protoc_webapi_ts.models import Service
from protoc_webapi_ts.options import Role
from protoc_webapi_ts.resolver import ImportedTypesContext

logger = logging.getLogger(__name__)


def route_for(package: str, service_name: str, method_name: str) -> str:
    """Route shared by client and server stubs: ``pkg.Service/Method`` or ``Service/Method``."""
    if package:
        return f"{package}.{service_name}/{method_name}"
    return f"{service_name}/{method_name}"


def render_service(
    service: Service,
    package: str,
    current_file: str,
    context: ImportedTypesContext,
    role: Role = Role.CLIENT,
) -> List[str]:
    """Render one stub function per method, then the default export of all of them."""
    template = "server_method.ts.j2" if role is Role.SERVER else "client_method.ts.j2"

    blocks: List[str] = []
    for method in service.methods:
        if method.client_streaming or method.server_streaming:
            logger.debug("%s.%s is streaming; rendered as a unary stub", service.name, method.name)
        blocks.append(
            render_template(
                template,
                name=method.name,
                input_type=context.resolve_type_name(method.input_type, current_file),
                output_type=context.resolve_type_name(method.output_type, current_file),
                route=route_for(package, service.name, method.name),
            )
        )

    blocks.append(render_template("default_export.ts.j2", names=[m.name for m in service.methods]))
    return blocks
