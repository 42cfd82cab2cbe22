"""Read-only views over a protobuf descriptor tree."""

from __future__ import annotations

import enum
import posixpath
from dataclasses import dataclass
from typing import Tuple, Union

from google.protobuf import descriptor_pb2 as d2


class FieldKind(enum.IntEnum):
    """Field types, numbered as in ``FieldDescriptorProto.Type``."""

    DOUBLE = d2.FieldDescriptorProto.TYPE_DOUBLE
    FLOAT = d2.FieldDescriptorProto.TYPE_FLOAT
    INT64 = d2.FieldDescriptorProto.TYPE_INT64
    UINT64 = d2.FieldDescriptorProto.TYPE_UINT64
    INT32 = d2.FieldDescriptorProto.TYPE_INT32
    FIXED64 = d2.FieldDescriptorProto.TYPE_FIXED64
    FIXED32 = d2.FieldDescriptorProto.TYPE_FIXED32
    BOOL = d2.FieldDescriptorProto.TYPE_BOOL
    STRING = d2.FieldDescriptorProto.TYPE_STRING
    GROUP = d2.FieldDescriptorProto.TYPE_GROUP
    MESSAGE = d2.FieldDescriptorProto.TYPE_MESSAGE
    BYTES = d2.FieldDescriptorProto.TYPE_BYTES
    UINT32 = d2.FieldDescriptorProto.TYPE_UINT32
    ENUM = d2.FieldDescriptorProto.TYPE_ENUM
    SFIXED32 = d2.FieldDescriptorProto.TYPE_SFIXED32
    SFIXED64 = d2.FieldDescriptorProto.TYPE_SFIXED64
    SINT32 = d2.FieldDescriptorProto.TYPE_SINT32
    SINT64 = d2.FieldDescriptorProto.TYPE_SINT64


class FieldLabel(enum.IntEnum):
    OPTIONAL = d2.FieldDescriptorProto.LABEL_OPTIONAL
    REQUIRED = d2.FieldDescriptorProto.LABEL_REQUIRED
    REPEATED = d2.FieldDescriptorProto.LABEL_REPEATED


@dataclass(frozen=True)
class Field:
    name: str
    kind: Union[FieldKind, int]
    label: Union[FieldLabel, int] = FieldLabel.OPTIONAL
    # Fully-qualified (".pkg.Outer.Inner") for enum and message fields.
    type_name: str = ""

    @property
    def is_repeated(self) -> bool:
        return self.label == FieldLabel.REPEATED


@dataclass(frozen=True)
class EnumDef:
    name: str
    values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Message:
    name: str
    fields: Tuple[Field, ...] = ()
    nested_messages: Tuple[Message, ...] = ()
    nested_enums: Tuple[EnumDef, ...] = ()
    map_entry: bool = False


@dataclass(frozen=True)
class Method:
    name: str
    input_type: str
    output_type: str
    client_streaming: bool = False
    server_streaming: bool = False


@dataclass(frozen=True)
class Service:
    name: str
    methods: Tuple[Method, ...] = ()


@dataclass(frozen=True)
class SchemaFile:
    """One parsed .proto file. ``name`` is its import path (e.g. ``acme/v1/user.proto``)."""

    name: str
    package: str = ""
    messages: Tuple[Message, ...] = ()
    enums: Tuple[EnumDef, ...] = ()
    services: Tuple[Service, ...] = ()

    @property
    def package_segments(self) -> Tuple[str, ...]:
        if not self.package:
            return ()
        return tuple(self.package.split("."))

    @property
    def module_path(self) -> str:
        """Path of the generated module, relative to the output root, without extension.

        A file ``dir/user.proto`` in package ``acme.v1`` lands at ``acme/v1/user``.
        """
        stem = posixpath.splitext(posixpath.basename(self.name))[0]
        return posixpath.join(*self.package_segments, stem)


def _coerce(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _field_from_descriptor(fd: d2.FieldDescriptorProto) -> Field:
    return Field(
        name=fd.name,
        kind=_coerce(FieldKind, fd.type),
        label=_coerce(FieldLabel, fd.label),
        type_name=fd.type_name,
    )


def _enum_from_descriptor(ed: d2.EnumDescriptorProto) -> EnumDef:
    return EnumDef(name=ed.name, values=tuple(v.name for v in ed.value))


def _message_from_descriptor(desc: d2.DescriptorProto) -> Message:
    return Message(
        name=desc.name,
        fields=tuple(_field_from_descriptor(f) for f in desc.field),
        nested_messages=tuple(_message_from_descriptor(n) for n in desc.nested_type),
        nested_enums=tuple(_enum_from_descriptor(e) for e in desc.enum_type),
        map_entry=desc.options.map_entry,
    )


def from_file_descriptor(fdp: d2.FileDescriptorProto) -> SchemaFile:
    """Map a FileDescriptorProto into the generator's model, keeping every input order."""
    services = []
    for svc in fdp.service:
        methods = tuple(
            Method(
                name=m.name,
                input_type=m.input_type,
                output_type=m.output_type,
                client_streaming=m.client_streaming,
                server_streaming=m.server_streaming,
            )
            for m in svc.method
        )
        services.append(Service(name=svc.name, methods=methods))

    return SchemaFile(
        name=fdp.name,
        package=fdp.package,
        messages=tuple(_message_from_descriptor(m) for m in fdp.message_type),
        enums=tuple(_enum_from_descriptor(e) for e in fdp.enum_type),
        services=tuple(services),
    )
