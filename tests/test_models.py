from google.protobuf import descriptor_pb2 as d2

from protoc_webapi_ts.models import FieldKind, FieldLabel, SchemaFile, from_file_descriptor

from descriptors import F, enum, map_entry, message, proto_file, ref, scalar, service


class TestFromFileDescriptor:
    def test_preserves_order_and_names(self):
        fdp = proto_file(
            "acme/v1/user.proto",
            package="acme.v1",
            messages=[
                message("User", [scalar("id", F.TYPE_INT32), scalar("tags", F.TYPE_STRING, repeated=True)]),
                message("Group"),
            ],
            enums=[enum("Status", "ACTIVE", "BANNED")],
            services=[service("UserService", ("Get", ".acme.v1.User", ".acme.v1.User"))],
        )

        sf = from_file_descriptor(fdp)

        assert sf.name == "acme/v1/user.proto"
        assert sf.package == "acme.v1"
        assert [m.name for m in sf.messages] == ["User", "Group"]
        user = sf.messages[0]
        assert [f.name for f in user.fields] == ["id", "tags"]
        assert user.fields[0].kind is FieldKind.INT32
        assert user.fields[0].is_repeated is False
        assert user.fields[1].label is FieldLabel.REPEATED
        assert user.fields[1].is_repeated is True
        assert sf.enums[0].values == ("ACTIVE", "BANNED")
        assert sf.services[0].methods[0].input_type == ".acme.v1.User"

    def test_nested_types_and_map_entry_flag(self):
        fdp = proto_file(
            "m.proto",
            package="p",
            messages=[
                message(
                    "Outer",
                    [ref("inner", ".p.Outer.Inner")],
                    nested=[message("Inner"), map_entry("LabelsEntry", scalar("value", F.TYPE_STRING))],
                    enums=[enum("Kind", "A")],
                )
            ],
        )

        outer = from_file_descriptor(fdp).messages[0]

        assert [n.name for n in outer.nested_messages] == ["Inner", "LabelsEntry"]
        assert outer.nested_messages[0].map_entry is False
        assert outer.nested_messages[1].map_entry is True
        assert outer.nested_enums[0].name == "Kind"
        assert outer.fields[0].type_name == ".p.Outer.Inner"

    def test_input_descriptor_is_not_mutated(self):
        fdp = proto_file("m.proto", package="p", messages=[message("M", [scalar("a", F.TYPE_BOOL)])])
        before = fdp.SerializeToString(deterministic=True)

        from_file_descriptor(fdp)

        assert fdp.SerializeToString(deterministic=True) == before

    def test_group_field_kind(self):
        fdp = proto_file("m.proto", messages=[message("M")])
        fdp.message_type[0].field.add(name="odd", number=1, type=d2.FieldDescriptorProto.TYPE_GROUP)

        field = from_file_descriptor(fdp).messages[0].fields[0]

        assert field.kind == FieldKind.GROUP


class TestModulePath:
    def test_package_becomes_directories(self):
        assert SchemaFile(name="protos/user.proto", package="acme.v1").module_path == "acme/v1/user"

    def test_no_package(self):
        sf = SchemaFile(name="protos/user.proto")
        assert sf.package_segments == ()
        assert sf.module_path == "user"
