import pytest

from protoc_webapi_ts.generator.ts_declarations import render_enum, render_enums, render_messages
from protoc_webapi_ts.models import EnumDef
from protoc_webapi_ts.resolver import ImportedTypesContext

from descriptors import F, enum, map_entry, message, ref, schema, scalar


def _render(sf, context=None):
    context = context or ImportedTypesContext()
    context.register_file(sf)
    return render_messages(sf.messages, sf.package, sf.name, context)


class TestEnums:
    def test_string_valued_members(self):
        assert render_enum(EnumDef("E", ("A", "B"))) == (
            'export enum E {\n'
            '  A = "A",\n'
            '  B = "B",\n'
            '}\n'
        )

    def test_prefix(self):
        assert render_enum(EnumDef("Kind", ("X",)), prefix="OuterInner").startswith("export enum OuterInnerKind {")

    def test_empty_enums_are_skipped(self):
        blocks = render_enums([EnumDef("Empty"), EnumDef("Full", ("ONE",))])

        assert len(blocks) == 1
        assert "Full" in blocks[0]
        assert "Empty" not in blocks[0]


class TestMessages:
    def test_fields_in_order(self):
        sf = schema("m.proto", package="p", messages=[
            message("M", [scalar("name", F.TYPE_STRING), scalar("tags", F.TYPE_STRING, repeated=True), scalar("ok", F.TYPE_BOOL)]),
        ])

        assert _render(sf) == [
            'export interface M {\n'
            '  name: string;\n'
            '  tags: string[];\n'
            '  ok: boolean;\n'
            '}\n'
        ]

    def test_empty_message(self):
        sf = schema("m.proto", messages=[message("Empty")])

        assert _render(sf) == ["export interface Empty {\n}\n"]

    def test_nested_rendered_first_with_flattened_names(self):
        sf = schema("m.proto", package="p", messages=[
            message(
                "Outer",
                [ref("mid", ".p.Outer.Mid"), ref("kind", ".p.Outer.Kind", kind=F.TYPE_ENUM)],
                nested=[message("Mid", [ref("leaf", ".p.Outer.Mid.Leaf")], nested=[message("Leaf")])],
                enums=[enum("Kind", "A")],
            ),
        ])

        blocks = _render(sf)

        headers = [b.splitlines()[0] for b in blocks]
        assert headers == [
            "export interface OuterMidLeaf {",
            "export interface OuterMid {",
            "export enum OuterKind {",
            "export interface Outer {",
        ]
        assert "  leaf: OuterMidLeaf;" in blocks[1]
        assert "  mid: OuterMid;" in blocks[3]
        assert "  kind: OuterKind;" in blocks[3]

    def test_map_field(self):
        sf = schema("m.proto", package="p", messages=[
            message(
                "M",
                [ref("counts", ".p.M.Entry", repeated=True)],
                nested=[map_entry("Entry", scalar("value", F.TYPE_INT32))],
            ),
        ])

        blocks = _render(sf)

        assert len(blocks) == 1
        assert "  counts: {[key: string]: number};" in blocks[0]
        assert "interface Entry" not in blocks[0]
        assert "interface MEntry" not in blocks[0]

    def test_map_field_in_nested_message(self):
        sf = schema("m.proto", package="p", messages=[
            message("Outer", nested=[
                message(
                    "Inner",
                    [ref("labels", ".p.Outer.Inner.LabelsEntry", repeated=True)],
                    nested=[map_entry("LabelsEntry", scalar("value", F.TYPE_STRING))],
                ),
            ]),
        ])

        blocks = _render(sf)

        assert [b.splitlines()[0] for b in blocks] == ["export interface OuterInner {", "export interface Outer {"]
        assert "  labels: {[key: string]: string};" in blocks[0]

    def test_map_of_messages(self):
        sf = schema("m.proto", package="p", messages=[
            message("Item", [scalar("id", F.TYPE_INT32)]),
            message(
                "Catalog",
                [ref("items", ".p.Catalog.ItemsEntry", repeated=True)],
                nested=[map_entry("ItemsEntry", ref("value", ".p.Item"))],
            ),
        ])

        assert "  items: {[key: string]: Item};" in _render(sf)[1]

    def test_self_reference(self):
        sf = schema("m.proto", package="p", messages=[
            message("Node", [scalar("id", F.TYPE_INT32), ref("children", ".p.Node", repeated=True)]),
        ])

        assert "  children: Node[];" in _render(sf)[0]

    def test_unresolvable_reference_propagates(self):
        from protoc_webapi_ts.errors import UnresolvedTypeError

        sf = schema("m.proto", package="p", messages=[message("M", [ref("x", ".p.Nope")])])

        with pytest.raises(UnresolvedTypeError):
            _render(sf)
