"""
Tests for the type parser.

Schemas are normalized first, as in the real pipeline, so the parser only
ever sees canonical input.
"""

from __future__ import annotations

import json

import pytest

from json_schema_to_ts.errors import UnrecognizedShapeError
from json_schema_to_ts.pipeline import CompilerOptions, normalize, parse
from json_schema_to_ts.pipeline.type_ast import (
    AnyNode,
    ArrayNode,
    CustomTypeNode,
    EnumNode,
    InterfaceNode,
    IntersectionNode,
    NamedReferenceNode,
    NeverNode,
    PrimitiveNode,
    TupleNode,
    TypeKind,
    UnionNode,
    UnknownNode,
)


def compile_ast(schema, options=None, file_name="test.json"):
    options = options or CompilerOptions()
    return parse(normalize(schema, file_name, options), options)


def member_type(ast, member_name):
    return ast.root.member(member_name).type_node


class TestInterfaces:
    """Test object schemas"""

    def test_required_and_optional_members(self):
        schema = {
            "title": "Person",
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "age": {"type": "integer"},
                "email": {"type": "string"},
            },
            "required": ["name", "age"],
        }

        ast = compile_ast(schema)

        assert isinstance(ast.root, InterfaceNode)
        assert ast.root.name == "Person"
        assert [m.name for m in ast.root.members] == ["name", "age", "email"]
        assert [m.optional for m in ast.root.members] == [False, False, True]
        assert member_type(ast, "age") == PrimitiveNode(type_name="number", source_path="#/properties/age")

    def test_root_named_from_file_name(self):
        ast = compile_ast({"type": "object"}, file_name="user-profile.json")
        assert ast.root.name == "UserProfile"
        assert ast.named == {"UserProfile": ast.root}

    def test_open_interface_has_index_signature(self):
        ast = compile_ast({"type": "object", "properties": {"a": {"type": "string"}}})

        assert len(ast.root.index_signatures) == 1
        signature = ast.root.index_signatures[0]
        assert signature.pattern is None
        assert isinstance(signature.type_node, UnknownNode)

    def test_index_signature_any_when_unknown_any_disabled(self):
        ast = compile_ast({"type": "object"}, CompilerOptions(unknown_any=False))
        assert isinstance(ast.root.index_signatures[0].type_node, AnyNode)

    def test_strict_index_signatures_add_undefined(self):
        ast = compile_ast({"type": "object"}, CompilerOptions(strict_index_signatures=True))

        value = ast.root.index_signatures[0].type_node
        assert isinstance(value, UnionNode)
        assert isinstance(value.variants[0], UnknownNode)
        assert isinstance(value.variants[1], PrimitiveNode)
        assert value.variants[1].type_name == "undefined"

    def test_closed_interface_has_no_index_signature(self):
        ast = compile_ast({"type": "object", "properties": {"a": {"type": "string"}}, "additionalProperties": False})
        assert ast.root.index_signatures == []

    def test_additional_properties_schema(self):
        ast = compile_ast({"type": "object", "additionalProperties": {"type": "number"}})
        assert ast.root.index_signatures[0].type_node.type_name == "number"

    def test_pattern_properties(self):
        ast = compile_ast({"type": "object", "patternProperties": {"^x-": {"type": "string"}}})

        assert len(ast.root.index_signatures) == 1
        assert ast.root.index_signatures[0].pattern == "^x-"
        assert ast.root.index_signatures[0].type_node.type_name == "string"

    def test_member_comments(self):
        schema = {
            "type": "object",
            "properties": {"old": {"type": "string", "description": "Use new */ instead", "deprecated": True}},
        }

        ast = compile_ast(schema)

        member = ast.root.member("old")
        assert member.comment == "Use new * / instead"
        assert member.deprecated is True


class TestEnums:
    """Test enum and const schemas"""

    def test_enum_members(self):
        ast = compile_ast({"type": "object", "properties": {"color": {"enum": ["red", "dark blue"]}}})

        color = member_type(ast, "color")
        assert isinstance(color, EnumNode)
        assert [m.name for m in color.members] == ["Red", "DarkBlue"]
        assert color.values == ["red", "dark blue"]
        assert color.is_const is True

    def test_const_enums_disabled(self):
        ast = compile_ast({"enum": [1, 2]}, CompilerOptions(enable_const_enums=False))
        assert ast.root.is_const is False

    def test_ts_enum_names(self):
        ast = compile_ast({"enum": [1, 2], "tsEnumNames": ["One", "Two"]})
        assert [(m.name, m.value.value) for m in ast.root.members] == [("One", 1), ("Two", 2)]

    def test_const_becomes_singleton_enum(self):
        ast = compile_ast({"const": "red"})

        assert isinstance(ast.root, EnumNode)
        assert ast.root.values == ["red"]

    def test_nullable_enum(self):
        ast = compile_ast({"enum": [None, "a"], "type": ["string", "null"]})
        assert [m.name for m in ast.root.members] == ["Null", "A"]


class TestCombinators:
    """Test allOf/anyOf/oneOf and type lists"""

    def test_all_of_is_intersection(self):
        ast = compile_ast({"allOf": [{"type": "object", "properties": {"a": {"type": "string"}}}, {"type": "object"}]})

        assert isinstance(ast.root, IntersectionNode)
        assert [type(p) for p in ast.root.parts] == [InterfaceNode, InterfaceNode]

    def test_all_of_with_own_properties(self):
        schema = {"allOf": [{"type": "object"}], "properties": {"b": {"type": "number"}}}

        ast = compile_ast(schema)

        assert len(ast.root.parts) == 2
        assert ast.root.parts[1].member("b").type_node.type_name == "number"

    @pytest.mark.parametrize("keyword", ["anyOf", "oneOf"])
    def test_any_of_and_one_of_are_unions(self, keyword):
        ast = compile_ast({keyword: [{"type": "string"}, {"type": "number"}]})

        assert isinstance(ast.root, UnionNode)
        assert [v.type_name for v in ast.root.variants] == ["string", "number"]

    def test_named_union(self):
        ast = compile_ast({"type": "object", "properties": {"id": {"title": "Identifier", "anyOf": [{"type": "string"}, {"type": "integer"}]}}})

        assert isinstance(ast.named["Identifier"], UnionNode)
        assert member_type(ast, "id") is ast.named["Identifier"]

    def test_type_list_is_union(self):
        schema = {"type": ["object", "null"], "properties": {"a": {"type": "string"}}}

        ast = compile_ast(schema)

        assert isinstance(ast.root, UnionNode)
        interface, null = ast.root.variants
        assert isinstance(interface, InterfaceNode)
        assert [m.name for m in interface.members] == ["a"]
        assert null.type_name == "null"


class TestArrays:
    """Test arrays and tuples"""

    def test_array(self):
        ast = compile_ast({"type": "array", "items": {"type": "string"}})

        assert isinstance(ast.root, ArrayNode)
        assert ast.root.element.type_name == "string"

    def test_array_without_items(self):
        ast = compile_ast({"type": "array"}, CompilerOptions(unknown_any=False))
        assert isinstance(ast.root.element, AnyNode)

    def test_fixed_tuple(self):
        ast = compile_ast({"type": "array", "items": {"type": "string"}, "minItems": 2, "maxItems": 2})

        assert isinstance(ast.root, TupleNode)
        assert [e.type_name for e in ast.root.elements] == ["string", "string"]
        assert ast.root.min_items == 2
        assert ast.root.rest is None

    def test_open_tuple_has_rest(self):
        ast = compile_ast({"type": "array", "items": {"type": "string"}, "minItems": 2})

        assert len(ast.root.elements) == 2
        assert ast.root.rest.type_name == "string"

    def test_tuple_with_optional_elements(self):
        ast = compile_ast({"type": "array", "items": {"type": "number"}, "minItems": 1, "maxItems": 3})

        assert len(ast.root.elements) == 3
        assert ast.root.min_items == 1
        assert ast.root.rest is None

    def test_explicit_tuple_additional_items(self):
        ast = compile_ast({"items": [{"type": "string"}], "additionalItems": {"type": "boolean"}})
        assert ast.root.rest.type_name == "boolean"

    def test_tuple_keeps_rest_with_max_items(self):
        schema = {"type": "array", "items": [{"type": "string"}], "additionalItems": {"type": "number"}, "maxItems": 3}

        ast = compile_ast(schema)

        assert [e.type_name for e in ast.root.elements] == ["string"]
        assert ast.root.rest.type_name == "number"
        assert ast.root.max_items == 3
        assert ast.root.min_items == 0

    def test_min_items_beyond_elements_is_kept(self):
        schema = {"items": [{"type": "string"}], "additionalItems": {"type": "number"}, "minItems": 3}

        ast = compile_ast(schema)

        assert len(ast.root.elements) == 1
        assert ast.root.min_items == 3
        assert ast.root.max_items is None
        assert ast.root.rest.type_name == "number"

    def test_false_additional_items_closes_tuple(self):
        ast = compile_ast({"items": [{"type": "string"}], "additionalItems": False})
        assert ast.root.rest is None

    def test_open_tuple_of_true_items(self):
        ast = compile_ast({"items": True, "minItems": 2})

        assert isinstance(ast.root, TupleNode)
        assert all(isinstance(e, UnknownNode) for e in ast.root.elements)
        assert len(ast.root.elements) == 2
        assert isinstance(ast.root.rest, UnknownNode)

    def test_tuple_dump_has_bounds(self):
        dump = compile_ast({"type": "array", "items": {"type": "string"}, "minItems": 1, "maxItems": 2}).to_dict()

        tuple_decl = dump["declarations"][0]
        assert tuple_decl["kind"] == TypeKind.TUPLE.value
        assert tuple_decl["min_items"] == 1
        assert tuple_decl["max_items"] == 2
        assert tuple_decl["rest"] is None

    def test_ignore_min_and_max_items_keeps_array(self):
        options = CompilerOptions(ignore_min_and_max_items=True)
        ast = compile_ast({"type": "array", "items": {"type": "string"}, "minItems": 2, "maxItems": 2}, options)
        assert isinstance(ast.root, ArrayNode)


class TestFallbacks:
    """Test untyped and unrecognized schemas"""

    def test_untyped_is_unknown(self):
        ast = compile_ast({"type": "object", "properties": {"x": {}}})
        assert isinstance(member_type(ast, "x"), UnknownNode)

    def test_untyped_is_any(self):
        ast = compile_ast({"type": "object", "properties": {"x": {}}}, CompilerOptions(unknown_any=False))
        assert isinstance(member_type(ast, "x"), AnyNode)

    def test_untyped_raises_when_fallback_disabled(self):
        options = CompilerOptions(allow_untyped_fallback=False)
        with pytest.raises(UnrecognizedShapeError) as excinfo:
            compile_ast({"type": "object", "properties": {"x": {"description": "anything"}}}, options)
        assert excinfo.value.source_path == "#/properties/x"

    def test_explicit_any_type(self):
        ast = compile_ast({"type": "any"}, CompilerOptions(allow_untyped_fallback=False))
        assert isinstance(ast.root, UnknownNode)

    def test_unknown_type_name_raises(self):
        with pytest.raises(UnrecognizedShapeError):
            compile_ast({"type": "object", "properties": {"x": {"type": "decimal"}}})

    def test_custom_ts_type(self):
        ast = compile_ast({"type": "object", "properties": {"when": {"tsType": "Date"}}})

        when = member_type(ast, "when")
        assert isinstance(when, CustomTypeNode)
        assert when.expression == "Date"


class TestBooleanSchemas:
    """Test `true` and `false` used as sub-schemas"""

    def test_false_property_is_never(self):
        ast = compile_ast({"type": "object", "properties": {"a": False, "b": {"type": "string"}}})

        assert member_type(ast, "a") == NeverNode(source_path="#/properties/a")
        assert member_type(ast, "b").type_name == "string"

    def test_false_is_not_an_untyped_fallback(self):
        options = CompilerOptions(allow_untyped_fallback=False)
        ast = compile_ast({"type": "object", "properties": {"a": False}}, options)
        assert isinstance(member_type(ast, "a"), NeverNode)

    def test_false_union_variant(self):
        ast = compile_ast({"anyOf": [False, {"type": "string"}]})

        assert isinstance(ast.root, UnionNode)
        assert [v.kind for v in ast.root.variants] == [TypeKind.NEVER, TypeKind.PRIMITIVE]

    def test_false_tuple_element(self):
        ast = compile_ast({"items": [False, {"type": "number"}]})
        assert isinstance(ast.root.elements[0], NeverNode)

    def test_false_array_items(self):
        ast = compile_ast({"type": "array", "items": False})

        assert isinstance(ast.root, ArrayNode)
        assert isinstance(ast.root.element, NeverNode)

    def test_true_array_items(self):
        ast = compile_ast({"type": "array", "items": True}, CompilerOptions(unknown_any=False))
        assert isinstance(ast.root.element, AnyNode)

    def test_ref_to_false_definition_is_declared_once(self):
        schema = {
            "type": "object",
            "properties": {
                "a": {"$ref": "#/definitions/nothing"},
                "b": {"$ref": "#/definitions/nothing"},
            },
            "definitions": {"nothing": False},
        }

        ast = compile_ast(schema)

        assert member_type(ast, "a").target == "Nothing"
        assert member_type(ast, "b").target == "Nothing"
        assert list(ast.named) == ["Test", "Nothing"]
        assert isinstance(ast.get("Nothing"), NeverNode)

    def test_never_dump(self):
        dump = compile_ast({"type": "object", "properties": {"a": False}}).to_dict()
        assert dump["declarations"][0]["members"][0]["type"] == {"kind": "never"}


class TestNamedTypes:
    """Test named declarations, references and sharing"""

    def test_ref_becomes_named_reference(self):
        schema = {
            "type": "object",
            "properties": {
                "home": {"$ref": "#/definitions/Address"},
                "work": {"$ref": "#/definitions/Address"},
            },
            "definitions": {"Address": {"type": "object", "properties": {"street": {"type": "string"}}}},
        }

        ast = compile_ast(schema)

        assert member_type(ast, "home") == NamedReferenceNode(target="Address", source_path="#/properties/home")
        assert member_type(ast, "work").target == "Address"
        assert list(ast.named) == ["Test", "Address"]
        assert isinstance(ast.named["Address"], InterfaceNode)
        assert ast.resolve(member_type(ast, "home")) is ast.named["Address"]

    def test_defs_ref(self):
        schema = {"type": "object", "properties": {"a": {"$ref": "#/$defs/thing"}}, "$defs": {"thing": {"type": "string"}}}

        ast = compile_ast(schema)

        assert member_type(ast, "a").target == "Thing"
        assert ast.named["Thing"].type_name == "string"

    def test_same_schema_through_two_paths_is_shared(self):
        address = {"title": "Address", "type": "object", "properties": {"street": {"type": "string"}}}
        schema = {"type": "object", "properties": {"home": address, "work": address}}

        ast = compile_ast(schema)

        assert member_type(ast, "home") is member_type(ast, "work")
        assert [name for name in ast.named] == ["Test", "Address"]

    def test_same_identifier_is_shared(self):
        schema = {
            "type": "object",
            "properties": {
                "a": {"title": "Point", "type": "object", "properties": {"x": {"type": "number"}}},
                "b": {"title": "Point", "type": "object", "properties": {"x": {"type": "number"}}},
            },
        }

        ast = compile_ast(schema)

        assert member_type(ast, "a") is member_type(ast, "b")

    def test_dereferenced_definition_named_by_key(self):
        address = {"type": "object", "properties": {"street": {"type": "string"}}}
        schema = {"type": "object", "properties": {"home": address}, "definitions": {"address": address}}

        ast = compile_ast(schema)

        assert member_type(ast, "home").name == "Address"

    def test_recursive_ref(self):
        schema = {
            "type": "object",
            "properties": {"tree": {"$ref": "#/definitions/Node"}},
            "definitions": {
                "Node": {
                    "type": "object",
                    "properties": {"children": {"type": "array", "items": {"$ref": "#/definitions/Node"}}},
                }
            },
        }

        ast = compile_ast(schema)

        node = ast.named["Node"]
        children = node.member("children").type_node
        assert isinstance(children, ArrayNode)
        assert children.element == NamedReferenceNode(target="Node", source_path="#/definitions/Node/properties/children/items")

    def test_cyclic_dereferenced_root(self):
        schema = {"type": "object", "properties": {}}
        schema["properties"]["parent"] = schema

        ast = compile_ast(schema, file_name="tree.json")

        parent = member_type(ast, "parent")
        assert isinstance(parent, NamedReferenceNode)
        assert parent.target == "Tree"

    def test_anonymous_cycle_is_promoted_to_named_type(self):
        child = {"type": "object", "properties": {}}
        child["properties"]["next"] = child
        schema = {"type": "object", "properties": {"child": child}}

        ast = compile_ast(schema, file_name="list.json")

        promoted = member_type(ast, "child")
        assert promoted.name == "ListChild"
        assert ast.named["ListChild"] is promoted
        assert promoted.member("next").type_node.target == "ListChild"

    def test_unresolvable_ref(self):
        ast = compile_ast({"type": "object", "properties": {"a": {"$ref": "other.json#/definitions/Thing"}}})

        assert member_type(ast, "a").target == "Thing"
        assert "Thing" not in ast.named

    def test_unreachable_definitions(self):
        schema = {"type": "object", "definitions": {"unused": {"type": "string"}}}

        assert "Unused" not in compile_ast(schema).named
        ast = compile_ast(schema, CompilerOptions(unreachable_definitions=True))
        assert ast.named["Unused"].type_name == "string"


class TestTypeASTDump:
    """Test the JSON dump of a TypeAST"""

    def test_named_types_are_declared_once(self):
        address = {"title": "Address", "type": "object", "properties": {"street": {"type": "string"}}, "additionalProperties": False}
        schema = {"type": "object", "properties": {"home": address, "work": address}, "additionalProperties": False}

        dump = compile_ast(schema).to_dict()

        assert dump["root"] == {"kind": "named_reference", "target": "Test"}
        assert [d["name"] for d in dump["declarations"]] == ["Test", "Address"]
        test = dump["declarations"][0]
        assert test["kind"] == TypeKind.INTERFACE.value
        assert test["members"][0] == {"name": "home", "type": {"kind": "named_reference", "target": "Address"}, "optional": True}
        assert dump["declarations"][1]["members"][0]["type"] == {"kind": "primitive", "type": "string"}
        json.dumps(dump)
