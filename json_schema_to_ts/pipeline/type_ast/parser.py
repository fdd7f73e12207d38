"""
Type parser that builds a type-AST from a normalized JSON Schema.

Consumes the output contract of the normalizer (scalar `type`, list
`required`, `definitions` instead of `$defs`, `enum` instead of `const`)
and maps every schema node to a type-AST node. Named nodes are registered
in `TypeAST.named` before their bodies are parsed, so self-referential and
mutually-referential schemas terminate.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import unquote

from loguru import logger

from ...errors import UnrecognizedShapeError
from ...utils import just_name, to_safe_string
from ..config import CompilerOptions
from ..normalizer.shapes import Shape, classify
from .nodes import (
    AnyNode,
    ArrayNode,
    CustomTypeNode,
    EnumMember,
    EnumNode,
    IndexSignature,
    InterfaceNode,
    IntersectionNode,
    LiteralNode,
    MemberDef,
    NamedReferenceNode,
    NeverNode,
    PrimitiveNode,
    TupleNode,
    TypeAST,
    TypeNode,
    UnionNode,
    UnknownNode,
)

# JSON Schema type name -> primitive type name
PRIMITIVE_TYPES = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "null": "null",
}

# Keywords carried into each variant when a `type` list is split into a union
OBJECT_KEYWORDS = ("properties", "required", "additionalProperties", "patternProperties")
ARRAY_KEYWORDS = ("items", "additionalItems", "minItems", "maxItems")

# Path segments skipped when deriving a name from a schema position
_STRUCTURAL_SEGMENTS = {
    "properties",
    "patternProperties",
    "items",
    "additionalItems",
    "additionalProperties",
    "definitions",
    "allOf",
    "anyOf",
    "oneOf",
    "type",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _escape_pointer(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def _unescape_pointer(segment: str) -> str:
    return unquote(segment).replace("~1", "/").replace("~0", "~")


class SchemaParser:
    """Parses a normalized JSON Schema into a TypeAST."""

    def __init__(self, options: CompilerOptions | None = None):
        self.options = options or CompilerOptions()

        # Will be set during parsing
        self.ast = TypeAST()
        self.root_schema: dict[str, Any] = {}

        # id(schema) -> finished node
        self._parsed: dict[int, TypeNode] = {}

        # id(schema) -> node whose body is being parsed
        self._active: dict[int, TypeNode] = {}

        # id(definition schema) -> definitions key
        self._definition_keys: dict[int, str] = {}

        # Schemas synthesized while parsing; kept alive so their ids stay unique
        self._synthetic: list[dict[str, Any]] = []

    def parse(self, schema: dict[str, Any]) -> TypeAST:
        """
        Parse a normalized schema.

        Args:
            schema: Output of `normalize`

        Returns:
            TypeAST with the root type and every named declaration
        """
        self.ast = TypeAST()
        self.root_schema = schema
        self._parsed.clear()
        self._active.clear()
        self._synthetic.clear()
        self._definition_keys = {id(d): key for key, d in self._root_definitions().items() if isinstance(d, dict)}

        self.ast.root = self._parse_schema_node(schema, "#")

        if self.options.unreachable_definitions:
            for key, def_schema in self._root_definitions().items():
                self._parse_schema_node(def_schema, f"#/definitions/{_escape_pointer(key)}", key_name=key)

        return self.ast

    def _root_definitions(self) -> dict[str, Any]:
        definitions = self.root_schema.get("definitions") if isinstance(self.root_schema, dict) else None
        return definitions if isinstance(definitions, dict) else {}

    def _parse_schema_node(self, schema: Any, path: str, key_name: str | None = None) -> TypeNode:
        """
        Parse a schema node recursively.

        Args:
            schema: The schema dictionary (or a boolean schema)
            path: JSON pointer of the node (for error messages and naming)
            key_name: Definitions key the node was reached through, if any

        Returns:
            Appropriate TypeNode subclass
        """
        if schema is True:
            return self._untyped(path)
        if schema is False:
            return NeverNode(source_path=path)
        if not isinstance(schema, dict):
            raise UnrecognizedShapeError(f"Expected a schema object, got {schema!r}", path)

        schema_id = id(schema)
        if schema_id in self._parsed:
            return self._parsed[schema_id]
        if schema_id in self._active:
            return self._reference_in_progress(self._active[schema_id], path)

        kind = self._discriminate(schema, path)
        if kind == "ref":
            node = self._parse_ref_node(schema, path)
            self._parsed[schema_id] = node
            return node

        name = self._standalone_name(schema, key_name)
        if name is not None and name in self.ast.named:
            return self._existing_named_node(name, path)

        node = self._new_node(kind, schema, path)
        node.name = name
        node.source_path = path
        if isinstance(schema.get("description"), str):
            node.comment = schema["description"]
        node.deprecated = schema.get("deprecated") is True
        if name is not None:
            self.ast.named[name] = node
            logger.debug(f"Registered named type {name} ({node.kind.value}) from {path}")

        self._active[schema_id] = node
        try:
            self._fill_node(kind, node, schema, path)
        finally:
            del self._active[schema_id]
        self._parsed[schema_id] = node
        return node

    def _discriminate(self, schema: dict[str, Any], path: str) -> str:
        """Return the inference rule a node matches (first match wins)."""
        if "tsType" in schema:
            return "custom"
        if "$ref" in schema:
            return "ref"
        if "enum" in schema:
            return "enum"
        if "allOf" in schema:
            return "allOf"
        if "anyOf" in schema or "oneOf" in schema:
            return "union"

        type_value = self._type_value(schema)
        if isinstance(type_value, list):
            return "type_union"

        shape = classify(schema, include_any=False)
        if Shape.OBJECT_LIKE in shape:
            return "object"
        if Shape.ARRAY_LIKE in shape:
            return "tuple" if isinstance(schema.get("items"), list) else "array"

        if type_value is None:
            return "untyped"
        if type_value == "any":
            return "any"
        if type_value in PRIMITIVE_TYPES:
            return "primitive"
        raise UnrecognizedShapeError(f"Unsupported type {type_value!r}", path)

    def _type_value(self, schema: dict[str, Any]) -> Any:
        """The `type` keyword, with empty and unary lists collapsed."""
        type_value = schema.get("type")
        if isinstance(type_value, list):
            if not type_value:
                return None
            if len(type_value) == 1:
                return type_value[0]
        return type_value

    def _standalone_name(self, schema: dict[str, Any], key_name: str | None) -> str | None:
        """Derive the identifier of a node from its title, id or definitions key."""
        candidates = []
        if isinstance(schema.get("title"), str):
            candidates.append(schema["title"])
        for id_key in ("id", "$id"):
            if isinstance(schema.get(id_key), str):
                candidates.append(just_name(schema[id_key]))
        if key_name is not None:
            candidates.append(key_name)
        if id(schema) in self._definition_keys:
            candidates.append(self._definition_keys[id(schema)])

        for candidate in candidates:
            name = to_safe_string(candidate)
            if name:
                return name
        return None

    def _existing_named_node(self, name: str, path: str) -> TypeNode:
        """Return a registered node, or a reference to it while it is being built."""
        if any(node.name == name for node in self._active.values()):
            return NamedReferenceNode(target=name, source_path=path)
        return self.ast.get(name)

    def _reference_in_progress(self, node: TypeNode, path: str) -> NamedReferenceNode:
        """Reference a node re-entered through a cycle, naming it if it is anonymous."""
        if not node.is_named:
            node.name = self._unique_name(self._position_name(node.source_path))
            self.ast.named[node.name] = node
            logger.debug(f"Named recursive type {node.name} from {node.source_path}")
        return NamedReferenceNode(target=node.name, source_path=path)

    def _position_name(self, path: str) -> str:
        segments = [_unescape_pointer(s) for s in path.lstrip("#").split("/") if s]
        segments = [s for s in segments if s not in _STRUCTURAL_SEGMENTS and not s.isdigit()]
        root_name = self.ast.root.name if self.ast.root is not None else None
        if root_name is None:
            root_name = self._standalone_name(self.root_schema, None) or ""
        return to_safe_string(" ".join([root_name, *segments])) or "Anonymous"

    def _unique_name(self, name: str) -> str:
        candidate = name
        counter = 1
        while candidate in self.ast.named:
            candidate = f"{name}{counter}"
            counter += 1
        return candidate

    def _untyped(self, path: str) -> TypeNode:
        if self.options.unknown_any:
            return UnknownNode(source_path=path)
        return AnyNode(source_path=path)

    def _new_node(self, kind: str, schema: dict[str, Any], path: str) -> TypeNode:
        """Create the (still empty) node for an inference rule."""
        if kind == "custom":
            return CustomTypeNode(expression=str(schema["tsType"]))
        if kind == "enum":
            return EnumNode(is_const=self.options.enable_const_enums)
        if kind == "allOf":
            return IntersectionNode()
        if kind in ("union", "type_union"):
            return UnionNode()
        if kind == "object":
            return InterfaceNode()
        if kind == "tuple":
            return TupleNode()
        if kind == "array":
            return ArrayNode()
        if kind == "primitive":
            return PrimitiveNode(type_name=PRIMITIVE_TYPES[self._type_value(schema)])
        if kind == "any":
            return self._untyped(path)
        if not self.options.allow_untyped_fallback:
            raise UnrecognizedShapeError("Schema has no type and matches no inference rule", path)
        return self._untyped(path)

    def _fill_node(self, kind: str, node: TypeNode, schema: dict[str, Any], path: str) -> None:
        """Parse the children of a node into it."""
        if kind == "enum":
            self._fill_enum(node, schema)
        elif kind == "allOf":
            self._fill_intersection(node, schema, path)
        elif kind == "union":
            self._fill_union(node, schema, path)
        elif kind == "type_union":
            self._fill_type_union(node, schema, path)
        elif kind == "object":
            self._fill_interface(node, schema, path)
        elif kind == "tuple":
            self._fill_tuple(node, schema, path)
        elif kind == "array":
            self._fill_array(node, schema, path)

    def _parse_ref_node(self, schema: dict[str, Any], path: str) -> NamedReferenceNode:
        """Parse a $ref left over after linking into a reference to its target."""
        ref = schema["$ref"]
        target = self._resolve_pointer(ref) if isinstance(ref, str) else None
        last_segment = _unescape_pointer(str(ref).rstrip("/").split("/")[-1]) if ref else ""

        if target is None:
            logger.warning(f"Could not resolve $ref {ref!r} at {path}")
            return NamedReferenceNode(target=to_safe_string(just_name(last_segment)) or "Unresolved", source_path=path)

        key_name = last_segment if "/definitions/" in ref or "/$defs/" in ref else None
        target_path = ref.replace("/$defs/", "/definitions/")
        if isinstance(target, bool):
            return self._boolean_reference(target, target_path, last_segment, path)

        target_node = self._parse_schema_node(target, target_path, key_name=key_name)
        if isinstance(target_node, NamedReferenceNode):
            return NamedReferenceNode(target=target_node.target, source_path=path)

        if not target_node.is_named:
            target_node.name = self._unique_name(to_safe_string(last_segment) or self._position_name(target_path))
            self.ast.named[target_node.name] = target_node
        return NamedReferenceNode(target=target_node.name, source_path=path)

    def _boolean_reference(self, target: bool, target_path: str, last_segment: str, path: str) -> NamedReferenceNode:
        """Reference a `true`/`false` schema stored under a pointer, declaring it once."""
        name = to_safe_string(last_segment) or self._position_name(target_path)
        if self.ast.get(name) is None:
            node = self._parse_schema_node(target, target_path)
            node.name = name
            self.ast.named[name] = node
        return NamedReferenceNode(target=name, source_path=path)

    def _resolve_pointer(self, ref: str) -> Any:
        """Resolve a local JSON pointer ("#/definitions/Foo") against the root schema."""
        if not ref.startswith("#"):
            return None
        current: Any = self.root_schema
        for raw_segment in ref[1:].split("/"):
            if not raw_segment:
                continue
            segment = _unescape_pointer(raw_segment)
            if isinstance(current, dict):
                if segment == "$defs" and segment not in current:
                    segment = "definitions"
                if segment not in current:
                    return None
                current = current[segment]
            elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
                current = current[int(segment)]
            else:
                return None
        return current if isinstance(current, (dict, bool)) else None

    def _fill_enum(self, node: EnumNode, schema: dict[str, Any]) -> None:
        values = schema["enum"] if isinstance(schema["enum"], list) else [schema["enum"]]
        names = schema.get("tsEnumNames")
        use_names = isinstance(names, list) and len(names) == len(values)
        for i, value in enumerate(values):
            if use_names and isinstance(names[i], str):
                member_name = names[i]
            else:
                member_name = self._enum_member_name(value, i)
            node.members.append(EnumMember(name=member_name, value=LiteralNode(value=value)))

    def _enum_member_name(self, value: Any, index: int) -> str:
        if value is None:
            return "Null"
        if isinstance(value, bool):
            return "True" if value else "False"
        return to_safe_string(str(value)) or f"Value{index}"

    def _fill_intersection(self, node: IntersectionNode, schema: dict[str, Any], path: str) -> None:
        for i, part in enumerate(schema["allOf"]):
            node.parts.append(self._parse_schema_node(part, f"{path}/allOf/{i}"))

        # Properties declared next to allOf form one more part of the intersection
        if "properties" in schema:
            own = {k: v for k, v in schema.items() if k in OBJECT_KEYWORDS}
            own["type"] = "object"
            self._synthetic.append(own)
            node.parts.append(self._parse_schema_node(own, path))

    def _fill_union(self, node: UnionNode, schema: dict[str, Any], path: str) -> None:
        keyword = "oneOf" if "oneOf" in schema else "anyOf"
        for i, variant in enumerate(schema[keyword]):
            node.variants.append(self._parse_schema_node(variant, f"{path}/{keyword}/{i}"))

    def _fill_type_union(self, node: UnionNode, schema: dict[str, Any], path: str) -> None:
        """Split `type: [a, b]` into one variant per type name."""
        for type_name in schema["type"]:
            variant: dict[str, Any] = {"type": type_name}
            if type_name in ("object", "any"):
                variant.update((k, schema[k]) for k in OBJECT_KEYWORDS if k in schema)
            if type_name in ("array", "any"):
                variant.update((k, schema[k]) for k in ARRAY_KEYWORDS if k in schema)
            self._synthetic.append(variant)
            node.variants.append(self._parse_schema_node(variant, f"{path}/type/{type_name}"))

    def _fill_interface(self, node: InterfaceNode, schema: dict[str, Any], path: str) -> None:
        required = schema.get("required")
        required = required if isinstance(required, list) else []

        properties = schema.get("properties")
        if isinstance(properties, dict):
            for prop_name, prop_schema in properties.items():
                prop_path = f"{path}/properties/{_escape_pointer(prop_name)}"
                member = MemberDef(
                    name=prop_name,
                    type_node=self._parse_schema_node(prop_schema, prop_path),
                    optional=prop_name not in required,
                )
                if isinstance(prop_schema, dict):
                    if isinstance(prop_schema.get("description"), str):
                        member.comment = prop_schema["description"]
                    member.deprecated = prop_schema.get("deprecated") is True
                node.members.append(member)

        pattern_properties = schema.get("patternProperties")
        if isinstance(pattern_properties, dict):
            for pattern, pattern_schema in pattern_properties.items():
                value = self._parse_schema_node(pattern_schema, f"{path}/patternProperties/{_escape_pointer(pattern)}")
                node.index_signatures.append(IndexSignature(type_node=self._index_value(value), pattern=pattern))

        additional = schema.get("additionalProperties")
        if additional is None and pattern_properties is None:
            additional = True
        if additional is True:
            node.index_signatures.append(IndexSignature(type_node=self._index_value(self._untyped(path))))
        elif isinstance(additional, dict):
            value = self._parse_schema_node(additional, f"{path}/additionalProperties")
            node.index_signatures.append(IndexSignature(type_node=self._index_value(value)))

    def _index_value(self, value: TypeNode) -> TypeNode:
        if not self.options.strict_index_signatures:
            return value
        undefined = PrimitiveNode(type_name="undefined", source_path=value.source_path)
        return UnionNode(variants=[value, undefined], source_path=value.source_path)

    def _fill_tuple(self, node: TupleNode, schema: dict[str, Any], path: str) -> None:
        for i, item in enumerate(schema["items"]):
            node.elements.append(self._parse_schema_node(item, f"{path}/items/{i}"))

        min_items = schema.get("minItems")
        node.min_items = int(min_items) if _is_number(min_items) and min_items > 0 else 0
        max_items = schema.get("maxItems")
        if _is_number(max_items) and max_items >= 0:
            node.max_items = int(max_items)

        # additionalItems: false closes the tuple
        additional = schema.get("additionalItems")
        if isinstance(additional, dict):
            node.rest = self._parse_schema_node(additional, f"{path}/additionalItems")
        elif additional is True:
            node.rest = self._untyped(f"{path}/additionalItems")

    def _fill_array(self, node: ArrayNode, schema: dict[str, Any], path: str) -> None:
        items = schema.get("items")
        if isinstance(items, (dict, bool)):
            node.element = self._parse_schema_node(items, f"{path}/items")
        else:
            node.element = self._untyped(f"{path}/items")


def parse(schema: dict[str, Any], options: CompilerOptions | None = None) -> TypeAST:
    """Parse a normalized schema into a TypeAST."""
    return SchemaParser(options).parse(schema)
