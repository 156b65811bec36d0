from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Literal, Mapping

from .errors import SchemaDefinitionError, ValidationError

PrimitiveKind = Literal["string", "number", "boolean"]

PRIMITIVE_KINDS: tuple[str, ...] = ("string", "number", "boolean")

_ZERO_VALUES: dict[str, Any] = {"string": "", "number": 0, "boolean": False}


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


# Marks an absent key (as opposed to an explicit null).
MISSING: Any = _Missing()


@dataclass(frozen=True)
class PrimitiveNode:
    kind: PrimitiveKind
    optional: bool = False

    def __str__(self) -> str:
        return f"{self.kind}?" if self.optional else self.kind


@dataclass(frozen=True)
class ObjectNode:
    # Ordered (name, node) pairs; order drives default construction and error reporting.
    fields: tuple[tuple[str, "SchemaNode"], ...]

    def field_names(self) -> list[str]:
        return [name for name, _ in self.fields]


@dataclass(frozen=True)
class ArrayNode:
    item: "SchemaNode"


SchemaNode = PrimitiveNode | ObjectNode | ArrayNode


def define_schema(definition: Any) -> Any:
    """
    Return the schema definition unchanged.

    Lets callers name a schema literal once and share it between stores:

        TODOS = define_schema({"todos": [{"id": "number", "task": "string", "done": "boolean"}]})
    """
    return definition


def parse_schema(definition: Any, path: str = "") -> SchemaNode:
    """
    Convert a schema definition literal into an immutable SchemaNode tree.

      - "string" | "number" | "boolean", optionally suffixed with "?"
      - dict  -> ObjectNode (string keys, insertion order kept)
      - [item] / (item,) -> ArrayNode; exactly one element is required
      - an existing node is returned as is

    Raises SchemaDefinitionError for anything else, without looking at any data.
    """
    if isinstance(definition, (PrimitiveNode, ObjectNode, ArrayNode)):
        return definition

    if isinstance(definition, str):
        optional = definition.endswith("?")
        kind = definition[:-1] if optional else definition
        if kind not in PRIMITIVE_KINDS:
            raise SchemaDefinitionError(
                f"Unknown type {definition!r} for field '{display_path(path)}'; "
                f"expected one of {', '.join(PRIMITIVE_KINDS)} (optionally suffixed with '?')"
            )
        return PrimitiveNode(kind=kind, optional=optional)  # type: ignore[arg-type]

    if isinstance(definition, Mapping):
        fields: list[tuple[str, SchemaNode]] = []
        for name, child in definition.items():
            if not isinstance(name, str):
                raise SchemaDefinitionError(
                    f"Field names must be strings, got {type(name).__name__} {name!r} "
                    f"in '{display_path(path)}'"
                )
            fields.append((name, parse_schema(child, join_path(path, name))))
        return ObjectNode(fields=tuple(fields))

    if isinstance(definition, (list, tuple)):
        if len(definition) != 1:
            raise SchemaDefinitionError(
                f"Array schema for field '{display_path(path)}' must contain exactly one item schema, "
                f"got {len(definition)}"
            )
        return ArrayNode(item=parse_schema(definition[0], f"{path}[]"))

    raise SchemaDefinitionError(
        f"Unsupported schema definition for field '{display_path(path)}': "
        f"{type(definition).__name__} {definition!r}"
    )


def create_default(schema: Any) -> Any:
    """Build the default value for a schema: zero values, empty arrays, optional fields left out."""
    node = parse_schema(schema)
    value = _default_for(node)
    return None if value is MISSING else value


def _default_for(node: SchemaNode) -> Any:
    if isinstance(node, PrimitiveNode):
        return MISSING if node.optional else _ZERO_VALUES[node.kind]
    if isinstance(node, ArrayNode):
        return []
    result: dict[str, Any] = {}
    for name, child in node.fields:
        value = _default_for(child)
        if value is not MISSING:
            result[name] = value
    return result


def validate(value: Any, schema: Any, path: str = "", *, coerce: bool = False) -> Any:
    """
    Validate `value` against `schema` and return a new, normalized value.

    Strict mode (default):
      - missing/null required primitives are filled with their zero value
      - missing/null optional primitives are left out
      - any other type mismatch raises ValidationError naming the field path
      - unknown object keys are dropped

    Coercing mode (`coerce=True`) converts mismatched primitives instead of raising,
    and replaces non-object / non-array values with the schema default.

    The input is never mutated.
    """
    node = parse_schema(schema)
    result = _validate(value, node, path, coerce)
    return None if result is MISSING else result


def _validate(value: Any, node: SchemaNode, path: str, coerce: bool) -> Any:
    if isinstance(node, PrimitiveNode):
        return _validate_primitive(value, node, path, coerce)

    if isinstance(node, ObjectNode):
        if not isinstance(value, Mapping):
            if coerce:
                return _default_for(node)
            actual = json_type_name(value)
            raise ValidationError(
                f"Field '{display_path(path)}' must be an object, got {actual}",
                path=path,
                expected="object",
                actual=actual,
                value=None if value is MISSING else value,
            )
        result: dict[str, Any] = {}
        for name, child in node.fields:
            validated = _validate(value.get(name, MISSING), child, join_path(path, name), coerce)
            if validated is not MISSING:
                result[name] = validated
        return result

    if not isinstance(value, (list, tuple)):
        if coerce:
            return []
        actual = json_type_name(value)
        raise ValidationError(
            f"Field '{display_path(path)}' must be an array, got {actual}",
            path=path,
            expected="array",
            actual=actual,
            value=None if value is MISSING else value,
        )
    items: list[Any] = []
    for index, item in enumerate(value):
        validated = _validate(item, node.item, index_path(path, index), coerce)
        # An absent optional item still occupies its slot.
        items.append(None if validated is MISSING else validated)
    return items


def _validate_primitive(value: Any, node: PrimitiveNode, path: str, coerce: bool) -> Any:
    if value is MISSING or value is None:
        return MISSING if node.optional else _ZERO_VALUES[node.kind]
    if _matches(node.kind, value):
        return value
    if coerce:
        return _coerce(node.kind, value)
    actual = json_type_name(value)
    raise ValidationError(
        f"Field '{display_path(path)}' must be a {node.kind}, got {actual}: {render_value(value)}",
        path=path,
        expected=node.kind,
        actual=actual,
        value=value,
    )


def _matches(kind: str, value: Any) -> bool:
    if kind == "string":
        return isinstance(value, str)
    if kind == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, bool)


def _coerce(kind: str, value: Any) -> Any:
    if kind == "string":
        if isinstance(value, (bool, Mapping, list, tuple)):
            return json.dumps(value, ensure_ascii=False, default=repr)
        return str(value)
    if kind == "number":
        if isinstance(value, bool):
            return int(value)
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0
        if math.isnan(number):
            return 0
        return int(number) if number.is_integer() else number
    # Containers are truthy even when empty.
    if isinstance(value, (Mapping, list, tuple)):
        return True
    return bool(value)


def json_type_name(value: Any) -> str:
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def render_value(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=repr)


def join_path(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def display_path(path: str) -> str:
    return path or "<root>"
