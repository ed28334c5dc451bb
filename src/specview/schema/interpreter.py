"""Render a schema's shape and synthesize an example value for it.

Both public operations walk a :class:`~specview.models.SchemaObject` and
dispatch on the same shape classification, first match wins:

1. ``$ref`` present -- :attr:`SchemaShape.REFERENCE`
2. ``properties`` present, type ``object`` -- :attr:`SchemaShape.OBJECT`
3. ``items`` present, type ``array`` -- :attr:`SchemaShape.ARRAY`
4. ``allOf`` / ``oneOf`` / ``anyOf`` present -- :attr:`SchemaShape.COMPOSITION`
5. anything else -- :attr:`SchemaShape.PRIMITIVE`

References are never dereferenced: a ``$ref`` renders as the referenced
name and its example is a ``"Reference to <name>"`` placeholder.  This keeps
recursion bounded at every reference, including cyclic ones.

Inline nesting has no such boundary, so both walks stop descending once
they pass *max_depth* levels.  A cut-off node renders as an ``any`` leaf
marked ``truncated`` and synthesizes ``None``.

Neither operation raises.  Malformed or partial schemas fall through to the
primitive case, which always produces something to show.
"""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from typing import Any, Optional, Union

from specview.models import SchemaObject
from specview.parser.extractor import extract_schema
from specview.schema.rendering import (
    ArrayRendering,
    CompositionKind,
    CompositionRendering,
    ObjectRendering,
    PrimitiveRendering,
    PropertyRow,
    RefRendering,
    SchemaRendering,
)

DEFAULT_MAX_DEPTH = 32

SchemaLike = Union[SchemaObject, Mapping[str, Any], None]


class SchemaShape(str, enum.Enum):
    """Which of the five cases a schema falls into."""

    REFERENCE = "reference"
    OBJECT = "object"
    ARRAY = "array"
    COMPOSITION = "composition"
    PRIMITIVE = "primitive"


def classify(schema: SchemaObject) -> SchemaShape:
    """Return the shape case that governs *schema*."""
    if schema.ref:
        return SchemaShape.REFERENCE
    if schema.properties is not None and schema.type == "object":
        return SchemaShape.OBJECT
    if schema.items is not None and schema.type == "array":
        return SchemaShape.ARRAY
    if composition_of(schema) is not None:
        return SchemaShape.COMPOSITION
    return SchemaShape.PRIMITIVE


def composition_of(
    schema: SchemaObject,
) -> Optional[tuple[CompositionKind, list[SchemaObject]]]:
    """Return the governing composition operator and its members.

    When a schema declares more than one operator, ``allOf`` wins over
    ``oneOf``, which wins over ``anyOf``.
    """
    if schema.all_of is not None:
        return CompositionKind.ALL_OF, schema.all_of
    if schema.one_of is not None:
        return CompositionKind.ONE_OF, schema.one_of
    if schema.any_of is not None:
        return CompositionKind.ANY_OF, schema.any_of
    return None


def ref_name(ref: str) -> str:
    """The last ``/``-separated segment of a reference string.

    >>> ref_name("#/components/schemas/Widget")
    'Widget'
    """
    return ref.rsplit("/", 1)[-1]


def type_label(schema: SchemaObject) -> str:
    """Short label for a schema: reference name, or type with format.

    >>> type_label(SchemaObject(type="string", format="email"))
    'string (email)'
    """
    if schema.ref:
        return ref_name(schema.ref)
    label = schema.type or "any"
    if schema.format:
        label += f" ({schema.format})"
    return label


def render_schema(schema: SchemaLike, max_depth: int = DEFAULT_MAX_DEPTH) -> SchemaRendering:
    """Produce the structural rendering of *schema*.

    Args:
        schema: The schema to render.  A raw mapping is converted with
            :func:`~specview.parser.extractor.extract_schema` first;
            ``None`` renders as an ``any`` leaf.
        max_depth: Number of nested levels rendered below *schema*.

    Returns:
        A :data:`~specview.schema.rendering.SchemaRendering`.

    Example::

        rendering = render_schema(document.components.schemas["Pet"])
        for row in rendering.rows:
            print(row.name, row.type_label, row.required)
    """
    return _render(_coerce(schema), 0, max_depth)


def _render(schema: SchemaObject, depth: int, max_depth: int) -> SchemaRendering:
    if depth > max_depth:
        return PrimitiveRendering(truncated=True)

    shape = classify(schema)

    if shape is SchemaShape.REFERENCE:
        return RefRendering(ref=schema.ref, name=ref_name(schema.ref))

    if shape is SchemaShape.OBJECT:
        return ObjectRendering(
            rows=[
                _property_row(name, prop, name in schema.required)
                for name, prop in schema.properties.items()
            ]
        )

    if shape is SchemaShape.ARRAY:
        return ArrayRendering(items=_render(schema.items, depth + 1, max_depth))

    if shape is SchemaShape.COMPOSITION:
        kind, members = composition_of(schema)
        return CompositionRendering(
            composition=kind,
            members=[_render(member, depth + 1, max_depth) for member in members],
        )

    return PrimitiveRendering(
        type=schema.type or "any",
        format=schema.format,
        enum=schema.enum,
    )


def _property_row(name: str, prop: SchemaObject, required: bool) -> PropertyRow:
    items_label = None
    if not prop.ref and prop.type == "array" and prop.items is not None:
        items_label = type_label(prop.items)

    return PropertyRow(
        name=name,
        type_label=type_label(prop),
        required=required,
        description=prop.description,
        enum=prop.enum,
        items_label=items_label,
        has_default=prop.has_default(),
        default=prop.default,
        has_example=prop.has_example(),
        example=prop.example,
    )


def synthesize_example(schema: SchemaLike, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """Synthesize an example value for *schema*.

    Precedence, first match wins:

    1. the schema's own ``example``, returned unchanged;
    2. a ``"Reference to <name>"`` placeholder for a ``$ref``;
    3. an object of property examples for an object shape;
    4. a one-element list of the items example for an array shape;
    5. the first ``enum`` value;
    6. the declared ``default``;
    7. a type-driven fallback: ``"user@example.com"`` for an email string,
       ``"string"`` for other strings, ``0`` for numbers and integers,
       ``True`` for booleans, ``None`` for everything else (composition
       nodes and untyped leaves included).

    Args:
        schema: The schema, a raw mapping, or ``None``.
        max_depth: Number of nested levels synthesized below *schema*.

    Returns:
        A JSON-compatible value (unless the document's own examples are
        not).
    """
    return _example(_coerce(schema), 0, max_depth)


def _example(schema: SchemaObject, depth: int, max_depth: int) -> Any:
    if depth > max_depth:
        return None

    if schema.has_example():
        return schema.example

    shape = classify(schema)

    if shape is SchemaShape.REFERENCE:
        return f"Reference to {ref_name(schema.ref)}"

    if shape is SchemaShape.OBJECT:
        return {
            name: _example(prop, depth + 1, max_depth)
            for name, prop in schema.properties.items()
        }

    if shape is SchemaShape.ARRAY:
        return [_example(schema.items, depth + 1, max_depth)]

    if schema.enum:
        return schema.enum[0]

    if schema.has_default():
        return schema.default

    return _fallback_example(schema)


def _fallback_example(schema: SchemaObject) -> Any:
    if schema.type == "string":
        return "user@example.com" if schema.format == "email" else "string"
    if schema.type in ("number", "integer"):
        return 0
    if schema.type == "boolean":
        return True
    return None


def example_json(schema: SchemaLike, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """The synthesized example as pretty-printed JSON text."""
    return json.dumps(
        synthesize_example(schema, max_depth),
        indent=2,
        ensure_ascii=False,
        default=str,
    )


def _coerce(schema: SchemaLike) -> SchemaObject:
    if isinstance(schema, SchemaObject):
        return schema
    return extract_schema(dict(schema) if isinstance(schema, Mapping) else None)
