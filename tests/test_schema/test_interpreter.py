"""Tests for specview.schema -- shape classification, rendering, example synthesis."""

from __future__ import annotations

import json
from typing import Any

import pytest

from specview.models import Document, SchemaObject
from specview.parser.extractor import extract_schema
from specview.schema import (
    ArrayRendering,
    CompositionKind,
    CompositionRendering,
    ObjectRendering,
    PrimitiveRendering,
    RefRendering,
    SchemaShape,
    classify,
    example_json,
    ref_name,
    render_schema,
    synthesize_example,
    type_label,
)


def _nested_arrays(levels: int) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "string"}
    for _ in range(levels):
        schema = {"type": "array", "items": schema}
    return schema


def _nested_objects(levels: int) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "integer"}
    for _ in range(levels):
        schema = {"type": "object", "properties": {"child": schema}}
    return schema


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassify:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ({"$ref": "#/components/schemas/Pet"}, SchemaShape.REFERENCE),
            ({"type": "object", "properties": {}}, SchemaShape.OBJECT),
            ({"properties": {"a": {}}}, SchemaShape.PRIMITIVE),
            ({"type": "array", "items": {"type": "string"}}, SchemaShape.ARRAY),
            ({"items": {"type": "string"}}, SchemaShape.PRIMITIVE),
            ({"allOf": [{"type": "string"}]}, SchemaShape.COMPOSITION),
            ({"oneOf": []}, SchemaShape.COMPOSITION),
            ({"type": "string"}, SchemaShape.PRIMITIVE),
            ({}, SchemaShape.PRIMITIVE),
            ({"type": "object"}, SchemaShape.PRIMITIVE),
            ({"type": "array"}, SchemaShape.PRIMITIVE),
        ],
    )
    def test_shapes(self, raw: dict[str, Any], expected: SchemaShape) -> None:
        assert classify(extract_schema(raw)) == expected

    def test_ref_wins_over_everything(self) -> None:
        schema = extract_schema({
            "$ref": "#/components/schemas/Pet",
            "type": "object",
            "properties": {"a": {"type": "string"}},
        })
        assert classify(schema) == SchemaShape.REFERENCE

    def test_properties_with_conflicting_type_is_not_object(self) -> None:
        schema = extract_schema({"type": "string", "properties": {"a": {}}})
        assert classify(schema) == SchemaShape.PRIMITIVE

    def test_object_wins_over_composition(self) -> None:
        schema = extract_schema({
            "type": "object",
            "properties": {"a": {"type": "string"}},
            "allOf": [{"type": "string"}],
        })
        assert classify(schema) == SchemaShape.OBJECT


class TestLabels:
    def test_ref_name(self) -> None:
        assert ref_name("#/components/schemas/Widget") == "Widget"
        assert ref_name("Widget") == "Widget"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ({"type": "string"}, "string"),
            ({"type": "string", "format": "date-time"}, "string (date-time)"),
            ({}, "any"),
            ({"format": "uuid"}, "any (uuid)"),
            ({"$ref": "#/components/schemas/Pet", "type": "object"}, "Pet"),
        ],
    )
    def test_type_label(self, raw: dict[str, Any], expected: str) -> None:
        assert type_label(extract_schema(raw)) == expected


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRenderSchema:
    def test_reference_shows_pointer_name(self) -> None:
        rendering = render_schema({"$ref": "#/components/schemas/Widget"})
        assert isinstance(rendering, RefRendering)
        assert rendering.name == "Widget"
        assert rendering.ref == "#/components/schemas/Widget"

    def test_object_rows_mark_required(self) -> None:
        rendering = render_schema({
            "type": "object",
            "properties": {
                "age": {"type": "integer"},
                "email": {"type": "string", "format": "email"},
            },
            "required": ["age"],
        })
        assert isinstance(rendering, ObjectRendering)
        rows = {row.name: row for row in rendering.rows}
        assert rows["age"].required is True
        assert rows["email"].required is False
        assert rows["email"].type_label == "string (email)"

    def test_object_rows_in_declaration_order(self) -> None:
        rendering = render_schema({
            "properties": {"zeta": {}, "alpha": {}, "mid": {}},
        })
        assert isinstance(rendering, ObjectRendering)
        assert [row.name for row in rendering.rows] == ["zeta", "alpha", "mid"]

    def test_row_details(self) -> None:
        rendering = render_schema({
            "type": "object",
            "properties": {
                "status": {
                    "type": "string",
                    "description": "Lifecycle state",
                    "enum": ["on", "off"],
                    "default": "on",
                },
                "count": {"type": "integer", "example": 0},
                "tags": {"type": "array", "items": {"$ref": "#/components/schemas/Tag"}},
                "owner": {"$ref": "#/components/schemas/User"},
            },
        })
        assert isinstance(rendering, ObjectRendering)
        rows = {row.name: row for row in rendering.rows}

        status = rows["status"]
        assert status.description == "Lifecycle state"
        assert status.enum == ["on", "off"]
        assert status.has_default is True
        assert status.default == "on"
        assert status.has_example is False

        assert rows["count"].has_example is True
        assert rows["count"].example == 0

        assert rows["tags"].type_label == "array"
        assert rows["tags"].items_label == "Tag"

        assert rows["owner"].type_label == "User"
        assert rows["owner"].items_label is None

    @pytest.mark.parametrize("raw", [{"properties": {"a": {"type": "string"}}}, {"items": {"type": "string"}}])
    def test_typeless_structure_renders_as_any(self, raw: dict[str, Any]) -> None:
        rendering = render_schema(raw)
        assert isinstance(rendering, PrimitiveRendering)
        assert rendering.type == "any"

    def test_array_renders_items(self) -> None:
        rendering = render_schema({"type": "array", "items": {"type": "string", "format": "uuid"}})
        assert isinstance(rendering, ArrayRendering)
        assert isinstance(rendering.items, PrimitiveRendering)
        assert rendering.items.type == "string"
        assert rendering.items.format == "uuid"

    @pytest.mark.parametrize(
        ("key", "kind", "summary"),
        [
            ("allOf", CompositionKind.ALL_OF, "Must match all of:"),
            ("oneOf", CompositionKind.ONE_OF, "Must match one of:"),
            ("anyOf", CompositionKind.ANY_OF, "Can match any of:"),
        ],
    )
    def test_composition(self, key: str, kind: CompositionKind, summary: str) -> None:
        rendering = render_schema({key: [{"$ref": "#/components/schemas/A"}, {"type": "string"}]})
        assert isinstance(rendering, CompositionRendering)
        assert rendering.composition == kind
        assert rendering.composition.summary == summary
        assert isinstance(rendering.members[0], RefRendering)
        assert isinstance(rendering.members[1], PrimitiveRendering)

    def test_all_of_checked_before_one_of(self) -> None:
        rendering = render_schema({"oneOf": [{}], "allOf": [{}, {}]})
        assert isinstance(rendering, CompositionRendering)
        assert rendering.composition == CompositionKind.ALL_OF
        assert len(rendering.members) == 2

    def test_primitive(self) -> None:
        rendering = render_schema({"type": "string", "enum": ["a", "b"]})
        assert isinstance(rendering, PrimitiveRendering)
        assert rendering.type == "string"
        assert rendering.enum == ["a", "b"]
        assert rendering.truncated is False

    def test_untyped_primitive_is_any(self) -> None:
        rendering = render_schema({"description": "whatever"})
        assert isinstance(rendering, PrimitiveRendering)
        assert rendering.type == "any"

    def test_none_renders_any(self) -> None:
        rendering = render_schema(None)
        assert isinstance(rendering, PrimitiveRendering)
        assert rendering.type == "any"

    def test_accepts_schema_object(self) -> None:
        rendering = render_schema(SchemaObject(type="boolean"))
        assert isinstance(rendering, PrimitiveRendering)
        assert rendering.type == "boolean"

    def test_depth_limit_truncates(self) -> None:
        rendering = render_schema(_nested_arrays(5), max_depth=2)
        assert isinstance(rendering, ArrayRendering)
        assert isinstance(rendering.items, ArrayRendering)
        assert isinstance(rendering.items.items, ArrayRendering)
        leaf = rendering.items.items.items
        assert isinstance(leaf, PrimitiveRendering)
        assert leaf.truncated is True
        assert leaf.type == "any"

    def test_default_depth_handles_deep_nesting(self) -> None:
        rendering = render_schema(_nested_arrays(200))
        depth = 0
        while isinstance(rendering, ArrayRendering):
            rendering = rendering.items
            depth += 1
        assert isinstance(rendering, PrimitiveRendering)
        assert rendering.truncated is True
        assert depth == 33

    def test_rendering_serialises_with_kind_tag(self) -> None:
        data = render_schema({"type": "array", "items": {"$ref": "#/a/B"}}).model_dump(mode="json")
        assert data["kind"] == "array"
        assert data["items"] == {"kind": "ref", "ref": "#/a/B", "name": "B"}

    def test_never_raises_on_odd_input(self) -> None:
        for raw in ({"type": 1}, {"properties": None}, {"items": "x"}, {"allOf": "x"}, {"enum": 3}):
            render_schema(raw)
            synthesize_example(raw)


# ---------------------------------------------------------------------------
# Example synthesis
# ---------------------------------------------------------------------------


class TestSynthesizeExample:
    @pytest.mark.parametrize(
        "value",
        [{"id": 1}, [1, 2], "literal", 0, False, None, ""],
    )
    def test_explicit_example_returned_unchanged(self, value: Any) -> None:
        raw = {
            "type": "object",
            "properties": {"id": {"type": "integer"}},
            "example": value,
        }
        assert synthesize_example(raw) == value

    def test_explicit_example_on_reference(self) -> None:
        assert synthesize_example({"$ref": "#/components/schemas/Pet", "example": "x"}) == "x"

    def test_reference_placeholder(self) -> None:
        assert synthesize_example({"$ref": "#/components/schemas/Widget"}) == "Reference to Widget"

    def test_reference_not_followed(self, petstore: Document) -> None:
        # NewPet is an object; the reference must not synthesise its shape.
        example = synthesize_example({"$ref": "#/components/schemas/NewPet"})
        assert example == "Reference to NewPet"
        assert not isinstance(example, dict)

    def test_object_scenario(self) -> None:
        raw = {
            "type": "object",
            "properties": {
                "age": {"type": "integer"},
                "email": {"type": "string", "format": "email"},
            },
            "required": ["age"],
        }
        assert synthesize_example(raw) == {"age": 0, "email": "user@example.com"}

    def test_enum_array_scenario(self) -> None:
        raw = {"type": "array", "items": {"type": "string", "enum": ["a", "b"]}}
        assert synthesize_example(raw) == ["a"]

    def test_enum_before_default(self) -> None:
        assert synthesize_example({"type": "string", "enum": ["x", "y"], "default": "y"}) == "x"

    def test_empty_enum_falls_through(self) -> None:
        assert synthesize_example({"type": "string", "enum": [], "default": "d"}) == "d"

    def test_default_used(self) -> None:
        assert synthesize_example({"type": "integer", "default": 42}) == 42

    def test_falsy_default_used(self) -> None:
        assert synthesize_example({"type": "boolean", "default": False}) is False

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ({"type": "string"}, "string"),
            ({"type": "string", "format": "email"}, "user@example.com"),
            ({"type": "string", "format": "date"}, "string"),
            ({"type": "integer"}, 0),
            ({"type": "number"}, 0),
            ({"type": "boolean"}, True),
            ({"type": "null"}, None),
            ({}, None),
            ({"type": "object"}, None),
        ],
    )
    def test_type_fallbacks(self, raw: dict[str, Any], expected: Any) -> None:
        assert synthesize_example(raw) == expected

    @pytest.mark.parametrize("raw", [{"properties": {"a": {"type": "string"}}}, {"items": {"type": "string"}}])
    def test_typeless_structure_yields_none(self, raw: dict[str, Any]) -> None:
        assert synthesize_example(raw) is None

    def test_composition_yields_none(self) -> None:
        assert synthesize_example({"oneOf": [{"type": "string"}, {"type": "integer"}]}) is None

    def test_nested_object_in_array(self) -> None:
        raw = {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "example": 7},
                    "owner": {"$ref": "#/components/schemas/User"},
                },
            },
        }
        assert synthesize_example(raw) == [{"id": 7, "owner": "Reference to User"}]

    def test_depth_limit_yields_none(self) -> None:
        assert synthesize_example(_nested_objects(3), max_depth=2) == {"child": {"child": {"child": None}}}

    def test_depth_limit_not_reached(self) -> None:
        assert synthesize_example(_nested_objects(2), max_depth=2) == {"child": {"child": 0}}

    def test_schema_object_input(self, petstore: Document) -> None:
        new_pet = (petstore.components.schemas or {})["NewPet"]
        assert synthesize_example(new_pet) == {
            "name": "string",
            "tag": "string",
            "status": "available",
            "owner_email": "user@example.com",
            "photo_urls": ["string"],
        }

    def test_example_json(self) -> None:
        text = example_json({"type": "object", "properties": {"n": {"type": "integer"}}})
        assert json.loads(text) == {"n": 0}
        assert text == '{\n  "n": 0\n}'

    def test_example_json_keeps_unicode(self) -> None:
        assert example_json({"type": "string", "example": "ä"}) == '"ä"'
