"""Schema interpreter -- structural rendering and example synthesis.

Both operations take a :class:`~specview.models.SchemaObject` (or a raw
mapping, or ``None``) and never raise.

Typical usage::

    from specview.schema import render_schema, synthesize_example

    schema = document.components.schemas["Pet"]
    rendering = render_schema(schema)
    example = synthesize_example(schema)

Sub-modules:

* :mod:`~specview.schema.interpreter` -- shape classification and the two
  recursive walks.
* :mod:`~specview.schema.rendering` -- the rendering data types.
"""

from specview.schema.interpreter import (
    DEFAULT_MAX_DEPTH,
    SchemaShape,
    classify,
    example_json,
    ref_name,
    render_schema,
    synthesize_example,
    type_label,
)
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

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "SchemaShape",
    "classify",
    "example_json",
    "ref_name",
    "render_schema",
    "synthesize_example",
    "type_label",
    "ArrayRendering",
    "CompositionKind",
    "CompositionRendering",
    "ObjectRendering",
    "PrimitiveRendering",
    "PropertyRow",
    "RefRendering",
    "SchemaRendering",
]
