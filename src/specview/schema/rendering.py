"""Structural renderings produced by :func:`~specview.schema.render_schema`.

A rendering is a display-ready description of a schema's shape.  It is a
tagged union on ``kind``:

* :class:`RefRendering` -- a named pointer (``kind="ref"``).
* :class:`ObjectRendering` -- one :class:`PropertyRow` per property.
* :class:`ArrayRendering` -- "array of" wrapping the items rendering.
* :class:`CompositionRendering` -- allOf/oneOf/anyOf with member renderings.
* :class:`PrimitiveRendering` -- declared type, format, and enum values.

Renderings are plain data; turning them into terminal output is the job of
:mod:`specview.commands.browse`.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field


class CompositionKind(str, enum.Enum):
    """The operator combining the members of a composed schema.

    The operator is advisory: it is shown to the reader but never enforced.
    """

    ALL_OF = "allOf"
    ONE_OF = "oneOf"
    ANY_OF = "anyOf"

    @property
    def summary(self) -> str:
        """Reader-facing sentence introducing the members."""
        return _COMPOSITION_SUMMARIES[self]


_COMPOSITION_SUMMARIES = {
    CompositionKind.ALL_OF: "Must match all of:",
    CompositionKind.ONE_OF: "Must match one of:",
    CompositionKind.ANY_OF: "Can match any of:",
}


class RefRendering(BaseModel):
    """A ``$ref`` shown by the referenced name only; the target is never fetched."""

    kind: Literal["ref"] = "ref"
    ref: str
    name: str


class PropertyRow(BaseModel):
    """One property of an object schema.

    ``type_label`` is the reference name when the property is a ``$ref``,
    otherwise the declared type (``"any"`` when undeclared) with the format
    in parentheses.  ``default`` and ``example`` are only meaningful when
    the matching ``has_*`` flag is set.
    """

    name: str
    type_label: str
    required: bool = False
    description: Optional[str] = None
    enum: Optional[list[Any]] = None
    items_label: Optional[str] = None
    has_default: bool = False
    default: Any = None
    has_example: bool = False
    example: Any = None


class ObjectRendering(BaseModel):
    kind: Literal["object"] = "object"
    rows: list[PropertyRow] = Field(default_factory=list)


class ArrayRendering(BaseModel):
    kind: Literal["array"] = "array"
    items: SchemaRendering


class CompositionRendering(BaseModel):
    kind: Literal["composition"] = "composition"
    composition: CompositionKind
    members: list[SchemaRendering] = Field(default_factory=list)


class PrimitiveRendering(BaseModel):
    """A leaf.  ``truncated`` marks a node cut off by the depth limit."""

    kind: Literal["primitive"] = "primitive"
    type: str = "any"
    format: Optional[str] = None
    enum: Optional[list[Any]] = None
    truncated: bool = False


SchemaRendering = Annotated[
    Union[
        RefRendering,
        ObjectRendering,
        ArrayRendering,
        CompositionRendering,
        PrimitiveRendering,
    ],
    Field(discriminator="kind"),
]

ArrayRendering.model_rebuild()
CompositionRendering.model_rebuild()
