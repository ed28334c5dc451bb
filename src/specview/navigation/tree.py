"""Navigation tree node types.

A tree is built once per loaded :class:`~specview.models.Document` by
:func:`~specview.navigation.builder.build_tree` and is never mutated
afterwards, so every node model is frozen.

``TreeNode`` is a tagged union on ``kind``:

=========  ===================  =============================================
kind       model                payload
=========  ===================  =============================================
root       :class:`RootNode`    none
folder     :class:`FolderNode`  none (category folders carry a description)
endpoint   :class:`EndpointNode`  :class:`~specview.models.OperationDescriptor`
                                or :class:`OverviewPayload`
schema     :class:`SchemaNode`  :class:`SchemaEntry`
security   :class:`SecurityNode`  :class:`SecurityEntry`
=========  ===================  =============================================

Payloads point at the document's own objects; nothing is copied.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from specview.models import (
    Document,
    HTTPMethod,
    OperationDescriptor,
    SchemaObject,
    SecurityScheme,
)


class NodeKind(str, enum.Enum):
    ROOT = "root"
    FOLDER = "folder"
    ENDPOINT = "endpoint"
    SCHEMA = "schema"
    SECURITY = "security"


# --- Payloads ---


class OverviewPayload(BaseModel):
    """Payload of the ``overview`` endpoint: the whole document."""

    model_config = ConfigDict(frozen=True)

    type: Literal["overview"] = "overview"
    document: Document


class SchemaEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    schema_: SchemaObject = Field(alias="schema")


class SecurityEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    scheme: SecurityScheme


# --- Nodes ---


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    children: list[TreeNode] = Field(default_factory=list)


class RootNode(_Node):
    kind: Literal[NodeKind.ROOT] = NodeKind.ROOT


class FolderNode(_Node):
    kind: Literal[NodeKind.FOLDER] = NodeKind.FOLDER
    description: Optional[str] = None


class EndpointNode(_Node):
    """An operation, or the document overview.

    ``method`` is set for operations only.
    """

    kind: Literal[NodeKind.ENDPOINT] = NodeKind.ENDPOINT
    method: Optional[HTTPMethod] = None
    payload: Union[OperationDescriptor, OverviewPayload]


class SchemaNode(_Node):
    kind: Literal[NodeKind.SCHEMA] = NodeKind.SCHEMA
    payload: SchemaEntry


class SecurityNode(_Node):
    kind: Literal[NodeKind.SECURITY] = NodeKind.SECURITY
    payload: SecurityEntry


TreeNode = Annotated[
    Union[RootNode, FolderNode, EndpointNode, SchemaNode, SecurityNode],
    Field(discriminator="kind"),
]

for _model in (_Node, RootNode, FolderNode, EndpointNode, SchemaNode, SecurityNode):
    _model.model_rebuild()
