"""Build the navigation tree and the flat operation list from a Document.

**Operation listing**

Paths are visited in document order and, within a path, verbs in the
canonical :class:`~specview.models.HTTPMethod` order.  Each operation yields
an :class:`~specview.models.OperationDescriptor` with id ``"<verb>-<path>"``
and its categories: the declared tags, or ``["Untagged"]`` when the
operation declares none.

**Tree layout**

::

    root                      "<info.title>" or "API Documentation"
    ├── introduction          always present
    │   └── overview          the whole document
    ├── endpoints             when at least one category exists
    │   └── tag-<category>    first-appearance order
    │       └── <verb>-<path> "<VERB> <path>"
    ├── schemas               when components.schemas is declared
    │   └── schema-<name>
    └── security              when components.securitySchemes is declared
        └── security-<name>

An operation with several tags appears once under each of them.  Building
twice from the same document yields equal trees.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional

from specview.models import Document, HTTPMethod, OperationDescriptor
from specview.navigation.tree import (
    EndpointNode,
    FolderNode,
    OverviewPayload,
    RootNode,
    SchemaEntry,
    SchemaNode,
    SecurityEntry,
    SecurityNode,
    TreeNode,
)

UNTAGGED = "Untagged"
DEFAULT_ROOT_LABEL = "API Documentation"


# ---------------------------------------------------------------------------
# Operation listing
# ---------------------------------------------------------------------------


def list_operations(document: Document) -> list[OperationDescriptor]:
    """Flatten every (path, verb) pair into an ordered descriptor list.

    Example::

        for op in list_operations(document):
            print(op.method.value.upper(), op.path, op.categories)
    """
    descriptors: list[OperationDescriptor] = []
    for path, path_item in document.paths.items():
        for method in HTTPMethod:
            operation = path_item.operation(method)
            if operation is None:
                continue
            categories = list(operation.tags) if operation.tags is not None else [UNTAGGED]
            descriptors.append(
                OperationDescriptor(
                    id=f"{method.value}-{path}",
                    path=path,
                    method=method,
                    operation=operation,
                    categories=categories,
                )
            )
    return descriptors


def tag_descriptions(document: Document) -> dict[str, str]:
    """Map each top-level tag that has a description to that description."""
    return {tag.name: tag.description for tag in document.tags if tag.description}


# ---------------------------------------------------------------------------
# Tree construction
# ---------------------------------------------------------------------------


def build_tree(document: Document) -> RootNode:
    """Build the navigation tree for *document*.

    Args:
        document: A validated document from
            :func:`~specview.parser.loader.load_document`.

    Returns:
        The :class:`~specview.navigation.tree.RootNode`.  Its children are,
        in order, the introduction folder and, when non-empty, the
        endpoints, schemas and security folders.
    """
    children: list[TreeNode] = [_introduction_folder(document)]

    endpoints = _endpoints_folder(document)
    if endpoints.children:
        children.append(endpoints)

    if document.components.schemas is not None:
        children.append(_schemas_folder(document))

    if document.components.security_schemes is not None:
        children.append(_security_folder(document))

    return RootNode(
        id="root",
        label=document.info.title or DEFAULT_ROOT_LABEL,
        children=children,
    )


def _introduction_folder(document: Document) -> FolderNode:
    overview = EndpointNode(
        id="overview",
        label="Overview",
        payload=OverviewPayload(document=document),
    )
    return FolderNode(id="introduction", label="Introduction", children=[overview])


def _endpoints_folder(document: Document) -> FolderNode:
    groups: dict[str, list[EndpointNode]] = {}
    for descriptor in list_operations(document):
        node = EndpointNode(
            id=descriptor.id,
            label=f"{descriptor.method.value.upper()} {descriptor.path}",
            method=descriptor.method,
            payload=descriptor,
        )
        for category in descriptor.categories:
            groups.setdefault(category, []).append(node)

    descriptions = tag_descriptions(document)
    folders = [
        FolderNode(
            id=f"tag-{category}",
            label=category,
            description=descriptions.get(category),
            children=nodes,
        )
        for category, nodes in groups.items()
    ]
    return FolderNode(id="endpoints", label="Endpoints", children=folders)


def _schemas_folder(document: Document) -> FolderNode:
    schemas = document.components.schemas or {}
    return FolderNode(
        id="schemas",
        label="Schemas",
        children=[
            SchemaNode(
                id=f"schema-{name}",
                label=name,
                payload=SchemaEntry(name=name, schema=schema),
            )
            for name, schema in schemas.items()
        ],
    )


def _security_folder(document: Document) -> FolderNode:
    schemes = document.components.security_schemes or {}
    return FolderNode(
        id="security",
        label="Security",
        children=[
            SecurityNode(
                id=f"security-{name}",
                label=name,
                payload=SecurityEntry(name=name, scheme=scheme),
            )
            for name, scheme in schemes.items()
        ],
    )


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def iter_nodes(root: TreeNode) -> Iterator[TreeNode]:
    """Yield *root* and all its descendants in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_node(root: TreeNode, node_id: str) -> Optional[TreeNode]:
    """Return the first node with *node_id* in pre-order, or ``None``.

    Operations listed under several categories share an id; the first
    occurrence is returned.
    """
    for node in iter_nodes(root):
        if node.id == node_id:
            return node
    return None
