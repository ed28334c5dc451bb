"""Navigation tree -- group a document's operations, schemas, and security schemes.

Typical usage::

    from specview.navigation import build_tree, find_node, list_operations

    root = build_tree(document)
    node = find_node(root, "get-/pets")

Sub-modules:

* :mod:`~specview.navigation.builder` -- operation listing, tree
  construction, and traversal.
* :mod:`~specview.navigation.tree` -- the node and payload types.
"""

from specview.navigation.builder import (
    build_tree,
    find_node,
    iter_nodes,
    list_operations,
    tag_descriptions,
)
from specview.navigation.tree import (
    EndpointNode,
    FolderNode,
    NodeKind,
    OverviewPayload,
    RootNode,
    SchemaEntry,
    SchemaNode,
    SecurityEntry,
    SecurityNode,
    TreeNode,
)

__all__ = [
    "build_tree",
    "find_node",
    "iter_nodes",
    "list_operations",
    "tag_descriptions",
    "EndpointNode",
    "FolderNode",
    "NodeKind",
    "OverviewPayload",
    "RootNode",
    "SchemaEntry",
    "SchemaNode",
    "SecurityEntry",
    "SecurityNode",
    "TreeNode",
]
