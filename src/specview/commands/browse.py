"""Browse commands -- print parts of a loaded OpenAPI document.

Registered directly on the root app:

* ``specview tree`` -- the navigation tree.
* ``specview overview`` -- API metadata, servers, and tags.
* ``specview operations`` -- the flat operation list.
* ``specview operation ID`` -- one operation with its parameters, request
  body, and responses.
* ``specview schema NAME`` -- one reusable schema.
* ``specview security NAME`` -- one security scheme.

Every command loads the document named by the resolved configuration
(``--spec``, ``SPECVIEW_SPEC``, ``./specview.json``, or the user config)
into the :class:`~specview.context.SpecContext` stored on ``ctx.obj``.
Schemas are shown as an outline of their structural rendering followed by
the synthesized example.  With ``--json`` every command emits a single JSON
document instead.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn, Optional

import typer
from rich.text import Text
from rich.tree import Tree

from specview.exceptions import NotFoundError, SpecviewError
from specview.exit_codes import EXIT_INVALID_USAGE
from specview.models import Document, Header, MediaType, Operation, SchemaObject, ViewerConfig
from specview.navigation import NodeKind, TreeNode
from specview.output import (
    OutputFormat,
    error,
    format_response,
    get_output,
    info,
    print_data,
    print_table,
)
from specview.schema import (
    ArrayRendering,
    CompositionRendering,
    ObjectRendering,
    PropertyRow,
    RefRendering,
    SchemaRendering,
    example_json,
    render_schema,
    synthesize_example,
    type_label,
)

# (label, children) pairs, printed as a Rich tree or as indented text.
Outline = tuple[str, list[Any]]


def _load(ctx: typer.Context) -> tuple[Document, ViewerConfig]:
    """Load the configured document into the context on ``ctx.obj``.

    Raises:
        typer.Exit: With code 2 when no document is configured, or with
            the error's own exit code when loading fails.
    """
    config: ViewerConfig = ctx.obj["config"]
    if not config.default_spec:
        error(
            "No document to browse. Pass --spec, set SPECVIEW_SPEC, "
            "or add default_spec to specview.json."
        )
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    context = ctx.obj["context"]
    try:
        context.load_source(config.default_spec)
    except SpecviewError as exc:
        _fail(exc)
    return context.document, config


def _fail(exc: SpecviewError) -> NoReturn:
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


# ---------------------------------------------------------------------------
# Outline printing
# ---------------------------------------------------------------------------


def _print_outline(outline: Outline) -> None:
    get_output().print_renderable(_rich_tree(outline), "\n".join(_plain_lines(outline)))


def _rich_tree(outline: Outline, parent: Optional[Tree] = None) -> Tree:
    label, children = outline
    if parent is None:
        node = Tree(Text(label, style="bold"))
    else:
        node = parent.add(Text(label))
    for child in children:
        _rich_tree(child, node)
    return node


def _plain_lines(outline: Outline, depth: int = 0) -> list[str]:
    label, children = outline
    lines = ["  " * depth + label]
    for child in children:
        lines.extend(_plain_lines(child, depth + 1))
    return lines


def _node_outline(node: TreeNode) -> Outline:
    label = node.label
    if node.kind == NodeKind.ENDPOINT and node.method is not None:
        label = f"{label}  [{node.id}]"
    return label, [_node_outline(child) for child in node.children]


def _node_json(node: TreeNode) -> dict[str, Any]:
    return {
        "id": node.id,
        "label": node.label,
        "kind": node.kind.value,
        "children": [_node_json(child) for child in node.children],
    }


def _rendering_outline(rendering: SchemaRendering) -> Outline:
    if isinstance(rendering, RefRendering):
        return f"{rendering.name} (reference)", []
    if isinstance(rendering, ObjectRendering):
        return "object", [(_row_label(row), []) for row in rendering.rows]
    if isinstance(rendering, ArrayRendering):
        return "Array of", [_rendering_outline(rendering.items)]
    if isinstance(rendering, CompositionRendering):
        return rendering.composition.summary, [
            _rendering_outline(member) for member in rendering.members
        ]

    label = rendering.type
    if rendering.format:
        label += f" ({rendering.format})"
    if rendering.enum:
        label += " enum: " + ", ".join(json.dumps(v, default=str) for v in rendering.enum)
    if rendering.truncated:
        label += " [depth limit reached]"
    return label, []


def _row_label(row: PropertyRow) -> str:
    label = f"{row.name}: {row.type_label}"
    if row.required:
        label += " (required)"
    if row.items_label:
        label += f", array of {row.items_label}"
    if row.enum:
        label += ", enum: " + ", ".join(json.dumps(v, default=str) for v in row.enum)
    if row.has_default:
        label += f", default: {json.dumps(row.default, default=str)}"
    if row.has_example:
        label += f", example: {json.dumps(row.example, default=str)}"
    if row.description:
        label += f" - {row.description}"
    return label


def _show_schema(title: str, schema: SchemaObject, max_depth: int) -> None:
    """Print the rendering outline and the example of *schema*."""
    label, children = _rendering_outline(render_schema(schema, max_depth))
    _print_outline((f"{title}: {label}", children))

    get_output().print_json_text(example_json(schema, max_depth))


def _schema_json(schema: Optional[SchemaObject], max_depth: int) -> Optional[dict[str, Any]]:
    if schema is None:
        return None
    return {
        "rendering": render_schema(schema, max_depth).model_dump(mode="json"),
        "example": synthesize_example(schema, max_depth),
    }


def _is_json() -> bool:
    return get_output().format == OutputFormat.JSON


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def tree_command(ctx: typer.Context) -> None:
    """Show the navigation tree.

    Operations are grouped by tag, followed by the reusable schemas and the
    security schemes.  Operation ids are shown in brackets; pass one to
    ``specview operation``.

    Example::

        specview --spec petstore.yaml tree
        specview --spec petstore.yaml --json tree
    """
    _load(ctx)
    root = ctx.obj["context"].tree()

    if _is_json():
        format_response(_node_json(root))
        return
    _print_outline(_node_outline(root))


def overview_command(ctx: typer.Context) -> None:
    """Show API metadata: title, version, description, contact, servers, and tags.

    Example::

        specview --spec petstore.yaml overview
    """
    document, _ = _load(ctx)
    api = document.info

    data: dict[str, Any] = {
        "title": api.title,
        "version": api.version,
        "openapi_version": document.openapi,
        "description": api.description or "-",
        "operations": len(ctx.obj["context"].operations()),
    }
    if api.terms_of_service:
        data["terms_of_service"] = api.terms_of_service
    if api.contact:
        data["contact"] = api.contact.model_dump(exclude_none=True)
    if api.license:
        data["license"] = api.license.model_dump(exclude_none=True)
    if document.servers:
        data["servers"] = [s.model_dump(exclude_none=True) for s in document.servers]
    if document.tags:
        data["tags"] = [t.model_dump(exclude_none=True) for t in document.tags]
    if document.components.schemas:
        data["schemas"] = list(document.components.schemas)
    if document.components.security_schemes:
        data["security_schemes"] = list(document.components.security_schemes)

    format_response(data)


def operations_command(ctx: typer.Context) -> None:
    """List every operation in document order.

    Example::

        specview --spec petstore.yaml operations
        specview --spec petstore.yaml --plain operations | cut -f1
    """
    document, _ = _load(ctx)
    operations = ctx.obj["context"].operations()

    if not operations:
        info("No operations defined in this document.")
        return

    headers = ["ID", "Method", "Path", "Categories", "Summary", "Deprecated"]
    rows: list[list[str]] = []
    for op in operations:
        rows.append([
            op.id,
            op.method.value.upper(),
            op.path,
            ", ".join(op.categories) or "-",
            op.operation.summary or "-",
            "Yes" if op.operation.deprecated else "",
        ])

    print_table(headers, rows, title=f"{document.info.title} -- Operations ({len(rows)})")


def operation_command(
    ctx: typer.Context,
    operation_id: str = typer.Argument(help="Operation id, e.g. 'get-/pets'."),
) -> None:
    """Show one operation: parameters, request body, and responses.

    Request bodies and responses are shown as a schema outline followed by
    a synthesized example, then any examples the document declares for
    their media types.  Response headers are listed in a table.

    Args:
        operation_id: The ``<verb>-<path>`` id listed by ``specview
            operations`` and ``specview tree``.

    Example::

        specview --spec petstore.yaml operation get-/pets
        specview --spec petstore.yaml --json operation post-/pets
    """
    _, config = _load(ctx)
    matches = [op for op in ctx.obj["context"].operations() if op.id == operation_id]
    if not matches:
        _fail(NotFoundError(f"No operation with id '{operation_id}'"))
    descriptor = matches[0]
    operation = descriptor.operation
    depth = config.max_depth

    header: dict[str, Any] = {
        "id": descriptor.id,
        "method": descriptor.method.value.upper(),
        "path": descriptor.path,
        "summary": operation.summary or "-",
        "categories": descriptor.categories,
        "deprecated": operation.deprecated,
    }
    if operation.operation_id:
        header["operation_id"] = operation.operation_id
    if operation.description:
        header["description"] = operation.description

    if _is_json():
        format_response(_operation_json(header, operation, depth))
        return

    format_response(header)
    _show_parameters(operation)

    body = operation.request_body
    if body is not None:
        title = "Request body"
        if body.content_types:
            title += f" ({', '.join(body.content_types)})"
        if body.required:
            title += " required"
        print_data(title)
        if body.description:
            print_data(body.description)
        if body.primary_schema is not None:
            _show_schema("Body", body.primary_schema, depth)
        _show_examples(body.content)

    for status, response in operation.responses.items():
        print_data(f"Response {status}: {response.description or '-'}")
        if response.primary_schema is not None:
            _show_schema(status, response.primary_schema, depth)
        _show_examples(response.content)
        _show_headers(status, response.headers)


def _show_parameters(operation: Operation) -> None:
    if not operation.parameters:
        return
    rows = [
        [
            param.name,
            param.location.value,
            type_label(param.schema_) if param.schema_ is not None else "any",
            "Yes" if param.required else "",
            param.description or "-",
        ]
        for param in operation.parameters
    ]
    print_table(["Name", "In", "Type", "Required", "Description"], rows, title="Parameters")


def _content_examples(content: dict[str, MediaType]) -> list[dict[str, Any]]:
    """Examples declared on the media types, the unnamed ``example`` first."""
    examples: list[dict[str, Any]] = []
    for content_type, media in content.items():
        if media.example is not None:
            examples.append(
                {"content_type": content_type, "name": None, "summary": None, "value": media.example}
            )
        for name, example in media.examples.items():
            examples.append({
                "content_type": content_type,
                "name": name,
                "summary": example.summary,
                "value": example.value,
            })
    return examples


def _show_examples(content: dict[str, MediaType]) -> None:
    for example in _content_examples(content):
        title = "Example"
        if example["name"]:
            title += f" '{example['name']}'"
        title += f" ({example['content_type']})"
        if example["summary"]:
            title += f" - {example['summary']}"
        print_data(title)
        get_output().print_json_text(
            json.dumps(example["value"], indent=2, ensure_ascii=False, default=str)
        )


def _header_type(header: Header) -> str:
    return type_label(header.schema_) if header.schema_ is not None else "any"


def _show_headers(status: str, headers: dict[str, Header]) -> None:
    if not headers:
        return
    rows = [
        [name, _header_type(header), header.description or "-"]
        for name, header in headers.items()
    ]
    print_table(["Header", "Type", "Description"], rows, title=f"Response {status} headers")


def _operation_json(header: dict[str, Any], operation: Operation, depth: int) -> dict[str, Any]:
    data = dict(header)
    data["parameters"] = [
        {
            "name": param.name,
            "in": param.location.value,
            "required": param.required,
            "type": type_label(param.schema_) if param.schema_ is not None else "any",
            "description": param.description,
        }
        for param in operation.parameters
    ]

    body = operation.request_body
    if body is not None:
        data["request_body"] = {
            "description": body.description,
            "required": body.required,
            "content_types": body.content_types,
            "schema": _schema_json(body.primary_schema, depth),
            "examples": _content_examples(body.content),
        }

    data["responses"] = {
        status: {
            "description": response.description,
            "content_types": response.content_types,
            "schema": _schema_json(response.primary_schema, depth),
            "examples": _content_examples(response.content),
            "headers": {
                name: {"type": _header_type(header), "description": header.description}
                for name, header in response.headers.items()
            },
        }
        for status, response in operation.responses.items()
    }
    return data


def schema_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Schema name under components.schemas."),
) -> None:
    """Show one reusable schema as an outline and a synthesized example.

    Args:
        name: Key of the schema in ``components.schemas``.

    Example::

        specview --spec petstore.yaml schema Pet
    """
    document, config = _load(ctx)
    schema = (document.components.schemas or {}).get(name)
    if schema is None:
        _fail(NotFoundError(f"No schema named '{name}'"))

    if _is_json():
        data = {"name": name}
        data.update(_schema_json(schema, config.max_depth))
        format_response(data)
        return

    if schema.description:
        print_data(schema.description)
    _show_schema(name, schema, config.max_depth)


def security_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Scheme name under components.securitySchemes."),
) -> None:
    """Show one security scheme, including OAuth2 flows and their scopes.

    Args:
        name: Key of the scheme in ``components.securitySchemes``.

    Example::

        specview --spec petstore.yaml security petstore_auth
    """
    document, _ = _load(ctx)
    scheme = (document.components.security_schemes or {}).get(name)
    if scheme is None:
        _fail(NotFoundError(f"No security scheme named '{name}'"))

    data = scheme.model_dump(mode="json", exclude_none=True)
    if _is_json() or not scheme.flows:
        format_response(data)
        return

    data.pop("flows")
    format_response(data)

    rows: list[list[str]] = []
    for flow_name, flow in scheme.flows.items():
        url = flow.authorization_url or flow.token_url or "-"
        if not flow.scopes:
            rows.append([flow_name, url, "-", "-"])
        for scope, description in flow.scopes.items():
            rows.append([flow_name, url, scope, description or "-"])
    print_table(["Flow", "URL", "Scope", "Description"], rows, title="OAuth2 flows")
