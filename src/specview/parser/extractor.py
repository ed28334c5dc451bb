"""Extract the typed document model from a parsed OpenAPI mapping.

This module walks a validated (but otherwise untrusted) OpenAPI mapping and
builds a :class:`~specview.models.Document`.  Only the loader's three
structural checks have run at this point, so every helper here is defensive:
sections of the wrong shape are skipped or defaulted rather than raised on.

``$ref`` pointers are **not** resolved.  A schema that is a reference keeps
its pointer string in :attr:`~specview.models.SchemaObject.ref`, and a
parameter that is only a reference (no ``name``/``in``) is skipped.

The public entry points are :func:`extract_document` and
:func:`extract_schema`.  Internally the work is split per section:

* ``_extract_info`` -- the ``info`` object (title, version, contact, license).
* ``_extract_servers`` -- the ``servers`` array.
* ``_extract_paths`` -- the ``paths`` object, one
  :class:`~specview.models.PathItem` per template.
* ``_extract_components`` -- ``components/schemas`` and
  ``components/securitySchemes``.
* ``_extract_tags`` -- the top-level ``tags`` array.

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they
share the same ``name`` and ``in`` values.
"""

from __future__ import annotations

from typing import Any, Optional

from specview.models import (
    APIInfo,
    Components,
    Contact,
    Document,
    ExampleObject,
    Header,
    HTTPMethod,
    License,
    MediaType,
    OAuthFlow,
    Operation,
    Parameter,
    ParameterLocation,
    PathItem,
    RequestBody,
    Response,
    SchemaObject,
    SecurityScheme,
    ServerInfo,
    TagInfo,
)

_COMPOSITION_KEYS = (("allOf", "all_of"), ("oneOf", "one_of"), ("anyOf", "any_of"))
_STRING_KEYS = ("format", "title", "description", "pattern")
_FLAG_KEYS = (("readOnly", "read_only"), ("writeOnly", "write_only"))


def extract_document(raw: dict[str, Any]) -> Document:
    """Build a :class:`~specview.models.Document` from a parsed mapping.

    Args:
        raw: A mapping that already passed
            :func:`~specview.parser.loader.validate_document`.

    Returns:
        The typed document.  Path, component, and tag order follow the
        source mapping.
    """
    return Document(
        openapi=str(raw.get("openapi")),
        info=_extract_info(raw.get("info")),
        servers=_extract_servers(raw.get("servers")),
        paths=_extract_paths(raw.get("paths")),
        components=_extract_components(raw.get("components")),
        tags=_extract_tags(raw.get("tags")),
        security=_extract_security_requirements(raw.get("security")) or [],
    )


def _extract_info(info: Any) -> APIInfo:
    """Extract API metadata from the ``info`` object.

    Missing optional fields default to ``None``; a missing title or version
    becomes an empty string.
    """
    if not isinstance(info, dict):
        return APIInfo()

    contact = info.get("contact")
    license_info = info.get("license")

    return APIInfo(
        title=_str_or_none(info.get("title")) or "",
        version=_str_or_none(info.get("version")) or "",
        description=_str_or_none(info.get("description")),
        terms_of_service=_str_or_none(info.get("termsOfService")),
        contact=Contact(
            name=_str_or_none(contact.get("name")),
            email=_str_or_none(contact.get("email")),
            url=_str_or_none(contact.get("url")),
        )
        if isinstance(contact, dict)
        else None,
        license=License(
            name=_str_or_none(license_info.get("name")),
            url=_str_or_none(license_info.get("url")),
        )
        if isinstance(license_info, dict)
        else None,
    )


def _extract_servers(servers: Any) -> list[ServerInfo]:
    """Extract server entries, skipping anything that is not an object."""
    if not isinstance(servers, list):
        return []

    return [
        ServerInfo(
            url=_str_or_none(server.get("url")) or "/",
            description=_str_or_none(server.get("description")),
        )
        for server in servers
        if isinstance(server, dict)
    ]


def _extract_tags(tags: Any) -> list[TagInfo]:
    if not isinstance(tags, list):
        return []
    return [
        TagInfo(name=str(tag["name"]), description=_str_or_none(tag.get("description")))
        for tag in tags
        if isinstance(tag, dict) and tag.get("name") is not None
    ]


def _extract_paths(paths: Any) -> dict[str, PathItem]:
    """Extract every path item, preserving the document's path order."""
    if not isinstance(paths, dict):
        return {}

    result: dict[str, PathItem] = {}
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        result[str(path)] = _extract_path_item(path_item)
    return result


def _extract_path_item(path_item: dict[str, Any]) -> PathItem:
    """Extract one path item and the operations of every recognised verb.

    Path-level parameters are kept on the path item and also merged into
    each operation's parameter list.
    """
    path_params = path_item.get("parameters")
    if not isinstance(path_params, list):
        path_params = []

    operations: dict[str, Operation] = {}
    for method in HTTPMethod:
        operation = path_item.get(method.value)
        if not isinstance(operation, dict):
            continue
        operations[method.value] = _extract_operation(operation, path_params)

    return PathItem(
        summary=_str_or_none(path_item.get("summary")),
        description=_str_or_none(path_item.get("description")),
        parameters=_extract_parameters(path_params),
        **operations,
    )


def _extract_operation(operation: dict[str, Any], path_params: list[Any]) -> Operation:
    op_params = operation.get("parameters")
    if not isinstance(op_params, list):
        op_params = []

    tags = operation.get("tags")

    return Operation(
        operation_id=_str_or_none(operation.get("operationId")),
        summary=_str_or_none(operation.get("summary")),
        description=_str_or_none(operation.get("description")),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else None,
        parameters=_extract_parameters(_merge_parameters(path_params, op_params)),
        request_body=_extract_request_body(operation.get("requestBody")),
        responses=_extract_responses(operation.get("responses")),
        security=_extract_security_requirements(operation.get("security")),
        deprecated=operation.get("deprecated") is True,
    )


def _merge_parameters(path_params: list[Any], op_params: list[Any]) -> list[Any]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field), per the OpenAPI spec.
    """
    op_keys = {_param_key(param) for param in op_params if isinstance(param, dict)}

    merged = [
        param
        for param in path_params
        if isinstance(param, dict) and _param_key(param) not in op_keys
    ]
    merged.extend(op_params)
    return merged


def _param_key(param: dict[str, Any]) -> tuple[Optional[str], Optional[str]]:
    return _str_or_none(param.get("name")), _str_or_none(param.get("in"))


def _extract_parameters(params_list: list[Any]) -> list[Parameter]:
    """Convert raw parameter objects into :class:`~specview.models.Parameter` models.

    Path parameters are always required regardless of the ``required``
    field in the source.  Parameters without a name or with an unrecognised
    ``in`` location (including bare ``$ref`` parameters) are skipped.
    """
    parameters: list[Parameter] = []

    for param in params_list:
        if not isinstance(param, dict) or param.get("name") is None:
            continue

        try:
            location = ParameterLocation(param.get("in"))
        except ValueError:
            continue

        schema = param.get("schema")
        required = param.get("required") is True
        if location == ParameterLocation.PATH:
            required = True

        parameters.append(
            Parameter(
                name=str(param["name"]),
                location=location,
                required=required,
                description=_str_or_none(param.get("description")),
                deprecated=param.get("deprecated") is True,
                schema_=extract_schema(schema) if isinstance(schema, dict) else None,
                example=param.get("example"),
            )
        )

    return parameters


def _extract_content(content: Any) -> dict[str, MediaType]:
    """Extract the media-type map shared by request bodies and responses."""
    if not isinstance(content, dict):
        return {}

    result: dict[str, MediaType] = {}
    for media_type, media in content.items():
        if not isinstance(media, dict):
            media = {}
        schema = media.get("schema")
        examples = media.get("examples")
        result[str(media_type)] = MediaType(
            schema_=extract_schema(schema) if isinstance(schema, dict) else None,
            example=media.get("example"),
            examples={
                str(name): ExampleObject(
                    summary=_str_or_none(example.get("summary")),
                    value=example.get("value"),
                )
                for name, example in examples.items()
                if isinstance(example, dict)
            }
            if isinstance(examples, dict)
            else {},
        )
    return result


def _extract_request_body(body: Any) -> Optional[RequestBody]:
    """Extract the ``requestBody`` of an operation, or ``None`` if absent."""
    if not isinstance(body, dict):
        return None

    return RequestBody(
        description=_str_or_none(body.get("description")),
        required=body.get("required") is True,
        content=_extract_content(body.get("content")),
    )


def _extract_responses(responses: Any) -> dict[str, Response]:
    """Extract response descriptors keyed by status code string.

    YAML documents often spell status codes as bare integers; keys are
    normalised to strings.
    """
    if not isinstance(responses, dict):
        return {}

    result: dict[str, Response] = {}
    for status_code, response in responses.items():
        if not isinstance(response, dict):
            continue

        headers = response.get("headers")
        result[str(status_code)] = Response(
            description=_str_or_none(response.get("description")),
            content=_extract_content(response.get("content")),
            headers={
                str(name): Header(
                    description=_str_or_none(header.get("description")),
                    schema_=extract_schema(header["schema"])
                    if isinstance(header.get("schema"), dict)
                    else None,
                )
                for name, header in headers.items()
                if isinstance(header, dict)
            }
            if isinstance(headers, dict)
            else {},
        )

    return result


def _extract_security_requirements(
    requirements: Any,
) -> Optional[list[dict[str, list[str]]]]:
    """Extract a ``security`` array, or ``None`` when it is not declared.

    An explicit empty array is kept as ``[]`` (meaning "no auth required").
    """
    if not isinstance(requirements, list):
        return None

    result: list[dict[str, list[str]]] = []
    for requirement in requirements:
        if not isinstance(requirement, dict):
            continue
        result.append(
            {
                str(name): [str(scope) for scope in scopes]
                if isinstance(scopes, list)
                else []
                for name, scopes in requirement.items()
            }
        )
    return result


def _extract_components(components: Any) -> Components:
    """Extract reusable schemas and security schemes.

    A section the document does not declare stays ``None`` so the tree
    builder can tell "absent" apart from "declared but empty".
    """
    if not isinstance(components, dict):
        return Components()

    schemas_raw = components.get("schemas")
    schemas: Optional[dict[str, SchemaObject]] = None
    if isinstance(schemas_raw, dict):
        schemas = {str(name): extract_schema(schema) for name, schema in schemas_raw.items()}

    return Components(
        schemas=schemas,
        security_schemes=_extract_security_schemes(components.get("securitySchemes")),
    )


def _extract_security_schemes(schemes_raw: Any) -> Optional[dict[str, SecurityScheme]]:
    """Extract security scheme definitions from ``components/securitySchemes``.

    Supports all OpenAPI security scheme types: ``apiKey``, ``http``,
    ``oauth2``, and ``openIdConnect``.
    """
    if not isinstance(schemes_raw, dict):
        return None

    schemes: dict[str, SecurityScheme] = {}
    for name, scheme_data in schemes_raw.items():
        if not isinstance(scheme_data, dict):
            continue

        schemes[str(name)] = SecurityScheme(
            name=str(name),
            type=_str_or_none(scheme_data.get("type")) or "",
            description=_str_or_none(scheme_data.get("description")),
            param_name=_str_or_none(scheme_data.get("name")),
            location=_str_or_none(scheme_data.get("in")),
            scheme=_str_or_none(scheme_data.get("scheme")),
            bearer_format=_str_or_none(scheme_data.get("bearerFormat")),
            flows=_extract_flows(scheme_data.get("flows")),
            openid_connect_url=_str_or_none(scheme_data.get("openIdConnectUrl")),
        )

    return schemes


def _extract_flows(flows: Any) -> Optional[dict[str, OAuthFlow]]:
    if not isinstance(flows, dict):
        return None

    result: dict[str, OAuthFlow] = {}
    for flow_name, flow in flows.items():
        if not isinstance(flow, dict):
            continue
        scopes = flow.get("scopes")
        result[str(flow_name)] = OAuthFlow(
            authorization_url=_str_or_none(flow.get("authorizationUrl")),
            token_url=_str_or_none(flow.get("tokenUrl")),
            refresh_url=_str_or_none(flow.get("refreshUrl")),
            scopes={str(k): str(v) for k, v in scopes.items()}
            if isinstance(scopes, dict)
            else {},
        )
    return result


def extract_schema(raw: Any, _active: frozenset[int] = frozenset()) -> SchemaObject:
    """Convert a raw schema mapping into a :class:`~specview.models.SchemaObject`.

    Only keys that are present in *raw* are passed to the model, so
    :meth:`~specview.models.SchemaObject.has_example` and
    :meth:`~specview.models.SchemaObject.has_default` reflect what the
    document declared.  OpenAPI 3.1 type arrays such as
    ``["string", "null"]`` become ``type="string"`` with ``nullable=True``.

    YAML anchors can make a schema contain itself.  *_active* holds the ids
    of the mappings on the current descent; meeting one again yields an
    empty schema instead of recursing forever.

    Args:
        raw: The raw schema.  Anything that is not a mapping yields an empty
            schema.

    Returns:
        The extracted schema.
    """
    if not isinstance(raw, dict) or id(raw) in _active:
        return SchemaObject()
    active = _active | {id(raw)}

    fields: dict[str, Any] = {}

    ref = raw.get("$ref")
    if isinstance(ref, str):
        fields["ref"] = ref

    type_value = raw.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        if non_null:
            fields["type"] = str(non_null[0])
        if "null" in type_value:
            fields["nullable"] = True
    elif isinstance(type_value, str):
        fields["type"] = type_value

    for key in _STRING_KEYS:
        value = raw.get(key)
        if isinstance(value, str):
            fields[key] = value

    properties = raw.get("properties")
    if isinstance(properties, dict):
        fields["properties"] = {
            str(name): extract_schema(sub_schema, active)
            for name, sub_schema in properties.items()
        }

    required = raw.get("required")
    if isinstance(required, list):
        fields["required"] = [str(name) for name in required]

    if isinstance(raw.get("items"), dict):
        fields["items"] = extract_schema(raw["items"], active)

    if isinstance(raw.get("enum"), list):
        fields["enum"] = raw["enum"]

    if "example" in raw:
        fields["example"] = raw["example"]
    if "default" in raw:
        fields["default"] = raw["default"]

    for key, field_name in _COMPOSITION_KEYS:
        members = raw.get(key)
        if isinstance(members, list):
            fields[field_name] = [extract_schema(member, active) for member in members]

    if raw.get("nullable") is True:
        fields["nullable"] = True
    for key, field_name in _FLAG_KEYS:
        if raw.get(key) is True:
            fields[field_name] = True

    for key, field_name in (("minLength", "min_length"), ("maxLength", "max_length")):
        value = raw.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            fields[field_name] = value
    for key in ("minimum", "maximum"):
        value = raw.get(key)
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            continue
        try:
            fields[key] = float(value)
        except OverflowError:
            continue  # integer bound beyond float range

    additional = raw.get("additionalProperties")
    if isinstance(additional, bool):
        fields["additional_properties"] = additional
    elif isinstance(additional, dict):
        fields["additional_properties"] = extract_schema(additional, active)

    return SchemaObject(**fields)


def _str_or_none(value: Any) -> Optional[str]:
    """Stringify scalars; ``None`` and containers become ``None``."""
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)
