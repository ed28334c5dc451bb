"""Canonical Pydantic models shared across all specview modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig` and :class:`ViewerConfig`.

**Document models** -- produced by the loader and read by the tree builder,
the schema interpreter, and the CLI:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`SchemaObject`,
    :class:`Parameter`, :class:`MediaType`, :class:`RequestBody`,
    :class:`Response`, :class:`Operation`, :class:`PathItem`,
    :class:`SecurityScheme`, :class:`Components`, :class:`APIInfo`,
    :class:`Document`, and the derived :class:`OperationDescriptor`.

A loaded :class:`Document` is the sole source of truth.  Everything derived
from it (navigation tree, operation list) holds references to its objects
rather than copies, and nothing downstream mutates it.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`ViewerConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ViewerConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specview/config.json``.

    Loaded by :func:`~specview.config.load_global_config`.  Fields here have
    the lowest precedence and can be overridden by the project file,
    environment variables, or CLI flags.  See
    :func:`~specview.config.resolve_config` for the full precedence chain.
    """

    default_spec: Optional[str] = Field(
        default=None, description="File path or URL of the document to browse"
    )
    max_depth: int = Field(
        default=32,
        ge=1,
        description="Nesting depth after which schema rendering stops descending",
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Document ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects.

    Declared in canonical order; iterating the enum yields the order in
    which operations of one path are listed.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    PATCH = "patch"
    OPTIONS = "options"
    HEAD = "head"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class SchemaObject(BaseModel):
    """A type definition: either a ``$ref`` pointer or an inline shape.

    The model is recursive through ``properties``, ``items``,
    ``additional_properties`` and the three composition lists.  ``$ref``
    pointers are kept as strings and never resolved.

    Whether ``example`` or ``default`` was declared is answered by
    :meth:`has_example` / :meth:`has_default`, which look at the set of
    fields that were explicitly provided, so an explicit ``null`` or ``0``
    still counts as declared.
    """

    model_config = ConfigDict(populate_by_name=True)

    ref: Optional[str] = Field(default=None, alias="$ref")
    type: Optional[str] = None
    format: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    properties: Optional[dict[str, SchemaObject]] = None
    required: list[str] = Field(default_factory=list)
    items: Optional[SchemaObject] = None
    enum: Optional[list[Any]] = None
    example: Any = None
    default: Any = None
    all_of: Optional[list[SchemaObject]] = Field(default=None, alias="allOf")
    one_of: Optional[list[SchemaObject]] = Field(default=None, alias="oneOf")
    any_of: Optional[list[SchemaObject]] = Field(default=None, alias="anyOf")
    nullable: bool = False
    read_only: bool = Field(default=False, alias="readOnly")
    write_only: bool = Field(default=False, alias="writeOnly")
    min_length: Optional[int] = Field(default=None, alias="minLength")
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    pattern: Optional[str] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    additional_properties: Union[bool, SchemaObject, None] = Field(
        default=None, alias="additionalProperties"
    )

    def has_example(self) -> bool:
        """Return ``True`` when an ``example`` was declared on this node."""
        return "example" in self.model_fields_set

    def has_default(self) -> bool:
        """Return ``True`` when a ``default`` was declared on this node."""
        return "default" in self.model_fields_set


class Parameter(BaseModel):
    """A single parameter of an operation (OpenAPI *Parameter Object*)."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    deprecated: bool = False
    schema_: Optional[SchemaObject] = Field(default=None, alias="schema")
    example: Any = None


class ExampleObject(BaseModel):
    """A named example attached to a media type."""

    summary: Optional[str] = None
    value: Any = None


class MediaType(BaseModel):
    """Schema and examples for one media type of a request or response."""

    model_config = ConfigDict(populate_by_name=True)

    schema_: Optional[SchemaObject] = Field(default=None, alias="schema")
    example: Any = None
    examples: dict[str, ExampleObject] = Field(default_factory=dict)


class _ContentMixin(BaseModel):
    content: dict[str, MediaType] = Field(default_factory=dict)

    @property
    def content_types(self) -> list[str]:
        """Declared media types, in document order."""
        return list(self.content.keys())

    @property
    def primary_schema(self) -> Optional[SchemaObject]:
        """The schema of the first media type that declares one."""
        for media in self.content.values():
            if media.schema_ is not None:
                return media.schema_
        return None


class RequestBody(_ContentMixin):
    """Request payload descriptor of an operation."""

    description: Optional[str] = None
    required: bool = False


class Header(BaseModel):
    """A response header declaration."""

    model_config = ConfigDict(populate_by_name=True)

    description: Optional[str] = None
    schema_: Optional[SchemaObject] = Field(default=None, alias="schema")


class Response(_ContentMixin):
    """Response descriptor for a single status code."""

    description: Optional[str] = None
    headers: dict[str, Header] = Field(default_factory=dict)


class Operation(BaseModel):
    """One HTTP-verb handler attached to a path template.

    ``tags`` is ``None`` when the document declares no tags for the
    operation; the tree builder then files it under ``"Untagged"``.
    """

    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[list[str]] = None
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: dict[str, Response] = Field(default_factory=dict)
    security: Optional[list[dict[str, list[str]]]] = None
    deprecated: bool = False


class PathItem(BaseModel):
    """All operations declared for one URL path template."""

    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: list[Parameter] = Field(default_factory=list)
    get: Optional[Operation] = None
    post: Optional[Operation] = None
    put: Optional[Operation] = None
    delete: Optional[Operation] = None
    patch: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    trace: Optional[Operation] = None

    def operation(self, method: HTTPMethod) -> Optional[Operation]:
        """Return the operation declared for *method*, if any."""
        return getattr(self, method.value)


class OAuthFlow(BaseModel):
    """One OAuth2 flow (implicit, password, clientCredentials, authorizationCode)."""

    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    refresh_url: Optional[str] = None
    scopes: dict[str, str] = Field(default_factory=dict)


class SecurityScheme(BaseModel):
    """An OpenAPI *Security Scheme Object*.

    The ``type`` field discriminates between ``apiKey``, ``http``, ``oauth2``,
    and ``openIdConnect`` schemes.  Only the fields relevant to the active
    scheme type are populated; the rest remain ``None``.
    """

    name: str
    type: str  # apiKey, http, oauth2, openIdConnect
    description: Optional[str] = None
    # apiKey
    param_name: Optional[str] = None
    location: Optional[str] = None  # header, query, cookie
    # http
    scheme: Optional[str] = None  # bearer, basic
    bearer_format: Optional[str] = None
    # oauth2
    flows: Optional[dict[str, OAuthFlow]] = None
    # openIdConnect
    openid_connect_url: Optional[str] = None


class Components(BaseModel):
    """Reusable definitions.  A section the document omits stays ``None``."""

    schemas: Optional[dict[str, SchemaObject]] = None
    security_schemes: Optional[dict[str, SecurityScheme]] = None


class Contact(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None


class License(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None


class APIInfo(BaseModel):
    """API metadata from the document's *Info Object*."""

    title: str = ""
    version: str = ""
    description: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact: Optional[Contact] = None
    license: Optional[License] = None


class ServerInfo(BaseModel):
    """A server entry from the document's ``servers`` array."""

    url: str
    description: Optional[str] = None


class TagInfo(BaseModel):
    """A top-level tag declaration with its free-text description."""

    name: str
    description: Optional[str] = None


class Document(BaseModel):
    """Complete, validated representation of an OpenAPI 3.x document.

    Produced by :func:`~specview.parser.loader.load_document`.  ``paths``
    keeps the document's key order, which is the order the tree builder
    lists operations in.
    """

    openapi: str
    info: APIInfo
    servers: list[ServerInfo] = Field(default_factory=list)
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)
    tags: list[TagInfo] = Field(default_factory=list)
    security: list[dict[str, list[str]]] = Field(default_factory=list)


class OperationDescriptor(BaseModel):
    """A flattened (path, method, operation) entry with its categories.

    ``id`` is ``"<verb>-<path>"``; ``categories`` are the operation's tags
    or ``["Untagged"]``.
    """

    id: str
    path: str
    method: HTTPMethod
    operation: Operation
    categories: list[str]
