"""Load OpenAPI documents from raw text, a local file, or a URL.

This module turns raw document text plus a filename hint into a validated
:class:`~specview.models.Document`.  The format is chosen strictly by the
filename's extension (``.yaml``/``.yml`` for YAML, ``.json`` for JSON);
there is no content sniffing.

The public functions are:

* :func:`read_source` -- Acquire raw text and a filename hint from a file
  path or an ``http(s)`` URL.  This is the only I/O step.
* :func:`parse_text` -- Parse text into a mapping for the format the
  filename selects.
* :func:`validate_document` -- The minimal structural check (version,
  ``info``, ``paths``), failing fast on the first violation.
* :func:`load_document` -- All of the above followed by extraction into the
  typed model.

Every failure raises a :class:`~specview.exceptions.LoadError` subclass whose
message reads ``"Failed to parse OpenAPI spec: <cause>"``.
"""

from __future__ import annotations

import json
from pathlib import Path, PurePosixPath
from typing import Any, Union
from urllib.parse import urlparse

import httpx
import yaml

from specview.exceptions import (
    MissingInfoError,
    MissingPathsError,
    SourceReadError,
    SpecSyntaxError,
    UnsupportedFormatError,
    UnsupportedVersionError,
)
from specview.models import Document
from specview.output import debug
from specview.parser.extractor import extract_document

YAML_EXTENSIONS = (".yaml", ".yml")
JSON_EXTENSIONS = (".json",)


def load_document(raw_text: Union[str, bytes], filename: str) -> Document:
    """Parse, validate, and extract a document.

    Args:
        raw_text: The document text.  Bytes are decoded as UTF-8.
        filename: Name of the file the text came from.  Only its extension
            is used, to select the parser.

    Returns:
        The validated :class:`~specview.models.Document`.

    Raises:
        UnsupportedFormatError: The extension is not ``.yaml``, ``.yml`` or
            ``.json``.
        SpecSyntaxError: The text is malformed for the selected format.
            Nesting too deep for the parser or the extractor also raises it.
        UnsupportedVersionError: The ``openapi`` field is missing or is not
            a ``3.`` version.
        MissingInfoError: The ``info`` object is missing.
        MissingPathsError: The ``paths`` object is missing.

    Example::

        text = Path("petstore.yaml").read_text()
        document = load_document(text, "petstore.yaml")
        print(document.info.title)
    """
    raw = parse_text(raw_text, filename)
    validate_document(raw)
    try:
        document = extract_document(raw)
    except RecursionError as exc:
        raise SpecSyntaxError("Document is nested too deeply") from exc
    debug(
        f"Loaded '{document.info.title}' (OpenAPI {document.openapi}, "
        f"{len(document.paths)} paths)"
    )
    return document


def parse_text(raw_text: Union[str, bytes], filename: str) -> Any:
    """Parse *raw_text* with the parser selected by *filename*'s extension.

    The extension is checked before any parsing so that an unsupported
    file fails immediately.

    Args:
        raw_text: The document text or UTF-8 bytes.
        filename: Filename hint, e.g. ``"openapi.yml"``.

    Returns:
        Whatever the parser produced.  Normally a dict; non-mapping results
        are rejected later by :func:`validate_document`.

    Raises:
        UnsupportedFormatError: For any extension other than the three
            supported ones.
        SpecSyntaxError: When the parser rejects the text.  The message is
            the parser's own.
    """
    suffix = PurePosixPath(filename).suffix.lower()
    if suffix not in YAML_EXTENSIONS + JSON_EXTENSIONS:
        raise UnsupportedFormatError()

    if isinstance(raw_text, bytes):
        try:
            raw_text = raw_text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SpecSyntaxError(str(exc)) from exc

    if suffix in JSON_EXTENSIONS:
        debug(f"Parsing {filename} as JSON")
        try:
            return json.loads(raw_text)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise SpecSyntaxError(str(exc)) from exc

    debug(f"Parsing {filename} as YAML")
    try:
        return yaml.safe_load(raw_text)
    except (yaml.YAMLError, RecursionError) as exc:
        raise SpecSyntaxError(str(exc)) from exc


def validate_document(raw: Any) -> None:
    """Run the minimal structural check on a parsed document.

    Checks, in order, stopping at the first failure:

    1. ``openapi`` is present and its string form starts with ``"3."``.
    2. ``info`` is present.
    3. ``paths`` is present.

    A parse result that is not a mapping has no version field and fails the
    first check.  Nothing beyond these three checks is validated; the
    extractor and the schema interpreter degrade gracefully on anything
    else that is unexpected.

    Args:
        raw: The value returned by :func:`parse_text`.

    Raises:
        UnsupportedVersionError: Check 1 failed.
        MissingInfoError: Check 2 failed.
        MissingPathsError: Check 3 failed.
    """
    if not isinstance(raw, dict):
        raise UnsupportedVersionError()

    version = raw.get("openapi")
    if _is_missing(version) or not str(version).startswith("3."):
        raise UnsupportedVersionError()

    if _is_missing(raw.get("info")):
        raise MissingInfoError()

    if _is_missing(raw.get("paths")):
        raise MissingPathsError()


def _is_missing(value: Any) -> bool:
    """Absent or empty scalar.  Empty mappings and lists count as present."""
    if isinstance(value, (dict, list)):
        return False
    return value is None or value is False or value == ""


def read_source(source: str) -> tuple[str, str]:
    """Read a document from a local path or an ``http(s)`` URL.

    Args:
        source: A file path or URL.

    Returns:
        A ``(text, filename)`` tuple.  For URLs the filename is the last
        segment of the URL path, so the extension still drives format
        selection.

    Raises:
        SourceReadError: If the file or URL cannot be read.
    """
    if source.startswith(("http://", "https://")):
        return _read_from_url(source)
    return _read_from_file(source)


def _read_from_url(url: str) -> tuple[str, str]:
    """Fetch a document over HTTP(S)."""
    debug(f"Fetching {url}")
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceReadError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SourceReadError(f"Failed to fetch spec from {url}: {exc}") from exc

    filename = PurePosixPath(urlparse(url).path).name
    return response.text, filename


def _read_from_file(path: str) -> tuple[str, str]:
    """Read a document from the local filesystem."""
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise SourceReadError(f"Spec file not found: {path}")

    debug(f"Reading {file_path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"Failed to read spec file {path}: {exc}") from exc

    return content, file_path.name
