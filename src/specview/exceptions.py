"""Exception hierarchy for specview.

All exceptions inherit from :class:`SpecviewError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specview.exit_codes`.
The top-level error handler in :func:`specview.app.main` catches
``SpecviewError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpecviewError (exit 1)
    +-- LoadError                 (exit 7)
    |   +-- UnsupportedFormatError
    |   +-- SpecSyntaxError
    |   +-- UnsupportedVersionError
    |   +-- MissingInfoError
    |   +-- MissingPathsError
    |   +-- NoSpecLoadedError
    +-- SourceReadError           (exit 7)
    +-- NotFoundError             (exit 4)
    +-- ConfigError               (exit 1)

Every :class:`LoadError` renders as ``"Failed to parse OpenAPI spec: <cause>"``
so the message can be shown verbatim to the person whose upload was
rejected.  The bare cause stays available on :attr:`LoadError.cause`.
"""

from __future__ import annotations

from typing import Optional

from specview.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
)

LOAD_ERROR_PREFIX = "Failed to parse OpenAPI spec: "


class SpecviewError(Exception):
    """Base exception for all specview errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class LoadError(SpecviewError):
    """Raised when a document cannot be turned into a validated model.

    Subclasses supply a fixed ``default_cause``; :class:`SpecSyntaxError`
    passes the underlying parser's message instead.

    Args:
        cause: The reason for the failure, without the common prefix.
    """

    exit_code = EXIT_SPEC_PARSE_ERROR
    default_cause = "Unknown error"

    def __init__(self, cause: Optional[str] = None):
        self.cause = cause or self.default_cause
        super().__init__(LOAD_ERROR_PREFIX + self.cause)


class UnsupportedFormatError(LoadError):
    """Raised when the filename extension is not ``.yaml``, ``.yml`` or ``.json``."""

    default_cause = "Unsupported file format. Please use .yaml, .yml, or .json"


class SpecSyntaxError(LoadError):
    """Raised when the text is malformed for the format its extension selects."""


class UnsupportedVersionError(LoadError):
    """Raised when the ``openapi`` field is missing or does not start with ``3.``."""

    default_cause = "Only OpenAPI 3.x specifications are supported"


class MissingInfoError(LoadError):
    """Raised when the document has no ``info`` object."""

    default_cause = "Invalid spec: missing info object"


class MissingPathsError(LoadError):
    """Raised when the document has no ``paths`` object."""

    default_cause = "Invalid spec: missing paths object"


class NoSpecLoadedError(LoadError):
    """Raised when the current document is requested before any successful load."""

    default_cause = "No spec loaded"


class SourceReadError(SpecviewError):
    """Raised when a document source (file or URL) cannot be read."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class NotFoundError(SpecviewError):
    """Raised when an operation id, schema name, or scheme name matches nothing."""

    exit_code = EXIT_NOT_FOUND


class ConfigError(SpecviewError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
