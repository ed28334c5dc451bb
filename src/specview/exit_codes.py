"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specview.exceptions.SpecviewError` subclass.
Shell wrappers can inspect the exit code to tell a rejected document apart
from a lookup that matched nothing.

Example::

    $ specview --spec swagger2.json tree
    $ echo $?
    7   # EXIT_SPEC_PARSE_ERROR -- the document was rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or without a document."""

EXIT_NOT_FOUND = 4
"""The requested operation, schema, or security scheme does not exist."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be read, parsed, or validated."""
