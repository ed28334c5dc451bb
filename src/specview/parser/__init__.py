"""OpenAPI document loader -- read, parse, validate, and extract.

This sub-package turns raw document text (YAML or JSON, from a local file
or a remote URL) into a :class:`~specview.models.Document` that the tree
builder and the schema interpreter consume.

Typical usage::

    from specview.parser import load_document, read_source

    text, filename = read_source("https://petstore3.swagger.io/api/v3/openapi.json")
    document = load_document(text, filename)

Sub-modules:

* :mod:`~specview.parser.loader` -- I/O layer (URL, file), extension-based
  format selection, and the minimal structural check.
* :mod:`~specview.parser.extractor` -- Walks the raw mapping and produces
  the typed :class:`~specview.models.Document`.
"""

from specview.parser.extractor import extract_document, extract_schema
from specview.parser.loader import load_document, read_source, validate_document

__all__ = [
    "load_document",
    "read_source",
    "validate_document",
    "extract_document",
    "extract_schema",
]
