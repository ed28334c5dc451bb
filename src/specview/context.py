"""Holder for the currently loaded document.

A :class:`SpecContext` owns a single document slot.  A successful load
replaces the slot; a failed load leaves the previous document in place, so
a caller never observes a partially built document.

Typical usage::

    context = SpecContext()
    context.load_source("petstore.yaml")
    root = context.tree()
"""

from __future__ import annotations

import threading
from typing import Optional, Union

from specview.exceptions import NoSpecLoadedError
from specview.models import Document, OperationDescriptor
from specview.navigation import build_tree, list_operations
from specview.navigation.tree import RootNode
from specview.output import debug
from specview.parser.loader import load_document, read_source


class SpecContext:
    """One loaded document and the views derived from it.

    Writes are serialised with a lock.  Reads return whatever document is
    current at the time of the call.
    """

    def __init__(self) -> None:
        self._document: Optional[Document] = None
        self._source: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def document(self) -> Document:
        """The current document.

        Raises:
            NoSpecLoadedError: If nothing has been loaded yet.
        """
        document = self._document
        if document is None:
            raise NoSpecLoadedError()
        return document

    @property
    def source(self) -> Optional[str]:
        """Filename or URL of the current document, if known."""
        return self._source

    @property
    def is_loaded(self) -> bool:
        return self._document is not None

    def load(self, raw_text: Union[str, bytes], filename: str) -> Document:
        """Load *raw_text* and make it the current document.

        Raises:
            LoadError: Any loader failure.  The previous document, if any,
                stays current.
        """
        document = load_document(raw_text, filename)
        with self._lock:
            self._document = document
            self._source = filename
        return document

    def load_source(self, source: str) -> Document:
        """Read a file path or URL and load it.

        Raises:
            SourceReadError: If the source cannot be read.
            LoadError: Any loader failure.
        """
        text, filename = read_source(source)
        document = load_document(text, filename)
        with self._lock:
            self._document = document
            self._source = source
        debug(f"Current document is now {source}")
        return document

    def clear(self) -> None:
        """Forget the current document."""
        with self._lock:
            self._document = None
            self._source = None

    def tree(self) -> RootNode:
        """Navigation tree of the current document."""
        return build_tree(self.document)

    def operations(self) -> list[OperationDescriptor]:
        """Flat operation list of the current document."""
        return list_operations(self.document)
