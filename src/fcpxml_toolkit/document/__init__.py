"""Document tree and file I/O."""

from .tree import Document, DocumentParseError, Node
from .loader import load_document, load_document_async, save_document, save_document_async

__all__ = [
    "Document",
    "DocumentParseError",
    "Node",
    "load_document",
    "load_document_async",
    "save_document",
    "save_document_async",
]
