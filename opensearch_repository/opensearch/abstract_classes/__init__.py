from .ABC_client import ABCClient
from .document import OpenSearchDocumentAble, serialize_document

__all__ = [
    "ABCClient",
    "OpenSearchDocumentAble",
    "serialize_document",
]
