from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class OpenSearchDocumentAble(Protocol):
    """Capabilities a type needs to be stored through the repository.

    No base class is required: any object exposing ``to_doc`` and ``get_id``
    qualifies. Identifiers are passed to the engine unchecked.
    """

    def to_doc(self) -> Any:
        """Return the document body to store."""
        ...

    def get_id(self) -> str:
        """Return the stable, unique document identifier."""
        ...


def serialize_document(document: OpenSearchDocumentAble) -> Any:
    """Return a JSON-ready body for ``document``.

    Pydantic models are dumped in JSON mode, mappings are copied into a plain
    dict, anything else is left for the client serializer.
    """
    body = document.to_doc()
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json")
    if isinstance(body, Mapping):
        return dict(body)
    return body
