from opensearchpy import OpenSearch
from abc import ABC, abstractmethod


class ABCClient(ABC):
    """Abstract base class for providers of a configured OpenSearch client."""

    @abstractmethod
    def get_client(self) -> OpenSearch:
        """Return an instance of the OpenSearch client."""
        raise NotImplementedError
