"""Abstract base class for document store clients."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ReferenceDocument:
    """Provider-agnostic representation of a stored reference document.

    Attributes:
        path: Key the document was read from (e.g. ``"products/sku-1"``)
        fields: Field name to decoded value mapping
    """

    path: str
    fields: Mapping[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)


class DocumentStoreClient(ABC):
    """Abstract base class for read-only document store access.

    Consumers depend only on ``read``; how an instance is constructed
    (test double or production client) is the factory's concern.
    """

    @abstractmethod
    async def read(
        self, path: str, *, namespace: str | None = None
    ) -> ReferenceDocument:
        """Read the document stored at ``path``.

        Args:
            path: Document key in ``"<collection>/<document_id>"`` form.
            namespace: Optional project/namespace the read is scoped to.

        Returns:
            The decoded reference document.

        Raises:
            DocumentNotFoundError: No document exists at ``path``.
            DocumentTransportError: The store could not be reached.
            MalformedDocumentError: The response could not be decoded.
        """

    async def close(self) -> None:
        """Release any resources held by the client."""
        return None
