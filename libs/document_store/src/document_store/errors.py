"""Domain errors for document store reads."""


class DocumentStoreError(RuntimeError):
    """Base class for document store errors."""


class ConfigurationError(DocumentStoreError):
    """Raised when client/configuration is invalid."""


class DocumentNotFoundError(DocumentStoreError):
    """Raised when no document exists at the requested path."""

    def __init__(self, path: str, namespace: str | None = None) -> None:
        self.path = path
        self.namespace = namespace
        where = f" in namespace '{namespace}'" if namespace else ""
        super().__init__(f"Document '{path}' not found{where}")


class DocumentTransportError(DocumentStoreError):
    """Raised when the store cannot be reached or answers with an error status."""


class MalformedDocumentError(DocumentStoreError):
    """Raised when the store response cannot be decoded into a document."""
