"""Exceptions shared by the sunview packages."""

import logging
mylogger = logging.getLogger(__name__)


class SunviewError(Exception):
    """Base exception with a message. Optionally logged when raised."""
    def __init__(self, message="A sunview error occurred", log=False):
        self.message = message
        super().__init__(self.message)
        if log:
            mylogger.error(message)


class TransportError(SunviewError):
    """The catalog listing or a document could not be retrieved.

    ``kind`` is one of ``not_found``, ``network`` or ``http``.
    """
    NOT_FOUND = "not_found"
    NETWORK = "network"
    HTTP = "http"

    def __init__(self, message="Catalog transport failed", kind: str = HTTP, log=False):
        self.kind = kind
        super().__init__(message, log=log)


class ModelValidationError(SunviewError):
    """A fetched document is not a usable model definition."""
    def __init__(self, message="Invalid model document", log=False):
        super().__init__(message, log=log)


class PerItemIndexError(SunviewError):
    """One catalog entry could not be indexed. Recovered by the assembler."""
    def __init__(self, source_name: str, cause: Exception, log=False):
        self.source_name = source_name
        self.cause = cause
        super().__init__(f"Failed to index {source_name}: {cause}", log=log)


__all__ = [
    "ModelValidationError",
    "PerItemIndexError",
    "SunviewError",
    "TransportError",
]
