"""Lattice object store client.

A command-line client and small Python API for deleting, uploading, inspecting,
downloading and listing paths in a Lattice object store.
"""

from lattice_objects.exceptions import (
    AuthenticationError,
    ConnectionError,
    LocalInputError,
    LocalIOError,
    ObjectNotFoundError,
    ObjectStoreError,
    RemoteError,
    ServerError,
    TimeoutError,
    ValidationError,
)
from lattice_objects.models import (
    ConnectionParameters,
    ContentIdentifier,
    ListResponse,
    PathMetadata,
)
from lattice_objects.rest_client import RestClient
from lattice_objects.store import ObjectStore, ObjectTransport

__version__ = "0.1.0"
__all__ = [
    "AuthenticationError",
    "ConnectionError",
    "ConnectionParameters",
    "ContentIdentifier",
    "ListResponse",
    "LocalIOError",
    "LocalInputError",
    "ObjectNotFoundError",
    "ObjectStore",
    "ObjectStoreError",
    "ObjectTransport",
    "PathMetadata",
    "RemoteError",
    "RestClient",
    "ServerError",
    "TimeoutError",
    "ValidationError",
]
