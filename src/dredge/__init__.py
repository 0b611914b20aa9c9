"""dredge - Async Python client and CLI for the Docker Registry HTTP API V2."""

__version__ = "1.1.0"

from .core.registry_client import RegistryClient
from .core.types import RegistryConfig, RegistryEndpoint
from .exceptions import (
    ApiError,
    ConfigError,
    DecodeError,
    DeletionNotPermittedError,
    ErrorKind,
    ManifestNotFoundError,
    PaginationLimitError,
    RegistryError,
    RepositoryNotFoundError,
    TransportError,
    UnauthorizedError,
    UnsupportedManifestError,
    ValidationError,
)
from .models import ApiVersion, ImageManifest, LegacyManifest, Manifest, ManifestList
from .registry import (
    check_registry,
    delete_image,
    delete_image_by_digest,
    get_manifest,
    list_repositories,
    list_tags,
)
from .utils.digest import Digest

__all__ = [
    "RegistryClient",
    "RegistryConfig",
    "RegistryEndpoint",
    "ApiVersion",
    "Digest",
    "ImageManifest",
    "LegacyManifest",
    "Manifest",
    "ManifestList",
    "RegistryError",
    "ApiError",
    "ErrorKind",
    "UnauthorizedError",
    "RepositoryNotFoundError",
    "ManifestNotFoundError",
    "DeletionNotPermittedError",
    "TransportError",
    "DecodeError",
    "UnsupportedManifestError",
    "PaginationLimitError",
    "ValidationError",
    "ConfigError",
    "check_registry",
    "list_repositories",
    "list_tags",
    "get_manifest",
    "delete_image",
    "delete_image_by_digest",
]
