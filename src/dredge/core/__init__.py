"""Registry protocol core: request construction, pagination and the client."""

from .registry_client import RegistryClient
from .types import RegistryConfig, RegistryEndpoint, RegistryResponse

__all__ = ["RegistryClient", "RegistryConfig", "RegistryEndpoint", "RegistryResponse"]
