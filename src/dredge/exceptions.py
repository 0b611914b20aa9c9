"""Custom exceptions for the dredge registry client."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classification of a non-2xx registry response."""

    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not-found"
    METHOD_NOT_ALLOWED = "method-not-allowed"
    SERVER_ERROR = "server-error"
    OTHER = "other"

    @classmethod
    def from_status(cls, status: int) -> "ErrorKind":
        if status == 401:
            return cls.UNAUTHORIZED
        if status == 404:
            return cls.NOT_FOUND
        if status == 405:
            return cls.METHOD_NOT_ALLOWED
        if 500 <= status <= 599:
            return cls.SERVER_ERROR
        return cls.OTHER


@dataclass(frozen=True)
class ErrorDetail:
    """A single entry of a registry ``{"errors": [...]}`` body."""

    code: str
    message: str = ""
    detail: object = None


class RegistryError(Exception):
    """Base exception for all registry-related errors."""

    pass


class TransportError(RegistryError):
    """Raised when the registry cannot be reached (connection, TLS, timeout)."""

    pass


class ValidationError(RegistryError, ValueError):
    """Raised when a name, tag, digest or URL is malformed."""

    pass


class DecodeError(RegistryError):
    """Raised when a response body does not match the expected shape."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class UnsupportedManifestError(DecodeError):
    """Raised when a manifest declares a media type the client cannot read."""

    def __init__(self, media_type: str) -> None:
        super().__init__(
            f"Unsupported manifest type: {media_type or '<none>'}", field="mediaType"
        )
        self.media_type = media_type


class PaginationLimitError(RegistryError):
    """Raised when a paginated listing keeps linking past the page cap."""

    def __init__(self, path: str, max_pages: int) -> None:
        super().__init__(
            f"Pagination limit exceeded: {path} still linked to a next page "
            f"after {max_pages} pages"
        )
        self.path = path
        self.max_pages = max_pages


class ApiError(RegistryError):
    """Raised when the registry answers with a non-2xx status."""

    def __init__(
        self,
        kind: ErrorKind,
        status: int,
        method: str,
        path: str,
        details: Optional[list[ErrorDetail]] = None,
    ) -> None:
        self.kind = kind
        self.status = status
        self.method = method
        self.path = path
        self.details = details or []
        super().__init__(self._format())

    @classmethod
    def from_status(
        cls,
        status: int,
        method: str,
        path: str,
        details: Optional[list[ErrorDetail]] = None,
    ) -> "ApiError":
        return cls(ErrorKind.from_status(status), status, method, path, details)

    @property
    def code(self) -> Optional[str]:
        return self.details[0].code if self.details else None

    @property
    def registry_message(self) -> Optional[str]:
        return self.details[0].message if self.details else None

    def _format(self) -> str:
        text = f"{self.method} {self.path} failed with {self.status} ({self.kind.value})"
        if self.code:
            text += f": {self.code}"
            if self.registry_message:
                text += f" {self.registry_message}"
        return text


class UnauthorizedError(ApiError):
    """Raised on 401; authentication is not supported, so nothing is retried."""

    pass


class RepositoryNotFoundError(ApiError):
    """Raised when a repository does not exist on the registry."""

    pass


class ManifestNotFoundError(ApiError):
    """Raised when a tag or digest does not resolve to a manifest."""

    pass


class DeletionNotPermittedError(ApiError):
    """Raised on 405 from a manifest DELETE (storage delete disabled)."""

    pass


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or written."""

    pass
