"""Core types shared by the registry client."""

from dataclasses import dataclass, field
from typing import Optional, Union

from multidict import CIMultiDict, CIMultiDictProxy
from yarl import URL

from ..exceptions import DecodeError, ValidationError

DEFAULT_TIMEOUT = 30
DEFAULT_MAX_PAGES = 1000


@dataclass(frozen=True)
class RegistryEndpoint:
    """Validated base URL of a registry (scheme, host and optional port)."""

    url: str

    @classmethod
    def parse(cls, value: str) -> "RegistryEndpoint":
        """Build an endpoint from ``host``, ``host:port`` or a full URL.

        Bare hosts are assumed to speak HTTPS.

        Raises:
            ValidationError: If the value is not a scheme+host[+port] URL
        """
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("Registry URL must not be empty")

        text = value.strip()
        if "://" not in text:
            text = f"https://{text}"

        try:
            url = URL(text)
            port = url.port
        except ValueError as e:
            raise ValidationError(f"Invalid registry URL: {value}") from e

        if url.scheme not in ("http", "https"):
            raise ValidationError(f"Unsupported registry URL scheme: {url.scheme}")
        if not url.host:
            raise ValidationError(f"Registry URL has no host: {value}")
        if url.path not in ("", "/") or url.query_string or url.fragment:
            raise ValidationError(
                f"Registry URL must not contain a path, query or fragment: {value}"
            )
        if url.user or url.password:
            raise ValidationError("Registry credentials are not supported")

        base = URL.build(
            scheme=url.scheme,
            host=url.raw_host,
            port=None if url.is_default_port() else port,
        )
        return cls(str(base).rstrip("/"))

    def join(self, path_or_url: str) -> str:
        """Resolve an API path or a registry-supplied link against the base URL.

        Raises:
            DecodeError: If the link points at a different scheme, host or port
        """
        base = URL(self.url)
        url = base.join(URL(path_or_url, encoded=True))
        if (url.scheme, url.host, url.port) != (base.scheme, base.host, base.port):
            raise DecodeError(
                f"Link target {path_or_url} is outside registry {self.url}", field="Link"
            )
        return str(url)

    def __str__(self) -> str:
        return self.url


@dataclass
class RegistryConfig:
    """Registry client configuration."""

    endpoint: RegistryEndpoint
    timeout: int = DEFAULT_TIMEOUT
    max_pages: int = DEFAULT_MAX_PAGES

    @classmethod
    def from_url(cls, url: Union[str, RegistryEndpoint], **kwargs) -> "RegistryConfig":
        if not isinstance(url, RegistryEndpoint):
            url = RegistryEndpoint.parse(url)
        return cls(endpoint=url, **kwargs)


@dataclass
class RegistryResponse:
    """A fully read HTTP exchange."""

    method: str
    url: str
    status: int
    headers: Union[CIMultiDict, CIMultiDictProxy] = field(default_factory=CIMultiDict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299

    @property
    def path(self) -> str:
        url = URL(self.url, encoded=True)
        return url.raw_path_qs

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")
