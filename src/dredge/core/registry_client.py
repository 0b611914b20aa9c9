"""Docker Registry API v2 async client implementation."""

import asyncio
import logging
from typing import Optional, Union

import aiohttp
from yarl import URL

from ..decoders import decode_catalog, decode_manifest, decode_tag_list
from ..exceptions import (
    DecodeError,
    DeletionNotPermittedError,
    ManifestNotFoundError,
    RepositoryNotFoundError,
    TransportError,
    ValidationError,
)
from ..media_types import MANIFEST_ACCEPT
from ..models import ApiVersion, CatalogPage, Manifest, TagList
from ..utils.digest import Digest, calculate_digest
from ..utils.validator import DEFAULT_TAG, parse_reference, validate_tag
from .pagination import parse_link_header, walk_pages
from .paths import API_ROOT, catalog_path, manifest_path, tags_path
from .session import create_session, raise_for_status
from .types import DEFAULT_MAX_PAGES, DEFAULT_TIMEOUT, RegistryEndpoint, RegistryResponse

API_VERSION_HEADER = "Docker-Distribution-API-Version"
CONTENT_DIGEST_HEADER = "Docker-Content-Digest"
EXPECTED_API_VERSION = "registry/2.0"


class RegistryClient:
    """Docker Registry API v2 async client for unauthenticated registries.

    Every operation issues its requests strictly one after another; nothing
    is retried. Failures surface as ApiError (registry answered with a
    non-2xx status), TransportError (registry unreachable) or DecodeError
    (registry answered with something the client cannot read).
    """

    def __init__(
        self,
        endpoint: Union[RegistryEndpoint, str],
        timeout: int = DEFAULT_TIMEOUT,
        connector: Optional[aiohttp.BaseConnector] = None,
        max_pages: int = DEFAULT_MAX_PAGES,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the registry client.

        Args:
            endpoint: Registry endpoint or URL (e.g., http://localhost:5000)
            timeout: Request timeout in seconds
            connector: aiohttp connector for connection pooling
            max_pages: Cap on pages followed by paginated listings
            logger: Logger for request tracing (defaults to this module's)
        """
        if not isinstance(endpoint, RegistryEndpoint):
            endpoint = RegistryEndpoint.parse(endpoint)
        self.endpoint = endpoint
        self.timeout = timeout
        self.connector = connector
        self.max_pages = max_pages
        self.logger = logger or logging.getLogger(__name__)
        self.session: Optional[aiohttp.ClientSession] = None

    @property
    def registry_url(self) -> str:
        return self.endpoint.url

    async def __aenter__(self) -> "RegistryClient":
        """Enter async context manager."""
        if not self.session:
            self.session = await create_session(self.timeout, self.connector)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Close the client session."""
        if self.session and not self.session.closed:
            await self.session.close()

    async def _request(
        self,
        method: str,
        path_or_url: str,
        headers: Optional[dict[str, str]] = None,
    ) -> RegistryResponse:
        """Issue one request and read the whole response.

        Raises:
            TransportError: If the registry cannot be reached or times out
        """
        if self.session is None:
            raise RuntimeError("RegistryClient must be used as an async context manager")

        url = self.endpoint.join(path_or_url)
        self.logger.debug("%s %s", method, url)

        try:
            async with self.session.request(
                method, URL(url, encoded=True), headers=headers, allow_redirects=True
            ) as resp:
                body = await resp.read()
                self.logger.debug("%s %s -> %d", method, url, resp.status)
                return RegistryResponse(
                    method=method,
                    url=url,
                    status=resp.status,
                    headers=resp.headers,
                    body=body,
                )
        except asyncio.TimeoutError as e:
            raise TransportError(f"{method} {url} timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

    async def check_version(self) -> ApiVersion:
        """Check that the registry implements the V2 API.

        Returns:
            The registry's advertised API version, if it sends one

        Raises:
            UnauthorizedError: If the registry requires authentication
            ApiError: For any other non-2xx status
        """
        response = await self._request("GET", API_ROOT)
        raise_for_status(response)

        version = ApiVersion(header=response.headers.get(API_VERSION_HEADER))
        if version.header is None:
            self.logger.info("Registry did not send a %s header", API_VERSION_HEADER)
        elif not version.is_v2:
            self.logger.warning(
                "Unexpected %s: %s (expected %s)",
                API_VERSION_HEADER,
                version.header,
                EXPECTED_API_VERSION,
            )
        return version

    async def _get_page(self, path_or_url: str) -> RegistryResponse:
        response = await self._request("GET", path_or_url)
        raise_for_status(response)
        return response

    async def list_catalog(self, page_size: Optional[int] = None) -> list[str]:
        """List every repository on the registry, following pagination.

        Args:
            page_size: Optional ``n`` page size hint sent to the registry

        Returns:
            Repository names in server order, first occurrence kept

        Raises:
            PaginationLimitError: If the registry keeps linking past max_pages
        """

        def decode(response: RegistryResponse) -> CatalogPage:
            return decode_catalog(response.body, parse_link_header(response.headers.get("Link")))

        repositories = await walk_pages(
            self._get_page, catalog_path(page_size), decode, self.max_pages
        )
        return list(dict.fromkeys(repositories))

    async def list_tags(self, repository: str) -> list[str]:
        """List tags for a repository.

        Args:
            repository: Repository name

        Returns:
            List of tag names in server order

        Raises:
            RepositoryNotFoundError: If the repository does not exist
        """
        path = tags_path(repository)

        async def fetch(path_or_url: str) -> RegistryResponse:
            response = await self._request("GET", path_or_url)
            raise_for_status(response, {404: RepositoryNotFoundError})
            return response

        def decode(response: RegistryResponse) -> TagList:
            return decode_tag_list(response.body, parse_link_header(response.headers.get("Link")))

        return await walk_pages(fetch, path, decode, self.max_pages)

    async def get_manifest(
        self,
        repository: str,
        reference: Union[str, Digest, None] = DEFAULT_TAG,
    ) -> Manifest:
        """Retrieve and decode a manifest.

        Args:
            repository: Repository name
            reference: Tag or digest reference (defaults to "latest")

        Returns:
            ManifestList, ImageManifest or LegacyManifest, as the registry
            declared in its Content-Type

        Raises:
            ManifestNotFoundError: If the reference does not resolve
            UnsupportedManifestError: If the returned media type is unknown
        """
        path = manifest_path(repository, parse_reference(reference))
        response = await self._request("GET", path, headers={"Accept": MANIFEST_ACCEPT})
        raise_for_status(response, {404: ManifestNotFoundError})

        digest = self._header_digest(response)
        if digest is None:
            digest = Digest.parse(calculate_digest(response.body))

        return decode_manifest(response.content_type, response.body, digest)

    def _header_digest(self, response: RegistryResponse) -> Optional[Digest]:
        value = response.headers.get(CONTENT_DIGEST_HEADER)
        if value is None:
            return None
        try:
            return Digest.parse(value.strip())
        except ValidationError as e:
            raise DecodeError(
                f"Malformed {CONTENT_DIGEST_HEADER} header: {value}",
                field=CONTENT_DIGEST_HEADER,
            ) from e

    async def resolve_digest(self, repository: str, tag: str) -> Digest:
        """Resolve a tag to the digest of the manifest it points at.

        Args:
            repository: Repository name
            tag: Tag name

        Returns:
            Manifest digest from the Docker-Content-Digest header

        Raises:
            ManifestNotFoundError: If the tag does not exist
            DecodeError: If the registry does not send a usable digest header
        """
        path = manifest_path(repository, validate_tag(tag))
        response = await self._request("HEAD", path, headers={"Accept": MANIFEST_ACCEPT})
        raise_for_status(response, {404: ManifestNotFoundError})

        digest = self._header_digest(response)
        if digest is None:
            raise DecodeError(
                f"Registry did not return a {CONTENT_DIGEST_HEADER} header for "
                f"{repository}:{tag}",
                field=CONTENT_DIGEST_HEADER,
            )
        return digest

    async def delete_manifest(self, repository: str, digest: Union[str, Digest]) -> None:
        """Delete a manifest from the registry.

        Args:
            repository: Repository name
            digest: Manifest digest

        Raises:
            DeletionNotPermittedError: If the registry has deletes disabled (405)
            ManifestNotFoundError: If the digest is unknown
        """
        if not isinstance(digest, Digest):
            digest = Digest.parse(digest)

        response = await self._request("DELETE", manifest_path(repository, digest))
        raise_for_status(
            response,
            {404: ManifestNotFoundError, 405: DeletionNotPermittedError},
        )

    async def delete_tag(self, repository: str, tag: str) -> Digest:
        """Delete the manifest a tag points at.

        The API deletes by digest only, so the tag is resolved first; nothing
        is deleted when that resolution fails.

        Args:
            repository: Repository name
            tag: Tag name

        Returns:
            Digest of the deleted manifest
        """
        digest = await self.resolve_digest(repository, tag)
        self.logger.info("Resolved %s:%s to %s", repository, tag, digest)
        await self.delete_manifest(repository, digest)
        return digest
