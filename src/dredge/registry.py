"""Async functional registry operations."""

from typing import Union

from .core.registry_client import RegistryClient
from .core.types import DEFAULT_TIMEOUT, RegistryConfig
from .models import ApiVersion, Manifest
from .utils.digest import Digest
from .utils.validator import DEFAULT_TAG


def _client(config: RegistryConfig) -> RegistryClient:
    return RegistryClient(config.endpoint, timeout=config.timeout, max_pages=config.max_pages)


async def check_registry(registry_url: str, timeout: int = DEFAULT_TIMEOUT) -> ApiVersion:
    """레지스트리가 V2 API를 지원하는지 확인합니다.

    Args:
        registry_url: 레지스트리 URL (예: "http://localhost:5000", "registry.local:5000")
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        ApiVersion: Docker-Distribution-API-Version 헤더 값 (없으면 header=None)

    Raises:
        UnauthorizedError: 인증이 필요한 레지스트리인 경우 (인증은 지원하지 않음)
        TransportError: 레지스트리에 연결할 수 없는 경우

    Examples:
        version = await check_registry("http://localhost:5000")
        print(f"API 버전: {version.header or '알 수 없음'}")
    """
    config = RegistryConfig.from_url(registry_url, timeout=timeout)
    async with _client(config) as client:
        return await client.check_version()


async def list_repositories(registry_url: str, timeout: int = DEFAULT_TIMEOUT) -> list[str]:
    """레지스트리의 모든 저장소 목록을 조회합니다.

    Args:
        registry_url: 레지스트리 URL (예: "http://localhost:5000")
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        list[str]: 저장소 이름 목록, 레지스트리가 돌려준 순서 그대로
            (예: ["nginx", "myapp", "test/image"])

    Raises:
        ApiError: 레지스트리가 오류 상태 코드를 반환한 경우
        PaginationLimitError: 페이지 링크가 끝나지 않는 경우

    Examples:
        repos = await list_repositories("http://localhost:5000")
        print(f"발견된 저장소: {repos}")
    """
    config = RegistryConfig.from_url(registry_url, timeout=timeout)
    async with _client(config) as client:
        return await client.list_catalog()


async def list_tags(
    registry_url: str, repository: str, timeout: int = DEFAULT_TIMEOUT
) -> list[str]:
    """특정 저장소의 모든 태그 목록을 조회합니다.

    Args:
        registry_url: 레지스트리 URL (예: "http://localhost:5000")
        repository: 저장소 이름 (예: "nginx", "mycompany/myapp")
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        list[str]: 태그 이름 목록 (예: ["latest", "v1.0.0", "alpine"])

    Raises:
        RepositoryNotFoundError: 저장소가 존재하지 않는 경우

    Examples:
        tags = await list_tags("http://localhost:5000", "nginx")
        print(f"nginx 태그: {tags}")
    """
    config = RegistryConfig.from_url(registry_url, timeout=timeout)
    async with _client(config) as client:
        return await client.list_tags(repository)


async def get_manifest(
    registry_url: str,
    repository: str,
    reference: Union[str, Digest] = DEFAULT_TAG,
    timeout: int = DEFAULT_TIMEOUT,
) -> Manifest:
    """이미지의 매니페스트를 조회합니다.

    Args:
        registry_url: 레지스트리 URL (예: "http://localhost:5000")
        repository: 저장소 이름 (예: "nginx", "mycompany/myapp")
        reference: 태그 또는 digest (기본값: "latest")
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        Manifest: 응답 Content-Type에 따라 ManifestList, ImageManifest,
            LegacyManifest 중 하나

    Raises:
        ManifestNotFoundError: 태그나 digest가 존재하지 않는 경우
        UnsupportedManifestError: 알 수 없는 매니페스트 타입인 경우

    Examples:
        manifest = await get_manifest("http://localhost:5000", "nginx", "latest")
        print(f"매니페스트 종류: {manifest.kind.value}")
        print(f"스키마 버전: {manifest.schema_version}")
    """
    config = RegistryConfig.from_url(registry_url, timeout=timeout)
    async with _client(config) as client:
        return await client.get_manifest(repository, reference)


async def delete_image(
    registry_url: str, repository: str, tag: str, timeout: int = DEFAULT_TIMEOUT
) -> Digest:
    """레지스트리에서 태그가 가리키는 이미지를 삭제합니다.

    Args:
        registry_url: 레지스트리 URL (예: "http://localhost:5000")
        repository: 저장소 이름 (예: "nginx", "mycompany/myapp")
        tag: 태그 이름 (예: "latest", "v1.0.0")
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        Digest: 삭제된 매니페스트의 digest

    Raises:
        DeletionNotPermittedError: 레지스트리에서 삭제가 비활성화된 경우 (405)
        ManifestNotFoundError: 태그가 존재하지 않는 경우
        DecodeError: Docker-Content-Digest 헤더를 받지 못한 경우

    Note:
        레지스트리에서 REGISTRY_STORAGE_DELETE_ENABLED=true 설정이 필요합니다.

    Examples:
        digest = await delete_image("http://localhost:5000", "nginx", "v1.0")
        print(f"삭제 완료: {digest}")
    """
    config = RegistryConfig.from_url(registry_url, timeout=timeout)
    async with _client(config) as client:
        return await client.delete_tag(repository, tag)


async def delete_image_by_digest(
    registry_url: str,
    repository: str,
    digest: Union[str, Digest],
    timeout: int = DEFAULT_TIMEOUT,
) -> None:
    """매니페스트 digest로 이미지를 삭제합니다.

    Args:
        registry_url: 레지스트리 URL (예: "http://localhost:5000")
        repository: 저장소 이름 (예: "nginx", "mycompany/myapp")
        digest: 매니페스트 digest (예: "sha256:abc123...")
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Raises:
        DeletionNotPermittedError: 레지스트리에서 삭제가 비활성화된 경우 (405)
        ValidationError: digest 형식이 잘못된 경우

    Note:
        digest로 삭제하면 해당 매니페스트를 참조하는 모든 태그가 영향받을 수 있습니다.
    """
    config = RegistryConfig.from_url(registry_url, timeout=timeout)
    async with _client(config) as client:
        await client.delete_manifest(repository, digest)
