"""Data models for registry responses."""

from dataclasses import dataclass, field
from typing import Optional, Union

from .media_types import ManifestKind
from .utils.digest import Digest


@dataclass(frozen=True)
class Descriptor:
    """Reference to a blob or manifest by digest."""

    media_type: str
    digest: Digest
    size: int


@dataclass(frozen=True)
class Platform:
    """Platform a manifest list entry targets."""

    architecture: str
    os: str
    variant: Optional[str] = None
    os_version: Optional[str] = None

    def __str__(self) -> str:
        text = f"{self.os}/{self.architecture}"
        if self.variant:
            text += f"/{self.variant}"
        return text


@dataclass(frozen=True)
class PlatformManifest:
    """Single entry of a manifest list."""

    descriptor: Descriptor
    platform: Optional[Platform]


@dataclass(frozen=True)
class ManifestList:
    """Manifest list (Docker) or image index (OCI)."""

    media_type: str
    manifests: list[PlatformManifest]
    digest: Optional[Digest] = None

    kind = ManifestKind.LIST
    schema_version = 2


@dataclass(frozen=True)
class ImageManifest:
    """Single-platform schema 2 manifest (Docker v2 or OCI)."""

    media_type: str
    config: Descriptor
    layers: list[Descriptor]
    digest: Optional[Digest] = None

    kind = ManifestKind.IMAGE
    schema_version = 2

    @property
    def total_size(self) -> int:
        return self.config.size + sum(layer.size for layer in self.layers)


@dataclass(frozen=True)
class LegacyManifest:
    """Schema 1 manifest; layers are listed newest first as the registry sends them."""

    media_type: str
    name: str
    tag: str
    architecture: str
    layers: list[Digest]
    digest: Optional[Digest] = None

    kind = ManifestKind.LEGACY
    schema_version = 1


Manifest = Union[ManifestList, ImageManifest, LegacyManifest]


@dataclass(frozen=True)
class CatalogPage:
    """One page of ``/v2/_catalog`` plus its ``rel="next"`` link, if any."""

    repositories: list[str] = field(default_factory=list)
    next_link: Optional[str] = None

    @property
    def items(self) -> list[str]:
        return self.repositories


@dataclass(frozen=True)
class TagList:
    """One page of ``/v2/<name>/tags/list``."""

    name: str
    tags: list[str] = field(default_factory=list)
    next_link: Optional[str] = None

    @property
    def items(self) -> list[str]:
        return self.tags


@dataclass(frozen=True)
class ApiVersion:
    """Outcome of the ``/v2/`` version check."""

    header: Optional[str] = None

    @property
    def is_v2(self) -> bool:
        return self.header == "registry/2.0"
