"""Manifest media types understood by the client."""

from enum import Enum
from typing import Optional


class ManifestKind(str, Enum):
    """Which manifest variant a media type decodes into."""

    LIST = "manifest list"
    IMAGE = "image manifest"
    LEGACY = "legacy manifest"


DOCKER_MANIFEST_LIST = "application/vnd.docker.distribution.manifest.list.v2+json"
DOCKER_MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"
DOCKER_MANIFEST_V1 = "application/vnd.docker.distribution.manifest.v1+json"
DOCKER_MANIFEST_V1_SIGNED = "application/vnd.docker.distribution.manifest.v1+prettyjws"
OCI_IMAGE_INDEX = "application/vnd.oci.image.index.v1+json"
OCI_IMAGE_MANIFEST = "application/vnd.oci.image.manifest.v1+json"

MEDIA_TYPE_KINDS = {
    DOCKER_MANIFEST_LIST: ManifestKind.LIST,
    OCI_IMAGE_INDEX: ManifestKind.LIST,
    DOCKER_MANIFEST_V2: ManifestKind.IMAGE,
    OCI_IMAGE_MANIFEST: ManifestKind.IMAGE,
    DOCKER_MANIFEST_V1_SIGNED: ManifestKind.LEGACY,
    DOCKER_MANIFEST_V1: ManifestKind.LEGACY,
}

# Preference order: manifest lists, then schema 2 images, then schema 1
MANIFEST_ACCEPT = ", ".join(
    [
        DOCKER_MANIFEST_LIST,
        OCI_IMAGE_INDEX,
        DOCKER_MANIFEST_V2,
        OCI_IMAGE_MANIFEST,
        DOCKER_MANIFEST_V1_SIGNED,
        DOCKER_MANIFEST_V1,
    ]
)

# Content types that say nothing about the manifest schema
GENERIC_JSON_TYPES = {"application/json", "text/plain", "application/octet-stream"}


def normalize_media_type(content_type: Optional[str]) -> str:
    """Strip parameters such as ``; charset=utf-8`` and lowercase."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def kind_of(media_type: str) -> Optional[ManifestKind]:
    return MEDIA_TYPE_KINDS.get(normalize_media_type(media_type))
