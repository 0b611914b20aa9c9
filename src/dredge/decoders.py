"""Decoders turning registry JSON bodies into data models."""

import json
from typing import Any, Optional, Union

from .exceptions import DecodeError, ErrorDetail, UnsupportedManifestError, ValidationError
from .media_types import (
    DOCKER_MANIFEST_V1,
    GENERIC_JSON_TYPES,
    ManifestKind,
    kind_of,
    normalize_media_type,
)
from .models import (
    CatalogPage,
    Descriptor,
    ImageManifest,
    LegacyManifest,
    Manifest,
    ManifestList,
    Platform,
    PlatformManifest,
    TagList,
)
from .utils.digest import Digest


def load_json(body: Union[bytes, str]) -> Any:
    """Parse a response body as JSON, raising DecodeError on failure."""
    try:
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Response body is not valid JSON: {e}") from e


def _require_object(data: Any, field: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object for {field}", field=field)
    return data


def _require_str(data: dict[str, Any], field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str):
        raise DecodeError(f"Missing or non-string field: {field}", field=field)
    return value


def _require_int(data: dict[str, Any], key: str, field: Optional[str] = None) -> int:
    field = field or key
    value = data.get(key)
    # bool is an int subclass; a size of True is still malformed
    if not isinstance(value, int) or isinstance(value, bool):
        raise DecodeError(f"Missing or non-integer field: {field}", field=field)
    return value


def _string_list(data: dict[str, Any], field: str) -> list[str]:
    """Read a required list of strings; an explicit ``null`` reads as empty."""
    if field not in data:
        raise DecodeError(f"Missing field: {field}", field=field)
    value = data[field]
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DecodeError(f"Field {field} must be a list of strings", field=field)
    return value


def _parse_digest(value: Any, field: str) -> Digest:
    if not isinstance(value, str):
        raise DecodeError(f"Missing or non-string field: {field}", field=field)
    try:
        return Digest.parse(value)
    except ValidationError as e:
        raise DecodeError(f"Malformed digest in {field}: {value}", field=field) from e


def decode_catalog(body: Union[bytes, str], next_link: Optional[str] = None) -> CatalogPage:
    """Decode a ``/v2/_catalog`` page."""
    data = _require_object(load_json(body), "catalog")
    return CatalogPage(repositories=_string_list(data, "repositories"), next_link=next_link)


def decode_tag_list(body: Union[bytes, str], next_link: Optional[str] = None) -> TagList:
    """Decode a ``/v2/<name>/tags/list`` page."""
    data = _require_object(load_json(body), "tags")
    return TagList(
        name=_require_str(data, "name"),
        tags=_string_list(data, "tags"),
        next_link=next_link,
    )


def decode_error_body(body: Union[bytes, str, None]) -> list[ErrorDetail]:
    """Extract registry error details; anything unexpected yields no details."""
    if not body:
        return []

    try:
        data = load_json(body)
    except DecodeError:
        return []

    if not isinstance(data, dict) or not isinstance(data.get("errors"), list):
        return []

    details = []
    for entry in data["errors"]:
        if isinstance(entry, dict) and isinstance(entry.get("code"), str):
            details.append(
                ErrorDetail(
                    code=entry["code"],
                    message=str(entry.get("message") or ""),
                    detail=entry.get("detail"),
                )
            )
    return details


def _decode_descriptor(data: Any, field: str) -> Descriptor:
    data = _require_object(data, field)
    return Descriptor(
        media_type=data.get("mediaType") or "",
        digest=_parse_digest(data.get("digest"), f"{field}.digest"),
        size=_require_int(data, "size", f"{field}.size"),
    )


def _decode_platform(data: Any) -> Optional[Platform]:
    if data is None:
        return None
    data = _require_object(data, "platform")
    return Platform(
        architecture=_require_str(data, "architecture"),
        os=_require_str(data, "os"),
        variant=data.get("variant"),
        os_version=data.get("os.version"),
    )


def _decode_manifest_list(
    data: dict[str, Any], media_type: str, digest: Optional[Digest]
) -> ManifestList:
    entries = data.get("manifests")
    if not isinstance(entries, list):
        raise DecodeError("Field manifests must be a list", field="manifests")

    manifests = []
    for index, entry in enumerate(entries):
        descriptor = _decode_descriptor(entry, f"manifests[{index}]")
        manifests.append(
            PlatformManifest(descriptor=descriptor, platform=_decode_platform(entry.get("platform")))
        )
    return ManifestList(media_type=media_type, manifests=manifests, digest=digest)


def _decode_image_manifest(
    data: dict[str, Any], media_type: str, digest: Optional[Digest]
) -> ImageManifest:
    layers = data.get("layers")
    if not isinstance(layers, list):
        raise DecodeError("Field layers must be a list", field="layers")

    return ImageManifest(
        media_type=media_type,
        config=_decode_descriptor(data.get("config"), "config"),
        layers=[_decode_descriptor(layer, f"layers[{i}]") for i, layer in enumerate(layers)],
        digest=digest,
    )


def _decode_legacy_manifest(
    data: dict[str, Any], media_type: str, digest: Optional[Digest]
) -> LegacyManifest:
    fs_layers = data.get("fsLayers")
    if not isinstance(fs_layers, list):
        raise DecodeError("Field fsLayers must be a list", field="fsLayers")

    layers = []
    for index, layer in enumerate(fs_layers):
        layer = _require_object(layer, f"fsLayers[{index}]")
        layers.append(_parse_digest(layer.get("blobSum"), f"fsLayers[{index}].blobSum"))

    return LegacyManifest(
        media_type=media_type,
        name=_require_str(data, "name"),
        tag=_require_str(data, "tag"),
        architecture=data.get("architecture") or "",
        layers=layers,
        digest=digest,
    )


def resolve_media_type(content_type: Optional[str], data: dict[str, Any]) -> str:
    """Pick the media type a manifest body should be decoded as.

    The response ``Content-Type`` wins. When it is missing or only says
    "JSON", the body's own ``mediaType`` is used, and a body that only
    declares ``schemaVersion: 1`` is treated as a legacy manifest.
    """
    media_type = normalize_media_type(content_type)
    if media_type and media_type not in GENERIC_JSON_TYPES:
        return media_type

    body_type = data.get("mediaType")
    if isinstance(body_type, str) and body_type:
        return normalize_media_type(body_type)

    if data.get("schemaVersion") == 1:
        return DOCKER_MANIFEST_V1

    return media_type


def decode_manifest(
    content_type: Optional[str],
    body: Union[bytes, str],
    digest: Optional[Digest] = None,
) -> Manifest:
    """Decode a manifest into the variant its media type names.

    Args:
        content_type: ``Content-Type`` header of the response
        body: Raw manifest body
        digest: Manifest digest, attached to the result for display

    Returns:
        ManifestList, ImageManifest or LegacyManifest

    Raises:
        UnsupportedManifestError: If the media type is not a known manifest type
        DecodeError: If the body does not match its declared schema
    """
    data = _require_object(load_json(body), "manifest")
    media_type = resolve_media_type(content_type, data)

    kind = kind_of(media_type)
    if kind is ManifestKind.LIST:
        return _decode_manifest_list(data, media_type, digest)
    if kind is ManifestKind.IMAGE:
        return _decode_image_manifest(data, media_type, digest)
    if kind is ManifestKind.LEGACY:
        return _decode_legacy_manifest(data, media_type, digest)

    raise UnsupportedManifestError(media_type)
