"""Request paths of the Docker Registry HTTP API V2."""

from typing import Optional, Union

from ..utils.digest import Digest
from ..utils.validator import validate_repository_name, validate_tag

API_ROOT = "/v2/"
CATALOG_PATH = "/v2/_catalog"


def catalog_path(page_size: Optional[int] = None) -> str:
    if page_size is None:
        return CATALOG_PATH
    if page_size < 1:
        raise ValueError(f"Page size must be positive: {page_size}")
    return f"{CATALOG_PATH}?n={page_size}"


def tags_path(name: str) -> str:
    return f"/v2/{validate_repository_name(name)}/tags/list"


def manifest_path(name: str, reference: Union[str, Digest]) -> str:
    """Path of a manifest addressed by tag or by digest.

    Tags and digests are both inserted literally; a string reference must be a
    valid tag, digests must be passed as ``Digest``.
    """
    if isinstance(reference, Digest):
        ref = str(reference)
    else:
        ref = validate_tag(reference)
    return f"/v2/{validate_repository_name(name)}/manifests/{ref}"
