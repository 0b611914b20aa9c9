"""Repository name, tag and reference validation utilities."""

import re
from typing import Union

from ..exceptions import ValidationError
from .digest import DIGEST_PATTERN, Digest

# Name of the tag used when none is given
DEFAULT_TAG = "latest"

MAX_REPOSITORY_NAME_LENGTH = 255

PATH_COMPONENT_PATTERN = re.compile(r"^[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*$")
TAG_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}$")

Reference = Union[str, Digest]


def is_valid_path_component(component: str) -> bool:
    """Check if a single slash-separated name component is valid."""
    return bool(PATH_COMPONENT_PATTERN.match(component))


def is_valid_repository_name(name: str) -> bool:
    """Check if name follows the registry repository name grammar."""
    if not isinstance(name, str) or not name:
        return False

    if len(name) > MAX_REPOSITORY_NAME_LENGTH:
        return False

    return all(is_valid_path_component(part) for part in name.split("/"))


def is_valid_tag(tag: str) -> bool:
    """Check if tag follows the registry tag grammar."""
    return isinstance(tag, str) and bool(TAG_PATTERN.match(tag))


def validate_repository_name(name: str) -> str:
    """저장소 이름이 레지스트리 문법에 맞는지 검증합니다.

    Args:
        name: 저장소 이름 (예: "nginx", "mycompany/myapp")

    Returns:
        str: 검증된 저장소 이름 (변경 없이 그대로 반환)

    Raises:
        ValidationError: 소문자 경로 요소 문법에 맞지 않거나 255자를 넘는 경우

    Examples:
        validate_repository_name("library/nginx")  # "library/nginx"
        validate_repository_name("Nginx")  # ValidationError
    """
    if not is_valid_repository_name(name):
        raise ValidationError(f"Invalid repository name: {name!r}")
    return name


def validate_tag(tag: str) -> str:
    """Return tag unchanged, raising ValidationError if it is malformed."""
    if not is_valid_tag(tag):
        raise ValidationError(f"Invalid tag: {tag!r}")
    return tag


def parse_reference(value: Union[str, Digest, None]) -> Reference:
    """태그 또는 digest 문자열을 매니페스트 참조로 변환합니다.

    Args:
        value: 태그 ("latest", "v1.0") 또는 digest ("sha256:abc...")
            - None 또는 빈 문자열이면 "latest" 태그를 사용합니다

    Returns:
        Reference: digest 형식이면 Digest, 그렇지 않으면 검증된 태그 문자열

    Raises:
        ValidationError: 태그와 digest 어느 쪽 문법에도 맞지 않는 경우
    """
    if isinstance(value, Digest):
        return value

    if not value:
        return DEFAULT_TAG

    # Tags cannot contain ':', so anything shaped like a digest is one
    if DIGEST_PATTERN.match(value):
        return Digest.parse(value)

    return validate_tag(value)
