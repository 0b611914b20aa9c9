"""Utility functions for the dredge registry client."""

from .digest import Digest, calculate_digest, validate_digest
from .validator import (
    DEFAULT_TAG,
    parse_reference,
    validate_repository_name,
    validate_tag,
)

__all__ = [
    "DEFAULT_TAG",
    "Digest",
    "calculate_digest",
    "parse_reference",
    "validate_digest",
    "validate_repository_name",
    "validate_tag",
]
