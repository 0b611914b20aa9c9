"""Digest calculation and validation utilities."""

import hashlib
import re
from dataclasses import dataclass
from typing import Union

from ..exceptions import ValidationError

# Regex pattern for valid digest format (algorithm:hex)
DIGEST_PATTERN = re.compile(r"^([a-z0-9]+):([a-f0-9]+)$")

# Hex length of each supported algorithm's digest
DIGEST_HEX_LENGTHS = {
    "sha256": 64,
    "sha384": 96,
    "sha512": 128,
}


@dataclass(frozen=True)
class Digest:
    """Content-addressed identifier of a manifest or blob."""

    algorithm: str
    hex: str

    @classmethod
    def parse(cls, value: str) -> "Digest":
        """Parse an ``algorithm:hex`` string.

        Args:
            value: Digest string (e.g. ``sha256:6c3c62...``)

        Returns:
            Parsed digest

        Raises:
            ValidationError: If the format, algorithm or hex length is wrong
        """
        if not isinstance(value, str):
            raise ValidationError(f"Invalid digest format: {value!r}")

        match = DIGEST_PATTERN.match(value)
        if not match:
            raise ValidationError(f"Invalid digest format: {value}")

        algorithm, hex_part = match.groups()
        expected = DIGEST_HEX_LENGTHS.get(algorithm)
        if expected is None:
            raise ValidationError(f"Unsupported digest algorithm: {algorithm}")
        if len(hex_part) != expected:
            raise ValidationError(
                f"Invalid {algorithm} digest length: {len(hex_part)} (expected {expected})"
            )
        return cls(algorithm, hex_part)

    @property
    def short(self) -> str:
        return self.hex[:12]

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.hex}"


def calculate_digest(data: Union[bytes, bytearray], algorithm: str = "sha256") -> str:
    """Calculate digest of data.

    Args:
        data: Data to hash
        algorithm: Hash algorithm (default: sha256)

    Returns:
        Digest string in format "algorithm:hex"

    Raises:
        ValueError: If algorithm is not supported
        ValueError: If data is not bytes-like
    """
    if not isinstance(data, (bytes, bytearray)):
        raise ValueError("Data must be bytes or bytearray")

    if algorithm not in DIGEST_HEX_LENGTHS:
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    hasher = hashlib.new(algorithm)
    hasher.update(data)
    return f"{algorithm}:{hasher.hexdigest()}"


def validate_digest(digest: str) -> bool:
    """Validate digest format.

    Args:
        digest: Digest string to validate

    Returns:
        True if valid digest format
    """
    try:
        Digest.parse(digest)
    except ValidationError:
        return False
    return True
