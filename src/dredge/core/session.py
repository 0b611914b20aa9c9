"""HTTP session creation and response status handling."""

from typing import Optional

import aiohttp

from ..decoders import decode_error_body
from ..exceptions import ApiError, UnauthorizedError
from .types import DEFAULT_TIMEOUT, RegistryResponse


async def create_session(
    timeout: int = DEFAULT_TIMEOUT,
    connector: Optional[aiohttp.BaseConnector] = None,
) -> aiohttp.ClientSession:
    """Create an aiohttp session with a bounded per-request timeout.

    Args:
        timeout: Total timeout per request in seconds
        connector: Optional connector for connection pooling

    Returns:
        New client session; the caller owns and closes it
    """
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout),
    )


def build_api_error(
    response: RegistryResponse, error_class: type[ApiError] = ApiError
) -> ApiError:
    """Classify a non-2xx response into an ApiError (or a given subclass)."""
    details = decode_error_body(response.body)
    return error_class.from_status(response.status, response.method, response.path, details)


def raise_for_status(
    response: RegistryResponse,
    error_classes: Optional[dict[int, type[ApiError]]] = None,
) -> None:
    """Raise an ApiError for a non-2xx response.

    Args:
        response: Completed exchange
        error_classes: Status-specific ApiError subclasses (e.g. ``{404: ...}``)

    Raises:
        ApiError: If the status is not 2xx
    """
    if response.ok:
        return

    error_classes = {401: UnauthorizedError, **(error_classes or {})}
    raise build_api_error(response, error_classes.get(response.status, ApiError))
