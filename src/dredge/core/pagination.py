"""Link-header pagination for catalog and tag listings.

The registry paginates listings with an RFC 5988 ``Link`` header, e.g.::

    Link: </v2/_catalog?last=b&n=2>; rel="next"

The walker keeps requesting the ``next`` link until the registry stops
sending one (or sends an empty page), with a hard cap on the page count so a
registry that links a page to itself cannot keep the client busy forever.
"""

import logging
from typing import Awaitable, Callable, Optional, Protocol, TypeVar

from ..exceptions import PaginationLimitError
from .types import DEFAULT_MAX_PAGES, RegistryResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Page(Protocol[T]):
    @property
    def items(self) -> list[T]: ...

    @property
    def next_link(self) -> Optional[str]: ...


def _link_params(parts: list[str]) -> dict[str, str]:
    params = {}
    for part in parts:
        key, sep, value = part.strip().partition("=")
        if sep:
            params[key.strip().lower()] = value.strip().strip('"')
    return params


def parse_link_header(value: Optional[str]) -> Optional[str]:
    """Return the target of the ``rel="next"`` link in a Link header.

    Args:
        value: Raw ``Link`` header value (may hold several comma separated links)

    Returns:
        The link target as sent (usually a path with query), or None
    """
    if not value:
        return None

    for link in value.split(","):
        target, *parts = link.split(";")
        target = target.strip()
        if not (target.startswith("<") and target.endswith(">")):
            continue
        rels = _link_params(parts).get("rel", "").split()
        if "next" in rels:
            return target[1:-1]

    return None


async def walk_pages(
    fetch: Callable[[str], Awaitable[RegistryResponse]],
    path: str,
    decode: Callable[[RegistryResponse], Page[T]],
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[T]:
    """Collect every item of a paginated listing, in the order received.

    Args:
        fetch: Issues one GET for a path or registry-supplied link
        path: Path of the first page
        decode: Turns a response into a page of items plus its next link
        max_pages: Maximum number of pages to request

    Returns:
        Items of all pages concatenated; duplicates are kept

    Raises:
        PaginationLimitError: If a next link is still present after max_pages pages
    """
    items: list[T] = []
    target: Optional[str] = path
    pages = 0

    while target is not None:
        if pages >= max_pages:
            raise PaginationLimitError(path, max_pages)

        response = await fetch(target)
        page = decode(response)
        pages += 1
        items.extend(page.items)

        if not page.items:
            logger.debug("Empty page %d for %s, stopping", pages, path)
            break

        target = page.next_link
        if target is not None:
            logger.debug("Following next link %s", target)

    return items
