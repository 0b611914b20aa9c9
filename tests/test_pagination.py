"""Tests for Link-header pagination."""

import json

import pytest
from multidict import CIMultiDict

from dredge.core.pagination import parse_link_header, walk_pages
from dredge.core.types import RegistryResponse
from dredge.decoders import decode_catalog
from dredge.exceptions import PaginationLimitError


class TestParseLinkHeader:
    """Test RFC 5988 Link header parsing."""

    def test_next_link(self):
        assert parse_link_header('</v2/_catalog?last=b&n=2>; rel="next"') == (
            "/v2/_catalog?last=b&n=2"
        )

    def test_unquoted_rel(self):
        assert parse_link_header("</v2/_catalog?n=2>; rel=next") == "/v2/_catalog?n=2"

    def test_absolute_url(self):
        assert parse_link_header('<https://r.example/v2/_catalog?n=1>; rel="next"') == (
            "https://r.example/v2/_catalog?n=1"
        )

    def test_picks_next_among_several(self):
        value = '</v2/_catalog?n=1>; rel="prev", </v2/_catalog?last=c&n=1>; rel="next"'
        assert parse_link_header(value) == "/v2/_catalog?last=c&n=1"

    @pytest.mark.parametrize(
        "value",
        [None, "", '</v2/_catalog>; rel="prev"', '/v2/_catalog; rel="next"', "garbage"],
    )
    def test_no_next(self, value):
        assert parse_link_header(value) is None


def make_fetch(pages):
    """Fetch stub serving canned (repositories, link) pages by path."""
    calls = []

    async def fetch(path):
        calls.append(path)
        repositories, link = pages[path]
        headers = CIMultiDict({"Link": f'<{link}>; rel="next"'} if link else {})
        return RegistryResponse(
            method="GET",
            url=f"http://registry{path}",
            status=200,
            headers=headers,
            body=json.dumps({"repositories": repositories}).encode("utf-8"),
        )

    return fetch, calls


def decode(response):
    return decode_catalog(response.body, parse_link_header(response.headers.get("Link")))


@pytest.mark.asyncio
async def test_walk_three_pages():
    """Test that three linked pages are concatenated in order."""
    fetch, calls = make_fetch(
        {
            "/v2/_catalog": (["a", "b"], "/v2/_catalog?last=b"),
            "/v2/_catalog?last=b": (["c", "d"], "/v2/_catalog?last=d"),
            "/v2/_catalog?last=d": (["e"], None),
        }
    )

    items = await walk_pages(fetch, "/v2/_catalog", decode, max_pages=10)

    assert items == ["a", "b", "c", "d", "e"]
    assert calls == ["/v2/_catalog", "/v2/_catalog?last=b", "/v2/_catalog?last=d"]


@pytest.mark.asyncio
async def test_walk_stops_on_empty_page():
    """Test that an empty page ends the walk even if it links further."""
    fetch, calls = make_fetch(
        {
            "/v2/_catalog": (["a"], "/v2/_catalog?last=a"),
            "/v2/_catalog?last=a": ([], "/v2/_catalog?last=z"),
        }
    )

    assert await walk_pages(fetch, "/v2/_catalog", decode) == ["a"]
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_walk_keeps_duplicates():
    """Test that the walker itself does not de-duplicate."""
    fetch, _ = make_fetch(
        {
            "/v2/_catalog": (["a", "b"], "/v2/_catalog?last=b"),
            "/v2/_catalog?last=b": (["b", "c"], None),
        }
    )

    assert await walk_pages(fetch, "/v2/_catalog", decode) == ["a", "b", "b", "c"]


@pytest.mark.asyncio
async def test_walk_self_link_hits_limit():
    """Test that a page linking to itself ends with PaginationLimitError."""
    fetch, calls = make_fetch({"/v2/_catalog": (["a"], "/v2/_catalog")})

    with pytest.raises(PaginationLimitError) as exc_info:
        await walk_pages(fetch, "/v2/_catalog", decode, max_pages=5)

    assert exc_info.value.max_pages == 5
    assert len(calls) == 5
