"""Test helpers: an in-process fake registry and canned manifests."""

import inspect
import json
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Union

from aiohttp import web
from aiohttp.test_utils import TestServer

from dredge.media_types import DOCKER_MANIFEST_LIST, DOCKER_MANIFEST_V2

DIGEST_A = "sha256:" + "a" * 64
DIGEST_B = "sha256:" + "b" * 64
DIGEST_C = "sha256:" + "c" * 64
DIGEST_D = "sha256:" + "d" * 64


def json_response(
    data,
    status: int = 200,
    content_type: str = "application/json",
    headers: Optional[dict[str, str]] = None,
) -> web.Response:
    """Build a JSON response with an explicit Content-Type."""
    return web.Response(
        body=json.dumps(data).encode("utf-8"),
        status=status,
        headers={"Content-Type": content_type, **(headers or {})},
    )


def error_response(status: int, code: str, message: str = "") -> web.Response:
    return json_response({"errors": [{"code": code, "message": message}]}, status=status)


def manifest_list_body(*platforms: tuple[str, str, str]) -> dict:
    """Manifest list body; each platform is (digest, os, architecture)."""
    return {
        "schemaVersion": 2,
        "mediaType": DOCKER_MANIFEST_LIST,
        "manifests": [
            {
                "mediaType": DOCKER_MANIFEST_V2,
                "digest": digest,
                "size": 528,
                "platform": {"os": os_name, "architecture": arch},
            }
            for digest, os_name, arch in platforms
        ],
    }


def image_manifest_body(config_digest: str = DIGEST_A, *layers: str) -> dict:
    return {
        "schemaVersion": 2,
        "mediaType": DOCKER_MANIFEST_V2,
        "config": {
            "mediaType": "application/vnd.docker.container.image.v1+json",
            "digest": config_digest,
            "size": 1469,
        },
        "layers": [
            {
                "mediaType": "application/vnd.docker.image.rootfs.diff.tar.gzip",
                "digest": layer,
                "size": 1000 * (index + 1),
            }
            for index, layer in enumerate(layers)
        ],
    }


def legacy_manifest_body(name: str = "x", tag: str = "latest", *blob_sums: str) -> dict:
    return {
        "schemaVersion": 1,
        "name": name,
        "tag": tag,
        "architecture": "amd64",
        "fsLayers": [{"blobSum": blob_sum} for blob_sum in blob_sums],
        "history": [],
    }


ResponseFactory = Callable[[], Union[web.StreamResponse, Awaitable[web.StreamResponse]]]


@dataclass
class RecordedRequest:
    method: str
    path_qs: str
    headers: dict[str, str] = field(default_factory=dict)


class FakeRegistry:
    """Registry double answering canned responses keyed by (method, path?query).

    Every request is recorded so tests can count exchanges. Unknown routes
    answer 404 with a registry-style error body.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], ResponseFactory] = {}
        self.requests: list[RecordedRequest] = []
        self.server: Optional[TestServer] = None
        self.url = ""

        self.app = web.Application()
        self.app.router.add_route("*", "/{tail:.*}", self._handle)

    def add(self, method: str, path_qs: str, factory: ResponseFactory) -> None:
        """Answer method + path_qs with a fresh response from factory."""
        self.routes[(method.upper(), path_qs)] = factory

    def requests_for(self, method: str) -> list[RecordedRequest]:
        return [r for r in self.requests if r.method == method]

    async def _handle(self, request: web.Request) -> web.StreamResponse:
        path_qs = request.rel_url.raw_path_qs
        self.requests.append(RecordedRequest(request.method, path_qs, dict(request.headers)))

        factory = self.routes.get((request.method, path_qs))
        if factory is None:
            return error_response(404, "NOT_FOUND", f"no route for {request.method} {path_qs}")
        response = factory()
        if inspect.isawaitable(response):
            response = await response
        return response

    async def start(self) -> "FakeRegistry":
        self.server = TestServer(self.app)
        await self.server.start_server()
        self.url = str(self.server.make_url("/")).rstrip("/")
        return self

    async def close(self) -> None:
        if self.server is not None:
            await self.server.close()
