"""dredge CLI: a command line client for the Docker Registry HTTP API V2."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import load_config
from .core.registry_client import RegistryClient
from .core.types import DEFAULT_TIMEOUT, RegistryEndpoint
from .exceptions import (
    ApiError,
    ConfigError,
    DecodeError,
    DeletionNotPermittedError,
    ManifestNotFoundError,
    PaginationLimitError,
    RegistryError,
    RepositoryNotFoundError,
    TransportError,
    UnauthorizedError,
    UnsupportedManifestError,
    ValidationError,
)
from .logging_config import LOG_LEVELS, configure_logging
from .models import ImageManifest, LegacyManifest, Manifest, ManifestList
from .utils.validator import DEFAULT_TAG, parse_reference

console = Console()
err_console = Console(stderr=True)


@dataclass
class AppContext:
    """Settings shared by every subcommand."""

    registry: Optional[str]
    config_path: Optional[Path]
    timeout: int
    logger: logging.Logger

    def endpoint(self) -> RegistryEndpoint:
        """The REGISTRY argument if given, otherwise the configured registry_url."""
        if self.registry:
            return RegistryEndpoint.parse(self.registry)
        return load_config(self.config_path).endpoint


class RegistryGroup(click.Group):
    """Command group whose leading REGISTRY argument may be omitted.

    ``dredge catalog`` would otherwise bind "catalog" to REGISTRY; when the
    first positional token names a subcommand an empty REGISTRY is inserted
    in front of it.
    """

    def _takes_value(self, ctx: click.Context, token: str) -> bool:
        if "=" in token:
            return False
        for param in self.get_params(ctx):
            if isinstance(param, click.Option) and token in param.opts + param.secondary_opts:
                return not param.is_flag and not param.count
        return False

    def _first_positional(self, ctx: click.Context, args: list[str]) -> Optional[int]:
        skip = False
        for index, token in enumerate(args):
            if skip:
                skip = False
                continue
            if token == "--":
                return index + 1 if index + 1 < len(args) else None
            if token.startswith("-") and token != "-":
                skip = self._takes_value(ctx, token)
                continue
            return index
        return None

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        index = self._first_positional(ctx, args)
        if index is not None and args[index] in self.commands:
            args = [*args[:index], "", *args[index:]]
        return super().parse_args(ctx, args)


def describe_error(error: Exception) -> str:
    """Render an error as a one-line, kind-first message."""
    if isinstance(error, UnauthorizedError):
        return (
            f"Unauthorized: {error.method} {error.path} requires authentication, "
            "which dredge does not support"
        )
    if isinstance(error, DeletionNotPermittedError):
        return (
            f"Deletion not permitted: {error.method} {error.path} returned 405; "
            "enable storage deletes on the registry (REGISTRY_STORAGE_DELETE_ENABLED=true)"
        )
    if isinstance(error, RepositoryNotFoundError):
        return f"Repository not found: {error}"
    if isinstance(error, ManifestNotFoundError):
        return f"Manifest not found: {error}"
    if isinstance(error, ApiError):
        return f"Registry error ({error.kind.value}): {error}"
    if isinstance(error, TransportError):
        return f"Transport error: {error}"
    if isinstance(error, UnsupportedManifestError):
        return f"Unsupported manifest: {error.media_type}"
    if isinstance(error, DecodeError):
        field = f" (field {error.field})" if error.field else ""
        return f"Invalid response{field}: {error}"
    if isinstance(error, PaginationLimitError):
        return f"Pagination limit exceeded: {error}"
    if isinstance(error, ValidationError):
        return f"Invalid argument: {error}"
    if isinstance(error, ConfigError):
        return f"Configuration error: {error}"
    return str(error)


def run(
    ctx: click.Context,
    operation: Callable[[RegistryClient], Awaitable[Any]],
) -> Any:
    """Run one client operation, reporting failures on stderr with exit status 1."""
    app: AppContext = ctx.obj

    async def _run() -> Any:
        endpoint = app.endpoint()
        app.logger.debug("Using registry %s", endpoint)
        async with RegistryClient(endpoint, timeout=app.timeout, logger=app.logger) as client:
            return await operation(client)

    try:
        return asyncio.run(_run())
    except (RegistryError, ConfigError) as e:
        app.logger.debug("Command failed", exc_info=True)
        err_console.print(f"[red]error:[/] {escape(describe_error(e))}")
        ctx.exit(1)


@click.group(cls=RegistryGroup)
@click.version_option(version=__version__)
@click.argument("registry", required=False)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (defaults to the per-user config location)",
)
@click.option(
    "--log-level",
    type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
    default="info",
    show_default=True,
    help="Log verbosity",
)
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Per-request timeout in seconds",
)
@click.pass_context
def main(
    ctx: click.Context,
    registry: Optional[str],
    config_path: Optional[Path],
    log_level: str,
    timeout: int,
):
    """dredge, a Docker Registry CLI tool.

    REGISTRY is a host, host:port or full URL; when omitted the registry_url
    from the configuration file is used.
    """
    logger = configure_logging(log_level)
    ctx.obj = AppContext(
        registry=registry or None,
        config_path=config_path,
        timeout=timeout,
        logger=logger,
    )


# ── Catalog ──────────────────────────────────────────────────────────


@main.command()
@click.option("--sort/--no-sort", default=True, help="Sort repository names")
@click.option("--page-size", "-n", type=click.IntRange(min=1), default=None, help="Page size hint")
@click.pass_context
def catalog(ctx: click.Context, sort: bool, page_size: Optional[int]):
    """List the repositories hosted by the registry."""
    repositories = run(ctx, lambda client: client.list_catalog(page_size))

    for name in (sorted(repositories) if sort else repositories):
        console.print(name, markup=False, highlight=False)


# ── Tags ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("name")
@click.pass_context
def tags(ctx: click.Context, name: str):
    """List the tags of repository NAME."""
    tag_list = run(ctx, lambda client: client.list_tags(name))

    for tag in tag_list:
        console.print(tag, markup=False, highlight=False)


# ── Show ─────────────────────────────────────────────────────────────


def _format_size(size: int) -> str:
    return f"{size:,}"


def render_manifest(manifest: Manifest) -> None:
    """Print a manifest, always stating which variant the registry returned."""
    console.print(
        f"[bold]{manifest.kind.value}[/] (schema {manifest.schema_version})", highlight=False
    )
    console.print(f"Media type: {escape(manifest.media_type)}", highlight=False, soft_wrap=True)
    if manifest.digest is not None:
        console.print(f"Digest: {manifest.digest}", highlight=False, soft_wrap=True)

    if isinstance(manifest, ManifestList):
        table = Table(title=f"Platforms ({len(manifest.manifests)})")
        table.add_column("Platform", style="cyan", no_wrap=True)
        table.add_column("Digest", no_wrap=True)
        table.add_column("Size", justify="right")
        for entry in manifest.manifests:
            table.add_row(
                str(entry.platform) if entry.platform else "unknown",
                f"{entry.descriptor.digest.algorithm}:{entry.descriptor.digest.short}",
                _format_size(entry.descriptor.size),
            )
        console.print(table)

    elif isinstance(manifest, ImageManifest):
        console.print(
            f"Config: {manifest.config.digest} ({_format_size(manifest.config.size)} bytes)",
            highlight=False,
            soft_wrap=True,
        )
        table = Table(title=f"Layers ({len(manifest.layers)})")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Digest", no_wrap=True)
        table.add_column("Size", justify="right")
        for index, layer in enumerate(manifest.layers, start=1):
            table.add_row(
                str(index),
                f"{layer.digest.algorithm}:{layer.digest.short}",
                _format_size(layer.size),
            )
        console.print(table)
        console.print(f"Total size: {_format_size(manifest.total_size)} bytes", highlight=False)

    elif isinstance(manifest, LegacyManifest):
        console.print(
            f"Name: {manifest.name}  Tag: {manifest.tag}  Architecture: {manifest.architecture}",
            markup=False,
            highlight=False,
        )
        console.print(f"Layers ({len(manifest.layers)}):", highlight=False)
        for digest in manifest.layers:
            console.print(f"  {digest}", highlight=False, soft_wrap=True)


@main.command()
@click.argument("image")
@click.argument("tag", required=False, default=DEFAULT_TAG)
@click.pass_context
def show(ctx: click.Context, image: str, tag: str):
    """Show the manifest of IMAGE at TAG (a tag or digest, default "latest")."""

    async def operation(client: RegistryClient) -> Manifest:
        return await client.get_manifest(image, parse_reference(tag))

    render_manifest(run(ctx, operation))


# ── Delete ───────────────────────────────────────────────────────────


@main.command()
@click.argument("image")
@click.argument("tag")
@click.pass_context
def delete(ctx: click.Context, image: str, tag: str):
    """Delete the manifest that TAG of IMAGE points at."""
    digest = run(ctx, lambda client: client.delete_tag(image, tag))
    console.print(f"[green]Deleted[/] {image}:{tag} ({digest})", highlight=False, soft_wrap=True)


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.pass_context
def check(ctx: click.Context):
    """Check that the registry implements the V2 API."""
    version = run(ctx, lambda client: client.check_version())

    console.print("Ok", highlight=False)
    if version.header:
        console.print(f"API version: {version.header}", markup=False, highlight=False)


if __name__ == "__main__":
    main()
