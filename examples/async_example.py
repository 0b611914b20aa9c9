"""Example usage of the async registry client."""

import asyncio
import logging

from dredge import (
    ImageManifest,
    ManifestList,
    RegistryClient,
    RegistryError,
    check_registry,
    list_repositories,
    list_tags,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

REGISTRY_URL = "http://localhost:15000"


async def main():
    """Example functional operations."""
    try:
        # Check the API version
        logger.info("Checking registry API version...")
        version = await check_registry(REGISTRY_URL)
        logger.info(f"Registry answered, API version: {version.header or 'unknown'}")

        # List repositories
        logger.info("Listing repositories...")
        repos = await list_repositories(REGISTRY_URL)
        logger.info(f"Found {len(repos)} repositories: {repos}")

        # If there are repositories, show their tags
        for repo in repos[:3]:  # Show first 3 repos
            tags = await list_tags(REGISTRY_URL, repo)
            logger.info(f"{repo}: {tags}")

    except RegistryError as e:
        logger.error(f"Registry error: {e}")


async def inspect_manifests():
    """Example of reusing one client session for several requests."""
    try:
        async with RegistryClient(REGISTRY_URL, timeout=10) as client:
            for repo in (await client.list_catalog())[:3]:
                for tag in (await client.list_tags(repo))[:2]:
                    manifest = await client.get_manifest(repo, tag)
                    logger.info(f"{repo}:{tag} is a {manifest.kind.value} ({manifest.digest})")

                    if isinstance(manifest, ManifestList):
                        for entry in manifest.manifests:
                            logger.info(f"  {entry.platform}: {entry.descriptor.digest}")
                    elif isinstance(manifest, ImageManifest):
                        logger.info(
                            f"  {len(manifest.layers)} layers, {manifest.total_size:,} bytes"
                        )

    except RegistryError as e:
        logger.error(f"Registry error: {e}")


if __name__ == "__main__":
    print("=== Functional API ===")
    asyncio.run(main())

    print("\n=== Client Session ===")
    asyncio.run(inspect_manifests())
