"""
Registry Client - access to the CI artifact registry.

Lists a repository's build artifacts and downloads artifact archives
over bearer-token authenticated HTTP.
"""

import logging
from pathlib import Path

import httpx
from pydantic import ValidationError

from sherpa_updater.core.exceptions import (
    DecodeError,
    HTTPStatusError,
    TransportError,
    WriteError,
)
from sherpa_updater.core.models import Catalog

logger = logging.getLogger(__name__)


class RegistryClient:
    """
    Client for the registry's artifact endpoints.

    Every request is issued once; there are no retries. A non-200 final
    status is always an error.
    """

    ACCEPT = "application/vnd.github+json"
    CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        token: str,
        *,
        timeout_seconds: float | None = None,
        http_client: httpx.Client | None = None,
    ):
        """
        Initialize the registry client.

        Args:
            token: Bearer token sent with every request
            timeout_seconds: Transport timeout, None disables it
            http_client: Pre-built httpx client, left open on close()
        """
        self._token = token
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(timeout=timeout_seconds, follow_redirects=True)
        self._client = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": self.ACCEPT,
        }

    def list_artifacts(self, url: str) -> Catalog:
        """
        Fetch the first page of a repository's artifact listing.

        Args:
            url: Artifact listing URL

        Returns:
            Catalog of artifacts in the order the registry sent them

        Raises:
            TransportError: If the request fails at the network level
            HTTPStatusError: If the status code is not 200
            DecodeError: If the body is not a valid artifact listing
        """
        logger.info(f"Fetching artifact listing from {url}")
        try:
            response = self._client.get(url, headers=self._headers())
        except httpx.HTTPError as e:
            raise TransportError(f"Request to registry failed: {e}", url=url) from e

        self._check_status(response, url)

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"Registry response is not valid JSON: {e}", url=url) from e

        try:
            catalog = Catalog.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(
                "Registry response does not match the artifact listing schema",
                url=url,
                validation_errors=[
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
            ) from e

        logger.debug(
            f"Registry reported {catalog.count} artifacts, "
            f"{len(catalog.artifacts)} on this page"
        )
        return catalog

    def download(self, url: str, destination: Path) -> int:
        """
        Stream a binary response body to ``destination``.

        Args:
            url: Archive download URL
            destination: File created or truncated to hold the body

        Returns:
            Number of bytes written

        Raises:
            TransportError: If the request or body read fails
            HTTPStatusError: If the status code is not 200
            WriteError: If the destination cannot be created or written
        """
        logger.info(f"Downloading {url} to {destination}")
        written = 0
        try:
            with self._client.stream("GET", url, headers=self._headers()) as response:
                self._check_status(response, url)

                try:
                    sink = open(destination, "wb")
                except OSError as e:
                    raise WriteError(f"Cannot create file: {e}", path=str(destination)) from e

                with sink:
                    for chunk in response.iter_bytes(self.CHUNK_SIZE):
                        try:
                            sink.write(chunk)
                        except OSError as e:
                            raise WriteError(
                                f"Cannot write file: {e}", path=str(destination)
                            ) from e
                        written += len(chunk)
        except httpx.HTTPError as e:
            raise TransportError(f"Download failed: {e}", url=url) from e

        logger.debug(f"Wrote {written} bytes to {destination}")
        return written

    @staticmethod
    def _check_status(response: httpx.Response, url: str) -> None:
        if response.status_code != 200:
            raise HTTPStatusError(
                f"received non 200 response code of {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()
