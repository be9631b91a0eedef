"""Resume download over HTTP(S) into a workspace file.

No content-type, size, or redirect-depth checks happen here; which URLs
are acceptable is decided before a job starts.
"""

import asyncio
import logging
from pathlib import Path

import httpx

from src.core.errors import DownloadError

logger = logging.getLogger(__name__)


class ResourceFetcher:
    """Streams a remote document to disk under a fixed timeout.

    ``timeout_s`` bounds the whole download, body included, not just
    each individual read.

    Usage::

        fetcher = ResourceFetcher(timeout_s=60)
        await fetcher.fetch("https://example.com/cv.pdf", Path("scratch/resume"))
    """

    def __init__(
        self,
        timeout_s: float = 60.0,
        follow_redirects: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_s = timeout_s
        self._timeout = httpx.Timeout(timeout_s)
        self._follow_redirects = follow_redirects
        self._transport = transport

    async def fetch(self, url: str, dest: Path) -> None:
        """Download ``url`` to ``dest``.

        Raises:
            DownloadError: On a malformed URL, connection/TLS/timeout
                failures, a non-2xx status (message includes the code),
                or a local write error.
        """
        logger.info("Downloading file from URL: %s", url)
        try:
            async with asyncio.timeout(self._timeout_s):
                await self._stream_to(url, dest)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            msg = f"{type(e).__name__}: {e}"
            raise DownloadError(msg) from e
        except TimeoutError as e:
            msg = f"download timed out after {self._timeout_s:g}s"
            raise DownloadError(msg) from e
        except OSError as e:
            msg = f"cannot write {dest}: {e}"
            raise DownloadError(msg) from e
        logger.info("File downloaded successfully: %s", dest)

    async def _stream_to(self, url: str, dest: Path) -> None:
        async with httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=self._follow_redirects,
            transport=self._transport,
        ) as client:
            async with client.stream("GET", url) as response:
                if not response.is_success:
                    msg = f"failed to download file: HTTP {response.status_code}"
                    raise DownloadError(msg, status_code=response.status_code)
                with dest.open("wb") as out:
                    async for chunk in response.aiter_bytes():
                        out.write(chunk)
