"""HTTP snapshot source for the remote status endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Protocol

import aiohttp

from pyfleet._constants import USER_AGENT
from pyfleet.config import FleetConfig
from pyfleet.exceptions import FleetProtocolError, FleetTimeoutError, FleetTransportError
from pyfleet.ingestion.snapshot import parse_snapshot
from pyfleet.models.snapshot import Snapshot

_logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    """Structural snapshot source interface used by the tracker.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpSnapshotSource`) concrete.
    """

    async def fetch_snapshot(self) -> Snapshot:
        ...


class HttpSnapshotSource:
    """Fetch fleet snapshots from the status endpoint with a bounded timeout.

    No retries are attempted here; the poll cadence owns retrying.
    """

    def __init__(self, config: FleetConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.fetch_timeout)

    async def fetch_snapshot(self) -> Snapshot:
        """GET the status URL and parse the body into a snapshot.

        Raises
        ------
        FleetTimeoutError
            No complete response within ``config.fetch_timeout`` seconds.
        FleetTransportError
            Connection failure or non-200 status.
        FleetProtocolError
            Body is not UTF-8 JSON, or not a JSON object.
        """
        url = self._config.status_url
        headers = {"accept": "application/json", "user-agent": USER_AGENT}

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                data = await resp.read()
                if resp.status != 200:
                    text = data.decode("utf-8", errors="replace")
                    raise FleetTransportError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except FleetTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise FleetTimeoutError(
                f"No response from {url} within {self._config.fetch_timeout}s",
                url=url,
            ) from exc
        except aiohttp.ClientError as exc:
            raise FleetTransportError(f"Request to {url} failed: {exc}", url=url) from exc

        try:
            body = json.loads(data)
        except ValueError as exc:
            # Covers JSONDecodeError and bodies that are not valid UTF-8.
            raise FleetProtocolError(f"Invalid JSON from {url}: {data[:200]!r}", url=url) from exc

        try:
            return parse_snapshot(body, url=url)
        except FleetProtocolError:
            raise
        except (ValueError, TypeError, OverflowError) as exc:
            raise FleetProtocolError(f"Malformed snapshot from {url}: {exc}", url=url) from exc
