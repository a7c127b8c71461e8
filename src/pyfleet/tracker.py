"""Poll driver: fetches fleet snapshots on a fixed cadence and applies them."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pyfleet._transport import HttpSnapshotSource, SnapshotSource
from pyfleet.animation import Animator
from pyfleet.config import FleetConfig
from pyfleet.exceptions import FleetError
from pyfleet.models.position import Position
from pyfleet.models.snapshot import Snapshot
from pyfleet.rendering import Bounds, FleetView, MapSurface, NullFleetView, fleet_bounds
from pyfleet.session import FleetSession
from pyfleet.simulator import FleetSimulator
from pyfleet.state.reconcile import ReconcileResult, Reconciler
from pyfleet.state.store import EntityStore

_logger = logging.getLogger(__name__)


class FleetTracker:
    """Keep a live view of the fleet by polling the status endpoint.

    Usage::

        async with FleetTracker(config, surface=surface, view=view) as tracker:
            await tracker.run()

    Ticks fire every ``config.poll_interval`` seconds whether or not the
    previous fetch has finished. Overlapping fetches are allowed and whichever
    finishes last wins.
    """

    def __init__(
        self,
        config: FleetConfig | None = None,
        *,
        http_session: aiohttp.ClientSession | None = None,
        source: SnapshotSource | None = None,
        surface: MapSurface | None = None,
        view: FleetView | None = None,
        simulator: FleetSimulator | None = None,
        animator: Animator | None = None,
        on_cycle: Callable[[ReconcileResult], None] | None = None,
    ) -> None:
        self._config = config or FleetConfig()
        self._external_session = http_session is not None
        self._http_session = http_session
        self._source = source
        self._surface = surface
        self._view: FleetView = view or NullFleetView()
        self._simulator = simulator or FleetSimulator()
        self._animator = animator or Animator(frame_interval=self._config.frame_interval)
        self._reconciler = Reconciler.from_config(
            self._config,
            surface=surface,
            view=self._view,
            animator=self._animator,
        )
        self._session = FleetSession(use_simulation=self._config.use_simulation)
        self._on_cycle = on_cycle
        self._poll_task: asyncio.Task[None] | None = None
        self._ticks: set[asyncio.Task[None]] = set()
        self._ticks_completed = 0
        self._ticks_target: int | None = None
        self._ticks_done: asyncio.Event | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetTracker:
        if self._source is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._source = HttpSnapshotSource(self._config, self._http_session)
        self._view.set_connection(self._session.online)
        self._view.set_simulation(self._session.use_simulation)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.stop()
        await self._animator.aclose()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def config(self) -> FleetConfig:
        return self._config

    @property
    def session(self) -> FleetSession:
        return self._session

    @property
    def store(self) -> EntityStore:
        return self._session.store

    @property
    def is_running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def toggle_simulation(self) -> bool:
        """Switch between the status endpoint and the local simulator."""
        enabled = self._session.toggle_simulation()
        _logger.info("Simulation %s", "enabled" if enabled else "disabled")
        self._view.set_simulation(enabled)
        return enabled

    def center_view(self) -> Bounds | None:
        """Fit the map to every tracked vehicle, or reset to the default centre.

        Returns the padded bounds that were applied, ``None`` when the fleet
        is empty.
        """
        bounds = fleet_bounds(self.store.positions(), pad=self._config.bounds_padding)
        if self._surface is None:
            return bounds
        try:
            if bounds is None:
                self._surface.set_view(Position(*self._config.default_center), self._config.default_zoom)
            else:
                self._surface.fit_bounds(bounds)
        except Exception:
            _logger.warning("Failed to recentre map", exc_info=True)
        return bounds

    # ------------------------------------------------------------------
    # One cycle
    # ------------------------------------------------------------------

    async def poll_once(self) -> ReconcileResult | None:
        """Run one poll cycle.

        In simulation mode the simulator feeds the reconciler. Otherwise the
        status endpoint is fetched; on failure the tracker goes offline and,
        only if nothing is tracked yet, falls back to one simulated snapshot.
        Returns ``None`` when the store was left untouched.
        """
        if self._session.use_simulation:
            return self._apply(self._simulator.simulate(self.store))

        source = self._require_source()
        try:
            snapshot = await source.fetch_snapshot()
        except FleetError as exc:
            _logger.warning("Fetch failed: %s", exc)
            self._set_online(False)
            if len(self.store) == 0:
                return self._apply(self._simulator.simulate(self.store))
            return None

        self._set_online(True)
        return self._apply(snapshot)

    def _require_source(self) -> SnapshotSource:
        if self._source is None:
            raise FleetError("Tracker not initialized. Use 'async with FleetTracker(...) as tracker:'")
        return self._source

    def _set_online(self, online: bool) -> None:
        self._session.online = online
        try:
            self._view.set_connection(online)
        except Exception:
            _logger.warning("Fleet view set_connection failed", exc_info=True)

    def _apply(self, snapshot: Snapshot) -> ReconcileResult:
        result = self._reconciler.reconcile(snapshot, self.store)
        self._session.apply_result(result)
        _logger.debug(
            "Cycle %d: created=%s updated=%d removed=%s alerts=%d",
            self._session.cycles,
            list(result.created),
            len(result.updated),
            list(result.removed),
            len(result.alert_records),
        )
        try:
            self._view.set_alerts(self._session.alerts)
            if self._session.last_updated is not None:
                self._view.set_last_updated(self._session.last_updated)
        except Exception:
            _logger.warning("Fleet view update failed", exc_info=True)
        if self._on_cycle is not None:
            try:
                self._on_cycle(result)
            except Exception:
                _logger.debug("on_cycle callback failed", exc_info=True)
        return result

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Tick immediately, then every ``poll_interval`` seconds.

        Restarting replaces the running schedule.
        """
        if self._poll_task is not None:
            self._poll_task.cancel()
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())

    async def stop(self) -> None:
        """Stop scheduling ticks and cancel any fetch still in flight."""
        task = self._poll_task
        self._poll_task = None
        pending = [t for t in self._ticks if not t.done()]
        if task is not None:
            pending.append(task)
        for t in pending:
            t.cancel()
        for t in pending:
            with contextlib.suppress(asyncio.CancelledError):
                await t
        self._ticks.clear()

    async def run(self, *, ticks: int | None = None) -> None:
        """Poll until cancelled, or until *ticks* more ticks have finished."""
        if ticks is None:
            self.start()
            assert self._poll_task is not None  # noqa: S101
            await self._poll_task
            return

        self._ticks_done = asyncio.Event()
        self._ticks_target = self._ticks_completed + ticks
        self.start()
        try:
            await self._ticks_done.wait()
        finally:
            self._ticks_target = None
            await self.stop()

    async def _poll_loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while True:
            self._spawn_tick(loop)
            next_at += self._config.poll_interval
            await asyncio.sleep(max(0.0, next_at - loop.time()))

    def _spawn_tick(self, loop: asyncio.AbstractEventLoop) -> None:
        task = loop.create_task(self._tick())
        self._ticks.add(task)
        task.add_done_callback(self._ticks.discard)

    async def _tick(self) -> None:
        try:
            await self.poll_once()
        except asyncio.CancelledError:
            raise
        except Exception:
            _logger.exception("Poll tick failed")
        self._ticks_completed += 1
        if (
            self._ticks_target is not None
            and self._ticks_done is not None
            and self._ticks_completed >= self._ticks_target
        ):
            self._ticks_done.set()
