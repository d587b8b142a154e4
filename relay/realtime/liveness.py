"""
Liveness monitor.

Each sweep either evicts a connection that did not answer the previous probe
or clears its flag and probes it again, so a silent peer is gone within two
intervals.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable

from fastapi import status

from relay.realtime.connection import DeliveryError
from relay.realtime.registry import ConnectionRegistry, RelayConnection

logger = logging.getLogger(__name__)


class LivenessMonitor:
    def __init__(
        self,
        registry: ConnectionRegistry,
        on_terminate: Callable[[RelayConnection], None],
        interval: float = 30.0,
        close_timeout: float = 5.0,
    ):
        self.registry = registry
        self.on_terminate = on_terminate
        self.interval = interval
        self.close_timeout = close_timeout
        self._task: asyncio.Task | None = None
        self._closing: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep(self) -> int:
        """Run one probe/evict pass; returns how many connections were evicted."""
        evicted = 0
        for conn in self.registry.connections():
            if not conn.is_alive or not conn.is_open:
                self.terminate(conn)
                evicted += 1
                continue
            conn.is_alive = False
            try:
                conn.probe()
            except DeliveryError as e:
                logger.info("Probe to %s failed: %s", conn.id, e.reason)
        return evicted

    def terminate(self, conn: RelayConnection) -> None:
        """Forget the connection now; the transport close runs in the background."""
        logger.info("Evicting unresponsive connection %s", conn.id)
        try:
            self.on_terminate(conn)
        finally:
            task = asyncio.create_task(self._close(conn), name=f"ws-close-{conn.id}")
            self._closing.add(task)
            task.add_done_callback(self._closing.discard)

    async def wait_closed(self) -> None:
        """Wait for every transport close started by an eviction."""
        while self._closing:
            await asyncio.gather(*list(self._closing), return_exceptions=True)

    async def _close(self, conn: RelayConnection) -> None:
        # Half-open peers may never finish the close handshake.
        try:
            await asyncio.wait_for(conn.close(code=status.WS_1001_GOING_AWAY), timeout=self.close_timeout)
        except asyncio.TimeoutError:
            logger.warning("Close of %s timed out after %.1fs", conn.id, self.close_timeout)
        except Exception:
            logger.exception("Close of %s failed", conn.id)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="liveness-monitor")

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        await self.wait_closed()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                evicted = await self.sweep()
            except Exception:
                logger.exception("Liveness sweep failed")
                continue
            if evicted:
                logger.info("Liveness sweep evicted %d connection(s), %d remain", evicted, len(self.registry))
