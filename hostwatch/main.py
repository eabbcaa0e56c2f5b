"""FastAPI application entry point.

Owns the process-wide :class:`AsyncHostResolver`, exposes it through
the REST router, and streams completed resolutions to WebSocket
clients.  Resolver callbacks are marshalled onto the event loop with
``loop.call_soon_threadsafe``.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from hostwatch import __version__
from hostwatch.api.hosts import router as hosts_router
from hostwatch.config import get_settings
from hostwatch.engine.dns import reverse_dns
from hostwatch.engine.host import Host
from hostwatch.engine.resolver import AsyncHostResolver

logger = logging.getLogger(__name__)


def _no_lookup(address: str) -> Optional[str]:
    return None


class QueueSubscriber:
    """Feeds resolved hosts into an :class:`asyncio.Queue` as JSON text.

    Must only be notified on the queue's event loop.
    """

    def __init__(self, queue: asyncio.Queue):
        self.queue = queue

    def resolved(self, host: Host) -> None:
        self.queue.put_nowait(host.model_dump_json())


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle handler.

    On startup the resolver is created and bound to the running event
    loop.  On shutdown subscribers are dropped, queued lookups are
    cancelled, and the worker is given a bounded time to finish.
    """
    cfg = get_settings()
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")
    logger.info("hostwatch v%s starting up", __version__)

    loop = asyncio.get_running_loop()
    lookup = reverse_dns if cfg.enable_reverse_dns else _no_lookup
    app.state.resolver = AsyncHostResolver(lookup=lookup, dispatch=loop.call_soon_threadsafe)

    yield

    resolver: AsyncHostResolver = app.state.resolver
    resolver.unsubscribe_all()
    resolver.cancel_all_pending_requests()
    idle = await asyncio.to_thread(resolver.wait_until_idle, cfg.worker_join_timeout)
    if not idle:
        logger.warning("Resolver worker still busy after %.1fs", cfg.worker_join_timeout)
    logger.info("hostwatch shut down")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

app = FastAPI(
    title="hostwatch",
    version=__version__,
    description="Asynchronous reverse-DNS resolution with live updates.",
    lifespan=lifespan,
)

app.include_router(hosts_router)


# ---------------------------------------------------------------------------
# WebSocket live feed
# ---------------------------------------------------------------------------


@app.websocket("/ws/hosts")
async def ws_resolved_feed(websocket: WebSocket):
    """Stream every completed resolution to a connected client.

    Args:
        websocket: The incoming WebSocket connection.
    """
    resolver: AsyncHostResolver = websocket.app.state.resolver
    queue: asyncio.Queue = asyncio.Queue()
    subscriber = QueueSubscriber(queue)

    async def _pump() -> None:
        while True:
            payload = await queue.get()
            await websocket.send_text(payload)

    await websocket.accept()
    sender = asyncio.create_task(_pump())
    try:
        resolver.subscribe(subscriber)
        # Incoming messages are ignored; receiving surfaces the disconnect.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("WebSocket client disconnected")
    finally:
        resolver.unsubscribe(subscriber)
        sender.cancel()
        (outcome,) = await asyncio.gather(sender, return_exceptions=True)
        if isinstance(outcome, Exception):
            logger.debug("WebSocket sender stopped: %s", outcome)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the application via Uvicorn when invoked as ``python -m hostwatch.main``."""
    import uvicorn

    cfg = get_settings()
    uvicorn.run(
        "hostwatch.main:app",
        host=cfg.host,
        port=cfg.port,
        log_level=cfg.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
