"""Liveness HTTP endpoint for the hosting platform."""

from __future__ import annotations

import logging

from aiohttp import web

log = logging.getLogger(__name__)

HEALTH_TEXT = "Boss timer bot is running"


async def _handle_health(request: web.Request) -> web.Response:
    return web.Response(text=HEALTH_TEXT)


def create_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/", _handle_health)
    return app


# ---------------------------------------------------------------------------
# Server lifecycle
# ---------------------------------------------------------------------------

_runner: web.AppRunner | None = None


async def start(port: int, host: str = "0.0.0.0") -> None:
    """Serve ``GET /`` on host:port until ``stop`` is called."""
    global _runner  # noqa: PLW0603
    if _runner is not None:
        return
    runner = web.AppRunner(create_app())
    await runner.setup()
    try:
        await web.TCPSite(runner, host, port).start()
    except OSError:
        await runner.cleanup()
        raise
    _runner = runner
    log.info("Health server started on %s:%d", host, port)


async def stop() -> None:
    """Graceful shutdown of the health server."""
    global _runner  # noqa: PLW0603
    if _runner:
        await _runner.cleanup()
        _runner = None
        log.info("Health server stopped")
