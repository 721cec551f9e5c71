"""
Health check server for the hosting platform
"""
import logging
from typing import Optional

from aiohttp import web

from services.session_store import SessionStore

logger = logging.getLogger(__name__)


class HealthCheckServer:
    """aiohttp app with /health and /status endpoints"""

    def __init__(self, host: str = "0.0.0.0", port: int = 10000,
                 session_store: Optional[SessionStore] = None, mode: str = "polling"):
        self.host = host
        self.port = port
        self.session_store = session_store
        self.mode = mode
        self._runner: Optional[web.AppRunner] = None

    def create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/health", self.health_check_handler)
        app.router.add_get("/status", self.status_handler)
        app.router.add_get("/", self.health_check_handler)
        return app

    async def health_check_handler(self, request: web.Request) -> web.Response:
        return web.Response(text="OK", content_type="text/plain")

    async def status_handler(self, request: web.Request) -> web.Response:
        info = [
            "Registration bot",
            "",
            "Status: ✅ Running",
            f"Mode: {self.mode}",
        ]
        if self.session_store is not None:
            info.append(f"Active sessions: {self.session_store.get_session_count()}")
            info.append("")
            info.append(self.session_store.stats.get_stats_str())
        return web.Response(text="\n".join(info), content_type="text/plain")

    async def start(self) -> None:
        """Start listening; a busy port is logged and skipped"""
        runner = web.AppRunner(self.create_app())
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port)
        try:
            await site.start()
        except OSError as e:
            await runner.cleanup()
            logger.warning(f"⚠️ Health check server not started on port {self.port}: {e}")
            return

        self._runner = runner
        logger.info(f"🌐 Health check server running on {self.host}:{self.port}")
        logger.info(f"✅ Available at: http://{self.host}:{self.port}/health")

    async def stop(self) -> None:
        if self._runner is None:
            return
        logger.info("🔄 Health check server stopping...")
        await self._runner.cleanup()
        self._runner = None
