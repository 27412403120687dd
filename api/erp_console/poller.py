# erp_console/poller.py
"""
Background refresh of the unread-notification count.

Runs as an asyncio task inside the app lifespan. The service call is blocking
(httpx sync client), so each tick runs it in a worker thread.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .errors import AuthenticationRequired, ErpApiError
from .services.notifications import NotificationService
from .session import SessionStore

logger = logging.getLogger(__name__)


class NotificationPoller:
    def __init__(self, service: NotificationService, session: SessionStore, interval: float = 30.0):
        self.service = service
        self.session = session
        self.interval = interval
        self.last_count: Optional[int] = None
        self.last_polled_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> Optional[int]:
        if not self.session.is_authenticated:
            return None
        try:
            count = await asyncio.to_thread(self.service.refresh_count)
        except AuthenticationRequired as e:
            self.last_error = e.message
            logger.info("Notification poll skipped: %s", e.message)
            return None
        except ErpApiError as e:
            self.last_error = e.message
            logger.warning("Notification poll failed: %s", e.message)
            return None
        except Exception as e:
            self.last_error = str(e) or type(e).__name__
            logger.exception("Notification poll crashed")
            return None
        if self.last_count is not None and count > self.last_count:
            logger.info("Unread notifications: %d -> %d", self.last_count, count)
        self.last_count = count
        self.last_polled_at = datetime.now(timezone.utc)
        self.last_error = None
        return count

    async def _run(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="notification-poller")
        logger.info("Notification poller started (every %.0fs)", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Notification poller stopped")

    def state(self) -> Dict[str, Any]:
        return {
            "running": self.running,
            "intervalSeconds": self.interval,
            "lastCount": self.last_count,
            "lastPolledAt": self.last_polled_at.isoformat() if self.last_polled_at else None,
            "lastError": self.last_error,
        }
