"""
health_monitor.py - background connectivity poll against the backend
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from client.api_client import SongsApiClient

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30.0


class HealthMonitor:
    """Polls the backend health endpoint every `interval` seconds"""

    def __init__(self, client: SongsApiClient, interval: float = DEFAULT_INTERVAL):
        self.client = client
        self.interval = interval
        self.is_connected = False
        self.last_checked: Optional[datetime] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def check_now(self) -> bool:
        connected = self.client.health_check()

        if connected != self.is_connected:
            logger.info("Backend %s", "reachable" if connected else "unreachable")

        self.is_connected = connected
        self.last_checked = datetime.now(timezone.utc)
        return connected

    def start(self) -> None:
        if self.is_running:
            logger.warning("Health monitor is already running")
            return

        self._stop.clear()

        def poll_loop():
            while not self._stop.is_set():
                self.check_now()
                self._stop.wait(self.interval)

        self._thread = threading.Thread(target=poll_loop, name="health-monitor", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=timeout)
        self._thread = None
