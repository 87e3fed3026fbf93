"""
Recurring update timer
"""

import logging
from threading import Thread, Event
from typing import Callable, Optional


class UpdateTimer:
    """Calls a task immediately and then every interval seconds until stopped"""

    def __init__(self, task: Callable[[], None], interval_sec: float, name: str = "update-timer"):
        """
        Initialize timer

        Args:
            task: Function to call on every tick
            interval_sec: Seconds between ticks
            name: Thread name (shows up in logs and debuggers)
        """
        if interval_sec <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval_sec}")

        self.task = task
        self.interval = float(interval_sec)
        self.name = name
        self.ticks = 0

        self.running = False
        self.stop_event = Event()
        self.thread: Optional[Thread] = None

    def start(self):
        """Start ticking; a no-op if already running"""
        if self.running:
            return

        self.running = True
        self.stop_event.clear()
        self.thread = Thread(target=self._loop, name=self.name, daemon=True)
        self.thread.start()
        logging.debug(f"{self.name} started (interval {self.interval:.0f}s)")

    def stop(self, timeout: float = 5):
        """Stop future ticks; a tick already running is not interrupted"""
        if not self.running:
            return

        self.running = False
        self.stop_event.set()

        if self.thread:
            self.thread.join(timeout=timeout)

        logging.debug(f"{self.name} stopped after {self.ticks} ticks")

    def _loop(self):
        while self.running and not self.stop_event.is_set():
            self.ticks += 1
            try:
                self.task()
            except Exception as e:
                logging.error(f"Error in {self.name} task: {e}", exc_info=True)

            self.stop_event.wait(timeout=self.interval)
