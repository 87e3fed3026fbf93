"""
Notification exchange between the presenter and the data helper

GET_WIND_DATA   presenter -> helper   payload {lat, lon}
WIND_DATA       helper -> presenter   payload {windSpeed, windDirection}
WIND_DATA_ERROR helper -> presenter   no payload
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from threading import Thread, Lock
from typing import Callable, Dict, List, Optional

from .smhi_client import FetchResult, Reading, SMHIClient, WindDataError

GET_WIND_DATA = "GET_WIND_DATA"
WIND_DATA = "WIND_DATA"
WIND_DATA_ERROR = "WIND_DATA_ERROR"


@dataclass(frozen=True)
class Notification:
    name: str
    payload: Optional[dict] = None
    result: Optional[FetchResult] = None

    @classmethod
    def from_result(cls, result: FetchResult) -> "Notification":
        if result.ok:
            return cls(WIND_DATA, payload=result.reading.to_payload(), result=result)
        return cls(WIND_DATA_ERROR, result=result)

    def to_result(self) -> FetchResult:
        """Recover the tagged result, also for notifications that arrived without one"""
        if self.result is not None:
            return self.result
        if self.name == WIND_DATA and isinstance(self.payload, dict):
            return FetchResult(reading=Reading(
                wind_speed=self.payload.get('windSpeed'),
                wind_direction=self.payload.get('windDirection'),
            ))
        return FetchResult(error=WindDataError(f"{self.name} without usable payload"))

    def to_message(self) -> dict:
        return {'notification': self.name, 'payload': self.payload}


Handler = Callable[[Notification], None]


class NotificationChannel:
    """In-process publish/subscribe keyed by notification name"""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)
        self._lock = Lock()

    def subscribe(self, name: str, handler: Handler):
        with self._lock:
            self._handlers[name].append(handler)

    def publish(self, notification: Notification):
        with self._lock:
            handlers = list(self._handlers.get(notification.name, []))

        if not handlers:
            logging.debug(f"No subscribers for {notification.name}")

        for handler in handlers:
            try:
                handler(notification)
            except Exception as e:
                logging.error(f"Error handling {notification.name}: {e}", exc_info=True)


class WindHelper:
    """Answers GET_WIND_DATA with WIND_DATA or WIND_DATA_ERROR"""

    def __init__(self, client: SMHIClient, channel: NotificationChannel, threaded: bool = True):
        """
        Initialize helper

        Args:
            client: SMHI client used for the fetch
            channel: Channel to listen and reply on
            threaded: Fetch on a worker thread per request (False runs inline, for tests)
        """
        self.client = client
        self.channel = channel
        self.threaded = threaded
        channel.subscribe(GET_WIND_DATA, self._on_request)
        logging.info("Wind helper started")

    def _on_request(self, notification: Notification):
        payload = notification.payload or {}
        if self.threaded:
            # Overlapping requests are not deduplicated; the last reply wins
            Thread(target=self.get_wind_data, args=(payload,), name="wind-fetch", daemon=True).start()
        else:
            self.get_wind_data(payload)

    def get_wind_data(self, payload: dict):
        try:
            lat = float(payload['lat'])
            lon = float(payload['lon'])
        except (KeyError, TypeError, ValueError):
            logging.error(f"Invalid {GET_WIND_DATA} payload: {payload!r}")
            result = FetchResult(error=WindDataError(f"Invalid request payload: {payload!r}"))
        else:
            result = self.client.request(lat, lon)

        self.channel.publish(Notification.from_result(result))
