"""
Wind presenter: display state machine and fragment rendering
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum, auto
from threading import Lock
from typing import Callable, List, Optional, Tuple

from .notifications import (
    GET_WIND_DATA, WIND_DATA, WIND_DATA_ERROR, Notification, NotificationChannel,
)
from .scheduler import UpdateTimer
from .smhi_client import FetchResult, Reading
from .translations import Translator
from . import wind_format


class DisplayState(Enum):
    """What the module currently shows"""
    LOADING = auto()  # No report received yet
    ERROR = auto()  # Last report was a failure
    READY = auto()  # Last report carried a reading


@dataclass(frozen=True)
class WindLine:
    kind: str  # 'wind-speed' or 'wind-direction'
    icon: str
    text: str


@dataclass(frozen=True)
class WindFragment:
    """Renderable output: a placeholder text or two icon lines"""
    layout: str
    state: DisplayState
    text: Optional[str] = None
    lines: Tuple[WindLine, ...] = field(default_factory=tuple)

    @property
    def css_class(self) -> str:
        return f"small wind-{self.layout}"


Listener = Callable[[WindFragment, int], None]


def _speed_value(speed) -> Optional[float]:
    if speed is None or isinstance(speed, bool):
        return None
    try:
        value = float(speed)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


class WindPresenter:
    """Requests data on a timer and renders the latest report"""

    def __init__(self, config, channel: NotificationChannel, translator: Optional[Translator] = None):
        """
        Initialize presenter

        Args:
            config: Config object with smhi and display settings
            channel: Channel used to request data and receive replies
            translator: Translation lookup (defaults to config.language)
        """
        self.config = config
        self.channel = channel
        self.translate = translator or Translator(config.language)

        # State and reading are replaced together under the lock
        self._state: Tuple[DisplayState, Optional[Reading]] = (DisplayState.LOADING, None)
        self._lock = Lock()
        # Held across swap, render and listener calls so outputs follow swap order
        self._dispatch_lock = Lock()
        self.listeners: List[Listener] = []

        self.timer = UpdateTimer(self.request_update, config.update_interval_sec, name="wind-update")

        channel.subscribe(WIND_DATA, self._on_notification)
        channel.subscribe(WIND_DATA_ERROR, self._on_notification)

    def start(self):
        logging.info("Starting module: SMHI wind")
        self.timer.start()

    def stop(self):
        self.timer.stop()
        logging.info("SMHI wind module stopped")

    def add_listener(self, listener: Listener):
        """Register a callback receiving (fragment, animation_speed) after each update"""
        self.listeners.append(listener)

    def request_update(self):
        self.channel.publish(Notification(GET_WIND_DATA, payload={
            'lat': self.config.lat,
            'lon': self.config.lon,
        }))

    def _on_notification(self, notification: Notification):
        self.receive(notification.to_result())

    def receive(self, result: FetchResult):
        """Replace the displayed state with a new report"""
        if result.ok:
            new_state = (DisplayState.READY, result.reading)
        else:
            new_state = (DisplayState.ERROR, None)

        with self._dispatch_lock:
            with self._lock:
                previous = self._state[0]
                self._state = new_state

            if previous != new_state[0]:
                logging.info(f"Wind display state: {previous.name} -> {new_state[0].name}")

            fragment = self.render()
            for listener in list(self.listeners):
                try:
                    listener(fragment, self.config.animation_speed)
                except Exception as e:
                    logging.error(f"Error in wind display listener: {e}", exc_info=True)

    @property
    def state(self) -> DisplayState:
        with self._lock:
            return self._state[0]

    @property
    def reading(self) -> Optional[Reading]:
        with self._lock:
            return self._state[1]

    def get_speed_label(self, speed) -> str:
        value = _speed_value(speed)
        if value is None:
            return wind_format.NOT_AVAILABLE

        display_type = self.config.display_type
        if display_type == 'textsea':
            return self.translate(wind_format.get_text_sea(value))
        if display_type == 'beaufort':
            return f"{wind_format.get_beaufort_force(value)} {self.translate('BEAUFORT')}"
        return f"{wind_format.format_number(value)} {self.translate('MS')}"

    def get_speed_icon(self, speed) -> str:
        return wind_format.get_wind_icon(_speed_value(speed))

    def get_direction_label(self, degrees) -> str:
        return wind_format.get_wind_direction(degrees, self.config.direction_type)

    def get_direction_icon(self, degrees) -> str:
        return wind_format.get_direction_icon(degrees)

    def _line(self, kind: str, label_key: str, icon: str, value: str) -> WindLine:
        text = value if self.config.icon_only else f"{self.translate(label_key)}: {value}"
        return WindLine(kind=kind, icon=icon, text=text)

    def render(self) -> WindFragment:
        with self._lock:
            state, reading = self._state

        layout = self.config.layout

        if state is DisplayState.LOADING:
            return WindFragment(layout=layout, state=state, text=self.translate("LOADING"))

        if state is DisplayState.ERROR or reading is None:
            return WindFragment(layout=layout, state=DisplayState.ERROR, text=self.translate("ERROR"))

        speed_line = self._line(
            "wind-speed", "WIND_SPEED",
            self.get_speed_icon(reading.wind_speed),
            self.get_speed_label(reading.wind_speed),
        )
        direction_line = self._line(
            "wind-direction", "WIND_DIRECTION",
            self.get_direction_icon(reading.wind_direction),
            self.get_direction_label(reading.wind_direction),
        )
        return WindFragment(layout=layout, state=state, lines=(speed_line, direction_line))
