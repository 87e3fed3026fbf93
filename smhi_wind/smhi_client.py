"""
SMHI point forecast client for wind data
"""

import logging
import requests
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any


FORECAST_PATH = (
    "/api/category/pmp3g/version/2/geotype/point"
    "/lon/{lon}/lat/{lat}/data.json"
)
DEFAULT_BASE_URL = "https://opendata-download-metfcst.smhi.se"

WIND_SPEED_PARAM = "ws"      # m/s
WIND_DIRECTION_PARAM = "wd"  # degrees


class WindDataError(Exception):
    """Raised when a wind reading could not be produced"""

    kind = "unknown"


class NetworkError(WindDataError):
    """Transport failure: DNS, TLS, timeout or non-2xx status"""

    kind = "network"


class ParseError(WindDataError):
    """Malformed JSON or a document without the expected shape"""

    kind = "parse"


@dataclass(frozen=True)
class Reading:
    """Wind speed (m/s) and direction (degrees) at the forecast time closest to now"""

    wind_speed: Optional[float]
    wind_direction: Optional[float]

    def to_payload(self) -> Dict[str, Optional[float]]:
        return {'windSpeed': self.wind_speed, 'windDirection': self.wind_direction}


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one fetch: exactly one of reading or error is set"""

    reading: Optional[Reading] = None
    error: Optional[WindDataError] = None

    def __post_init__(self):
        if (self.reading is None) == (self.error is None):
            raise ValueError("FetchResult needs exactly one of reading or error")

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_valid_time(value: str) -> datetime:
    """Parse an ISO-8601 validTime such as 2024-01-19T12:00:00Z"""
    if not isinstance(value, str):
        raise ParseError(f"validTime is not a string: {value!r}")
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ParseError(f"Unparseable validTime: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def select_closest_entry(time_series: List[Dict[str, Any]], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Pick the time-series entry whose validTime is closest to now

    Ties go to the entry seen first.

    Args:
        time_series: The forecast's timeSeries list
        now: Reference time (defaults to the current UTC time)

    Returns:
        The selected entry
    """
    if not isinstance(time_series, list) or not time_series:
        raise ParseError("Forecast has no timeSeries entries")

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    closest = None
    closest_diff = None
    for entry in time_series:
        if not isinstance(entry, dict):
            raise ParseError(f"Malformed timeSeries entry: {entry!r}")
        diff = abs((parse_valid_time(entry.get('validTime')) - now).total_seconds())
        if closest is None or diff < closest_diff:
            closest = entry
            closest_diff = diff

    return closest


def find_parameter_value(entry: Dict[str, Any], name: str) -> Optional[float]:
    """
    Return the first value of the named parameter, or None if it is absent

    Args:
        entry: A timeSeries entry
        name: Parameter name, e.g. "ws" for wind speed
    """
    parameters = entry.get('parameters')
    if not isinstance(parameters, list):
        raise ParseError("timeSeries entry has no parameters list")

    for parameter in parameters:
        if isinstance(parameter, dict) and parameter.get('name') == name:
            values = parameter.get('values') or []
            return values[0] if values else None

    return None


class SMHIClient:
    """SMHI open data client, one GET per call and no retries"""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: Optional[float] = 10,
                 session: Optional[requests.Session] = None):
        """
        Initialize SMHI client

        Args:
            base_url: Scheme and host of the forecast API
            timeout: Request timeout in seconds passed to requests
            session: Optional requests session (a new one is created otherwise)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config) -> "SMHIClient":
        return cls(base_url=config.base_url, timeout=config.request_timeout)

    def build_url(self, lat: float, lon: float) -> str:
        return self.base_url + FORECAST_PATH.format(lat=lat, lon=lon)

    def fetch_reading(self, lat: float, lon: float, now: Optional[datetime] = None) -> Reading:
        """
        Fetch the wind reading closest to now

        Raises:
            NetworkError: request failed or returned a non-2xx status
            ParseError: body is not JSON or lacks the expected structure
        """
        url = self.build_url(lat, lon)

        try:
            logging.debug(f"Fetching forecast from SMHI: {url}")
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"SMHI request failed: {e}") from e

        try:
            document = response.json()
        except ValueError as e:
            raise ParseError(f"SMHI response is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise ParseError("SMHI response is not a JSON object")

        entry = select_closest_entry(document.get('timeSeries'), now=now)

        return Reading(
            wind_speed=find_parameter_value(entry, WIND_SPEED_PARAM),
            wind_direction=find_parameter_value(entry, WIND_DIRECTION_PARAM),
        )

    def request(self, lat: float, lon: float) -> FetchResult:
        """Fetch a reading and wrap the outcome; never raises WindDataError"""
        try:
            reading = self.fetch_reading(lat, lon)
        except NetworkError as e:
            logging.error(f"Error fetching wind data: {e}")
            return FetchResult(error=e)
        except ParseError as e:
            logging.error(f"Error parsing wind data: {e}")
            return FetchResult(error=e)
        except Exception as e:
            logging.error(f"Unexpected error fetching wind data: {e}", exc_info=True)
            return FetchResult(error=WindDataError(str(e)))

        logging.info(
            f"SMHI wind data: speed={reading.wind_speed} m/s, direction={reading.wind_direction} degrees"
        )
        return FetchResult(reading=reading)
