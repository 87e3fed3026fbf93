"""
Configuration management for the wind module
"""

import logging
from copy import deepcopy
from pathlib import Path

import yaml


DEFAULTS = {
    'smhi': {
        'lat': 57.7089,    # Göteborg latitude
        'lon': 11.9746,    # Göteborg longitude
        'update_interval': 30 * 60 * 1000,  # ms
        'request_timeout': 10,  # seconds
        'base_url': 'https://opendata-download-metfcst.smhi.se',
    },
    'display': {
        'animation_speed': 1000,  # ms
        'direction_type': 'compass',
        'display_type': 'textsea',
        'icon_only': False,
        'language': 'en',
        'layout': 'vertical',
        'width': 320,
        'height': 64,
    },
    'output': {},
    'mqtt': {
        'enabled': False,
    },
    'logging': {
        'level': 'INFO',
    },
}

DIRECTION_TYPES = ('compass', 'degrees')
DISPLAY_TYPES = ('textsea', 'beaufort', 'ms')
LANGUAGES = ('en', 'sv')
LAYOUTS = ('vertical', 'horizontal')

# Option names used by the MagicMirror module config
LEGACY_KEYS = {
    'updateInterval': 'update_interval',
    'animationSpeed': 'animation_speed',
    'directionType': 'direction_type',
    'displayType': 'display_type',
    'iconOnly': 'icon_only',
}


def _merge(base: dict, override: dict) -> dict:
    merged = deepcopy(base)
    for key, value in (override or {}).items():
        # An empty YAML section parses as None
        if value is None and isinstance(merged.get(key), dict):
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _normalize_keys(section: dict) -> dict:
    return {LEGACY_KEYS.get(k, k): v for k, v in (section or {}).items()}


class Config:
    """Application configuration manager"""

    def __init__(self, config_path="config.yaml"):
        self.config_path = Path(config_path) if config_path else None
        self.data = deepcopy(DEFAULTS)
        if self.config_path is not None:
            self.load()

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Build a configuration without touching the filesystem"""
        config = cls(config_path=None)
        config._apply(data)
        return config

    def load(self):
        """Load configuration from YAML file"""
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}\n"
                f"Copy config.yaml.example to config.yaml and edit with your settings"
            )

        with open(self.config_path, 'r') as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            raise ValueError(f"Configuration root must be a mapping: {self.config_path}")

        self._apply(raw)
        logging.debug(f"Configuration loaded from {self.config_path}")

    def _apply(self, raw: dict):
        raw = dict(raw)
        for section in DEFAULTS:
            value = raw.get(section)
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"Config section '{section}' must be a mapping, got {value!r}")
        for section in ('smhi', 'display'):
            if section in raw:
                raw[section] = _normalize_keys(raw[section])
        self.data = _merge(DEFAULTS, raw)
        self.validate()

    def validate(self):
        """Reject values the presenter cannot render"""
        display = self.data['display']
        choices = {
            'direction_type': DIRECTION_TYPES,
            'display_type': DISPLAY_TYPES,
            'language': LANGUAGES,
            'layout': LAYOUTS,
        }
        for field, allowed in choices.items():
            if display.get(field) not in allowed:
                raise ValueError(
                    f"Invalid display.{field}: {display.get(field)!r} (expected one of {', '.join(allowed)})"
                )

        smhi = self.data['smhi']
        for field in ('lat', 'lon'):
            try:
                smhi[field] = float(smhi[field])
            except (TypeError, ValueError):
                raise ValueError(f"Invalid smhi.{field}: {smhi.get(field)!r}")

        if not -90 <= smhi['lat'] <= 90:
            raise ValueError(f"Latitude out of range: {smhi['lat']}")
        if not -180 <= smhi['lon'] <= 180:
            raise ValueError(f"Longitude out of range: {smhi['lon']}")

        interval = smhi.get('update_interval')
        if not isinstance(interval, (int, float)) or isinstance(interval, bool) or interval <= 0:
            raise ValueError(f"Invalid smhi.update_interval: {interval!r}")

    # Convenience accessors
    @property
    def lat(self):
        return self.data['smhi']['lat']

    @property
    def lon(self):
        return self.data['smhi']['lon']

    @property
    def update_interval(self):
        """Refresh interval in milliseconds"""
        return self.data['smhi']['update_interval']

    @property
    def update_interval_sec(self):
        return self.update_interval / 1000.0

    @property
    def request_timeout(self):
        return self.data['smhi'].get('request_timeout', 10)

    @property
    def base_url(self):
        return self.data['smhi'].get('base_url', DEFAULTS['smhi']['base_url']).rstrip('/')

    @property
    def animation_speed(self):
        return self.data['display'].get('animation_speed', 1000)

    @property
    def direction_type(self):
        return self.data['display']['direction_type']

    @property
    def display_type(self):
        return self.data['display']['display_type']

    @property
    def icon_only(self):
        return bool(self.data['display'].get('icon_only', False))

    @property
    def language(self):
        return self.data['display']['language']

    @property
    def layout(self):
        return self.data['display']['layout']

    @property
    def display_width(self):
        return self.data['display'].get('width', 320)

    @property
    def display_height(self):
        return self.data['display'].get('height', 64)

    @property
    def html_file(self):
        return self.data.get('output', {}).get('html_file')

    @property
    def image_file(self):
        return self.data.get('output', {}).get('image_file')

    @property
    def mqtt_enabled(self):
        return bool(self.data.get('mqtt', {}).get('enabled', False))

    @property
    def logging_level(self):
        return self.data.get('logging', {}).get('level', 'INFO')
