#!/usr/bin/env python3
"""Tests for wind speed and direction formatting"""

import pytest

from smhi_wind import wind_format
from smhi_wind.wind_format import (
    get_beaufort_force, get_compass_point, get_direction_icon, get_text_sea,
    get_wind_direction, get_wind_icon,
)

SPEED_ICONS = {
    "wi-cloud", "wi-windy", "wi-strong-wind",
    "wi-gale-warning", "wi-storm-warning", "wi-hurricane-warning",
}

SPEEDS = [i / 10 for i in range(0, 450)]


@pytest.mark.parametrize("speed,expected", [
    (0, "CALM"),
    (0.29, "CALM"),
    (0.3, "BREEZE"),
    (13.89, "BREEZE"),
    (13.9, "GALE"),
    (24.5, "STORM"),
    (32.69, "STORM"),
    (32.7, "HURRICANE"),
    (60, "HURRICANE"),
])
def test_text_sea_bands(speed, expected):
    assert get_text_sea(speed) == expected


@pytest.mark.parametrize("speed,force", [
    (0, 0), (0.29, 0), (0.3, 1), (1.6, 2), (3.4, 3), (5.5, 4), (7.99, 4),
    (8.0, 5), (10.8, 6), (13.9, 7), (17.2, 8), (20.8, 9), (24.5, 10),
    (28.5, 11), (32.69, 11), (32.7, 12), (50, 12),
])
def test_beaufort_force(speed, force):
    assert get_beaufort_force(speed) == force


def test_beaufort_and_text_sea_are_monotonic():
    order = ["CALM", "BREEZE", "GALE", "STORM", "HURRICANE"]
    forces = [get_beaufort_force(s) for s in SPEEDS]
    seas = [order.index(get_text_sea(s)) for s in SPEEDS]
    assert forces == sorted(forces)
    assert seas == sorted(seas)


def test_wind_icon_is_total():
    for speed in SPEEDS + [1000.0]:
        assert get_wind_icon(speed) in SPEED_ICONS


@pytest.mark.parametrize("speed,icon", [
    (0, "wi-cloud"),
    (0.2, "wi-cloud"),
    (0.2000001, "wi-windy"),
    (5.4, "wi-windy"),
    (5.41, "wi-strong-wind"),
    (13.8, "wi-strong-wind"),
    (13.81, "wi-gale-warning"),
    (24.4, "wi-gale-warning"),
    (24.41, "wi-storm-warning"),
    (32.6, "wi-storm-warning"),
    (32.61, "wi-hurricane-warning"),
])
def test_wind_icon_upper_bounds_inclusive(speed, icon):
    assert get_wind_icon(speed) == icon


@pytest.mark.parametrize("degrees,point", [
    (1, "N"), (22.5, "N"), (22.6, "NE"), (46, "NE"), (67.5, "NE"),
    (90, "E"), (135, "SE"), (180, "S"), (202.5, "S"), (225, "SW"),
    (270, "W"), (315, "NW"), (337.5, "NW"), (337.6, "N"), (359.9, "N"),
])
def test_compass_sectors(degrees, point):
    assert get_compass_point(degrees) == point


@pytest.mark.parametrize("degrees", [1, 22.5, 46, 100, 200.5, 300, 337.6])
@pytest.mark.parametrize("turns", [-2, -1, 1, 3])
def test_compass_invariant_under_full_turns(degrees, turns):
    assert get_compass_point(degrees + 360 * turns) == get_compass_point(degrees)
    assert get_direction_icon(degrees + 360 * turns) == get_direction_icon(degrees)


def test_direction_unavailable():
    assert get_wind_direction(0) == "N/A"
    assert get_wind_direction(None) == "N/A"
    assert get_wind_direction(0, "degrees") == "N/A"
    assert get_direction_icon(0) == "wi-na"
    assert get_direction_icon(None) == "wi-na"


def test_direction_labels():
    assert get_wind_direction(46, "compass") == "NE"
    assert get_wind_direction(46, "degrees") == "46°"
    assert get_wind_direction(212.5, "degrees") == "212.5°"
    assert get_wind_direction(90.0, "degrees") == "90°"


def test_direction_icons_follow_sectors():
    assert get_direction_icon(10) == "wi-direction-down"
    assert get_direction_icon(46) == "wi-direction-down-left"
    assert get_direction_icon(180) == "wi-direction-up"
    assert get_direction_icon(300) == "wi-direction-down-right"
    icons = {get_direction_icon(d) for d in range(1, 360)}
    assert icons == set(wind_format.DIRECTION_ICONS)


def test_format_number():
    assert wind_format.format_number(5.0) == "5"
    assert wind_format.format_number(13.9) == "13.9"
    assert wind_format.format_number(7) == "7"
