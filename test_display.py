#!/usr/bin/env python3
"""Tests for HTML and image rendering of the wind fragment"""

from PIL import Image

from smhi_wind.config import Config
from smhi_wind.display_manager import DisplayManager, arrow_polygon, render_html
from smhi_wind.presenter import DisplayState, WindFragment, WindLine

READY = WindFragment(
    layout="vertical",
    state=DisplayState.READY,
    lines=(
        WindLine("wind-speed", "wi-windy", "Wind speed: Breeze"),
        WindLine("wind-direction", "wi-direction-down-left", "Wind direction: NE"),
    ),
)


def test_html_placeholder():
    fragment = WindFragment(layout="horizontal", state=DisplayState.LOADING, text="Loading <wind>")
    assert render_html(fragment) == '<div class="small wind-horizontal">Loading &lt;wind&gt;</div>'


def test_html_lines():
    html = render_html(READY)
    assert html.startswith('<div class="small wind-vertical">')
    assert '<div class="wind-speed"><i class="wi wi-windy"></i> Wind speed: Breeze</div>' in html
    assert '<i class="wi wi-direction-down-left"></i> Wind direction: NE' in html


def test_arrow_points_right_at_90_degrees():
    tip = arrow_polygon((50, 50), 20, 90)[0]
    assert round(tip[0]) == 60
    assert round(tip[1]) == 50


def test_render_image_size_and_content():
    config = Config.from_dict({"display": {"width": 160, "height": 40}})
    image = DisplayManager(config).render_image(READY)
    assert image.size == (160, 40)
    assert image.getbbox() is not None


def test_show_writes_outputs(tmp_path):
    html_file = tmp_path / "wind.html"
    image_file = tmp_path / "wind.png"
    config = Config.from_dict({"output": {"html_file": str(html_file), "image_file": str(image_file)}})
    display = DisplayManager(config)

    display.show(READY, 1000)

    assert html_file.read_text(encoding="utf-8") == render_html(READY)
    with Image.open(image_file) as img:
        assert img.size == (config.display_width, config.display_height)
