"""
Display manager for the wind fragment
Writes an HTML snippet for the mirror page and/or a PIL image for panel displays
"""

import logging
import math
from html import escape
from pathlib import Path
from typing import Optional, List, Tuple

from PIL import Image, ImageDraw, ImageFont

from .presenter import WindFragment, WindLine

BACKGROUND = (0, 0, 0)
FOREGROUND = (255, 255, 255)
DIMMED = (128, 128, 128)

# Screen angle (clockwise from up) each direction icon points to
ARROW_ANGLES = {
    "wi-direction-up": 0,
    "wi-direction-up-right": 45,
    "wi-direction-right": 90,
    "wi-direction-down-right": 135,
    "wi-direction-down": 180,
    "wi-direction-down-left": 225,
    "wi-direction-left": 270,
    "wi-direction-up-left": 315,
}


def render_html(fragment: WindFragment) -> str:
    """Render the fragment the way the mirror module builds its DOM"""
    if fragment.text is not None:
        return f'<div class="{escape(fragment.css_class)}">{escape(fragment.text)}</div>'

    parts = [f'<div class="{escape(fragment.css_class)}">']
    for line in fragment.lines:
        parts.append(
            f'<div class="{escape(line.kind)}">'
            f'<i class="wi {escape(line.icon)}"></i> {escape(line.text)}'
            f'</div>'
        )
    parts.append('</div>')
    return "".join(parts)


def arrow_polygon(center: Tuple[float, float], size: float, angle_deg: float) -> List[Tuple[float, float]]:
    """Triangle arrow of the given size pointing at angle_deg (clockwise from up)"""
    cx, cy = center
    # Arrow pointing up, relative to center
    points = [(0, -size / 2), (size / 3, size / 2), (0, size / 4), (-size / 3, size / 2)]
    rad = math.radians(angle_deg)
    cos_a, sin_a = math.cos(rad), math.sin(rad)
    return [
        (cx + x * cos_a - y * sin_a, cy + x * sin_a + y * cos_a)
        for x, y in points
    ]


class DisplayManager:
    """Renders wind fragments to the configured outputs"""

    def __init__(self, config):
        """
        Initialize display manager

        Args:
            config: Config object with display and output settings
        """
        self.config = config
        self.font = ImageFont.load_default()
        self.current_html: Optional[str] = None
        self.current_image: Optional[Image.Image] = None

    def render_image(self, fragment: WindFragment) -> Image.Image:
        width, height = self.config.display_width, self.config.display_height
        img = Image.new('RGB', (width, height), color=BACKGROUND)
        draw = ImageDraw.Draw(img)

        if fragment.text is not None:
            bbox = draw.textbbox((0, 0), fragment.text, font=self.font)
            x_pos = (width - (bbox[2] - bbox[0])) // 2
            y_pos = (height - (bbox[3] - bbox[1])) // 2
            draw.text((x_pos, y_pos), fragment.text, font=self.font, fill=DIMMED)
            return img

        for (x_pos, y_pos, cell_h), line in zip(self._cells(len(fragment.lines)), fragment.lines):
            self._draw_line(draw, line, x_pos, y_pos, cell_h)

        return img

    def _cells(self, count: int) -> List[Tuple[int, int, int]]:
        """Top-left corner and height of each line's cell for the current layout"""
        width, height = self.config.display_width, self.config.display_height
        if count == 0:
            return []
        if self.config.layout == 'horizontal':
            cell_w = width // count
            return [(i * cell_w, 0, height) for i in range(count)]
        cell_h = height // count
        return [(0, i * cell_h, cell_h) for i in range(count)]

    def _draw_line(self, draw: ImageDraw.ImageDraw, line: WindLine, x_pos: int, y_pos: int, cell_h: int):
        icon_size = max(6, min(cell_h - 4, 16))
        icon_center = (x_pos + 2 + icon_size / 2, y_pos + cell_h / 2)

        angle = ARROW_ANGLES.get(line.icon)
        if angle is not None:
            draw.polygon(arrow_polygon(icon_center, icon_size, angle), fill=FOREGROUND)

        bbox = draw.textbbox((0, 0), line.text, font=self.font)
        text_y = y_pos + (cell_h - (bbox[3] - bbox[1])) // 2
        draw.text((x_pos + icon_size + 6, text_y), line.text, font=self.font, fill=FOREGROUND)

    def show(self, fragment: WindFragment, animation_speed: int = 0):
        """Render the fragment and write it to the configured output files"""
        self.current_html = render_html(fragment)
        logging.debug(f"Wind fragment ({fragment.state.name}, fade {animation_speed}ms): {self.current_html}")

        html_file = self.config.html_file
        if html_file:
            try:
                Path(html_file).write_text(self.current_html, encoding='utf-8')
            except OSError as e:
                logging.error(f"Could not write HTML output {html_file}: {e}")

        image_file = self.config.image_file
        if image_file:
            try:
                self.current_image = self.render_image(fragment)
                self.current_image.save(image_file)
            except OSError as e:
                logging.error(f"Could not write image output {image_file}: {e}")
