"""Freehand signature capture on a fixed-resolution bitmap.

Device coordinates are scaled into bitmap space by the ratio of the bitmap
size to the displayed element size, so a signature drawn on a phone and one
drawn on a desktop end up in the same 400x150 image.
"""

from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from PIL import Image, ImageDraw, UnidentifiedImageError

WIDTH = 400
HEIGHT = 150
BACKGROUND = (250, 249, 246, 255)
INK = (0, 0, 0, 255)
LINE_WIDTH = 2
# Stored images larger than this many times the bitmap are rejected unread.
MAX_SCALE = 4

_DATA_URL_PREFIX = "data:image/png;base64,"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class DisplaySize:
    width: float
    height: float


@dataclass(frozen=True)
class Stroke:
    points: Sequence[Point]
    display: DisplaySize


def to_bitmap(point: Point, display: DisplaySize) -> Point:
    """Scale a point from displayed-element space into bitmap space."""
    if display.width <= 0 or display.height <= 0:
        raise ValueError("display size must be positive")
    return Point(x=point.x * WIDTH / display.width, y=point.y * HEIGHT / display.height)


class SignatureCanvas:
    def __init__(self) -> None:
        self.image = Image.new("RGBA", (WIDTH, HEIGHT), BACKGROUND)
        self._draw = ImageDraw.Draw(self.image)
        self._last: Optional[Point] = None

    # ── drawing ────────────────────────────────────────────────────

    def begin_stroke(self, point: Point, display: DisplaySize) -> None:
        self._last = to_bitmap(point, display)

    def extend_stroke(self, point: Point, display: DisplaySize) -> None:
        if self._last is None:
            return
        current = to_bitmap(point, display)
        self._draw.line(
            [(self._last.x, self._last.y), (current.x, current.y)],
            fill=INK,
            width=LINE_WIDTH,
            joint="curve",
        )
        # round caps
        radius = LINE_WIDTH / 2
        for p in (self._last, current):
            self._draw.ellipse(
                [p.x - radius, p.y - radius, p.x + radius, p.y + radius], fill=INK
            )
        self._last = current

    def end_stroke(self) -> None:
        self._last = None

    def draw_strokes(self, strokes: Iterable[Stroke]) -> None:
        for stroke in strokes:
            points = list(stroke.points)
            if not points:
                continue
            self.begin_stroke(points[0], stroke.display)
            for point in points[1:]:
                self.extend_stroke(point, stroke.display)
            self.end_stroke()

    def clear(self) -> None:
        self._draw.rectangle([0, 0, WIDTH, HEIGHT], fill=BACKGROUND)
        self._last = None

    def copy_from(self, other: "SignatureCanvas") -> None:
        self.image.paste(other.image, (0, 0))

    # ── inspection / encoding ─────────────────────────────────────

    def is_blank(self) -> bool:
        """True iff every pixel is exactly the background fill."""
        colors = self.image.getcolors(maxcolors=1)
        return colors is not None and tuple(colors[0][1]) == BACKGROUND

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()

    def to_data_url(self) -> str:
        return _DATA_URL_PREFIX + base64.b64encode(self.to_png()).decode("ascii")

    @classmethod
    def from_data_url(cls, data_url: str) -> "SignatureCanvas":
        """Load a stored signature, scaled onto a fresh background."""
        if not data_url.startswith("data:image/") or ";base64," not in data_url:
            raise ValueError("Signature must be an inline base64 image")
        try:
            raw = base64.b64decode(data_url.split(";base64,", 1)[1], validate=True)
            loaded = Image.open(io.BytesIO(raw))
            width, height = loaded.size
            if width > WIDTH * MAX_SCALE or height > HEIGHT * MAX_SCALE:
                raise ValueError("Signature image is too large")
            loaded.load()
        except (
            binascii.Error,
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
        ) as exc:
            raise ValueError("Signature image could not be decoded") from exc

        loaded = loaded.convert("RGBA")
        if loaded.size != (WIDTH, HEIGHT):
            loaded = loaded.resize((WIDTH, HEIGHT))

        canvas = cls()
        canvas.image.alpha_composite(loaded)
        return canvas


def capture_signature(
    strokes: Optional[Iterable[Stroke]] = None, data_url: Optional[str] = None
) -> Optional[str]:
    """Rasterise strokes (or re-check a data URL); None when the result is blank."""
    if strokes is not None:
        canvas = SignatureCanvas()
        canvas.draw_strokes(strokes)
    elif data_url:
        canvas = SignatureCanvas.from_data_url(data_url)
    else:
        return None

    if canvas.is_blank():
        return None
    return canvas.to_data_url()
