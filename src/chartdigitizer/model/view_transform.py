"""
View Transform
==============
Scale + translation between content (image pixel) space and screen space.

    screen = content * scale + (tx, ty)

The canvas owns the current transform (pan/zoom); the interaction controller
only needs its inverse to turn pointer positions into content coordinates and
its scale to turn the fixed on-screen hit radius into content units.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from chartdigitizer.config import FIT_MARGIN, MAX_ZOOM, MIN_ZOOM


@dataclass(frozen=True)
class ViewTransform:
    scale: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    def __post_init__(self) -> None:
        if not self.scale > 0:
            raise ValueError(f"View scale must be positive, got {self.scale}.")

    def to_content(self, sx: float, sy: float) -> Tuple[float, float]:
        return (sx - self.tx) / self.scale, (sy - self.ty) / self.scale

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return x * self.scale + self.tx, y * self.scale + self.ty

    def panned(self, dx: float, dy: float) -> ViewTransform:
        return ViewTransform(self.scale, self.tx + dx, self.ty + dy)

    def zoomed(self, factor: float, anchor_sx: float, anchor_sy: float) -> ViewTransform:
        """Zoom by `factor` keeping the content under the screen anchor in place."""
        scale = min(max(self.scale * factor, MIN_ZOOM), MAX_ZOOM)
        x, y = self.to_content(anchor_sx, anchor_sy)
        return ViewTransform(scale, anchor_sx - x * scale, anchor_sy - y * scale)

    @classmethod
    def fit(cls, content_w: float, content_h: float, screen_w: float, screen_h: float) -> ViewTransform:
        """Centres the content on screen, leaving a small margin around it."""
        if content_w <= 0 or content_h <= 0 or screen_w <= 0 or screen_h <= 0:
            return cls()

        usable = 1.0 - 2 * FIT_MARGIN
        scale = min(screen_w * usable / content_w, screen_h * usable / content_h)
        scale = min(max(scale, MIN_ZOOM), MAX_ZOOM)
        return cls(
            scale,
            (screen_w - content_w * scale) / 2,
            (screen_h - content_h * scale) / 2,
        )
