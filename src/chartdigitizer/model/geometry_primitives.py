"""
Geometric Primitives for hit-testing and calibration.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, TYPE_CHECKING
import math
import uuid

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

# Reserved id carried by the transient cursor position
MOUSE_POINT_ID = "MOUSE"


def new_point_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Point:
    """A marker position in pixel (or data) space."""
    x: float
    y: float
    id: str = field(default_factory=new_point_id)
    label: Optional[str] = None

    @classmethod
    def mouse(cls, x: float, y: float) -> Point:
        return cls(x, y, id=MOUSE_POINT_ID)

    @property
    def is_mouse(self) -> bool:
        return self.id == MOUSE_POINT_ID

    @property
    def short_id(self) -> str:
        return self.id[:4]

    def moved_to(self, x: float, y: float) -> Point:
        """Same identity and label, new coordinates."""
        return replace(self, x=x, y=y)

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def nearest(self, candidates: Iterable[Point]) -> Optional[Point]:
        """Returns the candidate closest to this point (first one wins on ties)."""
        best: Optional[Point] = None
        best_dist = math.inf
        for candidate in candidates:
            dist = self.distance_to(candidate)
            if dist < best_dist:
                best, best_dist = candidate, dist
        return best

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])

    def __str__(self) -> str:
        return f"{self.label or self.short_id}({self.x:g}, {self.y:g})"


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned box given by its centre and size.

    Containment is half-open (west and south edges inclusive, east and north
    edges exclusive) so a point on a shared edge of two quadrants belongs to
    exactly one of them.
    """
    cx: float
    cy: float
    w: float
    h: float

    west_edge: float = field(init=False, repr=False, compare=False)
    east_edge: float = field(init=False, repr=False, compare=False)
    south_edge: float = field(init=False, repr=False, compare=False)
    north_edge: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._set_edges(
            self.cx - self.w / 2,
            self.cy - self.h / 2,
            self.cx + self.w / 2,
            self.cy + self.h / 2,
        )

    def _set_edges(self, west: float, south: float, east: float, north: float) -> None:
        object.__setattr__(self, "west_edge", west)
        object.__setattr__(self, "south_edge", south)
        object.__setattr__(self, "east_edge", east)
        object.__setattr__(self, "north_edge", north)

    @classmethod
    def from_edges(cls, west: float, south: float, east: float, north: float) -> Rect:
        rect = cls((west + east) / 2, (south + north) / 2, east - west, north - south)
        # Neighbouring quadrants must share their edges bit for bit
        rect._set_edges(west, south, east, north)
        return rect

    def contains(self, point: Point) -> bool:
        return (
            self.west_edge <= point.x < self.east_edge
            and self.south_edge <= point.y < self.north_edge
        )

    def intersects(self, other: Rect) -> bool:
        return not (
            other.west_edge > self.east_edge
            or other.east_edge < self.west_edge
            or other.north_edge < self.south_edge
            or other.south_edge > self.north_edge
        )

    def quadrants(self) -> tuple[Rect, Rect, Rect, Rect]:
        """Four congruent children in (nw, ne, sw, se) order; north is +y."""
        west, south, east, north = self.west_edge, self.south_edge, self.east_edge, self.north_edge
        cx, cy = self.cx, self.cy
        return (
            Rect.from_edges(west, cy, cx, north),
            Rect.from_edges(cx, cy, east, north),
            Rect.from_edges(west, south, cx, cy),
            Rect.from_edges(cx, south, east, cy),
        )

    def __str__(self) -> str:
        edges = (self.west_edge, self.north_edge, self.east_edge, self.south_edge)
        return "BOUNDARY (" + " ".join(f"{round(e, 3):g}" for e in edges) + ")"
