"""
Interaction Controller
======================
Owns the marker points and every piece of interaction state on the canvas.

Why is this file needed?
------------------------
1. State Management: Points, hover, drag, calibration and the pending
   "undo clear" snapshot live in one object, so the invariants (one drag at a
   time, spatial index always matching the points) are enforced in one place.
2. Decoupling: The canvas forwards raw pointer events here and only reads
   the state back when painting. Every mutation rebuilds the quad-tree and
   emits `points_changed`; the render loop repaints on its own tick.

Pointer semantics:
    - move: track the cursor in content space, recompute the hovered point.
    - primary down: start dragging a calibration marker if one is under the
      cursor, else start dragging the hovered point, else create a point.
    - secondary down: delete the hovered point.
    - primary up: commit the drag (moving the point to the cursor).
    - leave: forget the cursor; an active drag stays active.
"""
from __future__ import annotations

from enum import IntEnum
import logging
from typing import List, Optional, Sequence, Tuple, Union, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, Signal

from chartdigitizer.config import DEFAULT_CAPACITY, HIT_RADIUS_PX
from chartdigitizer.model.calibration import AxisKey, CalibrationModel, CoordsConverter
from chartdigitizer.model.geometry_primitives import Point
from chartdigitizer.model.io import write_points_csv
from chartdigitizer.model.quad_tree import QuadTree, create_quad_tree
from chartdigitizer.model.view_transform import ViewTransform

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

DataRow = Tuple[Point, float, float]


class PointerButton(IntEnum):
    """Matches the DOM/Qt-agnostic button numbering used by the canvas."""
    PRIMARY = 0
    MIDDLE = 1
    SECONDARY = 2


class InteractionController(QObject):
    points_changed = Signal(object)
    hover_changed = Signal(object)
    calibration_changed = Signal(object)
    mouse_moved = Signal(object)

    def __init__(
        self,
        calibration: Optional[CalibrationModel] = None,
        view: Optional[ViewTransform] = None,
        capacity: int = DEFAULT_CAPACITY,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._capacity = capacity
        self._calibration: CalibrationModel = calibration or CalibrationModel()
        self._converter: CoordsConverter = self._calibration.converter()
        self._view: ViewTransform = view or ViewTransform()

        self._points: List[Point] = []
        self._quad_tree: QuadTree = create_quad_tree(self._points, self._capacity)

        self._mouse_point: Optional[Point] = None
        self._mouse_screen: Optional[Tuple[float, float]] = None
        self._hovered_id: Optional[str] = None
        self._dragging_id: Optional[str] = None
        self._dragging_marker: Optional[AxisKey] = None
        self._pending_snapshot: Optional[List[Point]] = None

    # ------------------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------------------

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(self._points)

    @property
    def mouse_point(self) -> Optional[Point]:
        return self._mouse_point

    @property
    def hovered_id(self) -> Optional[str]:
        return self._hovered_id

    @property
    def dragging_id(self) -> Optional[str]:
        return self._dragging_id

    @property
    def dragging_marker(self) -> Optional[AxisKey]:
        return self._dragging_marker

    @property
    def quad_tree(self) -> QuadTree:
        return self._quad_tree

    @property
    def calibration(self) -> CalibrationModel:
        return self._calibration

    @property
    def converter(self) -> CoordsConverter:
        return self._converter

    @property
    def view(self) -> ViewTransform:
        return self._view

    @property
    def can_undo_clear(self) -> bool:
        return self._pending_snapshot is not None

    @property
    def hit_radius(self) -> float:
        """Fixed on-screen hit radius expressed in content units."""
        return HIT_RADIUS_PX / self._view.scale

    def find_point(self, point_id: Optional[str]) -> Optional[Point]:
        if point_id is None:
            return None
        return next((pt for pt in self._points if pt.id == point_id), None)

    # ------------------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------------------

    def on_pointer_move(self, screen_x: float, screen_y: float) -> None:
        self._mouse_screen = (screen_x, screen_y)
        x, y = self._view.to_content(screen_x, screen_y)
        self._mouse_point = Point.mouse(x, y)

        if self._dragging_marker is not None:
            pixel = x if self._dragging_marker.axis == "x" else y
            self.set_calibration_pixel(self._dragging_marker, pixel)

        self._update_hover()
        self.mouse_moved.emit(self._mouse_point)

    def on_pointer_down(self, button: Union[PointerButton, int]) -> None:
        button = PointerButton(button)

        if button == PointerButton.PRIMARY and self._dragging_id is None:
            marker = self.marker_at_mouse()
            if marker is not None:
                self._dragging_marker = marker
                logger.debug(f"Started dragging calibration marker {marker.value}.")
                return

        if self._hovered_id is not None:
            if button == PointerButton.SECONDARY:
                self.delete_point(self._hovered_id)
            elif button == PointerButton.PRIMARY:
                self._dragging_id = self._hovered_id
                logger.debug(f"Started dragging point {self._dragging_id}.")
            return

        if button == PointerButton.PRIMARY and self._mouse_point is not None:
            self.create_point(self._mouse_point.x, self._mouse_point.y)

    def on_pointer_up(self, button: Union[PointerButton, int]) -> None:
        if PointerButton(button) != PointerButton.PRIMARY:
            return

        if self._dragging_marker is not None:
            logger.debug(f"Released calibration marker {self._dragging_marker.value}.")
            self._dragging_marker = None

        if self._dragging_id is None:
            return

        point_id = self._dragging_id
        self._dragging_id = None
        if self._mouse_point is None:
            # Released outside the canvas: the point keeps its old position
            logger.debug(f"Drag of point {point_id} cancelled.")
            self.points_changed.emit(self.points)
            return
        self.move_point(point_id, self._mouse_point.x, self._mouse_point.y)

    def on_pointer_leave(self) -> None:
        self._mouse_screen = None
        self._mouse_point = None
        self._set_hovered(None)
        self.mouse_moved.emit(None)

    # ------------------------------------------------------------------------------
    # Point mutations
    # ------------------------------------------------------------------------------

    def create_point(self, x: float, y: float, label: Optional[str] = None) -> Point:
        point = Point(x, y, label=label)
        self._points.append(point)
        logger.debug(f"Created point {point.id} at ({x:.2f}, {y:.2f}).")
        self._commit()
        return point

    def delete_point(self, point_id: str) -> bool:
        if self.find_point(point_id) is None:
            logger.debug(f"Delete ignored, no point with id {point_id}.")
            return False

        self._points = [pt for pt in self._points if pt.id != point_id]
        if self._dragging_id == point_id:
            self._dragging_id = None
        logger.debug(f"Deleted point {point_id}.")
        self._commit()
        return True

    def move_point(self, point_id: str, x: float, y: float) -> bool:
        if self.find_point(point_id) is None:
            logger.debug(f"Move ignored, no point with id {point_id}.")
            return False

        self._points = [pt.moved_to(x, y) if pt.id == point_id else pt for pt in self._points]
        logger.debug(f"Moved point {point_id} to ({x:.2f}, {y:.2f}).")
        self._commit()
        return True

    def clear_all(self) -> int:
        """
        Removes every point, keeping them as a one-shot undo snapshot.

        Returns:
            Number of cleared points. Clearing an empty collection stores
            no snapshot and drops the one still pending.
        """
        if not self._points:
            if self._pending_snapshot is not None:
                self._commit()
            return 0

        snapshot = list(self._points)
        self._points = []
        self._dragging_id = None
        self._commit(snapshot)
        logger.info(f"{len(snapshot)} points cleared.")
        return len(snapshot)

    def undo_clear(self) -> bool:
        """Restores the points removed by the last `clear_all`, at most once."""
        if self._pending_snapshot is None:
            return False

        self._points = self._pending_snapshot
        self._commit()
        logger.info(f"Restored {len(self._points)} cleared points.")
        return True

    def _commit(self, snapshot: Optional[List[Point]] = None) -> None:
        """Every mutation ends here: replace the undo snapshot, rebuild the index, notify."""
        self._pending_snapshot = snapshot
        self._quad_tree = create_quad_tree(self._points, self._capacity)
        self._update_hover()
        self.points_changed.emit(self.points)

    # ------------------------------------------------------------------------------
    # Hit-testing
    # ------------------------------------------------------------------------------

    def _update_hover(self) -> None:
        if self._mouse_point is None:
            self._set_hovered(None)
            return

        candidates = [
            pt for pt in self._quad_tree.query_radius(self._mouse_point, self.hit_radius)
            if pt.id != self._dragging_id
        ]
        nearest = self._mouse_point.nearest(candidates)
        self._set_hovered(nearest.id if nearest else None)

    def _set_hovered(self, point_id: Optional[str]) -> None:
        if point_id != self._hovered_id:
            self._hovered_id = point_id
            self.hover_changed.emit(point_id)

    def marker_at_mouse(self) -> Optional[AxisKey]:
        """The calibration marker line closest to the cursor, within the hit radius."""
        if self._mouse_point is None:
            return None

        best: Optional[AxisKey] = None
        best_dist = self.hit_radius
        for key in AxisKey:
            coord = self._mouse_point.x if key.axis == "x" else self._mouse_point.y
            dist = abs(coord - self._calibration.get(key).pixel)
            if dist <= best_dist:
                best, best_dist = key, dist
        return best

    # ------------------------------------------------------------------------------
    # View & calibration
    # ------------------------------------------------------------------------------

    def set_view(self, view: ViewTransform) -> None:
        """Replaces the pan/zoom; the cursor keeps its screen position, so it is re-mapped."""
        self._view = view
        if self._mouse_screen is not None:
            self.on_pointer_move(*self._mouse_screen)

    def set_calibration_pixel(self, key: Union[AxisKey, str], pixel: float) -> None:
        self._calibration.set_pixel(key, pixel)
        self._calibration_updated()

    def set_calibration_value(self, key: Union[AxisKey, str], value: float) -> None:
        self._calibration.set_value(key, value)
        self._calibration_updated()

    def reset_calibration(self, width: float, height: float) -> None:
        """Places the four markers relative to the image dimensions."""
        self._calibration = CalibrationModel.for_image(width, height)
        self._calibration_updated()

    def _calibration_updated(self) -> None:
        self._converter = self._calibration.converter()
        self.calibration_changed.emit(self._calibration)

    # ------------------------------------------------------------------------------
    # Export collaborator
    # ------------------------------------------------------------------------------

    def data_rows(self) -> List[DataRow]:
        """(pixel point, data x, data y) for every point, in creation order."""
        rows: List[DataRow] = []
        for pt in self._points:
            data_x, data_y = self._converter.convert_xy(pt.x, pt.y)
            rows.append((pt, data_x, data_y))
        return rows

    def data_array(self) -> npt.NDArray[np.float64]:
        """(n, 4) array of [pixel x, pixel y, data x, data y]."""
        return points_to_array(self._points, self._converter)

    def export_csv(self, filepath: str) -> int:
        """Saves `data_rows()` as CSV; uncalibrated values become empty cells."""
        return write_points_csv(self.data_rows(), filepath)


def points_to_array(points: Sequence[Point], converter: CoordsConverter) -> npt.NDArray[np.float64]:
    if not points:
        return np.empty((0, 4), dtype=np.float64)

    pixels = np.array([pt.to_array() for pt in points])
    return np.hstack([pixels, converter.convert_array(pixels)])
