"""
Digitizer Canvas
================
The widget showing the chart image with markers and calibration lines on top.

Why is this file needed?
------------------------
1. Events: Translates Qt mouse events into controller pointer events, and
   handles pan (middle drag) and zoom (wheel) itself.
2. Rendering: A QTimer render loop repaints at most once per tick and only
   when something changed. The timer runs only while the canvas is visible.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QPointF, Qt, QTimer
from PySide6.QtGui import QColor, QImage, QPainter, QTransform
from PySide6.QtWidgets import QWidget

from chartdigitizer.config import RENDER_INTERVAL_MS, ZOOM_STEP
from chartdigitizer.controller.interaction import InteractionController, PointerButton
from chartdigitizer.model.view_transform import ViewTransform
from chartdigitizer.view.painting import draw_calibration_markers, draw_points

logger = logging.getLogger(__name__)

QT_BUTTONS = {
    Qt.LeftButton: PointerButton.PRIMARY,
    Qt.MiddleButton: PointerButton.MIDDLE,
    Qt.RightButton: PointerButton.SECONDARY,
}


def to_qtransform(view: ViewTransform) -> QTransform:
    return QTransform(view.scale, 0.0, 0.0, view.scale, view.tx, view.ty)


class DigitizerCanvas(QWidget):
    def __init__(self, controller: InteractionController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.image: Optional[QImage] = None
        self.debug: bool = False

        self._dirty: bool = True
        self._pan_anchor: Optional[QPointF] = None
        # Set once the user pans or zooms; resizing then keeps their view
        self._user_view: bool = False

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setContextMenuPolicy(Qt.PreventContextMenu)
        self.setMinimumSize(400, 300)

        # Any state change only marks the canvas dirty; the timer repaints
        controller.points_changed.connect(self.mark_dirty)
        controller.hover_changed.connect(self.mark_dirty)
        controller.calibration_changed.connect(self.mark_dirty)
        controller.mouse_moved.connect(self.mark_dirty)

        self._render_timer = QTimer(self)
        self._render_timer.setInterval(RENDER_INTERVAL_MS)
        self._render_timer.timeout.connect(self._on_tick)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def set_image(self, image: QImage) -> None:
        """Shows a new image, re-frames the view and resets the calibration markers."""
        self.image = image
        self.controller.reset_calibration(image.width(), image.height())
        self.fit_to_view()

    def set_debug(self, enabled: bool) -> None:
        self.debug = enabled
        self.mark_dirty()

    def fit_to_view(self) -> None:
        """Frames the whole image; later resizes keep it framed until the user pans or zooms."""
        if self.image is None:
            return
        view = ViewTransform.fit(self.image.width(), self.image.height(), self.width(), self.height())
        self._user_view = False
        self._set_view(view)

    def zoom_at(self, factor: float, sx: float, sy: float) -> None:
        self._apply_view(self.controller.view.zoomed(factor, sx, sy))

    def pan_by(self, dx: float, dy: float) -> None:
        self._apply_view(self.controller.view.panned(dx, dy))

    def mark_dirty(self, *_) -> None:
        self._dirty = True

    # ------------------------------------------------------------------------------
    # Render loop
    # ------------------------------------------------------------------------------

    def showEvent(self, event) -> None:
        self._render_timer.start()
        super().showEvent(event)

    def hideEvent(self, event) -> None:
        self._render_timer.stop()
        super().hideEvent(event)

    def closeEvent(self, event) -> None:
        self._render_timer.stop()
        super().closeEvent(event)

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        if not self._user_view:
            self.fit_to_view()

    def _on_tick(self) -> None:
        if self._dirty:
            self._dirty = False
            self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), QColor("#f4f4f5"))
            painter.setRenderHint(QPainter.Antialiasing, True)
            painter.setWorldTransform(to_qtransform(self.controller.view))

            if self.image is not None:
                painter.drawImage(QPointF(0.0, 0.0), self.image)
                draw_calibration_markers(
                    painter,
                    self.controller.calibration,
                    self.image.width(),
                    self.image.height(),
                    dragging=self.controller.dragging_marker,
                )

            draw_points(painter, self.controller, debug=self.debug)
        finally:
            painter.end()

    # ------------------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------------------

    def mouseMoveEvent(self, event) -> None:
        pos = event.position()
        if self._pan_anchor is not None:
            delta = pos - self._pan_anchor
            self._pan_anchor = pos
            self.pan_by(delta.x(), delta.y())
        self.controller.on_pointer_move(pos.x(), pos.y())

    def mousePressEvent(self, event) -> None:
        button = QT_BUTTONS.get(event.button())
        if button is None:
            return
        if button == PointerButton.MIDDLE:
            self._pan_anchor = event.position()
            return
        self.controller.on_pointer_down(button)

    def mouseReleaseEvent(self, event) -> None:
        button = QT_BUTTONS.get(event.button())
        if button is None:
            return
        if button == PointerButton.MIDDLE:
            self._pan_anchor = None
            return
        self.controller.on_pointer_up(button)

    def leaveEvent(self, event) -> None:
        self.controller.on_pointer_leave()
        super().leaveEvent(event)

    def wheelEvent(self, event) -> None:
        steps = event.angleDelta().y() / 120.0
        if steps == 0:
            return
        pos = event.position()
        self.zoom_at(ZOOM_STEP ** steps, pos.x(), pos.y())

    def _apply_view(self, view: ViewTransform) -> None:
        self._user_view = True
        self._set_view(view)

    def _set_view(self, view: ViewTransform) -> None:
        self.controller.set_view(view)
        self.mark_dirty()
