"""
Painting Routines
Draws markers, calibration lines and the debug quad-tree with QPainter.

All routines expect the painter's world transform to already map content
(image pixel) space to the screen, so sizes given in screen pixels are divided
by the current scale.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Optional, TYPE_CHECKING

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPen

from chartdigitizer.config import (
    BOUNDARY_COLOUR, HOVER_COLOUR, MOUSE_COLOUR, MOUSE_POINT_RADIUS_PX, POINT_COLOUR,
    POINT_RADIUS_PX, X_MARKER_COLOUR, Y_MARKER_COLOUR
)
from chartdigitizer.model.calibration import AxisKey

if TYPE_CHECKING:
    from chartdigitizer.controller.interaction import InteractionController
    from chartdigitizer.model.calibration import CalibrationModel
    from chartdigitizer.model.geometry_primitives import Point, Rect
    from chartdigitizer.model.quad_tree import QuadTree


def _cosmetic_pen(colour: str, width: float = 1.0) -> QPen:
    pen = QPen(QColor(colour))
    pen.setCosmetic(True)  # width in screen pixels regardless of zoom
    pen.setWidthF(width)
    pen.setCapStyle(Qt.RoundCap)
    return pen


def draw_point(
    painter: QPainter,
    point: Point,
    colour: str,
    scale: float,
    radius_px: float = POINT_RADIUS_PX,
    show_label: bool = False,
) -> None:
    r = radius_px / scale
    painter.setPen(_cosmetic_pen("white", 1.0))
    painter.setBrush(QBrush(QColor(colour)))
    painter.drawEllipse(QPointF(point.x, point.y), r, r)

    if show_label and point.label:
        font = QFont()
        font.setPointSizeF(max(1.0, 9.0 / scale))
        painter.setFont(font)
        painter.setPen(QPen(QColor(colour)))
        painter.drawText(QPointF(point.x + r * 1.5, point.y - r * 1.5), point.label)


def draw_rect(painter: QPainter, rect: Rect) -> None:
    painter.setPen(_cosmetic_pen(BOUNDARY_COLOUR))
    painter.setBrush(Qt.NoBrush)
    painter.drawRect(QRectF(rect.west_edge, rect.south_edge, rect.w, rect.h))


def draw_quad_tree(painter: QPainter, tree: QuadTree) -> None:
    for node in tree.iter_nodes():
        draw_rect(painter, node.boundary)


def draw_points(painter: QPainter, controller: InteractionController, debug: bool = False) -> None:
    """
    Paints the point collection.

    The dragged point is drawn at the cursor instead of its stored position,
    the hovered point in the highlight colour.
    """
    scale = controller.view.scale
    mouse = controller.mouse_point

    if debug:
        draw_quad_tree(painter, controller.quad_tree)
        if mouse is not None:
            draw_point(painter, mouse, MOUSE_COLOUR, scale, MOUSE_POINT_RADIUS_PX)

    for pt in controller.points:
        if pt.id == controller.dragging_id:
            continue
        if debug and not pt.label:
            pt = replace(pt, label=pt.short_id)
        colour = HOVER_COLOUR if pt.id == controller.hovered_id else POINT_COLOUR
        draw_point(painter, pt, colour, scale, show_label=debug)

    if controller.dragging_id is not None and mouse is not None:
        draw_point(painter, mouse, HOVER_COLOUR, scale)


def draw_calibration_markers(
    painter: QPainter,
    calibration: CalibrationModel,
    width: float,
    height: float,
    dragging: Optional[AxisKey] = None,
) -> None:
    """Vertical lines for x1/x2, horizontal lines for y1/y2, spanning the image."""
    for key in AxisKey:
        pair = calibration.get(key)
        colour = X_MARKER_COLOUR if key.axis == "x" else Y_MARKER_COLOUR
        pen = _cosmetic_pen(colour, 2.5 if key == dragging else 1.5)
        pen.setStyle(Qt.DashLine)
        painter.setPen(pen)

        if key.axis == "x":
            painter.drawLine(QPointF(pair.pixel, 0.0), QPointF(pair.pixel, height))
            anchor = QPointF(pair.pixel, 0.0)
        else:
            painter.drawLine(QPointF(0.0, pair.pixel), QPointF(width, pair.pixel))
            anchor = QPointF(0.0, pair.pixel)

        painter.drawText(anchor, f"{key.value.upper()} = {pair.value:g}")
