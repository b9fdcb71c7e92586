"""
Side Panels
Calibration editors and the point table.
"""
from __future__ import annotations

import math
from typing import Dict, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QAbstractItemView, QDoubleSpinBox, QFormLayout, QGroupBox, QHBoxLayout, QHeaderView, QLabel,
    QPushButton, QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget
)

from chartdigitizer.controller.interaction import InteractionController
from chartdigitizer.model.calibration import AxisKey
from chartdigitizer.model.geometry_primitives import Point


def format_value(value: float) -> str:
    """Non-finite results come from a degenerate calibration."""
    if not math.isfinite(value):
        return "-"
    return f"{value:.4g}"


class CalibrationPanel(QWidget):
    """Typed values for the four calibration references."""

    def __init__(self, controller: InteractionController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.spins: Dict[AxisKey, QDoubleSpinBox] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        for axis, title in (("x", "Calibrate X-Axis"), ("y", "Calibrate Y-Axis")):
            grp = QGroupBox(title)
            form = QFormLayout(grp)
            for key in AxisKey:
                if key.axis != axis:
                    continue
                spin = QDoubleSpinBox()
                spin.setRange(-1e12, 1e12)
                spin.setDecimals(6)
                spin.setKeyboardTracking(False)
                spin.valueChanged.connect(lambda value, k=key: self.controller.set_calibration_value(k, value))
                self.spins[key] = spin
                form.addRow(f"{key.value.upper()}:", spin)
            layout.addWidget(grp)

        self.lbl_status = QLabel("")
        self.lbl_status.setWordWrap(True)
        self.lbl_status.setStyleSheet("color: #dc2626;")
        layout.addWidget(self.lbl_status)

        controller.calibration_changed.connect(self.load_from_state)
        self.load_from_state()

    def load_from_state(self, *_) -> None:
        for key, spin in self.spins.items():
            spin.blockSignals(True)
            try:
                spin.setValue(self.controller.calibration.get(key).value)
            finally:
                spin.blockSignals(False)

        if self.controller.calibration.is_valid:
            self.lbl_status.setText("")
        else:
            self.lbl_status.setText("Both markers of an axis share one pixel position; "
                                    "the axis is uncalibrated.")


class PointsPanel(QWidget):
    """Point table in pixel and data space, plus clear / undo."""
    status_message = Signal(str)

    HEADERS = ("#", "Pixel X", "Pixel Y", "X", "Y")

    def __init__(self, controller: InteractionController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = controller

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.lbl_mouse = QLabel("Mouse: -")
        layout.addWidget(self.lbl_mouse)

        self.table = QTableWidget(0, len(self.HEADERS))
        self.table.setHorizontalHeaderLabels(self.HEADERS)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        layout.addWidget(self.table, 1)

        buttons = QHBoxLayout()
        self.btn_clear = QPushButton("Clear Points")
        self.btn_clear.clicked.connect(self.on_clear_clicked)
        buttons.addWidget(self.btn_clear)

        self.btn_undo = QPushButton("Undo Clear")
        self.btn_undo.clicked.connect(self.on_undo_clicked)
        buttons.addWidget(self.btn_undo)
        layout.addLayout(buttons)

        controller.points_changed.connect(self.refresh)
        controller.calibration_changed.connect(self.refresh)
        controller.mouse_moved.connect(self.on_mouse_moved)
        self.refresh()

    def refresh(self, *_) -> None:
        rows = self.controller.data_rows()
        self.table.setRowCount(len(rows))
        for i, (pt, data_x, data_y) in enumerate(rows):
            cells = (str(i + 1), f"{pt.x:.1f}", f"{pt.y:.1f}", format_value(data_x), format_value(data_y))
            for col, text in enumerate(cells):
                item = QTableWidgetItem(text)
                item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                self.table.setItem(i, col, item)

        self.btn_clear.setEnabled(bool(rows))
        self.btn_undo.setEnabled(self.controller.can_undo_clear)

    def on_mouse_moved(self, mouse: Optional[Point]) -> None:
        if mouse is None:
            self.lbl_mouse.setText("Mouse: -")
            return
        data_x, data_y = self.controller.converter.convert_xy(mouse.x, mouse.y)
        self.lbl_mouse.setText(f"Mouse: ({format_value(data_x)}, {format_value(data_y)})")

    def on_clear_clicked(self) -> None:
        count = self.controller.clear_all()
        if count:
            self.status_message.emit(f"{count} points cleared.")

    def on_undo_clicked(self) -> None:
        if self.controller.undo_clear():
            self.status_message.emit(f"{len(self.controller.points)} points restored.")
