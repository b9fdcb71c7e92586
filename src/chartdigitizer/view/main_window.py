"""
Main Application Window
=======================
The primary GUI container holding the menu bar, the canvas and the side panels.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects global actions (File -> Open Image, View -> Debug)
   to the canvas and the controller.
"""
import logging
import os
from typing import Optional

from PySide6.QtCore import QMimeData, Qt
from PySide6.QtGui import QAction, QIcon, QImage, QKeySequence
from PySide6.QtWidgets import (
    QFileDialog, QMainWindow, QMessageBox, QSplitter, QVBoxLayout, QWidget
)

from chartdigitizer.config import ASSETS_PATH
from chartdigitizer.controller.interaction import InteractionController
from chartdigitizer.view.canvas import DigitizerCanvas
from chartdigitizer.view.panels import CalibrationPanel, PointsPanel

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Chart Digitizer"
IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tif *.tiff)"
CSV_FILTER = "CSV Files (*.csv)"


def image_path_from_mime(mime: QMimeData) -> Optional[str]:
    """First local file among dropped URLs, if any."""
    if not mime.hasUrls():
        return None
    for url in mime.urls():
        if url.isLocalFile():
            return url.toLocalFile()
    return None


class MainWindow(QMainWindow):
    def __init__(self, controller: InteractionController, debug: bool = False) -> None:
        super().__init__()
        self.controller = controller
        self.image_path: Optional[str] = None

        self.update_window_title()
        self.resize(1400, 900)
        self.setAcceptDrops(True)

        icon_path = os.path.join(ASSETS_PATH, "chartdigitizer.svg")
        if os.path.exists(icon_path):
            self.setWindowIcon(QIcon(icon_path))

        # --- LEFT SIDE: Point table ---
        self.points_panel = PointsPanel(controller)

        # --- CENTRE: Canvas ---
        self.canvas = DigitizerCanvas(controller)
        self.canvas.set_debug(debug)

        # --- RIGHT SIDE: Calibration ---
        right = QWidget()
        right_layout = QVBoxLayout(right)
        self.calibration_panel = CalibrationPanel(controller)
        right_layout.addWidget(self.calibration_panel)
        right_layout.addStretch()

        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(self.points_panel)
        splitter.addWidget(self.canvas)
        splitter.addWidget(right)
        splitter.setSizes([300, 850, 250])
        self.setCentralWidget(splitter)

        self._create_actions(debug)
        self._create_menus()

        self.points_panel.status_message.connect(self.show_status)
        self.show_status("Open or drop an image to start digitizing.")

    def _create_actions(self, debug: bool) -> None:
        self.act_open = QAction("Open Image...", self)
        self.act_open.setShortcut(QKeySequence.Open)
        self.act_open.triggered.connect(self.on_file_open)

        self.act_export = QAction("Export CSV...", self)
        self.act_export.triggered.connect(self.on_file_export)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        self.act_undo_clear = QAction("Undo Clear", self)
        self.act_undo_clear.setShortcut(QKeySequence.Undo)
        self.act_undo_clear.triggered.connect(self.points_panel.on_undo_clicked)

        self.act_fit = QAction("Fit Image", self)
        self.act_fit.setShortcut("Ctrl+0")
        self.act_fit.triggered.connect(self.canvas.fit_to_view)

        self.act_debug = QAction("Debug Mode", self)
        self.act_debug.setCheckable(True)
        self.act_debug.setChecked(debug)
        self.act_debug.toggled.connect(self.canvas.set_debug)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_open)
        file_menu.addAction(self.act_export)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        edit_menu = menu_bar.addMenu("&Edit")
        edit_menu.addAction(self.act_undo_clear)

        view_menu = menu_bar.addMenu("&View")
        view_menu.addAction(self.act_fit)
        view_menu.addAction(self.act_debug)

    # --- HELPER METHODS ---
    def update_window_title(self) -> None:
        title = VISIBLE_APP_NAME
        if self.image_path:
            title += f" - [{os.path.basename(self.image_path)}]"
        self.setWindowTitle(title)

    def show_status(self, message: str) -> None:
        self.statusBar().showMessage(message, 5000)

    def load_image(self, path: str) -> bool:
        """Loads the image at `path` onto the canvas. Only its pixels and size are used."""
        image = QImage(path)
        if image.isNull():
            logger.error(f"Could not load image: {path}")
            QMessageBox.critical(self, "Error", f"Could not open image:\n{path}")
            return False

        logger.info(f"Loaded image {path} ({image.width()}x{image.height()}).")
        self.image_path = path
        self.canvas.set_image(image)
        self.update_window_title()
        self.show_status(f"Loaded {os.path.basename(path)}. "
                         f"Left click: add/drag point, right click: delete.")
        return True

    # --- FILE SLOTS ---
    def on_file_open(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(self, "Open Image", "", IMAGE_FILTER)
        if fname:
            self.load_image(fname)

    def on_file_export(self) -> None:
        if not self.controller.points:
            self.show_status("No points to export.")
            return

        fname, _ = QFileDialog.getSaveFileName(self, "Export CSV", "", CSV_FILTER)
        if not fname:
            return
        if not fname.lower().endswith(".csv"):
            fname += ".csv"

        try:
            count = self.controller.export_csv(fname)
        except OSError as e:
            logger.error(f"CSV export failed: {e}")
            QMessageBox.critical(self, "Error", f"Could not save file:\n{e}")
            return
        self.show_status(f"Exported {count} points to {os.path.basename(fname)}.")

    # --- DRAG & DROP ---
    def dragEnterEvent(self, event) -> None:
        if image_path_from_mime(event.mimeData()):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event) -> None:
        path = image_path_from_mime(event.mimeData())
        if path:
            event.acceptProposedAction()
            self.load_image(path)
