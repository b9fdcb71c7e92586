"""
pytest-qt tests for the canvas framing: resizing re-fits the image only until
the user pans or zooms.
"""

import pytest
from PySide6.QtGui import QImage

from chartdigitizer.model.view_transform import ViewTransform
from chartdigitizer.view.canvas import DigitizerCanvas


def fitted(canvas):
    return ViewTransform.fit(canvas.image.width(), canvas.image.height(), canvas.width(), canvas.height())


def resize_to(qtbot, canvas, width, height):
    canvas.resize(width, height)
    qtbot.waitUntil(lambda: (canvas.width(), canvas.height()) == (width, height))


@pytest.fixture
def canvas(qtbot, controller):
    """Visible canvas showing a 400x300 image."""
    widget = DigitizerCanvas(controller)
    qtbot.addWidget(widget)
    widget.resize(600, 400)
    widget.show()
    qtbot.waitExposed(widget)
    widget.set_image(QImage(400, 300, QImage.Format_RGB32))
    return widget


class TestCanvasFraming:
    """Test how resizing interacts with the user's pan and zoom."""

    def test_image_is_fitted_on_load(self, canvas, controller):
        assert controller.view == fitted(canvas)

    def test_resize_refits_untouched_view(self, qtbot, canvas, controller):
        before = controller.view
        resize_to(qtbot, canvas, 700, 500)
        assert controller.view == fitted(canvas)
        assert controller.view != before

    def test_resize_keeps_user_zoom(self, qtbot, canvas, controller):
        canvas.zoom_at(4.0, 100, 100)
        zoomed = controller.view

        resize_to(qtbot, canvas, 700, 500)

        assert controller.view == zoomed

    def test_resize_keeps_user_pan(self, qtbot, canvas, controller):
        canvas.pan_by(30.0, -12.0)
        panned = controller.view

        resize_to(qtbot, canvas, 500, 350)

        assert controller.view == panned

    def test_fit_resumes_auto_framing(self, qtbot, canvas, controller):
        canvas.zoom_at(4.0, 100, 100)
        canvas.fit_to_view()

        resize_to(qtbot, canvas, 700, 500)

        assert controller.view == fitted(canvas)

    def test_new_image_resumes_auto_framing(self, qtbot, canvas, controller):
        canvas.pan_by(50.0, 0.0)
        canvas.set_image(QImage(200, 100, QImage.Format_RGB32))

        resize_to(qtbot, canvas, 700, 500)

        assert controller.view == fitted(canvas)

    def test_zoom_updates_hover(self, canvas, controller):
        sx, sy = controller.view.to_screen(200, 150)
        point = controller.create_point(200, 150)
        controller.on_pointer_move(sx + 6, sy)
        assert controller.hovered_id == point.id

        # Zooming around the corner moves the point away from the still cursor
        canvas.zoom_at(2.0, 0, 0)
        assert controller.hovered_id is None
