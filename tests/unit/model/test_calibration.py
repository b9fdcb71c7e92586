"""
Unit tests for axis calibration and pixel -> data conversion.
"""

import math

import numpy as np
import pytest

from chartdigitizer.model.calibration import (
    AxisCalibration, AxisKey, CalibrationModel, CoordsConverter, LinearFit, ReferencePair
)
from chartdigitizer.model.geometry_primitives import Point


class TestLinearFit:
    """Test the two-point line."""

    def test_x_axis_example(self):
        fit = LinearFit.from_references(ReferencePair(100, 0), ReferencePair(500, 50))
        assert fit.slope == pytest.approx(0.125)
        assert fit.intercept == pytest.approx(-12.5)
        assert fit(300) == pytest.approx(25.0)

    def test_references_map_to_their_values(self):
        first, second = ReferencePair(37.5, -4.0), ReferencePair(912.25, 18.0)
        fit = LinearFit.from_references(first, second)
        assert fit(first.pixel) == pytest.approx(first.value)
        assert fit(second.pixel) == pytest.approx(second.value)
        assert fit((first.pixel + second.pixel) / 2) == pytest.approx((first.value + second.value) / 2)

    def test_inverted_axis(self):
        # Image rows grow downwards while chart values grow upwards
        fit = LinearFit.from_references(ReferencePair(400, 0), ReferencePair(0, 10))
        assert fit.slope < 0
        assert fit(200) == pytest.approx(5.0)

    def test_degenerate_is_nan(self):
        fit = LinearFit.from_references(ReferencePair(250, 0), ReferencePair(250, 1))
        assert fit.is_degenerate
        assert math.isnan(fit(123.0))
        assert np.isnan(fit.apply_array([1.0, 2.0])).all()

    def test_apply_array_matches_scalar(self):
        fit = LinearFit(2.0, -1.0)
        pixels = [0.0, 0.5, 10.0]
        np.testing.assert_allclose(fit.apply_array(pixels), [fit(p) for p in pixels])


class TestAxisKey:
    """Test key helpers used by the panel and the marker drag."""

    def test_axis_and_order(self):
        assert AxisKey.X1.axis == "x" and AxisKey.X1.is_first
        assert AxisKey.X2.axis == "x" and not AxisKey.X2.is_first
        assert AxisKey.Y1.axis == "y" and AxisKey.Y1.is_first
        assert AxisKey.Y2.axis == "y" and not AxisKey.Y2.is_first

    def test_plain_strings_are_accepted(self):
        assert AxisKey("y2") is AxisKey.Y2
        assert AxisKey.X1 == "x1"


class TestCalibrationModel:
    """Test keyed access and validity of the calibration."""

    def test_get_by_key(self, calibration):
        assert calibration.get(AxisKey.X1) == ReferencePair(100.0, 0.0)
        assert calibration.get("x2") == ReferencePair(500.0, 50.0)
        assert calibration.get(AxisKey.Y1) == ReferencePair(400.0, 0.0)
        assert calibration.get("y2") == ReferencePair(0.0, 10.0)

    def test_invalid_key(self, calibration):
        with pytest.raises(ValueError):
            calibration.get("z1")
        with pytest.raises(ValueError):
            calibration.set_pixel("x3", 10.0)

    def test_set_pixel_keeps_value(self, calibration):
        calibration.set_pixel(AxisKey.X2, 900)
        assert calibration.get(AxisKey.X2) == ReferencePair(900.0, 50.0)
        assert calibration.get(AxisKey.X1) == ReferencePair(100.0, 0.0)

    def test_set_value_keeps_pixel(self, calibration):
        calibration.set_value("y2", 20)
        assert calibration.get(AxisKey.Y2) == ReferencePair(0.0, 20.0)
        assert calibration.y_axis.fit()(200) == pytest.approx(10.0)

    def test_degenerate_axis_is_invalid_but_never_raises(self, calibration):
        assert calibration.is_valid
        calibration.set_pixel(AxisKey.X2, 100.0)

        assert not calibration.is_valid
        converter = calibration.converter()
        assert not converter.is_valid
        data_x, data_y = converter.convert_xy(300, 200)
        assert math.isnan(data_x)
        assert data_y == pytest.approx(5.0)

    def test_degenerate_axis_can_be_repaired(self, calibration):
        calibration.set_pixel(AxisKey.Y1, 0.0)
        assert not calibration.is_valid
        calibration.set_pixel(AxisKey.Y1, 400.0)
        assert calibration.is_valid

    def test_default_model_is_valid(self):
        assert CalibrationModel().is_valid

    def test_for_image(self):
        model = CalibrationModel.for_image(800, 600)
        assert model.get(AxisKey.X1) == ReferencePair(200.0, 0.0)
        assert model.get(AxisKey.X2) == ReferencePair(600.0, 1.0)
        assert model.get(AxisKey.Y1) == ReferencePair(450.0, 0.0)
        assert model.get(AxisKey.Y2) == ReferencePair(150.0, 1.0)
        assert model.is_valid

    def test_earlier_converter_is_a_snapshot(self, calibration):
        before = calibration.converter()
        calibration.set_value(AxisKey.X2, 100.0)
        assert before.convert_xy(500, 0)[0] == pytest.approx(50.0)
        assert calibration.converter().convert_xy(500, 0)[0] == pytest.approx(100.0)


class TestCoordsConverter:
    """Test conversion of points and arrays."""

    def test_convert_keeps_identity(self, calibration):
        point = Point(300, 200, label="peak")
        converted = calibration.converter().convert(point)
        assert converted.id == point.id
        assert converted.label == "peak"
        assert (converted.x, converted.y) == (pytest.approx(25.0), pytest.approx(5.0))

    def test_axes_are_independent(self, calibration):
        converter = calibration.converter()
        assert converter.convert_xy(300, 0)[0] == converter.convert_xy(300, 400)[0]
        assert converter.convert_xy(0, 200)[1] == converter.convert_xy(500, 200)[1]

    def test_convert_array(self, calibration):
        converter = calibration.converter()
        pixels = np.array([[100.0, 400.0], [500.0, 0.0], [300.0, 200.0]])
        np.testing.assert_allclose(converter.convert_array(pixels), [[0, 0], [50, 10], [25, 5]])

    def test_convert_array_empty(self, calibration):
        assert calibration.converter().convert_array(np.empty((0, 2))).shape == (0, 2)

    def test_built_from_axis_calibrations(self):
        converter = CoordsConverter(
            AxisCalibration(ReferencePair(0, 0), ReferencePair(10, 1)).fit(),
            AxisCalibration(ReferencePair(0, 0), ReferencePair(10, -1)).fit(),
        )
        assert converter.convert_xy(5, 5) == (pytest.approx(0.5), pytest.approx(-0.5))
