"""
Pytest configuration and shared fixtures.
"""

import os
import random

# Widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from chartdigitizer.controller.interaction import InteractionController
from chartdigitizer.model.calibration import AxisCalibration, CalibrationModel, ReferencePair
from chartdigitizer.model.geometry_primitives import Point
from chartdigitizer.model.view_transform import ViewTransform


# === Point Fixtures ===

@pytest.fixture
def corner_points():
    """Four points on the corners of a 10x10 square."""
    return [Point(0, 0), Point(10, 0), Point(0, 10), Point(10, 10)]


@pytest.fixture
def random_points():
    """A reproducible scatter of 300 points, with some duplicated coordinates."""
    rng = random.Random(1234)
    points = [Point(rng.uniform(-50, 250), rng.uniform(0, 120)) for _ in range(280)]
    # Coincident and grid-aligned coordinates exercise the half-open edges
    points += [Point(100.0, 60.0) for _ in range(10)]
    points += [Point(float(x), 0.0) for x in range(0, 200, 20)]
    return points


# === Calibration Fixtures ===

@pytest.fixture
def calibration():
    """X: pixel 100 -> 0, pixel 500 -> 50. Y: pixel 400 -> 0, pixel 0 -> 10."""
    return CalibrationModel(
        x_axis=AxisCalibration(ReferencePair(100.0, 0.0), ReferencePair(500.0, 50.0)),
        y_axis=AxisCalibration(ReferencePair(400.0, 0.0), ReferencePair(0.0, 10.0)),
    )


# === Controller Fixtures ===

@pytest.fixture
def controller(calibration):
    """Controller with an identity view; no Qt application required."""
    return InteractionController(calibration=calibration, view=ViewTransform())


@pytest.fixture
def zoomed_controller(calibration):
    """Controller viewing the content at 2x zoom, shifted by (10, 20) screen pixels."""
    return InteractionController(calibration=calibration, view=ViewTransform(2.0, 10.0, 20.0))
