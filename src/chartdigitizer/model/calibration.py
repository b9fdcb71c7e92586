"""
Axis Calibration (Data Model)
=============================
Maps pixel positions on the loaded chart image to data values.

Why is this file needed?
------------------------
1. Calibration: Each axis is defined by two reference pairs
   (pixel position, value). A straight line through them converts any pixel
   coordinate on that axis to a data value.
2. Conversion: `CoordsConverter` applies the X and Y fits independently to
   marker points, so the point table can list calibrated coordinates.

A degenerate axis (both references at the same pixel) never raises. Its fit
evaluates to NaN so downstream code can show the value as "uncalibrated".

Classes:
    AxisKey: The four editable references (x1, x2, y1, y2).
    ReferencePair: One (pixel, value) reference.
    LinearFit: Slope/intercept through two references.
    AxisCalibration: The two references of one axis.
    CalibrationModel: X and Y calibrations, keyed access for the UI.
    CoordsConverter: Pixel -> data mapping built from a CalibrationModel.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import logging
import math
from typing import Tuple, Union, TYPE_CHECKING

import numpy as np

from chartdigitizer.model.geometry_primitives import Point

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class AxisKey(str, Enum):
    X1 = "x1"
    X2 = "x2"
    Y1 = "y1"
    Y2 = "y2"

    @property
    def axis(self) -> str:
        return self.value[0]

    @property
    def is_first(self) -> bool:
        return self.value[1] == "1"


@dataclass(frozen=True)
class ReferencePair:
    pixel: float
    value: float


@dataclass(frozen=True)
class LinearFit:
    """value = slope * pixel + intercept"""
    slope: float
    intercept: float

    @classmethod
    def from_references(cls, first: ReferencePair, second: ReferencePair) -> LinearFit:
        dp = second.pixel - first.pixel
        if dp == 0:
            return cls(math.nan, math.nan)
        slope = (second.value - first.value) / dp
        return cls(slope, first.value - slope * first.pixel)

    @property
    def is_degenerate(self) -> bool:
        return not (math.isfinite(self.slope) and math.isfinite(self.intercept))

    def __call__(self, pixel: float) -> float:
        return self.slope * pixel + self.intercept

    def apply_array(self, pixels: npt.ArrayLike) -> npt.NDArray[np.float64]:
        return self.slope * np.asarray(pixels, dtype=np.float64) + self.intercept


@dataclass(frozen=True)
class AxisCalibration:
    first: ReferencePair
    second: ReferencePair

    def fit(self) -> LinearFit:
        return LinearFit.from_references(self.first, self.second)

    @property
    def is_degenerate(self) -> bool:
        return self.first.pixel == self.second.pixel


def default_axis(start_pixel: float, end_pixel: float) -> AxisCalibration:
    return AxisCalibration(ReferencePair(start_pixel, 0.0), ReferencePair(end_pixel, 1.0))


@dataclass
class CalibrationModel:
    """
    Calibration of both axes.

    The references are replaced wholesale on each edit (ReferencePair is
    frozen), so a converter built earlier keeps its own snapshot.
    """
    x_axis: AxisCalibration = field(default_factory=lambda: default_axis(0.0, 100.0))
    y_axis: AxisCalibration = field(default_factory=lambda: default_axis(100.0, 0.0))

    @classmethod
    def for_image(cls, width: float, height: float) -> CalibrationModel:
        """
        Default framing from image dimensions: X references at 25 % and 75 %
        of the width, Y references at 75 % and 25 % of the height (image rows
        grow downwards, data values grow upwards).
        """
        return cls(
            x_axis=default_axis(width * 0.25, width * 0.75),
            y_axis=default_axis(height * 0.75, height * 0.25),
        )

    def axis(self, key: Union[AxisKey, str]) -> AxisCalibration:
        key = AxisKey(key)
        return self.x_axis if key.axis == "x" else self.y_axis

    def get(self, key: Union[AxisKey, str]) -> ReferencePair:
        key = AxisKey(key)
        axis = self.axis(key)
        return axis.first if key.is_first else axis.second

    def set(self, key: Union[AxisKey, str], pair: ReferencePair) -> None:
        key = AxisKey(key)
        axis = self.axis(key)
        axis = replace(axis, first=pair) if key.is_first else replace(axis, second=pair)

        if key.axis == "x":
            self.x_axis = axis
        else:
            self.y_axis = axis

        if axis.is_degenerate:
            logger.warning(f"{key.axis.upper()} axis calibration is degenerate "
                           f"(both references at pixel {axis.first.pixel:g}).")

    def set_pixel(self, key: Union[AxisKey, str], pixel: float) -> None:
        self.set(key, replace(self.get(key), pixel=float(pixel)))

    def set_value(self, key: Union[AxisKey, str], value: float) -> None:
        self.set(key, replace(self.get(key), value=float(value)))

    @property
    def is_valid(self) -> bool:
        return not (self.x_axis.is_degenerate or self.y_axis.is_degenerate)

    def converter(self) -> CoordsConverter:
        return CoordsConverter(self.x_axis.fit(), self.y_axis.fit())


@dataclass(frozen=True)
class CoordsConverter:
    """Applies the X and Y fits independently; no rotation or skew."""
    x_fit: LinearFit
    y_fit: LinearFit

    @property
    def is_valid(self) -> bool:
        return not (self.x_fit.is_degenerate or self.y_fit.is_degenerate)

    def convert_xy(self, x: float, y: float) -> Tuple[float, float]:
        return self.x_fit(x), self.y_fit(y)

    def convert(self, point: Point) -> Point:
        """Data-space copy of the point (same id and label)."""
        data_x, data_y = self.convert_xy(point.x, point.y)
        return point.moved_to(data_x, data_y)

    def convert_array(self, pixels: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Converts an (n, 2) array of pixel coordinates.

        Args:
            pixels: Rows of (x, y) in pixel space.

        Returns:
            A new (n, 2) float array in data space.
        """
        arr = np.asarray(pixels, dtype=np.float64).reshape(-1, 2)
        return np.column_stack([self.x_fit.apply_array(arr[:, 0]), self.y_fit.apply_array(arr[:, 1])])
