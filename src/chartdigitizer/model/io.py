"""
Input/Output (CSV)
Writes the calibrated point table to a .csv file.
"""
import csv
import logging
import math
from typing import Iterable, Tuple

from chartdigitizer.model.geometry_primitives import Point

logger = logging.getLogger(__name__)

CSV_HEADER = ("pixel_x", "pixel_y", "x", "y")


def csv_value(value: float) -> str:
    """Uncalibrated (non-finite) values are written as empty cells."""
    if not math.isfinite(value):
        return ""
    return repr(float(value))


def write_points_csv(rows: Iterable[Tuple[Point, float, float]], filepath: str) -> int:
    """
    Writes one line per (point, data x, data y) row below a header.

    Returns:
        Number of data lines written.

    Raises:
        OSError: If the file cannot be written.
    """
    count = 0
    with open(filepath, mode='w', encoding='utf-8', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for pt, data_x, data_y in rows:
            writer.writerow((csv_value(pt.x), csv_value(pt.y), csv_value(data_x), csv_value(data_y)))
            count += 1

    logger.info(f"Exported {count} points to: {filepath}")
    return count
