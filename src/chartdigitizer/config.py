"""
Configuration & Constants
=========================
Central registry for interaction constants, colours and resource paths.

Exports:
    HIT_RADIUS_PX (int): Screen radius used for hit-testing markers.
    DEFAULT_CAPACITY (int): Points per quad-tree node before it subdivides.
    ASSETS_PATH (str): Absolute path to the assets directory.
"""
import os
import sys
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # config.py is in src/chartdigitizer/
    project_root: Path = Path(__file__).parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Hit-testing / spatial index
HIT_RADIUS_PX: int = 7
DEFAULT_CAPACITY: int = 4
BOUNDARY_PADDING: float = 1.01
MIN_BOUNDARY_SIZE: float = 5.0
# Coincident points would otherwise subdivide forever
MAX_DEPTH: int = 32

# Rendering
RENDER_INTERVAL_MS: int = 16
POINT_RADIUS_PX: float = 5.0
MOUSE_POINT_RADIUS_PX: float = 3.0

# Pan / zoom
MIN_ZOOM: float = 0.05
MAX_ZOOM: float = 50.0
ZOOM_STEP: float = 1.1
FIT_MARGIN: float = 0.05

# Colours
POINT_COLOUR: str = "#7c3aed"
HOVER_COLOUR: str = "#a78bfa"
MOUSE_COLOUR: str = "#84cc16"
BOUNDARY_COLOUR: str = "#ea580c"
X_MARKER_COLOUR: str = "#dc2626"
Y_MARKER_COLOUR: str = "#2563eb"

ASSETS_PATH: str = get_resource_path("assets")
