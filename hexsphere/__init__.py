"""hexsphere: spherical hexagonal grids for planet-scale worlds.

Core Objects: HexGrid, Cell, GridGenerator
"""

import hexsphere.geodesic as geodesic
from hexsphere.geodesic import (
    Cell,
    CellType,
    GridGenerator,
    GridSettings,
    HexGrid,
    generate,
)

__all__ = [
    "Cell",
    "CellType",
    "GridGenerator",
    "GridSettings",
    "HexGrid",
    "generate",
    "geodesic",
]

__title__ = "hexsphere"
__version__ = "0.1.0"
