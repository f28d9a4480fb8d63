"""Geodesic grids: hexagonal and pentagonal cells covering a sphere.

A grid is the dual of a subdivided icosahedron. Every vertex of the
subdivided triangle mesh becomes a cell; the twelve original icosahedron
vertices become pentagons and all others hexagons. Key components:

- HexGrid: the finished grid and its spatial queries
- Cell: a single polygon with its center, boundary and neighbor ids
- GridGenerator / generate: the generation pipeline
- GridSettings: tolerances and options of a generation run
- GridStatistics: cell area statistics

A level ``L`` grid has ``10 * 4**L + 2`` cells, exactly twelve of which are
pentagons.
"""

from hexsphere.geodesic.cell import Cell, CellType
from hexsphere.geodesic.generator import (
    MAX_LEVEL,
    MIN_LEVEL,
    GridGenerator,
    generate,
    generate_batch,
    level_recommendation,
)
from hexsphere.geodesic.hex_grid import HexGrid
from hexsphere.geodesic.settings import GridSettings
from hexsphere.geodesic.statistics import GridStatistics

__all__ = [
    "MAX_LEVEL",
    "MIN_LEVEL",
    "Cell",
    "CellType",
    "GridGenerator",
    "GridSettings",
    "GridStatistics",
    "HexGrid",
    "generate",
    "generate_batch",
    "level_recommendation",
]
