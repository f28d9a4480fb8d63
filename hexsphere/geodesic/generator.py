"""Generation of spherical hexagonal grids.

The pipeline is a single forward pass::

    icosahedron -> subdivision -> adjacency -> dual conversion -> neighbors
    -> boundary ordering -> face tagging -> statistics -> validation

Expected failures (an invalid level, a grid that fails validation) are
reported through the returned diagnostics list; no exception escapes for
them. Each run builds its own mesh and grid, so independent runs do not share
any state.
"""

from __future__ import annotations

import time

import numpy as np

from hexsphere.errors import SettingsError
from hexsphere.geodesic.dual import (
    assign_faces,
    convert_to_dual,
    order_boundaries,
    resolve_neighbors,
)
from hexsphere.geodesic.hex_grid import HexGrid
from hexsphere.geodesic.icosahedron import build_icosahedron
from hexsphere.geodesic.mesh import MAX_SUBDIVISIONS, build_adjacency, subdivide
from hexsphere.geodesic.settings import GridSettings
from hexsphere.geodesic.statistics import calculate_statistics
from hexsphere.geodesic.validation import validate_grid
from hexsphere.hexsphere_logging import create_module_logger, method_logger

_logger = create_module_logger()

MIN_LEVEL = 0
MAX_LEVEL = MAX_SUBDIVISIONS

_LEVEL_RECOMMENDATIONS = {
    0: "Very Low - Testing and Prototyping (~10-300 cells)",
    1: "Very Low - Testing and Prototyping (~10-300 cells)",
    2: "Very Low - Testing and Prototyping (~10-300 cells)",
    3: "Low - Small Asteroids (~640 cells)",
    4: "Medium - Small Moons (~2,560 cells)",
    5: "High - Medium Moons/Small Planets (~10,240 cells)",
    6: "Very High - Large Planets (~40,960 cells)",
    7: "Extreme - Very Large Planets (~163,840 cells)",
    8: "Insane - Huge Planets (~655,360 cells) - WARNING: Heavy",
    9: "Ludicrous - Massive Planets (~2,621,440 cells) - WARNING: VERY Heavy, NOT RECOMMENDED",
    10: (
        "Ridiculous - Gargantuan Planets (~10,485,760 cells) - "
        "WARNING: EXTREMELY Heavy, NOT RECOMMENDED, WILL HANG"
    ),
}


def is_valid_level(level) -> bool:
    """Whether level is an integer between MIN_LEVEL and MAX_LEVEL."""
    return (
        isinstance(level, int | np.integer)
        and not isinstance(level, bool)
        and MIN_LEVEL <= level <= MAX_LEVEL
    )


def level_recommendation(level: int) -> str:
    """Return a short description of what a subdivision level is suited for."""
    if level in _LEVEL_RECOMMENDATIONS:
        return _LEVEL_RECOMMENDATIONS[level]
    if level > MAX_LEVEL:
        return "Beyond Ridiculous - Unthinkable Sizes - WARNING: UNUSABLE, WILL CRASH"
    return "Invalid Level"


class GridGenerator:
    """Builds grids with a fixed set of settings.

    Attributes:
        settings (GridSettings): the generation parameters
        running (bool): whether a generation run is in progress

    """

    def __init__(self, settings: GridSettings | None = None) -> None:
        """Create a generator.

        Args:
            settings: generation parameters, defaults are used when omitted

        Raises:
            SettingsError: if settings are bound to another generator that is
                still running

        Notes:
            Settings lock only for the generator they were last bound to, so
            settings shared between generators are re-bound on each creation.
        """
        settings = settings if settings is not None else GridSettings()
        owner = settings.generator
        if owner is not None and owner is not self and owner.running:
            raise SettingsError(
                "Cannot bind settings to a new generator while a grid is being generated"
            )
        self.settings = settings
        self.settings.generator = self
        self.running = False

    @method_logger(__name__)
    def generate(self, level: int) -> tuple[HexGrid | None, list[str]]:
        """Generate a grid at the given subdivision level.

        Args:
            level: number of subdivision passes, between 0 and 10

        Returns:
            ``(grid, [])`` on success, ``(None, diagnostics)`` when the level is
            invalid or the finished grid fails validation
        """
        if not is_valid_level(level):
            return None, [
                f"Invalid level {level}. Level must be between {MIN_LEVEL} and {MAX_LEVEL}."
            ]

        _logger.info(f"starting generation for level {level}")
        start = time.perf_counter()
        self.running = True
        try:
            grid = self._build(int(level))
        finally:
            self.running = False

        is_valid, diagnostics = validate_grid(
            grid, unit_tolerance=self.settings["unit_length_tolerance"]
        )
        if not is_valid:
            _logger.error(f"generation for level {level} failed validation")
            return None, [f"Grid validation failed for level {level}:", *diagnostics]

        if self.settings["spatial_index"]:
            grid.build_spatial_index()

        _logger.info(
            f"generated level {level} grid with {grid.total_cell_count} cells "
            f"in {time.perf_counter() - start:.3f}s"
        )
        return grid, []

    def _build(self, level: int) -> HexGrid:
        settings = self.settings
        merge_tolerance = settings["merge_tolerance"]

        mesh = build_icosahedron(merge_tolerance)
        subdivide(mesh, level)
        build_adjacency(mesh)

        cells = convert_to_dual(mesh)
        # the triangle mesh is not needed past this point
        del mesh

        resolve_neighbors(
            cells,
            merge_tolerance=merge_tolerance,
            brute_force=settings["brute_force_neighbors"],
        )
        order_boundaries(cells)
        assign_faces(cells)
        return HexGrid(cells, level, calculate_statistics(cells))

    def generate_batch(
        self, min_level: int, max_level: int
    ) -> tuple[dict[int, HexGrid], list[str]]:
        """Generate one grid per level in ``[min_level, max_level]``.

        Returns:
            the grids that were generated, by level, and the diagnostics of
            the levels that failed
        """
        if not (
            is_valid_level(min_level)
            and is_valid_level(max_level)
            and min_level <= max_level
        ):
            return {}, [
                "Invalid level range specified for batch generation "
                f"(must be {MIN_LEVEL}-{MAX_LEVEL}, min <= max)."
            ]

        _logger.info(f"starting batch generation from level {min_level} to {max_level}")
        grids: dict[int, HexGrid] = {}
        diagnostics: list[str] = []
        for level in range(min_level, max_level + 1):
            grid, level_diagnostics = self.generate(level)
            if grid is None:
                diagnostics.append(f"Failed to generate grid level {level}:")
                diagnostics.extend(level_diagnostics)
            else:
                grids[level] = grid

        _logger.info(
            f"batch generation completed: {len(grids)}/{max_level - min_level + 1} successful"
        )
        return grids, diagnostics


def generate(
    level: int, settings: GridSettings | None = None
) -> tuple[HexGrid | None, list[str]]:
    """Generate a grid at the given level, see :meth:`GridGenerator.generate`."""
    return GridGenerator(settings).generate(level)


def generate_batch(
    min_level: int, max_level: int, settings: GridSettings | None = None
) -> tuple[dict[int, HexGrid], list[str]]:
    """Generate grids for a range of levels, see :meth:`GridGenerator.generate_batch`."""
    return GridGenerator(settings).generate_batch(min_level, max_level)
