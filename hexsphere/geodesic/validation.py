"""Invariant checks for a finished grid.

Validation never raises: every violated invariant adds a human-readable line
to the returned diagnostics and flips the overall result to False.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from hexsphere.errors import InvalidLevelError
from hexsphere.hexsphere_logging import create_module_logger

if TYPE_CHECKING:
    from hexsphere.geodesic.hex_grid import HexGrid

_logger = create_module_logger()

PENTAGON_COUNT = 12
DEFAULT_UNIT_TOLERANCE = 1e-3


def validate_grid(
    grid: HexGrid, unit_tolerance: float = DEFAULT_UNIT_TOLERANCE
) -> tuple[bool, list[str]]:
    """Check the structural invariants of a grid.

    Checks, in order: the pentagon count, the total cell count for the grid's
    level (an invalid level is reported instead), and per cell that its id
    matches its index, that its neighbor count matches its type, that every
    adjacency is mirrored and that its position has finite unit length.

    Args:
        grid: the grid to check
        unit_tolerance: allowed deviation of ``|position|`` from 1

    Returns:
        ``(is_valid, diagnostics)``
    """
    diagnostics: list[str] = []
    cells = grid.cells
    cell_count = len(cells)

    pentagons = sum(1 for cell in cells if cell.is_pentagon)
    if pentagons != PENTAGON_COUNT or grid.pentagon_count != PENTAGON_COUNT:
        diagnostics.append(
            f"Invalid pentagon count: expected {PENTAGON_COUNT}, found {pentagons}"
        )

    try:
        expected_total = grid.expected_cell_count(grid.level)
    except InvalidLevelError:
        diagnostics.append(
            f"Invalid level {grid.level!r}: cannot determine the expected cell count"
        )
    else:
        if cell_count != expected_total or grid.total_cell_count != cell_count:
            diagnostics.append(
                f"Invalid total cell count: expected {expected_total}, found {cell_count}"
            )

    for index, cell in enumerate(cells):
        if cell.cell_id != index:
            diagnostics.append(f"Cell ID mismatch at index {index}: found {cell.cell_id}")

        if cell.neighbor_count != cell.expected_neighbor_count:
            diagnostics.append(
                f"Neighbor count mismatch at index {index}: "
                f"expected {cell.expected_neighbor_count}, found {cell.neighbor_count}"
            )

        for neighbor_id in cell.neighbor_ids:
            if not 0 <= neighbor_id < cell_count:
                diagnostics.append(
                    f"Cell {index} references unknown neighbor {neighbor_id}"
                )
                continue
            if neighbor_id == index:
                diagnostics.append(f"Cell {index} lists itself as a neighbor")
                continue
            # each pair is checked once, from its lower id
            if neighbor_id > index and not cells[neighbor_id].has_neighbor(index):
                diagnostics.append(
                    f"Neighbor symmetry mismatch between cells {index} and {neighbor_id}"
                )

        length = float(np.linalg.norm(cell.position))
        # NaN lengths fail this check too
        if not abs(length - 1.0) <= unit_tolerance:
            diagnostics.append(f"Cell {index} is not normalized, length={length:f}")

    # a neighbor listed only by the higher id is missed by the pass above
    for index, cell in enumerate(cells):
        for neighbor_id in cell.neighbor_ids:
            if (
                0 <= neighbor_id < index
                and not cells[neighbor_id].has_neighbor(index)
            ):
                diagnostics.append(
                    f"Neighbor symmetry mismatch between cells {neighbor_id} and {index}"
                )

    is_valid = not diagnostics
    if is_valid:
        _logger.debug(f"grid level {grid.level} passed validation ({cell_count} cells)")
    else:
        _logger.warning(
            f"grid level {grid.level} failed validation with {len(diagnostics)} issue(s)"
        )
    return is_valid, diagnostics
