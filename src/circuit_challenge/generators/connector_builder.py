"""
Connector graph construction.

Every pair of horizontally or vertically adjacent cells is joined, and each
2x2 block gets exactly one of its two diagonals.
"""

from typing import List, Optional, Sequence

import numpy as np

from ..core.puzzle import Coordinate, Connector, ConnectorKind, Orientation, ConnectorIncidence
from ..core.utils import ensure_rng
from .path_generator import DiagonalCommitments

# [row][col] for row in 0..rows-2, col in 0..cols-2
DiagonalGrid = List[List[Orientation]]


def build_diagonal_grid(rows: int, cols: int, commitments: DiagonalCommitments,
                        rng: Optional[np.random.Generator] = None) -> DiagonalGrid:
    """Use committed orientations from the path, fill the rest at random"""
    rng = ensure_rng(rng)
    grid: DiagonalGrid = []

    for row in range(rows - 1):
        grid_row = []
        for col in range(cols - 1):
            committed = commitments.get(Coordinate(row, col))
            if committed is not None:
                grid_row.append(committed)
            else:
                grid_row.append(Orientation.DR if rng.random() < 0.5 else Orientation.DL)
        grid.append(grid_row)

    return grid


def build_connector_graph(rows: int, cols: int, diagonal_grid: DiagonalGrid) -> List[Connector]:
    """Build the full (unvalued) connector set for a grid"""
    connectors: List[Connector] = []

    for row in range(rows):
        for col in range(cols - 1):
            connectors.append(Connector(
                ConnectorKind.HORIZONTAL, Coordinate(row, col), Coordinate(row, col + 1)
            ))

    for row in range(rows - 1):
        for col in range(cols):
            connectors.append(Connector(
                ConnectorKind.VERTICAL, Coordinate(row, col), Coordinate(row + 1, col)
            ))

    for row in range(rows - 1):
        for col in range(cols - 1):
            orientation = diagonal_grid[row][col]
            if orientation == Orientation.DR:
                cell_a, cell_b = Coordinate(row, col), Coordinate(row + 1, col + 1)
            else:
                cell_a, cell_b = Coordinate(row, col + 1), Coordinate(row + 1, col)
            connectors.append(Connector(ConnectorKind.DIAGONAL, cell_a, cell_b, orientation))

    return connectors


def get_cell_connectors(cell: Coordinate, connectors: Sequence[Connector],
                        incidence: Optional[ConnectorIncidence] = None) -> List[Connector]:
    """Get all connectors that touch a cell"""
    if incidence is not None:
        return incidence.connectors_at(cell, connectors)
    return [c for c in connectors if c.touches(cell)]


def get_connector_between(cell_a: Coordinate, cell_b: Coordinate,
                          connectors: Sequence[Connector],
                          incidence: Optional[ConnectorIncidence] = None) -> Optional[Connector]:
    """Find the connector joining two cells, if any"""
    if incidence is not None:
        index = incidence.index_between(cell_a, cell_b, connectors)
        return connectors[index] if index is not None else None
    for connector in connectors:
        if connector.connects(cell_a, cell_b):
            return connector
    return None
