"""
Cell answer assignment.

Path cells point to the next path cell; every other cell (except FINISH)
points along a random incident connector, which gives the player plausible
wrong turns. Decoy routes may dead-end or loop.
"""

from typing import List, Optional, Sequence

import numpy as np

from ..core.puzzle import Cell, CellGrid, Coordinate, Connector, ConnectorIncidence
from ..core.utils import ensure_rng, random_choice
from .connector_builder import get_cell_connectors


def assign_cell_answers(rows: int, cols: int, path: Sequence[Coordinate],
                        connectors: Sequence[Connector],
                        rng: Optional[np.random.Generator] = None,
                        incidence: Optional[ConnectorIncidence] = None) -> CellGrid:
    """
    Derive every cell's answer from the path and connector values.

    Raises:
        ValueError: If two consecutive path cells are not joined by a connector,
            or a cell has no connectors at all
    """
    rng = ensure_rng(rng)
    incidence = incidence or ConnectorIncidence(rows, cols, connectors)
    finish = Coordinate(rows - 1, cols - 1)

    answers: List[List[Optional[int]]] = [[None] * cols for _ in range(rows)]

    for current, following in zip(path, path[1:]):
        index = incidence.index_between(current, following, connectors)
        if index is None:
            raise ValueError(f"No connector found between {current} and {following}")
        answers[current.row][current.col] = connectors[index].value

    on_path = set(path)
    for row in range(rows):
        for col in range(cols):
            coord = Coordinate(row, col)
            if coord == finish or coord in on_path:
                continue

            touching = incidence.connectors_at(coord, connectors)
            if not touching:
                raise ValueError(f"No connectors found for cell {coord}")
            answers[row][col] = random_choice(touching, rng).value

    return tuple(
        tuple(
            Cell(
                row=row,
                col=col,
                answer=answers[row][col],
                is_start=(row == 0 and col == 0),
                is_finish=(row == rows - 1 and col == cols - 1),
            )
            for col in range(cols)
        )
        for row in range(rows)
    )


def get_exit_cell(cell: Cell, connectors: Sequence[Connector],
                  incidence: Optional[ConnectorIncidence] = None) -> Optional[Coordinate]:
    """
    Find the cell a player moves to by following this cell's answer.

    Returns None for FINISH (no answer) or when no incident connector
    carries the answer.

    Raises:
        ValueError: If more than one incident connector carries the answer
    """
    if cell.is_finish or cell.answer is None:
        return None

    matching = [c for c in get_cell_connectors(cell.coordinate, connectors, incidence)
                if c.value == cell.answer]

    if not matching:
        return None
    if len(matching) > 1:
        raise ValueError(f"Answer {cell.answer} at {cell.coordinate} matches {len(matching)} connectors")

    return matching[0].other_end(cell.coordinate)
