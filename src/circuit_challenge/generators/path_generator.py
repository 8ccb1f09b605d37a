"""
Solution path generation for Circuit Challenge puzzles.

The path is a self-avoiding walk over the 8-neighbourhood from START (0,0)
to FINISH (rows-1, cols-1). Diagonal moves claim the diagonal of the 2x2
block they cross; the claims are returned so the connector graph can honour
them.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple
import logging

import numpy as np

from .. import config
from ..core.puzzle import Coordinate, Orientation
from ..core.utils import ensure_rng, random_choice

logger = logging.getLogger(__name__)

DiagonalCommitments = Dict[Coordinate, Orientation]

# Neighbour enumeration order: up, down, left, right, then the diagonals
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, 0),
    (1, 0),
    (0, -1),
    (0, 1),
    (-1, -1),
    (-1, 1),
    (1, -1),
    (1, 1),
)


@dataclass
class PathResult:
    """Result of path generation"""
    success: bool
    path: List[Coordinate] = field(default_factory=list)
    diagonal_commitments: DiagonalCommitments = field(default_factory=dict)
    error: Optional[str] = None

    def __repr__(self):
        status = "Success" if self.success else "Failed"
        return f"PathResult({status}, length={len(self.path)})"


def get_adjacent(pos: Coordinate, rows: int, cols: int) -> List[Coordinate]:
    """Get all in-bounds neighbours of a cell, in DIRECTIONS order"""
    adjacent = []
    for d_row, d_col in DIRECTIONS:
        row, col = pos.row + d_row, pos.col + d_col
        if 0 <= row < rows and 0 <= col < cols:
            adjacent.append(Coordinate(row, col))
    return adjacent


def manhattan_distance(a: Coordinate, b: Coordinate) -> int:
    return abs(a.row - b.row) + abs(a.col - b.col)


def is_diagonal_move(source: Coordinate, target: Coordinate) -> bool:
    return source.row != target.row and source.col != target.col


def get_diagonal_key(cell_a: Coordinate, cell_b: Coordinate) -> Coordinate:
    """The 2x2 block a diagonal move crosses, identified by its top-left cell"""
    return Coordinate(min(cell_a.row, cell_b.row), min(cell_a.col, cell_b.col))


def get_diagonal_orientation(source: Coordinate, target: Coordinate) -> Orientation:
    """
    DR for down-right or up-left moves, DL for down-left or up-right moves.
    """
    row_diff = target.row - source.row
    col_diff = target.col - source.col
    if (row_diff > 0) == (col_diff > 0):
        return Orientation.DR
    return Orientation.DL


def is_diagonal_move_allowed(source: Coordinate, target: Coordinate,
                             commitments: DiagonalCommitments) -> bool:
    """A diagonal move must agree with any orientation already claimed for its block"""
    if not is_diagonal_move(source, target):
        return True
    existing = commitments.get(get_diagonal_key(source, target))
    return existing is None or existing == get_diagonal_orientation(source, target)


def commit_diagonal(source: Coordinate, target: Coordinate,
                    commitments: DiagonalCommitments):
    """
    Record the block orientation claimed by a diagonal move.

    Raises:
        ValueError: If the block already holds the opposite orientation
    """
    key = get_diagonal_key(source, target)
    orientation = get_diagonal_orientation(source, target)
    existing = commitments.get(key)
    if existing is not None and existing != orientation:
        raise ValueError(
            f"Block {key} is committed to {existing.value}, move {source}->{target} needs {orientation.value}"
        )
    commitments[key] = orientation


def count_direction_changes(path: List[Coordinate]) -> int:
    """Number of times the move vector changes along the path"""
    if len(path) < 3:
        return 0

    moves = [(b.row - a.row, b.col - a.col) for a, b in zip(path, path[1:])]
    return sum(1 for prev, curr in zip(moves, moves[1:]) if prev != curr)


def is_interesting_path(path: List[Coordinate],
                        min_changes: int = config.MIN_DIRECTION_CHANGES) -> bool:
    """Reject straight or single-bend routes"""
    return count_direction_changes(path) >= min_changes


def _choose_next(candidates: List[Coordinate], finish: Coordinate, path_length: int,
                 max_length: int, rng: np.random.Generator) -> Coordinate:
    # The longer the walk, the more often it heads straight for the finish
    progress_ratio = path_length / max_length
    if rng.random() < progress_ratio * config.FINISH_BIAS:
        return min(candidates, key=lambda c: manhattan_distance(c, finish))
    return random_choice(candidates, rng)


def _walk(rows: int, cols: int, max_length: int,
          rng: np.random.Generator) -> Tuple[List[Coordinate], DiagonalCommitments]:
    """One random walk; stops at FINISH, when stuck, or when out of length"""
    start = Coordinate(0, 0)
    finish = Coordinate(rows - 1, cols - 1)

    path = [start]
    visited = {start}
    commitments: DiagonalCommitments = {}
    current = start

    while current != finish and len(path) < max_length:
        candidates = [
            nxt for nxt in get_adjacent(current, rows, cols)
            if nxt not in visited and is_diagonal_move_allowed(current, nxt, commitments)
        ]
        if not candidates:
            break

        nxt = _choose_next(candidates, finish, len(path), max_length, rng)

        if is_diagonal_move(current, nxt):
            commit_diagonal(current, nxt, commitments)

        path.append(nxt)
        visited.add(nxt)
        current = nxt

    return path, commitments


def generate_path(rows: int, cols: int, min_length: int, max_length: int,
                  max_attempts: int = config.PATH_MAX_ATTEMPTS,
                  rng: Optional[np.random.Generator] = None) -> PathResult:
    """
    Generate a solution path from START to FINISH.

    Args:
        rows: Number of grid rows
        cols: Number of grid columns
        min_length: Minimum number of cells on the path
        max_length: Maximum number of cells on the path
        max_attempts: Number of independent walks to try
        rng: Random source

    Returns:
        PathResult with the path and the diagonal commitments it made
    """
    rng = ensure_rng(rng)
    finish = Coordinate(rows - 1, cols - 1)

    for attempt in range(max_attempts):
        try:
            path, commitments = _walk(rows, cols, max_length, rng)
        except ValueError as e:
            logger.debug(f"Path attempt {attempt + 1} aborted: {e}")
            continue

        if (path[-1] == finish
                and min_length <= len(path) <= max_length
                and is_interesting_path(path)):
            logger.debug(f"Generated path of length {len(path)} on attempt {attempt + 1}")
            return PathResult(success=True, path=path, diagonal_commitments=commitments)

    return PathResult(
        success=False,
        error=(f"Failed to generate valid path after {max_attempts} attempts "
               f"({rows}x{cols}, length {min_length}-{max_length})"),
    )
