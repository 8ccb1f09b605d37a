"""
Core data structures for Circuit Challenge puzzles.
"""

from dataclasses import dataclass, replace
from typing import List, Tuple, Optional, Dict, Sequence
from enum import Enum

from .difficulty import DifficultyConfig


class ConnectorKind(Enum):
    """Geometry of a connector between two adjacent cells"""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"


class Orientation(Enum):
    """Which diagonal a 2x2 block uses"""
    DR = "DR"  # top-left to bottom-right
    DL = "DL"  # top-right to bottom-left


@dataclass(frozen=True, order=True)
class Coordinate:
    """A cell position in the grid (0-indexed)"""
    row: int
    col: int

    def __repr__(self):
        return f"({self.row},{self.col})"


def are_adjacent(a: Coordinate, b: Coordinate) -> bool:
    """Check if two cells touch horizontally, vertically or diagonally"""
    row_diff = abs(a.row - b.row)
    col_diff = abs(a.col - b.col)
    return row_diff <= 1 and col_diff <= 1 and (row_diff + col_diff > 0)


@dataclass(frozen=True)
class Connector:
    """An edge between two adjacent cells, carrying one integer value"""
    kind: ConnectorKind
    cell_a: Coordinate
    cell_b: Coordinate
    orientation: Optional[Orientation] = None
    value: Optional[int] = None

    def touches(self, cell: Coordinate) -> bool:
        return self.cell_a == cell or self.cell_b == cell

    def connects(self, first: Coordinate, second: Coordinate) -> bool:
        """True if this connector joins the two cells, in either order"""
        return ((self.cell_a == first and self.cell_b == second) or
                (self.cell_a == second and self.cell_b == first))

    def other_end(self, cell: Coordinate) -> Coordinate:
        """Get the cell on the far side of the connector"""
        if self.cell_a == cell:
            return self.cell_b
        if self.cell_b == cell:
            return self.cell_a
        raise ValueError(f"Connector {self} does not touch cell {cell}")

    def with_value(self, value: int) -> 'Connector':
        return replace(self, value=value)

    def __repr__(self):
        return f"Connector({self.kind.value}, {self.cell_a}<->{self.cell_b}, value={self.value})"


class ConnectorIncidence:
    """
    Array-indexed lookup from each cell to the connectors touching it.

    Stores connector indices, so the same structure stays valid for any
    connector sequence in the same order (e.g. before and after values are
    assigned).
    """

    def __init__(self, rows: int, cols: int, connectors: Sequence[Connector]):
        self.rows = rows
        self.cols = cols
        self._by_cell: List[List[int]] = [[] for _ in range(rows * cols)]

        for index, connector in enumerate(connectors):
            self._by_cell[self.cell_index(connector.cell_a)].append(index)
            self._by_cell[self.cell_index(connector.cell_b)].append(index)

    def cell_index(self, cell: Coordinate) -> int:
        if not (0 <= cell.row < self.rows and 0 <= cell.col < self.cols):
            raise ValueError(f"Cell {cell} is outside a {self.rows}x{self.cols} grid")
        return cell.row * self.cols + cell.col

    def indices_at(self, cell: Coordinate) -> List[int]:
        """Indices of the connectors touching a cell"""
        return self._by_cell[self.cell_index(cell)]

    def connectors_at(self, cell: Coordinate,
                      connectors: Sequence[Connector]) -> List[Connector]:
        return [connectors[i] for i in self.indices_at(cell)]

    def index_between(self, first: Coordinate, second: Coordinate,
                      connectors: Sequence[Connector]) -> Optional[int]:
        """Index of the connector joining two cells, or None"""
        for i in self.indices_at(first):
            if connectors[i].connects(first, second):
                return i
        return None

    def degree(self, cell: Coordinate) -> int:
        return len(self.indices_at(cell))


@dataclass(frozen=True)
class Cell:
    """A grid cell and what the player sees on it"""
    row: int
    col: int
    answer: Optional[int] = None
    expression: str = ""
    is_start: bool = False
    is_finish: bool = False

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.row, self.col)

    def __repr__(self):
        return f"Cell({self.row}, {self.col}, answer={self.answer}, expression={self.expression!r})"


CellGrid = Tuple[Tuple[Cell, ...], ...]


@dataclass(frozen=True)
class Solution:
    """The solution path and its number of moves"""
    path: Tuple[Coordinate, ...]
    steps: int


@dataclass(frozen=True)
class Puzzle:
    """A complete, validated puzzle handed to the rest of the application"""
    id: str
    difficulty: DifficultyConfig
    grid: CellGrid
    connectors: Tuple[Connector, ...]
    solution: Solution

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def start(self) -> Coordinate:
        return Coordinate(0, 0)

    @property
    def finish(self) -> Coordinate:
        return Coordinate(self.rows - 1, self.cols - 1)

    def cell_at(self, coord: Coordinate) -> Cell:
        return self.grid[coord.row][coord.col]

    def cells(self) -> List[Cell]:
        """All cells in row-major order"""
        return [cell for row in self.grid for cell in row]

    def incidence(self) -> ConnectorIncidence:
        return ConnectorIncidence(self.rows, self.cols, self.connectors)

    def __str__(self):
        """Expressions laid out on the grid (useful for debugging)"""
        labels: Dict[Tuple[int, int], str] = {}
        for cell in self.cells():
            if cell.is_finish:
                labels[(cell.row, cell.col)] = "FINISH"
            else:
                labels[(cell.row, cell.col)] = cell.expression or "?"

        width = max(len(label) for label in labels.values())
        lines = []
        for row in range(self.rows):
            lines.append("  ".join(labels[(row, col)].center(width) for col in range(self.cols)))
        return "\n".join(lines)

    def __repr__(self):
        return (f"Puzzle({self.rows}x{self.cols}, {self.difficulty.name}, "
                f"{len(self.connectors)} connectors, {self.solution.steps} steps)")
