"""
Validator for Circuit Challenge puzzle invariants.
"""

from collections import Counter
from typing import List, Sequence, Optional

import networkx as nx

from .puzzle import (
    Puzzle, Coordinate, Connector, ConnectorKind, ConnectorIncidence,
    CellGrid, are_adjacent,
)
from .arithmetic import evaluate_expression


class ValidationResult:
    """Result of puzzle validation"""

    def __init__(self):
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []

    @property
    def valid(self) -> bool:
        return self.is_valid

    def add_error(self, error: str):
        """Add an error message"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str):
        """Add a warning message"""
        self.warnings.append(warning)

    def merge(self, other: 'ValidationResult'):
        """Fold another result's messages into this one"""
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        status = "Valid" if self.is_valid else "Invalid"
        return f"ValidationResult({status}, {len(self.errors)} errors, {len(self.warnings)} warnings)"


def _grid_shape(grid: CellGrid):
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    return rows, cols


def _build_incidence(rows: int, cols: int, connectors: Sequence[Connector],
                     result: ValidationResult) -> Optional[ConnectorIncidence]:
    """Incidence for the grid, or None with an error added if a connector lies outside it"""
    try:
        return ConnectorIncidence(rows, cols, connectors)
    except ValueError as e:
        result.add_error(f"Connector outside the grid: {e}")
        return None


class PuzzleValidator:
    """Independently re-checks every invariant a generated puzzle must hold"""

    @staticmethod
    def validate_path(path: Sequence[Coordinate], rows: int, cols: int) -> ValidationResult:
        """Validate that a path is correctly formed"""
        result = ValidationResult()

        if len(path) < 2:
            result.add_error("Path must have at least 2 elements")
            return result

        if path[0] != Coordinate(0, 0):
            result.add_error(f"Path must start at (0,0), but starts at {path[0]}")

        if path[-1] != Coordinate(rows - 1, cols - 1):
            result.add_error(f"Path must end at ({rows - 1},{cols - 1}), but ends at {path[-1]}")

        visited = set()
        for i, coord in enumerate(path):
            if not (0 <= coord.row < rows and 0 <= coord.col < cols):
                result.add_error(f"Path coordinate {coord} is out of bounds")

            if coord in visited:
                result.add_error(f"Duplicate coordinate in path: {coord}")
            visited.add(coord)

            if i > 0 and not are_adjacent(path[i - 1], coord):
                result.add_error(f"Non-adjacent cells in path: {path[i - 1]} to {coord}")

        return result

    @staticmethod
    def validate_connector_graph(connectors: Sequence[Connector], rows: int, cols: int) -> ValidationResult:
        """Validate connector counts and that every 2x2 block has exactly one diagonal"""
        result = ValidationResult()

        counts = Counter(c.kind for c in connectors)
        expected = {
            ConnectorKind.HORIZONTAL: rows * (cols - 1),
            ConnectorKind.VERTICAL: (rows - 1) * cols,
            ConnectorKind.DIAGONAL: (rows - 1) * (cols - 1),
        }
        for kind, count in expected.items():
            if counts[kind] != count:
                result.add_error(f"Expected {count} {kind.value} connectors, found {counts[kind]}")

        diagonals_per_block = Counter(
            (min(c.cell_a.row, c.cell_b.row), min(c.cell_a.col, c.cell_b.col))
            for c in connectors if c.kind == ConnectorKind.DIAGONAL
        )
        for row in range(rows - 1):
            for col in range(cols - 1):
                found = diagonals_per_block[(row, col)]
                if found != 1:
                    result.add_error(f"Block ({row},{col}) has {found} diagonal connectors")

        for connector in connectors:
            for cell in (connector.cell_a, connector.cell_b):
                if not (0 <= cell.row < rows and 0 <= cell.col < cols):
                    result.add_error(f"{connector} has an endpoint outside the grid")
            if not are_adjacent(connector.cell_a, connector.cell_b):
                result.add_error(f"{connector} joins non-adjacent cells")

        return result

    @staticmethod
    def validate_connector_uniqueness(connectors: Sequence[Connector], rows: int, cols: int) -> ValidationResult:
        """Validate that all connector values are unique per cell"""
        result = ValidationResult()
        incidence = _build_incidence(rows, cols, connectors, result)
        if incidence is None:
            return result

        for row in range(rows):
            for col in range(cols):
                cell = Coordinate(row, col)
                values = [c.value for c in incidence.connectors_at(cell, connectors)]

                if None in values:
                    result.add_error(f"Cell {cell} touches a connector with no value")

                for value, count in Counter(values).items():
                    if value is not None and count > 1:
                        result.add_error(f"Duplicate connector value {value} at cell {cell}")

        return result

    @staticmethod
    def validate_cell_answers(grid: CellGrid, connectors: Sequence[Connector]) -> ValidationResult:
        """Validate that each cell answer matches exactly one incident connector"""
        result = ValidationResult()
        rows, cols = _grid_shape(grid)
        incidence = _build_incidence(rows, cols, connectors, result)
        if incidence is None:
            return result

        for row in grid:
            for cell in row:
                if cell.is_finish:
                    if cell.answer is not None:
                        result.add_error(f"FINISH cell should have no answer, but has {cell.answer}")
                    continue

                if cell.answer is None:
                    result.add_error(f"Cell {cell.coordinate} has no answer but is not FINISH")
                    continue

                matching = [c for c in incidence.connectors_at(cell.coordinate, connectors)
                            if c.value == cell.answer]

                if not matching:
                    result.add_error(f"Cell {cell.coordinate} has answer {cell.answer} but no matching connector")
                elif len(matching) > 1:
                    result.add_error(
                        f"Cell {cell.coordinate} has answer {cell.answer} matching {len(matching)} connectors"
                    )

        return result

    @staticmethod
    def validate_solution_path(path: Sequence[Coordinate], grid: CellGrid,
                               connectors: Sequence[Connector]) -> ValidationResult:
        """
        Validate that the solution path can be followed from the answers.

        Each path cell's answer must equal the connector to the next path
        cell, and following answers from START must reach FINISH in exactly
        len(path) - 1 moves.
        """
        result = ValidationResult()
        rows, cols = _grid_shape(grid)
        incidence = _build_incidence(rows, cols, connectors, result)
        if incidence is None:
            return result

        outside = [c for c in path if not (0 <= c.row < rows and 0 <= c.col < cols)]
        if outside:
            result.add_error(f"Path leaves the grid at {outside[0]}")
            return result

        for current, following in zip(path, path[1:]):
            cell = grid[current.row][current.col]
            index = incidence.index_between(current, following, connectors)

            if index is None:
                result.add_error(f"No connector between path cells {current} and {following}")
                continue

            if cell.answer != connectors[index].value:
                result.add_error(
                    f"Cell {current} answer {cell.answer} doesn't match connector value {connectors[index].value}"
                )

        if not result or len(path) < 2:
            return result

        finish = Coordinate(rows - 1, cols - 1)
        position = path[0]
        hops = 0
        while position != finish and hops < len(path):
            cell = grid[position.row][position.col]
            exits = [c for c in incidence.connectors_at(position, connectors) if c.value == cell.answer]
            if len(exits) != 1:
                break
            position = exits[0].other_end(position)
            hops += 1

        if position != finish or hops != len(path) - 1:
            result.add_error(
                f"Following answers from START reaches {position} after {hops} moves, "
                f"expected FINISH after {len(path) - 1}"
            )

        return result

    @staticmethod
    def validate_expressions(grid: CellGrid) -> ValidationResult:
        """Validate that every answered cell shows an expression for its answer"""
        result = ValidationResult()

        for row in grid:
            for cell in row:
                if cell.answer is None:
                    continue

                if not cell.expression:
                    result.add_error(f"Cell {cell.coordinate} has empty expression")
                    continue

                value = evaluate_expression(cell.expression)
                if value is None:
                    result.add_error(f"Cannot evaluate expression \"{cell.expression}\" at {cell.coordinate}")
                    continue

                if value != cell.answer:
                    result.add_error(
                        f"Expression \"{cell.expression}\" = {value}, but cell answer is {cell.answer} "
                        f"at {cell.coordinate}"
                    )

        return result

    @staticmethod
    def validate_puzzle(puzzle: Puzzle) -> ValidationResult:
        """Run all validations on a complete puzzle"""
        result = ValidationResult()
        rows, cols = puzzle.rows, puzzle.cols
        path = puzzle.solution.path

        result.merge(PuzzleValidator.validate_path(path, rows, cols))
        result.merge(PuzzleValidator.validate_connector_graph(puzzle.connectors, rows, cols))
        result.merge(PuzzleValidator.validate_connector_uniqueness(puzzle.connectors, rows, cols))
        result.merge(PuzzleValidator.validate_cell_answers(puzzle.grid, puzzle.connectors))
        result.merge(PuzzleValidator.validate_solution_path(path, puzzle.grid, puzzle.connectors))
        result.merge(PuzzleValidator.validate_expressions(puzzle.grid))

        if puzzle.solution.steps != len(path) - 1:
            result.add_error(f"Solution records {puzzle.solution.steps} steps for a path of {len(path)} cells")

        return result

    @staticmethod
    def build_answer_graph(puzzle: Puzzle) -> nx.DiGraph:
        """
        Directed graph of "follow the answer" moves.

        Every non-finish cell has one outgoing edge to the cell its answer
        leads to.
        """
        graph = nx.DiGraph()
        incidence = puzzle.incidence()

        for cell in puzzle.cells():
            graph.add_node(cell.coordinate)
            if cell.answer is None:
                continue
            for connector in incidence.connectors_at(cell.coordinate, puzzle.connectors):
                if connector.value == cell.answer:
                    graph.add_edge(cell.coordinate, connector.other_end(cell.coordinate),
                                   value=connector.value)
                    break

        return graph

    @staticmethod
    def get_puzzle_statistics(puzzle: Puzzle) -> dict:
        """Get various statistics about the puzzle"""
        values = [c.value for c in puzzle.connectors]
        path_cells = set(puzzle.solution.path)

        stats = {
            'rows': puzzle.rows,
            'cols': puzzle.cols,
            'difficulty': puzzle.difficulty.name,
            'num_connectors': len(puzzle.connectors),
            'connector_kinds': {kind.value: sum(1 for c in puzzle.connectors if c.kind == kind)
                                for kind in ConnectorKind},
            'min_connector_value': min(values) if values else None,
            'max_connector_value': max(values) if values else None,
            'path_length': len(puzzle.solution.path),
            'steps': puzzle.solution.steps,
            'path_coverage': len(path_cells) / (puzzle.rows * puzzle.cols),
        }

        operations = Counter()
        for cell in puzzle.cells():
            if cell.expression:
                for glyph in ('+', '−', '×', '÷'):
                    if glyph in cell.expression:
                        operations[glyph] += 1
                        break
        stats['operations'] = dict(operations)

        # Where the decoy cells lead
        graph = PuzzleValidator.build_answer_graph(puzzle)
        decoys = [cell.coordinate for cell in puzzle.cells()
                  if cell.coordinate not in path_cells and not cell.is_finish]
        stats['num_decoys'] = len(decoys)
        stats['decoys_reaching_finish'] = sum(
            1 for coord in decoys if nx.has_path(graph, coord, puzzle.finish)
        )
        stats['answer_cycles'] = sum(1 for _ in nx.simple_cycles(graph))

        return stats
