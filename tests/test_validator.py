from dataclasses import replace

import networkx as nx

from circuit_challenge.core.puzzle import Coordinate, Connector, ConnectorKind, Solution
from circuit_challenge.core.validator import PuzzleValidator, ValidationResult


def _replace_cell(puzzle, coord, **changes):
    grid = tuple(
        tuple(replace(cell, **changes) if cell.coordinate == coord else cell for cell in row)
        for row in puzzle.grid
    )
    return replace(puzzle, grid=grid)


def _decoy(puzzle):
    path = set(puzzle.solution.path)
    return next(cell for cell in puzzle.cells() if cell.coordinate not in path)


def test_validation_result():
    result = ValidationResult()
    assert result and result.valid

    result.add_warning("just a warning")
    assert result

    other = ValidationResult()
    other.add_error("broken")
    result.merge(other)

    assert not result
    assert result.errors == ["broken"]
    assert result.warnings == ["just a warning"]


def test_generated_puzzle_is_valid(generated_puzzle):
    result = PuzzleValidator.validate_puzzle(generated_puzzle)
    assert result, result.errors


def test_validate_path_errors():
    bad_start = [Coordinate(0, 1), Coordinate(1, 1), Coordinate(2, 3)]
    result = PuzzleValidator.validate_path(bad_start, 3, 4)
    assert any("must start" in e for e in result.errors)
    assert any("Non-adjacent" in e for e in result.errors)

    repeated = [Coordinate(0, 0), Coordinate(0, 1), Coordinate(0, 0), Coordinate(1, 1)]
    result = PuzzleValidator.validate_path(repeated, 2, 2)
    assert any("Duplicate" in e for e in result.errors)

    assert not PuzzleValidator.validate_path([Coordinate(0, 0)], 3, 4)


def test_missing_diagonal_detected(generated_puzzle):
    connectors = [c for c in generated_puzzle.connectors if c.kind != ConnectorKind.DIAGONAL][:-1]
    result = PuzzleValidator.validate_connector_graph(
        connectors, generated_puzzle.rows, generated_puzzle.cols
    )
    assert not result
    assert any("diagonal" in e for e in result.errors)


def test_duplicate_connector_values_detected(generated_puzzle):
    connectors = list(generated_puzzle.connectors)
    first = connectors[0]
    for i, other in enumerate(connectors[1:], start=1):
        if other.touches(first.cell_a):
            connectors[i] = other.with_value(first.value)
            break

    result = PuzzleValidator.validate_connector_uniqueness(
        connectors, generated_puzzle.rows, generated_puzzle.cols
    )
    assert any("Duplicate connector value" in e for e in result.errors)


def test_finish_with_answer_detected(generated_puzzle):
    puzzle = _replace_cell(generated_puzzle, generated_puzzle.finish, answer=5)
    result = PuzzleValidator.validate_cell_answers(puzzle.grid, puzzle.connectors)
    assert any("FINISH" in e for e in result.errors)


def test_unmatched_answer_detected(generated_puzzle):
    decoy = _decoy(generated_puzzle)
    puzzle = _replace_cell(generated_puzzle, decoy.coordinate, answer=10_000)
    result = PuzzleValidator.validate_cell_answers(puzzle.grid, puzzle.connectors)
    assert any("no matching connector" in e for e in result.errors)


def test_broken_path_answer_detected(generated_puzzle):
    start = generated_puzzle.cell_at(generated_puzzle.start)
    second = generated_puzzle.solution.path[1]
    wrong = next(c.value for c in generated_puzzle.connectors
                 if c.touches(start.coordinate) and not c.touches(second))

    puzzle = _replace_cell(generated_puzzle, start.coordinate, answer=wrong)
    result = PuzzleValidator.validate_solution_path(
        puzzle.solution.path, puzzle.grid, puzzle.connectors
    )
    assert not result


def test_wrong_expression_detected(generated_puzzle):
    decoy = _decoy(generated_puzzle)
    puzzle = _replace_cell(generated_puzzle, decoy.coordinate, expression=f"{decoy.answer} + 1")
    result = PuzzleValidator.validate_expressions(puzzle.grid)
    assert not result
    assert "cell answer is" in result.errors[0]

    puzzle = _replace_cell(generated_puzzle, decoy.coordinate, expression="")
    assert not PuzzleValidator.validate_expressions(puzzle.grid)


def test_step_count_mismatch_detected(generated_puzzle):
    solution = Solution(path=generated_puzzle.solution.path, steps=0)
    result = PuzzleValidator.validate_puzzle(replace(generated_puzzle, solution=solution))
    assert any("steps" in e for e in result.errors)


def test_answer_graph(generated_puzzle):
    graph = PuzzleValidator.build_answer_graph(generated_puzzle)
    path = generated_puzzle.solution.path

    assert graph.number_of_nodes() == generated_puzzle.rows * generated_puzzle.cols
    assert graph.out_degree(generated_puzzle.finish) == 0
    assert all(graph.out_degree(c.coordinate) == 1 for c in generated_puzzle.cells() if not c.is_finish)
    assert nx.shortest_path(graph, path[0], path[-1]) == list(path)


def test_statistics(generated_puzzle):
    stats = PuzzleValidator.get_puzzle_statistics(generated_puzzle)
    rows, cols = generated_puzzle.rows, generated_puzzle.cols

    assert stats['num_connectors'] == rows * (cols - 1) + (rows - 1) * cols + (rows - 1) * (cols - 1)
    assert stats['connector_kinds']['diagonal'] == (rows - 1) * (cols - 1)
    assert stats['steps'] == stats['path_length'] - 1
    assert stats['num_decoys'] == rows * cols - stats['path_length']
    assert sum(stats['operations'].values()) == rows * cols - 1
    assert 0 <= stats['decoys_reaching_finish'] <= stats['num_decoys']
    assert 5 <= stats['min_connector_value'] <= stats['max_connector_value'] <= 25


def test_connector_outside_grid_reported(generated_puzzle):
    edge = generated_puzzle.cols - 1
    stray = Connector(ConnectorKind.HORIZONTAL, Coordinate(0, edge), Coordinate(0, edge + 1), value=5)
    puzzle = replace(generated_puzzle, connectors=generated_puzzle.connectors + (stray,))

    result = PuzzleValidator.validate_puzzle(puzzle)

    assert not result
    assert any("outside the grid" in e for e in result.errors)
    assert not PuzzleValidator.validate_connector_uniqueness(puzzle.connectors, puzzle.rows, puzzle.cols)
    assert not PuzzleValidator.validate_cell_answers(puzzle.grid, puzzle.connectors)


def test_path_outside_grid_reported(generated_puzzle):
    path = generated_puzzle.solution.path + (Coordinate(generated_puzzle.rows, generated_puzzle.cols),)
    puzzle = replace(generated_puzzle, solution=Solution(path=path, steps=len(path) - 1))

    result = PuzzleValidator.validate_puzzle(puzzle)

    assert not result
    assert any("leaves the grid" in e for e in result.errors)
    assert any("out of bounds" in e for e in result.errors)
