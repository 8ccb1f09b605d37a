import logging

import numpy as np
import pytest

from circuit_challenge.core.puzzle import Coordinate, ConnectorIncidence, are_adjacent
from circuit_challenge.core.utils import (
    setup_logger, timer, ensure_rng, random_int, random_choice, PuzzleConverter,
)


def test_setup_logger_with_file(tmp_path):
    log_file = tmp_path / "generator.log"
    logger = setup_logger("circuit_challenge.test", log_file=log_file, level="DEBUG")
    logger.debug("hello")

    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert "hello" in log_file.read_text()


def test_timer_keeps_result():
    @timer
    def add(a, b):
        return a + b

    assert add(2, 3) == 5
    assert add.__name__ == "add"


def test_random_helpers(rng):
    values = {random_int(1, 3, rng) for _ in range(200)}
    assert values == {1, 2, 3}

    items = [(0, 1), (1, 0)]
    assert random_choice(items, rng) in items
    with pytest.raises(ValueError):
        random_choice([], rng)

    assert isinstance(ensure_rng(), np.random.Generator)
    assert ensure_rng(rng) is rng


def test_adjacency():
    assert are_adjacent(Coordinate(1, 1), Coordinate(2, 2))
    assert are_adjacent(Coordinate(1, 1), Coordinate(1, 0))
    assert not are_adjacent(Coordinate(1, 1), Coordinate(1, 1))
    assert not are_adjacent(Coordinate(0, 0), Coordinate(0, 2))


def test_incidence_bounds():
    incidence = ConnectorIncidence(2, 2, [])
    assert incidence.degree(Coordinate(1, 1)) == 0
    with pytest.raises(ValueError):
        incidence.indices_at(Coordinate(2, 0))


def test_to_grid(generated_puzzle):
    grid = PuzzleConverter.to_grid(generated_puzzle)

    assert grid.shape == (generated_puzzle.rows, generated_puzzle.cols)
    assert grid[-1, -1] == -1
    assert grid[0, 0] == generated_puzzle.grid[0][0].answer


def test_to_string(generated_puzzle):
    lines = PuzzleConverter.to_string(generated_puzzle).splitlines()
    assert len(lines) == 2 * generated_puzzle.rows - 1
    assert lines[-1].split()[-1] == 'F'

    glyphs = PuzzleConverter.to_string(generated_puzzle, show_values=False)
    assert '-' in glyphs and '|' in glyphs
    assert '\\' in glyphs or '/' in glyphs


def test_puzzle_text(generated_puzzle):
    text = str(generated_puzzle)
    assert "FINISH" in text
    assert generated_puzzle.grid[0][0].expression in text
