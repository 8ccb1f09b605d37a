import logging
import uuid

import numpy as np
import pytest

from circuit_challenge.core.difficulty import (
    create_custom_difficulty, get_difficulty_by_level, resolve_path_bounds,
)
from circuit_challenge.core.validator import PuzzleValidator, ValidationResult
from circuit_challenge.generators import puzzle_generator
from circuit_challenge.generators.puzzle_generator import (
    PuzzleGenerator, GenerationOptions, FailureReason, generate_puzzle,
)


def test_smallest_grid_addition_only(addition_only, rng):
    result = generate_puzzle(addition_only, max_attempts=20, rng=rng)

    assert result.success, result.error
    assert 1 <= result.attempts <= 20
    assert PuzzleValidator.validate_puzzle(result.puzzle)

    puzzle = result.puzzle
    assert (puzzle.rows, puzzle.cols) == (3, 4)
    assert all("+" in cell.expression for cell in puzzle.cells() if not cell.is_finish)


def test_times_tables_puzzle(generated_puzzle, times_tables):
    min_path, max_path = resolve_path_bounds(times_tables)

    assert generated_puzzle.difficulty == times_tables
    assert min_path <= len(generated_puzzle.solution.path) <= max_path
    assert generated_puzzle.solution.steps == len(generated_puzzle.solution.path) - 1
    assert generated_puzzle.solution.path[0] == generated_puzzle.start
    assert generated_puzzle.solution.path[-1] == generated_puzzle.finish
    assert uuid.UUID(generated_puzzle.id).version == 4


def test_seeded_generation_is_reproducible(addition_only):
    first = generate_puzzle(addition_only, rng=np.random.default_rng(7))
    second = generate_puzzle(addition_only, rng=np.random.default_rng(7))

    assert first.success and second.success
    assert first.puzzle == second.puzzle


def test_generator_seed_option(addition_only):
    first = PuzzleGenerator(GenerationOptions(random_seed=11)).generate(addition_only)
    second = PuzzleGenerator(GenerationOptions(random_seed=11)).generate(addition_only)

    assert first.puzzle.id == second.puzzle.id


def test_unreachable_path_bounds_exhaust_attempts():
    difficulty = create_custom_difficulty(grid_rows=2, grid_cols=2)
    result = generate_puzzle(difficulty, max_attempts=2, rng=np.random.default_rng(0))

    assert not result.success
    assert result.puzzle is None
    assert result.attempts == 2
    assert "after 2 attempts" in result.error
    assert "too constrained" in result.error


def test_tiny_value_range_fails(rng):
    difficulty = create_custom_difficulty(grid_rows=3, grid_cols=4, connector_min=1, connector_max=2)
    generator = PuzzleGenerator(GenerationOptions(max_attempts=1))
    min_path, max_path = resolve_path_bounds(difficulty)

    outcome = generator._run_attempt(difficulty, min_path, max_path, rng)
    assert not outcome.success
    assert outcome.reason in (FailureReason.PATH_GENERATION, FailureReason.VALUE_ASSIGNMENT)


def test_exceptions_count_as_failed_attempts(addition_only, monkeypatch):
    calls = []

    def exploding_path(*args, **kwargs):
        calls.append(1)
        raise RuntimeError("boom")

    monkeypatch.setattr(puzzle_generator, "generate_path", exploding_path)
    result = generate_puzzle(addition_only, max_attempts=3, rng=np.random.default_rng(0))

    assert not result.success
    assert len(calls) == 3


def test_batch(addition_only, rng):
    generator = PuzzleGenerator(GenerationOptions(random_seed=3))
    results = generator.generate_batch(addition_only, 2, rng)

    assert len(results) == 2
    assert all(r.success for r in results)
    assert results[0].puzzle.id != results[1].puzzle.id


# Level 1 leaves six connector values for cells touching up to eight
# connectors, so most of its attempts die in value assignment
PRESET_ATTEMPTS = {1: 100}


@pytest.mark.parametrize("level", range(1, 11))
def test_every_preset_generates(level):
    difficulty = get_difficulty_by_level(level)
    max_attempts = PRESET_ATTEMPTS.get(level, 20)

    result = generate_puzzle(difficulty, max_attempts=max_attempts,
                             rng=np.random.default_rng(1000 + level))

    assert result.success, result.error
    assert PuzzleValidator.validate_puzzle(result.puzzle)
    assert (result.puzzle.rows, result.puzzle.cols) == (difficulty.grid_rows, difficulty.grid_cols)


def _failing_validation(puzzle):
    result = ValidationResult()
    result.add_error("answer mismatch")
    return result


def test_invalid_puzzles_are_discarded(addition_only, monkeypatch, caplog):
    calls = []

    def validate(puzzle):
        calls.append(puzzle)
        return _failing_validation(puzzle)

    monkeypatch.setattr(PuzzleValidator, "validate_puzzle", staticmethod(validate))
    generator = PuzzleGenerator(GenerationOptions(max_attempts=3))
    min_path, max_path = resolve_path_bounds(addition_only)

    rng = np.random.default_rng(4)
    outcomes = [generator._run_attempt(addition_only, min_path, max_path, rng) for _ in range(10)]
    assert not any(o.success for o in outcomes)
    rejected = [o for o in outcomes if o.reason == FailureReason.VALIDATION]
    assert rejected
    assert all(o.message == "answer mismatch" for o in rejected)

    with caplog.at_level(logging.WARNING):
        result = generator.generate(addition_only, np.random.default_rng(5))

    assert not result.success
    assert result.puzzle is None
    assert result.attempts == 3
    assert len(calls) >= len(rejected)
    assert "validation" in caplog.text


def test_validation_can_be_skipped(addition_only, monkeypatch):
    calls = []

    def validate(puzzle):
        calls.append(puzzle)
        return _failing_validation(puzzle)

    monkeypatch.setattr(PuzzleValidator, "validate_puzzle", staticmethod(validate))
    result = generate_puzzle(addition_only, validate_result=False, rng=np.random.default_rng(6))

    assert result.success
    assert calls == []
