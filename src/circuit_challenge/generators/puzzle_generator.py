"""
Puzzle generator for Circuit Challenge.

Each attempt runs the full pipeline: solution path, diagonal layout,
connector graph, connector values, cell answers, expressions, then an
independent validation pass. Any failure discards the attempt and the next
one starts from scratch.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional
import uuid

import numpy as np

from .. import config
from ..core.difficulty import DifficultyConfig, resolve_path_bounds
from ..core.puzzle import Puzzle, Solution, ConnectorIncidence
from ..core.validator import PuzzleValidator
from ..core.utils import setup_logger, timer
from .path_generator import generate_path
from .connector_builder import build_diagonal_grid, build_connector_graph
from .value_assigner import assign_connector_values
from .answer_assigner import assign_cell_answers
from .expressions import apply_expressions


class FailureReason(Enum):
    """Why a single generation attempt was discarded"""
    PATH_GENERATION = "path_generation"
    VALUE_ASSIGNMENT = "value_assignment"
    VALIDATION = "validation"
    UNEXPECTED = "unexpected"


@dataclass
class AttemptOutcome:
    """Result of one pass through the pipeline"""
    puzzle: Optional[Puzzle] = None
    reason: Optional[FailureReason] = None
    message: str = ""

    @property
    def success(self) -> bool:
        return self.puzzle is not None


@dataclass
class GenerationOptions:
    """Configuration for the puzzle generator"""
    max_attempts: int = config.DEFAULT_MAX_ATTEMPTS
    validate_result: bool = True
    verbose: bool = False
    log_file: Optional[Path] = None
    random_seed: Optional[int] = None


@dataclass
class GenerationResult:
    """Outcome of puzzle generation"""
    success: bool
    puzzle: Optional[Puzzle] = None
    error: Optional[str] = None
    attempts: int = 0

    def __repr__(self):
        status = "Success" if self.success else "Failed"
        return f"GenerationResult({status}, attempts={self.attempts})"


class PuzzleGenerator:
    """Generate Circuit Challenge puzzles for a difficulty"""

    def __init__(self, options: Optional[GenerationOptions] = None):
        self.options = options or GenerationOptions()
        self.logger = setup_logger(
            self.__class__.__name__,
            log_file=self.options.log_file,
            level="DEBUG" if self.options.verbose else config.LOG_LEVEL,
        )
        self.rng = np.random.default_rng(self.options.random_seed)

    @timer
    def generate(self, difficulty: DifficultyConfig,
                 rng: Optional[np.random.Generator] = None) -> GenerationResult:
        """
        Generate one puzzle.

        Args:
            difficulty: Difficulty settings to generate for
            rng: Random source; the generator's own seeded source if omitted

        Returns:
            GenerationResult with the puzzle, or the reason generation gave up
        """
        rng = rng if rng is not None else self.rng
        min_path, max_path = resolve_path_bounds(difficulty)

        self.logger.info(
            f"Generating {difficulty.grid_rows}x{difficulty.grid_cols} '{difficulty.name}' puzzle "
            f"(path length {min_path}-{max_path})"
        )

        for attempt in range(1, self.options.max_attempts + 1):
            try:
                outcome = self._run_attempt(difficulty, min_path, max_path, rng)
            except Exception as e:
                self.logger.warning(f"Attempt {attempt} raised: {e}", exc_info=True)
                outcome = AttemptOutcome(reason=FailureReason.UNEXPECTED, message=str(e))

            if outcome.success:
                self.logger.info(f"Successfully generated puzzle on attempt {attempt}")
                return GenerationResult(success=True, puzzle=outcome.puzzle, attempts=attempt)

            self.logger.warning(f"Attempt {attempt} failed ({outcome.reason.value}): {outcome.message}")

        error = (f"Failed to generate puzzle after {self.options.max_attempts} attempts. "
                 f"Try adjusting difficulty settings (the configuration may be too constrained).")
        self.logger.error(error)
        return GenerationResult(success=False, error=error, attempts=self.options.max_attempts)

    def _run_attempt(self, difficulty: DifficultyConfig, min_path: int, max_path: int,
                     rng: np.random.Generator) -> AttemptOutcome:
        rows, cols = difficulty.grid_rows, difficulty.grid_cols

        path_result = generate_path(rows, cols, min_path, max_path, rng=rng)
        if not path_result.success:
            return AttemptOutcome(reason=FailureReason.PATH_GENERATION, message=path_result.error)

        diagonal_grid = build_diagonal_grid(rows, cols, path_result.diagonal_commitments, rng)
        connectors = build_connector_graph(rows, cols, diagonal_grid)
        incidence = ConnectorIncidence(rows, cols, connectors)

        values = assign_connector_values(
            connectors, difficulty.connector_min, difficulty.connector_max, rng, incidence
        )
        if not values.success:
            return AttemptOutcome(reason=FailureReason.VALUE_ASSIGNMENT, message=values.error)

        grid = assign_cell_answers(rows, cols, path_result.path, values.connectors, rng, incidence)
        grid = apply_expressions(grid, difficulty, rng)

        path = tuple(path_result.path)
        puzzle = Puzzle(
            id=str(uuid.UUID(bytes=rng.bytes(16), version=4)),
            difficulty=difficulty,
            grid=grid,
            connectors=tuple(values.connectors),
            solution=Solution(path=path, steps=len(path) - 1),
        )

        if self.options.validate_result:
            validation = PuzzleValidator.validate_puzzle(puzzle)
            if not validation:
                return AttemptOutcome(
                    reason=FailureReason.VALIDATION, message="; ".join(validation.errors)
                )

        return AttemptOutcome(puzzle=puzzle)

    def generate_batch(self, difficulty: DifficultyConfig, count: int,
                       rng: Optional[np.random.Generator] = None) -> List[GenerationResult]:
        """Generate several puzzles with the same settings"""
        results = []

        for i in range(count):
            self.logger.info(f"Generating puzzle {i + 1}/{count}")
            results.append(self.generate(difficulty, rng))

        succeeded = sum(1 for r in results if r.success)
        self.logger.info(f"Generated {succeeded}/{count} valid puzzles")
        return results


def generate_puzzle(difficulty: DifficultyConfig, max_attempts: int = config.DEFAULT_MAX_ATTEMPTS,
                    validate_result: bool = True,
                    rng: Optional[np.random.Generator] = None) -> GenerationResult:
    """Generate a single validated puzzle for the given difficulty"""
    generator = PuzzleGenerator(GenerationOptions(
        max_attempts=max_attempts,
        validate_result=validate_result,
    ))
    return generator.generate(difficulty, rng)
