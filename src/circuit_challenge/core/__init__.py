"""
Core data structures and utilities for Circuit Challenge puzzles.
"""

from .difficulty import (
    DifficultyConfig, OperationWeights, DIFFICULTY_PRESETS,
    get_difficulty_by_level, get_difficulty_by_name, get_difficulty_level,
    create_custom_difficulty, load_difficulty_file,
    calculate_min_path_length, calculate_max_path_length, resolve_path_bounds,
    validate_difficulty_settings, DifficultyValidationResult,
)
from .puzzle import (
    Coordinate, Connector, ConnectorKind, Orientation, ConnectorIncidence,
    Cell, CellGrid, Solution, Puzzle, are_adjacent,
)
from .arithmetic import Operation, Expression, evaluate_expression
from .validator import PuzzleValidator, ValidationResult
from .utils import (
    setup_logger, timer, ensure_rng, random_int, random_choice,
    PuzzleConverter,
)

__all__ = [
    # Difficulty
    'DifficultyConfig', 'OperationWeights', 'DIFFICULTY_PRESETS',
    'get_difficulty_by_level', 'get_difficulty_by_name', 'get_difficulty_level',
    'create_custom_difficulty', 'load_difficulty_file',
    'calculate_min_path_length', 'calculate_max_path_length', 'resolve_path_bounds',
    'validate_difficulty_settings', 'DifficultyValidationResult',

    # Data structures
    'Coordinate', 'Connector', 'ConnectorKind', 'Orientation', 'ConnectorIncidence',
    'Cell', 'CellGrid', 'Solution', 'Puzzle', 'are_adjacent',

    # Arithmetic
    'Operation', 'Expression', 'evaluate_expression',

    # Validation
    'PuzzleValidator', 'ValidationResult',

    # Utilities
    'setup_logger', 'timer', 'ensure_rng', 'random_int', 'random_choice',
    'PuzzleConverter',
]
