"""
Circuit Challenge: procedurally generated arithmetic path puzzles.
"""

from .core import (
    DifficultyConfig, OperationWeights, DIFFICULTY_PRESETS,
    get_difficulty_by_level, get_difficulty_by_name, create_custom_difficulty,
    validate_difficulty_settings,
    Coordinate, Connector, Cell, Solution, Puzzle,
    PuzzleValidator, ValidationResult,
)
from .generators import PuzzleGenerator, GenerationOptions, GenerationResult, generate_puzzle

__version__ = "0.1.0"

__all__ = [
    'DifficultyConfig', 'OperationWeights', 'DIFFICULTY_PRESETS',
    'get_difficulty_by_level', 'get_difficulty_by_name', 'create_custom_difficulty',
    'validate_difficulty_settings',
    'Coordinate', 'Connector', 'Cell', 'Solution', 'Puzzle',
    'PuzzleValidator', 'ValidationResult',
    'PuzzleGenerator', 'GenerationOptions', 'GenerationResult', 'generate_puzzle',
]
