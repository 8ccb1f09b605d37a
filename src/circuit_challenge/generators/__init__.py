"""
Puzzle generation pipeline for Circuit Challenge.
"""

from .puzzle_generator import (
    PuzzleGenerator, GenerationOptions, GenerationResult,
    AttemptOutcome, FailureReason, generate_puzzle,
)
from .path_generator import (
    PathResult, DiagonalCommitments, generate_path,
    get_adjacent, manhattan_distance, is_diagonal_move, get_diagonal_key,
    get_diagonal_orientation, is_diagonal_move_allowed, commit_diagonal,
    count_direction_changes, is_interesting_path,
)
from .connector_builder import (
    DiagonalGrid, build_diagonal_grid, build_connector_graph,
    get_cell_connectors, get_connector_between,
)
from .value_assigner import ValueAssignmentResult, assign_connector_values
from .answer_assigner import assign_cell_answers, get_exit_cell
from .expressions import (
    select_operation, generate_addition, generate_subtraction,
    generate_multiplication, generate_division, generate_expression,
    apply_expressions,
)
from ..core.arithmetic import Operation, Expression, evaluate_expression

__all__ = [
    # Main generator
    'PuzzleGenerator', 'GenerationOptions', 'GenerationResult',
    'AttemptOutcome', 'FailureReason', 'generate_puzzle',

    # Path
    'PathResult', 'DiagonalCommitments', 'generate_path',
    'get_adjacent', 'manhattan_distance', 'is_diagonal_move', 'get_diagonal_key',
    'get_diagonal_orientation', 'is_diagonal_move_allowed', 'commit_diagonal',
    'count_direction_changes', 'is_interesting_path',

    # Connectors
    'DiagonalGrid', 'build_diagonal_grid', 'build_connector_graph',
    'get_cell_connectors', 'get_connector_between',
    'ValueAssignmentResult', 'assign_connector_values',

    # Answers and expressions
    'assign_cell_answers', 'get_exit_cell',
    'select_operation', 'generate_addition', 'generate_subtraction',
    'generate_multiplication', 'generate_division', 'generate_expression',
    'apply_expressions', 'Operation', 'Expression', 'evaluate_expression',
]
