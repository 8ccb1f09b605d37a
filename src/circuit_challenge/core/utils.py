"""
Utility functions for the Circuit Challenge generator.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, TypeVar
import time
from functools import wraps

import numpy as np

from .. import config
from .puzzle import Puzzle, ConnectorKind, Orientation

T = TypeVar('T')

logger = logging.getLogger(__name__)


def setup_logger(name: str, log_file: Optional[Path] = None, level: str = config.LOG_LEVEL) -> logging.Logger:
    """
    Set up a logger with console and optional file output.

    Args:
        name: Logger name
        log_file: Optional log file path
        level: Logging level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level.upper()))

    formatter = logging.Formatter(config.LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(getattr(logging, level.upper()))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def timer(func):
    """Decorator to time function execution"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        execution_time = time.time() - start_time

        # Prefer the instance logger when decorating a method
        if args and hasattr(args[0], 'logger'):
            args[0].logger.debug(f"{func.__name__} took {execution_time:.3f} seconds")
        else:
            logger.debug(f"{func.__name__} took {execution_time:.3f} seconds")

        return result
    return wrapper


def ensure_rng(rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Return the given random source, or a freshly seeded one"""
    return rng if rng is not None else np.random.default_rng()


def random_int(low: int, high: int, rng: np.random.Generator) -> int:
    """Random integer in [low, high] inclusive"""
    return int(rng.integers(low, high + 1))


def random_choice(items: Sequence[T], rng: np.random.Generator) -> T:
    """Pick one element uniformly (works for sequences of tuples/objects)"""
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    return items[int(rng.integers(len(items)))]


class PuzzleConverter:
    """Convert puzzles to other representations"""

    @staticmethod
    def to_grid(puzzle: Puzzle) -> np.ndarray:
        """
        Convert cell answers to a 2D array.
        The finish cell (no answer) is stored as -1.
        """
        grid = np.full((puzzle.rows, puzzle.cols), -1, dtype=int)
        for cell in puzzle.cells():
            if cell.answer is not None:
                grid[cell.row, cell.col] = cell.answer
        return grid

    @staticmethod
    def to_string(puzzle: Puzzle, show_values: bool = True) -> str:
        """
        Lay out cell answers and connectors as text.

        Cells sit on even rows/columns; each connector is drawn halfway
        between its two cells. The finish cell is shown as 'F'.

        Args:
            puzzle: The puzzle to convert
            show_values: Show connector values instead of line glyphs

        Returns:
            String representation of the puzzle
        """
        grid = [['' for _ in range(puzzle.cols * 2 - 1)]
                for _ in range(puzzle.rows * 2 - 1)]

        for cell in puzzle.cells():
            grid[cell.row * 2][cell.col * 2] = 'F' if cell.is_finish else str(cell.answer)

        for connector in puzzle.connectors:
            row = connector.cell_a.row + connector.cell_b.row
            col = connector.cell_a.col + connector.cell_b.col

            if show_values:
                grid[row][col] = str(connector.value)
            elif connector.kind == ConnectorKind.HORIZONTAL:
                grid[row][col] = '-'
            elif connector.kind == ConnectorKind.VERTICAL:
                grid[row][col] = '|'
            else:
                grid[row][col] = '\\' if connector.orientation == Orientation.DR else '/'

        width = max(len(label) for line in grid for label in line)
        return '\n'.join(
            ' '.join(label.center(width) for label in line).rstrip()
            for line in grid
        )
