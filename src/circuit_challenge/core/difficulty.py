"""
Difficulty settings for Circuit Challenge puzzles.
"""

from dataclasses import dataclass, field, replace, asdict
from typing import List, Optional, Tuple, Dict, Any, Union
from pathlib import Path
import math

import yaml

from .. import config


@dataclass(frozen=True)
class OperationWeights:
    """Relative selection weights for each arithmetic operation"""
    addition: float = 0
    subtraction: float = 0
    multiplication: float = 0
    division: float = 0


@dataclass(frozen=True)
class DifficultyConfig:
    """Read-only description of how a puzzle should be generated"""
    name: str
    addition_enabled: bool
    subtraction_enabled: bool
    multiplication_enabled: bool
    division_enabled: bool

    # Operand caps for addition/subtraction and multiplication/division
    add_sub_range: int
    mult_div_range: int

    connector_min: int
    connector_max: int

    grid_rows: int
    grid_cols: int

    # 0 means "derive from the path fractions"
    min_path_length: int = 0
    max_path_length: int = 0
    min_path_fraction: float = config.MIN_PATH_FRACTION
    max_path_fraction: float = config.MAX_PATH_FRACTION

    weights: OperationWeights = field(default_factory=OperationWeights)

    hidden_mode: bool = False
    seconds_per_step: int = 10

    @property
    def total_cells(self) -> int:
        return self.grid_rows * self.grid_cols

    def to_dict(self) -> dict:
        return asdict(self)


LEVEL_1_TINY_TOT = DifficultyConfig(
    name='Tiny Tot',
    addition_enabled=True, subtraction_enabled=False,
    multiplication_enabled=False, division_enabled=False,
    add_sub_range=10, mult_div_range=0,
    connector_min=5, connector_max=10,
    grid_rows=3, grid_cols=4,
    weights=OperationWeights(addition=100),
    seconds_per_step=10,
)

LEVEL_2_BEGINNER = DifficultyConfig(
    name='Beginner',
    addition_enabled=True, subtraction_enabled=False,
    multiplication_enabled=False, division_enabled=False,
    add_sub_range=15, mult_div_range=0,
    connector_min=5, connector_max=15,
    grid_rows=4, grid_cols=4,
    weights=OperationWeights(addition=100),
    seconds_per_step=9,
)

LEVEL_3_EASY = DifficultyConfig(
    name='Easy',
    addition_enabled=True, subtraction_enabled=True,
    multiplication_enabled=False, division_enabled=False,
    add_sub_range=15, mult_div_range=0,
    connector_min=5, connector_max=15,
    grid_rows=4, grid_cols=5,
    weights=OperationWeights(addition=60, subtraction=40),
    seconds_per_step=8,
)

LEVEL_4_GETTING_THERE = DifficultyConfig(
    name='Getting There',
    addition_enabled=True, subtraction_enabled=True,
    multiplication_enabled=False, division_enabled=False,
    add_sub_range=20, mult_div_range=0,
    connector_min=5, connector_max=20,
    grid_rows=4, grid_cols=5,
    weights=OperationWeights(addition=55, subtraction=45),
    seconds_per_step=7,
)

LEVEL_5_TIMES_TABLES = DifficultyConfig(
    name='Times Tables',
    addition_enabled=True, subtraction_enabled=True,
    multiplication_enabled=True, division_enabled=False,
    add_sub_range=20, mult_div_range=5,
    connector_min=5, connector_max=25,
    grid_rows=4, grid_cols=5,
    weights=OperationWeights(addition=40, subtraction=35, multiplication=25),
    seconds_per_step=7,
)

LEVEL_6_CONFIDENT = DifficultyConfig(
    name='Confident',
    addition_enabled=True, subtraction_enabled=True,
    multiplication_enabled=True, division_enabled=False,
    add_sub_range=25, mult_div_range=6,
    connector_min=5, connector_max=36,
    grid_rows=5, grid_cols=5,
    weights=OperationWeights(addition=35, subtraction=30, multiplication=35),
    seconds_per_step=6,
)

LEVEL_7_ADVENTUROUS = DifficultyConfig(
    name='Adventurous',
    addition_enabled=True, subtraction_enabled=True,
    multiplication_enabled=True, division_enabled=False,
    add_sub_range=30, mult_div_range=8,
    connector_min=5, connector_max=64,
    grid_rows=5, grid_cols=6,
    weights=OperationWeights(addition=30, subtraction=30, multiplication=40),
    seconds_per_step=6,
)

LEVEL_8_DIVISION_INTRO = DifficultyConfig(
    name='Division Intro',
    addition_enabled=True, subtraction_enabled=True,
    multiplication_enabled=True, division_enabled=True,
    add_sub_range=30, mult_div_range=6,
    connector_min=5, connector_max=36,
    grid_rows=5, grid_cols=6,
    weights=OperationWeights(addition=30, subtraction=25, multiplication=30, division=15),
    seconds_per_step=6,
)

LEVEL_9_CHALLENGE = DifficultyConfig(
    name='Challenge',
    addition_enabled=True, subtraction_enabled=True,
    multiplication_enabled=True, division_enabled=True,
    add_sub_range=50, mult_div_range=10,
    connector_min=5, connector_max=100,
    grid_rows=6, grid_cols=7,
    weights=OperationWeights(addition=25, subtraction=25, multiplication=30, division=20),
    seconds_per_step=5,
)

LEVEL_10_EXPERT = DifficultyConfig(
    name='Expert',
    addition_enabled=True, subtraction_enabled=True,
    multiplication_enabled=True, division_enabled=True,
    add_sub_range=100, mult_div_range=12,
    connector_min=5, connector_max=144,
    grid_rows=6, grid_cols=8,
    weights=OperationWeights(addition=25, subtraction=25, multiplication=30, division=20),
    seconds_per_step=5,
)

DIFFICULTY_PRESETS: Tuple[DifficultyConfig, ...] = (
    LEVEL_1_TINY_TOT,
    LEVEL_2_BEGINNER,
    LEVEL_3_EASY,
    LEVEL_4_GETTING_THERE,
    LEVEL_5_TIMES_TABLES,
    LEVEL_6_CONFIDENT,
    LEVEL_7_ADVENTUROUS,
    LEVEL_8_DIVISION_INTRO,
    LEVEL_9_CHALLENGE,
    LEVEL_10_EXPERT,
)

_OPERATION_FLAGS = {
    'addition': 'addition_enabled',
    'subtraction': 'subtraction_enabled',
    'multiplication': 'multiplication_enabled',
    'division': 'division_enabled',
}


def calculate_min_path_length(rows: int, cols: int,
                              fraction: float = config.MIN_PATH_FRACTION) -> int:
    """Minimum solution path length, roughly 60% of the cells"""
    return max(config.MIN_PATH_FLOOR, math.floor(rows * cols * fraction))


def calculate_max_path_length(rows: int, cols: int,
                              fraction: float = config.MAX_PATH_FRACTION) -> int:
    """Maximum solution path length, roughly 85% of the cells"""
    return math.floor(rows * cols * fraction)


def resolve_path_bounds(difficulty: DifficultyConfig) -> Tuple[int, int]:
    """Return (min_path, max_path), deriving any bound that is left at 0"""
    min_path = difficulty.min_path_length or calculate_min_path_length(
        difficulty.grid_rows, difficulty.grid_cols, difficulty.min_path_fraction)
    max_path = difficulty.max_path_length or calculate_max_path_length(
        difficulty.grid_rows, difficulty.grid_cols, difficulty.max_path_fraction)
    return min_path, max_path


def _with_path_lengths(settings: DifficultyConfig) -> DifficultyConfig:
    min_path = calculate_min_path_length(
        settings.grid_rows, settings.grid_cols, settings.min_path_fraction)
    max_path = calculate_max_path_length(
        settings.grid_rows, settings.grid_cols, settings.max_path_fraction)
    return replace(settings, min_path_length=min_path, max_path_length=max_path)


def get_difficulty_by_level(level: int) -> DifficultyConfig:
    """Get a preset by level number (clamped to 1-10) with path lengths filled in"""
    index = max(0, min(len(DIFFICULTY_PRESETS) - 1, level - 1))
    return _with_path_lengths(DIFFICULTY_PRESETS[index])


def get_difficulty_by_name(name: str) -> Optional[DifficultyConfig]:
    """Get a preset by its display name"""
    for preset in DIFFICULTY_PRESETS:
        if preset.name == name:
            return _with_path_lengths(preset)
    return None


def get_difficulty_level(settings: DifficultyConfig) -> int:
    """Preset level number (1-10) for the settings, or 0 for custom settings"""
    for level, preset in enumerate(DIFFICULTY_PRESETS, start=1):
        if preset.name == settings.name:
            return level
    return 0


def create_custom_difficulty(**overrides) -> DifficultyConfig:
    """
    Create a custom difficulty by merging overrides onto the level 5 preset.

    If no weights are given, weight is split evenly among the enabled
    operations. Path lengths are recalculated when the grid size changes.

    Args:
        **overrides: DifficultyConfig field values. ``weights`` may be an
            OperationWeights or a dict of partial weights.

    Returns:
        The merged settings
    """
    base = get_difficulty_by_level(5)
    weights = overrides.pop('weights', None)
    unknown = set(overrides) - set(base.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown difficulty settings: {sorted(unknown)}")

    overrides.setdefault('name', 'Custom')
    settings = replace(base, **overrides)

    if weights is None:
        enabled = [op for op, flag in _OPERATION_FLAGS.items() if getattr(settings, flag)]
        weight_per_op = 100 // len(enabled) if enabled else 0
        settings = replace(settings, weights=OperationWeights(
            **{op: (weight_per_op if op in enabled else 0) for op in _OPERATION_FLAGS}
        ))
    elif isinstance(weights, dict):
        settings = replace(settings, weights=replace(base.weights, **weights))
    else:
        settings = replace(settings, weights=weights)

    if 'grid_rows' in overrides or 'grid_cols' in overrides:
        settings = _with_path_lengths(settings)

    return settings


def load_difficulty_file(filepath: Union[str, Path]) -> DifficultyConfig:
    """
    Load difficulty settings from a YAML file.

    The file may name a preset (``level: 3``) and/or list overrides using the
    DifficultyConfig field names; overrides without a level are applied to
    the custom base.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Difficulty file not found: {filepath}")

    with open(filepath, 'r') as f:
        data: Dict[str, Any] = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Invalid difficulty file {filepath}: expected a mapping")

    level = data.pop('level', None)
    if level is None:
        return create_custom_difficulty(**data)

    settings = get_difficulty_by_level(int(level))
    if 'weights' in data:
        data['weights'] = replace(settings.weights, **data['weights'])
    settings = replace(settings, **data)
    if 'grid_rows' in data or 'grid_cols' in data:
        settings = _with_path_lengths(settings)
    return settings


@dataclass
class DifficultyValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def validate_difficulty_settings(settings: DifficultyConfig) -> DifficultyValidationResult:
    """Check difficulty settings for values the generator cannot work with"""
    errors: List[str] = []

    if not any(getattr(settings, flag) for flag in _OPERATION_FLAGS.values()):
        errors.append('At least one operation must be enabled')

    if settings.add_sub_range < 1:
        errors.append('Addition/subtraction range must be at least 1')

    if (settings.multiplication_enabled or settings.division_enabled) and settings.mult_div_range < 2:
        errors.append('Multiplication/division range must be at least 2')

    if settings.connector_min < 1:
        errors.append('Minimum connector value must be at least 1')

    if settings.connector_max <= settings.connector_min:
        errors.append('Maximum connector value must be greater than minimum')

    if settings.grid_rows < 3:
        errors.append('Grid must have at least 3 rows')

    if settings.grid_cols < 4:
        errors.append('Grid must have at least 4 columns')

    min_path, max_path = resolve_path_bounds(settings)
    if min_path < 4:
        errors.append('Minimum path length must be at least 4')

    if max_path < min_path:
        errors.append('Maximum path length must be at least equal to minimum')

    if max_path > settings.total_cells:
        errors.append('Maximum path length cannot exceed the number of cells')

    for op, flag in _OPERATION_FLAGS.items():
        weight = getattr(settings.weights, op)
        if weight < 0:
            errors.append(f'{op.capitalize()} weight must not be negative')
        elif getattr(settings, flag) and weight <= 0:
            errors.append(f'{op.capitalize()} weight must be positive when enabled')

    if settings.seconds_per_step < 1:
        errors.append('Seconds per step must be at least 1')

    return DifficultyValidationResult(valid=not errors, errors=errors)
