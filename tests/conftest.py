import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from circuit_challenge.core.difficulty import create_custom_difficulty, get_difficulty_by_level
from circuit_challenge.generators.puzzle_generator import generate_puzzle


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def addition_only():
    """Smallest supported grid with addition only and a roomy value range"""
    return create_custom_difficulty(
        name="Addition 3x4",
        grid_rows=3,
        grid_cols=4,
        addition_enabled=True,
        subtraction_enabled=False,
        multiplication_enabled=False,
        division_enabled=False,
        weights={"addition": 100},
    )


@pytest.fixture
def times_tables():
    return get_difficulty_by_level(5)


@pytest.fixture(scope="session")
def generated_puzzle():
    result = generate_puzzle(get_difficulty_by_level(5), rng=np.random.default_rng(2024))
    assert result.success, result.error
    return result.puzzle
