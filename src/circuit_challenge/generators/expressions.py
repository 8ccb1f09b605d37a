"""
Arithmetic expression synthesis.

Expressions are built backwards from the answer: pick one operand (or a
factor/divisor) within the difficulty's limits and derive the other.
"""

from dataclasses import replace
from typing import List, Optional, Tuple

import numpy as np

from .. import config
from ..core.arithmetic import Operation, Expression
from ..core.difficulty import DifficultyConfig
from ..core.puzzle import CellGrid
from ..core.utils import ensure_rng, random_int, random_choice

_ENABLED_FLAGS = {
    Operation.ADDITION: 'addition_enabled',
    Operation.SUBTRACTION: 'subtraction_enabled',
    Operation.MULTIPLICATION: 'multiplication_enabled',
    Operation.DIVISION: 'division_enabled',
}


def select_operation(difficulty: DifficultyConfig,
                     rng: Optional[np.random.Generator] = None) -> Operation:
    """Weighted random choice among enabled operations with positive weight"""
    rng = ensure_rng(rng)
    candidates: List[Tuple[Operation, float]] = []

    for operation, flag in _ENABLED_FLAGS.items():
        weight = getattr(difficulty.weights, operation.weight_name)
        if getattr(difficulty, flag) and weight > 0:
            candidates.append((operation, weight))

    if not candidates:
        return Operation.ADDITION

    total = sum(weight for _, weight in candidates)
    draw = rng.random() * total

    for operation, weight in candidates:
        draw -= weight
        if draw <= 0:
            return operation

    return candidates[-1][0]


def generate_addition(target: int, max_operand: int,
                      rng: Optional[np.random.Generator] = None) -> Optional[Expression]:
    """a + b = target with both operands in [1, max_operand]"""
    if target < 2:
        return None

    min_a = max(1, target - max_operand)
    max_a = min(max_operand, target - 1)
    if min_a > max_a:
        return None

    a = random_int(min_a, max_a, ensure_rng(rng))
    return Expression.build(Operation.ADDITION, a, target - a, target)


def generate_subtraction(target: int, max_operand: int,
                         rng: Optional[np.random.Generator] = None) -> Optional[Expression]:
    """a − b = target with a <= max_operand, so no negatives"""
    if target < 1:
        return None

    max_b = max_operand - target
    if max_b < 1:
        return None

    b = random_int(1, max_b, ensure_rng(rng))
    return Expression.build(Operation.SUBTRACTION, target + b, b, target)


def generate_multiplication(target: int, max_factor: int,
                            rng: Optional[np.random.Generator] = None) -> Optional[Expression]:
    """a × b = target with both factors in [2, max_factor]"""
    if target < 4:
        return None
    rng = ensure_rng(rng)

    pairs = []
    a = 2
    while a <= max_factor and a * a <= target:
        if target % a == 0 and 2 <= target // a <= max_factor:
            pairs.append((a, target // a))
        a += 1

    if not pairs:
        return None

    a, b = random_choice(pairs, rng)
    if rng.random() < 0.5:
        a, b = b, a
    return Expression.build(Operation.MULTIPLICATION, a, b, target)


def generate_division(target: int, max_divisor: int, max_dividend: int = config.MAX_DIVIDEND,
                      rng: Optional[np.random.Generator] = None) -> Optional[Expression]:
    """a ÷ b = target with b in [2, min(max_divisor, 12)] and a <= max_dividend"""
    if target < 1:
        return None

    max_b = min(max_divisor, config.MAX_DIVISOR_CAP)
    divisors = [b for b in range(2, max_b + 1) if target * b <= max_dividend]
    if not divisors:
        return None

    b = random_choice(divisors, ensure_rng(rng))
    return Expression.build(Operation.DIVISION, target * b, b, target)


def _fallback_expression(target: int) -> Expression:
    if target == 1:
        return Expression.build(Operation.SUBTRACTION, 2, 1, 1)

    # Addition without the operand cap always works for target >= 2
    a = target // 2
    return Expression.build(Operation.ADDITION, a, target - a, target)


def generate_expression(target: int, difficulty: DifficultyConfig,
                        rng: Optional[np.random.Generator] = None,
                        max_attempts: int = config.EXPRESSION_MAX_ATTEMPTS) -> Expression:
    """
    Generate an expression that evaluates to the target.

    Tries weighted operations up to ``max_attempts`` times, then falls back to
    "2 − 1" for 1 or an uncapped addition for anything larger.
    """
    rng = ensure_rng(rng)

    for _ in range(max_attempts):
        operation = select_operation(difficulty, rng)

        if operation == Operation.ADDITION:
            expression = generate_addition(target, difficulty.add_sub_range, rng)
        elif operation == Operation.SUBTRACTION:
            expression = generate_subtraction(target, difficulty.add_sub_range, rng)
        elif operation == Operation.MULTIPLICATION:
            expression = generate_multiplication(target, difficulty.mult_div_range, rng)
        else:
            expression = generate_division(target, difficulty.mult_div_range, rng=rng)

        if expression is not None:
            return expression

    return _fallback_expression(target)


def apply_expressions(grid: CellGrid, difficulty: DifficultyConfig,
                      rng: Optional[np.random.Generator] = None) -> CellGrid:
    """Return a new grid with an expression on every cell that has an answer"""
    rng = ensure_rng(rng)
    return tuple(
        tuple(
            replace(cell, expression=generate_expression(cell.answer, difficulty, rng).text)
            if cell.answer is not None else replace(cell, expression="")
            for cell in row
        )
        for row in grid
    )
