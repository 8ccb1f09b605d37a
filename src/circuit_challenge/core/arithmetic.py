"""
Arithmetic expression types and the parser used to check them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
import operator
import re


class Operation(Enum):
    """Arithmetic operations, valued by the glyph shown to the player"""
    ADDITION = "+"
    SUBTRACTION = "−"
    MULTIPLICATION = "×"
    DIVISION = "÷"

    @property
    def weight_name(self) -> str:
        """Name of the matching OperationWeights field"""
        return self.name.lower()


@dataclass(frozen=True)
class Expression:
    """A binary expression that evaluates to ``result``"""
    text: str
    operation: Operation
    operand_a: int
    operand_b: int
    result: int

    @classmethod
    def build(cls, operation: Operation, operand_a: int, operand_b: int, result: int) -> 'Expression':
        return cls(
            text=f"{operand_a} {operation.value} {operand_b}",
            operation=operation,
            operand_a=operand_a,
            operand_b=operand_b,
            result=result,
        )


# ASCII forms are accepted as well as the display glyphs
_OPERATORS = {
    '+': operator.add,
    '−': operator.sub,
    '-': operator.sub,
    '×': operator.mul,
    '*': operator.mul,
    '÷': operator.truediv,
    '/': operator.truediv,
}

_EXPRESSION_PATTERN = re.compile(r'^\s*(\d+)\s*([+\-−×*÷/])\s*(\d+)\s*$')


def evaluate_expression(expression: str) -> Optional[Union[int, float]]:
    """
    Evaluate a "number operator number" expression.

    Returns None for anything that is not exactly two non-negative integer
    operands around one operator, and for division by zero.
    """
    match = _EXPRESSION_PATTERN.match(expression)
    if not match:
        return None

    a = int(match.group(1))
    op = match.group(2)
    b = int(match.group(3))

    if _OPERATORS[op] is operator.truediv:
        if b == 0:
            return None
        # Exact quotients stay int
        if a % b == 0:
            return a // b

    return _OPERATORS[op](a, b)
