"""Operator and delimiter tags, and the binary operations they stand for."""
from enum import Enum
import operator
from typing import Callable, Dict

from equation_parser.common.errors import DivisionByZeroError, InvalidOperatorError

# Type alias for operator functions (taking two floats, returning a float)
OperatorFn = Callable[[float, float], float]


class Operator(str, Enum):
    """Binary arithmetic operators understood by the parser."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


class Delimiter(str, Enum):
    """Group delimiters."""

    OPEN = "("
    CLOSE = ")"


OPERATOR_CHARS: frozenset = frozenset(op.value for op in Operator)

# Precedence tiers, reduced in this order
MULTIPLICATIVE = (Operator.MUL, Operator.DIV)
ADDITIVE = (Operator.ADD, Operator.SUB)

OPERATIONS: Dict[Operator, OperatorFn] = {
    Operator.ADD: operator.add,
    Operator.SUB: operator.sub,
    Operator.MUL: operator.mul,
    Operator.DIV: operator.truediv,
}


def apply_operator(symbol: object, left: float, right: float) -> float:
    """
    Compute ``left <symbol> right``.

    :param symbol: Operator tag, an :class:`Operator` or its character
    :param float left: Left operand
    :param float right: Right operand

    :return: Result of the operation
    :rtype: float
    :raises DivisionByZeroError: If ``symbol`` is ``/`` and ``right`` is zero
    :raises InvalidOperatorError: If ``symbol`` is not one of ``+ - * /``
    """
    try:
        op = Operator(symbol)
    except ValueError:
        raise InvalidOperatorError(symbol) from None

    if op is Operator.DIV and right == 0:
        raise DivisionByZeroError(left)
    return OPERATIONS[op](left, right)
