"""Typed errors raised while evaluating arithmetic expressions."""
from typing import Optional


class EvaluationError(ValueError):
    """Base class of every failure raised by the expression parser."""

    kind: str = "evaluation_error"


class DivisionByZeroError(EvaluationError, ZeroDivisionError):
    """Raised when the right operand of ``/`` is exactly zero."""

    kind = "division_by_zero"

    def __init__(self, dividend: float) -> None:
        super().__init__(f"Division by zero: {dividend} / 0")
        self.dividend = dividend


class InvalidOperatorError(EvaluationError):
    """Raised when a reduction meets an operator outside ``+ - * /``."""

    kind = "invalid_operator"

    def __init__(self, operator: object) -> None:
        super().__init__(f"Invalid operator: {operator!r}")
        self.operator = operator


class MalformedExpressionError(EvaluationError):
    """
    Raised when an expression cannot be parsed.

    Covers unbalanced parentheses, empty operands, unexpected characters and
    literals that are not numbers.
    """

    kind = "malformed_expression"

    def __init__(self, reason: str, expression: Optional[str] = None) -> None:
        message = reason if expression is None else f"{reason}: {expression!r}"
        super().__init__(message)
        self.reason = reason
        self.expression = expression
