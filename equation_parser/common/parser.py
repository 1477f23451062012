"""Parse and evaluate arithmetic expressions safely."""
from decimal import Decimal
import math
import re
from typing import Iterable, List, Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from equation_parser.common.errors import MalformedExpressionError
from equation_parser.common.logger import logger
from equation_parser.common.operations import (
    ADDITIVE,
    MULTIPLICATIVE,
    OPERATOR_CHARS,
    Delimiter,
    Operator,
    apply_operator,
)

# A token is either an operand or an operator tag
Token = Union[float, Operator]

WhitespacePolicy = Literal["strip", "reject"]

DIGITS: frozenset = frozenset("0123456789")
ALLOWED_CHARS: frozenset = DIGITS | OPERATOR_CHARS | {".", Delimiter.OPEN.value, Delimiter.CLOSE.value}

# Optional run of signs followed by an unsigned number.
# Infinity and NaN only appear after a group collapsed into a non-finite value.
_LITERAL = re.compile(r"(?P<signs>[+-]*)(?P<body>\d+(?:\.\d*)?|\.\d+|Infinity|NaN)")


def format_operand(value: float) -> str:
    """
    Render a float as a literal the tokenizer reads back to the same value.

    Exponent notation is never produced, since its ``-``/``+`` would be taken for an operator.

    :param float value: Value to render

    :return: Positional decimal text, or ``Infinity``, ``-Infinity``, ``NaN``
    :rtype: str
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return format(Decimal(repr(value)), "f")


class ExpressionParser(BaseModel):
    """
    Parse and evaluate arithmetic expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - No state kept between calls, instances can be shared across threads

    Algorithm:
        1. Resolve groups: the innermost parenthesized group is evaluated and
           replaced by its value, until no parentheses remain
        2. Tokenize the flat expression into operand, operator, operand, ...
           A ``+`` or ``-`` right after another operator is the sign of the next number
        3. Reduce ``*`` and ``/`` left to right, then ``+`` and ``-``

    Examples:
        - ``4+7/(9-(1+3.5))`` -> ``4+7/(9-4.5)`` -> ``4+7/4.5`` -> ``5.555555555555555``
        - ``4--0.5`` tokenizes as ``4``, ``-``, ``-0.5``
    """

    # Make the Pydantic instance immutable (read-only), settings do not change while evaluating
    model_config = ConfigDict(frozen=True)

    whitespace: WhitespacePolicy = Field(
        default="strip",
        description="'strip' removes all whitespace before evaluating, 'reject' refuses it",
    )

    def normalize(self, expr: str) -> str:
        """
        Apply the whitespace policy and check that only known characters are used.

        :param str expr: Raw arithmetic expression

        :return: Expression without whitespace
        :rtype: str
        :raises MalformedExpressionError: On whitespace under the 'reject' policy,
            on an unexpected character or on an empty expression
        """
        if self.whitespace == "strip":
            text = "".join(expr.split())
        elif any(char.isspace() for char in expr):
            raise MalformedExpressionError("Whitespace is not allowed", expr)
        else:
            text = expr

        if not text:
            raise MalformedExpressionError("Empty expression", expr)

        for char in text:
            if char not in ALLOWED_CHARS:
                raise MalformedExpressionError(f"Unexpected character {char!r}", expr)
        return text

    @staticmethod
    def check_groups(expr: str) -> None:
        """
        Ensure parentheses are balanced and each group stands where an operand can.

        A ``(`` must open the expression or follow an operator or another ``(``.
        A ``)`` must end the expression or be followed by an operator or another ``)``.
        Otherwise ``2(3)`` would silently read as ``23``.

        :param str expr: Arithmetic expression without whitespace

        :raises MalformedExpressionError: If parentheses are unbalanced or misplaced
        """
        depth = 0
        for index, char in enumerate(expr):
            if char == Delimiter.OPEN:
                depth += 1
                if index > 0 and expr[index - 1] not in OPERATOR_CHARS and expr[index - 1] != Delimiter.OPEN:
                    raise MalformedExpressionError("Missing operator before group", expr)
            elif char == Delimiter.CLOSE:
                depth -= 1
                if depth < 0:
                    raise MalformedExpressionError("Closing parenthesis without opening one", expr)
                following = expr[index + 1:index + 2]
                if following and following not in OPERATOR_CHARS and following != Delimiter.CLOSE:
                    raise MalformedExpressionError("Missing operator after group", expr)
        if depth:
            raise MalformedExpressionError("Unclosed parenthesis", expr)

    def resolve_groups(self, expr: str) -> str:
        """
        Replace every parenthesized group with the decimal text of its value.

        The first ``)`` closes a leaf group opened by the nearest ``(`` before it.
        That group is evaluated, spliced into a new string, and the scan starts over.

        :param str expr: Arithmetic expression without whitespace

        :return: Equivalent expression without parentheses
        :rtype: str
        :raises MalformedExpressionError: If parentheses are unbalanced or misplaced
        """
        self.check_groups(expr)

        text = expr
        while Delimiter.OPEN in text:
            end = text.index(Delimiter.CLOSE)
            start = text.rindex(Delimiter.OPEN, 0, end)
            inner = text[start + 1:end]
            replacement = format_operand(self._evaluate(inner))
            logger.debug(f"🧮 Collapsed group ({inner}) -> {replacement}")
            text = text[:start] + replacement + text[end + 1:]
        return text

    @staticmethod
    def parse_operand(literal: str) -> float:
        """
        Convert a literal with an optional run of signs into a float.

        An odd number of ``-`` makes the value negative, ``+`` is neutral.

        :param str literal: Literal such as ``"3.5"``, ``"-0.5"`` or ``"+-2"``

        :return: Numeric value
        :rtype: float
        :raises MalformedExpressionError: If the literal is empty or not a number
        """
        match = _LITERAL.fullmatch(literal)
        if match is None:
            if not literal:
                raise MalformedExpressionError("Missing operand")
            raise MalformedExpressionError("Invalid number", literal)

        value = float(match.group("body"))
        if match.group("signs").count(Operator.SUB.value) % 2:
            return -value
        return value

    @staticmethod
    def tokenize(expr: str) -> List[Token]:
        """
        Split a flat arithmetic expression into alternating operands and operators.

        Position 0 is never a binary operator. An operator character preceded by
        another operator character belongs to the sign of the following number.

        :param str expr: Arithmetic expression without parentheses or whitespace

        :return: List of tokens, a single operand if no operator was found
        :rtype: List[Token]
        :raises MalformedExpressionError: If an operand is missing or invalid
        """
        tokens: List[Token] = []
        start = 0
        for index in range(1, len(expr)):
            char = expr[index]
            if char in OPERATOR_CHARS and expr[index - 1] not in OPERATOR_CHARS:
                tokens.append(ExpressionParser.parse_operand(expr[start:index]))
                tokens.append(Operator(char))
                start = index + 1

        # The trailing operand, or the whole expression when nothing was split
        tokens.append(ExpressionParser.parse_operand(expr[start:]))
        return tokens

    @staticmethod
    def apply_rule(tokens: Sequence[Token], operators: Iterable) -> List[Token]:
        """
        Collapse every occurrence of the given operators, left to right.

        After each collapse the scan restarts from the beginning, which keeps
        operators of the same tier left-associative. Other operators are untouched.
        The input sequence is not modified.

        :param Sequence[Token] tokens: Alternating operands and operators
        :param operators: Operator tags to reduce

        :return: New, shorter token list
        :rtype: List[Token]
        :raises DivisionByZeroError: On a division by zero
        :raises InvalidOperatorError: If a targeted tag is not a known operator
        """
        targets = tuple(operators)
        reduced: List[Token] = list(tokens)

        while True:
            for index in range(1, len(reduced) - 1, 2):
                if reduced[index] in targets:
                    value = apply_operator(reduced[index], reduced[index - 1], reduced[index + 1])
                    reduced = reduced[:index - 1] + [value] + reduced[index + 2:]
                    break
            else:
                return reduced

    def _evaluate(self, expr: str) -> float:
        """
        Evaluate an expression already normalized, groups included.

        :param str expr: Expression without whitespace, with only known characters

        :return: Computed result as float
        :rtype: float
        """
        flat = self.resolve_groups(expr)
        tokens = self.tokenize(flat)
        if len(tokens) == 1:
            return tokens[0]

        tokens = self.apply_rule(tokens, MULTIPLICATIVE)
        tokens = self.apply_rule(tokens, ADDITIVE)
        return tokens[0]

    def evaluate(self, expr: str) -> float:
        """
        Evaluate an arithmetic expression safely.

        :param str expr: Arithmetic expression string

        :return: Computed result as float
        :rtype: float
        :raises DivisionByZeroError: On a division by zero, at any nesting level
        :raises MalformedExpressionError: If the expression is invalid or malformed
        """
        return self._evaluate(self.normalize(expr))


_default_parser = ExpressionParser()


def evaluate(expression: str) -> float:
    """Evaluate ``expression`` with the default settings (whitespace is stripped)."""
    return _default_parser.evaluate(expression)
