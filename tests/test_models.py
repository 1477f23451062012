"""Test classes OperationRequest and OperationResult."""
from pydantic import ValidationError
import pytest

from equation_parser.common.models import OperationRequest, OperationResult


def test_operation_request_valid() -> None:
    """Test that a valid OperationRequest can be created."""
    req = OperationRequest(expression="2 + 2 * 3", line=4)
    assert req.expression == "2 + 2 * 3"
    assert req.line == 4


def test_operation_request_invalid_type() -> None:
    """Test that non-string expressions raise a validation error."""
    with pytest.raises(ValidationError):
        # int instead of str
        OperationRequest(expression=123)


@pytest.mark.parametrize("expression", ["", "   "])
def test_operation_request_rejects_blank(expression) -> None:
    """Blank expressions are refused."""
    with pytest.raises(ValidationError):
        OperationRequest(expression=expression)


def test_operation_request_rejects_line_zero() -> None:
    """Line numbers start at 1."""
    with pytest.raises(ValidationError):
        OperationRequest(expression="1+1", line=0)


def test_operation_result_valid() -> None:
    """Test that a valid OperationResult can be created and rendered."""
    res = OperationResult(line=1, expression="2 + 2 * 3", result=8.0)
    assert res.ok
    assert isinstance(res.result, float)
    assert res.to_line() == "2 + 2 * 3 = 8.0"


def test_operation_result_error() -> None:
    """An error result renders its message."""
    res = OperationResult(line=2, expression="5/0", error="Division by zero: 5.0 / 0", error_kind="division_by_zero")
    assert not res.ok
    assert res.to_line() == "5/0 -> ERROR: Division by zero: 5.0 / 0"


@pytest.mark.parametrize("fields", [
    {},
    {"result": 1.0, "error": "boom"},
])
def test_operation_result_needs_exactly_one_outcome(fields) -> None:
    """Either a result or an error, never both or none."""
    with pytest.raises(ValidationError):
        OperationResult(line=1, expression="1", **fields)


def test_operation_result_invalid_result_type() -> None:
    """Test that invalid result type raises a validation error."""
    with pytest.raises(ValidationError):
        OperationResult(line=1, expression="2 + 2", result="not a float")
