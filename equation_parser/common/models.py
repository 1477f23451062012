"""Pydantic models for arithmetic operation requests and results."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class OperationRequest(BaseModel):
    """Represents a single arithmetic expression to evaluate."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., description="Arithmetic expression as a string")
    line: int = Field(default=1, ge=1, description="Line number in the input file")

    @field_validator("expression")
    def expression_must_not_be_empty(cls, v: str) -> str:
        """Ensure that the expression is not empty."""
        if not v.strip():
            raise ValueError("Expression cannot be empty")
        return v


class OperationResult(BaseModel):
    """Represents the outcome of an evaluated arithmetic expression, a value or an error."""

    line: int = Field(..., ge=1, description="Line number in the input file")
    expression: str = Field(..., description="Original arithmetic expression")
    result: Optional[float] = Field(default=None, description="Evaluated numeric result of the expression")
    error: Optional[str] = Field(default=None, description="Error message when evaluation failed")
    error_kind: Optional[str] = Field(default=None, description="Error tag, e.g. 'division_by_zero'")

    @model_validator(mode="after")
    def result_or_error(self) -> "OperationResult":
        """Exactly one of ``result`` and ``error`` must be set."""
        if (self.result is None) == (self.error is None):
            raise ValueError("Exactly one of 'result' and 'error' must be set")
        return self

    @property
    def ok(self) -> bool:
        """
        Tell whether the expression was evaluated.

        :return: True when a result is set, False for an error
        :rtype: bool
        """
        return self.error is None

    def to_line(self) -> str:
        """Render the result as a line of the output file."""
        if self.ok:
            return f"{self.expression} = {self.result}"
        return f"{self.expression} -> ERROR: {self.error}"
