"""Evaluation of a single arithmetic expression into an OperationResult."""
from pydantic import BaseModel, ConfigDict, Field

from equation_parser.common.errors import EvaluationError
from equation_parser.common.logger import logger
from equation_parser.common.models import OperationRequest, OperationResult
from equation_parser.common.parser import ExpressionParser


class EvaluationWorker(BaseModel):
    """
    Worker responsible for evaluating a single arithmetic expression.

    Lifecycle:
        - Receives one request only
        - Returns the computed result, or the error raised by the parser, as an OperationResult
    """

    # Make the Pydantic instance immutable (read-only) for safety
    model_config = ConfigDict(frozen=True)

    request: OperationRequest = Field(..., description="Expression to evaluate and its line number")
    parser: ExpressionParser = Field(default_factory=ExpressionParser, description="Parser settings")

    def run(self) -> OperationResult:
        """
        Evaluate the arithmetic expression.

        Only :class:`EvaluationError` is turned into an error result, anything else propagates.

        :return: The result or the error of the evaluation
        :rtype: OperationResult
        """
        line, expression = self.request.line, self.request.expression
        logger.debug(f"👷🏁 Worker started on line {line}: {expression}")

        try:
            result = self.parser.evaluate(expression)
        except EvaluationError as exc:
            logger.error(
                f"👷❌ Worker failed on line {line}: {exc}\n"
                f"Invalid arithmetic expression, could not evaluate: {expression!r}"
            )
            return OperationResult(line=line, expression=expression, error=str(exc), error_kind=exc.kind)

        logger.debug(f"👷✅ Worker finished on line {line}: {result}")
        return OperationResult(line=line, expression=expression, result=result)


def run_worker(worker: EvaluationWorker) -> OperationResult:
    """Pool entry point, a module-level function so it can be pickled."""
    return worker.run()
