"""Evaluate every expression of a file and write the results as they come."""
from multiprocessing import cpu_count, get_context
from pathlib import Path
from typing import Iterator, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, FilePath

from equation_parser.batch.reader import read_expressions
from equation_parser.batch.worker import EvaluationWorker, run_worker
from equation_parser.common.logger import configure_logging, is_configured, logger
from equation_parser.common.models import OperationRequest, OperationResult
from equation_parser.common.parser import ExpressionParser

StartMethod = Literal["fork", "spawn", "forkserver"]


class BatchEvaluator(BaseModel):
    """
    Evaluate the arithmetic expressions of a text file or archive.

    Features:
        - Skips blank lines, keeps original line numbers in the results.
        - Writes each result line to disk as soon as it is available.
        - Evaluates in a pool of worker processes, up to the CPU core count by default.
        - Worker processes log like the parent, whatever the start method.
        - Results are written in input order.
    """

    model_config = ConfigDict(frozen=True)

    input_file: FilePath = Field(..., description="Text file or archive with one expression per line")
    output_file: Path = Field(..., description="Path to write computation results")
    workers: int = Field(default_factory=cpu_count, ge=1, description="Number of worker processes")
    parser: ExpressionParser = Field(default_factory=ExpressionParser, description="Parser settings")
    start_method: Optional[StartMethod] = Field(
        default=None, description="multiprocessing start method, the platform default when None"
    )

    def _load_workers(self) -> List[EvaluationWorker]:
        """
        Build one worker per non-blank line of the input file.

        :return: Workers in input order
        :rtype: List[EvaluationWorker]
        """
        return [
            EvaluationWorker(request=OperationRequest(expression=line.strip(), line=number), parser=self.parser)
            for number, line in enumerate(read_expressions(self.input_file), start=1)
            if line.strip()
        ]

    def _evaluate(self, workers: List[EvaluationWorker]) -> Iterator[OperationResult]:
        """
        Run the workers, in this process or in a pool, and yield their results in input order.

        Spawned processes start with an unconfigured logger, so the pool initializer
        gives them the parent's logging level when the parent has a handler.

        :param List[EvaluationWorker] workers: Workers in input order

        :return: Iterator over the results
        :rtype: Iterator[OperationResult]
        """
        # Limit number of processes to CPU cores or number of expressions
        processes = min(self.workers, len(workers))
        if processes <= 1:
            yield from map(run_worker, workers)
            return

        options = {}
        if is_configured():
            options = {"initializer": configure_logging, "initargs": (logger.getEffectiveLevel(),)}

        with get_context(self.start_method).Pool(processes=processes, **options) as pool:
            yield from pool.imap(run_worker, workers)

    def run(self) -> List[OperationResult]:
        """
        Evaluate all expressions and write one result line per expression to the output file.

        :return: Results in input order
        :rtype: List[OperationResult]
        :raises ValueError: If the input archive is unsupported or holds no .txt file
        """
        workers = self._load_workers()
        logger.info(f"🧮 Evaluating {len(workers)} expressions from {self.input_file}")

        results: List[OperationResult] = []
        with self.output_file.open("w", encoding="utf-8") as f_out:
            for result in self._evaluate(workers):
                f_out.write(result.to_line() + "\n")
                f_out.flush()
                results.append(result)

        failed = sum(1 for result in results if not result.ok)
        logger.info(f"✅ Wrote {len(results)} results to {self.output_file} ({failed} failed)")
        return results
