"""
Command line entrypoint.

Two modes:
- ``equation-parser -e "4+7/(9-(1+3.5))"`` evaluates a single expression and prints it
- ``equation-parser operations.7z`` evaluates every line of a text file or archive
  and writes the results next to it
"""

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

from pydantic import BaseModel, Field, FilePath, ValidationError, model_validator

from equation_parser.batch.runner import BatchEvaluator
from equation_parser.common.errors import EvaluationError
from equation_parser.common.logger import configure_logging, logger
from equation_parser.common.parser import ExpressionParser, WhitespacePolicy


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    file_path : FilePath, optional
        Path to the file containing arithmetic operations.
    expression : str, optional
        Single expression to evaluate instead of a file.
    output : Path, optional
        Where to write the results of a file, derived from ``file_path`` when omitted.
    workers : int, optional
        Number of worker processes, CPU count when omitted.
    whitespace : WhitespacePolicy
        Whitespace policy of the parser.
    verbose : bool
        Enable debug logging.
    """

    file_path: Optional[FilePath] = None
    expression: Optional[str] = None
    output: Optional[Path] = None
    workers: Optional[int] = Field(default=None, ge=1)
    whitespace: WhitespacePolicy = "strip"
    verbose: bool = False

    @model_validator(mode="after")
    def file_or_expression(self) -> "CliArgs":
        """Exactly one of a file and an expression must be given."""
        if (self.file_path is None) == (self.expression is None):
            raise ValueError("Provide exactly one of a file path or --expression")
        return self


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, ``sys.argv[1:]`` when omitted
    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(
        prog="equation-parser",
        description="Evaluate arithmetic expressions with + - * / and parentheses",
    )

    parser.add_argument(
        "file_path",
        nargs="?",
        help="Path to a .txt, .zip, .tar.xz or .7z file with one expression per line",
    )
    parser.add_argument("-e", "--expression", help="Evaluate a single expression and print its value")
    parser.add_argument("-o", "--output", help="Output file, derived from the input file name by default")
    parser.add_argument("-w", "--workers", type=int, help="Number of worker processes")
    parser.add_argument(
        "--whitespace",
        choices=["strip", "reject"],
        default="strip",
        help="Strip whitespace from expressions, or reject expressions containing it",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    try:
        return CliArgs(**{key: value for key, value in vars(args).items() if value is not None})
    except ValidationError as exc:
        parser.error(str(exc))


def build_output_path(input_path: Path) -> Path:
    """
    Construct a safe output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    stem = input_path.name[: len(input_path.name) - len("".join(input_path.suffixes))]
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def evaluate_expression(expression: str, parser: ExpressionParser) -> int:
    """
    Print the value of one expression.

    :return: Process exit status, 1 when the expression cannot be evaluated
    """
    try:
        print(parser.evaluate(expression))
    except EvaluationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function of the ``equation-parser`` command.
    """
    cli_args = parse_args(argv)
    configure_logging(logging.DEBUG if cli_args.verbose else logging.INFO)
    parser = ExpressionParser(whitespace=cli_args.whitespace)

    if cli_args.expression is not None:
        return evaluate_expression(cli_args.expression, parser)

    input_path: Path = Path(cli_args.file_path)
    output_path: Path = cli_args.output or build_output_path(input_path)

    options = {"workers": cli_args.workers} if cli_args.workers else {}
    try:
        results = BatchEvaluator(input_file=input_path, output_file=output_path, parser=parser, **options).run()
    except ValueError as exc:
        logger.error(f"📄❌ Could not read {input_path}: {exc}")
        return 1

    logger.info(f"📝 Results written to {output_path}")
    failed = [result.line for result in results if not result.ok]
    if failed:
        logger.warning(f"⚠️ {len(failed)} expressions could not be evaluated, lines: {failed}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
