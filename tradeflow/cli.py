# Copyright 2025 Ralph Lemke
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""TradeFlow command-line interface."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .ast import Program
from .ast_utils import describe_steps, iter_steps
from .config import TradeFlowConfig, load_config
from .errors import TradeFlowError
from .lexer import tokenize
from .parser import parse
from .runtime import Executor, RuntimeError, default_registry
from .validator import ValidationResult, validate

logger = logging.getLogger(__name__)


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments shared by all subcommands."""
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="Path to TradeFlow config file (JSON). "
        "Defaults to tradeflow.config.json in cwd, ~/.tradeflow/, or /etc/tradeflow/",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )

    parser.add_argument(
        "--log-file",
        default=None,
        metavar="FILE",
        help="Log to file instead of stderr",
    )


def _add_source_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="TradeFlow source file ('-' reads stdin)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tradeflow",
        description="TradeFlow workflow language interpreter",
    )
    _add_common_args(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Parse and execute a workflow file")
    _add_source_arg(run)
    run.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip static validation before execution",
    )
    run.add_argument(
        "--json",
        action="store_true",
        help="Print the trace and step results as JSON",
    )

    check = subparsers.add_parser("check", help="Tokenize, parse and validate only")
    _add_source_arg(check)

    tokens = subparsers.add_parser("tokens", help="Print the token stream")
    _add_source_arg(tokens)

    describe = subparsers.add_parser("describe", help="Print a human-readable step outline")
    _add_source_arg(describe)

    subparsers.add_parser("commands", help="List the available commands")

    return parser


def _configure_logging(parsed: argparse.Namespace) -> None:
    """Set up logging from parsed CLI args."""
    log_handlers: list[logging.Handler] = []
    if parsed.log_file:
        log_handlers.append(logging.FileHandler(parsed.log_file))
    else:
        log_handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=getattr(logging, parsed.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=log_handlers,
    )


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text()


def _report_validation(result: ValidationResult) -> None:
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    for error in result.errors:
        print(f"Error: {error}", file=sys.stderr)


# =========================================================================
# Subcommand handlers
# =========================================================================


def _handle_run(parsed: argparse.Namespace, config: TradeFlowConfig, program: Program) -> int:
    if config.validation.enabled and not parsed.no_validate:
        result = validate(program, config)
        _report_validation(result)
        if not result.is_valid:
            return 1

    executor = Executor(config=config)
    error: RuntimeError | None = None
    try:
        executor.execute(program)
    except RuntimeError as e:
        error = e

    if parsed.json:
        payload = {
            "trace": [event.to_dict() for event in executor.trace.events],
            "steps": {str(k): v.to_dict() for k, v in executor.step_results.items()},
            "error": str(error) if error else None,
        }
        print(json.dumps(payload, indent=2))
    else:
        if not config.executor.echo_trace:
            for line in executor.trace.lines:
                print(line)
        print()
        print("Step results:")
        for step_id, step_result in executor.step_results.items():
            print(
                f"  Step {step_id}: success={step_result.property('success')} "
                f"status={step_result.status} data={step_result.data!r} "
                f"message={step_result.message!r}"
            )

    if error is not None:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    return 0


def _handle_check(parsed: argparse.Namespace, config: TradeFlowConfig, program: Program) -> int:
    result = validate(program, config)
    _report_validation(result)
    if not result.is_valid:
        return 1

    step_count = sum(1 for _ in iter_steps(program))
    print(
        f"OK: {len(program.workflows)} workflow(s), {step_count} step(s)",
        file=sys.stderr,
    )
    return 0


def _handle_describe(parsed: argparse.Namespace, config: TradeFlowConfig, program: Program) -> int:
    for workflow in program.workflows:
        print(f"Workflow: {workflow.name}")
        single = Program(workflows=(workflow,))
        for line in describe_steps(single):
            print(f"  {line}")
    return 0


_PROGRAM_HANDLERS = {
    "run": _handle_run,
    "check": _handle_check,
    "describe": _handle_describe,
}


def main(args: list[str] | None = None) -> int:
    """Main entry point for the TradeFlow CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parsed = _build_parser().parse_args(args)
    _configure_logging(parsed)

    try:
        config = load_config(parsed.config)
    except (OSError, ValueError) as e:
        print(f"Error: Cannot load config: {e}", file=sys.stderr)
        return 1

    if parsed.command == "commands":
        for name in default_registry(config.simulation).names():
            print(name)
        return 0

    try:
        source = _read_source(parsed.input)
    except FileNotFoundError:
        print(f"Error: File not found: {parsed.input}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1

    try:
        tokens = tokenize(source)
        if parsed.command == "tokens":
            for token in tokens:
                print(token)
            return 0
        program = parse(tokens)
    except TradeFlowError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug("Parsed %s: %d workflow(s)", parsed.input, len(program.workflows))
    return _PROGRAM_HANDLERS[parsed.command](parsed, config, program)


if __name__ == "__main__":
    sys.exit(main())
