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

"""TradeFlow program executor.

The Executor walks a parsed Program:
- Binds top-level variables in declaration order
- Runs each workflow's steps in order, depth-first into taken branches
- Dispatches commands through a CommandRegistry and records their results

The environment, the step-result table and the trace belong to one
Executor; concurrent runs need separate instances.
"""

import logging

from ..ast import Command, Conditional, Program, Step, VariableDeclaration, Workflow
from ..config import TradeFlowConfig
from ..parser import parse_source
from .dispatcher import CommandRegistry
from .errors import RuntimeError
from .expression import EvaluationContext, ExpressionEvaluator
from .simulation import default_registry
from .telemetry import Trace
from .types import Environment, StepId, StepResult, StepResults

logger = logging.getLogger(__name__)


class Executor:
    """Tree-walking executor for one Program run."""

    def __init__(
        self,
        registry: CommandRegistry | None = None,
        config: TradeFlowConfig | None = None,
    ):
        """Initialize the executor.

        Args:
            registry: Command handlers; defaults to the simulated command set
            config: Optional configuration (simulation defaults, trace echo)
        """
        self.config = config or TradeFlowConfig()
        self.registry = registry if registry is not None else default_registry(self.config.simulation)
        self.environment: Environment = {}
        self.step_results: StepResults = {}
        self.trace = Trace(echo=self.config.executor.echo_trace)
        self._evaluator = ExpressionEvaluator()

    @property
    def context(self) -> EvaluationContext:
        """Read view handed to expression evaluation."""
        return EvaluationContext(self.environment, self.step_results)

    def execute(self, program: Program) -> None:
        """Execute every variable declaration, then every workflow.

        Trace lines and step results produced before a failure remain
        available on the executor.

        Raises:
            RuntimeError: On an undefined variable, a missing step result
                or an operator that cannot be evaluated
        """
        logger.info(
            "Program started: variables=%d workflows=%d",
            len(program.variables),
            len(program.workflows),
        )
        try:
            for declaration in program.variables:
                self._execute_variable(declaration)
            for workflow in program.workflows:
                self._execute_workflow(workflow)
        except RuntimeError as e:
            logger.error("Program failed: error=%s steps_completed=%d", e, len(self.step_results))
            raise
        logger.info("Program finished: steps_completed=%d", len(self.step_results))

    def _execute_variable(self, declaration: VariableDeclaration) -> None:
        value = self._evaluator.evaluate(declaration.value, self.context)
        self.environment[declaration.name] = value
        self.trace.log_variable(declaration.keyword, declaration.name, value)

    def _execute_workflow(self, workflow: Workflow) -> None:
        self.trace.log_workflow_start(workflow.name)
        self._execute_steps(workflow.steps)

    def _execute_steps(self, steps: tuple[Step, ...]) -> None:
        for step in steps:
            self._execute_step(step)

    def _execute_step(self, step: Step) -> None:
        self.trace.log_step_start(StepId(step.id))
        try:
            content = step.content
            if isinstance(content, Command):
                self._execute_command(StepId(step.id), content)
            elif isinstance(content, Conditional):
                self._execute_conditional(content)
            else:
                raise TypeError(f"Unknown step content: {type(content).__name__}")
        finally:
            self.trace.log_step_end()

    def _execute_command(self, step_id: StepId, command: Command) -> None:
        args = self._evaluator.evaluate_args(command.arguments, self.context)
        self.trace.log_command(command.name, args)

        result = self.registry.dispatch(command.name, args, self.trace.emit)
        if result is None:
            logger.warning("Unknown command: step_id=%s command=%s", step_id, command.name)
            self.trace.log_unknown_command(command.name)
            result = StepResult.unknown_command(command.name)

        self.step_results[step_id] = result

    def _execute_conditional(self, conditional: Conditional) -> None:
        taken = self._evaluator.evaluate_condition(conditional.condition, self.context)
        self.trace.log_branch(taken, conditional.else_steps is not None)
        if taken:
            self._execute_steps(conditional.if_steps)
        elif conditional.else_steps is not None:
            self._execute_steps(conditional.else_steps)


def run_source(
    source: str,
    registry: CommandRegistry | None = None,
    config: TradeFlowConfig | None = None,
) -> Executor:
    """Tokenize, parse and execute *source*.

    Returns:
        The executor after the run, for inspecting results and trace

    Raises:
        LexError, ParseError, RuntimeError: From the failing phase
    """
    program = parse_source(source)
    executor = Executor(registry=registry, config=config)
    executor.execute(program)
    return executor
