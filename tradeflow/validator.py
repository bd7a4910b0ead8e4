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

"""TradeFlow static validator.

Checks a parsed Program for problems that would fail or misbehave at run
time:
- Step references to steps that are never declared, or to the referring step
- Variables used without (or before) a declaration
- Duplicate step ids, forward step references, unknown commands and
  empty workflows (warnings)

Validation is advisory: the executor never calls it.
"""

from dataclasses import dataclass, field

from .ast import Command, Program, SourceLocation, Step, VariableDeclaration
from .ast_utils import identifiers, iter_steps, step_expressions, step_references
from .config import TradeFlowConfig
from .runtime.dispatcher import CommandRegistry
from .runtime.simulation import default_registry


@dataclass
class ValidationError:
    """A validation error or warning."""

    message: str
    line: int | None = None

    def __str__(self) -> str:
        location = f" at line {self.line}" if self.line is not None else ""
        return f"{self.message}{location}"


@dataclass
class ValidationResult:
    """Errors and warnings found by validation."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, message: str, location: SourceLocation | None = None) -> None:
        """Add a validation error."""
        self.errors.append(ValidationError(message, location.line if location else None))

    def add_warning(self, message: str, location: SourceLocation | None = None) -> None:
        """Add a validation warning."""
        self.warnings.append(ValidationError(message, location.line if location else None))

    def promote_warnings(self) -> None:
        """Move every warning into the error list."""
        self.errors.extend(self.warnings)
        self.warnings = []


class WorkflowValidator:
    """Validates a TradeFlow Program."""

    def __init__(self, commands: set[str]):
        """Initialize the validator.

        Args:
            commands: Command names that can be dispatched
        """
        self.commands = commands
        self._result = ValidationResult()
        # Step id -> position of its first declaration in execution order
        self._positions: dict[int, int] = {}

    def validate(self, program: Program) -> ValidationResult:
        """Validate a program AST.

        Args:
            program: The Program AST to validate

        Returns:
            ValidationResult containing any errors and warnings found
        """
        self._result = ValidationResult()
        self._positions = {}

        self._collect_steps(program)
        self._validate_variables(program.variables)
        declared = {v.name for v in program.variables}

        for workflow in program.workflows:
            if not workflow.steps:
                self._result.add_warning(
                    f'Workflow "{workflow.name}" has no steps', workflow.location
                )

        for position, (workflow, step) in enumerate(iter_steps(program)):
            self._validate_step(step, position, workflow.name, declared)

        return self._result

    def _collect_steps(self, program: Program) -> None:
        """Record step positions and report duplicate ids."""
        seen_in: dict[int, str] = {}
        for position, (workflow, step) in enumerate(iter_steps(program)):
            if step.id in seen_in:
                self._result.add_warning(
                    f'Duplicate step number {step.id} in workflow "{workflow.name}" '
                    f'(first declared in workflow "{seen_in[step.id]}"); '
                    f"later results overwrite earlier ones",
                    step.location,
                )
                continue
            seen_in[step.id] = workflow.name
            self._positions[step.id] = position

    def _validate_variables(self, variables: tuple[VariableDeclaration, ...]) -> None:
        """Variables bind in order, before any step runs."""
        bound: set[str] = set()
        for declaration in variables:
            for ident in identifiers(declaration.value):
                if ident.name not in bound:
                    self._result.add_error(
                        f"Variable '{declaration.name}' uses '{ident.name}' before it is declared",
                        ident.location or declaration.location,
                    )
            for ref in step_references(declaration.value):
                self._result.add_error(
                    f"Variable '{declaration.name}' references step {ref.step_id} "
                    f"before any step has run",
                    ref.location or declaration.location,
                )
            bound.add(declaration.name)

    def _validate_step(self, step: Step, position: int, workflow: str, declared: set[str]) -> None:
        content = step.content
        if isinstance(content, Command) and content.name not in self.commands:
            self._result.add_warning(
                f'Unknown command "{content.name}" in step {step.id} of workflow "{workflow}"',
                step.location,
            )

        for expr in step_expressions(step):
            for ident in identifiers(expr):
                if ident.name not in declared:
                    self._result.add_error(
                        f"Step {step.id} in workflow \"{workflow}\" uses undeclared "
                        f"variable '{ident.name}'",
                        ident.location or step.location,
                    )
            for ref in step_references(expr):
                self._validate_step_reference(step, position, workflow, ref.step_id)

    def _validate_step_reference(
        self, step: Step, position: int, workflow: str, target: int
    ) -> None:
        prefix = f'Step {step.id} in workflow "{workflow}"'
        if target not in self._positions:
            self._result.add_error(
                f"{prefix} references non-existent step {target}", step.location
            )
        elif self._positions[target] == position:
            self._result.add_error(f"{prefix} references itself", step.location)
        elif self._positions[target] > position:
            self._result.add_warning(
                f"{prefix} references future step {target}", step.location
            )


def validate(
    program: Program,
    config: TradeFlowConfig | None = None,
    registry: CommandRegistry | None = None,
) -> ValidationResult:
    """Validate a TradeFlow program.

    Args:
        program: The Program AST to validate
        config: Optional configuration; ``validation.warnings_as_errors``
            promotes warnings to errors
        registry: Command set treated as known; defaults to the simulated set

    Returns:
        ValidationResult containing any errors and warnings found
    """
    config = config or TradeFlowConfig()
    if registry is None:
        registry = default_registry(config.simulation)

    result = WorkflowValidator(set(registry.names())).validate(program)
    if config.validation.warnings_as_errors:
        result.promote_warnings()
    return result
