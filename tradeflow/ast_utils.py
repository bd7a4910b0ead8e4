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

"""AST utility functions for parsed TradeFlow programs.

Provides:
- ``iter_steps``: every step in declaration order, including branches
- ``find_workflow``: locate a Workflow by name
- ``step_references`` / ``identifiers``: collect references inside an expression
- ``format_expression``: render an expression back to source-like text
- ``describe_steps``: a human-readable outline of every workflow step
"""

from __future__ import annotations

from collections.abc import Iterator
from decimal import Decimal

from .ast import (
    BinaryExpression,
    Command,
    Conditional,
    Expression,
    Identifier,
    NumberLiteral,
    Program,
    PropertyAccess,
    Step,
    StepReference,
    StringLiteral,
    Workflow,
)

# Outline text for commands with a well-known purpose.
_COMMAND_DESCRIPTIONS: dict[str, str] = {
    "input": "Collect user input",
    "generate": "Generate AI content",
    "output": "Export results",
    "fetch": "Fetch data from URL",
    "transform": "Transform data",
    "validate": "Validate input",
    "send_email": "Send email",
    "notify": "Send notification",
    "print": "Print message",
    "log": "Log message",
}


# ---------------------------------------------------------------------------
# Walking
# ---------------------------------------------------------------------------


def iter_steps(program: Program) -> Iterator[tuple[Workflow, Step]]:
    """Yield ``(workflow, step)`` for every step, depth-first.

    Conditional steps are yielded before their if-branch steps, which come
    before their else-branch steps.
    """
    for workflow in program.workflows:
        for step in _walk(workflow.steps):
            yield workflow, step


def _walk(steps: tuple[Step, ...]) -> Iterator[Step]:
    for step in steps:
        yield step
        content = step.content
        if isinstance(content, Conditional):
            yield from _walk(content.if_steps)
            if content.else_steps is not None:
                yield from _walk(content.else_steps)


def find_workflow(program: Program, name: str) -> Workflow | None:
    """Return the first workflow called *name*, or ``None``."""
    for workflow in program.workflows:
        if workflow.name == name:
            return workflow
    return None


def step_expressions(step: Step) -> tuple[Expression, ...]:
    """Expressions owned directly by a step (arguments or the condition)."""
    content = step.content
    if isinstance(content, Command):
        return content.arguments
    return (content.condition,)


def step_references(expr: Expression) -> list[StepReference]:
    """Collect every StepReference inside *expr*, left to right."""
    if isinstance(expr, StepReference):
        return [expr]
    if isinstance(expr, BinaryExpression):
        return step_references(expr.left) + step_references(expr.right)
    if isinstance(expr, PropertyAccess):
        return step_references(expr.object)
    return []


def identifiers(expr: Expression) -> list[Identifier]:
    """Collect every Identifier inside *expr*, left to right."""
    if isinstance(expr, Identifier):
        return [expr]
    if isinstance(expr, BinaryExpression):
        return identifiers(expr.left) + identifiers(expr.right)
    if isinstance(expr, PropertyAccess):
        return identifiers(expr.object)
    return []


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def format_number(value: float) -> str:
    """Shortest round-trip decimal, never in exponent form.

    Integral values drop the fraction: ``200.0`` renders as ``"200"`` and
    ``1e23`` as ``"100000000000000000000000"``.
    """
    text = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_expression(expr: Expression) -> str:
    """Render *expr* as source-like text (strings always double-quoted)."""
    if isinstance(expr, StringLiteral):
        return f'"{expr.value}"'
    if isinstance(expr, NumberLiteral):
        return format_number(expr.value)
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, BinaryExpression):
        return f"{format_expression(expr.left)} {expr.operator} {format_expression(expr.right)}"
    if isinstance(expr, PropertyAccess):
        return f"{format_expression(expr.object)}.{expr.property}"
    if isinstance(expr, StepReference):
        suffix = f".{expr.property}" if expr.property else ""
        return f"step {expr.step_id}{suffix}"
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def describe_step(step: Step) -> str:
    """One outline line for a single step."""
    content = step.content
    if isinstance(content, Conditional):
        return f"Step {step.id}: Conditional logic"
    description = _COMMAND_DESCRIPTIONS.get(content.name, f"Execute {content.name}")
    return f"Step {step.id}: {description}"


def describe_steps(program: Program) -> list[str]:
    """Human-readable outline of every step in every workflow."""
    return [describe_step(step) for _, step in iter_steps(program)]
