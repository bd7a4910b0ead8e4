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

"""TradeFlow expression evaluation.

Evaluates parsed expressions to strings:
- Literals (String, Number)
- Variable references (name)
- Property access (name.property), a non-resolving projection
- Step references (step N, step N.property)
- Concatenation (expr + expr)

Comparisons are only meaningful as conditions; see
:meth:`ExpressionEvaluator.evaluate_condition`.
"""

from dataclasses import dataclass, field

from ..ast import (
    COMPARISON_OPERATORS,
    BinaryExpression,
    Expression,
    Identifier,
    NumberLiteral,
    PropertyAccess,
    StepReference,
    StringLiteral,
)
from ..ast_utils import format_expression, format_number
from .errors import EvaluationError, StepNotFoundError, UndefinedVariableError, UnknownOperatorError
from .types import Environment, StepId, StepResults

# String values that count as false in a condition.
FALSY_VALUES = frozenset({"", "0", "false"})


@dataclass
class EvaluationContext:
    """Context for expression evaluation.

    Evaluation only reads from the context; it never writes.
    """

    environment: Environment = field(default_factory=dict)
    step_results: StepResults = field(default_factory=dict)


def to_number(value: str) -> float:
    """Parse a string as a float; anything unparsable is 0.0.

    Surrounding whitespace and digit-group underscores make a value
    unparsable, even though ``float()`` would accept them.
    """
    if "_" in value or value != value.strip():
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0


def is_truthy(value: str) -> bool:
    """A string is truthy unless it is empty, "0" or "false"."""
    return value not in FALSY_VALUES


def compare(left: str, operator: str, right: str) -> bool:
    """Apply a comparison operator to two evaluated operand strings.

    ``==`` and ``!=`` compare strings; ordering operators compare the
    operands as numbers.

    Raises:
        UnknownOperatorError: If *operator* is not a comparison
    """
    if operator == "==":
        return left == right
    if operator == "!=":
        return left != right

    lhs = to_number(left)
    rhs = to_number(right)
    if operator == ">":
        return lhs > rhs
    if operator == "<":
        return lhs < rhs
    if operator == ">=":
        return lhs >= rhs
    if operator == "<=":
        return lhs <= rhs
    raise UnknownOperatorError(operator, f"{left!r} {operator} {right!r}")


class ExpressionEvaluator:
    """Evaluates TradeFlow expressions against an :class:`EvaluationContext`."""

    def evaluate(self, expr: Expression, ctx: EvaluationContext) -> str:
        """Evaluate an expression to its string value.

        Args:
            expr: The expression AST node
            ctx: Evaluation context

        Returns:
            The evaluated string

        Raises:
            UndefinedVariableError: If an identifier is unbound
            StepNotFoundError: If a referenced step has no result yet
            UnknownOperatorError: If a non-concatenation operator is evaluated
        """
        if isinstance(expr, StringLiteral):
            return expr.value
        if isinstance(expr, NumberLiteral):
            return format_number(expr.value)
        if isinstance(expr, Identifier):
            return self._eval_identifier(expr, ctx)
        if isinstance(expr, BinaryExpression):
            return self._eval_binary(expr, ctx)
        if isinstance(expr, PropertyAccess):
            return f"{self.evaluate(expr.object, ctx)}.{expr.property}"
        if isinstance(expr, StepReference):
            return self._eval_step_ref(expr, ctx)
        raise EvaluationError(repr(expr), f"Unknown expression type: {type(expr).__name__}")

    def evaluate_condition(self, expr: Expression, ctx: EvaluationContext) -> bool:
        """Evaluate an expression as a branch condition.

        A top-level comparison is evaluated structurally on its operand
        strings. Anything else is evaluated to a string and tested with
        :func:`is_truthy`.
        """
        if isinstance(expr, BinaryExpression) and expr.operator in COMPARISON_OPERATORS:
            left = self.evaluate(expr.left, ctx)
            right = self.evaluate(expr.right, ctx)
            return compare(left, expr.operator, right)
        return is_truthy(self.evaluate(expr, ctx))

    def evaluate_args(self, args: tuple[Expression, ...], ctx: EvaluationContext) -> list[str]:
        """Evaluate command arguments left to right."""
        return [self.evaluate(arg, ctx) for arg in args]

    def _eval_identifier(self, expr: Identifier, ctx: EvaluationContext) -> str:
        try:
            return ctx.environment[expr.name]
        except KeyError:
            raise UndefinedVariableError(expr.name) from None

    def _eval_binary(self, expr: BinaryExpression, ctx: EvaluationContext) -> str:
        left = self.evaluate(expr.left, ctx)
        right = self.evaluate(expr.right, ctx)
        if expr.operator == "+":
            return left + right
        raise UnknownOperatorError(expr.operator, format_expression(expr))

    def _eval_step_ref(self, expr: StepReference, ctx: EvaluationContext) -> str:
        result = ctx.step_results.get(StepId(expr.step_id))
        if result is None:
            raise StepNotFoundError(StepId(expr.step_id))
        return result.property(expr.property)


def evaluate_args(args: tuple[Expression, ...], ctx: EvaluationContext) -> list[str]:
    """Evaluate command arguments without an existing evaluator."""
    return ExpressionEvaluator().evaluate_args(args, ctx)
