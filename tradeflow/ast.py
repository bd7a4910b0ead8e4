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

"""TradeFlow AST node definitions using frozen dataclasses.

Nodes are immutable once parsed. Sequence fields are tuples. Source
locations do not take part in equality, so parsing identical source
twice yields equal trees.
"""

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True)
class SourceLocation:
    """Source line of a node, for error and validation messages."""

    line: int


@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""

    location: SourceLocation | None = field(default=None, compare=False, repr=False, kw_only=True)

    @property
    def line(self) -> int | None:
        return self.location.line if self.location else None


# Expressions
@dataclass(frozen=True)
class StringLiteral(ASTNode):
    """String literal: "text" or 'text'."""

    value: str


@dataclass(frozen=True)
class NumberLiteral(ASTNode):
    """Numeric literal, always stored as a float."""

    value: float


@dataclass(frozen=True)
class Identifier(ASTNode):
    """Variable reference by name."""

    name: str


@dataclass(frozen=True)
class BinaryExpression(ASTNode):
    """Binary expression: left OP right (single precedence, left-assoc)."""

    left: "Expression"
    operator: str
    right: "Expression"


@dataclass(frozen=True)
class PropertyAccess(ASTNode):
    """Property access on an identifier: name.property"""

    object: "Expression"
    property: str


@dataclass(frozen=True)
class StepReference(ASTNode):
    """Reference to a prior step result: step N or step N.property"""

    step_id: int
    property: str | None = None


Expression: TypeAlias = (
    StringLiteral | NumberLiteral | Identifier | BinaryExpression | PropertyAccess | StepReference
)

COMPARISON_OPERATORS = frozenset({"==", "!=", ">", "<", ">=", "<="})
BINARY_OPERATORS = COMPARISON_OPERATORS | {"+"}


# Step content
@dataclass(frozen=True)
class Command(ASTNode):
    """Command call: name(arg, ...)"""

    name: str
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Conditional(ASTNode):
    """Conditional: if (cond) { steps } else { steps }

    ``else_steps`` is ``None`` when no else clause was written.
    """

    condition: Expression
    if_steps: tuple["Step", ...] = ()
    else_steps: tuple["Step", ...] | None = None


StepContent: TypeAlias = Command | Conditional


@dataclass(frozen=True)
class Step(ASTNode):
    """Numbered step: step N: content"""

    id: int
    content: StepContent


# Declarations
@dataclass(frozen=True)
class VariableDeclaration(ASTNode):
    """Variable declaration: let|var|const name = expr

    The keyword is recorded but not enforced.
    """

    keyword: str
    name: str
    value: Expression


@dataclass(frozen=True)
class Workflow(ASTNode):
    """Workflow declaration: workflow "name" { steps }"""

    name: str
    steps: tuple[Step, ...] = ()


# Program (root)
@dataclass(frozen=True)
class Program(ASTNode):
    """Root AST node representing a TradeFlow program."""

    variables: tuple[VariableDeclaration, ...] = ()
    workflows: tuple[Workflow, ...] = ()
