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

"""TradeFlow runtime error types.

Any of these aborts the whole program run. Unknown commands are not
errors; they are recorded as failed step results.
"""

from dataclasses import dataclass

from ..errors import TradeFlowError
from .types import StepId


class RuntimeError(TradeFlowError):
    """Base class for all TradeFlow runtime errors."""

    pass


@dataclass
class UndefinedVariableError(RuntimeError):
    """Raised when an identifier has no binding in the environment."""

    name: str

    def __str__(self) -> str:
        return f"Undefined variable: {self.name}"


@dataclass
class StepNotFoundError(RuntimeError):
    """Raised when a step reference names a step with no recorded result."""

    step_id: StepId

    def __str__(self) -> str:
        return f"Step {self.step_id} not found"


@dataclass
class EvaluationError(RuntimeError):
    """Raised when expression evaluation fails."""

    expression: str
    message: str

    def __str__(self) -> str:
        return f"Evaluation error: {self.message} (expression: {self.expression})"


class UnknownOperatorError(EvaluationError):
    """Raised when an operator reaches a path that cannot evaluate it."""

    def __init__(self, operator: str, expression: str) -> None:
        super().__init__(expression, f"Unknown binary operator: {operator}")
        self.operator = operator
