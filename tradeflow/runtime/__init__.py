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

"""TradeFlow runtime package.

Executes parsed TradeFlow programs against simulated commands.
"""

from .dispatcher import CommandHandler, CommandRegistry
from .errors import (
    EvaluationError,
    RuntimeError,
    StepNotFoundError,
    UndefinedVariableError,
    UnknownOperatorError,
)
from .executor import Executor, run_source
from .expression import (
    EvaluationContext,
    ExpressionEvaluator,
    compare,
    evaluate_args,
    is_truthy,
    to_number,
)
from .simulation import SimulatedCommands, default_registry
from .telemetry import Trace, TraceEvent
from .types import STATUS_OK, STATUS_UNKNOWN_COMMAND, Emit, Environment, StepId, StepResult

__all__ = [
    # Types
    "StepId",
    "StepResult",
    "Environment",
    "Emit",
    "STATUS_OK",
    "STATUS_UNKNOWN_COMMAND",
    # Errors
    "RuntimeError",
    "UndefinedVariableError",
    "StepNotFoundError",
    "EvaluationError",
    "UnknownOperatorError",
    # Expression
    "ExpressionEvaluator",
    "EvaluationContext",
    "evaluate_args",
    "compare",
    "is_truthy",
    "to_number",
    # Dispatch
    "CommandHandler",
    "CommandRegistry",
    "SimulatedCommands",
    "default_registry",
    # Trace
    "Trace",
    "TraceEvent",
    # Executor
    "Executor",
    "run_source",
]
