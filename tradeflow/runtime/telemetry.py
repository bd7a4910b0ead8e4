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

"""TradeFlow execution trace.

An ordered record of human-readable execution events for presentation
layers. The trace MUST NOT affect execution semantics.
"""

import logging
from dataclasses import dataclass

from .types import StepId

logger = logging.getLogger(__name__)

_INDENT = "  "


@dataclass(frozen=True)
class TraceEvent:
    """A single trace event."""

    event_type: str
    message: str
    workflow: str | None = None
    step_id: StepId | None = None
    depth: int = 0

    @property
    def line(self) -> str:
        """Indented human-readable line."""
        return f"{_INDENT * self.depth}{self.message}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        result: dict = {"eventType": self.event_type, "message": self.message}
        if self.workflow is not None:
            result["workflow"] = self.workflow
        if self.step_id is not None:
            result["stepId"] = self.step_id
        return result


class Trace:
    """Trace collector for one program run.

    Records:
    - Variable bindings
    - Workflow and step entry
    - Command dispatch and handler output
    - Branch decisions
    """

    def __init__(self, echo: bool = False):
        """Initialize the trace.

        Args:
            echo: Also print each line to stdout as it is recorded
        """
        self.echo = echo
        self.events: list[TraceEvent] = []
        self._workflow: str | None = None
        self._step_id: StepId | None = None
        self._depth = 0

    def _log(self, event_type: str, message: str, depth: int | None = None) -> None:
        """Record a trace event."""
        event = TraceEvent(
            event_type=event_type,
            message=message,
            workflow=self._workflow,
            step_id=self._step_id,
            depth=self._depth if depth is None else depth,
        )
        self.events.append(event)
        logger.debug("%s: %s", event_type, message)
        if self.echo:
            print(event.line)

    @property
    def lines(self) -> list[str]:
        """All recorded lines, in order."""
        return [event.line for event in self.events]

    def log_variable(self, keyword: str, name: str, value: str) -> None:
        """Log a variable binding."""
        self._log("variable.bound", f"Variable '{name}' = '{value}' ({keyword})", depth=0)

    def log_workflow_start(self, name: str) -> None:
        """Log entry into a workflow."""
        self._workflow = name
        self._step_id = None
        self._depth = 0
        self._log("workflow.start", f"Executing workflow: {name}")

    def log_step_start(self, step_id: StepId) -> None:
        """Log entry into a step; nested output is indented beneath it."""
        self._step_id = step_id
        self._depth += 1
        self._log("step.start", f"Step {step_id}:")

    def log_step_end(self) -> None:
        """Close the indentation opened by :meth:`log_step_start`."""
        self._depth = max(self._depth - 1, 0)

    def log_command(self, name: str, args: list[str]) -> None:
        """Log a command dispatch with its evaluated arguments."""
        rendered = ", ".join(repr(a) for a in args)
        self._log("command.dispatch", f"Command: {name}({rendered})", depth=self._depth + 1)

    def emit(self, line: str) -> None:
        """Record a line produced by a command handler."""
        self._log("command.output", line, depth=self._depth + 1)

    def log_unknown_command(self, name: str) -> None:
        """Log a command with no registered handler."""
        self._log("command.unknown", f"Unknown command: {name}", depth=self._depth + 1)

    def log_branch(self, taken: bool, has_else: bool) -> None:
        """Log a conditional's decision."""
        if taken:
            message = "Condition is true, executing if block"
        elif has_else:
            message = "Condition is false, executing else block"
        else:
            message = "Condition is false, skipping"
        self._log("branch.taken", message, depth=self._depth + 1)
