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

"""TradeFlow runtime core type definitions."""

from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import NewType

StepId = NewType("StepId", int)

# Flat name -> value mapping; last write wins.
Environment = dict[str, str]

STATUS_OK = 200
STATUS_UNKNOWN_COMMAND = 400


@dataclass(frozen=True)
class StepResult:
    """Recorded outcome of one executed command step."""

    success: bool
    data: str
    status: int
    message: str

    @classmethod
    def ok(cls, data: str, message: str) -> "StepResult":
        """Build a successful result with status 200."""
        return cls(True, data, STATUS_OK, message)

    @classmethod
    def unknown_command(cls, name: str) -> "StepResult":
        """Build the failed result recorded for an unregistered command."""
        return cls(False, "", STATUS_UNKNOWN_COMMAND, f"Unknown command: {name}")

    def property(self, name: str | None) -> str:
        """Return a property as a string; unknown or missing names yield ``data``."""
        if name == "status":
            return str(self.status)
        if name == "message":
            return self.message
        if name == "success":
            return "true" if self.success else "false"
        return self.data

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


StepResults = dict[StepId, StepResult]

# Trace line sink passed to command handlers.
Emit = Callable[[str], None]
