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

"""Command dispatch for step execution.

Maps command names to handlers so that new commands can be added
without touching the executor's control flow.
"""

import logging
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from .types import Emit, StepResult

logger = logging.getLogger(__name__)


@runtime_checkable
class CommandHandler(Protocol):
    """Protocol for command handlers.

    A handler is a pure function of its evaluated arguments. It may emit
    trace lines through *emit* and must return the step's result.
    """

    def __call__(self, args: list[str], emit: Emit) -> StepResult: ...


class CommandRegistry:
    """In-memory table of command handlers keyed by command name."""

    def __init__(self, handlers: dict[str, CommandHandler] | None = None) -> None:
        self._handlers: dict[str, CommandHandler] = dict(handlers or {})

    def register(self, name: str, handler: CommandHandler) -> None:
        """Register (or replace) the handler for a command.

        Args:
            name: Command name as written in workflow source
            handler: Callable ``(args, emit) -> StepResult``
        """
        if name in self._handlers:
            logger.debug("Replacing handler for command %s", name)
        self._handlers[name] = handler

    def unregister(self, name: str) -> bool:
        """Remove a command. Returns True if it was registered."""
        return self._handlers.pop(name, None) is not None

    def can_dispatch(self, name: str) -> bool:
        """Check if a handler is registered for the command."""
        return name in self._handlers

    def dispatch(self, name: str, args: list[str], emit: Emit) -> StepResult | None:
        """Invoke the registered handler.

        Returns:
            The handler's result, or ``None`` if no handler is registered
        """
        handler = self._handlers.get(name)
        if handler is None:
            return None
        return handler(args, emit)

    def names(self) -> list[str]:
        """Registered command names, sorted."""
        return sorted(self._handlers)

    def copy(self) -> "CommandRegistry":
        """Return an independent registry with the same handlers."""
        return CommandRegistry(self._handlers)

    def without(self, names: Iterable[str]) -> "CommandRegistry":
        """Return a copy with the given commands removed."""
        registry = self.copy()
        for name in names:
            registry.unregister(name)
        return registry

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
