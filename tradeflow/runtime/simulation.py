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

"""Simulated command handlers.

Deterministic, zero-latency stand-ins for the external services a
production runtime would call (HTTP fetch, email, notifications, AI
generation). Every handler succeeds with status 200; missing arguments
fall back to the defaults in :class:`~tradeflow.config.SimulationConfig`.
"""

import json

from ..config import SimulationConfig
from .dispatcher import CommandHandler, CommandRegistry
from .types import Emit, StepResult


def _arg(args: list[str], index: int, default: str) -> str:
    return args[index] if index < len(args) else default


def _payload(**fields: object) -> str:
    return json.dumps(fields)


class SimulatedCommands:
    """The reference command set, parameterised by simulation defaults."""

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or SimulationConfig()

    def handlers(self) -> dict[str, CommandHandler]:
        """Map of command name to bound handler."""
        return {
            "print": self.print,
            "log": self.log,
            "notify": self.notify,
            "fetch": self.fetch,
            "send_email": self.send_email,
            "input": self.input,
            "generate": self.generate,
            "output": self.output,
            "transform": self.transform,
            "validate": self.validate,
        }

    # -- Messaging ----------------------------------------------------------

    def print(self, args: list[str], emit: Emit) -> StepResult:
        message = " ".join(args)
        emit(f"Print: {message}")
        return StepResult.ok(message, "Print executed successfully")

    def log(self, args: list[str], emit: Emit) -> StepResult:
        message = " ".join(args)
        emit(f"Log: {message}")
        return StepResult.ok(message, "Log executed successfully")

    def notify(self, args: list[str], emit: Emit) -> StepResult:
        message = " ".join(args)
        emit(f"Notify: {message}")
        return StepResult.ok(message, "Notification sent successfully")

    def send_email(self, args: list[str], emit: Emit) -> StepResult:
        to = _arg(args, 0, self.config.email_default_to)
        subject = _arg(args, 1, self.config.email_default_subject)
        emit(f"Send Email: {to} - {subject}")
        return StepResult.ok(f"Email sent to {to}", "Email sent successfully")

    # -- Network ------------------------------------------------------------

    def fetch(self, args: list[str], emit: Emit) -> StepResult:
        url = _arg(args, 0, self.config.fetch_default_url)
        emit(f"Fetch: {url}")
        return StepResult.ok(_payload(data=f"Sample data from {url}"), "Fetch completed successfully")

    # -- AI workflow --------------------------------------------------------

    def input(self, args: list[str], emit: Emit) -> StepResult:
        variable = _arg(args, 0, "user_input")
        input_type = _arg(args, 1, "text")
        placeholder = _arg(args, 2, "Enter value")
        emit(f"Input: Collect '{variable}' as {input_type} ({placeholder})")
        return StepResult.ok(
            _payload(variable=variable, type=input_type, placeholder=placeholder),
            "Input collected successfully",
        )

    def generate(self, args: list[str], emit: Emit) -> StepResult:
        prompt = _arg(args, 0, "Generate content")
        model = _arg(args, 1, self.config.generate_default_model)
        temperature = _arg(args, 2, self.config.generate_default_temperature)
        emit(f"Generate: Using {model} (temp: {temperature}) with prompt: '{prompt}'")
        return StepResult.ok(
            _payload(
                content=f"Generated content for: {prompt}",
                model=model,
                temperature=temperature,
            ),
            "Content generated successfully",
        )

    def output(self, args: list[str], emit: Emit) -> StepResult:
        data = _arg(args, 0, "data")
        fmt = _arg(args, 1, "text")
        filename = _arg(args, 2, "output")
        emit(f"Output: Export {data} as {fmt} to {filename}")
        return StepResult.ok(
            _payload(exported=data, format=fmt, file=filename),
            "Output exported successfully",
        )

    def transform(self, args: list[str], emit: Emit) -> StepResult:
        data = _arg(args, 0, "data")
        transformation = _arg(args, 1, "format")
        emit(f"Transform: Apply {transformation} to {data}")
        return StepResult.ok(
            _payload(transformed=data, type=transformation),
            "Data transformed successfully",
        )

    def validate(self, args: list[str], emit: Emit) -> StepResult:
        data = _arg(args, 0, "data")
        validation_type = _arg(args, 1, "required")
        emit(f"Validate: Check {data} for {validation_type}")
        return StepResult.ok(
            _payload(validated=data, type=validation_type, valid=True),
            "Validation completed successfully",
        )


def default_registry(config: SimulationConfig | None = None) -> CommandRegistry:
    """Build a registry holding the simulated command set.

    Commands listed in ``config.disabled_commands`` are left out and so
    degrade to the unknown-command result at run time.
    """
    commands = SimulatedCommands(config)
    registry = CommandRegistry(commands.handlers())
    return registry.without(commands.config.disabled_commands)
