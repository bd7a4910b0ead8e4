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

"""TradeFlow configuration management.

Provides configuration dataclasses for the executor, the simulated
command set and the validator, and a loader that reads from config files
or environment variables.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


@dataclass
class ExecutorConfig:
    """Executor settings.

    Attributes:
        echo_trace: Print each trace line to stdout as it is produced
    """

    echo_trace: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExecutorConfig:
        """Create from a dictionary."""
        return cls(echo_trace=data.get("echo_trace", cls.echo_trace))

    @classmethod
    def from_env(cls) -> ExecutorConfig:
        """Create from environment variables.

        Recognised variables (all optional):
            TRADEFLOW_ECHO_TRACE  ("true"/"1" to enable)
        """
        return cls(echo_trace=_env_flag("TRADEFLOW_ECHO_TRACE", cls.echo_trace))


@dataclass
class SimulationConfig:
    """Defaults used by the simulated commands when arguments are omitted.

    Attributes:
        fetch_default_url: URL used by ``fetch()`` with no arguments
        email_default_to: Recipient used by ``send_email()`` with no arguments
        email_default_subject: Subject used when ``send_email`` has one argument
        generate_default_model: Model name reported by ``generate``
        generate_default_temperature: Temperature reported by ``generate``
        disabled_commands: Commands left out of the default registry
    """

    fetch_default_url: str = "https://api.example.com"
    email_default_to: str = "user@example.com"
    email_default_subject: str = "Notification"
    generate_default_model: str = "mistral-small-latest"
    generate_default_temperature: str = "0.7"
    disabled_commands: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationConfig:
        """Create from a dictionary."""
        return cls(
            fetch_default_url=data.get("fetch_default_url", cls.fetch_default_url),
            email_default_to=data.get("email_default_to", cls.email_default_to),
            email_default_subject=data.get("email_default_subject", cls.email_default_subject),
            generate_default_model=data.get("generate_default_model", cls.generate_default_model),
            generate_default_temperature=str(
                data.get("generate_default_temperature", cls.generate_default_temperature)
            ),
            disabled_commands=list(data.get("disabled_commands", [])),
        )

    @classmethod
    def from_env(cls) -> SimulationConfig:
        """Create from environment variables.

        Recognised variables (all optional):
            TRADEFLOW_FETCH_DEFAULT_URL
            TRADEFLOW_EMAIL_DEFAULT_TO
            TRADEFLOW_EMAIL_DEFAULT_SUBJECT
            TRADEFLOW_GENERATE_DEFAULT_MODEL
            TRADEFLOW_GENERATE_DEFAULT_TEMPERATURE
            TRADEFLOW_DISABLED_COMMANDS  (comma-separated list)
        """
        defaults = cls()
        disabled = os.environ.get("TRADEFLOW_DISABLED_COMMANDS", "")
        return cls(
            fetch_default_url=os.environ.get(
                "TRADEFLOW_FETCH_DEFAULT_URL", defaults.fetch_default_url
            ),
            email_default_to=os.environ.get("TRADEFLOW_EMAIL_DEFAULT_TO", defaults.email_default_to),
            email_default_subject=os.environ.get(
                "TRADEFLOW_EMAIL_DEFAULT_SUBJECT", defaults.email_default_subject
            ),
            generate_default_model=os.environ.get(
                "TRADEFLOW_GENERATE_DEFAULT_MODEL", defaults.generate_default_model
            ),
            generate_default_temperature=os.environ.get(
                "TRADEFLOW_GENERATE_DEFAULT_TEMPERATURE", defaults.generate_default_temperature
            ),
            disabled_commands=[c.strip() for c in disabled.split(",") if c.strip()],
        )


@dataclass
class ValidationConfig:
    """Validator settings.

    Attributes:
        enabled: Run static validation before execution (CLI only)
        warnings_as_errors: Promote validation warnings to errors
    """

    enabled: bool = True
    warnings_as_errors: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationConfig:
        """Create from a dictionary."""
        return cls(
            enabled=data.get("enabled", cls.enabled),
            warnings_as_errors=data.get("warnings_as_errors", cls.warnings_as_errors),
        )

    @classmethod
    def from_env(cls) -> ValidationConfig:
        """Create from environment variables.

        Recognised variables (all optional):
            TRADEFLOW_VALIDATE  ("false"/"0" to disable)
            TRADEFLOW_WARNINGS_AS_ERRORS  ("true"/"1" to enable)
        """
        return cls(
            enabled=_env_flag("TRADEFLOW_VALIDATE", cls.enabled),
            warnings_as_errors=_env_flag("TRADEFLOW_WARNINGS_AS_ERRORS", cls.warnings_as_errors),
        )


@dataclass
class TradeFlowConfig:
    """Top-level TradeFlow configuration.

    Attributes:
        executor: Executor settings
        simulation: Simulated command defaults
        validation: Validator settings
    """

    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return {
            "executor": self.executor.to_dict(),
            "simulation": self.simulation.to_dict(),
            "validation": self.validation.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TradeFlowConfig:
        """Create from a dictionary (e.g. parsed JSON)."""
        return cls(
            executor=ExecutorConfig.from_dict(data.get("executor", {})),
            simulation=SimulationConfig.from_dict(data.get("simulation", {})),
            validation=ValidationConfig.from_dict(data.get("validation", {})),
        )

    @classmethod
    def from_env(cls) -> TradeFlowConfig:
        """Create from environment variables."""
        return cls(
            executor=ExecutorConfig.from_env(),
            simulation=SimulationConfig.from_env(),
            validation=ValidationConfig.from_env(),
        )


# -- Config file loading -----------------------------------------------------

DEFAULT_CONFIG_FILENAME = "tradeflow.config.json"

_SEARCH_PATHS = [
    Path.cwd,  # current directory
    lambda: Path.home() / ".tradeflow",  # user home
    lambda: Path("/etc/tradeflow"),  # system-wide
]


def _find_config_file(filename: str = DEFAULT_CONFIG_FILENAME) -> Path | None:
    """Search well-known locations for a config file.

    Search order:
        1. ``$TRADEFLOW_CONFIG`` environment variable (explicit path)
        2. Current working directory
        3. ``~/.tradeflow/``
        4. ``/etc/tradeflow/``

    Returns:
        Path to the first config file found, or ``None``.
    """
    explicit = os.environ.get("TRADEFLOW_CONFIG")
    if explicit:
        path = Path(explicit)
        if path.is_file():
            return path
        return None

    for path_fn in _SEARCH_PATHS:
        candidate = path_fn() / filename
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str | Path | None = None) -> TradeFlowConfig:
    """Load TradeFlow configuration.

    Resolution order:
        1. Explicit *path* argument
        2. Config file found via :func:`_find_config_file`
        3. Environment variables (``TRADEFLOW_*``)
        4. Built-in defaults

    Args:
        path: Optional explicit path to a JSON config file.

    Returns:
        Populated :class:`TradeFlowConfig` instance.
    """
    config_path: Path | None = Path(path) if path else _find_config_file()

    if config_path and config_path.is_file():
        data = json.loads(config_path.read_text())
        return TradeFlowConfig.from_dict(data)

    return TradeFlowConfig.from_env()
