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

"""Tests for the simulated command set."""

import json

import pytest

from tradeflow.config import SimulationConfig
from tradeflow.runtime import SimulatedCommands, default_registry


def run(name: str, *args: str, config: SimulationConfig | None = None):
    """Dispatch one simulated command; return (result, emitted lines)."""
    lines: list[str] = []
    result = default_registry(config).dispatch(name, list(args), lines.append)
    assert result is not None
    return result, lines


class TestDefaultRegistry:
    """Tests for default_registry."""

    def test_reference_command_set(self):
        assert default_registry().names() == [
            "fetch",
            "generate",
            "input",
            "log",
            "notify",
            "output",
            "print",
            "send_email",
            "transform",
            "validate",
        ]

    def test_disabled_commands(self):
        config = SimulationConfig(disabled_commands=["fetch", "notify"])
        registry = default_registry(config)
        assert "fetch" not in registry
        assert "notify" not in registry
        assert "print" in registry

    def test_handlers_bound_to_config(self):
        commands = SimulatedCommands(SimulationConfig(fetch_default_url="https://x.local"))
        result = commands.handlers()["fetch"]([], lambda line: None)
        assert "https://x.local" in result.data


class TestMessaging:
    """print, log, notify and send_email."""

    @pytest.mark.parametrize(
        "name, message, prefix",
        [
            ("print", "Print executed successfully", "Print"),
            ("log", "Log executed successfully", "Log"),
            ("notify", "Notification sent successfully", "Notify"),
        ],
    )
    def test_joined_arguments(self, name, message, prefix):
        result, lines = run(name, "a", "b c", "d")
        assert result.success is True
        assert result.status == 200
        assert result.data == "a b c d"
        assert result.message == message
        assert lines == [f"{prefix}: a b c d"]

    def test_print_no_arguments(self):
        result, lines = run("print")
        assert result.data == ""
        assert lines == ["Print: "]

    def test_send_email(self):
        result, lines = run("send_email", "desk@example.com", "Prices")
        assert result.data == "Email sent to desk@example.com"
        assert result.message == "Email sent successfully"
        assert lines == ["Send Email: desk@example.com - Prices"]

    def test_send_email_defaults(self):
        result, lines = run("send_email")
        assert result.data == "Email sent to user@example.com"
        assert lines == ["Send Email: user@example.com - Notification"]

    def test_send_email_configured_defaults(self):
        config = SimulationConfig(email_default_to="ops@example.com", email_default_subject="Alert")
        _, lines = run("send_email", config=config)
        assert lines == ["Send Email: ops@example.com - Alert"]


class TestFetch:
    """fetch."""

    def test_fetch(self):
        result, lines = run("fetch", "https://prices.example.com")
        assert result.status == 200
        assert json.loads(result.data) == {"data": "Sample data from https://prices.example.com"}
        assert result.message == "Fetch completed successfully"
        assert lines == ["Fetch: https://prices.example.com"]

    def test_fetch_default_url(self):
        result, _ = run("fetch")
        assert json.loads(result.data)["data"] == "Sample data from https://api.example.com"

    def test_extra_arguments_ignored(self):
        result, _ = run("fetch", "u", "ignored")
        assert json.loads(result.data)["data"] == "Sample data from u"


class TestAIWorkflow:
    """input, generate, output, transform and validate."""

    def test_input(self):
        result, lines = run("input", "ticker", "text", "Enter ticker")
        assert json.loads(result.data) == {
            "variable": "ticker",
            "type": "text",
            "placeholder": "Enter ticker",
        }
        assert result.message == "Input collected successfully"
        assert lines == ["Input: Collect 'ticker' as text (Enter ticker)"]

    def test_input_defaults(self):
        result, _ = run("input")
        assert json.loads(result.data) == {
            "variable": "user_input",
            "type": "text",
            "placeholder": "Enter value",
        }

    def test_generate(self):
        result, lines = run("generate", "Summarise prices")
        payload = json.loads(result.data)
        assert payload == {
            "content": "Generated content for: Summarise prices",
            "model": "mistral-small-latest",
            "temperature": "0.7",
        }
        assert result.message == "Content generated successfully"
        assert lines == [
            "Generate: Using mistral-small-latest (temp: 0.7) with prompt: 'Summarise prices'"
        ]

    def test_generate_explicit_model(self):
        result, _ = run("generate", "p", "large", "0.1")
        payload = json.loads(result.data)
        assert payload["model"] == "large"
        assert payload["temperature"] == "0.1"

    def test_output(self):
        result, lines = run("output", "report", "pdf")
        assert json.loads(result.data) == {"exported": "report", "format": "pdf", "file": "output"}
        assert result.message == "Output exported successfully"
        assert lines == ["Output: Export report as pdf to output"]

    def test_transform(self):
        result, lines = run("transform")
        assert json.loads(result.data) == {"transformed": "data", "type": "format"}
        assert result.message == "Data transformed successfully"
        assert lines == ["Transform: Apply format to data"]

    def test_validate(self):
        result, lines = run("validate", "email", "format")
        assert json.loads(result.data) == {"validated": "email", "type": "format", "valid": True}
        assert result.message == "Validation completed successfully"
        assert lines == ["Validate: Check email for format"]

    @pytest.mark.parametrize("name", ["input", "generate", "output", "transform", "validate"])
    def test_always_succeeds(self, name):
        result, _ = run(name)
        assert result.success is True
        assert result.status == 200
