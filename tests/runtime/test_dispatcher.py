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

"""Tests for the command registry."""

import logging

import pytest

from tradeflow.runtime import CommandHandler, CommandRegistry, StepResult


def _echo(args, emit):
    emit("echo: " + "|".join(args))
    return StepResult.ok("|".join(args), "echoed")


def _quiet(args, emit):
    return StepResult.ok("", "quiet")


@pytest.fixture
def registry():
    return CommandRegistry({"echo": _echo})


class TestCommandRegistry:
    """Tests for CommandRegistry."""

    def test_dispatch(self, registry):
        lines = []
        result = registry.dispatch("echo", ["a", "b"], lines.append)
        assert result == StepResult.ok("a|b", "echoed")
        assert lines == ["echo: a|b"]

    def test_dispatch_unknown_returns_none(self, registry):
        lines = []
        assert registry.dispatch("missing", ["a"], lines.append) is None
        assert lines == []

    def test_can_dispatch(self, registry):
        assert registry.can_dispatch("echo")
        assert not registry.can_dispatch("missing")
        assert "echo" in registry
        assert "missing" not in registry

    def test_register_and_replace(self, registry, caplog):
        registry.register("quiet", _quiet)
        assert registry.names() == ["echo", "quiet"]
        with caplog.at_level(logging.DEBUG, logger="tradeflow.runtime.dispatcher"):
            registry.register("echo", _quiet)
        assert "Replacing handler for command echo" in caplog.text
        assert registry.dispatch("echo", [], lambda line: None).message == "quiet"

    def test_unregister(self, registry):
        assert registry.unregister("echo") is True
        assert registry.unregister("echo") is False
        assert len(registry) == 0

    def test_copy_is_independent(self, registry):
        clone = registry.copy()
        clone.register("quiet", _quiet)
        assert "quiet" not in registry
        assert len(clone) == 2

    def test_without(self, registry):
        registry.register("quiet", _quiet)
        trimmed = registry.without(["echo", "not-there"])
        assert trimmed.names() == ["quiet"]
        assert registry.names() == ["echo", "quiet"]

    def test_constructor_copies_mapping(self):
        handlers = {"echo": _echo}
        registry = CommandRegistry(handlers)
        handlers["quiet"] = _quiet
        assert "quiet" not in registry

    def test_handler_protocol(self):
        assert isinstance(_echo, CommandHandler)

    def test_handler_exceptions_propagate(self, registry):
        def broken(args, emit):
            raise ValueError("handler bug")

        registry.register("broken", broken)
        with pytest.raises(ValueError, match="handler bug"):
            registry.dispatch("broken", [], lambda line: None)
