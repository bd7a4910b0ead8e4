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

"""Tests for the TradeFlow validator."""

import pytest

from tradeflow import parse_source
from tradeflow.config import TradeFlowConfig, ValidationConfig
from tradeflow.runtime import CommandRegistry, StepResult
from tradeflow.validator import ValidationError, ValidationResult, WorkflowValidator, validate


def messages(items: list[ValidationError]) -> list[str]:
    return [str(item) for item in items]


@pytest.fixture
def validator():
    """Create a validator that knows the print/fetch commands."""
    return WorkflowValidator({"print", "fetch", "notify"})


class TestValidPrograms:
    """Programs with nothing to report."""

    def test_sample_is_valid(self, sample_source):
        result = validate(parse_source(sample_source))
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_empty_program(self):
        result = validate(parse_source(""))
        assert result.is_valid
        assert result.warnings == []


class TestStepReferences:
    """Step reference checks."""

    def test_non_existent_step(self, validator):
        result = validator.validate(parse_source('workflow "W" {\n step 1: print(step 9.data) }'))
        assert not result.is_valid
        assert messages(result.errors) == [
            'Step 1 in workflow "W" references non-existent step 9 at line 2'
        ]

    def test_self_reference(self, validator):
        result = validator.validate(parse_source('workflow "W" { step 1: print(step 1) }'))
        assert any("references itself" in m for m in messages(result.errors))

    def test_self_reference_in_condition(self, validator):
        result = validator.validate(
            parse_source('workflow "W" { step 1: if (step 1.status == 200) {} }')
        )
        assert any("references itself" in m for m in messages(result.errors))

    def test_future_reference_is_warning(self, validator):
        result = validator.validate(
            parse_source('workflow "W" { step 1: print(step 2.data) step 2: fetch("u") }')
        )
        assert result.is_valid
        assert any("references future step 2" in m for m in messages(result.warnings))

    def test_backward_reference_ok(self, validator):
        result = validator.validate(
            parse_source('workflow "W" { step 1: fetch("u") step 2: print(step 1.data) }')
        )
        assert result.errors == []
        assert result.warnings == []

    def test_reference_across_workflows(self, validator):
        result = validator.validate(
            parse_source('workflow "A" { step 1: fetch("u") } workflow "B" { step 2: print(step 1) }')
        )
        assert result.errors == []
        assert result.warnings == []

    def test_reference_into_branch(self, validator):
        source = """
        workflow "W" {
            step 1: if (flag) { step 2: fetch("u") }
            step 3: print(step 2.status)
        }
        """
        result = validator.validate(parse_source('let flag = "1"' + source))
        assert result.errors == []


class TestDuplicates:
    """Duplicate step ids."""

    def test_duplicate_in_workflow_is_warning(self, validator):
        result = validator.validate(
            parse_source('workflow "W" { step 1: print("a") step 1: print("b") }')
        )
        assert result.is_valid
        assert any("Duplicate step number 1" in m for m in messages(result.warnings))

    def test_duplicate_across_workflows(self, validator):
        result = validator.validate(
            parse_source('workflow "A" { step 1: print("a") } workflow "B" { step 1: print("b") }')
        )
        assert len(result.warnings) == 1
        assert 'first declared in workflow "A"' in str(result.warnings[0])

    def test_duplicate_inside_branch(self, validator):
        result = validator.validate(
            parse_source('workflow "W" { step 1: if (1) { step 1: print("a") } }')
        )
        assert any("Duplicate step number 1" in m for m in messages(result.warnings))

    def test_redeclared_step_reads_earlier_declaration(self, validator):
        result = validator.validate(
            parse_source('workflow "W" { step 1: fetch("u") step 1: print(step 1.status) }')
        )
        assert result.errors == []
        assert len(result.warnings) == 1
        assert "Duplicate step number 1" in str(result.warnings[0])

    def test_first_declaration_still_cannot_reference_itself(self, validator):
        result = validator.validate(
            parse_source('workflow "W" { step 1: print(step 1.data) step 1: fetch("u") }')
        )
        assert any("references itself" in m for m in messages(result.errors))


class TestVariables:
    """Variable checks."""

    def test_undeclared_variable(self, validator):
        result = validator.validate(parse_source('workflow "W" { step 1: print(missing) }'))
        assert messages(result.errors) == [
            "Step 1 in workflow \"W\" uses undeclared variable 'missing' at line 1"
        ]

    def test_undeclared_property_root(self, validator):
        result = validator.validate(parse_source('workflow "W" { step 1: print(user.email) }'))
        assert any("'user'" in m for m in messages(result.errors))

    def test_declared_after_workflow_is_fine(self, validator):
        # All declarations bind before any workflow runs
        result = validator.validate(
            parse_source('workflow "W" { step 1: print(a) } let a = "x"')
        )
        assert result.errors == []

    def test_variable_uses_later_variable(self, validator):
        result = validator.validate(parse_source('let a = b\nlet b = "x"'))
        assert messages(result.errors) == ["Variable 'a' uses 'b' before it is declared at line 1"]

    def test_variable_self_reference(self, validator):
        result = validator.validate(parse_source("let a = a"))
        assert not result.is_valid

    def test_redeclaration_reads_previous_binding(self, validator):
        result = validator.validate(parse_source('let a = "x"\nlet a = a + "y"'))
        assert result.is_valid

    def test_variable_references_step(self, validator):
        result = validator.validate(parse_source("let a = step 1.data"))
        assert any("before any step has run" in m for m in messages(result.errors))


class TestCommandsAndWorkflows:
    """Unknown commands and empty workflows."""

    def test_unknown_command_warning(self, validator):
        result = validator.validate(parse_source('workflow "W" { step 1: bogus() }'))
        assert result.is_valid
        assert messages(result.warnings) == [
            'Unknown command "bogus" in step 1 of workflow "W" at line 1'
        ]

    def test_empty_workflow_warning(self, validator):
        result = validator.validate(parse_source('workflow "Empty" {}'))
        assert messages(result.warnings) == ['Workflow "Empty" has no steps at line 1']

    def test_custom_registry(self):
        registry = CommandRegistry()
        registry.register("trade", lambda args, emit: StepResult.ok("", "done"))
        program = parse_source('workflow "W" { step 1: trade() step 2: print("x") }')
        result = validate(program, registry=registry)
        assert messages(result.warnings) == [
            'Unknown command "print" in step 2 of workflow "W" at line 1'
        ]

    def test_disabled_commands_are_unknown(self):
        config = TradeFlowConfig()
        config.simulation.disabled_commands = ["notify"]
        result = validate(parse_source('workflow "W" { step 1: notify("x") }'), config)
        assert any('Unknown command "notify"' in m for m in messages(result.warnings))


class TestWarningsAsErrors:
    """ValidationConfig.warnings_as_errors."""

    def test_promotes_warnings(self):
        config = TradeFlowConfig(validation=ValidationConfig(warnings_as_errors=True))
        result = validate(parse_source('workflow "W" {}'), config)
        assert not result.is_valid
        assert result.warnings == []
        assert messages(result.errors) == ['Workflow "W" has no steps at line 1']


class TestValidationResult:
    """Tests for the result containers."""

    def test_error_without_location(self):
        assert str(ValidationError("boom")) == "boom"

    def test_add_error_and_warning(self):
        result = ValidationResult()
        result.add_warning("careful")
        assert result.is_valid
        result.add_error("broken")
        assert not result.is_valid
        assert result.errors[0].line is None
