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

"""TradeFlow workflow language interpreter package."""

from .ast import (
    ASTNode,
    BinaryExpression,
    Command,
    Conditional,
    Expression,
    Identifier,
    NumberLiteral,
    Program,
    PropertyAccess,
    SourceLocation,
    Step,
    StepContent,
    StepReference,
    StringLiteral,
    VariableDeclaration,
    Workflow,
)
from .ast_utils import describe_steps, find_workflow, iter_steps
from .config import (
    ExecutorConfig,
    SimulationConfig,
    TradeFlowConfig,
    ValidationConfig,
    load_config,
)
from .errors import TradeFlowError
from .lexer import LexError, Lexer, Token, TokenType, tokenize
from .parser import ParseError, Parser, parse, parse_file, parse_source
from .runtime import (
    CommandRegistry,
    Executor,
    RuntimeError,
    StepNotFoundError,
    StepResult,
    UndefinedVariableError,
    UnknownOperatorError,
    default_registry,
    run_source,
)
from .validator import ValidationError, ValidationResult, WorkflowValidator, validate

__version__ = "0.3.0"

__all__ = [
    # Errors
    "TradeFlowError",
    "LexError",
    "ParseError",
    "RuntimeError",
    "UndefinedVariableError",
    "StepNotFoundError",
    "UnknownOperatorError",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    "parse_source",
    "parse_file",
    # AST utilities
    "iter_steps",
    "find_workflow",
    "describe_steps",
    # Validator
    "WorkflowValidator",
    "ValidationResult",
    "ValidationError",
    "validate",
    # Configuration
    "TradeFlowConfig",
    "ExecutorConfig",
    "SimulationConfig",
    "ValidationConfig",
    "load_config",
    # Runtime
    "Executor",
    "run_source",
    "CommandRegistry",
    "default_registry",
    "StepResult",
    # AST nodes
    "Program",
    "Workflow",
    "Step",
    "StepContent",
    "Command",
    "Conditional",
    "VariableDeclaration",
    "Expression",
    "StringLiteral",
    "NumberLiteral",
    "Identifier",
    "BinaryExpression",
    "PropertyAccess",
    "StepReference",
    "SourceLocation",
    "ASTNode",
]
