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

"""TradeFlow recursive-descent parser.

Grammar::

    Program      := (VariableDecl | Workflow)*
    Workflow     := "workflow" STRING "{" Step* "}"
    Step         := "step" NUMBER ":" (Conditional | Command)
    Command      := NAME [ "(" (Expr ("," Expr)*)? ")" ]
    Conditional  := "if" "(" Expr ")" "{" Step* "}" [ "else" "{" Step* "}" ]
    VariableDecl := ("let" | "var" | "const") IDENT "=" Expr
    Expr         := Primary (BINOP Primary)*
    Primary      := STRING | NUMBER
                  | IDENT [ "." IDENT ]
                  | "step" NUMBER [ "." IDENT ]

One token of lookahead, no backtracking and no error recovery: the first
unexpected token raises :class:`ParseError`.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .ast import (
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
    StepReference,
    StringLiteral,
    VariableDeclaration,
    Workflow,
)
from .errors import SourceError
from .lexer import COMMAND_KEYWORDS, Token, TokenType, tokenize


class ParseError(SourceError):
    """Unexpected or missing token for the current grammar production."""


_DECLARATION_KEYWORDS = {
    TokenType.LET: "let",
    TokenType.VAR: "var",
    TokenType.CONST: "const",
}

_BINARY_OPERATORS = frozenset(
    {
        TokenType.PLUS,
        TokenType.EQUAL_EQUAL,
        TokenType.NOT_EQUAL,
        TokenType.GREATER,
        TokenType.LESS,
        TokenType.GREATER_EQUAL,
        TokenType.LESS_EQUAL,
    }
)


class Parser:
    """Builds a :class:`Program` from a token list."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        if not tokens or tokens[-1].type is not TokenType.EOF:
            last_line = tokens[-1].line if tokens else 1
            tokens = [*tokens, Token(TokenType.EOF, "", None, last_line)]
        self._tokens = list(tokens)
        self._current = 0

    def parse(self) -> Program:
        """Parse the whole token list.

        Returns:
            Program AST node

        Raises:
            ParseError: On the first grammar violation
        """
        variables: list[VariableDeclaration] = []
        workflows: list[Workflow] = []

        while not self._is_at_end():
            token = self._peek()
            if token.type is TokenType.WORKFLOW:
                workflows.append(self._workflow())
            elif token.type in _DECLARATION_KEYWORDS:
                variables.append(self._variable_declaration())
            else:
                raise self._error("Expected workflow or variable declaration")

        return Program(tuple(variables), tuple(workflows), location=SourceLocation(1))

    # -- Declarations -------------------------------------------------------

    def _workflow(self) -> Workflow:
        keyword = self._consume(TokenType.WORKFLOW, "Expected 'workflow'")
        name = self._consume(TokenType.STRING, "Expected workflow name string")
        self._consume(TokenType.LEFT_BRACE, "Expected '{' after workflow name")
        steps = self._step_block("Expected '}' after workflow body")
        return Workflow(name.literal or "", steps, location=_loc(keyword))

    def _variable_declaration(self) -> VariableDeclaration:
        keyword = self._advance()
        name = self._consume(TokenType.IDENTIFIER, "Expected variable name")
        self._consume(TokenType.EQUAL, "Expected '=' after variable name")
        value = self._expression()
        return VariableDeclaration(
            _DECLARATION_KEYWORDS[keyword.type],
            name.lexeme,
            value,
            location=_loc(keyword),
        )

    # -- Steps --------------------------------------------------------------

    def _step_block(self, closing_message: str) -> tuple[Step, ...]:
        """Parse ``Step*`` up to and including the closing brace."""
        steps: list[Step] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            steps.append(self._step())
        self._consume(TokenType.RIGHT_BRACE, closing_message)
        return tuple(steps)

    def _step(self) -> Step:
        keyword = self._consume(TokenType.STEP, "Expected 'step'")
        step_id = self._step_number("Expected step number")
        self._consume(TokenType.COLON, "Expected ':' after step number")

        if self._check(TokenType.IF):
            content: Command | Conditional = self._conditional()
        else:
            content = self._command()
        return Step(step_id, content, location=_loc(keyword))

    def _command(self) -> Command:
        token = self._peek()
        if token.type is not TokenType.IDENTIFIER and token.type not in COMMAND_KEYWORDS:
            raise self._error("Expected command name")
        self._advance()

        arguments: tuple[Expression, ...] = ()
        if self._match(TokenType.LEFT_PAREN):
            arguments = self._argument_list()
            self._consume(TokenType.RIGHT_PAREN, "Expected ')' after command arguments")
        return Command(token.lexeme, arguments, location=_loc(token))

    def _argument_list(self) -> tuple[Expression, ...]:
        arguments: list[Expression] = []
        if not self._check(TokenType.RIGHT_PAREN):
            arguments.append(self._expression())
            while self._match(TokenType.COMMA):
                arguments.append(self._expression())
        return tuple(arguments)

    def _conditional(self) -> Conditional:
        keyword = self._consume(TokenType.IF, "Expected 'if'")
        self._consume(TokenType.LEFT_PAREN, "Expected '(' after 'if'")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expected ')' after condition")

        self._consume(TokenType.LEFT_BRACE, "Expected '{' after condition")
        if_steps = self._step_block("Expected '}' after if block")

        else_steps: tuple[Step, ...] | None = None
        if self._match(TokenType.ELSE):
            self._consume(TokenType.LEFT_BRACE, "Expected '{' after 'else'")
            else_steps = self._step_block("Expected '}' after else block")

        return Conditional(condition, if_steps, else_steps, location=_loc(keyword))

    # -- Expressions --------------------------------------------------------

    def _expression(self) -> Expression:
        left = self._primary()
        while self._peek().type in _BINARY_OPERATORS:
            operator = self._advance()
            right = self._primary()
            left = BinaryExpression(left, operator.lexeme, right, location=_loc(operator))
        return left

    def _primary(self) -> Expression:
        token = self._peek()

        if token.type is TokenType.STRING:
            self._advance()
            return StringLiteral(token.literal or "", location=_loc(token))

        if token.type is TokenType.NUMBER:
            self._advance()
            return NumberLiteral(float(token.lexeme), location=_loc(token))

        if token.type is TokenType.IDENTIFIER:
            self._advance()
            identifier = Identifier(token.lexeme, location=_loc(token))
            if self._match(TokenType.DOT):
                prop = self._consume(TokenType.IDENTIFIER, "Expected property name after '.'")
                return PropertyAccess(identifier, prop.lexeme, location=_loc(token))
            return identifier

        if token.type is TokenType.STEP:
            self._advance()
            step_id = self._step_number("Expected step number after 'step'")
            prop_name: str | None = None
            if self._match(TokenType.DOT):
                prop = self._consume(TokenType.IDENTIFIER, "Expected property name after '.'")
                prop_name = prop.lexeme
            return StepReference(step_id, prop_name, location=_loc(token))

        raise self._error("Expected expression")

    # -- Token helpers ------------------------------------------------------

    def _step_number(self, message: str) -> int:
        token = self._consume(TokenType.NUMBER, message)
        if not token.lexeme.isdigit():
            raise ParseError(f"Step number must be an integer, got '{token.lexeme}'", token.line)
        return int(token.lexeme)

    def _advance(self) -> Token:
        token = self._tokens[self._current]
        if not self._is_at_end():
            self._current += 1
        return token

    def _peek(self) -> Token:
        return self._tokens[self._current]

    def _check(self, token_type: TokenType) -> bool:
        return self._peek().type is token_type

    def _match(self, token_type: TokenType) -> bool:
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise self._error(message)

    def _is_at_end(self) -> bool:
        return self._peek().type is TokenType.EOF

    def _error(self, message: str) -> ParseError:
        token = self._peek()
        found = "end of input" if token.type is TokenType.EOF else f"'{token.lexeme}'"
        return ParseError(f"{message}, found {found}", token.line)


def _loc(token: Token) -> SourceLocation:
    return SourceLocation(token.line)


def parse(tokens: Sequence[Token]) -> Program:
    """Parse a token list into a Program AST."""
    return Parser(tokens).parse()


def parse_source(source: str) -> Program:
    """Tokenize and parse TradeFlow source text.

    Raises:
        LexError: If tokenization fails (parsing is never attempted)
        ParseError: If the token stream violates the grammar
    """
    return parse(tokenize(source))


def parse_file(filepath: str | Path) -> Program:
    """Read and parse a TradeFlow file.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    return parse_source(Path(filepath).read_text())
