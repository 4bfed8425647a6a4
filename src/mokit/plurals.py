"""Plural-Forms expressions: parsing, evaluation and slot selection.

A catalog header declares how counts map to plural slots, for example::

    Plural-Forms: nplurals=3; plural=n%10==1 && n%100!=11 ? 0 : n%10>=2 && n%10<=4 && (n%100<10 || n%100>=20) ? 1 : 2;

The ``plural=`` part is a C expression over the single variable ``n``. It is
converted once to postfix with the shunting-yard algorithm and then run on a
small stack machine for each distinct count.

Operator precedence, highest first::

    %
    <  <=  >  >=
    ==  !=
    &&
    ||
    ?:
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import NamedTuple

from mokit.constants import DEFAULT_PLURAL_FORMS, PLURAL_FORMS_PREFIX
from mokit.exceptions import PluralEvalError, PluralExpressionError, PluralSyntaxError
from mokit.logging_config import get_logger

logger = get_logger(__name__)

OPERATOR_CHARS = "|&><!=%?:"

PRECEDENCE = {
    "%": 6,
    "<": 5,
    "<=": 5,
    ">": 5,
    ">=": 5,
    "==": 4,
    "!=": 4,
    "&&": 3,
    "||": 2,
    "?:": 1,
    "?": 1,
    "(": 0,
    ")": 0,
}

TERNARY_OPERATORS = ("?", "?:")

# Characters kept by sanitize_expression()
_DISALLOWED_CHARS = re.compile(r"[^n0-9:()?=!<>/%&| ]")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class Token(NamedTuple):
    """One postfix token: ``var`` (n), ``value`` (literal) or ``op``."""

    kind: str
    value: int | str | None = None


def _c_mod(a: int, b: int) -> int:
    """Remainder with the sign of the dividend, as in C."""
    remainder = abs(a) % abs(b)
    return -remainder if a < 0 else remainder


BINARY_OPERATORS = {
    "%": _c_mod,
    "<": lambda a, b: int(a < b),
    "<=": lambda a, b: int(a <= b),
    ">": lambda a, b: int(a > b),
    ">=": lambda a, b: int(a >= b),
    "==": lambda a, b: int(a == b),
    "!=": lambda a, b: int(a != b),
    "&&": lambda a, b: int(bool(a) and bool(b)),
    "||": lambda a, b: int(bool(a) or bool(b)),
}


def _operator_span(expr: str, pos: int) -> int:
    end = pos
    while end < len(expr) and expr[end] in OPERATOR_CHARS:
        end += 1
    return end - pos


def _digit_span(expr: str, pos: int) -> int:
    end = pos
    while end < len(expr) and expr[end].isdigit():
        end += 1
    return end - pos


def parse_expression(expr: str) -> list[Token]:
    """Convert an infix Plural-Forms expression to postfix tokens.

    Raises:
        PluralSyntaxError: On unknown symbols or operators, mismatched
            parentheses, or a ``:`` without a matching ``?``
    """
    output: list[Token] = []
    stack: list[str] = []
    pos = 0
    length = len(expr)

    while pos < length:
        char = expr[pos]

        if char.isspace():
            pos += 1

        elif char == "n":
            output.append(Token("var"))
            pos += 1

        elif char == "(":
            stack.append(char)
            pos += 1

        elif char == ")":
            while stack and stack[-1] != "(":
                output.append(Token("op", stack.pop()))
            if not stack:
                raise PluralSyntaxError("Mismatched parentheses", context={"position": pos})
            stack.pop()
            pos += 1

        elif char == ":":
            # Close the nearest open "?" in place; it becomes the ternary operator
            index = len(stack) - 1
            while index >= 0 and stack[index] != "?":
                output.append(Token("op", stack.pop()))
                index -= 1
            if index < 0:
                raise PluralSyntaxError(
                    'Missing starting "?" ternary operator', context={"position": pos}
                )
            stack[index] = "?:"
            pos += 1

        elif char in OPERATOR_CHARS:
            span = _operator_span(expr, pos)
            operator = expr[pos:pos + span]
            if operator not in PRECEDENCE:
                raise PluralSyntaxError(
                    f'Unknown operator "{operator}"', context={"position": pos}
                )
            precedence = PRECEDENCE[operator]
            while stack:
                top = PRECEDENCE[stack[-1]]
                # Ternary is right-associative, everything else left-associative
                if operator in TERNARY_OPERATORS:
                    if precedence >= top:
                        break
                elif precedence > top:
                    break
                output.append(Token("op", stack.pop()))
            stack.append(operator)
            pos += span

        elif char.isdigit():
            span = _digit_span(expr, pos)
            output.append(Token("value", int(expr[pos:pos + span])))
            pos += span

        else:
            raise PluralSyntaxError(f'Unknown symbol "{char}"', context={"position": pos})

    while stack:
        operator = stack.pop()
        if operator in ("(", ")"):
            raise PluralSyntaxError("Mismatched parentheses", context={"position": length})
        output.append(Token("op", operator))

    return output


def evaluate_tokens(tokens: list[Token], n: int) -> int:
    """Run postfix tokens for the count ``n``.

    Raises:
        PluralEvalError: On unknown operators, stack underflow, leftover
            values, or arithmetic errors such as ``n % 0``
    """
    stack: list[int] = []
    for token in tokens:
        if token.kind == "var":
            stack.append(n)
            continue
        if token.kind == "value":
            stack.append(token.value)
            continue

        operator = token.value
        try:
            if operator == "?:":
                otherwise = stack.pop()
                then = stack.pop()
                condition = stack.pop()
                stack.append(then if condition else otherwise)
            elif operator in BINARY_OPERATORS:
                right = stack.pop()
                left = stack.pop()
                stack.append(BINARY_OPERATORS[operator](left, right))
            else:
                raise PluralEvalError(f'Unknown operator "{operator}"')
        except IndexError:
            raise PluralEvalError(
                f'Not enough values on the stack for "{operator}"', context={"n": n}
            )
        except (ArithmeticError, TypeError) as e:
            raise PluralEvalError(f'Cannot evaluate "{operator}": {e}', context={"n": n}) from e

    if len(stack) != 1:
        raise PluralEvalError(
            "Expression must leave exactly one value on the stack",
            context={"n": n, "remaining": len(stack)},
        )
    return int(stack[0])


class PluralExpression:
    """A Plural-Forms expression with parsed tokens and per-count results.

    Parsing happens on first use. Neither the tokens nor the per-count cache
    are guarded by a lock; share one instance across threads only once it
    has been warmed up, or serialize access.
    """

    def __init__(self, expr: str):
        self.expr = expr
        self._tokens: list[Token] | None = None
        self._cache: dict[int, int] = {}

    def __repr__(self) -> str:
        return f"PluralExpression({self.expr!r})"

    @property
    def tokens(self) -> list[Token]:
        if self._tokens is None:
            self._tokens = parse_expression(self.expr)
        return self._tokens

    def evaluate(self, n: int) -> int:
        if n not in self._cache:
            self._cache[n] = evaluate_tokens(self.tokens, n)
        return self._cache[n]


def extract_plural_forms(header: str) -> str:
    """Return the value of the last ``Plural-Forms:`` header line.

    Lines are matched case-insensitively at the start of the line only.
    Without such a line the Germanic default is returned.
    """
    forms = DEFAULT_PLURAL_FORMS
    for line in header.split("\n"):
        if line.lower().startswith(PLURAL_FORMS_PREFIX):
            forms = line[len(PLURAL_FORMS_PREFIX):]
    return forms


def sanitize_expression(forms: str) -> str:
    """Reduce a Plural-Forms value to its bare ``plural`` expression.

    >>> sanitize_expression("nplurals=2; plural=n == 1 ? 0 : 1;")
    'n == 1 ? 0 : 1'
    """
    parts = forms.split(";")
    expr = parts[1] if len(parts) >= 2 else parts[0]
    expr = expr.lower().strip()
    if expr.startswith("plural"):
        expr = expr[len("plural"):].lstrip()
    if expr.startswith("="):
        expr = expr[1:].lstrip()
    return _DISALLOWED_CHARS.sub("", expr)


def extract_plural_count(forms: str) -> int:
    """Return ``nplurals`` from a Plural-Forms value, 1 if absent."""
    first = forms.split(";", 1)[0].strip()
    key, separator, value = first.partition("=")
    if key.rstrip().lower() != "nplurals" or not separator:
        return 1
    match = _LEADING_INT.match(value)
    if not match:
        return 1
    return max(1, int(match.group(1)))


@dataclass
class PluralRule:
    """Number of plural slots plus the expression choosing among them."""

    nplurals: int = 2
    expression: PluralExpression = field(
        default_factory=lambda: PluralExpression(sanitize_expression(DEFAULT_PLURAL_FORMS))
    )

    def __post_init__(self):
        self.nplurals = max(1, self.nplurals)

    @classmethod
    def from_plural_forms(cls, forms: str) -> "PluralRule":
        """Build a rule from a value such as ``nplurals=2; plural=n != 1;``."""
        return cls(
            nplurals=extract_plural_count(forms),
            expression=PluralExpression(sanitize_expression(forms)),
        )

    @classmethod
    def from_header(cls, header: str) -> "PluralRule":
        """Build a rule from a whole catalog header entry."""
        return cls.from_plural_forms(extract_plural_forms(header))

    def resolve(self, n: int) -> int:
        """Return the slot index for ``n``, always within ``[0, nplurals - 1]``.

        A broken expression selects slot 0 instead of raising.
        """
        try:
            slot = self.expression.evaluate(n)
        except PluralExpressionError as e:
            logger.debug("Plural expression %r failed for n=%r: %s", self.expression.expr, n, e)
            slot = 0
        if slot >= self.nplurals:
            return self.nplurals - 1
        return max(slot, 0)
