"""Constant folding for ``calc()`` expressions.

``calc(calc(0.5 * 4px) + 2rem)`` becomes ``calc(2px + 2rem)`` and
``calc(1px + 2px)`` becomes ``3px``. Spans that can't be folded are
returned untouched.
"""

import math
import re
from typing import Iterator

import tinycss2
from tinycss2.ast import Node

from .expression import find_closing_paren

CALC = re.compile(r"(?<![\w-])calc\(", re.IGNORECASE)
PRECISION = 5

# unit -> coefficient, "" for plain numbers
Terms = dict[str, float]


class UnsupportedCalc(ValueError):
    pass


def normalize_calc(value: str) -> str:
    parts = []
    position = 0
    while match := CALC.search(value, position):
        end = find_closing_paren(value, match.end())
        if end == -1:
            break
        parts.append(value[position : match.start()])
        parts.append(reduce_calc(value[match.start() : end + 1]))
        position = end + 1
    parts.append(value[position:])
    return "".join(parts)


def reduce_calc(expression: str) -> str:
    node = tinycss2.parse_one_component_value(expression, skip_comments=True)
    if node.type != "function" or node.lower_name != "calc":
        return expression
    try:
        return _format(_Folder(node.arguments).fold())
    except UnsupportedCalc:
        return expression


class _Folder:
    def __init__(self, tokens: list[Node]):
        self.tokens = [token for token in tokens if token.type != "whitespace"]
        self.i = 0

    def fold(self) -> Terms:
        terms = self.sum()
        if self.i != len(self.tokens):
            raise UnsupportedCalc(f"unexpected {self.tokens[self.i].serialize()!r}")
        return terms

    def sum(self) -> Terms:
        terms = self.product()
        while operator := self._operator("+-"):
            right = self.product()
            sign = 1 if operator == "+" else -1
            terms = dict(terms)
            for unit, value in right.items():
                terms[unit] = terms.get(unit, 0) + sign * value
        return terms

    def product(self) -> Terms:
        terms = self.value()
        while operator := self._operator("*/"):
            right = self.value()
            if operator == "*":
                if _is_number(terms):
                    terms, right = right, terms
                if not _is_number(right):
                    raise UnsupportedCalc("can't multiply two dimensions")
                factor = right.get("", 0)
            else:
                if not _is_number(right) or not right.get(""):
                    raise UnsupportedCalc("divisor must be a non-zero number")
                factor = 1 / right[""]
            terms = {unit: value * factor for unit, value in terms.items()}
        return terms

    def value(self) -> Terms:
        if self.i >= len(self.tokens):
            raise UnsupportedCalc("missing operand")
        token = self.tokens[self.i]
        self.i += 1
        if token.type == "number":
            return {"": token.value}
        if token.type == "percentage":
            return {"%": token.value}
        if token.type == "dimension":
            return {token.lower_unit: token.value}
        if token.type == "() block":
            return _Folder(token.content).fold()
        if token.type == "function" and token.lower_name == "calc":
            return _Folder(token.arguments).fold()
        raise UnsupportedCalc(f"unsupported {token.serialize()!r}")

    def _operator(self, operators: str):
        if self.i < len(self.tokens):
            token = self.tokens[self.i]
            if token.type == "literal" and token.value in operators:
                self.i += 1
                return token.value
        return None


def _is_number(terms: Terms) -> bool:
    return set(terms) <= {""}


def _format_number(value: float) -> str:
    if not math.isfinite(value):
        raise UnsupportedCalc("value out of range")
    text = f"{round(value, PRECISION):.{PRECISION}f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _significant(terms: Terms) -> Iterator[tuple[str, float]]:
    for unit, value in terms.items():
        if round(value, PRECISION) != 0:
            yield unit, value


def _format(terms: Terms) -> str:
    significant = list(_significant(terms)) or [(next(iter(terms)), 0)]
    (unit, value), rest = significant[0], significant[1:]
    if not rest:
        return _format_number(value) + unit
    text = _format_number(value) + unit
    for unit, value in rest:
        text += f" {'-' if value < 0 else '+'} {_format_number(abs(value))}{unit}"
    return f"calc({text})"
