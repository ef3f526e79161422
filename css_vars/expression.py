"""Tokenizer for custom property values.

A value is split into literal text and ``var()`` references, for example
``rgba(0, 0, 0, var(--opacity, 1))`` becomes::

    (Literal("rgba(0, 0, 0, "), VariableRef("--opacity", (Literal("1"),)), Literal(")"))

Fallbacks are parsed with the same tokenizer, so they may mix literal text
and further references.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .errors import MalformedReference

REFERENCE = re.compile(r"(?<![\w-])var\(", re.IGNORECASE)
NAME_END = re.compile(r"(?<!\\),")


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class VariableRef:
    name: str
    fallback: Optional["Expression"] = None


Node = Union[Literal, VariableRef]
Expression = tuple[Node, ...]


def find_closing_paren(text: str, start: int) -> int:
    """Return the index of the ``)`` closing a parenthesis opened just before ``start``.

    Escaped characters and quoted strings are skipped. Returns -1 if the
    parenthesis is never closed.
    """
    depth = 1
    quote = None
    i = start
    while i < len(text):
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def parse(value: str) -> Expression:
    nodes: list[Node] = []
    position = 0
    while match := REFERENCE.search(value, position):
        if match.start() > position:
            nodes.append(Literal(value[position : match.start()]))
        end = find_closing_paren(value, match.end())
        if end == -1:
            raise MalformedReference(value, "var( is missing a closing parenthesis")
        nodes.append(_parse_reference(value, value[match.end() : end]))
        position = end + 1
    if position < len(value):
        nodes.append(Literal(value[position:]))
    return tuple(nodes)


def _parse_reference(value: str, body: str) -> VariableRef:
    comma = NAME_END.search(body)
    if comma:
        name, fallback = body[: comma.start()].strip(), body[comma.end() :].strip()
    else:
        name, fallback = body.strip(), None

    if not name:
        raise MalformedReference(value, "var( has no variable name")
    if not name.startswith("--"):
        raise MalformedReference(value, f"{name!r} is not a custom property name")

    return VariableRef(name, None if fallback is None else parse(fallback))


def references(expression: Expression) -> Iterator[str]:
    """Yield every referenced name, including names used in fallbacks."""
    for node in expression:
        if isinstance(node, VariableRef):
            yield node.name
            if node.fallback:
                yield from references(node.fallback)
