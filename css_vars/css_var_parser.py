import logging
from typing import Iterable, Optional, Union

from tinycss2 import parse_blocks_contents, parse_stylesheet, serialize
from tinycss2.ast import FunctionBlock, Node, QualifiedRule

log = logging.getLogger(__name__)

Stylesheet = Union[str, list[Node]]

BLOCKS = ("() block", "[] block", "{} block")


class Collector:
    def __init__(self, scope: Optional[str] = ":root"):
        self.vars: dict[str, str] = {}
        self.scope = scope

    def collect(self, stylesheet: Stylesheet):
        if isinstance(stylesheet, str):
            stylesheet = parse_stylesheet(
                stylesheet, skip_comments=True, skip_whitespace=True
            )
        for node in stylesheet:
            # at-rules are skipped, along with anything nested in them
            if node.type == "qualified-rule" and self.in_scope(node):
                self.transform(node)
        return self.vars

    def in_scope(self, rule: QualifiedRule) -> bool:
        return self.scope is None or selectors(rule) == [self.scope]

    def transform(self, rule: QualifiedRule):
        for declaration in parse_blocks_contents(
            rule.content, skip_comments=True, skip_whitespace=True
        ):
            if declaration.type != "declaration":
                continue
            if not declaration.name.startswith("--"):
                continue
            value = serialize(strip_comments(declaration.value)).strip()
            if value:
                self.vars[declaration.name] = value


def strip_comments(tokens: list[Node]) -> list[Node]:
    """Drop comment tokens, including those nested in functions and blocks."""
    result = []
    for token in tokens:
        if token.type == "comment":
            continue
        if token.type == "function":
            token = FunctionBlock(
                token.source_line,
                token.source_column,
                token.name,
                strip_comments(token.arguments),
            )
        elif token.type in BLOCKS:
            token = type(token)(
                token.source_line, token.source_column, strip_comments(token.content)
            )
        result.append(token)
    return result


def selectors(rule: QualifiedRule) -> list[str]:
    result = []
    current: list[Node] = []
    for token in rule.prelude + [None]:
        if token is None or (token.type == "literal" and token.value == ","):
            result.append(" ".join(serialize(current).split()))
            current = []
        elif token.type != "comment":
            current.append(token)
    return result


def collect(stylesheets: Iterable[Stylesheet], scope: Optional[str] = ":root"):
    """Collect ``{name: value}`` for the custom properties declared in ``scope``.

    Values are re-serialized from tinycss2 tokens rather than copied from the
    source: comments are dropped, ``!important`` is removed, strings are
    written with double quotes and escapes are decoded. Where two tokens would
    merge once a comment between them is gone, tinycss2 separates them with
    an empty ``/**/``.
    """
    collector = Collector(scope)
    for stylesheet in stylesheets:
        collector.collect(stylesheet)
    log.debug("Collected %d custom properties for scope %r", len(collector.vars), scope)
    return collector.vars


def parse(css: str, scope: Optional[str] = ":root"):
    return collect([css], scope)
