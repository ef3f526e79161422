import logging
from typing import Callable, Iterable, NamedTuple, Optional

from .calc import normalize_calc
from .css_var_parser import Stylesheet, collect
from .errors import CSSVariableError, MalformedReference, RejectedValue
from .expression import Expression, parse
from .resolver import resolve

log = logging.getLogger(__name__)


class Resolution(NamedTuple):
    raw: dict[str, str]
    resolved: dict[str, str]
    failures: dict[str, CSSVariableError]

    @property
    def failed(self) -> list[str]:
        return list(self.failures)

    def as_dict(self, raw: bool = True) -> dict:
        result = {"resolved": self.resolved, "failed": self.failed}
        if raw:
            result["raw"] = self.raw
        return result

    def raise_for_failures(self):
        for error in self.failures.values():
            raise error


def parse_all(
    raw: dict[str, str]
) -> tuple[dict[str, Expression], dict[str, CSSVariableError]]:
    expressions = {}
    errors = {}
    for name, value in raw.items():
        try:
            expressions[name] = parse(value)
        except MalformedReference as e:
            errors[name] = e
    return expressions, errors


def resolve_css_variables(
    stylesheets: Iterable[Stylesheet],
    scope: Optional[str] = ":root",
    normalize: Callable[[str], str] = normalize_calc,
) -> Resolution:
    """Resolve every custom property declared in ``stylesheets`` to a literal value.

    Stylesheets are processed in order and later declarations win. ``scope``
    is the exact selector whose rules are read, or ``None`` to read every rule.
    Properties that can't be resolved statically end up in ``failures``.
    """
    raw = collect(stylesheets, scope)
    expressions, errors = parse_all(raw)
    resolved, failures = resolve(expressions, errors, normalize)
    log.debug("Resolved %d custom properties, %d failed", len(resolved), len(failures))
    return Resolution(raw, resolved, failures)


def filter_resolved(
    resolution: Resolution, keep: Callable[[str, str], bool]
) -> Resolution:
    """Move every resolved property rejected by ``keep(name, value)`` to failures."""
    resolved = {}
    failures = dict(resolution.failures)
    for name, value in resolution.resolved.items():
        if keep(name, value):
            resolved[name] = value
        else:
            failures[name] = RejectedValue(name, value)
    return Resolution(resolution.raw, resolved, failures)
