from .api import Resolution, filter_resolved, resolve_css_variables
from .calc import normalize_calc
from .css_var_parser import collect
from .errors import (
    CSSVariableError,
    CyclicReference,
    MalformedReference,
    RejectedValue,
    UnresolvedVariable,
)
from .expression import Literal, VariableRef, parse, references
from .resolver import resolve

__all__ = [
    "CSSVariableError",
    "CyclicReference",
    "Literal",
    "MalformedReference",
    "RejectedValue",
    "Resolution",
    "UnresolvedVariable",
    "VariableRef",
    "collect",
    "filter_resolved",
    "normalize_calc",
    "parse",
    "references",
    "resolve",
    "resolve_css_variables",
]
