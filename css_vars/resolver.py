from typing import Callable, Iterator, Mapping, Optional

from .calc import normalize_calc
from .errors import CSSVariableError, CyclicReference, UnresolvedVariable
from .expression import Expression, Literal, VariableRef


class Resolver:
    """Substitutes ``var()`` references between declared custom properties.

    Names are settled depth-first over an explicit stack, one strongly
    connected component at a time, so every dependency of a name is settled
    before the name itself. Components with more than one member, or with a
    self reference, are cycles and fail as a whole.

    A fallback only adds edges once its reference target turns out not to
    be resolved, so a fallback that is never used can't close a cycle.
    """

    def __init__(
        self,
        expressions: Mapping[str, Expression],
        errors: Optional[Mapping[str, CSSVariableError]] = None,
    ):
        self.expressions = expressions
        self.resolved: dict[str, str] = {}
        self.failed: dict[str, CSSVariableError] = dict(errors or {})
        self._index: dict[str, int] = {}
        self._lowlink: dict[str, int] = {}
        self._path: list[str] = []
        self._position: dict[str, int] = {}
        self._visiting: set[str] = set()
        self._self_referencing: set[str] = set()

    def resolve(self, normalize: Callable[[str], str] = normalize_calc):
        for name in self.expressions:
            if name not in self._index:
                self._visit(name)
        for name, value in self.resolved.items():
            self.resolved[name] = normalize(value)
        return self.resolved, self.failed

    def _visit(self, root: str):
        self._enter(root)
        stack: list[tuple[str, Iterator[str]]] = [(root, self._dependencies(root))]
        while stack:
            name, edges = stack[-1]
            for dependency in edges:
                if dependency not in self.expressions:
                    continue
                if dependency == name:
                    self._self_referencing.add(name)
                if dependency not in self._index:
                    self._enter(dependency)
                    stack.append((dependency, self._dependencies(dependency)))
                    break
                if dependency in self._visiting:
                    self._lowlink[name] = min(
                        self._lowlink[name], self._index[dependency]
                    )
            else:
                stack.pop()
                if stack:
                    parent = stack[-1][0]
                    self._lowlink[parent] = min(
                        self._lowlink[parent], self._lowlink[name]
                    )
                if self._lowlink[name] == self._index[name]:
                    self._settle(name)

    def _dependencies(self, name: str) -> Iterator[str]:
        return self._references(self.expressions[name])

    def _references(self, expression: Expression) -> Iterator[str]:
        # lazy: the target of a reference is settled or on the path by the
        # time the generator resumes after yielding it
        for node in expression:
            if isinstance(node, VariableRef):
                yield node.name
                if node.fallback is not None and node.name not in self.resolved:
                    yield from self._references(node.fallback)

    def _enter(self, name: str):
        self._index[name] = self._lowlink[name] = len(self._index)
        self._position[name] = len(self._path)
        self._path.append(name)
        self._visiting.add(name)

    def _settle(self, name: str):
        start = self._position[name]
        component = tuple(self._path[start:])
        del self._path[start:]
        self._visiting.difference_update(component)

        if len(component) > 1 or name in self._self_referencing:
            for member in component:
                self.failed[member] = CyclicReference(member, component)
            return

        value, missing = self._substitute(self.expressions[name])
        if value is None:
            self.failed[name] = UnresolvedVariable(name, missing)
        else:
            self.resolved[name] = value

    def _substitute(self, expression: Expression) -> tuple[Optional[str], Optional[str]]:
        parts = []
        for node in expression:
            if isinstance(node, Literal):
                parts.append(node.text)
                continue
            value = self._lookup(node.name)
            if value is None:
                if node.fallback is None:
                    return None, node.name
                value, missing = self._substitute(node.fallback)
                if value is None:
                    return None, missing
            parts.append(value)
        return "".join(parts), None

    def _lookup(self, name: str) -> Optional[str]:
        if name in self.resolved:
            return self.resolved[name]
        if name not in self.expressions and name not in self.failed:
            self.failed[name] = UnresolvedVariable(name)
        return None


def resolve(
    expressions: Mapping[str, Expression],
    errors: Optional[Mapping[str, CSSVariableError]] = None,
    normalize: Callable[[str], str] = normalize_calc,
) -> tuple[dict[str, str], dict[str, CSSVariableError]]:
    return Resolver(expressions, errors).resolve(normalize)
