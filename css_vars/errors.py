from typing import Optional


class CSSVariableError(Exception):
    """Base class for everything that can make a custom property unresolvable."""


class MalformedReference(CSSVariableError, ValueError):
    def __init__(self, value: str, reason: str):
        super().__init__(value, reason)
        self.value = value
        self.reason = reason

    def __str__(self):
        return f"{self.reason} in {self.value!r}"


class UnresolvedVariable(CSSVariableError):
    def __init__(self, name: str, missing: Optional[str] = None):
        super().__init__(name, missing)
        self.name = name
        self.missing = missing

    def __str__(self):
        if self.missing is None:
            return f"{self.name} is not declared"
        return f"{self.name} depends on unresolved {self.missing}"


class CyclicReference(UnresolvedVariable):
    def __init__(self, name: str, cycle: tuple[str, ...]):
        CSSVariableError.__init__(self, name, cycle)
        self.name = name
        self.missing = None
        self.cycle = cycle

    def __str__(self):
        return f"{self.name} is part of a reference cycle: {' -> '.join(self.cycle)}"


class RejectedValue(CSSVariableError):
    def __init__(self, name: str, value: str):
        super().__init__(name, value)
        self.name = name
        self.value = value

    def __str__(self):
        return f"{self.name} was rejected with value {self.value!r}"
