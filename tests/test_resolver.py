import pickle
from itertools import permutations

import pytest

from css_vars.errors import CyclicReference, MalformedReference, UnresolvedVariable
from css_vars.expression import parse
from css_vars.resolver import resolve


def resolve_raw(raw: dict[str, str], **kwargs):
    return resolve({name: parse(value) for name, value in raw.items()}, **kwargs)


def test_literals_resolve_verbatim():
    raw = {"--a": "red", "--b": "1px solid", "--c": "rgba(0,0,0,0.5)"}

    resolved, failed = resolve_raw(raw)

    assert resolved == raw
    assert failed == {}


def test_chained_references():
    resolved, failed = resolve_raw(
        {"--c": "var(--b) var(--b)", "--b": "var(--a)", "--a": "1px"}
    )

    assert resolved == {"--a": "1px", "--b": "1px", "--c": "1px 1px"}
    assert failed == {}


def test_fallbacks():
    resolved, failed = resolve_raw(
        {
            "--a": "var(--missing, red)",
            "--b": "var(--x, var(--y, blue))",
            "--y": "green",
            "--c": "var(--x, var(--z, blue))",
        }
    )

    assert resolved == {"--a": "red", "--b": "green", "--y": "green", "--c": "blue"}
    assert set(failed) == {"--missing", "--x", "--z"}


def test_unused_fallback_is_not_looked_up():
    resolved, failed = resolve_raw({"--a": "var(--b, var(--missing))", "--b": "x"})

    assert resolved == {"--a": "x", "--b": "x"}
    assert failed == {}


def test_missing_reference_fails_the_whole_value():
    resolved, failed = resolve_raw({"--a": "var(--missing) var(--b)", "--b": "x"})

    assert resolved == {"--b": "x"}
    assert isinstance(failed["--a"], UnresolvedVariable)
    assert failed["--a"].missing == "--missing"
    assert failed["--missing"].missing is None


def test_failed_fallback_reports_its_own_dependency():
    resolved, failed = resolve_raw({"--a": "var(--x, var(--y))"})

    assert resolved == {}
    assert set(failed) == {"--a", "--x", "--y"}
    assert failed["--a"].missing == "--y"


def test_direct_cycle():
    resolved, failed = resolve_raw({"--a": "var(--b)", "--b": "var(--a)"})

    assert resolved == {}
    assert set(failed) == {"--a", "--b"}
    assert isinstance(failed["--a"], CyclicReference)
    assert failed["--a"].cycle == ("--a", "--b")


@pytest.mark.parametrize(
    "raw",
    (
        pytest.param({"--a": "var(--a)"}, id="self"),
        pytest.param({"--a": "var(--a, red)"}, id="self with fallback"),
        pytest.param(
            {"--a": "var(--b, red)", "--b": "var(--a, blue)"},
            id="through fallbacks",
        ),
    ),
)
def test_cycles_fail_every_member(raw):
    resolved, failed = resolve_raw(raw)

    assert set(raw) <= set(failed)
    assert all(isinstance(failed[name], CyclicReference) for name in failed)


def test_fallback_outside_a_cycle_is_used():
    resolved, failed = resolve_raw(
        {"--a": "var(--b)", "--b": "var(--a)", "--c": "var(--a, green)"}
    )

    assert resolved == {"--c": "green"}
    assert set(failed) == {"--a", "--b"}


@pytest.mark.parametrize(
    "raw",
    (
        pytest.param(
            {
                "--a": "var(--b, red)",
                "--b": "var(--a, blue)",
                "--c": "var(--a, var(--d))",
                "--d": "var(--e, 1px) solid",
                "--f": "var(--g)",
            },
            id="cycle and fallbacks",
        ),
        pytest.param(
            {"--a": "var(--b, var(--c))", "--b": "x", "--c": "var(--a)"},
            id="unused fallback into a cycle",
        ),
        pytest.param(
            {"--a": "var(--b, var(--c))", "--b": "var(--missing)", "--c": "var(--a)"},
            id="used fallback into a cycle",
        ),
    ),
)
def test_result_does_not_depend_on_declaration_order(raw):
    expected = resolve_raw(raw)

    for order in permutations(raw):
        resolved, failed = resolve_raw({name: raw[name] for name in order})

        assert resolved == expected[0]
        assert set(failed) == set(expected[1])


def test_long_chains():
    raw = {f"--v{i}": f"var(--v{i - 1})" for i in range(5000, 0, -1)}
    raw["--v0"] = "0px"

    resolved, failed = resolve_raw(raw)

    assert resolved["--v5000"] == "0px"
    assert failed == {}


def test_parse_errors_start_failed():
    error = MalformedReference("var()", "var( has no variable name")
    resolved, failed = resolve(
        {"--a": parse("var(--bad, red)"), "--b": parse("var(--bad)")},
        errors={"--bad": error},
    )

    assert resolved == {"--a": "red"}
    assert failed["--bad"] is error
    assert failed["--b"].missing == "--bad"


def test_values_are_normalized_once():
    calls = []

    def normalize(value):
        calls.append(value)
        return value.upper()

    resolved, _ = resolve_raw({"--a": "var(--b)", "--b": "red"}, normalize=normalize)

    assert resolved == {"--a": "RED", "--b": "RED"}
    assert sorted(calls) == ["red", "red"]


def test_calc_is_folded_after_substitution():
    resolved, _ = resolve_raw(
        {"--w": "calc(calc(var(--f) * 4px) + 2rem)", "--f": "0.5"}
    )

    assert resolved["--w"] == "calc(2px + 2rem)"


def test_errors_pickle():
    _, failed = resolve_raw({"--a": "var(--b)", "--b": "var(--a)", "--c": "var(--x)"})

    for error in failed.values():
        assert str(pickle.loads(pickle.dumps(error))) == str(error)


def test_unused_fallback_does_not_close_a_cycle():
    resolved, failed = resolve_raw(
        {"--a": "var(--b, var(--c))", "--b": "x", "--c": "var(--a)"}
    )

    assert resolved == {"--a": "x", "--b": "x", "--c": "x"}
    assert failed == {}


def test_used_fallback_closes_a_cycle():
    resolved, failed = resolve_raw(
        {"--a": "var(--b, var(--c))", "--b": "var(--missing)", "--c": "var(--a)"}
    )

    assert resolved == {}
    assert isinstance(failed["--a"], CyclicReference)
    assert isinstance(failed["--c"], CyclicReference)
    assert failed["--b"].missing == "--missing"
