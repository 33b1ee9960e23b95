"""Result construction, forms and specialization."""

from __future__ import annotations

from typing import Generic, TypeVar, get_origin

from hypothesis import given, settings
from hypothesis import strategies as st
import pytest

from ditto import (
    ConfigurationError,
    ContractViolation,
    Form,
    PayloadTypeError,
    Result,
    settings_scope,
)
from tests.helpers import DivideError, IntResult, Point

pytestmark = pytest.mark.unit

T = TypeVar("T")
E = TypeVar("E")


# =============================================================================
# Implicit construction
# =============================================================================


@given(v=st.integers())
@settings(max_examples=25, deadline=None, derandomize=True)
def test_implicit_construction_from_ok_value(v: int) -> None:
    """Property: a bare Ok value builds a success holding that value."""
    result = IntResult(v)

    assert result.is_ok()
    assert not result.is_error()
    assert result.ok_value() == v


@given(e=st.sampled_from(DivideError))
@settings(max_examples=10, deadline=None, derandomize=True)
def test_implicit_construction_from_error_value(e: DivideError) -> None:
    """Property: a bare Err value builds a failure holding that value."""
    result = IntResult(e)

    assert result.is_error()
    assert not result.is_ok()
    assert result.error_value() is e


def test_implicit_construction_rejects_unrelated_value() -> None:
    with pytest.raises(PayloadTypeError):
        IntResult("ten")


def test_implicit_construction_prefers_exact_declared_type() -> None:
    """An int fits a float slot too; the side declared as int wins."""
    FloatOrInt = Result[float, int]

    assert FloatOrInt(3).is_error()
    assert FloatOrInt(3.0).is_ok()


def test_untyped_result_cannot_infer_alternative() -> None:
    with pytest.raises(PayloadTypeError) as exc:
        Result(5)

    assert exc.value.hint is not None


def test_ok_only_form_implicit_construction_is_success() -> None:
    result = Result[int, None](7)

    assert result.is_ok()
    assert result.ok_value() == 7


def test_err_only_form_implicit_construction_is_failure() -> None:
    result = Result[None, DivideError](DivideError.NEGATIVE_DIVISOR)

    assert result.is_error()
    assert result.error_value() is DivideError.NEGATIVE_DIVISOR


# =============================================================================
# Named constructors
# =============================================================================


def test_ok_stores_matching_value_as_is() -> None:
    payload = [1, 2, 3]
    result = Result[list[int], str].ok(payload)

    assert result.ok_value() is payload


def test_ok_forwards_arguments_to_payload_constructor() -> None:
    result = Result[Point, str].ok(1, y=2)

    assert result.ok_value() == Point(1, 2)


def test_ok_without_arguments_default_constructs() -> None:
    assert Result[list[int], str].ok().ok_value() == []
    assert Result[int, str].ok().ok_value() == 0


def test_ok_converts_through_payload_constructor() -> None:
    assert Result[int, str].ok("42").ok_value() == 42


def test_lossy_numeric_conversion_is_rejected() -> None:
    with pytest.raises(PayloadTypeError, match="loses precision"):
        IntResult.ok(3.7)

    assert IntResult.ok(4.0).ok_value() == 4



def test_error_forwards_arguments_to_payload_constructor() -> None:
    result = Result[int, ValueError].error("bad input")

    assert isinstance(result.error_value(), ValueError)
    assert str(result.error_value()) == "bad input"


def test_constructed_payload_of_wrong_type_is_rejected() -> None:
    with pytest.raises(PayloadTypeError):
        Result[list[int], str].ok(["a", "b"])


def test_payload_validation_can_be_disabled() -> None:
    with settings_scope(validate_payloads=False):
        result = Result[int, str].ok("not a number")

    assert result.ok_value() == "not a number"


def test_untyped_ok_and_error_store_any_value() -> None:
    assert Result.ok({"a": 1}).ok_value() == {"a": 1}
    assert Result.error("boom").error_value() == "boom"
    assert Result.ok().ok_value() is None


def test_untyped_ok_rejects_constructor_arguments() -> None:
    with pytest.raises(PayloadTypeError):
        Result.ok(1, 2)


# =============================================================================
# Ok-only and Err-only forms
# =============================================================================


def test_ok_only_form_error_has_no_payload() -> None:
    OptionalInt = Result[int, None]
    result = OptionalInt.error()

    assert OptionalInt.form is Form.OK_ONLY
    assert result.is_error()
    with pytest.raises(ContractViolation):
        result.error_value()


def test_ok_only_form_error_takes_no_arguments() -> None:
    with pytest.raises(PayloadTypeError):
        Result[int, None].error("details")


def test_err_only_form_ok_has_no_payload() -> None:
    Status = Result[None, DivideError]
    result = Status.ok()

    assert Status.form is Form.ERR_ONLY
    assert result.is_ok()
    with pytest.raises(ContractViolation):
        result.ok_value()


def test_err_only_form_ok_takes_no_arguments() -> None:
    with pytest.raises(PayloadTypeError):
        Result[None, DivideError].ok(1)


def test_none_type_is_treated_as_absent_side() -> None:
    assert Result[int, type(None)] is Result[int, None]


# =============================================================================
# Specialization
# =============================================================================


def test_identical_ok_and_err_types_are_rejected() -> None:
    with pytest.raises(ConfigurationError) as exc:
        Result[int, int]

    assert "distinct" in str(exc.value)


def test_both_sides_absent_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        Result[None, None]


def test_specialized_class_cannot_be_subscripted_again() -> None:
    with pytest.raises(ConfigurationError):
        IntResult[int, str]


def test_subscript_requires_two_parameters() -> None:
    with pytest.raises(TypeError):
        Result[int]


def test_specializations_are_cached_and_named() -> None:
    assert Result[int, DivideError] is IntResult
    assert IntResult.__name__ == "Result[int, DivideError]"
    assert IntResult.form is Form.FULL
    assert issubclass(IntResult, Result)


def test_type_variables_produce_a_generic_alias() -> None:
    alias = Result[T, E]

    assert get_origin(alias) is Result


# =============================================================================
# Generic and nested payload types
# =============================================================================


class Box(Generic[T]):
    def __init__(self, value: T) -> None:
        self.value = value


def test_generic_class_payload_is_specialized() -> None:
    Boxed = Result[Box, str]

    assert issubclass(Boxed, Result)
    assert Boxed.form is Form.FULL
    assert Boxed(Box(1)).ok_value().value == 1
    assert Boxed("empty").is_error()


def test_generic_class_on_both_sides_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        Result[Box, Box]


def test_parameterized_generic_class_payload_is_specialized() -> None:
    Boxed = Result[Box[int], str]

    assert issubclass(Boxed, Result)
    assert Boxed.ok(Box(2)).ok_value().value == 2
    assert Boxed.ok(5).ok_value().value == 5
    with pytest.raises(PayloadTypeError):
        Boxed(3.5)


def test_nested_result_payload() -> None:
    Outer = Result[Result[int, str], str]
    inner = Result[int, str].ok(1)

    outer = Outer(inner)

    assert outer.is_ok()
    assert outer.ok_value() is inner
    assert Outer("missing").error_value() == "missing"


def test_untyped_result_as_payload() -> None:
    Wrapped = Result[Result, str]

    assert issubclass(Wrapped, Result)
    assert Wrapped.ok(Result.ok(1)).ok_value().ok_value() == 1



# =============================================================================
# Protocol
# =============================================================================


def test_equality_compares_discriminant_and_payload() -> None:
    assert IntResult.ok(3) == IntResult.ok(3)
    assert IntResult.ok(3) != IntResult.ok(4)
    assert Result.ok("x") != Result.error("x")
    assert IntResult.ok(3) != 3


def test_results_are_unhashable() -> None:
    with pytest.raises(TypeError):
        hash(IntResult.ok(1))


def test_repr_shows_live_alternative() -> None:
    assert repr(IntResult.ok(3)) == "Ok(3)"
    assert repr(IntResult.error(DivideError.DIVIDE_BY_ZERO)) == (
        f"Err({DivideError.DIVIDE_BY_ZERO!r})"
    )
    assert repr(Result[None, DivideError].ok()) == "Ok()"
    assert repr(Result[int, None].error()) == "Err()"


def test_result_has_no_truth_value_shortcut() -> None:
    assert not hasattr(Result, "__bool__")
