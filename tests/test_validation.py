from __future__ import annotations

import pytest

from allocator.core.months import MONTH_NAMES, month_after, month_dict, to_vector
from allocator.core.validation import (
    ConfigurationError,
    ValidationError,
    validate_allocation_inputs,
    validate_capacity,
    validate_vector,
)

from conftest import months


def test_vector_must_have_twelve_non_negative_values():
    assert validate_vector([1] * 12, "x") == tuple([1.0] * 12)
    with pytest.raises(ValidationError):
        validate_vector([1] * 11, "x")
    with pytest.raises(ValidationError):
        validate_vector([0] * 11 + [-1], "x")
    with pytest.raises(ValidationError):
        validate_vector([0] * 11 + ["lots"], "x")


def test_capacity_needs_every_month():
    with pytest.raises(ValidationError):
        validate_capacity({"January": 10}, "Alice")
    with pytest.raises(ConfigurationError):
        validate_capacity(None, "Alice")
    assert validate_capacity(month_dict(5), "Alice")[11] == 5


def test_allocation_preconditions():
    caps = {"Alice": month_dict(100)}
    client = {"id": "1", "client": "Acme", "months": months(January=5)}

    with pytest.raises(ConfigurationError):
        validate_allocation_inputs([], {}, [client])
    with pytest.raises(ValidationError):
        validate_allocation_inputs(["Alice"], caps, [])

    locked = dict(client, locked=True, manager="Bob")
    with pytest.raises(ConfigurationError):
        validate_allocation_inputs(["Alice"], caps, [locked])

    validate_allocation_inputs(["Alice"], caps, [client, dict(client, id="2", locked=True, manager="Alice")])


def test_month_helpers():
    assert month_after(12) == "January"
    assert month_after(3) == "April"
    assert to_vector({"March": 4})[2] == 4
    assert len(to_vector(None)) == len(MONTH_NAMES)
