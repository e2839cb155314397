"""Tests for the Decimal policy: conversion, rounding, truncation."""

from decimal import Decimal

import pytest

from sim_core.money import DP, round_dp, to_decimal, truncate_dp


def test_float_goes_through_str() -> None:
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(0.0025) == Decimal("0.0025")


def test_int_str_decimal_inputs() -> None:
    assert to_decimal(1000) == Decimal("1000")
    assert to_decimal(" 12.5 ") == Decimal("12.5")
    d = Decimal("3.14")
    assert to_decimal(d) is d


def test_bool_rejected() -> None:
    with pytest.raises(TypeError):
        to_decimal(True)


def test_unsupported_type_rejected() -> None:
    with pytest.raises(TypeError):
        to_decimal([1])  # type: ignore[arg-type]


def test_round_half_up_at_policy_precision() -> None:
    assert DP == 4
    assert round_dp(Decimal("0.12345")) == Decimal("0.1235")
    assert round_dp(Decimal("-0.12345")) == Decimal("-0.1235")
    assert round_dp(Decimal("999.95")) == Decimal("999.9500")


def test_truncate_floors() -> None:
    assert truncate_dp(Decimal("0.12349")) == Decimal("0.1234")
    assert truncate_dp(Decimal("2.5")) == Decimal("2.5000")
