from decimal import Decimal

import pytest

from conftest import make_input
from financing_calc.utils import (
    FinancingInputError,
    InvalidInputError,
    MalformedInputError,
    build_input,
    coerce_decimal,
    coerce_int,
    decimal_from_str,
    parse_amount,
    parse_percent,
    validate_input,
)


def test_decimal_from_str_accepts_thousands_separators():
    assert decimal_from_str("588,200.50") == Decimal("588200.50")
    assert decimal_from_str(" 30000 ") == Decimal("30000")


@pytest.mark.parametrize("value", ["", "abc", "nan", "inf", "1.2.3"])
def test_decimal_from_str_rejects_garbage(value):
    with pytest.raises(MalformedInputError):
        decimal_from_str(value)


def test_parse_amount_suffixes():
    assert parse_amount("588.2k") == Decimal("588200.0")
    assert parse_amount("1.5M") == Decimal("1500000.0")
    assert parse_amount("30000") == Decimal("30000")


def test_parse_percent_keeps_percent_units():
    assert parse_percent("80") == Decimal("80")
    assert parse_percent("0.5%") == Decimal("0.5")
    with pytest.raises(MalformedInputError):
        parse_percent("eighty")


def test_coerce_treats_blank_and_garbage_as_zero():
    assert coerce_decimal(None) == 0
    assert coerce_decimal("   ") == 0
    assert coerce_decimal("abc", "bonus") == 0
    assert coerce_decimal("12.5") == Decimal("12.5")
    assert coerce_int("30.9") == 30
    assert coerce_int("") == 0


def test_validate_accepts_reference_input():
    config = make_input()
    assert validate_input(config) is config


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"construction_months": 0}, "construction_months"),
        ({"sale_price": Decimal("-1"), "bonus": Decimal("0")}, "sale_price"),
        ({"bonus": Decimal("-5")}, "bonus must not be negative"),
        ({"bonus": Decimal("600000")}, "bonus must not exceed sale_price"),
        ({"financing_percentage": Decimal("100.01")}, "financing_percentage"),
        ({"financing_percentage": Decimal("-1")}, "financing_percentage"),
    ],
)
def test_validate_rejects_out_of_range(overrides, message):
    with pytest.raises(InvalidInputError) as excinfo:
        validate_input(make_input(**overrides))
    assert any(message in error for error in excinfo.value.errors)


def test_validate_collects_every_error():
    with pytest.raises(InvalidInputError) as excinfo:
        validate_input(make_input(construction_months=0, financing_percentage=Decimal("150")))
    assert len(excinfo.value.errors) == 2
    assert isinstance(excinfo.value, FinancingInputError)
    assert isinstance(excinfo.value, ValueError)


def test_build_input_validates_and_normalises_flag():
    config = build_input(
        sale_price=Decimal("100000"),
        bonus=Decimal("0"),
        financing_percentage=Decimal("50"),
        construction_months=12,
        incc_rate=Decimal("0.4"),
        interest_rate=Decimal("10"),
        is_immediate_fees_free=None,
    )
    assert config.is_immediate_fees_free is False

    with pytest.raises(InvalidInputError):
        build_input(
            sale_price=Decimal("100000"),
            bonus=Decimal("0"),
            financing_percentage=Decimal("50"),
            construction_months=0,
            incc_rate=Decimal("0.4"),
            interest_rate=Decimal("10"),
        )


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0,5", Decimal("0.5")),
        ("9,5", Decimal("9.5")),
        ("588.200,50", Decimal("588200.50")),
        ("588200", Decimal("588200")),
        ("0.5", Decimal("0.5")),
    ],
)
def test_coerce_reads_pt_br_decimal_comma(value, expected):
    assert coerce_decimal(value) == expected
