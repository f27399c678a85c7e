"""Utility functions for the financing calculator.

This module provides helpers for turning user input into ``Decimal`` values,
both strictly (the CLI) and tolerantly (the web form, where a blank or
unreadable field counts as zero), and for validating a ``CalculationInput``
before it reaches the engine.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, getcontext
from typing import Any, List, Optional

from .data_models import CalculationInput
from .logging_utils import get_logger

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

logger = get_logger(__name__)


class FinancingInputError(ValueError):
    """Base class for input problems detected before the engine runs."""


class MalformedInputError(FinancingInputError):
    """A field could not be read as a number."""


class InvalidInputError(FinancingInputError):
    """A field was readable but outside the range the engine accepts."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    Accepts ``"1,234.5"`` style thousands separators and raises
    ``MalformedInputError`` if conversion fails or the value is not finite.
    """
    try:
        result = Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, ValueError) as exc:
        raise MalformedInputError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise MalformedInputError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse a money amount with optional suffixes.

    Accepts plain numbers (``"588200"``) and shorthand with ``k``/``m``
    suffixes (``"588.2k"`` meaning 588 200).
    """
    cleaned = str(value).strip().lower()
    factor = Decimal(1)
    if cleaned.endswith("k"):
        factor = Decimal(1_000)
        cleaned = cleaned[:-1]
    elif cleaned.endswith("m"):
        factor = Decimal(1_000_000)
        cleaned = cleaned[:-1]
    return decimal_from_str(cleaned) * factor


def parse_percent(value: str) -> Decimal:
    """Parse a percentage string such as ``"80"`` or ``"0.5%"``.

    The value stays in percent units: ``"80"`` is 80 %, ``"0.5"`` is 0.5 %.
    """
    cleaned = str(value).strip()
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1]
    return decimal_from_str(cleaned)


def coerce_decimal(value: Any, field: str = "value") -> Decimal:
    """Read a form value as ``Decimal``, falling back to zero.

    Blank or unreadable entries are treated as ``0``, which is how the form
    layer has always behaved. Unreadable (non-blank) entries are logged.

    The form is read as pt-BR: a comma is the decimal separator and dots
    before it group thousands, so ``"0,5"`` is 0.5 and ``"588.200,50"`` is
    588200.50. Without a comma the dot is the decimal point, as sent by
    number inputs.
    """
    text = "" if value is None else str(value).strip()
    if text == "":
        return Decimal("0")
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        return decimal_from_str(text)
    except MalformedInputError:
        logger.warning(
            "unreadable numeric field coerced to zero",
            extra={"context": {"field": field, "value": str(value)}},
        )
        return Decimal("0")


def coerce_int(value: Any, field: str = "value") -> int:
    """Read a form value as an ``int`` (truncating decimals), falling back to zero."""
    return int(coerce_decimal(value, field))


def validate_input(config: CalculationInput) -> CalculationInput:
    """Check that ``config`` is within the ranges the engine accepts.

    Returns the same record so calls can be chained. Raises
    ``InvalidInputError`` listing every violation found.
    """
    errors: List[str] = []
    if config.construction_months < 1:
        errors.append("construction_months must be at least 1")
    if config.sale_price < 0:
        errors.append("sale_price must not be negative")
    if config.bonus < 0:
        errors.append("bonus must not be negative")
    if config.bonus > config.sale_price:
        errors.append("bonus must not exceed sale_price")
    if not (Decimal(0) <= config.financing_percentage <= Decimal(100)):
        errors.append("financing_percentage must be between 0 and 100")
    if errors:
        raise InvalidInputError(errors)
    return config


def build_input(
    sale_price: Decimal,
    bonus: Decimal,
    financing_percentage: Decimal,
    construction_months: int,
    incc_rate: Decimal,
    interest_rate: Decimal,
    is_immediate_fees_free: Optional[bool] = True,
) -> CalculationInput:
    """Assemble and validate a ``CalculationInput``."""
    config = CalculationInput(
        sale_price=sale_price,
        bonus=bonus,
        financing_percentage=financing_percentage,
        construction_months=construction_months,
        incc_rate=incc_rate,
        interest_rate=interest_rate,
        is_immediate_fees_free=bool(is_immediate_fees_free),
    )
    return validate_input(config)
