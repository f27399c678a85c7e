"""Output helpers for the financing calculator.

This module formats money the way Brazilian buyers read it (``R$ 1.234,56``),
builds the cost breakdown shown in charts and renders scenario projections
and comparisons as simple text tables. Output relies only on built-in
printing and string formatting.
"""

from __future__ import annotations

from dataclasses import asdict
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, Union

from .data_models import (
    IMMEDIATE,
    KEY_DELIVERY,
    CalculationResult,
    Comparison,
    ScenarioResult,
)

Number = Union[Decimal, float, int]

_CENT = Decimal("0.01")
_TENTH = Decimal("0.1")
_UNIT = Decimal("1")

WINNER_LABELS = {
    IMMEDIATE: "Immediate",
    KEY_DELIVERY: "Key-delivery",
}


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _round_half_up(value: Decimal, places: Decimal) -> Decimal:
    """Quantize ``value`` to ``places`` whatever its magnitude.

    The working precision grows with the number of integer digits, so very
    large totals still round instead of raising ``InvalidOperation``.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 2 - places.as_tuple().exponent)
        return value.quantize(places, rounding=ROUND_HALF_UP)


def _pt_br_digits(value: Decimal, places: Decimal) -> str:
    """Return ``|value|`` rounded to ``places`` with pt-BR separators."""
    rounded = _round_half_up(value.copy_abs(), places)
    decimals = max(-rounded.as_tuple().exponent, 0)
    text = f"{rounded:,.{decimals}f}"
    # swap separators: 1,234.56 -> 1.234,56
    return text.translate(str.maketrans(",.", ".,"))


def format_currency(value: Number) -> str:
    """Format ``value`` as Brazilian reais with two fixed decimals.

    ``format_currency(588200)`` returns ``"R$ 588.200,00"``. Negative values
    carry the sign before the symbol (``"-R$ 10,00"``).
    """
    amount = _to_decimal(value)
    sign = "-" if _round_half_up(amount, _CENT) < 0 else ""
    return f"{sign}R$ {_pt_br_digits(amount, _CENT)}"


def format_currency_short(value: Number) -> str:
    """Abbreviate large amounts for chart labels and badges.

    Values from one million up use one decimal and an ``M`` suffix
    (``"R$ 1,2M"``), values from one thousand up are rounded to whole
    thousands with a ``k`` suffix (``"R$ 588k"``); smaller values fall back to
    ``format_currency``.
    """
    amount = _to_decimal(value)
    sign = "-" if amount < 0 else ""
    if abs(amount) >= 1_000_000:
        return f"R$ {sign}{_pt_br_digits(amount / 1_000_000, _TENTH)}M"
    if abs(amount) >= 1_000:
        return f"R$ {sign}{_pt_br_digits(amount / 1_000, _UNIT)}k"
    return format_currency(amount)


def cost_breakdown(scenario: ScenarioResult) -> Dict[str, Decimal]:
    """Return the stacked cost segments of a scenario in display order.

    The segments always include principal and down payment; the remaining
    ones depend on which costs apply to the scenario. Immediate carries
    construction interest, Key-Delivery carries debt indexation and fees.
    """
    segments: Dict[str, Decimal] = {
        "Principal": scenario.financed_amount,
        "Down payment": scenario.down_payment,
    }
    if scenario.construction_interest is not None:
        segments["Construction interest"] = scenario.construction_interest
    if scenario.correction_financing is not None:
        segments["Indexation (debt)"] = scenario.correction_financing
    segments["Indexation (down payment)"] = scenario.correction_own_resource or Decimal("0")
    if scenario.itbi_amount is not None or scenario.registry_fee is not None:
        segments["Fees (ITBI/registry)"] = (scenario.itbi_amount or Decimal("0")) + (
            scenario.registry_fee or Decimal("0")
        )
    return segments


def winner_summary(comparison: Comparison) -> str:
    """Return a one-line narrative of the comparison outcome."""
    if comparison.is_tie:
        return "Both scenarios cost the same; there is no difference."
    label = WINNER_LABELS[comparison.winner]
    return (
        f"{label} financing is cheaper, saving "
        f"{format_currency(comparison.difference)} "
        f"({format_currency_short(comparison.difference)})."
    )


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


def scenario_to_dict(scenario: ScenarioResult) -> Dict[str, Any]:
    """Convert a scenario into a JSON-serialisable dictionary."""
    return {key: _json_value(value) for key, value in asdict(scenario).items()}


def result_to_dict(result: CalculationResult, comparison: Comparison) -> Dict[str, Any]:
    """Convert a result and its comparison into a JSON-serialisable dictionary."""
    return {
        "result": {
            "immediate_financing": scenario_to_dict(result.immediate_financing),
            "key_delivery_financing": scenario_to_dict(result.key_delivery_financing),
            "down_payment": float(result.down_payment),
        },
        "comparison": {
            "winner": comparison.winner,
            "difference": float(comparison.difference),
            "is_tie": comparison.is_tie,
            "summary": winner_summary(comparison),
        },
    }


def print_scenario(scenario: ScenarioResult) -> None:
    """Print the itemised projection of one scenario."""
    print(scenario.scenario_name)
    print("-" * 72)
    print(f"Financing share    : {scenario.financing_percentage:.2f}%")
    print(f"Financed amount    : {format_currency(scenario.financed_amount)}")
    print(f"Down payment       : {format_currency(scenario.down_payment)}")
    if scenario.construction_interest is not None:
        print(f"Construction int.  : {format_currency(scenario.construction_interest)}")
    if scenario.correction_financing is not None:
        print(f"Indexation (debt)  : {format_currency(scenario.correction_financing)}")
    if scenario.correction_own_resource is not None:
        print(f"Indexation (down)  : {format_currency(scenario.correction_own_resource)}")
    if scenario.itbi_amount is not None:
        print(f"Transfer tax (ITBI): {format_currency(scenario.itbi_amount)}")
    if scenario.registry_fee is not None:
        print(f"Registry fee       : {format_currency(scenario.registry_fee)}")
    print(f"Financial cost     : {format_currency(scenario.total_interest)}")
    print(f"Total paid         : {format_currency(scenario.total_paid)}")
    print("-" * 72)


def print_comparison(result: CalculationResult, comparison: Comparison) -> None:
    """Print both scenarios side by side followed by the winner summary.

    The difference column is ``key_delivery - immediate``; a negative value
    means Key-Delivery is cheaper for that line.
    """
    immediate = result.immediate_financing
    key_delivery = result.key_delivery_financing
    print("Comparison")
    print("=" * 72)
    print(f"{'Metric':20s} {'Immediate':>16s} {'Key-delivery':>16s} {'Difference':>16s}")
    rows = [
        ("financed_amount", immediate.financed_amount, key_delivery.financed_amount),
        ("down_payment", immediate.down_payment, key_delivery.down_payment),
        ("total_interest", immediate.total_interest, key_delivery.total_interest),
        ("total_paid", immediate.total_paid, key_delivery.total_paid),
    ]
    for key, v1, v2 in rows:
        print(f"{key:20s} {v1:16.2f} {v2:16.2f} {v2 - v1:16.2f}")
    print("=" * 72)
    print(winner_summary(comparison))
