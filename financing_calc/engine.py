"""Core calculation engine for the financing comparison.

This module projects the all-in cost of buying an off-plan unit under two
financing strategies:

* **Immediate** - the bank finances the unit at signing. The buyer gets the
  bonus but pays construction interest on the funds the bank releases to the
  builder as the work progresses.
* **Key-Delivery** - the bank finances the unit at handover. The buyer pays
  the full table price, the financed share is capped at 70 %, the debt balance
  and the down-payment installments are indexed monthly by the price index,
  and transfer tax plus registry fee are due.

``compute_financing`` is pure: it reads only its input record and returns a
new ``CalculationResult``. Inputs are expected to be validated by the caller
(see ``utils.validate_input``).
"""

from __future__ import annotations

from decimal import Decimal, getcontext
from typing import Tuple

from .data_models import (
    IMMEDIATE,
    KEY_DELIVERY,
    CalculationInput,
    CalculationResult,
    Comparison,
    ScenarioResult,
)
from .fees import registry_fee, transfer_tax
from .logging_utils import get_logger

getcontext().prec = 28  # increase precision for financial calculations

KEY_DELIVERY_MAX_FINANCING = Decimal("70")

IMMEDIATE_SCENARIO_NAME = "Immediate financing"
KEY_DELIVERY_SCENARIO_NAME = "Key-delivery financing"

logger = get_logger(__name__)


def _split_price(base: Decimal, percentage: Decimal) -> Tuple[Decimal, Decimal]:
    """Return ``(financed, down_payment)`` for a base price and financed share."""
    financed = base * (percentage / Decimal(100))
    return financed, base - financed


def _construction_interest(financed: Decimal, annual_rate: Decimal, months: int) -> Decimal:
    """Return the bank interest paid during construction.

    The bank releases the financed amount in a straight line as the work
    advances: by month ``m`` it has disbursed ``financed * m / months`` and
    charges one month of interest on that balance. The monthly rate is the
    annual rate divided by twelve (not compounded).
    """
    rate_per_month = (annual_rate / Decimal(100)) / Decimal(12)
    total = Decimal("0")
    for month in range(1, months + 1):
        released_balance = financed * Decimal(month) / Decimal(months)
        total += released_balance * rate_per_month
    return total


def _indexed_installments(amount: Decimal, monthly_rate: Decimal, months: int) -> Decimal:
    """Return the sum of ``amount`` paid in equal monthly installments, indexed.

    Installment ``i`` (1-indexed) is worth ``amount / months`` and is
    corrected by ``(1 + monthly_rate)^i``.
    """
    installment = amount / Decimal(months)
    factor = 1 + monthly_rate / Decimal(100)
    total = Decimal("0")
    for i in range(1, months + 1):
        total += installment * factor ** i
    return total


def _immediate_scenario(config: CalculationInput) -> ScenarioResult:
    base_price = config.sale_price - config.bonus
    percentage = config.financing_percentage
    financed, down_payment = _split_price(base_price, percentage)

    construction_interest = _construction_interest(
        financed, config.interest_rate, config.construction_months
    )
    corrected_down = _indexed_installments(
        down_payment, config.incc_rate, config.construction_months
    )

    return ScenarioResult(
        scenario_name=IMMEDIATE_SCENARIO_NAME,
        financed_amount=financed,
        down_payment=down_payment,
        financing_percentage=percentage,
        # principal + indexed down payment + construction interest
        total_paid=financed + corrected_down + construction_interest,
        total_interest=construction_interest,
        construction_interest=construction_interest,
        correction_own_resource=corrected_down - down_payment,
    )


def _key_delivery_scenario(config: CalculationInput) -> ScenarioResult:
    base_price = config.sale_price
    percentage = min(config.financing_percentage, KEY_DELIVERY_MAX_FINANCING)
    financed, down_payment = _split_price(base_price, percentage)

    # The whole debt balance is indexed over the full construction term
    final_balance = financed * (1 + config.incc_rate / Decimal(100)) ** config.construction_months
    correction_financing = final_balance - financed

    corrected_down = _indexed_installments(
        down_payment, config.incc_rate, config.construction_months
    )
    correction_own_resource = corrected_down - down_payment

    itbi = transfer_tax(base_price)
    registry = registry_fee(base_price)

    return ScenarioResult(
        scenario_name=KEY_DELIVERY_SCENARIO_NAME,
        financed_amount=financed,
        down_payment=down_payment,
        financing_percentage=percentage,
        total_paid=final_balance + corrected_down + itbi + registry,
        total_interest=correction_financing + correction_own_resource,
        correction_financing=correction_financing,
        correction_own_resource=correction_own_resource,
        itbi_amount=itbi,
        registry_fee=registry,
    )


def compute_financing(config: CalculationInput) -> CalculationResult:
    """Project both financing scenarios for a purchase.

    Parameters
    ----------
    config: CalculationInput
        A validated input record. ``construction_months`` must be at least 1.

    Returns
    -------
    CalculationResult
        The Immediate and Key-Delivery projections. ``down_payment`` repeats
        the Immediate down payment for header display.
    """
    immediate = _immediate_scenario(config)
    key_delivery = _key_delivery_scenario(config)
    logger.debug(
        "financing computed",
        extra={
            "context": {
                "construction_months": config.construction_months,
                "immediate_total": str(immediate.total_paid),
                "key_delivery_total": str(key_delivery.total_paid),
            }
        },
    )
    return CalculationResult(
        immediate_financing=immediate,
        key_delivery_financing=key_delivery,
        down_payment=immediate.down_payment,
    )


def compare_scenarios(result: CalculationResult) -> Comparison:
    """Determine which scenario is cheaper and by how much.

    The lower ``total_paid`` wins. Equal totals are a tie and are not
    attributed to either scenario.
    """
    immediate_total = result.immediate_financing.total_paid
    key_delivery_total = result.key_delivery_financing.total_paid
    difference = abs(immediate_total - key_delivery_total)
    if immediate_total < key_delivery_total:
        winner = IMMEDIATE
    elif key_delivery_total < immediate_total:
        winner = KEY_DELIVERY
    else:
        winner = None
    return Comparison(winner=winner, difference=difference)
