"""Data models for the financing comparison calculator.

This module defines dataclasses representing the entities used by the
calculator: the commercial inputs of a purchase, the itemised projection of
one financing scenario and the combined result of a comparison. All records
are frozen so a result can be handed to a renderer without being mutated.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

IMMEDIATE = "immediate"
KEY_DELIVERY = "key_delivery"


@dataclass(frozen=True)
class CalculationInput:
    """Commercial and construction parameters of a purchase.

    Attributes
    ----------
    sale_price: Decimal
        Table price of the unit before any bonus.
    bonus: Decimal
        Discount granted only when financing is signed immediately.
    financing_percentage: Decimal
        Requested bank-financed share in percent (e.g. ``Decimal("80")``).
    construction_months: int
        Number of months until key delivery. Every monthly accrual runs over
        this term.
    incc_rate: Decimal
        Monthly price-index rate in percent applied to unpaid balances.
    interest_rate: Decimal
        Nominal annual bank interest rate in percent (Immediate scenario).
    is_immediate_fees_free: bool
        Whether the Immediate scenario is exempt from transfer tax and
        registry fee. Carried on the record but not read by the engine.
    """

    sale_price: Decimal
    bonus: Decimal
    financing_percentage: Decimal
    construction_months: int
    incc_rate: Decimal
    interest_rate: Decimal
    is_immediate_fees_free: bool


@dataclass(frozen=True)
class ScenarioResult:
    """Aggregate cost projection of one financing scenario.

    ``total_paid`` is the single all-in figure used to compare scenarios.
    ``total_interest`` is the scenario's financial cost: construction interest
    for the Immediate scenario, total indexation for Key-Delivery. Optional
    fields are ``None`` when they do not apply to the scenario.
    """

    scenario_name: str
    financed_amount: Decimal
    down_payment: Decimal
    financing_percentage: Decimal  # effective (capped) value
    total_paid: Decimal
    total_interest: Decimal
    construction_interest: Optional[Decimal] = None
    correction_financing: Optional[Decimal] = None
    correction_own_resource: Optional[Decimal] = None
    itbi_amount: Optional[Decimal] = None
    registry_fee: Optional[Decimal] = None


@dataclass(frozen=True)
class CalculationResult:
    """Both scenario projections of one calculation.

    ``down_payment`` echoes the Immediate scenario's down payment for header
    display; it is not an independent value.
    """

    immediate_financing: ScenarioResult
    key_delivery_financing: ScenarioResult
    down_payment: Decimal


@dataclass(frozen=True)
class Comparison:
    """Outcome of comparing the two scenarios' ``total_paid``.

    ``winner`` is ``IMMEDIATE``, ``KEY_DELIVERY`` or ``None`` when both totals
    are equal. ``difference`` is always the absolute gap.
    """

    winner: Optional[str]
    difference: Decimal

    @property
    def is_tie(self) -> bool:
        return self.winner is None
