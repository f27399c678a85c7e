from decimal import Decimal

import pytest

from financing_calc.data_models import CalculationInput


def make_input(**overrides) -> CalculationInput:
    values = dict(
        sale_price=Decimal("588200"),
        bonus=Decimal("30000"),
        financing_percentage=Decimal("80"),
        construction_months=30,
        incc_rate=Decimal("0.5"),
        interest_rate=Decimal("9.5"),
        is_immediate_fees_free=True,
    )
    values.update(overrides)
    return CalculationInput(**values)


@pytest.fixture()
def reference_input() -> CalculationInput:
    return make_input()
