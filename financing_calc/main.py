"""Command-line interface for the financing calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compare the Immediate and Key-Delivery financing
strategies for a purchase, export the comparison to JSON, or look up the
transfer tax and registry fee for a sale price.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Optional

import click

from .data_models import CalculationInput
from .engine import compare_scenarios, compute_financing
from .fees import registry_fee, transfer_tax
from .formatter import format_currency, print_comparison, print_scenario, result_to_dict
from .logging_utils import get_logger
from .utils import (
    FinancingInputError,
    InvalidInputError,
    build_input,
    parse_amount,
    parse_percent,
)

logger = get_logger(__name__)


def _amount(value: str, name: str) -> Decimal:
    try:
        return parse_amount(value)
    except FinancingInputError as exc:
        raise click.BadParameter(str(exc), param_hint=name)


def _percent(value: str, name: str) -> Decimal:
    try:
        return parse_percent(value)
    except FinancingInputError as exc:
        raise click.BadParameter(str(exc), param_hint=name)


def build_input_from_options(
    sale_price: str,
    bonus: str,
    financing: str,
    months: int,
    incc: str,
    interest: str,
    immediate_fees_free: bool = True,
) -> CalculationInput:
    """Parse raw option strings into a validated ``CalculationInput``."""
    try:
        return build_input(
            sale_price=_amount(sale_price, "--sale-price"),
            bonus=_amount(bonus, "--bonus"),
            financing_percentage=_percent(financing, "--financing"),
            construction_months=months,
            incc_rate=_percent(incc, "--incc"),
            interest_rate=_percent(interest, "--interest"),
            is_immediate_fees_free=immediate_fees_free,
        )
    except InvalidInputError as exc:
        raise click.BadParameter("; ".join(exc.errors))


def export_to_json(path: Path, data: dict) -> None:
    """Export a serialised comparison to a JSON file."""
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


@click.group()
def cli() -> None:
    """Compare paying for an off-plan unit now or at key delivery."""
    pass


@cli.command()
@click.option("--sale-price", "-p", "sale_price", required=True, help="Table price of the unit (accepts k/m suffixes)")
@click.option("--bonus", "-b", "bonus", default="0", show_default=True, help="Bonus granted for immediate financing")
@click.option("--financing", "-f", "financing", default="80", show_default=True, help="Requested financing share (percent)")
@click.option("--months", "-m", "months", required=True, type=int, help="Construction term in months")
@click.option("--incc", "incc", default="0.5", show_default=True, help="Monthly price-index rate (percent)")
@click.option("--interest", "-r", "interest", default="9.5", show_default=True, help="Annual bank interest rate (percent)")
@click.option(
    "--immediate-fees-free/--no-immediate-fees-free",
    "immediate_fees_free",
    default=True,
    show_default=True,
    help="Whether the Immediate scenario is exempt from ITBI and registry fee.",
)
@click.option("--output", "output", type=str, help="Output file path (.json)")
def compare(
    sale_price: str,
    bonus: str,
    financing: str,
    months: int,
    incc: str,
    interest: str,
    immediate_fees_free: bool,
    output: Optional[str],
) -> None:
    """Project both financing scenarios and show which one is cheaper."""
    config = build_input_from_options(
        sale_price, bonus, financing, months, incc, interest, immediate_fees_free
    )
    result = compute_financing(config)
    comparison = compare_scenarios(result)
    logger.info(
        "comparison computed",
        extra={"context": {"winner": comparison.winner, "difference": str(comparison.difference)}},
    )
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Unsupported output format; use .json", param_hint="--output")
        export_to_json(path, result_to_dict(result, comparison))
        click.echo(f"Comparison exported to {path}")
    else:
        print_scenario(result.immediate_financing)
        print_scenario(result.key_delivery_financing)
        print_comparison(result, comparison)


@cli.command()
@click.option("--price", "-p", "price", required=True, help="Sale price (accepts k/m suffixes)")
def fees(price: str) -> None:
    """Print the transfer tax and registry fee due on a sale price."""
    base = _amount(price, "--price")
    if base < 0:
        raise click.BadParameter("Price must not be negative", param_hint="--price")
    itbi = transfer_tax(base)
    registry = registry_fee(base)
    click.echo(f"Sale price         : {format_currency(base)}")
    click.echo(f"Transfer tax (ITBI): {format_currency(itbi)}")
    click.echo(f"Registry fee       : {format_currency(registry)}")
    click.echo(f"Total fees         : {format_currency(itbi + registry)}")


if __name__ == "__main__":
    cli()
