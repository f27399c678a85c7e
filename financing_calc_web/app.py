import os
from decimal import Decimal

from flask import Flask, jsonify, render_template, request

from financing_calc.data_models import CalculationInput
from financing_calc.engine import compare_scenarios, compute_financing
from financing_calc.formatter import (
    cost_breakdown,
    format_currency,
    format_currency_short,
    result_to_dict,
    winner_summary,
)
from financing_calc.logging_utils import get_logger
from financing_calc.utils import (
    InvalidInputError,
    MalformedInputError,
    build_input,
    coerce_decimal,
    coerce_int,
    decimal_from_str,
    validate_input,
)

app = Flask(__name__)
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
app.jinja_env.filters["currency"] = format_currency
app.jinja_env.filters["currency_short"] = format_currency_short

logger = get_logger(__name__)

DEFAULT_INPUT = CalculationInput(
    sale_price=Decimal("588200"),
    bonus=Decimal("30000"),
    financing_percentage=Decimal("80"),
    construction_months=30,
    incc_rate=Decimal("0.5"),
    interest_rate=Decimal("9.5"),
    is_immediate_fees_free=True,
)

NUMERIC_FIELDS = (
    "sale_price",
    "bonus",
    "financing_percentage",
    "incc_rate",
    "interest_rate",
)


def _form_to_input(form) -> CalculationInput:
    """Build an input record from the HTML form.

    Blank or unreadable numbers count as zero and an unchecked box as
    ``False``. The record is not validated here so the page can echo back
    what the user typed next to any validation error.
    """
    return CalculationInput(
        sale_price=coerce_decimal(form.get("sale_price"), "sale_price"),
        bonus=coerce_decimal(form.get("bonus"), "bonus"),
        financing_percentage=coerce_decimal(form.get("financing_percentage"), "financing_percentage"),
        construction_months=coerce_int(form.get("construction_months"), "construction_months"),
        incc_rate=coerce_decimal(form.get("incc_rate"), "incc_rate"),
        interest_rate=coerce_decimal(form.get("interest_rate"), "interest_rate"),
        is_immediate_fees_free=form.get("is_immediate_fees_free") in ("1", "on", "true"),
    )


def _json_number(payload: dict, field: str) -> Decimal:
    raw = payload.get(field, getattr(DEFAULT_INPUT, field))
    if isinstance(raw, bool):
        raise MalformedInputError(f"Invalid numeric value for {field}: {raw}")
    return decimal_from_str(str(raw))


def _json_to_input(payload: dict) -> CalculationInput:
    """Build an input record from a JSON body.

    Numbers must be JSON numbers or numeric strings, ``construction_months``
    must be a whole number and the fees flag a JSON boolean; anything else is
    malformed.
    """
    values = {field: _json_number(payload, field) for field in NUMERIC_FIELDS}

    months = _json_number(payload, "construction_months")
    if months != months.to_integral_value():
        raise MalformedInputError(f"construction_months must be a whole number: {months}")

    fees_free = payload.get("is_immediate_fees_free", DEFAULT_INPUT.is_immediate_fees_free)
    if not isinstance(fees_free, bool):
        raise MalformedInputError(f"is_immediate_fees_free must be true or false: {fees_free!r}")

    return build_input(
        construction_months=int(months),
        is_immediate_fees_free=fees_free,
        **values,
    )


def _run_comparison(config: CalculationInput):
    result = compute_financing(config)
    comparison = compare_scenarios(result)
    logger.info(
        "comparison computed",
        extra={"context": {"winner": comparison.winner, "difference": str(comparison.difference)}},
    )
    return result, comparison


@app.route("/", methods=["GET", "POST"])
def index():
    form_values = DEFAULT_INPUT
    result = None
    comparison = None
    breakdown = None
    summary = None
    error = None

    if request.method == "POST":
        try:
            form_values = _form_to_input(request.form)
            result, comparison = _run_comparison(validate_input(form_values))
            breakdown = {
                "immediate": cost_breakdown(result.immediate_financing),
                "key_delivery": cost_breakdown(result.key_delivery_financing),
            }
            summary = winner_summary(comparison)
        except InvalidInputError as exc:
            error = "; ".join(exc.errors)

    return render_template(
        "index.html",
        form=form_values,
        result=result,
        comparison=comparison,
        breakdown=breakdown,
        summary=summary,
        error=error,
    )


@app.post("/api/calculate")
def calculate():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": ["request body must be a JSON object"]}), 400
    try:
        config = _json_to_input(payload)
    except MalformedInputError as exc:
        return jsonify({"error": [str(exc)]}), 400
    except InvalidInputError as exc:
        return jsonify({"error": exc.errors}), 422
    result, comparison = _run_comparison(config)
    return jsonify(result_to_dict(result, comparison))


if __name__ == "__main__":
    print("Starting Financing Calculator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
