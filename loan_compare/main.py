"""Command-line interface for the loan comparison calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can print full repayment schedules, view summaries, compare
two loans or just check their inputs. Schedules can be exported to CSV or
JSON files.
"""

from __future__ import annotations

import csv
import json
import logging
import shlex
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .calculator import build_parameters, calculate_parameters, compare_results
from .config import log_level_from_env
from .data_models import LoanParameters, LoanResult, RepaymentPolicy, Schedule, record_to_dict, result_to_dict
from .formatter import print_comparison, print_schedule, print_summary, schedule_rows
from .utils import to_decimal
from .validation import validate_inputs

logger = logging.getLogger(__name__)

POLICY_CHOICES = [p.value for p in RepaymentPolicy]
MAX_PRINTED_ROWS = 120


def parse_amount(value: str) -> Decimal:
    """Parse an amount with optional thousands separators and suffixes.

    Accepts plain numbers ("500000", "500,000") and shorthand with ``k``/``m``
    suffixes (e.g., "500k" meaning 500 000).
    """
    text = value.strip().lower().replace(",", "").replace("_", "")
    factor = Decimal(1)
    if text.endswith("k"):
        factor = Decimal(1_000)
        text = text[:-1]
    elif text.endswith("m"):
        factor = Decimal(1_000_000)
        text = text[:-1]
    try:
        return to_decimal(text) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def build_parameters_from_options(
    principal: str,
    rate: float,
    term: int,
    grace: int,
    loan_type: str,
) -> LoanParameters:
    """Validate option values and turn them into ``LoanParameters``.

    Raises ``click.UsageError`` listing every range violation, so no schedule
    is generated from invalid input.
    """
    amount = parse_amount(principal)
    grace_months = grace if RepaymentPolicy.from_tag(loan_type).is_grace else 0
    check = validate_inputs(amount, rate, term, grace_months)
    if not check.valid:
        raise click.UsageError("\n".join(check.errors))
    return build_parameters(loan_type, amount, rate, term, grace_months)


def report_validation(result: LoanResult) -> None:
    """Warn about schedule consistency problems; the figures are still shown."""
    for message in result.validation.errors:
        click.echo(f"Warning: {message}", err=True)


def export_to_json(path: Path, result: LoanResult) -> None:
    """Export the summary and, if attached, the schedule to a JSON file."""
    data = {"summary": result_to_dict_without_schedule(result)}
    if result.schedule is not None:
        data["schedule"] = [record_to_dict(r) for r in result.schedule]
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def result_to_dict_without_schedule(result: LoanResult) -> Dict[str, Any]:
    data = result_to_dict(result)
    data.pop("schedule", None)
    return data


def export_to_csv(path: Path, schedule: Schedule, result: LoanResult) -> None:
    """Export the schedule, plus a totals row, to a CSV file.

    The file starts with a byte order mark so spreadsheet applications pick
    up the UTF-8 encoding.
    """
    with path.open("w", newline="", encoding="utf-8-sig") as f:
        writer = csv.writer(f)
        writer.writerows(schedule_rows(schedule, result.summary))


def loan_options(func):
    """Attach the loan parameter options shared by several commands."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (500000, 500k, 1.2m)"),
        click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)"),
        click.option("--term", "-t", "term", required=True, type=int, help="Loan term in months"),
        click.option("--grace", "-g", "grace", type=int, default=0, show_default=True, help="Grace period in months (grace types only)"),
        click.option("--type", "loan_type", type=click.Choice(POLICY_CHOICES), default=RepaymentPolicy.EQUAL_PAYMENT.value, show_default=True, help="Repayment type"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Calculate and compare loan repayment schedules."""
    level = "DEBUG" if verbose else log_level_from_env()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(principal: str, rate: float, term: int, grace: int, loan_type: str, output: Optional[str]) -> None:
    """Compute and print the full repayment schedule."""
    params = build_parameters_from_options(principal, rate, term, grace, loan_type)
    result = calculate_parameters(params, include_schedule=True)
    report_validation(result)
    entries = result.schedule or []
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, entries, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(result)
    # Limit schedule length printed to avoid flooding the terminal
    if len(entries) > MAX_PRINTED_ROWS:
        click.echo(f"Schedule has {len(entries)} rows; showing first {MAX_PRINTED_ROWS} rows.")
        print_schedule(entries[:MAX_PRINTED_ROWS])
    else:
        print_schedule(entries)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(principal: str, rate: float, term: int, grace: int, loan_type: str, output: Optional[str]) -> None:
    """Compute and print only the summary metrics for a loan."""
    params = build_parameters_from_options(principal, rate, term, grace, loan_type)
    result = calculate_parameters(params)
    report_validation(result)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        export_to_json(path, result)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result)


@cli.command()
@loan_options
@click.pass_context
def validate(ctx: click.Context, principal: str, rate: float, term: int, grace: int, loan_type: str) -> None:
    """Check loan parameters without calculating anything."""
    grace_months = grace if RepaymentPolicy.from_tag(loan_type).is_grace else 0
    check = validate_inputs(parse_amount(principal), rate, term, grace_months)
    if check.valid:
        click.echo("Inputs are valid.")
        return
    for message in check.errors:
        click.echo(message, err=True)
    ctx.exit(1)


def parse_scenario_opts(opts: str) -> LoanParameters:
    """Turn a quoted scenario string such as ``"-p 500k -r 3.5 -t 360"`` into parameters."""
    tokens = shlex.split(opts)
    params: Dict[str, Any] = {
        "principal": None,
        "rate": None,
        "term": None,
        "grace": 0,
        "loan_type": RepaymentPolicy.EQUAL_PAYMENT.value,
    }
    i = 0
    try:
        while i < len(tokens):
            token = tokens[i]
            if token in ("-p", "--principal"):
                i += 1
                params["principal"] = tokens[i]
            elif token in ("-r", "--rate"):
                i += 1
                params["rate"] = float(tokens[i])
            elif token in ("-t", "--term"):
                i += 1
                params["term"] = int(tokens[i])
            elif token in ("-g", "--grace"):
                i += 1
                params["grace"] = int(tokens[i])
            elif token == "--type":
                i += 1
                if tokens[i] not in POLICY_CHOICES:
                    raise click.BadParameter(f"Unknown repayment type in scenario: {tokens[i]}")
                params["loan_type"] = tokens[i]
            else:
                raise click.BadParameter(f"Unknown option in scenario: {token}")
            i += 1
    except IndexError:
        raise click.BadParameter(f"Scenario option {tokens[-1]} is missing a value")
    except ValueError as exc:
        raise click.BadParameter(f"Invalid scenario value: {exc}")
    missing: List[str] = [name for name in ("principal", "rate", "term") if params[name] is None]
    if missing:
        raise click.BadParameter(f"Scenario missing required option {', '.join(missing)}")
    return build_parameters_from_options(**params)


@cli.command()
@click.option("--scenario1", "scenario1", required=True, help="Loan A options as a quoted string")
@click.option("--scenario2", "scenario2", required=True, help="Loan B options as a quoted string")
def compare(scenario1: str, scenario2: str) -> None:
    """Compare two loans.

    Scenarios are provided as quoted option strings, for example:

        loan-compare compare --scenario1 "-p 300m -r 4.5 -t 360" --scenario2 "-p 300m -r 4.2 -t 360 --type equal_principal"
    """
    result_a = calculate_parameters(parse_scenario_opts(scenario1))
    result_b = calculate_parameters(parse_scenario_opts(scenario2))
    report_validation(result_a)
    report_validation(result_b)
    print_comparison(compare_results(result_a, result_b))


if __name__ == "__main__":
    cli()
