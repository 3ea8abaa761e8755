"""Command-line front end — click group + rich rendering.

Commands:
  schedule  Generate and display a new loan's amortization schedule.
  reprice   Generate a schedule, mark the first installments paid, then apply
            a rate change and display the spliced schedule.

Both commands finish with the loan summary and the integrity check verdict.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

from .config import DEFAULT_METHOD, DEFAULT_RATE_TYPE, DEFAULT_TERM_MONTHS, VALID_METHODS, VALID_RATE_TYPES
from .models import Installment, LoanConfig, LoanSummary, RateEvent, ValidationResult
from .recalculator import reprice_schedule
from .schedule import generate_schedule
from .summary import summarize
from .validator import validate_schedule

console = Console()
err_console = Console(stderr=True, style="bold red")

# ──────────────────────────────────────────────────────────────────────────────
# Formatting helpers
# ──────────────────────────────────────────────────────────────────────────────

def _fmt_money(value: Decimal) -> str:
    return f"{value:,.2f}"


def _fmt_pct(value: Decimal) -> str:
    return f"{value:.4f}%"


def _fmt_date(value: Optional[date]) -> str:
    return value.isoformat() if value else "—"


# ──────────────────────────────────────────────────────────────────────────────
# Display
# ──────────────────────────────────────────────────────────────────────────────

def display_schedule(schedule: Sequence[Installment], title: str = "Amortization Schedule") -> None:
    t = Table(title=title, box=box.MINIMAL_HEAVY_HEAD)
    for col in ("#", "Due", "Opening Bal.", "Principal", "Interest", "Total", "Closing Bal."):
        t.add_column(col, justify="right")
    t.add_column("Status")

    for inst in schedule:
        t.add_row(
            str(inst.installment_number),
            inst.due_date.isoformat(),
            _fmt_money(inst.principal_opening),
            _fmt_money(inst.principal_component),
            _fmt_money(inst.interest_component),
            _fmt_money(inst.total_amount),
            _fmt_money(inst.principal_closing),
            inst.status,
        )
    console.print(t)


def display_summary(summary: LoanSummary) -> None:
    t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Field", style="cyan")
    t.add_column("Value", justify="right")

    t.add_row("Principal paid", _fmt_money(summary.total_principal_paid))
    t.add_row("Interest paid", _fmt_money(summary.total_interest_paid))
    t.add_row("Total paid", _fmt_money(summary.total_paid))
    t.add_row("Remaining principal", _fmt_money(summary.remaining_principal))
    t.add_row("Remaining payments", str(summary.remaining_payments))
    t.add_row("Next payment date", _fmt_date(summary.next_payment_date))
    t.add_row("Next payment amount", _fmt_money(summary.next_payment_amount))
    t.add_row("Projected interest", _fmt_money(summary.total_interest_projected))
    t.add_row("Projected total payment", _fmt_money(summary.total_payment_projected))
    console.print(Panel(t, title="[bold green]Loan Summary[/bold green]", expand=False))


def display_validation(result: ValidationResult) -> None:
    if result.valid:
        console.print("[green]Schedule integrity: OK[/green]")
        return
    console.print(f"[yellow]Schedule integrity: {len(result.errors)} problem(s)[/yellow]")
    for error in result.errors:
        console.print(f"  [yellow]•[/yellow] {error}")


def _report(schedule: Sequence[Installment], principal: Decimal, title: str) -> None:
    display_schedule(schedule, title)
    display_summary(summarize(schedule, principal))
    display_validation(validate_schedule(schedule))


# ──────────────────────────────────────────────────────────────────────────────
# Input helpers
# ──────────────────────────────────────────────────────────────────────────────

def _parse_decimal(raw: str, name: str, *, allow_zero: bool = False) -> Decimal:
    try:
        value = Decimal(raw.replace(",", ".").replace(" ", ""))
    except InvalidOperation:
        err_console.print(f"Invalid value for --{name}: '{raw}'")
        sys.exit(1)
    if not value.is_finite():
        err_console.print(f"--{name} must be a finite number, got '{raw}'.")
        sys.exit(1)
    if value < 0 or (value == 0 and not allow_zero):
        err_console.print(f"--{name} must be {'>= 0' if allow_zero else '> 0'}.")
        sys.exit(1)
    return value


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build_loan(
    principal: str,
    rate: str,
    term: int,
    start: str,
    method: str,
    payment_day: Optional[int],
    rate_type: str,
) -> tuple[LoanConfig, RateEvent]:
    config = LoanConfig(
        principal=_parse_decimal(principal, "principal"),
        start_date=_parse_date(start, "start"),
        term_months=term,
        method=method,  # type: ignore[arg-type]
        payment_day_of_month=payment_day,
    )
    event = RateEvent(
        effective_date=config.start_date,
        rate_percentage=_parse_decimal(rate, "rate", allow_zero=True),
        rate_type=rate_type,  # type: ignore[arg-type]
        reason="Initial rate",
    )
    return config, event


def _parse_date(raw: str, name: str) -> date:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        err_console.print(f"Invalid value for --{name}: '{raw}' (expected YYYY-MM-DD)")
        sys.exit(1)


def _generate(config: LoanConfig, events: Sequence[RateEvent]) -> list[Installment]:
    try:
        return generate_schedule(config, events)
    except ValueError as exc:
        err_console.print(f"Schedule error: {exc}")
        sys.exit(1)


def _mark_paid(schedule: Sequence[Installment], paid_through: int) -> list[Installment]:
    """Record installments 1..paid_through as paid in full on their due date."""
    return [
        replace(inst, status="PAID", paid_date=inst.due_date, paid_amount=inst.total_amount)
        if inst.installment_number <= paid_through else inst
        for inst in schedule
    ]


# ──────────────────────────────────────────────────────────────────────────────
# Click entry point
# ──────────────────────────────────────────────────────────────────────────────

_loan_options = [
    click.option("--principal", required=True, type=str, help="Loan principal"),
    click.option("--rate", required=True, type=str, help="Initial annual rate in percent (e.g. 5.5)"),
    click.option("--term", type=click.IntRange(min=1), default=DEFAULT_TERM_MONTHS, show_default=True, help="Term in months"),
    click.option("--start", required=True, type=str, help="Start date (YYYY-MM-DD)"),
    click.option("--method", type=click.Choice(sorted(VALID_METHODS)), default=DEFAULT_METHOD, show_default=True),
    click.option("--payment-day", type=click.IntRange(1, 31), default=None, help="Fixed day of month for due dates"),
    click.option("--rate-type", type=click.Choice(sorted(VALID_RATE_TYPES)), default=DEFAULT_RATE_TYPE, show_default=True),
]


def loan_options(func):
    for option in reversed(_loan_options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Loan amortization schedules and rate-change recalculation."""
    _configure_logging(verbose)


@main.command()
@loan_options
def schedule(
    principal: str,
    rate: str,
    term: int,
    start: str,
    method: str,
    payment_day: Optional[int],
    rate_type: str,
) -> None:
    """Generate the full schedule for a new loan."""
    config, event = _build_loan(principal, rate, term, start, method, payment_day, rate_type)
    rows = _generate(config, [event])
    _report(rows, config.principal, "Amortization Schedule")


@main.command()
@loan_options
@click.option("--new-rate", required=True, type=str, help="New annual rate in percent")
@click.option("--effective", required=True, type=str, help="Effective date of the new rate (YYYY-MM-DD)")
@click.option("--paid-through", type=click.IntRange(min=0), default=0, show_default=True, help="Mark installments 1..N as paid first")
@click.option("--loan-id", type=str, default="loan-1", show_default=True)
def reprice(
    principal: str,
    rate: str,
    term: int,
    start: str,
    method: str,
    payment_day: Optional[int],
    rate_type: str,
    new_rate: str,
    effective: str,
    paid_through: int,
    loan_id: str,
) -> None:
    """Apply a rate change to a freshly generated schedule."""
    config, initial = _build_loan(principal, rate, term, start, method, payment_day, rate_type)
    rows = _mark_paid(_generate(config, [initial]), paid_through)

    event = RateEvent(
        effective_date=_parse_date(effective, "effective"),
        rate_percentage=_parse_decimal(new_rate, "new-rate", allow_zero=True),
        rate_type=rate_type,  # type: ignore[arg-type]
        loan_id=loan_id,
    )
    try:
        spliced = reprice_schedule(
            loan_id, rows, event, rate_events=[initial], method=config.method,
        )
    except ValueError as exc:
        err_console.print(f"Rate change error: {exc}")
        sys.exit(1)

    console.print(Panel(
        f"[bold blue]Rate change[/bold blue] — {_fmt_pct(initial.rate_percentage)} → "
        f"{_fmt_pct(event.rate_percentage)} from {event.effective_date.isoformat()}",
        expand=False,
    ))
    _report(spliced, config.principal, "Recalculated Schedule")
