"""Schedule generation.

Builds the full installment list for a new loan, one period per month:

1. resolve the annual rate in force on the period's due date;
2. split the payment into interest and principal (reducing balance or flat);
3. finalise the installment, rounding money fields to the cent;
4. carry the unrounded closing balance into the next period.

The last period always repays the whole opening balance, so rounding residue
lands in the final payment and the schedule closes at exactly zero.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable

from .calculator import add_months, compute_emi, period_interest, round_money, with_day
from .config import HUNDRED, MONTHS_PER_YEAR, VALID_METHODS, ZERO
from .models import Installment, LoanConfig, RateEvent
from .rates import applicable_rate, sort_rate_events

logger = logging.getLogger(__name__)


class InvalidLoanParametersError(ValueError):
    """Raised when principal, term or rate history cannot describe a loan."""


class NoApplicableRateError(ValueError):
    """Raised when the rate history does not cover a period's due date."""


def first_due_date(config: LoanConfig) -> date:
    """Due date of installment 1.

    Without a payment day this is the start date itself. With one, it is the
    first date on or after the start date falling on that day of the month.
    """
    if config.payment_day_of_month is None:
        return config.start_date
    candidate = with_day(config.start_date, config.payment_day_of_month)
    if candidate < config.start_date:
        candidate = with_day(add_months(config.start_date, 1), config.payment_day_of_month)
    return candidate


def reducing_principal(
    emi: Decimal,
    interest: Decimal,
    opening: Decimal,
    is_last: bool,
) -> Decimal:
    """Principal share of a fixed EMI, settling the balance on the last period."""
    principal = opening if is_last else emi - interest
    # Never repay more than is owed
    if principal > opening:
        principal = opening
    return principal


def make_installment(
    number: int,
    due: date,
    opening: Decimal,
    principal: Decimal,
    interest: Decimal,
    **extra,
) -> Installment:
    """Finalise one period, rounding all money fields to the cent."""
    closing = max(ZERO, opening - principal)
    return Installment(
        installment_number=number,
        due_date=due,
        principal_opening=round_money(opening),
        principal_component=round_money(principal),
        interest_component=round_money(interest),
        total_amount=round_money(principal + interest),
        principal_closing=round_money(closing),
        **extra,
    )


def generate_schedule(
    config: LoanConfig,
    rate_events: Iterable[RateEvent],
) -> list[Installment]:
    """Build the month-by-month schedule for a new loan.

    Raises InvalidLoanParametersError for a non-positive principal or term or
    an empty rate history, and NoApplicableRateError when a period's due date
    precedes every rate event.
    """
    events = sort_rate_events(rate_events)
    if config.principal <= ZERO or config.term_months <= 0:
        raise InvalidLoanParametersError(
            "Invalid loan parameters: principal and term must be positive."
        )
    if not events:
        raise InvalidLoanParametersError("At least one rate event is required.")
    if config.method not in VALID_METHODS:
        raise InvalidLoanParametersError(f"Unknown calculation method '{config.method}'.")

    principal = config.principal
    term = config.term_months
    # Fixed for the whole schedule; only a splice derives a new one
    emi = compute_emi(principal, events[0].rate_percentage, term)
    start = first_due_date(config)
    logger.debug(
        "Generating %d-period %s schedule for %s from %s (EMI %s)",
        term, config.method, principal, start.isoformat(), emi,
    )

    rows: list[Installment] = []
    balance = principal

    for period in range(1, term + 1):
        due = add_months(start, period - 1)
        event = applicable_rate(events, due)
        if event is None:
            raise NoApplicableRateError(
                f"No applicable rate found for date {due.isoformat()}."
            )
        rate = event.rate_percentage
        opening = balance
        is_last = period == term

        if config.method == "REDUCING_BALANCE":
            interest = period_interest(opening, rate)
            principal_component = reducing_principal(emi, interest, opening, is_last)
        else:
            # Flat: interest on the original principal, spread evenly
            total_interest = principal * rate * term / (MONTHS_PER_YEAR * HUNDRED)
            flat_payment = (principal + total_interest) / term
            interest = total_interest / term
            principal_component = opening if is_last else flat_payment - interest

        rows.append(make_installment(period, due, opening, principal_component, interest))
        balance = max(ZERO, opening - principal_component)

    return rows
