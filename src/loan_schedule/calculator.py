"""Core financial primitives.

All monetary values use decimal.Decimal — float is forbidden.
Rates are annual percentages (5.5 means 5.5 %), converted with the nominal
monthly convention rate / 100 / 12.
Rounding: ROUND_HALF_UP to 2 decimal places, applied only when an
installment is finalised; every primitive here returns full precision.
"""
from __future__ import annotations

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from .config import CENT, HUNDRED, MONTHS_PER_YEAR, ZERO


def round_money(value: Decimal) -> Decimal:
    """Quantize to the cent, halves rounded away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    return annual_rate_percent / HUNDRED / MONTHS_PER_YEAR


def period_interest(balance: Decimal, annual_rate_percent: Decimal) -> Decimal:
    """Return one month of interest on *balance*.

        I = balance * (rate / 100 / 12)

    Non-positive balance or rate yields zero.
    """
    if balance <= ZERO or annual_rate_percent <= ZERO:
        return ZERO
    return balance * monthly_rate(annual_rate_percent)


def compute_emi(
    principal: Decimal,
    annual_rate_percent: Decimal,
    term_months: int,
) -> Decimal:
    """Return the Equated Monthly Installment for a reducing-balance loan.

    Uses the standard amortizing-payment formula:
        EMI = P * r * (1 + r)^n / ((1 + r)^n - 1)

    Degenerate inputs (non-positive principal, rate or term) return zero:
    no loan is modeled.
    """
    if principal <= ZERO or annual_rate_percent <= ZERO or term_months <= 0:
        return ZERO

    r = monthly_rate(annual_rate_percent)
    factor = (1 + r) ** int(term_months)  # stays Decimal arithmetic
    return principal * r * factor / (factor - 1)


def add_months(dt: date, months: int) -> date:
    """Return the date *months* calendar months after *dt*.

    The day is clamped to the target month's length, so Jan 31 + 1 month is
    Feb 28 (or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def with_day(dt: date, day: int) -> date:
    """Move *dt* to *day* within the same month, clamped to the month's length."""
    return dt.replace(day=min(day, calendar.monthrange(dt.year, dt.month)[1]))


def month_start(dt: date) -> date:
    return dt.replace(day=1)
