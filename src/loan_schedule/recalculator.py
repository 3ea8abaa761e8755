"""Rate-change recalculation.

When a new rate takes effect part-way through a loan, only the future part
of the schedule is rebuilt:

- frozen installments (due before the effective month, or due in that month
  and already PAID) are returned untouched;
- the rest are regenerated from the effective month with a new EMI computed
  on the outstanding principal and the remaining term;
- regenerated periods keep the identity and payment record of the
  installment that previously held their number.

Only reducing-balance loans can be repriced.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from .calculator import add_months, compute_emi, month_start, period_interest, with_day
from .config import ZERO, CalculationMethod
from .models import Installment, RateEvent
from .rates import ensure_new_effective_date
from .schedule import make_installment, reducing_principal

logger = logging.getLogger(__name__)


class UnsupportedRateChangeError(ValueError):
    """Raised when a rate change is applied to a loan that cannot be repriced."""


def _is_frozen(installment: Installment, effective_month: date) -> bool:
    due_month = month_start(installment.due_date)
    if due_month < effective_month:
        return True
    return due_month == effective_month and installment.is_paid


def _due_day(schedule: Sequence[Installment], effective_date: date) -> int:
    if schedule:
        return min(schedule, key=lambda i: i.installment_number).due_date.day
    return effective_date.day


def splice_rate_change(
    loan_id: str,
    effective_date: date,
    new_rate: Decimal,
    outstanding_principal: Decimal,
    existing_schedule: Sequence[Installment],
    remaining_term: int,
    *,
    method: CalculationMethod = "REDUCING_BALANCE",
) -> list[Installment]:
    """Return *existing_schedule* with every open period rebuilt at *new_rate*.

    A non-positive outstanding principal or remaining term means nothing is
    left to schedule: the frozen prefix is returned on its own.
    """
    if method != "REDUCING_BALANCE":
        raise UnsupportedRateChangeError(
            f"Rate changes are only supported for REDUCING_BALANCE loans (got {method})."
        )

    effective_month = month_start(effective_date)
    frozen = sorted(
        (inst for inst in existing_schedule if _is_frozen(inst, effective_month)),
        key=lambda i: i.installment_number,
    )

    if outstanding_principal <= ZERO or remaining_term <= 0:
        logger.info(
            "Loan %s: nothing left to reschedule from %s, keeping %d frozen installments",
            loan_id, effective_date.isoformat(), len(frozen),
        )
        return frozen

    emi = compute_emi(outstanding_principal, new_rate, remaining_term)
    start_number = max((i.installment_number for i in frozen), default=0)
    due_day = _due_day(existing_schedule, effective_date)
    # The effective month's installment may already be paid and kept
    offset = 1 if frozen and month_start(frozen[-1].due_date) == effective_month else 0
    previous = {inst.installment_number: inst for inst in existing_schedule}
    logger.debug(
        "Loan %s: repricing %d periods from #%d at %s%% on %s (EMI %s)",
        loan_id, remaining_term, start_number + 1, new_rate, outstanding_principal, emi,
    )

    regenerated: list[Installment] = []
    balance = outstanding_principal

    for month in range(1, remaining_term + 1):
        number = start_number + month
        opening = balance
        interest = period_interest(opening, new_rate)
        principal = reducing_principal(emi, interest, opening, month == remaining_term)

        carried = previous.get(number)
        if carried is not None:
            extra = dict(
                id=carried.id,
                status=carried.status,
                paid_date=carried.paid_date,
                paid_amount=carried.paid_amount,
            )
        else:
            extra = dict(status="ESTIMATED")

        regenerated.append(make_installment(
            number,
            # Clamped per month so a 31st-of-month schedule returns to the 31st
            with_day(add_months(effective_month, offset + month - 1), due_day),
            opening,
            principal,
            interest,
            loan_id=loan_id,
            **extra,
        ))
        balance = max(ZERO, opening - principal)

    return frozen + regenerated


def locate_rate_change(
    schedule: Iterable[Installment],
    effective_date: date,
) -> tuple[Decimal, int]:
    """Return (outstanding principal, remaining term) for a change on *effective_date*.

    The affected installments are exactly those splice_rate_change will
    rebuild; the outstanding principal is the opening balance of the first
    of them.
    """
    effective_month = month_start(effective_date)
    affected = sorted(
        (i for i in schedule if not _is_frozen(i, effective_month)),
        key=lambda i: i.installment_number,
    )
    if not affected:
        return ZERO, 0
    return affected[0].principal_opening, len(affected)


def reprice_schedule(
    loan_id: str,
    schedule: Sequence[Installment],
    event: RateEvent,
    *,
    rate_events: Iterable[RateEvent] = (),
    method: CalculationMethod = "REDUCING_BALANCE",
) -> list[Installment]:
    """Apply a new rate event to *schedule*.

    *rate_events* is the loan's existing rate history; the new event must not
    share an effective date with any of them.
    """
    ensure_new_effective_date(rate_events, event.effective_date)
    outstanding, remaining = locate_rate_change(schedule, event.effective_date)
    return splice_rate_change(
        loan_id,
        event.effective_date,
        event.rate_percentage,
        outstanding,
        schedule,
        remaining,
        method=method,
    )
