"""Schedule rollups: per-loan summary and portfolio-wide weighted rate."""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from .calculator import round_money
from .config import ZERO
from .models import Installment, LoanSummary


def summarize(schedule: Sequence[Installment], original_principal: Decimal) -> LoanSummary:
    """Reduce *schedule* to paid, remaining and projected totals.

    Projected totals cover every installment, paid or not: they describe the
    lifetime cost of the loan. The next payment is the first unpaid
    installment that is DUE or ESTIMATED; OVERDUE ones are passed over.
    """
    paid = [i for i in schedule if i.is_paid]
    pending = [i for i in schedule if not i.is_paid]

    principal_paid = sum((i.principal_component for i in paid), ZERO)
    interest_paid = sum((i.interest_component for i in paid), ZERO)
    remaining_principal = pending[0].principal_opening if pending else ZERO
    upcoming = next((i for i in pending if i.status in ("DUE", "ESTIMATED")), None)

    return LoanSummary(
        total_principal_paid=round_money(principal_paid),
        total_interest_paid=round_money(interest_paid),
        total_paid=round_money(principal_paid + interest_paid),
        remaining_principal=round_money(remaining_principal),
        remaining_payments=len(pending),
        next_payment_date=upcoming.due_date if upcoming else None,
        next_payment_amount=upcoming.total_amount if upcoming else ZERO,
        total_interest_projected=round_money(sum((i.interest_component for i in schedule), ZERO)),
        total_payment_projected=round_money(sum((i.total_amount for i in schedule), ZERO)),
    )


def weighted_average_rate(loans: Iterable[tuple[Decimal, Decimal]]) -> Decimal:
    """Outstanding-weighted mean of current rates.

    *loans* yields ``(outstanding_principal, rate_percent)`` pairs. Returns
    zero when there is nothing outstanding.
    """
    total = ZERO
    weighted = ZERO
    for outstanding, rate in loans:
        total += outstanding
        weighted += outstanding * rate
    if total == ZERO:
        return ZERO
    return round_money(weighted / total)
