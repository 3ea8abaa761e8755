"""Schedule integrity checks.

Advisory only: problems are reported in the result, never raised, and the
schedule is never modified. Checked for every installment:

- principal + interest == total
- opening - closing == principal

and, once for the whole schedule, that the last closing balance is zero.
Each comparison allows one cent of rounding drift.
"""
from __future__ import annotations

from typing import Sequence

from .config import BALANCE_TOLERANCE
from .models import Installment, ValidationResult


def validate_schedule(schedule: Sequence[Installment]) -> ValidationResult:
    errors: list[str] = []

    for inst in schedule:
        total = inst.principal_component + inst.interest_component
        if abs(total - inst.total_amount) > BALANCE_TOLERANCE:
            errors.append(
                f"Installment {inst.installment_number}: Principal + Interest ({total:.2f}) "
                f"!= Total ({inst.total_amount:.2f})"
            )

        repaid = inst.principal_opening - inst.principal_closing
        if abs(repaid - inst.principal_component) > BALANCE_TOLERANCE:
            errors.append(
                f"Installment {inst.installment_number}: Opening - Closing ({repaid:.2f}) "
                f"!= Principal component ({inst.principal_component:.2f})"
            )

    if schedule and abs(schedule[-1].principal_closing) > BALANCE_TOLERANCE:
        errors.append(
            f"Final closing balance is not zero: {schedule[-1].principal_closing:.2f}"
        )

    return ValidationResult(valid=not errors, errors=tuple(errors))
