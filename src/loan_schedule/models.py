"""Value objects exchanged with the persistence and payment layers.

Every record is a frozen dataclass: schedules are rebuilt or spliced into new
lists, never edited in place. Money and rates are Decimal, dates are
``datetime.date``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from .config import (
    DEFAULT_METHOD,
    DEFAULT_RATE_TYPE,
    CalculationMethod,
    InstallmentStatus,
    RateType,
)


@dataclass(frozen=True)
class LoanConfig:
    principal: Decimal
    start_date: date
    term_months: int
    method: CalculationMethod = DEFAULT_METHOD
    payment_day_of_month: Optional[int] = None


@dataclass(frozen=True)
class RateEvent:
    """An annual rate (in percent, e.g. 5.5) in force from ``effective_date`` on."""
    effective_date: date
    rate_percentage: Decimal
    rate_type: RateType = DEFAULT_RATE_TYPE
    base_rate: Optional[str] = None
    margin_percentage: Optional[Decimal] = None
    reason: Optional[str] = None
    # Storage identity, assigned by the persistence layer
    id: Optional[str] = None
    loan_id: Optional[str] = None


@dataclass(frozen=True)
class Installment:
    installment_number: int
    due_date: date
    principal_opening: Decimal
    principal_component: Decimal
    interest_component: Decimal
    total_amount: Decimal
    principal_closing: Decimal
    status: InstallmentStatus = "ESTIMATED"
    # Storage identity
    id: Optional[str] = None
    loan_id: Optional[str] = None
    # Payment record, written by the payment layer
    paid_date: Optional[date] = None
    paid_amount: Optional[Decimal] = None
    # Pass-through overrides, never computed here
    prepayment_amount: Optional[Decimal] = None
    late_fee: Optional[Decimal] = None
    notes: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == "PAID"


@dataclass(frozen=True)
class LoanSummary:
    total_principal_paid: Decimal
    total_interest_paid: Decimal
    total_paid: Decimal
    remaining_principal: Decimal
    remaining_payments: int
    next_payment_date: Optional[date]
    next_payment_amount: Decimal
    # Lifetime figures: paid and unpaid installments alike
    total_interest_projected: Decimal
    total_payment_projected: Decimal


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...] = ()
