"""Engine-wide constants and configuration defaults.

All tuneable defaults live here so there is a single place to adjust them.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Literal

# ── Type aliases ──────────────────────────────────────────────────────────────

CalculationMethod = Literal["FLAT", "REDUCING_BALANCE"]
RateType = Literal["FIXED", "FLOATING", "TEASER"]
InstallmentStatus = Literal["ESTIMATED", "DUE", "PAID", "OVERDUE", "WAIVED"]

VALID_METHODS: frozenset[str] = frozenset({"FLAT", "REDUCING_BALANCE"})
VALID_RATE_TYPES: frozenset[str] = frozenset({"FIXED", "FLOATING", "TEASER"})

# ── Loan defaults ─────────────────────────────────────────────────────────────

DEFAULT_METHOD: CalculationMethod = "REDUCING_BALANCE"
DEFAULT_RATE_TYPE: RateType = "FLOATING"
DEFAULT_TERM_MONTHS: int = 240  # 20 years

# ── Schedule integrity ────────────────────────────────────────────────────────

BALANCE_TOLERANCE = Decimal("0.01")  # one cent of rounding drift per check

# ── Numeric convenience ───────────────────────────────────────────────────────

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = Decimal("12")
