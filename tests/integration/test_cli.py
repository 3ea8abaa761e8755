"""Integration tests for the CLI — generation and repricing end to end."""
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest
from click.testing import CliRunner

from loan_schedule.cli import main
from loan_schedule.models import LoanConfig, RateEvent
from loan_schedule.recalculator import reprice_schedule
from loan_schedule.schedule import generate_schedule
from loan_schedule.summary import summarize
from loan_schedule.validator import validate_schedule

_LOAN = [
    "--principal", "12000000",
    "--rate", "12",
    "--term", "12",
    "--start", "2024-01-01",
]


# ──────────────────────────────────────────────────────────────────────────────
# Full pipeline tests (no CLI runner — direct function call)
# ──────────────────────────────────────────────────────────────────────────────

class TestOriginationToRepricing:
    """Generate, pay six installments, raise the rate, summarise."""

    def _run(self):
        start = date(2024, 1, 1)
        initial = RateEvent(effective_date=start, rate_percentage=Decimal("12"), rate_type="FLOATING")
        config = LoanConfig(principal=Decimal("12000000"), start_date=start, term_months=12)
        rows = generate_schedule(config, [initial])
        rows = [
            replace(i, status="PAID", paid_date=i.due_date, paid_amount=i.total_amount)
            if i.installment_number <= 6 else i
            for i in rows
        ]
        event = RateEvent(effective_date=date(2024, 7, 1), rate_percentage=Decimal("14"))
        return rows, reprice_schedule("loan-1", rows, event, rate_events=[initial])

    def test_spliced_schedule_is_valid(self):
        _, spliced = self._run()
        assert validate_schedule(spliced).valid

    def test_summary_reflects_history_and_new_rate(self):
        before, after = self._run()
        old = summarize(before, Decimal("12000000"))
        new = summarize(after, Decimal("12000000"))
        assert new.total_paid == old.total_paid
        assert new.remaining_principal == old.remaining_principal
        assert new.total_interest_projected > old.total_interest_projected


class TestCLIRunner:
    """Smoke tests via Click test runner."""

    def test_help(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "schedule" in result.output
        assert "reprice" in result.output

    def test_schedule(self):
        result = CliRunner().invoke(main, ["schedule", *_LOAN])
        assert result.exit_code == 0, result.output
        assert "Loan Summary" in result.output
        assert "Schedule integrity: OK" in result.output

    def test_flat_schedule(self):
        result = CliRunner().invoke(
            main, ["schedule", "--principal", "1200000", "--rate", "10", "--term", "12",
                   "--start", "2024-01-01", "--method", "FLAT"],
        )
        assert result.exit_code == 0, result.output
        assert "Schedule integrity: OK" in result.output

    def test_verbose_logging(self):
        result = CliRunner().invoke(main, ["--verbose", "schedule", *_LOAN])
        assert result.exit_code == 0, result.output

    def test_reprice(self):
        result = CliRunner().invoke(
            main, ["reprice", *_LOAN, "--new-rate", "15", "--effective", "2024-07-01", "--paid-through", "6"],
        )
        assert result.exit_code == 0, result.output
        assert "Rate change" in result.output
        assert "Schedule integrity: OK" in result.output

    @pytest.mark.parametrize("args", [
        ["schedule", "--principal", "abc", "--rate", "12", "--start", "2024-01-01"],
        ["schedule", "--principal", "-5", "--rate", "12", "--start", "2024-01-01"],
        ["schedule", "--principal", "1000", "--rate", "12", "--start", "01/02/2024"],
        ["schedule", "--principal", "nan", "--rate", "12", "--start", "2024-01-01"],
        ["schedule", "--principal", "inf", "--rate", "12", "--start", "2024-01-01"],
        ["schedule", "--principal", "1000", "--rate", "sNaN", "--start", "2024-01-01"],
    ])
    def test_invalid_input(self, args):
        result = CliRunner().invoke(main, args)
        assert result.exit_code == 1
        # Reported and exited, not a traceback
        assert isinstance(result.exception, SystemExit)

    def test_reprice_flat_loan_rejected(self):
        result = CliRunner().invoke(
            main, ["reprice", *_LOAN, "--method", "FLAT", "--new-rate", "15", "--effective", "2024-07-01"],
        )
        assert result.exit_code == 1
        assert "REDUCING_BALANCE" in result.output

    def test_reprice_duplicate_effective_date_rejected(self):
        result = CliRunner().invoke(
            main, ["reprice", *_LOAN, "--new-rate", "15", "--effective", "2024-01-01"],
        )
        assert result.exit_code == 1
        assert "already exists" in result.output
