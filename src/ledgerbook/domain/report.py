"""Report engine: read-only aggregations over accounts and transactions."""

from datetime import MAXYEAR, MINYEAR, date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    AccountType,
    BalanceSheet,
    CashFlow,
    PaymentMode,
    ProfitAndLoss,
    ProfitStatus,
    ReportWindow,
    TaxReport,
    TransactionType,
)
from ledgerbook.domain.errors import ValidationError

ZERO = Decimal("0.00")


def report_window(year: Optional[int] = None, month: Optional[int] = None) -> ReportWindow:
    """Convert a year and optional 1-indexed month into an inclusive date range.

    Args:
        year: Calendar year (defaults to the current year)
        month: Month 1..12; when omitted the whole year is covered

    Returns:
        ReportWindow from the first to the last calendar day

    Raises:
        ValidationError: If the year is outside what a date can hold or the
            month is outside 1..12
    """
    if year is None:
        year = date.today().year
    if not MINYEAR <= year <= MAXYEAR:
        raise ValidationError(f"Invalid year {year}. Expected {MINYEAR}-{MAXYEAR}")
    if month is None:
        return ReportWindow(start_date=date(year, 1, 1), end_date=date(year, 12, 31))
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month {month}. Expected 1-12")

    start = date(year, month, 1)
    # day=31 clamps to the last day of the month
    end = start + relativedelta(day=31)
    return ReportWindow(start_date=start, end_date=end)


def profit_status(net: Decimal) -> ProfitStatus:
    if net > 0:
        return ProfitStatus.PROFIT
    if net < 0:
        return ProfitStatus.LOSS
    return ProfitStatus.BREAK_EVEN


class ReportService:
    """Service for building financial summary reports.

    Reports are point-in-time reads: they take no locks and ignore
    soft-deleted transactions.
    """

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _sums(
        self,
        field: str,
        window: ReportWindow,
        payment_mode: Optional[PaymentMode] = None,
    ) -> dict[TransactionType, Decimal]:
        return self.db.sum_transactions_by_type(
            field,
            start_date=window.start_date,
            end_date=window.end_date,
            payment_mode=payment_mode,
        )

    def profit_and_loss(self, year: Optional[int] = None, month: Optional[int] = None) -> ProfitAndLoss:
        """Income versus expense over a year or month, pre-tax.

        Args:
            year: Calendar year (defaults to the current year)
            month: Optional month 1..12

        Returns:
            ProfitAndLoss with totals, net and status
        """
        window = report_window(year, month)
        sums = self._sums("amount", window)
        income = sums.get(TransactionType.INCOME, ZERO)
        expense = sums.get(TransactionType.EXPENSE, ZERO)
        net = income - expense
        return ProfitAndLoss(
            window=window,
            total_income=income,
            total_expense=expense,
            net=net,
            status=profit_status(net),
        )

    def balance_sheet(self) -> BalanceSheet:
        """Current Asset and Liability balances; equity is their difference."""
        sums = self.db.sum_balances_by_account_type()
        assets = sums.get(AccountType.ASSET, ZERO)
        liabilities = sums.get(AccountType.LIABILITY, ZERO)
        return BalanceSheet(
            total_assets=assets,
            total_liabilities=liabilities,
            equity=assets - liabilities,
        )

    def cash_flow(self, year: Optional[int] = None, month: Optional[int] = None) -> CashFlow:
        """Operating inflow and outflow plus financing (Loan and Investment)."""
        window = report_window(year, month)
        sums = self._sums("amount", window)
        inflow = sums.get(TransactionType.INCOME, ZERO)
        outflow = sums.get(TransactionType.EXPENSE, ZERO)
        financing = sums.get(TransactionType.LOAN, ZERO) + sums.get(
            TransactionType.INVESTMENT, ZERO
        )
        return CashFlow(
            window=window,
            inflow=inflow,
            outflow=outflow,
            financing=financing,
            net=inflow - outflow,
        )

    def tax_report(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_mode: Optional[PaymentMode] = None,
    ) -> TaxReport:
        """Output tax (on income) against input tax (on expenses).

        Args:
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            payment_mode: Optional payment mode filter

        Returns:
            TaxReport with output, input and net tax

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must not be after end date")

        window = ReportWindow(start_date=start_date, end_date=end_date)
        sums = self._sums("tax_amount", window, payment_mode)
        output_tax = sums.get(TransactionType.INCOME, ZERO)
        input_tax = sums.get(TransactionType.EXPENSE, ZERO)
        return TaxReport(
            window=window,
            payment_mode=payment_mode,
            output_tax=output_tax,
            input_tax=input_tax,
            net_tax=output_tax - input_tax,
        )
