"""Financial report commands."""

from datetime import date

import click

from ledgerbook.cli.context import get_db, require, resolve_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.output import money, render_success
from ledgerbook.domain.entities import PaymentMode, ReportWindow
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.permissions import Operation
from ledgerbook.domain.report import ReportService
from ledgerbook.domain.validation import coerce_enum
from ledgerbook.utils.date_parser import PERIODS


def _window_label(window: ReportWindow) -> str:
    start = window.start_date.isoformat() if window.start_date else "beginning"
    end = window.end_date.isoformat() if window.end_date else "today"
    return f"{start} to {end}"


def _period_options(func):
    func = click.option("--month", type=int, help="Month 1-12 (default: whole year)")(func)
    func = click.option("--year", type=int, help="Calendar year (default: current year)")(func)
    return func


@click.group()
def report_group():
    """Financial summary reports."""
    pass


@report_group.command("profit-loss")
@_period_options
@click.pass_context
def profit_loss(ctx, year: int | None, month: int | None):
    """Income against expenses (pre-tax) for a year or month.

    Examples:
        ledgerbook --role accountant report profit-loss --year 2024
        ledgerbook --role accountant report profit-loss --year 2024 --month 3
    """
    service = ReportService(get_db(ctx))

    try:
        require(ctx, Operation.VIEW_REPORTS)
        report = service.profit_and_loss(year=year, month=month)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(
        ctx,
        f"Profit and loss, {_window_label(report.window)}: {report.status.value}",
        payload=report,
        lines=[
            f"  Income:  {money(report.total_income):>14s}",
            f"  Expense: {money(report.total_expense):>14s}",
            f"  Net:     {money(report.net):>14s}",
        ],
    )


@report_group.command("balance-sheet")
@click.pass_context
def balance_sheet(ctx):
    """Current assets, liabilities and equity."""
    service = ReportService(get_db(ctx))

    try:
        require(ctx, Operation.VIEW_REPORTS)
        report = service.balance_sheet()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(
        ctx,
        f"Balance sheet as of {date.today().isoformat()}",
        payload=report,
        lines=[
            f"  Assets:      {money(report.total_assets):>14s}",
            f"  Liabilities: {money(report.total_liabilities):>14s}",
            f"  Equity:      {money(report.equity):>14s}",
        ],
    )


@report_group.command("cash-flow")
@_period_options
@click.pass_context
def cash_flow(ctx, year: int | None, month: int | None):
    """Operating inflow and outflow plus financing for a year or month."""
    service = ReportService(get_db(ctx))

    try:
        require(ctx, Operation.VIEW_REPORTS)
        report = service.cash_flow(year=year, month=month)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(
        ctx,
        f"Cash flow, {_window_label(report.window)}",
        payload=report,
        lines=[
            f"  Inflow:    {money(report.inflow):>14s}",
            f"  Outflow:   {money(report.outflow):>14s}",
            f"  Financing: {money(report.financing):>14s}",
            f"  Net:       {money(report.net):>14s}",
        ],
    )


@report_group.command("tax")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative)")
@click.option("--period", type=click.Choice(PERIODS), help="Named period instead of explicit dates")
@click.option("--payment-mode", help="Only transactions paid by Cash, Card or Bank")
@click.pass_context
def tax(ctx, start_date: str | None, end_date: str | None, period: str | None, payment_mode: str | None):
    """Output tax on income against input tax on expenses.

    Examples:
        ledgerbook --role accountant report tax --period last-month
        ledgerbook --role accountant report tax --start-date 2024-01-01 --end-date 2024-03-31
    """
    service = ReportService(get_db(ctx))

    try:
        require(ctx, Operation.VIEW_REPORTS)
        start, end = resolve_date_range(start_date, end_date, period)
        report = service.tax_report(
            start_date=start,
            end_date=end,
            payment_mode=(
                coerce_enum(PaymentMode, payment_mode, "payment mode") if payment_mode else None
            ),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    render_success(
        ctx,
        f"Tax report, {_window_label(report.window)}",
        payload=report,
        lines=[
            f"  Output tax: {money(report.output_tax):>14s}",
            f"  Input tax:  {money(report.input_tax):>14s}",
            f"  Net tax:    {money(report.net_tax):>14s}",
        ],
    )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
