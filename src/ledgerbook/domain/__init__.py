"""Domain layer for ledgerbook application."""

_SERVICES = {
    "AccountLedger": "ledgerbook.domain.ledger",
    "AccountService": "ledgerbook.domain.account",
    "TransactionService": "ledgerbook.domain.transaction",
    "InvoiceService": "ledgerbook.domain.invoice",
    "ReportService": "ledgerbook.domain.report",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain entities; resolve
# them lazily so importing ledgerbook.domain.entities never loops back here.
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
