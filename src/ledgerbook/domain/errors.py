"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``status_code`` is the
    client-facing status the entry point reports for the category.
    """

    status_code = 400


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist or is logically deleted."""

    status_code = 404


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    status_code = 409


class DependencyError(ConflictError):
    """Operation blocked due to dependent domain data."""

    status_code = 400


class DuplicateAccountError(ConflictError):
    """Account name already taken. Reported as a 400 rather than a 409."""

    status_code = 400


class AuthorizationError(DomainError):
    """Caller role is not permitted to run the operation."""

    status_code = 403


class PersistenceError(DomainError):
    """Datastore or atomic-unit failure."""

    status_code = 500
    retryable = False


class ConcurrencyError(PersistenceError):
    """A concurrent writer changed the record first. Safe to retry."""

    retryable = True


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing or deleted transaction."""
    return f"Transaction {transaction_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def duplicate_invoice_number(invoice_number: str) -> str:
    """Return message for duplicate invoice number."""
    return f"Invoice with number '{invoice_number}' already exists"


def missing_fields(fields: list[str]) -> str:
    """Return message for missing required fields."""
    return f"Missing required fields: {', '.join(fields)}"


def account_delete_blocked(account_id: int, transaction_count: int) -> str:
    """Return message when account still has active transactions."""
    return (
        f"Cannot delete account {account_id}: it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Please reassign or delete them first."
    )
