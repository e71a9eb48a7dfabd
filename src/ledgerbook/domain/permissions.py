"""Role-based capability checks.

The entry point calls ``authorize`` before any core operation; services
themselves assume the caller has already been cleared.
"""

from enum import Enum

from ledgerbook.domain.entities import CallerContext
from ledgerbook.domain.errors import AuthorizationError


class Role(str, Enum):
    ADMIN = "admin"
    ACCOUNTANT = "accountant"
    STAFF = "staff"


class Operation(str, Enum):
    CREATE_ACCOUNT = "account:create"
    UPDATE_ACCOUNT = "account:update"
    LIST_ACCOUNTS = "account:list"
    DELETE_ACCOUNT = "account:delete"
    CREATE_TRANSACTION = "transaction:create"
    EDIT_TRANSACTION = "transaction:edit"
    LIST_TRANSACTIONS = "transaction:list"
    DELETE_TRANSACTION = "transaction:delete"
    PURGE_TRANSACTION = "transaction:purge"
    CREATE_INVOICE = "invoice:create"
    UPDATE_INVOICE = "invoice:update"
    LIST_INVOICES = "invoice:list"
    VIEW_REPORTS = "report:view"


_BOOKKEEPING = frozenset(
    {
        Operation.CREATE_ACCOUNT,
        Operation.UPDATE_ACCOUNT,
        Operation.LIST_ACCOUNTS,
        Operation.CREATE_TRANSACTION,
        Operation.EDIT_TRANSACTION,
        Operation.LIST_TRANSACTIONS,
        Operation.CREATE_INVOICE,
        Operation.UPDATE_INVOICE,
        Operation.LIST_INVOICES,
        Operation.VIEW_REPORTS,
    }
)

PERMISSIONS: dict[Role, frozenset[Operation]] = {
    Role.ADMIN: _BOOKKEEPING
    | {
        Operation.DELETE_ACCOUNT,
        Operation.DELETE_TRANSACTION,
        Operation.PURGE_TRANSACTION,
    },
    Role.ACCOUNTANT: _BOOKKEEPING,
    Role.STAFF: frozenset(),
}


def is_allowed(role: str, operation: Operation) -> bool:
    """Return True if ``role`` may run ``operation``. Unknown roles get nothing."""
    try:
        resolved = Role(role.strip().lower())
    except (ValueError, AttributeError):
        return False
    return operation in PERMISSIONS[resolved]


def authorize(caller: CallerContext, operation: Operation) -> None:
    """Raise AuthorizationError unless the caller's role allows the operation."""
    if not is_allowed(caller.role, operation):
        raise AuthorizationError(
            f"Role '{caller.role}' is not permitted to perform {operation.value}"
        )
