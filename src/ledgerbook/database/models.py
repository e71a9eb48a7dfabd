"""SQLAlchemy models for ledgerbook database."""

from datetime import datetime, date, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Enum,
    Index,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from ledgerbook.domain.entities import (
    AccountType,
    TransactionType,
    PaymentMode,
    InvoiceStatus,
)

Base = declarative_base()

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def _enum_column(enum_cls, **kwargs) -> Column:
    """Store an enum by its value (e.g. 'Asset'), not its member name."""
    return Column(
        Enum(
            enum_cls,
            values_callable=lambda members: [m.value for m in members],
            native_enum=False,
            validate_strings=True,
            length=20,
        ),
        **kwargs,
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Financial account model.

    ``version`` is bumped on every balance write; SQLAlchemy adds it to the
    UPDATE/DELETE criteria so a concurrent writer's change is never lost.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    account_type = _enum_column(AccountType, nullable=False)
    sub_type = Column(String, nullable=False)
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    opening_balance = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    type = _enum_column(TransactionType, nullable=False)
    category = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    tax_rate = Column(Numeric(7, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(14, 2), nullable=False, default=0)
    total = Column(Numeric(14, 2), nullable=False)
    payment_mode = _enum_column(PaymentMode, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    date = Column(Date, default=date.today, nullable=False)
    description = Column(String, nullable=True)
    created_by = Column(String, nullable=True)
    deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_transactions_account_deleted", "account_id", "deleted"),
        Index("ix_transactions_date", "date"),
    )


class Invoice(Base):
    """Invoice model."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String, unique=True, nullable=False)
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    sub_total = Column(Numeric(14, 2), nullable=False, default=0)
    tax_total = Column(Numeric(14, 2), nullable=False, default=0)
    grand_total = Column(Numeric(14, 2), nullable=False, default=0)
    status = _enum_column(InvoiceStatus, nullable=False, default=InvoiceStatus.PENDING)
    payment_method = _enum_column(PaymentMode, nullable=False)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )


class InvoiceItem(Base):
    """Invoice line item model."""

    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    position = Column(Integer, nullable=False)
    description = Column(String, nullable=False, default="")
    quantity = Column(Numeric(12, 3), nullable=False)
    price = Column(Numeric(14, 2), nullable=False)
    tax_rate = Column(Numeric(7, 2), nullable=False)
    tax_amount = Column(Numeric(14, 2), nullable=False)
    total = Column(Numeric(14, 2), nullable=False)

    # Relationships
    invoice = relationship("Invoice", back_populates="items")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(
    database_url: str, busy_timeout: float = SQLITE_BUSY_TIMEOUT_SECONDS
) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        # Lock waits end in OperationalError instead of blocking forever
        connect_args["timeout"] = busy_timeout
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
