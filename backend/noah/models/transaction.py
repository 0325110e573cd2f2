from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, DateTime, func
from typing import Optional

from .authz import Base

# Project ids meaning "not attributable to a project" (company overhead)
OVERHEAD_PROJECT_IDS = (None, '', 'General', 'N/A')


class Transaction(Base):
    __tablename__ = 'transactions'
    TYPE_RECEIPT = 'Receipt'
    TYPE_PAYMENT = 'Payment'
    TYPE_TRANSFER = 'Transfer'
    TYPE_JOURNAL = 'Journal'
    ALL_TYPES = (TYPE_RECEIPT, TYPE_PAYMENT, TYPE_TRANSFER, TYPE_JOURNAL)

    CURRENCY_USD = 'USD'
    CURRENCY_SYP = 'SYP'
    ALL_CURRENCIES = (CURRENCY_USD, CURRENCY_SYP)

    # Status lifecycle: PENDING_SETTLEMENT -> COMPLETED (paid from workshop, then reimbursed from main treasury)
    STATUS_COMPLETED = 'Completed'
    STATUS_PENDING_SETTLEMENT = 'Pending_Settlement'
    ALL_STATUSES = (STATUS_COMPLETED, STATUS_PENDING_SETTLEMENT)

    RECIPIENT_TYPES = ('Staff', 'Craftsman', 'Worker', 'Client', 'Supplier', 'Other')
    LABOR_RECIPIENT_TYPES = ('Craftsman', 'Worker')

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    date: Mapped[str] = mapped_column(Date, nullable=False, index=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default=CURRENCY_USD, index=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    project_id: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    from_account: Mapped[str] = mapped_column(String(128), default='')
    to_account: Mapped[str] = mapped_column(String(128), default='')
    recipient_id: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    recipient_type: Mapped[Optional[str]] = mapped_column(String(16))
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=STATUS_COMPLETED)
    actual_payment_date: Mapped[Optional[str]] = mapped_column(Date)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __init__(self, **kwargs):
        # column defaults only apply at flush; aggregators also see transient rows
        kwargs.setdefault('currency', self.CURRENCY_USD)
        kwargs.setdefault('status', self.STATUS_COMPLETED)
        kwargs.setdefault('description', '')
        super().__init__(**kwargs)

    @property
    def is_overhead(self) -> bool:
        return self.project_id in OVERHEAD_PROJECT_IDS

__all__ = ["Transaction", "OVERHEAD_PROJECT_IDS"]
