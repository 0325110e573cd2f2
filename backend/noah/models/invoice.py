from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, DateTime, func
from typing import Optional

from .authz import Base


class Invoice(Base):
    __tablename__ = 'invoices'
    TYPE_SALES = 'Sales'
    TYPE_PURCHASE = 'Purchase'
    TYPE_SUPPLIER = 'Supplier'
    ALL_TYPES = (TYPE_SALES, TYPE_PURCHASE, TYPE_SUPPLIER)

    STATUS_PAID = 'Paid'
    STATUS_PENDING = 'Pending'
    STATUS_OVERDUE = 'Overdue'
    ALL_STATUSES = (STATUS_PAID, STATUS_PENDING, STATUS_OVERDUE)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    invoice_number: Mapped[str] = mapped_column(String(32), nullable=False, default='')
    date: Mapped[str] = mapped_column(Date, nullable=False, index=True)
    project_id: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default=TYPE_PURCHASE)
    category: Mapped[str] = mapped_column(String(64), default='')
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_PENDING)
    supplier_or_client: Mapped[Optional[str]] = mapped_column(String(128))
    # Work performed by a craftsman/worker ("owed to" entry in their ledger)
    related_employee_id: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

__all__ = ["Invoice"]
