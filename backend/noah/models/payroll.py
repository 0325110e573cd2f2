from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, ForeignKey, UniqueConstraint
from typing import Optional

from .authz import Base


class PayrollRecord(Base):
    """One employee's salary for one month. Paying it posts a Payment transaction."""
    __tablename__ = 'payroll_records'
    __table_args__ = (UniqueConstraint('employee_id', 'year', 'month', name='uq_payroll_employee_period'),)
    STATUS_PENDING = 'Pending'
    STATUS_PAID = 'Paid'
    ALL_STATUSES = (STATUS_PENDING, STATUS_PAID)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    employee_id: Mapped[str] = mapped_column(ForeignKey('employees.id'), index=True, nullable=False)
    employee_name: Mapped[str] = mapped_column(String(128), nullable=False, default='')
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    basic_salary: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    allowances: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    deductions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    net_salary: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_PENDING)
    payment_date: Mapped[Optional[str]] = mapped_column(Date)
    transaction_id: Mapped[Optional[str]] = mapped_column(String(64))

__all__ = ["PayrollRecord"]
