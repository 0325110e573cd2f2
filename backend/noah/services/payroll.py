"""Payroll arithmetic and the salary voucher a paid record turns into."""
from __future__ import annotations
from datetime import date
from uuid import uuid4

from noah.models.payroll import PayrollRecord
from noah.models.transaction import Transaction

MAIN_TREASURY = 'الخزينة الرئيسية'


def compute_net_salary(basic_salary: int, allowances: int = 0, deductions: int = 0) -> int:
    return basic_salary + allowances - deductions


def salary_transaction(record: PayrollRecord, recipient_type: str, on: date) -> Transaction:
    """Company-overhead Payment to the employee; the description lands in the salaries bucket."""
    return Transaction(
        id=f'txn-{uuid4().hex[:8]}',
        type=Transaction.TYPE_PAYMENT,
        date=on,
        amount=record.net_salary,
        currency=Transaction.CURRENCY_USD,
        description=f'راتب شهر {record.month}/{record.year} - {record.employee_name}',
        project_id='General',
        from_account=MAIN_TREASURY,
        to_account=record.employee_name,
        recipient_id=record.employee_id,
        recipient_type=recipient_type,
    )


__all__ = ['compute_net_salary', 'salary_transaction', 'MAIN_TREASURY']
