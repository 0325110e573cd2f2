"""Derived balances for trustees, investors, craftsmen and projects.

Nothing here touches the session: every function takes the rows it needs and returns
plain values, so the same code serves the HTTP layer, the portals and the tests.
Amounts are whole currency units. Empty input always yields zero totals.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

GENERAL_BUCKET = 'General'

DEPOSIT = 'Deposit'
WITHDRAWAL = 'Withdrawal'
CAPITAL_INJECTION = 'Capital_Injection'
PROFIT_DISTRIBUTION = 'Profit_Distribution'
RECEIPT = 'Receipt'
PAYMENT = 'Payment'
LABOR_RECIPIENTS = ('Craftsman', 'Worker')


def as_date(value) -> Optional[date]:
    """Accept a date, a datetime or an ISO string; None stays None."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _sum(rows: Iterable[Any], type_: str) -> int:
    return sum(r.amount for r in rows if r.type == type_)


def in_currency(transactions: Iterable[Any], currency: Optional[str]) -> List[Any]:
    """Rows in `currency` (rows without a currency count as USD); None keeps everything."""
    if currency is None:
        return list(transactions)
    return [t for t in transactions if (getattr(t, 'currency', None) or 'USD') == currency]


# --- trustees -----------------------------------------------------------------

def compute_trustee_balance(trustee_id: str, transactions: Iterable[Any]) -> int:
    own = [t for t in transactions if t.trustee_id == trustee_id]
    return _sum(own, DEPOSIT) - _sum(own, WITHDRAWAL)


def trustee_summary(trustee_id: str, transactions: Iterable[Any]) -> Dict[str, Any]:
    own = [t for t in transactions if t.trustee_id == trustee_id]
    deposits = _sum(own, DEPOSIT)
    withdrawals = _sum(own, WITHDRAWAL)
    balance = deposits - withdrawals
    return {
        'trustee_id': trustee_id,
        'total_deposits': deposits,
        'total_withdrawals': withdrawals,
        'balance': balance,
        # a negative box is a displayed state, not an error
        'is_deficit': balance < 0,
        'transaction_count': len(own),
    }


# --- investors ----------------------------------------------------------------

def compute_investor_balance(investor_id: str, transactions: Iterable[Any]) -> int:
    own = [t for t in transactions if t.investor_id == investor_id]
    return _sum(own, CAPITAL_INJECTION) + _sum(own, PROFIT_DISTRIBUTION) - _sum(own, WITHDRAWAL)


def investor_summary(investor_id: str, transactions: Iterable[Any]) -> Dict[str, Any]:
    own = [t for t in transactions if t.investor_id == investor_id]
    capital = _sum(own, CAPITAL_INJECTION)
    profit = _sum(own, PROFIT_DISTRIBUTION)
    withdrawals = _sum(own, WITHDRAWAL)
    balance = capital + profit - withdrawals
    return {
        'investor_id': investor_id,
        'total_capital': capital,
        'total_profit': profit,
        'total_withdrawals': withdrawals,
        'balance': balance,
        'is_deficit': balance < 0,
        'transaction_count': len(own),
    }


# --- craftsmen ----------------------------------------------------------------

@dataclass
class LedgerEntry:
    id: str
    date: Optional[date]
    kind: str  # 'work' (invoice) or 'payment'
    amount: int
    description: str = ''

    def to_dict(self):
        return {
            'id': self.id,
            'date': self.date.isoformat() if self.date else None,
            'kind': self.kind,
            'amount': self.amount,
            'description': self.description,
        }


@dataclass
class ProjectBucket:
    project_id: str
    entries: List[LedgerEntry] = field(default_factory=list)
    total_work: int = 0
    total_paid: int = 0

    @property
    def balance(self) -> int:
        return self.total_work - self.total_paid

    def to_dict(self):
        return {
            'project_id': self.project_id,
            'total_work': self.total_work,
            'total_paid': self.total_paid,
            'balance': self.balance,
            'entries': [e.to_dict() for e in self.entries],
        }


@dataclass
class CraftsmanLedger:
    employee_id: str
    project_breakdown: Dict[str, ProjectBucket]
    total_work: int
    total_paid: int

    @property
    def balance(self) -> int:
        """Positive: the company owes the craftsman. Negative: the craftsman owes the company."""
        return self.total_work - self.total_paid

    def to_dict(self):
        return {
            'employee_id': self.employee_id,
            'project_breakdown': [b.to_dict() for b in self.project_breakdown.values()],
            'total_work': self.total_work,
            'total_paid': self.total_paid,
            'balance': self.balance,
        }


def _bucket_key(project_id: Optional[str]) -> str:
    return project_id or GENERAL_BUCKET


def compute_craftsman_ledger(employee_id: str, invoices: Iterable[Any], payments: Iterable[Any],
                             currency: Optional[str] = 'USD') -> CraftsmanLedger:
    """Per-project work/paid ledger for one craftsman or worker, in one currency.

    Invoices whose related_employee_id matches are work performed; Payment transactions
    whose recipient_id matches are cash paid out. Invoices carry no currency and count as
    USD, like transactions without one. `currency=None` mixes everything.
    """
    buckets: Dict[str, ProjectBucket] = {}

    def bucket(project_id):
        key = _bucket_key(project_id)
        if key not in buckets:
            buckets[key] = ProjectBucket(project_id=key)
        return buckets[key]

    for inv in in_currency(invoices, currency):
        if inv.related_employee_id != employee_id:
            continue
        b = bucket(inv.project_id)
        b.total_work += inv.amount
        b.entries.append(LedgerEntry(inv.id, as_date(inv.date), 'work', inv.amount, getattr(inv, 'category', '') or ''))
    for tx in in_currency(payments, currency):
        if tx.recipient_id != employee_id or tx.type != PAYMENT:
            continue
        b = bucket(tx.project_id)
        b.total_paid += tx.amount
        b.entries.append(LedgerEntry(tx.id, as_date(tx.date), 'payment', tx.amount, tx.description or ''))

    for b in buckets.values():
        # stable sort keeps insertion order for same-day entries
        b.entries.sort(key=lambda e: e.date or date.min)
    return CraftsmanLedger(
        employee_id=employee_id,
        project_breakdown=buckets,
        total_work=sum(b.total_work for b in buckets.values()),
        total_paid=sum(b.total_paid for b in buckets.values()),
    )


# --- projects -----------------------------------------------------------------

def project_financial_summary(project: Any, transactions: Iterable[Any], currency: str = 'USD') -> Dict[str, Any]:
    """Revenue, expenses and contract position for one project in a single currency."""
    rows = [t for t in in_currency(transactions, currency) if t.project_id == project.id]
    received = _sum(rows, RECEIPT)
    expenses = _sum(rows, PAYMENT)
    labor_cost = sum(t.amount for t in rows if t.type == PAYMENT and t.recipient_type in LABOR_RECIPIENTS)
    budget = project.budget or 0
    is_design = project.type == 'Design' or project.status == 'Design'

    company_share = 0
    if is_design:
        remaining = budget - received
    elif project.contract_type == 'LumpSum':
        company_share = received - expenses
        remaining = budget - received
    else:
        pct = project.company_percentage or 0
        company_share = expenses * pct / 100
        if float(company_share).is_integer():
            company_share = int(company_share)
        remaining = expenses + company_share - received

    progress = min(round(expenses / budget * 100), 100) if budget > 0 else 0
    workshop_low = (
        not is_design
        and project.workshop_balance is not None
        and project.workshop_threshold is not None
        and project.workshop_balance <= project.workshop_threshold
    )
    return {
        'project_id': project.id,
        'currency': currency,
        'total_received': received,
        'total_expenses': expenses,
        'labor_cost': labor_cost,
        'company_share': company_share,
        'remaining_client_payments': remaining,
        'financial_progress': progress,
        'workshop_balance': project.workshop_balance,
        'workshop_threshold': project.workshop_threshold,
        'workshop_low': bool(workshop_low),
    }


def dashboard_stats(projects: Iterable[Any], transactions: Iterable[Any], currency: str = 'USD') -> Dict[str, Any]:
    rows = in_currency(transactions, currency)
    revenue = _sum(rows, RECEIPT)
    expenses = _sum(rows, PAYMENT)
    net = revenue - expenses
    return {
        'currency': currency,
        'total_revenue': revenue,
        'total_expenses': expenses,
        'net_profit': net,
        'active_projects': sum(1 for p in projects if p.status in ('Design', 'Execution')),
        'cash_flow_status': 'Positive' if net > 0 else 'Negative',
    }


__all__ = [
    'as_date', 'in_currency',
    'compute_trustee_balance', 'trustee_summary',
    'compute_investor_balance', 'investor_summary',
    'compute_craftsman_ledger', 'CraftsmanLedger', 'ProjectBucket', 'LedgerEntry',
    'project_financial_summary', 'dashboard_stats',
]
