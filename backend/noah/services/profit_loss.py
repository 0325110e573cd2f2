"""Profit and loss roll-up for a fiscal year or quarter.

Project gross profit follows the project type: design-like work (Design, Supervision)
books its whole revenue as profit, everything else books revenue minus expense.
Operating expenses come from the expense categorizer, and the monthly series is
computed month by month with the same helpers as the period totals.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence

from noah.models.transaction import OVERHEAD_PROJECT_IDS
from noah.services.expenses import categorize_expenses
from noah.services.ledger import as_date, in_currency, RECEIPT, PAYMENT

ANNUAL = 'Annual'
QUARTERS = {
    'Q1': (1, 2, 3),
    'Q2': (4, 5, 6),
    'Q3': (7, 8, 9),
    'Q4': (10, 11, 12),
}
PERIODS = (ANNUAL,) + tuple(QUARTERS)
NO_COGS_TYPES = ('Design', 'Supervision')

MONTH_LABELS = ('يناير', 'فبراير', 'مارس', 'أبريل', 'مايو', 'يونيو', 'يوليو', 'أغسطس', 'سبتمبر', 'أكتوبر', 'نوفمبر', 'ديسمبر')


def period_months(period: str) -> Sequence[int]:
    if period == ANNUAL:
        return tuple(range(1, 13))
    try:
        return QUARTERS[period]
    except KeyError:
        raise ValueError(f'period must be one of {", ".join(PERIODS)}') from None


def _in_months(transactions: Iterable[Any], year: int, months: Sequence[int]) -> List[Any]:
    out = []
    for t in transactions:
        d = as_date(t.date)
        if d is not None and d.year == year and d.month in months:
            out.append(t)
    return out


def project_profits(transactions: Sequence[Any], projects: Iterable[Any]) -> List[Dict[str, Any]]:
    """Per-project revenue/expense/profit for projects referenced by `transactions`.

    Ids with no matching project are skipped.
    """
    by_id = {p.id: p for p in projects}
    seen: List[str] = []
    for t in transactions:
        if t.project_id not in OVERHEAD_PROJECT_IDS and t.project_id not in seen:
            seen.append(t.project_id)
    rows = []
    for pid in seen:
        project = by_id.get(pid)
        if project is None:
            continue
        own = [t for t in transactions if t.project_id == pid]
        revenue = sum(t.amount for t in own if t.type == RECEIPT)
        expense = sum(t.amount for t in own if t.type == PAYMENT)
        design_like = project.type in NO_COGS_TYPES
        rows.append({
            'project_id': pid,
            'name': project.name,
            'client_name': getattr(project, 'client_name', ''),
            'type': project.type,
            'status': project.status,
            'design_like': design_like,
            'period_revenue': revenue,
            'period_expense': expense,
            'period_profit': revenue if design_like else revenue - expense,
        })
    return rows


def compute_profit_loss(year: int, period: str, transactions: Iterable[Any], projects: Iterable[Any],
                        currency: Optional[str] = None) -> Dict[str, Any]:
    months = period_months(period)
    projects = list(projects)
    scoped = in_currency(transactions, currency)
    filtered = _in_months(scoped, year, months)

    rows = project_profits(filtered, projects)
    design_profit = sum(r['period_profit'] for r in rows if r['design_like'])
    execution_profit = sum(r['period_profit'] for r in rows if not r['design_like'])
    gross = design_profit + execution_profit
    opex = categorize_expenses(filtered)

    monthly = []
    for m in months:
        month_rows = _in_months(scoped, year, (m,))
        m_profit = sum(r['period_profit'] for r in project_profits(month_rows, projects))
        m_opex = categorize_expenses(month_rows)['total_opex']
        monthly.append({
            'month': m,
            'label': MONTH_LABELS[m - 1],
            # chart bars never go below zero; net_income keeps the raw figure
            'project_profit': max(0, m_profit),
            'gross_profit': m_profit,
            'operating_expenses': m_opex,
            'net_income': m_profit - m_opex,
        })

    return {
        'year': year,
        'period': period,
        'currency': currency,
        'projects': rows,
        'total_design_profit': design_profit,
        'total_execution_profit': execution_profit,
        'total_project_gross_profit': gross,
        'operating_expenses': opex['total_opex'],
        'expenses_breakdown': opex['breakdown'],
        'net_profit': gross - opex['total_opex'],
        'monthly_series': monthly,
    }


__all__ = ['compute_profit_loss', 'project_profits', 'period_months', 'PERIODS']
