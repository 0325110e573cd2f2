from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Tuple

from noah.models.transaction import OVERHEAD_PROJECT_IDS
from noah.services.ledger import in_currency, PAYMENT

SALARIES = 'رواتب وأجور الموظفين'
RENT_UTILITIES = 'إيجار ومرافق'
HOSPITALITY = 'ضيافة ونظافة'
MAINTENANCE = 'صيانة وإصلاحات'
MARKETING = 'تسويق وإعلانات'
GOVERNMENT_FEES = 'رسوم حكومية'
MISCELLANEOUS = 'نثريات ومصاريف أخرى'

# First match wins; order matters.
CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (SALARIES, ('راتب', 'أجور', 'سلفة', 'مكافأة')),
    (RENT_UTILITIES, ('إيجار', 'كهرباء', 'ماء', 'نت', 'اتصالات')),
    (HOSPITALITY, ('ضيافة', 'قهوة', 'شاي', 'تنظيف', 'منظفات', 'مناديل')),
    (MAINTENANCE, ('صيانة', 'إصلاح', 'سباكة مكتب', 'تكييف')),
    (MARKETING, ('تسويق', 'إعلان', 'سوشيال')),
    (GOVERNMENT_FEES, ('رخصة', 'سجل', 'غرفة', 'تجديد', 'جوازات')),
)

ALL_CATEGORIES = tuple(name for name, _ in CATEGORY_RULES) + (MISCELLANEOUS,)


def is_operating_expense(tx: Any) -> bool:
    """Company overhead: a Payment not attributable to any project."""
    return tx.type == PAYMENT and tx.project_id in OVERHEAD_PROJECT_IDS


def categorize(description: Optional[str]) -> str:
    text = (description or '').lower()
    for name, keywords in CATEGORY_RULES:
        if any(k in text for k in keywords):
            return name
    return MISCELLANEOUS


def categorize_expenses(transactions: Iterable[Any], currency: Optional[str] = None) -> Dict[str, Any]:
    """Bucket operating expenses by description keywords.

    Returns {'total_opex', 'breakdown': [{'category', 'total_amount', 'count'}]} with the
    breakdown sorted by amount, largest first. Categories with no rows are left out.
    """
    totals: Dict[str, List[int]] = {}
    for tx in in_currency(transactions, currency):
        if not is_operating_expense(tx):
            continue
        acc = totals.setdefault(categorize(tx.description), [0, 0])
        acc[0] += tx.amount
        acc[1] += 1
    breakdown = [
        {'category': name, 'total_amount': amount, 'count': count}
        for name, (amount, count) in totals.items()
    ]
    breakdown.sort(key=lambda row: row['total_amount'], reverse=True)
    return {
        'total_opex': sum(row['total_amount'] for row in breakdown),
        'breakdown': breakdown,
    }


__all__ = ['categorize_expenses', 'categorize', 'is_operating_expense', 'CATEGORY_RULES', 'ALL_CATEGORIES']
