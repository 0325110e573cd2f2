from __future__ import annotations
from typing import List, Tuple
from flask import abort


def parse_sort(sort_expr: str | None, allowed: dict) -> List[Tuple[str, bool]]:
    """Split '-date,amount' into [('date', True), ('amount', False)].

    Unknown keys abort with 400; blank tokens are skipped.
    """
    keys = []
    for token in (sort_expr or '').split(','):
        token = token.strip()
        if not token:
            continue
        name = token.lstrip('-')
        if name not in allowed:
            abort(400, description=f'Invalid sort field {name}')
        keys.append((name, token.startswith('-')))
    return keys


def apply_multi_sort(query, sort_expr: str | None, allowed: dict, tie_breaker, default: str | None = None):
    """Order a query by the requested keys (or `default`), then by `tie_breaker`."""
    keys = parse_sort(sort_expr, allowed) or parse_sort(default, allowed)
    clauses = [allowed[name].desc() if desc else allowed[name].asc() for name, desc in keys]
    clauses.append(tie_breaker.asc())
    return query.order_by(*clauses)


__all__ = ['apply_multi_sort', 'parse_sort']
