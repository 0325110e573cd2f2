from __future__ import annotations
from typing import Any, Dict, Iterable
from flask import abort

def equals(column):
    """Filter op: column == value."""
    return lambda query, value: query.filter(column == value)

def one_of(allowed: Iterable[str]):
    allowed = tuple(allowed)
    return lambda value: value in allowed

def apply_filters(query, rules: Dict[str, Dict[str, Any]], params: Dict[str, Any]):
    """Generic query-string filter builder.

    rules: { param_name: { 'op': callable(query, value)->query, 'coerce': type/func (optional), 'validate': callable (optional) } }
    Missing, empty and 'all' parameters are ignored.
    """
    for name, meta in rules.items():
        val = params.get(name)
        if val in (None, '', 'all'):
            continue
        if 'coerce' in meta:
            try:
                val = meta['coerce'](val)
            except (TypeError, ValueError):
                abort(400, description=f'{name} invalid')
        if 'validate' in meta and not meta['validate'](val):
            abort(400, description=f'{name} invalid')
        query = meta['op'](query, val)
    return query

__all__ = ['apply_filters', 'equals', 'one_of']
