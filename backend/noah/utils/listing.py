from __future__ import annotations
from typing import Tuple
from flask import request, abort
from sqlalchemy.orm import Query
from noah.config.pagination import normalize_pagination

def apply_pagination(q: Query) -> Tuple[Query, int, int, int]:
    try:
        limit, offset = normalize_pagination(request.args.get('limit'), request.args.get('offset'))
    except ValueError as e:
        abort(400, description=str(e))
    total = q.count()
    return q.offset(offset).limit(limit), total, limit, offset

def build_list_payload(rows: list, total: int, limit: int, offset: int, **extra):
    payload = {
        'data': rows,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'returned': len(rows)
        }
    }
    payload.update(extra)
    return payload

__all__ = ['apply_pagination', 'build_list_payload']
