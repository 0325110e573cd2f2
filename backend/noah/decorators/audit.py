from __future__ import annotations
"""Activity-log decorator to reduce repetitive add_audit() calls in route handlers.

Usage examples:

@audit_log('CREATE', entity='Project', entity_id_key='id',
           describe=lambda data: f"إضافة مشروع جديد: {data.get('name')}")
def create_project():
    ... return {'id': project.id, 'name': project.name}, 201

@audit_log('DELETE', entity='Project', entity_id_arg='project_id')
def delete_project(project_id): ...

Parameters:
  action: CREATE, UPDATE, DELETE or APPROVE
  entity: entity label shown in the activity feed (Project, Transaction, Invoice, Settings)
  entity_id_key: key in the returned JSON object whose value becomes entity_id.
  entity_id_arg: name of the path parameter to use for entity_id (fallback if entity_id_key absent).
  describe: callable building the human readable description from the returned JSON.

Only successful responses (status < 400) are recorded. The acting principal comes from the JWT.
"""

import logging
from functools import wraps
from typing import Any, Callable, Optional

from noah.services.audit import add_audit
from noah.services.policy import current_principal

log = logging.getLogger(__name__)


def _extract_payload(rv: Any):
    """Return (data, status) where data is the JSON-able dict for inspection."""
    if isinstance(rv, tuple) and rv:
        status = rv[1] if len(rv) > 1 and isinstance(rv[1], int) else 200
        return rv[0], status
    return rv, 200


def audit_log(
    action: str,
    *,
    entity: str,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    describe: Optional[Callable[[dict], str]] = None,
    commit: bool = True,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            rv = fn(*args, **kwargs)
            data, status = _extract_payload(rv)
            if status >= 400:
                return rv
            if not isinstance(data, dict):
                data = {}
            entity_id = None
            if entity_id_key and entity_id_key in data:
                entity_id = data.get(entity_id_key)
            elif entity_id_arg and entity_id_arg in kwargs:
                entity_id = kwargs.get(entity_id_arg)
            description = describe(data) if describe else f'{action} {entity} {entity_id or ""}'.strip()
            from noah import get_db
            session = get_db()
            try:
                add_audit(current_principal(), action, entity, description, entity_id=entity_id, session=session)
                if commit:
                    session.commit()
            except Exception:
                # the main change is already committed; a lost feed entry must not fail the request
                log.exception('activity log write failed for %s %s', action, entity)
                session.rollback()
            return rv
        return wrapper
    return outer

__all__ = ['audit_log']
