from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any, Optional
from noah.models.audit import ActivityLog

log = logging.getLogger(__name__)


def add_audit(actor: Any, action: str, entity: str, description: str = '', entity_id: Optional[str] = None, session=None):
    """Add an activity log entry within the current DB session.

    Parameters:
      actor: the acting principal (anything exposing id / name / role)
      action: CREATE, UPDATE, DELETE, APPROVE or LOGIN
      entity: entity label (Project, Transaction, Settings, ...)
      description: human readable summary shown in the activity feed
      entity_id: optional primary key string
    """
    if session is None:
        from noah import get_db
        session = get_db()
    entry = ActivityLog(
        user_id=str(getattr(actor, 'id', '') or ''),
        user_name=getattr(actor, 'name', '') or '',
        user_role=getattr(actor, 'role', '') or '',
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        description=description,
        timestamp=datetime.now(timezone.utc),
    )
    session.add(entry)
    log.info('[AUDIT] %s performed %s on %s: %s', entry.user_name, action, entity, description)
    # No commit here; caller's transaction boundary controls durability.
    return entry


def filter_logs(logs, search: str = '', role: Optional[str] = None, action: Optional[str] = None):
    """Activity feed filter: free-text over description / user name / entity, plus exact role and action."""
    term = (search or '').strip().lower()
    out = []
    for entry in logs:
        if term and not any(term in (v or '').lower() for v in (entry.description, entry.user_name, entry.entity)):
            continue
        if role and role != 'all' and entry.user_role != role:
            continue
        if action and action != 'all' and entry.action != action:
            continue
        out.append(entry)
    return out
