from __future__ import annotations
from flask import Blueprint, request, abort
from noah import get_db
from noah.decorators.auth import require_module
from noah.models.audit import ActivityLog
from noah.services.audit import filter_logs
from noah.utils.listing import build_list_payload
from noah.config.pagination import normalize_pagination

audit_bp = Blueprint('audit', __name__)


def _log_json(entry: ActivityLog):
    return {
        'id': entry.id,
        'user_id': entry.user_id,
        'user_name': entry.user_name,
        'user_role': entry.user_role,
        'action': entry.action,
        'entity': entry.entity,
        'entity_id': entry.entity_id,
        'description': entry.description,
        'timestamp': entry.timestamp.isoformat() if entry.timestamp else None,
    }


@audit_bp.get('/logs')
@require_module('activity_log')
def list_logs():
    """Activity feed, newest first, filtered by free text, role and action."""
    try:
        limit, offset = normalize_pagination(request.args.get('limit'), request.args.get('offset'))
    except ValueError as e:
        abort(400, description=str(e))
    session = get_db()
    logs = session.query(ActivityLog).order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc()).all()
    matched = filter_logs(
        logs,
        search=request.args.get('search', ''),
        role=request.args.get('role'),
        action=request.args.get('action'),
    )
    page = matched[offset:offset + limit]
    return build_list_payload([_log_json(e) for e in page], len(matched), limit, offset)
