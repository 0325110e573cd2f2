from __future__ import annotations
from uuid import uuid4
from flask import Blueprint, request, abort, current_app
from sqlalchemy import select, func
from noah import get_db
from noah.decorators.auth import require_module
from noah.decorators.audit import audit_log
from noah.models.project import Project
from noah.models.transaction import Transaction
from noah.models.invoice import Invoice
from noah.services.ledger import project_financial_summary
from noah.utils.filters import apply_filters, equals, one_of
from noah.utils.listing import apply_pagination, build_list_payload
from noah.utils.sorting import apply_multi_sort
from noah.utils.validation import validate_choice, parse_date, require_text

projects_bp = Blueprint('projects', __name__)

EDITABLE_TEXT = ('name', 'client_name', 'client_id', 'location')
EDITABLE_INT = ('budget', 'progress', 'company_percentage', 'agreed_labor_budget', 'workshop_balance', 'workshop_threshold')


def _project_json(p: Project):
    return {
        'id': p.id,
        'name': p.name,
        'client_name': p.client_name,
        'client_id': p.client_id,
        'budget': p.budget,
        'location': p.location,
        'type': p.type,
        'status': p.status,
        'progress': p.progress,
        'start_date': p.start_date.isoformat() if p.start_date else None,
        'contract_type': p.contract_type,
        'company_percentage': p.company_percentage,
        'agreed_labor_budget': p.agreed_labor_budget,
        'workshop_balance': p.workshop_balance,
        'workshop_threshold': p.workshop_threshold,
    }


def _apply_fields(p: Project, data: dict):
    for key in EDITABLE_TEXT:
        if key in data:
            setattr(p, key, (data.get(key) or '').strip() if isinstance(data.get(key), str) else data.get(key))
    for key in EDITABLE_INT:
        if key in data and data[key] is not None:
            try:
                value = int(data[key])
            except (TypeError, ValueError):
                abort(400, description=f'{key} must be a number')
            if value < 0:
                abort(400, description=f'{key} must be >= 0')
            setattr(p, key, value)
        elif key in data:
            if key in ('budget', 'progress'):
                abort(400, description=f'{key} required')
            setattr(p, key, None)
    if p.progress is not None and p.progress > 100:
        abort(400, description='progress must be <= 100')
    if 'type' in data:
        p.type = validate_choice(data['type'], Project.ALL_TYPES, 'type')
    if 'status' in data:
        p.status = validate_choice(data['status'], Project.ALL_STATUSES, 'status')
    if data.get('contract_type') is not None:
        p.contract_type = validate_choice(data['contract_type'], Project.ALL_CONTRACTS, 'contract_type')
    if 'start_date' in data:
        p.start_date = parse_date(data.get('start_date'), 'start_date', required=False)


def _get_or_404(session, project_id: str) -> Project:
    p = session.get(Project, project_id)
    if not p:
        abort(404, description='project not found')
    return p


@projects_bp.get('')
@require_module('projects')
def list_projects():
    session = get_db()
    q = session.query(Project)
    q = apply_filters(q, {
        'status': {'op': equals(Project.status), 'validate': one_of(Project.ALL_STATUSES)},
        'type': {'op': equals(Project.type), 'validate': one_of(Project.ALL_TYPES)},
        'client_id': {'op': equals(Project.client_id)},
    }, request.args)
    search = (request.args.get('search') or '').strip()
    if search:
        like = f'%{search}%'
        q = q.filter(Project.name.ilike(like) | Project.client_name.ilike(like))
    allowed = {'name': Project.name, 'budget': Project.budget, 'progress': Project.progress, 'start_date': Project.start_date}
    q = apply_multi_sort(q, request.args.get('sort'), allowed, Project.id)
    paged_q, total, limit, offset = apply_pagination(q)
    return build_list_payload([_project_json(p) for p in paged_q.all()], total, limit, offset)


@projects_bp.post('')
@require_module('projects')
@audit_log('CREATE', entity='Project', entity_id_key='id',
           describe=lambda data: f"إضافة مشروع جديد: {data.get('name')}")
def create_project():
    data = request.json or {}
    name = require_text(data, 'name')
    session = get_db()
    project_id = str(data.get('id') or f'prj-{uuid4().hex[:8]}')
    if session.get(Project, project_id):
        abort(400, description='project exists')
    p = Project(id=project_id, name=name, client_name='', budget=0, progress=0,
                type=Project.TYPE_EXECUTION, status=Project.STATUS_PROPOSED)
    _apply_fields(p, data)
    session.add(p)
    session.commit()
    return _project_json(p), 201


@projects_bp.get('/<project_id>')
@require_module('projects')
def get_project(project_id):
    return _project_json(_get_or_404(get_db(), project_id))


@projects_bp.put('/<project_id>')
@require_module('projects')
@audit_log('UPDATE', entity='Project', entity_id_arg='project_id',
           describe=lambda data: f"تعديل بيانات مشروع: {data.get('name')}")
def update_project(project_id):
    session = get_db()
    p = _get_or_404(session, project_id)
    data = dict(request.json or {})
    data.pop('id', None)
    if 'name' in data:
        require_text(data, 'name')
    _apply_fields(p, data)
    session.commit()
    return _project_json(p)


@projects_bp.delete('/<project_id>')
@require_module('projects')
@audit_log('DELETE', entity='Project', entity_id_arg='project_id',
           describe=lambda data: f"حذف مشروع: {data.get('name')}")
def delete_project(project_id):
    """Deletion is refused while transactions or invoices still reference the project."""
    session = get_db()
    p = _get_or_404(session, project_id)
    tx_refs = session.execute(select(func.count(Transaction.id)).where(Transaction.project_id == project_id)).scalar_one()
    inv_refs = session.execute(select(func.count(Invoice.id)).where(Invoice.project_id == project_id)).scalar_one()
    if tx_refs or inv_refs:
        current_app.logger.info('Project %s delete refused: %d transactions, %d invoices', project_id, tx_refs, inv_refs)
        abort(409, description=f'project is referenced by {tx_refs} transactions and {inv_refs} invoices')
    name = p.name
    session.delete(p)
    session.commit()
    return {'id': project_id, 'name': name, 'deleted': True}


@projects_bp.get('/<project_id>/financials')
@require_module('projects')
def project_financials(project_id):
    session = get_db()
    p = _get_or_404(session, project_id)
    currency = request.args.get('currency') or current_app.config['DEFAULT_CURRENCY']
    validate_choice(currency, Transaction.ALL_CURRENCIES, 'currency')
    rows = session.execute(select(Transaction).where(Transaction.project_id == project_id)).scalars().all()
    return project_financial_summary(p, rows, currency=currency)
