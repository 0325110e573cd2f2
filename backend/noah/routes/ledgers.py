from __future__ import annotations
from uuid import uuid4
from flask import Blueprint, request, abort, current_app
from sqlalchemy import select, or_
from noah import get_db
from noah.constants import roles
from noah.decorators.auth import require_module, require_portal
from noah.decorators.audit import audit_log
from noah.models.trustee import Trustee, TrustTransaction
from noah.models.investor import Investor, InvestorTransaction
from noah.models.employee import Employee
from noah.models.client import Client
from noah.models.project import Project
from noah.models.transaction import Transaction
from noah.models.invoice import Invoice
from noah.services.formatting import format_currency
from noah.services.ledger import trustee_summary, investor_summary, compute_craftsman_ledger, project_financial_summary
from noah.services.policy import assert_owns_portal_record, current_principal
from noah.utils.validation import validate_choice, validate_amount, validate_non_negative, parse_date

ledgers_bp = Blueprint('ledgers', __name__)
portal_bp = Blueprint('portal', __name__)


def _currency():
    currency = request.args.get('currency') or current_app.config['DEFAULT_CURRENCY']
    return validate_choice(currency, Transaction.ALL_CURRENCIES, 'currency')


def _movement_json(t):
    return {'id': t.id, 'type': t.type, 'amount': t.amount, 'date': t.date.isoformat() if t.date else None, 'notes': t.notes}


def _trustee_payload(session, trustee_id):
    trustee = session.get(Trustee, trustee_id)
    if not trustee:
        abort(404, description='trustee not found')
    rows = session.execute(
        select(TrustTransaction).where(TrustTransaction.trustee_id == trustee_id).order_by(TrustTransaction.date)
    ).scalars().all()
    return {
        'trustee': {'id': trustee.id, 'name': trustee.name, 'relation': trustee.relation},
        **trustee_summary(trustee_id, rows),
        'transactions': [_movement_json(t) for t in rows],
    }


def _investor_payload(session, investor_id):
    investor = session.get(Investor, investor_id)
    if not investor:
        abort(404, description='investor not found')
    rows = session.execute(
        select(InvestorTransaction).where(InvestorTransaction.investor_id == investor_id).order_by(InvestorTransaction.date)
    ).scalars().all()
    return {
        'investor': {
            'id': investor.id,
            'name': investor.name,
            'kind': investor.kind,
            'profit_percentage': investor.profit_percentage,
            'linked_project_ids': list(investor.linked_project_ids or []),
        },
        **investor_summary(investor_id, rows),
        'transactions': [_movement_json(t) for t in rows],
    }


def _craftsman_payload(session, employee_id, currency):
    emp = session.get(Employee, employee_id)
    if not emp:
        abort(404, description='employee not found')
    invoices = session.execute(select(Invoice).where(Invoice.related_employee_id == employee_id)).scalars().all()
    payments = session.execute(
        select(Transaction).where(Transaction.recipient_id == employee_id, Transaction.type == Transaction.TYPE_PAYMENT)
    ).scalars().all()
    ledger = compute_craftsman_ledger(employee_id, invoices, payments, currency=currency)
    return {'employee': {'id': emp.id, 'name': emp.name, 'type': emp.type, 'job_title': emp.job_title},
            'currency': currency, **ledger.to_dict()}


@ledgers_bp.get('/trustees/<trustee_id>')
@require_module('trusts', allow_portal=True)
def trustee_ledger(trustee_id):
    assert_owns_portal_record('trustee_id', trustee_id)
    return _trustee_payload(get_db(), trustee_id)


@ledgers_bp.get('/investors/<investor_id>')
@require_module('investors', allow_portal=True)
def investor_ledger(investor_id):
    assert_owns_portal_record('investor_id', investor_id)
    return _investor_payload(get_db(), investor_id)


@ledgers_bp.get('/craftsmen/<employee_id>')
@require_module('hr', allow_portal=True)
def craftsman_ledger(employee_id):
    assert_owns_portal_record('employee_id', employee_id)
    return _craftsman_payload(get_db(), employee_id, _currency())


@ledgers_bp.post('/trustees/<trustee_id>/transactions')
@require_module('trusts')
@audit_log('CREATE', entity='Trustee', entity_id_arg='trustee_id',
           describe=lambda data: f"حركة أمانة {data['transaction']['type']} بقيمة {data['transaction']['amount_display']}")
def add_trust_movement(trustee_id):
    """Deposit into or withdraw from a trust box. Withdrawing past zero is allowed and shows as a deficit."""
    data = request.json or {}
    session = get_db()
    if not session.get(Trustee, trustee_id):
        abort(404, description='trustee not found')
    row = TrustTransaction(
        id=f'tt-{uuid4().hex[:8]}',
        trustee_id=trustee_id,
        type=validate_choice(data.get('type'), TrustTransaction.ALL_TYPES, 'type'),
        amount=validate_amount(data.get('amount')),
        date=parse_date(data.get('date')),
        notes=(data.get('notes') or '').strip(),
    )
    session.add(row)
    session.commit()
    payload = _trustee_payload(session, trustee_id)
    payload['transaction'] = {**_movement_json(row), 'amount_display': format_currency(row.amount)}
    return payload, 201


@ledgers_bp.post('/investors/<investor_id>/transactions')
@require_module('investors')
@audit_log('CREATE', entity='Investor', entity_id_arg='investor_id',
           describe=lambda data: f"حركة مستثمر {data['transaction']['type']} بقيمة {data['transaction']['amount_display']}")
def add_investor_movement(investor_id):
    data = request.json or {}
    session = get_db()
    if not session.get(Investor, investor_id):
        abort(404, description='investor not found')
    row = InvestorTransaction(
        id=f'it-{uuid4().hex[:8]}',
        investor_id=investor_id,
        type=validate_choice(data.get('type'), InvestorTransaction.ALL_TYPES, 'type'),
        amount=validate_amount(data.get('amount')),
        date=parse_date(data.get('date')),
        notes=(data.get('notes') or '').strip(),
    )
    session.add(row)
    session.commit()
    payload = _investor_payload(session, investor_id)
    payload['transaction'] = {**_movement_json(row), 'amount_display': format_currency(row.amount)}
    return payload, 201


def _is_execution(p: Project) -> bool:
    return p.type == Project.TYPE_EXECUTION or p.status == Project.STATUS_EXECUTION


@ledgers_bp.put('/investors/<investor_id>')
@require_module('investors')
@audit_log('UPDATE', entity='Investor', entity_id_arg='investor_id',
           describe=lambda data: f"تعديل شروط المستثمر: {data['investor']['name']}")
def update_investor(investor_id):
    """Profit percentage and linked execution projects."""
    data = request.json or {}
    session = get_db()
    investor = session.get(Investor, investor_id)
    if not investor:
        abort(404, description='investor not found')
    if 'profit_percentage' in data:
        raw = data['profit_percentage']
        investor.profit_percentage = None if raw is None else validate_non_negative(raw, 'profit_percentage', maximum=100)
    if 'linked_project_ids' in data:
        ids = data['linked_project_ids']
        if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
            abort(400, description='linked_project_ids must be a list of project ids')
        for pid in ids:
            p = session.get(Project, pid)
            if not p or not _is_execution(p):
                abort(400, description=f'{pid} is not an execution project')
        # order kept, duplicates dropped
        investor.linked_project_ids = list(dict.fromkeys(ids))
    session.commit()
    return _investor_payload(session, investor_id)


@portal_bp.get('/summary')
@require_portal()
def portal_summary():
    """Single-purpose portal view for the logged-in client, employee, trustee or investor."""
    principal = current_principal()
    session = get_db()
    if principal.role == roles.TRUSTEE:
        return {'role': principal.role, **_trustee_payload(session, principal.trustee_id)}
    if principal.role == roles.INVESTOR:
        return {'role': principal.role, **_investor_payload(session, principal.investor_id)}
    if principal.role == roles.EMPLOYEE:
        emp = session.get(Employee, principal.employee_id)
        if not emp:
            abort(404, description='employee not found')
        payload = {'role': principal.role, 'petty_cash_balance': emp.petty_cash_balance}
        if emp.type in (Employee.TYPE_CRAFTSMAN, Employee.TYPE_WORKER):
            payload.update(_craftsman_payload(session, emp.id, _currency()))
        else:
            payload['employee'] = {'id': emp.id, 'name': emp.name, 'type': emp.type, 'job_title': emp.job_title}
        return payload
    # client: own projects with their financial position
    client = session.execute(select(Client).where(Client.username == principal.client_username)).scalar_one_or_none()
    if not client:
        abort(404, description='client not found')
    projects = session.execute(
        select(Project).where(or_(Project.client_id == client.id, Project.client_name == client.name)).order_by(Project.id)
    ).scalars().all()
    currency = _currency()
    out = []
    for p in projects:
        rows = session.execute(select(Transaction).where(Transaction.project_id == p.id)).scalars().all()
        out.append({'id': p.id, 'name': p.name, 'status': p.status, 'progress': p.progress,
                    'financials': project_financial_summary(p, rows, currency=currency)})
    return {'role': principal.role, 'client': {'id': client.id, 'name': client.name}, 'projects': out}
