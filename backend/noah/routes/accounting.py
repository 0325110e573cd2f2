from __future__ import annotations
from datetime import date
from uuid import uuid4
from flask import Blueprint, request, abort, current_app
from noah import get_db
from noah.decorators.auth import require_module
from noah.decorators.audit import audit_log
from noah.models.project import Project
from noah.models.transaction import Transaction, OVERHEAD_PROJECT_IDS
from noah.models.invoice import Invoice
from noah.models.employee import Employee
from noah.services.formatting import format_currency
from noah.utils.filters import apply_filters, equals, one_of
from noah.utils.fsm import SETTLEMENT_FSM
from noah.utils.listing import apply_pagination, build_list_payload
from noah.utils.sorting import apply_multi_sort
from noah.utils.validation import validate_choice, validate_amount, parse_date

acc_bp = Blueprint('accounting', __name__)


def _iso(d):
    return d.isoformat() if d else None


def _tx_json(tx: Transaction):
    return {
        'id': tx.id,
        'type': tx.type,
        'date': _iso(tx.date),
        'amount': tx.amount,
        'currency': tx.currency,
        'amount_display': format_currency(tx.amount, tx.currency),
        'description': tx.description,
        'project_id': tx.project_id,
        'from_account': tx.from_account,
        'to_account': tx.to_account,
        'recipient_id': tx.recipient_id,
        'recipient_type': tx.recipient_type,
        'status': tx.status,
        'actual_payment_date': _iso(tx.actual_payment_date),
    }


def _invoice_json(inv: Invoice):
    return {
        'id': inv.id,
        'invoice_number': inv.invoice_number,
        'date': _iso(inv.date),
        'project_id': inv.project_id,
        'amount': inv.amount,
        'type': inv.type,
        'category': inv.category,
        'status': inv.status,
        'supplier_or_client': inv.supplier_or_client,
        'related_employee_id': inv.related_employee_id,
    }


def _check_project_ref(session, project_id):
    """Attributable rows must point at an existing project."""
    if project_id in OVERHEAD_PROJECT_IDS:
        return project_id or None
    if not session.get(Project, project_id):
        abort(400, description='project_id unknown')
    return project_id


@acc_bp.get('/transactions')
@require_module('transactions')
def list_transactions():
    session = get_db()
    q = session.query(Transaction)
    q = apply_filters(q, {
        'type': {'op': equals(Transaction.type), 'validate': one_of(Transaction.ALL_TYPES)},
        'currency': {'op': equals(Transaction.currency), 'validate': one_of(Transaction.ALL_CURRENCIES)},
        'status': {'op': equals(Transaction.status), 'validate': one_of(Transaction.ALL_STATUSES)},
        'project_id': {'op': equals(Transaction.project_id)},
        'recipient_id': {'op': equals(Transaction.recipient_id)},
    }, request.args)
    allowed = {
        'date': Transaction.date,
        'amount': Transaction.amount,
        'type': Transaction.type,
        'id': Transaction.id,
    }
    q = apply_multi_sort(q, request.args.get('sort'), allowed, Transaction.id, default='-date')
    paged_q, total, limit, offset = apply_pagination(q)
    return build_list_payload([_tx_json(r) for r in paged_q.all()], total, limit, offset)


@acc_bp.post('/transactions')
@require_module('transactions')
@audit_log('CREATE', entity='Transaction', entity_id_key='id',
           describe=lambda data: f"إضافة سند {data.get('type')} بقيمة {data.get('amount_display')}")
def create_transaction():
    data = request.json or {}
    session = get_db()
    tx_type = validate_choice(data.get('type'), Transaction.ALL_TYPES, 'type')
    currency = validate_choice(data.get('currency') or current_app.config['DEFAULT_CURRENCY'], Transaction.ALL_CURRENCIES, 'currency')
    recipient_type = data.get('recipient_type')
    if recipient_type is not None:
        validate_choice(recipient_type, Transaction.RECIPIENT_TYPES, 'recipient_type')
    from_account = (data.get('from_account') or '').strip()
    tx = Transaction(
        id=f'txn-{uuid4().hex[:8]}',
        type=tx_type,
        date=parse_date(data.get('date')),
        amount=validate_amount(data.get('amount')),
        currency=currency,
        description=(data.get('description') or '').strip(),
        project_id=_check_project_ref(session, data.get('project_id')),
        from_account=from_account,
        to_account=(data.get('to_account') or '').strip(),
        recipient_id=data.get('recipient_id'),
        recipient_type=recipient_type,
    )
    if tx_type == Transaction.TYPE_PAYMENT and from_account == current_app.config['WORKSHOP_ACCOUNT']:
        # paid out of the project workshop fund; the main treasury reimburses it on settlement
        tx.status = Transaction.STATUS_PENDING_SETTLEMENT
    session.add(tx)
    session.commit()
    return _tx_json(tx), 201


@acc_bp.post('/transactions/<tx_id>/settle')
@require_module('transactions')
@audit_log('APPROVE', entity='Transaction', entity_id_key='id',
           describe=lambda data: f"تسوية دفعة صندوق الورشة {data.get('id')}")
def settle_transaction(tx_id):
    session = get_db()
    tx = session.get(Transaction, tx_id)
    if not tx:
        abort(404, description='transaction not found')
    SETTLEMENT_FSM.assert_can_transition(tx.status, Transaction.STATUS_COMPLETED)
    data = request.get_json(silent=True) or {}
    tx.status = Transaction.STATUS_COMPLETED
    tx.actual_payment_date = parse_date(data.get('actual_payment_date'), 'actual_payment_date', required=False) or date.today()
    session.commit()
    current_app.logger.info('Transaction %s settled on %s', tx.id, tx.actual_payment_date)
    return _tx_json(tx)


@acc_bp.get('/invoices')
@require_module('invoices')
def list_invoices():
    session = get_db()
    q = session.query(Invoice)
    q = apply_filters(q, {
        'type': {'op': equals(Invoice.type), 'validate': one_of(Invoice.ALL_TYPES)},
        'status': {'op': equals(Invoice.status), 'validate': one_of(Invoice.ALL_STATUSES)},
        'project_id': {'op': equals(Invoice.project_id)},
        'related_employee_id': {'op': equals(Invoice.related_employee_id)},
    }, request.args)
    allowed = {'date': Invoice.date, 'amount': Invoice.amount, 'invoice_number': Invoice.invoice_number}
    q = apply_multi_sort(q, request.args.get('sort'), allowed, Invoice.id, default='-date')
    paged_q, total, limit, offset = apply_pagination(q)
    return build_list_payload([_invoice_json(r) for r in paged_q.all()], total, limit, offset)


@acc_bp.post('/invoices')
@require_module('invoices')
@audit_log('CREATE', entity='Invoice', entity_id_key='id',
           describe=lambda data: f"إضافة فاتورة رقم {data.get('invoice_number')}")
def create_invoice():
    data = request.json or {}
    session = get_db()
    employee_id = data.get('related_employee_id')
    if employee_id:
        emp = session.get(Employee, employee_id)
        if not emp or emp.type not in (Employee.TYPE_CRAFTSMAN, Employee.TYPE_WORKER):
            abort(400, description='related_employee_id must reference a craftsman or worker')
    inv_id = f'inv-{uuid4().hex[:8]}'
    inv = Invoice(
        id=inv_id,
        invoice_number=(data.get('invoice_number') or inv_id.upper()).strip(),
        date=parse_date(data.get('date')),
        project_id=_check_project_ref(session, data.get('project_id')),
        amount=validate_amount(data.get('amount')),
        type=validate_choice(data.get('type') or Invoice.TYPE_PURCHASE, Invoice.ALL_TYPES, 'type'),
        category=(data.get('category') or '').strip(),
        status=validate_choice(data.get('status') or Invoice.STATUS_PENDING, Invoice.ALL_STATUSES, 'status'),
        supplier_or_client=data.get('supplier_or_client'),
        related_employee_id=employee_id or None,
    )
    session.add(inv)
    session.commit()
    return _invoice_json(inv), 201
