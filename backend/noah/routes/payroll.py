from __future__ import annotations
from datetime import date
from uuid import uuid4
from flask import Blueprint, request, abort, current_app
from sqlalchemy import select
from noah import get_db
from noah.decorators.auth import require_module
from noah.decorators.audit import audit_log
from noah.models.employee import Employee
from noah.models.payroll import PayrollRecord
from noah.services.formatting import format_currency
from noah.services.payroll import compute_net_salary, salary_transaction
from noah.utils.filters import apply_filters, equals, one_of
from noah.utils.fsm import PAYROLL_FSM
from noah.utils.listing import apply_pagination, build_list_payload
from noah.utils.sorting import apply_multi_sort
from noah.utils.validation import validate_amount, validate_non_negative, parse_date

payroll_bp = Blueprint('payroll', __name__)


def _record_json(r: PayrollRecord):
    return {
        'id': r.id,
        'employee_id': r.employee_id,
        'employee_name': r.employee_name,
        'month': r.month,
        'year': r.year,
        'basic_salary': r.basic_salary,
        'allowances': r.allowances,
        'deductions': r.deductions,
        'net_salary': r.net_salary,
        'net_salary_display': format_currency(r.net_salary),
        'status': r.status,
        'payment_date': r.payment_date.isoformat() if r.payment_date else None,
        'transaction_id': r.transaction_id,
    }


def _period(data: dict):
    month = validate_non_negative(data.get('month'), 'month', maximum=12)
    if month < 1:
        abort(400, description='month must be >= 1')
    year = validate_non_negative(data.get('year'), 'year')
    return month, year


def _apply_amounts(r: PayrollRecord, data: dict):
    for key in ('basic_salary', 'allowances', 'deductions'):
        if key in data:
            setattr(r, key, validate_non_negative(data[key], key))
    r.net_salary = compute_net_salary(r.basic_salary, r.allowances, r.deductions)
    if r.net_salary < 0:
        abort(400, description='deductions exceed salary')


def _pay(session, r: PayrollRecord, on: date):
    PAYROLL_FSM.assert_can_transition(r.status, PayrollRecord.STATUS_PAID)
    validate_amount(r.net_salary, 'net_salary')
    emp = session.get(Employee, r.employee_id)
    tx = salary_transaction(r, emp.type if emp else Employee.TYPE_STAFF, on)
    session.add(tx)
    r.status = PayrollRecord.STATUS_PAID
    r.payment_date = on
    r.transaction_id = tx.id
    return tx


@payroll_bp.get('')
@require_module('hr')
def list_payroll():
    session = get_db()
    q = session.query(PayrollRecord)
    q = apply_filters(q, {
        'employee_id': {'op': equals(PayrollRecord.employee_id)},
        'status': {'op': equals(PayrollRecord.status), 'validate': one_of(PayrollRecord.ALL_STATUSES)},
        'month': {'op': equals(PayrollRecord.month), 'coerce': int},
        'year': {'op': equals(PayrollRecord.year), 'coerce': int},
    }, request.args)
    allowed = {'year': PayrollRecord.year, 'month': PayrollRecord.month, 'net_salary': PayrollRecord.net_salary}
    q = apply_multi_sort(q, request.args.get('sort'), allowed, PayrollRecord.id, default='-year,-month')
    paged_q, total, limit, offset = apply_pagination(q)
    return build_list_payload([_record_json(r) for r in paged_q.all()], total, limit, offset)


@payroll_bp.post('')
@require_module('hr')
@audit_log('CREATE', entity='Payroll', entity_id_key='id',
           describe=lambda data: f"إضافة مسير راتب {data.get('month')}/{data.get('year')}: {data.get('employee_name')}")
def create_payroll():
    data = request.json or {}
    session = get_db()
    emp = session.get(Employee, data.get('employee_id') or '')
    if not emp:
        abort(400, description='employee_id unknown')
    month, year = _period(data)
    exists = session.execute(select(PayrollRecord.id).where(
        PayrollRecord.employee_id == emp.id, PayrollRecord.month == month, PayrollRecord.year == year
    )).scalar_one_or_none()
    if exists:
        abort(409, description=f'payroll record exists: {exists}')
    r = PayrollRecord(id=f'pay-{uuid4().hex[:8]}', employee_id=emp.id, employee_name=emp.name,
                      month=month, year=year, basic_salary=emp.salary or 0, allowances=0, deductions=0,
                      status=PayrollRecord.STATUS_PENDING)
    _apply_amounts(r, data)
    session.add(r)
    session.commit()
    return _record_json(r), 201


@payroll_bp.put('/<record_id>')
@require_module('hr')
@audit_log('UPDATE', entity='Payroll', entity_id_arg='record_id',
           describe=lambda data: f"تعديل مسير راتب: {data.get('employee_name')}")
def update_payroll(record_id):
    """Amounts stay editable after payment; the posted voucher is not rewritten."""
    session = get_db()
    r = session.get(PayrollRecord, record_id)
    if not r:
        abort(404, description='payroll record not found')
    _apply_amounts(r, request.json or {})
    session.commit()
    return _record_json(r)


@payroll_bp.post('/<record_id>/pay')
@require_module('hr')
@audit_log('APPROVE', entity='Payroll', entity_id_key='id',
           describe=lambda data: f"صرف راتب {data.get('employee_name')} بقيمة {data.get('net_salary_display')}")
def pay_payroll(record_id):
    session = get_db()
    r = session.get(PayrollRecord, record_id)
    if not r:
        abort(404, description='payroll record not found')
    data = request.get_json(silent=True) or {}
    _pay(session, r, parse_date(data.get('payment_date'), 'payment_date', required=False) or date.today())
    session.commit()
    current_app.logger.info('Payroll %s paid as %s', r.id, r.transaction_id)
    return _record_json(r)


@payroll_bp.post('/pay-pending')
@require_module('hr')
@audit_log('APPROVE', entity='Payroll',
           describe=lambda data: f"صرف {data.get('count')} رواتب معلقة لشهر {data.get('month')}/{data.get('year')}")
def pay_pending():
    data = request.json or {}
    session = get_db()
    month, year = _period(data)
    on = parse_date(data.get('payment_date'), 'payment_date', required=False) or date.today()
    pending = session.execute(select(PayrollRecord).where(
        PayrollRecord.month == month, PayrollRecord.year == year, PayrollRecord.status == PayrollRecord.STATUS_PENDING
    ).order_by(PayrollRecord.id)).scalars().all()
    if not pending:
        abort(400, description='no pending payroll for this month')
    for r in pending:
        _pay(session, r, on)
    session.commit()
    total = sum(r.net_salary for r in pending)
    return {'month': month, 'year': year, 'count': len(pending), 'total': total,
            'records': [_record_json(r) for r in pending]}
