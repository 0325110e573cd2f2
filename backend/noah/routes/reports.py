from __future__ import annotations
from datetime import date
from flask import Blueprint, request, abort, current_app
from flask_jwt_extended import get_jwt
from sqlalchemy import select
from noah import get_db
from noah.decorators.auth import require_module
from noah.models.project import Project
from noah.models.transaction import Transaction
from noah.services.expenses import categorize_expenses, is_operating_expense
from noah.services.formatting import format_currency
from noah.services.ledger import dashboard_stats, in_currency
from noah.services.policy import can_view, load_permission_table
from noah.services.profit_loss import compute_profit_loss, PERIODS
from noah.utils.validation import validate_choice

rpt_bp = Blueprint('reports', __name__)


def _currency():
    currency = request.args.get('currency') or current_app.config['DEFAULT_CURRENCY']
    return validate_choice(currency, Transaction.ALL_CURRENCIES, 'currency')


def _year(required: bool = False):
    raw = request.args.get('year')
    if raw in (None, ''):
        return date.today().year if required else None
    try:
        return int(raw)
    except ValueError:
        abort(400, description='year must be int')


def _all_transactions(session):
    return session.execute(select(Transaction)).scalars().all()


@rpt_bp.get('/dashboard')
@require_module('dashboard')
def dashboard():
    session = get_db()
    currency = _currency()
    projects = session.execute(select(Project)).scalars().all()
    stats = dashboard_stats(projects, _all_transactions(session), currency=currency)
    # money figures are a separate permission on top of the dashboard itself
    if not can_view(get_jwt().get('role', ''), 'financial_stats', load_permission_table(session)):
        return {'currency': currency, 'active_projects': stats['active_projects'], 'financial_stats': False}
    stats['financial_stats'] = True
    stats['display'] = {
        'total_revenue': format_currency(stats['total_revenue'], currency),
        'total_expenses': format_currency(stats['total_expenses'], currency),
        'net_profit': format_currency(stats['net_profit'], currency),
    }
    return stats


@rpt_bp.get('/operating-expenses')
@require_module('company_expenses')
def operating_expenses():
    session = get_db()
    currency = _currency()
    year = _year()
    search = (request.args.get('search') or '').strip().lower()
    rows = [t for t in in_currency(_all_transactions(session), currency) if is_operating_expense(t)]
    if year is not None:
        rows = [t for t in rows if t.date and t.date.year == year]
    if search:
        rows = [t for t in rows if search in (t.description or '').lower()]
    rows.sort(key=lambda t: (t.date, t.id), reverse=True)
    result = categorize_expenses(rows, currency=currency)
    return {
        'currency': currency,
        'year': year,
        **result,
        'total_display': format_currency(result['total_opex'], currency),
        'transactions': [
            {'id': t.id, 'date': t.date.isoformat(), 'amount': t.amount, 'description': t.description,
             'to_account': t.to_account}
            for t in rows
        ],
    }


@rpt_bp.get('/profit-loss')
@require_module('profit_loss')
def profit_loss():
    session = get_db()
    currency = _currency()
    year = _year(required=True)
    period = request.args.get('period') or 'Annual'
    if period not in PERIODS:
        abort(400, description=f'period must be one of {", ".join(PERIODS)}')
    projects = session.execute(select(Project)).scalars().all()
    return compute_profit_loss(year, period, _all_transactions(session), projects, currency=currency)
