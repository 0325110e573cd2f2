"""Demo dataset loaded into a fresh database when SEED_DEMO_DATA is on.

Idempotent: nothing is inserted when system users already exist.
Passwords are hashed on insert; the demo staff password for admin@noah.com is 123456,
every other demo account uses 123.
"""
from __future__ import annotations
import logging
from datetime import date, datetime, timedelta, timezone
from sqlalchemy import select

from noah.constants import roles
from noah.models.authz import SystemUser, RolePermissions
from noah.models.audit import ActivityLog
from noah.models.client import Client
from noah.models.employee import Employee
from noah.models.trustee import Trustee, TrustTransaction
from noah.models.investor import Investor, InvestorTransaction
from noah.models.project import Project
from noah.models.transaction import Transaction
from noah.models.invoice import Invoice

log = logging.getLogger(__name__)

AVATAR = 'https://api.dicebear.com/7.x/avataaars/svg?seed={}'
DEMO_PASSWORD = '123'
ADMIN_PASSWORD = '123456'

SYSTEM_USERS = [
    {'id': '1', 'name': 'المدير العام (CEO)', 'role': roles.GENERAL_MANAGER, 'email': 'admin@noah.com', 'seed': 'Admin', 'password': ADMIN_PASSWORD},
    {'id': '2', 'name': 'أ. سامر (المدير المالي)', 'role': roles.FINANCE_MANAGER, 'email': 'finance@noah.com', 'seed': 'Finance'},
    {'id': '3', 'name': 'محاسب الشركة', 'role': roles.ACCOUNTANT, 'email': 'acc@noah.com', 'seed': 'Accountant'},
]

CLIENTS = [
    ('c1', 'شركة الأفق العقارية', 'مجموعة الأفق', '0501234567', 'contact@horizon.sa', 'horizon', '2023-01-10', 'Horizon'),
    ('c2', 'د. خالد العتيبي', 'مستوصف الشفاء', '0509876543', 'dr.khalid@clinic.com', 'khalid', '2023-02-15', 'Khalid'),
    ('c3', 'سارة الأحمد', '', '0555551111', 'sara@gmail.com', 'sara', '2023-03-20', 'Sara'),
    ('c4', 'مجموعة الراجحي للمقاولات', 'الراجحي', '0544443333', 'projects@alrajhi.com', 'alrajhi', '2023-04-05', 'Rajhi'),
    ('c5', 'مطاعم المذاق العربي', 'سلسلة مطاعم', '0566667777', 'admin@tasty.com', 'tasty', '2023-05-12', 'Tasty'),
]

EMPLOYEES = [
    {'id': 'emp-01', 'name': 'م. فهد السالم', 'job_title': 'مدير مشاريع', 'type': Employee.TYPE_STAFF, 'department': 'الهندسة', 'salary': 15000, 'phone': '0501111111', 'email': 'fahad@noah.com', 'join_date': '2022-01-01', 'username': 'fahad', 'petty_cash_balance': 500, 'seed': 'Fahad'},
    {'id': 'emp-02', 'name': 'سناء المالي', 'job_title': 'مديرة مالية', 'type': Employee.TYPE_STAFF, 'department': 'المالية', 'salary': 12000, 'phone': '0502222222', 'email': 'sana@noah.com', 'join_date': '2022-03-15', 'username': 'sana', 'petty_cash_balance': 200, 'seed': 'Sana'},
    {'id': 'crf-01', 'name': 'أبو محمد النجار', 'job_title': 'نجار مباني', 'type': Employee.TYPE_CRAFTSMAN, 'department': 'التنفيذ', 'salary': 4500, 'phone': '0505555555', 'email': '', 'join_date': '2023-02-01', 'username': 'wood', 'seed': 'Carpenter1'},
    {'id': 'wrk-01', 'name': 'كومار', 'job_title': 'عامل بناء', 'type': Employee.TYPE_WORKER, 'department': 'التنفيذ', 'salary': 2500, 'phone': '0508888888', 'email': '', 'join_date': '2023-06-01', 'username': 'kumar', 'seed': 'Kumar'},
]

TRUSTEES = [
    ('tr-01', 'أبو أحمد (خال)', 'أقارب', '0501122334', 'ahmed', 'Ahmed'),
    ('tr-02', 'صديق الطفولة سامي', 'أصدقاء', '0505566778', 'sami', 'Sami'),
]

TRUST_TRANSACTIONS = [
    ('tt-01', 'tr-01', TrustTransaction.TYPE_DEPOSIT, 50000, '2024-01-15', 'إيداع مبلغ لحفظه لشراء أرض'),
    ('tt-02', 'tr-02', TrustTransaction.TYPE_DEPOSIT, 10000, '2024-02-01', 'أمانة سفر'),
]

INVESTORS = [
    {'id': 'inv-01', 'name': 'الشيخ محمد العبدالله', 'kind': Investor.KIND_CAPITAL, 'profit_percentage': 30,
     'agreement_details': 'شريك ممول بنسبة 30% من صافي أرباح الشركة السنوية', 'linked_project_ids': [],
     'phone': '0501239999', 'email': 'mohammed@invest.com', 'join_date': '2023-01-01', 'username': 'investor1', 'seed': 'Investor1'},
    {'id': 'inv-02', 'name': 'م. سالم (شريك تنفيذي)', 'kind': Investor.KIND_PARTNER, 'profit_percentage': None,
     'agreement_details': 'شريك بالجهد (الإدارة الهندسية) - نسبة 15% من أرباح مشاريع التنفيذ المتفق عليها',
     'linked_project_ids': ['101', '104'], 'phone': '0504568888', 'email': 'salem@noah.com', 'join_date': '2023-06-01',
     'username': 'salem', 'seed': 'Salem'},
]

INVESTOR_TRANSACTIONS = [
    ('it-01', 'inv-01', InvestorTransaction.TYPE_CAPITAL_INJECTION, 500000, '2023-01-05', 'إيداع رأس مال تأسيسي (نقدي)'),
    ('it-02', 'inv-01', InvestorTransaction.TYPE_PROFIT_DISTRIBUTION, 50000, '2023-12-31', 'توزيع أرباح الربع الرابع 2023'),
]

PROJECTS = [
    {'id': '101', 'name': 'برج الأفق السكني', 'client_name': 'شركة الأفق العقارية', 'client_id': 'c1', 'budget': 5000000,
     'location': 'الرياض - العليا', 'status': Project.STATUS_EXECUTION, 'type': Project.TYPE_EXECUTION, 'progress': 35,
     'start_date': '2023-06-01', 'workshop_balance': 15000, 'workshop_threshold': 20000,
     'contract_type': Project.CONTRACT_LUMP_SUM, 'agreed_labor_budget': 500000},
    {'id': '102', 'name': 'تصميم داخلي للعيادة', 'client_name': 'د. خالد العتيبي', 'client_id': 'c2', 'budget': 150000,
     'location': 'جدة - التحلية', 'status': Project.STATUS_DESIGN, 'type': Project.TYPE_DESIGN, 'progress': 80,
     'start_date': '2024-01-10', 'contract_type': Project.CONTRACT_PERCENTAGE, 'company_percentage': 15},
    {'id': '103', 'name': 'فيلا سارة المودرن', 'client_name': 'سارة الأحمد', 'client_id': 'c3', 'budget': 2200000,
     'location': 'الرياض - النرجس', 'status': Project.STATUS_PROPOSED, 'type': Project.TYPE_EXECUTION, 'progress': 0,
     'start_date': '2024-06-01'},
    {'id': '104', 'name': 'مستودعات الراجحي', 'client_name': 'مجموعة الراجحي للمقاولات', 'client_id': 'c4', 'budget': 850000,
     'location': 'الدمام - الصناعية', 'status': Project.STATUS_EXECUTION, 'type': Project.TYPE_EXECUTION, 'progress': 60,
     'start_date': '2023-09-01', 'workshop_balance': 5000, 'workshop_threshold': 5000},
]

MAIN_TREASURY = 'الخزينة الرئيسية'
WORKSHOP_FUND = 'صندوق الورشة'
DAILY_BOX = 'الصندوق اليومي'

TRANSACTIONS = [
    {'id': 'txn-01', 'type': 'Receipt', 'date': '2024-05-01', 'amount': 150000, 'description': 'استلام دفعة مشروع البرج (نقدي)', 'project_id': '101', 'from_account': 'شركة الأفق', 'to_account': MAIN_TREASURY},
    {'id': 'txn-04', 'type': 'Receipt', 'date': '2024-05-07', 'amount': 25000, 'description': 'دفعة تصميم العيادة', 'project_id': '102', 'from_account': 'د. خالد', 'to_account': MAIN_TREASURY},
    {'id': 'txn-02', 'type': 'Payment', 'date': '2024-05-05', 'amount': 50000, 'description': 'شراء حديد', 'project_id': '101', 'from_account': MAIN_TREASURY, 'to_account': 'مصنع اليمامة'},
    {'id': 'txn-03', 'type': 'Payment', 'date': '2024-05-06', 'amount': 5000, 'description': 'عهدة مشروع المستودعات', 'project_id': '104', 'from_account': MAIN_TREASURY, 'to_account': WORKSHOP_FUND},
    {'id': 'txn-08', 'type': 'Payment', 'date': '2024-05-20', 'amount': 15000, 'description': 'دفعة نجار', 'project_id': '101', 'from_account': MAIN_TREASURY, 'to_account': 'أبو محمد النجار', 'recipient_id': 'crf-01', 'recipient_type': 'Craftsman'},
    {'id': 'txn-09', 'type': 'Payment', 'date': '2024-05-22', 'amount': 4000, 'description': 'شراء قرطاسية مكتب', 'project_id': 'General', 'from_account': MAIN_TREASURY, 'to_account': 'مكتبة جرير'},
    {'id': 'txn-10', 'type': 'Transfer', 'date': '2024-05-25', 'amount': 10000, 'description': 'تعزيز صندوق الورشة', 'project_id': '101', 'from_account': MAIN_TREASURY, 'to_account': WORKSHOP_FUND},
    {'id': 'syp-01', 'type': 'Payment', 'date': '2024-05-01', 'amount': 250000, 'currency': 'SYP', 'description': 'ضيافة وشاي', 'from_account': DAILY_BOX, 'to_account': 'سوبر ماركت'},
    {'id': 'syp-03', 'type': 'Receipt', 'date': '2024-05-05', 'amount': 2000000, 'currency': 'SYP', 'description': 'صرف 200 دولار', 'from_account': 'مكتب الصرافة', 'to_account': DAILY_BOX},
]

INVOICES = [
    {'id': 'inv-01', 'invoice_number': 'INV-2024-001', 'date': '2024-05-01', 'project_id': '101', 'amount': 30000,
     'type': Invoice.TYPE_PURCHASE, 'category': 'مواد بناء', 'status': Invoice.STATUS_PAID, 'supplier_or_client': 'مصنع اليمامة'},
    # carpentry work booked against the craftsman's ledger
    {'id': 'inv-02', 'invoice_number': 'WRK-2024-001', 'date': '2024-05-10', 'project_id': '101', 'amount': 20000,
     'type': Invoice.TYPE_SUPPLIER, 'category': 'أعمال نجارة', 'status': Invoice.STATUS_PENDING,
     'supplier_or_client': 'أبو محمد النجار', 'related_employee_id': 'crf-01'},
]

ACTIVITY = [
    ('1', 'المدير العام (CEO)', roles.GENERAL_MANAGER, 'UPDATE', 'Project', 'تعديل حالة مشروع "برج الأفق" إلى قيد التنفيذ', 30),
    ('3', 'محاسب الشركة', roles.ACCOUNTANT, 'CREATE', 'Transaction', 'إضافة سند صرف جديد بقيمة 5000$ (عهدة)', 120),
    ('2', 'أ. سامر (المدير المالي)', roles.FINANCE_MANAGER, 'APPROVE', 'Invoice', 'اعتماد فاتورة مشتريات حديد رقم INV-2024-001', 300),
    ('3', 'محاسب الشركة', roles.ACCOUNTANT, 'LOGIN', 'Settings', 'تسجيل دخول للنظام', 480),
    ('1', 'المدير العام (CEO)', roles.GENERAL_MANAGER, 'CREATE', 'Client', 'إضافة عميل جديد "سارة الأحمد"', 1440),
]


def _d(value):
    return date.fromisoformat(value) if value else None


def _with_password(obj, password: str = DEMO_PASSWORD):
    obj.set_password(password)
    return obj


def seed_demo_data(session) -> bool:
    """Insert the demo dataset; returns False when data is already present."""
    if session.execute(select(SystemUser.id).limit(1)).first() is not None:
        return False

    for u in SYSTEM_USERS:
        session.add(_with_password(
            SystemUser(id=u['id'], name=u['name'], role=u['role'], email=u['email'], avatar=AVATAR.format(u['seed'])),
            u.get('password', DEMO_PASSWORD),
        ))
    for role, modules in roles.DEFAULT_PERMISSIONS.items():
        session.add(RolePermissions(role=role, can_view=list(modules)))

    for cid, name, company, phone, email, username, joined, seed in CLIENTS:
        session.add(_with_password(Client(id=cid, name=name, company_name=company, phone=phone, email=email,
                                          username=username, join_date=_d(joined), avatar=AVATAR.format(seed))))
    for e in EMPLOYEES:
        data = {k: v for k, v in e.items() if k != 'seed'}
        data['join_date'] = _d(data['join_date'])
        session.add(_with_password(Employee(avatar=AVATAR.format(e['seed']), **data)))
    for tid, name, relation, phone, username, seed in TRUSTEES:
        session.add(_with_password(Trustee(id=tid, name=name, relation=relation, phone=phone, username=username,
                                           avatar=AVATAR.format(seed))))
    for inv in INVESTORS:
        data = {k: v for k, v in inv.items() if k != 'seed'}
        data['join_date'] = _d(data['join_date'])
        session.add(_with_password(Investor(avatar=AVATAR.format(inv['seed']), **data)))
    session.flush()

    for tid, trustee_id, type_, amount, day, notes in TRUST_TRANSACTIONS:
        session.add(TrustTransaction(id=tid, trustee_id=trustee_id, type=type_, amount=amount, date=_d(day), notes=notes))
    for iid, investor_id, type_, amount, day, notes in INVESTOR_TRANSACTIONS:
        session.add(InvestorTransaction(id=iid, investor_id=investor_id, type=type_, amount=amount, date=_d(day), notes=notes))
    for p in PROJECTS:
        session.add(Project(**{**p, 'start_date': _d(p['start_date'])}))
    for t in TRANSACTIONS:
        session.add(Transaction(**{**t, 'date': _d(t['date'])}))
    for inv in INVOICES:
        session.add(Invoice(**{**inv, 'date': _d(inv['date'])}))

    now = datetime.now(timezone.utc)
    for user_id, user_name, user_role, action, entity, description, minutes_ago in ACTIVITY:
        session.add(ActivityLog(user_id=user_id, user_name=user_name, user_role=user_role, action=action,
                                entity=entity, description=description, timestamp=now - timedelta(minutes=minutes_ago)))
    session.commit()
    log.info('Demo data seeded: %d users, %d projects, %d transactions',
             len(SYSTEM_USERS), len(PROJECTS), len(TRANSACTIONS))
    return True


__all__ = ['seed_demo_data', 'ADMIN_PASSWORD', 'DEMO_PASSWORD']
