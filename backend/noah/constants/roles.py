"""Central enum-like definitions for roles, navigation modules and the default permission matrix.
Extend cautiously; module tags are stored in role permission rows, so never rename one silently.
"""
from __future__ import annotations
from typing import Dict, List

# Staff kinds (gated by the permission matrix)
GENERAL_MANAGER = 'General Manager'
FINANCE_MANAGER = 'Finance Manager'
ACCOUNTANT = 'Accountant'
ENGINEER = 'Engineer'
PROCUREMENT = 'Procurement'

# Portal kinds (routed to single-purpose portals, never gated)
CLIENT = 'Client'
EMPLOYEE = 'Employee'
TRUSTEE = 'Trustee'
INVESTOR = 'Investor'

STAFF_ROLES = (GENERAL_MANAGER, FINANCE_MANAGER, ACCOUNTANT, ENGINEER, PROCUREMENT)
PORTAL_ROLES = (CLIENT, EMPLOYEE, TRUSTEE, INVESTOR)
ALL_ROLES = STAFF_ROLES + PORTAL_ROLES

# Sidebar order
MODULES: List[str] = [
    'dashboard', 'projects', 'clients', 'company_expenses', 'profit_loss',
    'investors', 'trusts', 'messages', 'invoices', 'transactions', 'transactions_syp',
    'reports', 'hr', 'manager_reports', 'files', 'activity_log', 'settings',
]

# Permission tags that can appear in a role allow-list
PERMISSION_TAGS: List[str] = [
    'dashboard', 'financial_stats', 'projects', 'clients', 'company_expenses', 'profit_loss',
    'investors', 'trusts', 'invoices', 'transactions', 'reports', 'hr', 'files', 'settings',
    'activity_log',
]

# Pages that borrow another module's permission
MODULE_ALIASES: Dict[str, str] = {
    'transactions_syp': 'transactions',
    'manager_reports': 'hr',
    'project-details': 'projects',
    'client-details': 'clients',
}

ALWAYS_VISIBLE = frozenset({'messages'})

DEFAULT_PAGE = 'dashboard'

DEFAULT_PERMISSIONS: Dict[str, List[str]] = {
    GENERAL_MANAGER: [
        'dashboard', 'financial_stats', 'projects', 'clients', 'company_expenses', 'profit_loss',
        'investors', 'trusts', 'invoices', 'transactions', 'reports', 'hr', 'files', 'settings', 'activity_log',
    ],
    FINANCE_MANAGER: [
        'dashboard', 'financial_stats', 'projects', 'company_expenses', 'profit_loss',
        'invoices', 'transactions', 'reports', 'hr', 'files', 'activity_log',
    ],
    ACCOUNTANT: ['dashboard', 'projects', 'invoices', 'transactions', 'files'],
}
