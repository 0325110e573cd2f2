import logging
from noah.constants import roles
from noah.services.policy import can_view, guard_navigation, resolve_module, visible_menu
from tests.test_lifecycle_helpers import jwt_headers, login
from tests.test_utils_seed import ensure_role_permissions

TABLE = {
    roles.ACCOUNTANT: list(roles.DEFAULT_PERMISSIONS[roles.ACCOUNTANT]),
    roles.FINANCE_MANAGER: list(roles.DEFAULT_PERMISSIONS[roles.FINANCE_MANAGER]),
}


def test_explicit_allow_list_excludes_module():
    assert can_view(roles.ACCOUNTANT, 'transactions', TABLE) is True
    assert can_view(roles.ACCOUNTANT, 'hr', TABLE) is False


def test_absent_role_is_allowed_everything():
    for module in roles.PERMISSION_TAGS:
        assert can_view(roles.ENGINEER, module, TABLE) is True


def test_messages_always_visible():
    assert can_view(roles.ACCOUNTANT, 'messages', {roles.ACCOUNTANT: []}) is True


def test_aliases_resolve_to_parent_permission():
    assert resolve_module('transactions_syp') == 'transactions'
    assert resolve_module('manager_reports') == 'hr'
    assert resolve_module('project-details') == 'projects'
    assert resolve_module('client-details') == 'clients'
    assert resolve_module('invoices') == 'invoices'


def test_guard_allows_alias_backed_page():
    decision = guard_navigation(roles.ACCOUNTANT, 'transactions_syp', TABLE)
    assert decision.allowed is True
    assert decision.page == 'transactions_syp'
    assert decision.module == 'transactions'


def test_guard_redirects_and_warns_on_denial(caplog):
    with caplog.at_level(logging.WARNING, logger='noah.services.policy'):
        decision = guard_navigation(roles.ACCOUNTANT, 'manager_reports', TABLE)
    assert decision.allowed is False
    assert decision.page == 'dashboard'
    assert decision.requested == 'manager_reports'
    assert decision.module == 'hr'
    assert any('Access denied' in r.getMessage() for r in caplog.records)


def test_portal_roles_bypass_guard():
    for role in roles.PORTAL_ROLES:
        decision = guard_navigation(role, 'settings', {role: []})
        assert decision.bypassed is True
        assert decision.allowed is True
        assert decision.page == 'settings'


def test_visible_menu_keeps_sidebar_order():
    menu = visible_menu(roles.ACCOUNTANT, TABLE)
    assert menu == ['dashboard', 'projects', 'messages', 'invoices', 'transactions', 'transactions_syp', 'files']
    assert visible_menu(roles.CLIENT, TABLE) == []


def test_navigation_endpoint_redirects_accountant(client, app_instance):
    with app_instance.app_context():
        headers = jwt_headers(roles.ACCOUNTANT)
    body = client.get('/iam/navigation?page=hr', headers=headers).get_json()
    assert body == {'requested': 'hr', 'page': 'dashboard', 'module': 'hr', 'allowed': False, 'bypassed': False}


def test_menu_endpoint(client, app_instance):
    with app_instance.app_context():
        headers = jwt_headers(roles.FINANCE_MANAGER)
    modules = client.get('/iam/menu', headers=headers).get_json()['modules']
    assert 'profit_loss' in modules
    assert 'settings' not in modules
    assert 'manager_reports' in modules


def test_endpoint_denial_is_403(client, app_instance):
    with app_instance.app_context():
        headers = jwt_headers(roles.ACCOUNTANT)
    resp = client.get('/reports/profit-loss?year=2024', headers=headers)
    assert resp.status_code == 403
    assert resp.get_json()['error']['detail'] == 'access denied'


def test_permission_settings_update_takes_effect(client, app_instance):
    gm_headers, _ = login(client, 'admin@noah.com', '123456')
    with app_instance.app_context():
        proc_headers = jwt_headers(roles.PROCUREMENT)
    # unconfigured role: permissive fallback
    assert client.get('/accounting/invoices', headers=proc_headers).status_code == 200

    resp = client.put('/iam/permissions/Procurement', json={'can_view': ['invoices', 'dashboard']}, headers=gm_headers)
    assert resp.status_code == 200, resp.get_json()
    assert resp.get_json()['can_view'] == ['dashboard', 'invoices']

    assert client.get('/accounting/invoices', headers=proc_headers).status_code == 200
    assert client.get('/accounting/transactions', headers=proc_headers).status_code == 403
    listed = client.get('/iam/permissions', headers=gm_headers).get_json()['data']
    assert {'role': 'Procurement', 'can_view': ['dashboard', 'invoices']} in listed


def test_permission_settings_validation(client, app_instance):
    gm_headers, _ = login(client, 'admin@noah.com', '123456')
    assert client.put('/iam/permissions/Client', json={'can_view': []}, headers=gm_headers).status_code == 400
    assert client.put('/iam/permissions/Engineer', json={'can_view': ['nope']}, headers=gm_headers).status_code == 400
    assert client.put('/iam/permissions/Engineer', json={'can_view': 'dashboard'}, headers=gm_headers).status_code == 400


def test_settings_need_settings_module(client, app_instance):
    with app_instance.app_context():
        headers = jwt_headers(roles.FINANCE_MANAGER)
    assert client.get('/iam/permissions', headers=headers).status_code == 403


def test_custom_role_row_is_read_per_request(client, app_instance):
    ensure_role_permissions(roles.ENGINEER, ['projects'])
    with app_instance.app_context():
        headers = jwt_headers(roles.ENGINEER)
    assert client.get('/projects', headers=headers).status_code == 200
    assert client.get('/accounting/transactions', headers=headers).status_code == 403
    ensure_role_permissions(roles.ENGINEER, ['projects', 'transactions'])
    assert client.get('/accounting/transactions', headers=headers).status_code == 200
