from noah import get_db
from noah.models.audit import ActivityLog
from tests.test_lifecycle_helpers import login
from tests.test_utils_seed import ensure_trustee, ensure_investor, ensure_project


def _gm(client):
    headers, _ = login(client, 'admin@noah.com', '123456')
    return headers


def test_trust_withdrawal_can_run_into_deficit(client):
    ensure_trustee('tr-box')
    headers = _gm(client)
    resp = client.post('/ledgers/trustees/tr-box/transactions',
                       json={'type': 'Deposit', 'amount': 1000, 'date': '2030-08-01', 'notes': 'إيداع'}, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    assert resp.get_json()['balance'] == 1000
    assert resp.get_json()['transaction']['id'].startswith('tt-')

    resp = client.post('/ledgers/trustees/tr-box/transactions',
                       json={'type': 'Withdrawal', 'amount': 2500, 'date': '2030-08-05'}, headers=headers)
    body = resp.get_json()
    assert body['balance'] == -1500
    assert body['is_deficit'] is True
    assert body['transaction_count'] == 2

    ledger = client.get('/ledgers/trustees/tr-box', headers=headers).get_json()
    assert (ledger['total_deposits'], ledger['total_withdrawals'], ledger['balance']) == (1000, 2500, -1500)
    logged = get_db().query(ActivityLog).filter_by(entity='Trustee', entity_id='tr-box').count()
    assert logged == 2


def test_trust_movement_validation(client):
    ensure_trustee('tr-bad')
    headers = _gm(client)
    url = '/ledgers/trustees/tr-bad/transactions'
    assert client.post(url, json={'type': 'Gift', 'amount': 10, 'date': '2030-08-01'}, headers=headers).status_code == 400
    assert client.post(url, json={'type': 'Deposit', 'amount': 0, 'date': '2030-08-01'}, headers=headers).status_code == 400
    assert client.post(url, json={'type': 'Deposit', 'amount': 10}, headers=headers).status_code == 400
    assert client.post('/ledgers/trustees/tr-none/transactions',
                       json={'type': 'Deposit', 'amount': 10, 'date': '2030-08-01'}, headers=headers).status_code == 404
    assert client.get('/ledgers/trustees/tr-bad', headers=headers).get_json()['transaction_count'] == 0


def test_portal_and_finance_cannot_write_trusts(client):
    trustee, _ = login(client, 'ahmed', '123')
    payload = {'type': 'Deposit', 'amount': 10, 'date': '2030-08-01'}
    assert client.post('/ledgers/trustees/tr-01/transactions', json=payload, headers=trustee).status_code == 403
    finance, _ = login(client, 'finance@noah.com', '123')
    assert client.post('/ledgers/trustees/tr-01/transactions', json=payload, headers=finance).status_code == 403


def test_investor_movements_change_balance(client):
    ensure_investor('inv-box')
    headers = _gm(client)
    url = '/ledgers/investors/inv-box/transactions'
    for kind, amount in (('Capital_Injection', 10000), ('Withdrawal', 2000), ('Profit_Distribution', 500)):
        resp = client.post(url, json={'type': kind, 'amount': amount, 'date': '2030-09-01'}, headers=headers)
        assert resp.status_code == 201, resp.get_json()
    body = resp.get_json()
    assert (body['total_capital'], body['total_profit'], body['total_withdrawals']) == (10000, 500, 2000)
    assert body['balance'] == 8500
    assert client.post(url, json={'type': 'Deposit', 'amount': 1, 'date': '2030-09-01'}, headers=headers).status_code == 400


def test_investor_terms_update(client):
    ensure_investor('inv-terms')
    ensure_project('inv-exec', type='Execution', status='Execution')
    ensure_project('inv-design', type='Design', status='Design')
    headers = _gm(client)
    url = '/ledgers/investors/inv-terms'
    resp = client.put(url, json={'profit_percentage': 15, 'linked_project_ids': ['inv-exec', 'inv-exec']}, headers=headers)
    assert resp.status_code == 200, resp.get_json()
    investor = resp.get_json()['investor']
    assert investor['profit_percentage'] == 15
    assert investor['linked_project_ids'] == ['inv-exec']

    assert client.put(url, json={'profit_percentage': 150}, headers=headers).status_code == 400
    assert client.put(url, json={'profit_percentage': 12.5}, headers=headers).status_code == 400
    assert client.put(url, json={'linked_project_ids': ['inv-design']}, headers=headers).status_code == 400
    assert client.put(url, json={'linked_project_ids': 'inv-exec'}, headers=headers).status_code == 400
    assert client.put('/ledgers/investors/inv-none', json={}, headers=headers).status_code == 404

    # rejected edits leave the saved terms alone
    investor = client.get(url, headers=headers).get_json()['investor']
    assert (investor['profit_percentage'], investor['linked_project_ids']) == (15, ['inv-exec'])
