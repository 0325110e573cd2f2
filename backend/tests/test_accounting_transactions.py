from tests.test_lifecycle_helpers import login, assert_transition, create_resource_and_assert
from tests.test_utils_seed import ensure_project, ensure_employee

WORKSHOP = 'صندوق الورشة'


def _headers(client):
    headers, _ = login(client, 'acc@noah.com', '123')
    return headers


def test_create_payment_completed_by_default(client):
    ensure_project('acc-p1')
    headers = _headers(client)
    body = create_resource_and_assert(client, '/accounting/transactions', {
        'type': 'Payment', 'date': '2030-03-01', 'amount': 1200, 'description': 'شراء اسمنت',
        'project_id': 'acc-p1', 'from_account': 'الخزينة الرئيسية', 'to_account': 'مورد',
    }, headers, expected_initial_status='Completed')
    assert body['currency'] == 'USD'
    assert body['amount_display'] == '$1,200'
    assert body['id'].startswith('txn-')


def test_workshop_payment_waits_for_settlement(client):
    ensure_project('acc-p2')
    headers = _headers(client)
    body = create_resource_and_assert(client, '/accounting/transactions', {
        'type': 'Payment', 'date': '2030-03-02', 'amount': 300, 'description': 'مسامير',
        'project_id': 'acc-p2', 'from_account': WORKSHOP,
    }, headers, expected_initial_status='Pending_Settlement')
    assert body['actual_payment_date'] is None

    settled = client.post(f"/accounting/transactions/{body['id']}/settle", json={'actual_payment_date': '2030-03-05'}, headers=headers)
    assert settled.status_code == 200, settled.get_json()
    assert settled.get_json()['status'] == 'Completed'
    assert settled.get_json()['actual_payment_date'] == '2030-03-05'

    # already completed
    assert_transition(client, f"/accounting/transactions/{body['id']}/settle", headers, 400)


def test_settle_unknown_transaction(client):
    assert client.post('/accounting/transactions/txn-missing/settle', headers=_headers(client)).status_code == 404


def test_validation_errors(client):
    headers = _headers(client)
    base = {'type': 'Payment', 'date': '2030-03-01', 'amount': 10, 'description': 'x'}
    cases = [
        {**base, 'amount': 0},
        {**base, 'amount': -5},
        {**base, 'amount': 'abc'},
        {**base, 'type': 'Gift'},
        {**base, 'currency': 'EUR'},
        {**base, 'date': '01/03/2030'},
        {**base, 'date': None},
        {**base, 'project_id': 'does-not-exist'},
        {**base, 'recipient_type': 'Alien'},
    ]
    for payload in cases:
        resp = client.post('/accounting/transactions', json=payload, headers=headers)
        assert resp.status_code == 400, payload


def test_overhead_project_ids_are_accepted(client):
    headers = _headers(client)
    for pid in ('General', 'N/A', None):
        resp = client.post('/accounting/transactions', json={
            'type': 'Payment', 'date': '2030-04-01', 'amount': 10, 'description': 'قرطاسية', 'project_id': pid,
        }, headers=headers)
        assert resp.status_code == 201, resp.get_json()


def test_list_filters_and_sort(client):
    ensure_project('acc-p3')
    headers = _headers(client)
    for amount in (30, 10, 20):
        client.post('/accounting/transactions', json={
            'type': 'Receipt', 'date': '2030-06-01', 'amount': amount, 'project_id': 'acc-p3', 'currency': 'SYP',
        }, headers=headers)
    resp = client.get('/accounting/transactions?project_id=acc-p3&currency=SYP&sort=amount', headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['pagination']['total'] == 3
    assert [r['amount'] for r in body['data']] == [10, 20, 30]
    assert body['data'][0]['amount_display'] == '10 ل.س'

    paged = client.get('/accounting/transactions?project_id=acc-p3&limit=2', headers=headers).get_json()
    assert paged['pagination']['returned'] == 2
    assert client.get('/accounting/transactions?currency=EUR', headers=headers).status_code == 400
    assert client.get('/accounting/transactions?sort=nope', headers=headers).status_code == 400


def test_invoices_create_and_list(client):
    ensure_project('acc-p4')
    headers = _headers(client)
    body = create_resource_and_assert(client, '/accounting/invoices', {
        'date': '2030-02-01', 'amount': 900, 'project_id': 'acc-p4', 'category': 'كهرباء', 'type': 'Purchase',
    }, headers, expected_initial_status='Pending')
    listed = client.get('/accounting/invoices?project_id=acc-p4', headers=headers).get_json()
    assert [r['id'] for r in listed['data']] == [body['id']]


def test_invoice_employee_link_must_be_labor(client):
    headers = _headers(client)
    resp = client.post('/accounting/invoices', json={'date': '2030-02-01', 'amount': 5, 'related_employee_id': 'emp-01'}, headers=headers)
    assert resp.status_code == 400


def test_creation_is_logged(client):
    headers, _ = login(client, 'admin@noah.com', '123456')
    client.post('/accounting/transactions', json={'type': 'Journal', 'date': '2030-01-01', 'amount': 77}, headers=headers)
    logs = client.get('/audit/logs?action=CREATE&search=Journal', headers=headers).get_json()['data']
    assert logs
    assert logs[0]['entity'] == 'Transaction'
    assert logs[0]['user_name'] == 'المدير العام (CEO)'


def test_fractional_amounts_are_rejected(client):
    ensure_project('acc-frac')
    headers = _headers(client)
    base = {'type': 'Payment', 'date': '2030-06-01', 'project_id': 'acc-frac', 'description': 'كسور'}
    for amount in (99.99, 0.5, '12.30'):
        resp = client.post('/accounting/transactions', json={**base, 'amount': amount}, headers=headers)
        assert resp.status_code == 400, amount
        assert resp.get_json()['error']['detail'] == 'amount must be a whole number'
    for amount in ('abc', None, True, 'NaN'):
        resp = client.post('/accounting/transactions', json={**base, 'amount': amount}, headers=headers)
        assert resp.status_code == 400, amount
    assert client.post('/accounting/transactions', json={**base, 'amount': -5}, headers=headers).status_code == 400
    listed = client.get('/accounting/transactions?project_id=acc-frac', headers=headers).get_json()
    assert listed['data'] == []


def test_whole_amounts_in_any_form_are_accepted(client):
    ensure_project('acc-whole')
    headers = _headers(client)
    base = {'type': 'Payment', 'date': '2030-06-02', 'project_id': 'acc-whole'}
    assert client.post('/accounting/transactions', json={**base, 'amount': 100.0}, headers=headers).get_json()['amount'] == 100
    assert client.post('/accounting/transactions', json={**base, 'amount': ' 1500 '}, headers=headers).get_json()['amount'] == 1500


def test_craftsman_ledger_endpoint_filters_currency(client, app_instance):
    ensure_project('acc-crf')
    with app_instance.app_context():
        ensure_employee('crf-cur', 'Craftsman', name='حرفي العملات')
    headers = _headers(client)
    create_resource_and_assert(client, '/accounting/invoices', {
        'date': '2030-07-01', 'amount': 2000, 'project_id': 'acc-crf', 'related_employee_id': 'crf-cur',
    }, headers)
    for amount, currency in ((500, 'USD'), (1000000, 'SYP')):
        create_resource_and_assert(client, '/accounting/transactions', {
            'type': 'Payment', 'date': '2030-07-02', 'amount': amount, 'currency': currency,
            'project_id': 'acc-crf', 'recipient_id': 'crf-cur', 'recipient_type': 'Craftsman',
        }, headers)
    admin, _ = login(client, 'admin@noah.com', '123456')
    usd = client.get('/ledgers/craftsmen/crf-cur', headers=admin).get_json()
    assert usd['currency'] == 'USD'
    assert (usd['total_work'], usd['total_paid'], usd['balance']) == (2000, 500, 1500)
    syp = client.get('/ledgers/craftsmen/crf-cur?currency=SYP', headers=admin).get_json()
    assert (syp['total_work'], syp['total_paid']) == (0, 1000000)
    assert client.get('/ledgers/craftsmen/crf-cur?currency=EUR', headers=admin).status_code == 400
