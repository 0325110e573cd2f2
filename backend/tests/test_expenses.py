import pytest
from noah.services.expenses import categorize_expenses, categorize, is_operating_expense, ALL_CATEGORIES
from tests.test_utils_seed import make_tx


def test_salary_payment_scenario():
    result = categorize_expenses([make_tx('Payment', 1000, description='راتب شهر مايو')])
    assert result == {
        'total_opex': 1000,
        'breakdown': [{'category': 'رواتب وأجور الموظفين', 'total_amount': 1000, 'count': 1}],
    }


@pytest.mark.parametrize('description,category', [
    ('سلفة للموظف', 'رواتب وأجور الموظفين'),
    ('فاتورة كهرباء المكتب', 'إيجار ومرافق'),
    ('إيجار شهر يونيو', 'إيجار ومرافق'),
    ('قهوة وضيافة', 'ضيافة ونظافة'),
    ('منظفات', 'ضيافة ونظافة'),
    ('صيانة المكيف', 'صيانة وإصلاحات'),
    ('تكييف', 'صيانة وإصلاحات'),
    ('حملة سوشيال', 'تسويق وإعلانات'),
    ('تجديد رخصة', 'رسوم حكومية'),
    ('شراء قرطاسية مكتب', 'نثريات ومصاريف أخرى'),
    ('', 'نثريات ومصاريف أخرى'),
])
def test_keyword_categories(description, category):
    assert categorize(description) == category


def test_first_matching_category_wins():
    # mentions both a salary keyword and a utility keyword
    assert categorize('راتب محاسب الكهرباء') == 'رواتب وأجور الموظفين'
    assert categorize('صيانة إعلان المحل') == 'صيانة وإصلاحات'


def test_only_unattributed_payments_count():
    assert is_operating_expense(make_tx('Payment', 1, project_id=None))
    assert is_operating_expense(make_tx('Payment', 1, project_id=''))
    assert is_operating_expense(make_tx('Payment', 1, project_id='General'))
    assert is_operating_expense(make_tx('Payment', 1, project_id='N/A'))
    assert not is_operating_expense(make_tx('Payment', 1, project_id='101'))
    assert not is_operating_expense(make_tx('Receipt', 1, project_id=None))
    assert not is_operating_expense(make_tx('Transfer', 1, project_id=None))


def test_every_opex_row_lands_in_one_bucket():
    rows = [
        make_tx('Payment', 300, description='راتب'),
        make_tx('Payment', 200, project_id='General', description='ماء'),
        make_tx('Payment', 50, project_id='N/A', description='شاي'),
        make_tx('Payment', 75, description='أوراق'),
        make_tx('Payment', 25, description='مكافأة'),
        make_tx('Payment', 5000, project_id='101', description='راتب مهندس الموقع'),
        make_tx('Receipt', 9000, description='راتب'),
    ]
    result = categorize_expenses(rows)
    assert result['total_opex'] == 650
    assert sum(b['total_amount'] for b in result['breakdown']) == result['total_opex']
    assert sum(b['count'] for b in result['breakdown']) == 5
    assert all(b['category'] in ALL_CATEGORIES for b in result['breakdown'])
    totals = [b['total_amount'] for b in result['breakdown']]
    assert totals == sorted(totals, reverse=True)
    assert result['breakdown'][0] == {'category': 'رواتب وأجور الموظفين', 'total_amount': 325, 'count': 2}


def test_currency_filter():
    rows = [make_tx('Payment', 100, description='ضيافة'), make_tx('Payment', 250000, currency='SYP', description='ضيافة')]
    assert categorize_expenses(rows, currency='USD')['total_opex'] == 100
    assert categorize_expenses(rows, currency='SYP')['total_opex'] == 250000
    assert categorize_expenses(rows)['total_opex'] == 250100


def test_empty_input():
    assert categorize_expenses([]) == {'total_opex': 0, 'breakdown': []}
