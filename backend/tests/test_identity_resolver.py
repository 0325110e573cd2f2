import pytest
from noah import get_db
from noah.models.client import Client
from noah.models.employee import Employee
from noah.models.trustee import Trustee
from noah.models.investor import Investor
from noah.services.identity import resolve_login, AuthError, Principal


def _add(obj, password):
    session = get_db()
    obj.set_password(password)
    session.add(obj); session.commit()
    return obj


def test_client_pool_beats_employee_pool_for_shared_identifier():
    _add(Client(id='c-dup', name='Dup Client', username='dup-ident', email=''), 'pw')
    _add(Employee(id='e-dup', name='Dup Employee', username='dup-ident', email=''), 'pw')
    principal = resolve_login(get_db(), 'dup-ident', 'pw')
    assert principal.role == 'Client'
    assert principal.client_username == 'dup-ident'
    assert principal.employee_id is None


def test_password_mismatch_falls_through_to_next_pool():
    _add(Client(id='c-fall', name='Fall Client', username='fall-ident', email=''), 'client-pw')
    _add(Trustee(id='t-fall', name='Fall Trustee', username='fall-ident'), 'trustee-pw')
    principal = resolve_login(get_db(), 'fall-ident', 'trustee-pw')
    assert principal.role == 'Trustee'
    assert principal.trustee_id == 't-fall'


def test_employee_matches_by_username_email_or_full_name():
    _add(Employee(id='e-multi', name='Nour Haddad', username='nour.h', email='Nour@Noah.com'), 'pw')
    for ident in ('nour.h', 'nour@noah.com', 'nour haddad', '  NOUR HADDAD '):
        p = resolve_login(get_db(), ident, 'pw')
        assert p.role == 'Employee'
        assert p.employee_id == 'e-multi'


def test_investor_pool_is_last():
    _add(Investor(id='i-last', name='Last Investor', username='last-ident', linked_project_ids=[]), 'pw')
    p = resolve_login(get_db(), 'last-ident', 'pw')
    assert p.role == 'Investor'
    assert p.investor_id == 'i-last'


def test_system_user_matches_only_by_email():
    # the seeded admin has a display name, not a username; the name is no identifier for staff
    with pytest.raises(AuthError) as exc:
        resolve_login(get_db(), 'المدير العام (CEO)', '123456')
    assert exc.value.message == 'invalid credentials'


@pytest.mark.parametrize('ident,pw', [('', 'pw'), ('admin@noah.com', ''), (None, None)])
def test_blank_credentials_fail(ident, pw):
    with pytest.raises(AuthError):
        resolve_login(get_db(), ident, pw)


def test_principal_claims_round_trip():
    p = Principal(id='tr-01', name='T', role='Trustee', trustee_id='tr-01')
    claims = p.to_claims()
    assert 'id' not in claims
    assert Principal.from_claims('tr-01', claims) == p
    assert p.is_portal is True


def test_stored_identifiers_are_trimmed_and_case_folded():
    _add(Trustee(id='t-pad', name='Padded Trustee', username='  Padded.Box '), 'pw')
    p = resolve_login(get_db(), 'padded.box', 'pw')
    assert p.trustee_id == 't-pad'
    with pytest.raises(AuthError):
        resolve_login(get_db(), 'padded', 'pw')
