from noah.utils.fsm import TransitionValidator, SETTLEMENT_FSM, PAYROLL_FSM
from noah.config.pagination import normalize_pagination, MAX_LIMIT
import pytest
from werkzeug.exceptions import BadRequest


def test_transition_validator_allows_valid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    assert fsm.assert_can_transition('A', 'B') is True


def test_transition_validator_blocks_invalid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    with pytest.raises(BadRequest):
        fsm.assert_can_transition('A', 'C')


def test_settlement_lifecycle():
    assert SETTLEMENT_FSM.can_transition('Pending_Settlement', 'Completed')
    assert not SETTLEMENT_FSM.can_transition('Completed', 'Pending_Settlement')
    assert not SETTLEMENT_FSM.can_transition('Completed', 'Completed')


def test_pagination_clamps():
    assert normalize_pagination(None, None) == (50, 0)
    assert normalize_pagination('0', '-4') == (1, 0)
    assert normalize_pagination('9999', '3') == (MAX_LIMIT, 3)
    with pytest.raises(ValueError):
        normalize_pagination('ten', None)


def test_payroll_lifecycle():
    assert PAYROLL_FSM.can_transition('Pending', 'Paid')
    assert not PAYROLL_FSM.can_transition('Paid', 'Pending')
    assert not PAYROLL_FSM.can_transition('Paid', 'Paid')
