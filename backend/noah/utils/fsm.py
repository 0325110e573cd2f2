from __future__ import annotations
"""Simple finite state machine utility for enforcing allowed status transitions.

Used for the workshop payment and payroll lifecycles:
    from noah.utils.fsm import SETTLEMENT_FSM
    SETTLEMENT_FSM.assert_can_transition(tx.status, Transaction.STATUS_COMPLETED)

Raises 400 abort if invalid.
"""
from typing import Dict, Set
from flask import abort

class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.graph.get(current, set())

    def assert_can_transition(self, current: str, target: str):
        if not self.can_transition(current, target):
            abort(400, description=f"Invalid {self.field_name} transition {current} -> {target}")
        return True


# Paid out of a project workshop fund, later reimbursed from the main treasury
SETTLEMENT_FSM = TransitionValidator({
    'Pending_Settlement': {'Completed'},
    'Completed': set(),
})


PAYROLL_FSM = TransitionValidator({
    'Pending': {'Paid'},
    'Paid': set(),
})

__all__ = ['TransitionValidator', 'SETTLEMENT_FSM', 'PAYROLL_FSM']
