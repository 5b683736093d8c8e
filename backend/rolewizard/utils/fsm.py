from __future__ import annotations
"""Simple finite state machine utility for enforcing allowed state transitions.

Usage:
    from rolewizard.utils.fsm import TransitionValidator
    WIZARD_FSM = TransitionValidator({
        'DRAFTING_ROLE': {'DRAFTING_DASHBOARD'},
        'DRAFTING_DASHBOARD': {'DRAFTING_ROLE', 'PUBLISHED'},
        'PUBLISHED': set(),
    }, field_name='wizard step')
    WIZARD_FSM.assert_can_transition(current_state, target_state)

Raises InvalidTransition (rendered as 400) if invalid.
"""
from typing import Dict, Set
from rolewizard.errors import InvalidTransition

class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.graph.get(current, set())

    def assert_can_transition(self, current: str, target: str):
        if not self.can_transition(current, target):
            raise InvalidTransition(f"Invalid {self.field_name} transition {current} -> {target}", current=current, target=target)
        return True

__all__ = ['TransitionValidator']
