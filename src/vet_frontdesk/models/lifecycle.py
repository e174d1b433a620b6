"""
Status lifecycles for stateful records.

A lifecycle lists, for every status, the statuses it may move to. Statuses
with no outgoing moves are terminal.
"""

import enum
from typing import Dict, FrozenSet, Generic, Iterable, Mapping, TypeVar

from ..exceptions import IllegalTransitionError

S = TypeVar("S", bound=enum.Enum)


class Lifecycle(Generic[S]):
    """Allowed status transitions of one entity type."""

    def __init__(self, entity: str, initial: S, transitions: Mapping[S, Iterable[S]]):
        self.entity = entity
        self.initial = initial
        self._transitions: Dict[S, FrozenSet[S]] = {
            state: frozenset(targets) for state, targets in transitions.items()
        }

    def allowed_targets(self, state: S) -> FrozenSet[S]:
        return self._transitions.get(state, frozenset())

    def can_transition(self, current: S, target: S) -> bool:
        return target in self.allowed_targets(current)

    def is_terminal(self, state: S) -> bool:
        return not self.allowed_targets(state)

    def check(self, current: S, target: S) -> None:
        """
        Verify a status change.

        Raises:
            IllegalTransitionError: If ``target`` is not reachable from ``current``
        """
        if not self.can_transition(current, target):
            raise IllegalTransitionError(self.entity, current.value, target.value)
