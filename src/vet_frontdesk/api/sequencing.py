"""
Stale-response protection for overlapping requests.

Each logical operation (for example "load slots for the selected date") has
a generation counter. Starting the operation again supersedes every earlier
in-flight request of the same operation; their answers are discarded instead
of overwriting newer state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Tuple, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


@dataclass(frozen=True)
class Ticket:
    operation: str
    generation: int


class RequestSequencer:
    """Generation counters per logical operation."""

    def __init__(self) -> None:
        self._generations: Dict[str, int] = {}

    def begin(self, operation: str) -> Ticket:
        """Start a new request for ``operation``, superseding earlier ones."""
        generation = self._generations.get(operation, 0) + 1
        self._generations[operation] = generation
        return Ticket(operation, generation)

    def is_current(self, ticket: Ticket) -> bool:
        """Whether the answer for ``ticket`` may still be applied."""
        return self._generations.get(ticket.operation) == ticket.generation

    def invalidate(self, operation: str) -> None:
        """Supersede every in-flight request of ``operation`` without starting a new one."""
        self._generations[operation] = self._generations.get(operation, 0) + 1

    async def run(self, operation: str, awaitable: Awaitable[R]) -> Tuple[bool, Any]:
        """
        Await a request under a fresh ticket.

        Returns:
            ``(True, result)`` when the result is still current, otherwise
            ``(False, None)`` and the result is dropped. Exceptions of a
            superseded request are dropped too; current ones propagate.
        """
        ticket = self.begin(operation)
        try:
            result = await awaitable
        except Exception:
            if self.is_current(ticket):
                raise
            logger.debug(f"Discarded failure of superseded '{operation}' request")
            return False, None

        if not self.is_current(ticket):
            logger.debug(
                f"Discarded superseded '{operation}' response (generation {ticket.generation})"
            )
            return False, None
        return True, result
