"""In-memory supersession DAG.

Decision records form chains through two inverse pointers: ``supersedes``
(towards older records) and ``superseded_by`` (towards newer records). The
graph is loaded once per operation as an arena of nodes keyed by id, so walks
run without a store round-trip per hop. Every walk carries a visited set and
stops on a missing pointer or on a revisit.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from dataclasses import dataclass

from archledger.core.exceptions import CycleDetected, IntegrityError


@dataclass(frozen=True)
class SupersessionEdge:
    """The two supersession pointers of one decision record."""

    decision_id: Hashable
    supersedes_id: Hashable | None = None
    superseded_by_id: Hashable | None = None


class SupersessionGraph:
    """Arena of decision ids with forward (newer) and backward (older) adjacency."""

    def __init__(self, edges: Iterable[SupersessionEdge] = ()):
        self._newer: dict[Hashable, Hashable | None] = {}
        self._older: dict[Hashable, Hashable | None] = {}
        for edge in edges:
            self.add(edge)

    def add(self, edge: SupersessionEdge) -> None:
        self._newer[edge.decision_id] = edge.superseded_by_id
        self._older[edge.decision_id] = edge.supersedes_id

    def __contains__(self, decision_id: Hashable) -> bool:
        return decision_id in self._newer

    def __len__(self) -> int:
        return len(self._newer)

    def newer(self, decision_id: Hashable) -> Hashable | None:
        return self._newer.get(decision_id)

    def older(self, decision_id: Hashable) -> Hashable | None:
        return self._older.get(decision_id)

    def ensure_no_cycle(self, old_id: Hashable, new_id: Hashable) -> None:
        """Prove that ``new_id`` superseding ``old_id`` keeps the graph acyclic.

        Walks ``superseded_by`` forward from ``new_id``. Reaching ``old_id``
        means ``old_id`` is already newer than ``new_id``, so the new edge would
        close a loop.

        Raises:
            CycleDetected: ``old_id`` is reachable forward from ``new_id``, or
                the forward walk itself revisits a node
        """
        visited: set[Hashable] = set()
        current: Hashable | None = new_id
        while current is not None:
            if current in visited or current == old_id:
                raise CycleDetected(old_id, new_id)
            visited.add(current)
            current = self._newer.get(current)

    def chain(self, decision_id: Hashable) -> list[Hashable]:
        """Return the ids on the ``supersedes`` path ending at ``decision_id``.

        Ordered oldest to newest. A pointer to an id missing from the arena ends
        the walk, as a deleted record would.

        Raises:
            IntegrityError: the backward walk revisits a node
        """
        visited: set[Hashable] = set()
        path: list[Hashable] = []
        current: Hashable | None = decision_id
        while current is not None and current in self:
            if current in visited:
                raise IntegrityError(
                    f"Supersession chain of {decision_id} revisits {current}",
                    details={"decision_id": str(decision_id), "revisited": str(current)},
                )
            visited.add(current)
            path.append(current)
            current = self._older.get(current)
        path.reverse()
        return path
