"""
Entity Store: the authoritative roster.

Entities live in an append-only arena and are addressed by integer handles,
so pools can hold handles without referencing entity objects directly.

Updated by: single inserts, bulk imports, draws (call counters)
Queried by: Pool Engine (scope membership), statistics and group listings
"""

import logging
from typing import Callable, Dict, Iterator, List, Optional

from rollcall.models.roster import Entity, GroupSummary

logger = logging.getLogger(__name__)

MembershipListener = Callable[[], None]


class EntityStore:
    """
    In-memory roster keyed by identity.
    Entities are never removed, so a handle stays valid for the store's lifetime.
    """

    def __init__(self):
        self._entities: List[Entity] = []
        self._handles: Dict[str, int] = {}
        self._listeners: List[MembershipListener] = []

    def subscribe(self, listener: MembershipListener) -> None:
        """Register a callback run after every notifying insertion."""
        self._listeners.append(listener)

    def notify_membership_changed(self) -> None:
        for listener in self._listeners:
            listener()

    def insert(
        self,
        identity: str,
        group: str,
        notify: bool = True,
        call_count: int = 0,
    ) -> bool:
        """
        Add a new entity, normally with a zero call count.

        Returns False, leaving the existing entity untouched, when the identity
        is already present. Pass notify=False to batch several inserts before a
        single notify_membership_changed(). call_count is only set when
        restoring an archived roster.
        """
        if identity in self._handles:
            return False

        self._handles[identity] = len(self._entities)
        self._entities.append(
            Entity(identity=identity, group=group, call_count=call_count)
        )
        logger.debug("Inserted %r into group %r", identity, group)
        if notify:
            self.notify_membership_changed()
        return True

    def get(self, handle: int) -> Entity:
        """Get the entity at a handle."""
        return self._entities[handle]

    def handle_of(self, identity: str) -> Optional[int]:
        """Look up the handle for an identity."""
        return self._handles.get(identity)

    def record_draw(self, handle: int) -> Entity:
        """Increment the call counter of the entity at a handle."""
        entity = self._entities[handle]
        entity.call_count += 1
        return entity

    def handles(self, group: Optional[str] = None) -> Iterator[int]:
        """Handles in a scope: every entity when group is None, else that group's members."""
        for handle, entity in enumerate(self._entities):
            if group is None or entity.group == group:
                yield handle

    def ranked(self) -> List[Entity]:
        """Entities ordered by call count (highest first), then identity."""
        return sorted(self._entities, key=lambda e: (-e.call_count, e.identity))

    def groups(self) -> List[GroupSummary]:
        """Distinct groups with their sizes, in order of first appearance."""
        sizes: Dict[str, int] = {}
        for entity in self._entities:
            sizes[entity.group] = sizes.get(entity.group, 0) + 1
        return [GroupSummary(group=g, size=n) for g, n in sizes.items()]

    def total_calls(self) -> int:
        return sum(e.call_count for e in self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, identity: object) -> bool:
        return identity in self._handles
