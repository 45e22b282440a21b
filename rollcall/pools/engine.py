"""
Pool Engine: sampling without replacement, per scope.

A scope is either the whole roster (group=None) or a single group. Each scope
has its own pool of handles not yet drawn in the current cycle. A pool is
derived state: it is rebuilt from the Entity Store when it runs dry, and
thrown away whenever the roster's membership changes.

Draw sequence:
  1. Replenish the scope's pool if it is absent or empty
     (a uniformly random permutation of the scope's live handles)
  2. Nothing to draw -> None (a normal outcome, not an error)
  3. Pop the first handle -> increment its counter -> append history
"""

import logging
import random
from collections import deque
from datetime import datetime
from typing import Callable, Deque, Dict, List, Optional

from rollcall.history.log import HistoryLog
from rollcall.models.pools import PoolStatus
from rollcall.models.roster import Entity
from rollcall.roster.store import EntityStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class PoolEngine:
    """
    Draws entities so that nobody in a scope is called twice
    before everybody in that scope has been called once.
    """

    def __init__(
        self,
        store: EntityStore,
        history: HistoryLog,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ):
        self._store = store
        self._history = history
        # Seeded once; never reseeded per draw.
        self._rng = rng or random.Random()
        self._clock = clock or datetime.now
        self._global_pool: Optional[Deque[int]] = None
        self._group_pools: Dict[str, Deque[int]] = {}

        store.subscribe(self.invalidate_all)

    def draw(self, group: Optional[str] = None) -> Optional[Entity]:
        """
        Draw the next entity from a scope.

        Args:
            group: Group key, or None for the global scope.

        Returns:
            A copy of the drawn entity (with its updated call count),
            or None if the scope has no members.
        """
        pool = self._pool_for(group)
        if not pool:
            pool = self._replenish(group)
        if not pool:
            logger.debug("No entity available in scope %s", _scope_label(group))
            return None

        handle = pool.popleft()
        entity = self._store.record_draw(handle)
        self._history.append(entity.identity, entity.group, self._clock())
        logger.info(
            "Called %s (%s) from scope %s, %d left this cycle",
            entity.identity, entity.group, _scope_label(group), len(pool),
        )
        return entity.model_copy()

    def invalidate_all(self) -> None:
        """Drop the global pool and every group pool."""
        self._global_pool = None
        self._group_pools.clear()

    def reset(self) -> None:
        """Start a fresh cycle in every scope."""
        self.invalidate_all()
        logger.info("Cycle reset; all pools cleared")

    def remaining(self, group: Optional[str] = None) -> int:
        """Entities still uncalled in a scope's current cycle (0 if no live pool)."""
        pool = self._pool_for(group)
        return len(pool) if pool else 0

    def status(self) -> List[PoolStatus]:
        """Live pools: the global one first, then groups in creation order."""
        statuses = []
        if self._global_pool:
            statuses.append(PoolStatus(scope=None, remaining=len(self._global_pool)))
        for group, pool in self._group_pools.items():
            if pool:
                statuses.append(PoolStatus(scope=group, remaining=len(pool)))
        return statuses

    # --- Internals ---

    def _pool_for(self, group: Optional[str]) -> Optional[Deque[int]]:
        if group is None:
            return self._global_pool
        return self._group_pools.get(group)

    def _replenish(self, group: Optional[str]) -> Optional[Deque[int]]:
        """Install a fresh random permutation of the scope's members, if any."""
        handles = list(self._store.handles(group))
        if not handles:
            if group is not None:
                self._group_pools.pop(group, None)
            else:
                self._global_pool = None
            return None

        self._rng.shuffle(handles)
        pool = deque(handles)
        if group is None:
            self._global_pool = pool
        else:
            self._group_pools[group] = pool
        logger.debug("Replenished scope %s with %d entities", _scope_label(group), len(pool))
        return pool


def _scope_label(group: Optional[str]) -> str:
    return "<global>" if group is None else repr(group)
