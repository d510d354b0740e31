"""MarketRegime – Regime state storage helpers.

Typed repository around the key-value port for the composite regime
engine. It persists:

- the latest :class:`CompositeRegimeState` (used to detect transitions
  on the next run, including across process restarts);
- the regime change log, newest entry first, capped at a fixed length.

Persistence is non-critical for the engine. Read failures and malformed
payloads are logged and treated as "nothing stored". The one exception is
the change log: when it cannot be read, appending is skipped rather than
overwriting the stored history. Write failures are logged and reported to
the caller via the return value.

Keys accessed:
- regime_state
- regime_log

Thread safety: Not thread-safe on its own; :class:`RegimeEngine`
serialises the read-modify-write cycle.

Author: MarketRegime Team
Created: 2026-02-04
Last Modified: 2026-02-11
Status: Development
Version: v0.2.0
"""

from __future__ import annotations

# ============================================================================
# Imports
# ============================================================================

from dataclasses import dataclass
from typing import List, Optional, Sequence

from marketregime.core.kv_store import REGIME_LOG_KEY, REGIME_STATE_KEY, KeyValueStore, StorageError
from marketregime.core.logging import get_logger
from marketregime.regime.types import CompositeRegimeState, RegimeChange

# ============================================================================
# Module setup
# ============================================================================

logger = get_logger(__name__)

DEFAULT_LOG_LIMIT = 50


@dataclass
class RegimeStateStore:
    """Persistence helper for regime states and the change log.

    Attributes:
        store: Key-value backend.
        state_key: Key holding the latest composite state.
        log_key: Key holding the change log.
    """

    store: KeyValueStore
    state_key: str = REGIME_STATE_KEY
    log_key: str = REGIME_LOG_KEY

    # ========================================================================
    # Public API: state
    # ========================================================================

    def get_previous(self) -> Optional[CompositeRegimeState]:
        """Return the last saved state, or ``None`` if none is usable."""

        try:
            raw = self.store.get(self.state_key)
        except StorageError as exc:
            logger.warning("RegimeStateStore.get_previous: read failed: %s", exc)
            return None

        if raw is None:
            return None

        try:
            return CompositeRegimeState.from_dict(raw)
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            logger.warning("RegimeStateStore.get_previous: discarding malformed state: %s", exc)
            return None

    def save(self, state: CompositeRegimeState) -> bool:
        """Persist ``state`` as the latest state."""

        try:
            self.store.set(self.state_key, state.to_dict())
        except StorageError as exc:
            logger.warning("RegimeStateStore.save: write failed: %s", exc)
            return False
        return True

    # ========================================================================
    # Public API: change log
    # ========================================================================

    def get_change_log(self) -> List[RegimeChange]:
        """Return the stored change log, newest entry first."""

        try:
            return self._read_change_log()
        except StorageError as exc:
            logger.warning("RegimeStateStore.get_change_log: read failed: %s", exc)
            return []

    def append_changes(
        self,
        changes: Sequence[RegimeChange],
        limit: int = DEFAULT_LOG_LIMIT,
    ) -> List[RegimeChange]:
        """Insert ``changes`` at the head of the log and truncate to ``limit``.

        Changes are inserted one at a time in the given order, each at the
        head, so the last element of ``changes`` ends up first in the log.
        Returns the resulting log.

        If the stored log cannot be read, nothing is written so that the
        existing history survives; the new changes are dropped.
        """

        try:
            log = self._read_change_log()
        except StorageError as exc:
            logger.warning(
                "RegimeStateStore.append_changes: read failed, dropping %d change(s): %s",
                len(changes),
                exc,
            )
            return list(reversed(changes))[:limit]

        for change in changes:
            log.insert(0, change)
        log = log[:limit]

        try:
            self.store.set(self.log_key, [c.to_dict() for c in log])
        except StorageError as exc:
            logger.warning("RegimeStateStore.append_changes: write failed: %s", exc)

        return log

    # ========================================================================
    # Internal helpers
    # ========================================================================

    def _read_change_log(self) -> List[RegimeChange]:
        raw = self.store.get(self.log_key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("RegimeStateStore: discarding malformed change log of type %s", type(raw).__name__)
            return []

        changes: List[RegimeChange] = []
        for item in raw:
            try:
                changes.append(RegimeChange.from_dict(item))
            except (KeyError, TypeError, AttributeError):
                logger.debug("RegimeStateStore.get_change_log: skipping malformed entry %r", item)
        return changes
