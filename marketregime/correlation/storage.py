"""MarketRegime – Correlation alert cache.

Other dashboard views show a lightweight summary of the latest
correlation alerts without recomputing the matrix. This module persists
that summary through the key-value port. Cache writes are non-critical:
failures are logged and the classification result is still returned.

Keys accessed:
- corr_alerts
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from marketregime.core.kv_store import CORRELATION_ALERTS_KEY, KeyValueStore, StorageError
from marketregime.core.logging import get_logger
from marketregime.correlation.types import RegimeAlert


logger = get_logger(__name__)


@dataclass
class AlertCacheStorage:
    """Typed repository for the ``corr_alerts`` summary list."""

    store: KeyValueStore
    key: str = CORRELATION_ALERTS_KEY

    def save_summaries(self, alerts: Sequence[RegimeAlert]) -> bool:
        """Persist ``{pair, type, severity, message}`` for each alert.

        Returns ``True`` when the write succeeded.
        """

        payload = [alert.summary() for alert in alerts]
        try:
            self.store.set(self.key, payload)
        except StorageError as exc:
            logger.warning("AlertCacheStorage.save_summaries: dropped cache write: %s", exc)
            return False
        return True

    def load_summaries(self) -> Optional[List[Dict[str, str]]]:
        """Return the cached summaries, or ``None`` if absent or unreadable."""

        try:
            raw = self.store.get(self.key)
        except StorageError as exc:
            logger.warning("AlertCacheStorage.load_summaries: cache unavailable: %s", exc)
            return None

        if not isinstance(raw, list):
            return None
        return [item for item in raw if isinstance(item, dict)]
