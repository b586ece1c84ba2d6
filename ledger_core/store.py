"""Per-period ledger store on top of a key-value storage backend."""

from __future__ import annotations

import json
import logging
from typing import Dict

from .exceptions import PersistenceError
from .models import PeriodLedger
from .periods import storage_key, validate_period_key
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)


class LedgerStore:
    """Owns the period key to ledger mapping and is the storage backend's only client."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._ledgers: Dict[str, PeriodLedger] = {}

    def load(self, period_key: str) -> PeriodLedger:
        """Return the ledger for a period, or a fresh empty one if nothing is stored."""
        period_key = validate_period_key(period_key)
        cached = self._ledgers.get(period_key)
        if cached is not None:
            return cached

        raw = self._storage.get(storage_key(period_key))
        if raw is None:
            logger.debug("No stored data for %s; starting empty", period_key)
            ledger = PeriodLedger(period_key=period_key)
        else:
            ledger = self._decode(period_key, raw)
            logger.debug(
                "Loaded %s: %d income, %d expenses, %d lending",
                period_key,
                len(ledger.income),
                len(ledger.expenses),
                len(ledger.lending),
            )
        self._ledgers[period_key] = ledger
        return ledger

    def save(self, ledger: PeriodLedger) -> None:
        key = storage_key(ledger.period_key)
        try:
            self._storage.set(key, json.dumps(ledger.to_dict(), indent=2))
        except PersistenceError:
            # Drop the unsaved copy so the next load reflects durable state.
            self._ledgers.pop(ledger.period_key, None)
            raise
        except Exception as exc:  # pragma: no cover - defensive guard
            self._ledgers.pop(ledger.period_key, None)
            raise PersistenceError(f"Unexpected error while saving {key}") from exc
        self._ledgers[ledger.period_key] = ledger

    def clear(self, period_key: str) -> None:
        period_key = validate_period_key(period_key)
        self._storage.remove(storage_key(period_key))
        self._ledgers.pop(period_key, None)
        logger.info("Cleared all data for %s", period_key)

    @staticmethod
    def _decode(period_key: str, raw: str) -> PeriodLedger:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupted JSON data for {period_key}") from exc
        if not isinstance(payload, dict):
            raise PersistenceError(f"Expected object payload for {period_key}")
        try:
            return PeriodLedger.from_dict(period_key, payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Malformed ledger snapshot for {period_key}") from exc
