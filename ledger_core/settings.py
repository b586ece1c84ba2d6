"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, List, Mapping, Optional

from .reconciler import BalanceReconciler
from .services import LedgerService
from .storage import JSONStorage, KeyValueStorage
from .store import LedgerStore
from .validators import validate_currency

DEFAULT_DATA_DIR: Final = Path("data")
DEFAULT_PRIMARY_CURRENCY: Final = "KWD"
DEFAULT_ENV: Final = "prod"

ENV_DATA_DIR: Final = "BUDGET_LEDGER_DATA_DIR"
ENV_PRIMARY_CURRENCY: Final = "BUDGET_LEDGER_PRIMARY_CURRENCY"
ENV_NAME: Final = "BUDGET_LEDGER_ENV"
ENV_ALLOWED_ORIGINS: Final = "BUDGET_LEDGER_ALLOWED_ORIGINS"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    primary_currency: str = DEFAULT_PRIMARY_CURRENCY
    env_name: str = DEFAULT_ENV
    allowed_origins: Optional[List[str]] = None

    @property
    def is_development(self) -> bool:
        return self.env_name in {"dev", "development"}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        origins = env.get(ENV_ALLOWED_ORIGINS)
        return cls(
            data_dir=Path(env.get(ENV_DATA_DIR) or DEFAULT_DATA_DIR),
            primary_currency=validate_currency(
                env.get(ENV_PRIMARY_CURRENCY) or DEFAULT_PRIMARY_CURRENCY
            ),
            env_name=(env.get(ENV_NAME) or DEFAULT_ENV).lower(),
            allowed_origins=(
                [origin.strip() for origin in origins.split(",") if origin.strip()]
                if origins
                else None
            ),
        )


def build_service(
    primary_currency: str,
    *,
    data_dir: Optional[Path] = None,
    storage: Optional[KeyValueStorage] = None,
) -> LedgerService:
    """Wire storage, store and reconciler into a ledger service."""
    backend = storage if storage is not None else JSONStorage(Path(data_dir or DEFAULT_DATA_DIR))
    return LedgerService(LedgerStore(backend), BalanceReconciler(validate_currency(primary_currency)))
