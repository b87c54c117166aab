from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

# Fixed-point scale for pool share prices (asset units per virtual unit).
PRICE_SCALE = 10**18


@dataclass
class IndexConfig:
    index_id: str
    bootstrap_floor: int
    scaling_factor: int = 1
    deposits_enabled: bool = True
    withdrawals_enabled: bool = True
    initial_price: int = PRICE_SCALE


@dataclass
class VaultConfig:
    indices: Dict[str, IndexConfig] = field(default_factory=dict)
    custody_account: str = "vault"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json: bool = True


@dataclass
class AppConfig:
    vault: VaultConfig = field(default_factory=VaultConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    env: str = "paper"
    config_path: Optional[str] = None
