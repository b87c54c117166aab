from __future__ import annotations

# Re-export loader helpers
from .config_loader import ALLOWED_ENVS, get_config_dir, load_config

# Re-export config models
from .config_models import (
    PRICE_SCALE,
    AppConfig,
    IndexConfig,
    LoggingConfig,
    VaultConfig,
)

__all__ = [
    # models
    "PRICE_SCALE",
    "IndexConfig",
    "VaultConfig",
    "LoggingConfig",
    "AppConfig",
    # loader
    "ALLOWED_ENVS",
    "get_config_dir",
    "load_config",
]
