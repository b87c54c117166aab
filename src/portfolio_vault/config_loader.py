from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import appdirs  # type: ignore[import-untyped]
import yaml  # type: ignore[import-untyped]

from portfolio_vault.config_models import (
    PRICE_SCALE,
    AppConfig,
    IndexConfig,
    LoggingConfig,
    VaultConfig,
)
from portfolio_vault.exceptions import ConfigError

ALLOWED_ENVS = {"dev", "paper", "live"}


def get_config_dir() -> Path:
    """
    Returns the OS-specific configuration directory for the vault using appdirs.
    """
    return Path(appdirs.user_config_dir("portfolio_vault"))


def _deep_merge_dicts(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    merged = base.copy()
    for key, value in overlay.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> Any:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _positive_int(value: Any, field_name: str, index_id: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(
            f"{field_name} for index {index_id} must be a positive integer, got {value!r}",
            index_id,
        )
    return value


def _parse_index(index_id: str, data: Dict[str, Any]) -> IndexConfig:
    if "bootstrap_floor" not in data:
        raise ConfigError(f"Index {index_id} is missing bootstrap_floor", index_id)

    return IndexConfig(
        index_id=index_id,
        bootstrap_floor=_positive_int(data["bootstrap_floor"], "bootstrap_floor", index_id),
        scaling_factor=_positive_int(data.get("scaling_factor", 1), "scaling_factor", index_id),
        deposits_enabled=bool(data.get("deposits_enabled", True)),
        withdrawals_enabled=bool(data.get("withdrawals_enabled", True)),
        initial_price=_positive_int(
            data.get("initial_price", PRICE_SCALE), "initial_price", index_id
        ),
    )


def load_config(config_path: Optional[Path] = None, env: Optional[str] = None) -> AppConfig:
    """
    Loads the vault configuration from the default location or a specified path.

    Missing files and malformed sections fall back to defaults with a warning.
    Index parameters that govern accounting safety (``bootstrap_floor``,
    ``scaling_factor``) raise :class:`ConfigError` instead.
    """
    logger = logging.getLogger(__name__)

    if config_path is None:
        config_path = get_config_dir() / "config.yaml"

    config_path = config_path.expanduser()

    initial_env = env if env is not None else os.environ.get("PORTFOLIO_VAULT_ENV")
    if initial_env not in ALLOWED_ENVS:
        logger.warning(
            "Invalid or missing environment '%s'; defaulting to 'paper'",
            initial_env,
            extra={"event": "config_invalid_env", "config_path": str(config_path)},
        )
        effective_env = "paper"
    else:
        effective_env = initial_env

    if not config_path.exists():
        logger.warning(
            "Configuration file not found; using defaults",
            extra={"event": "config_missing_file", "config_path": str(config_path)},
        )
        raw_config: Any = {}
    else:
        raw_config = _read_yaml(config_path)

    if not isinstance(raw_config, dict):
        logger.warning(
            "Configuration file is not a mapping; falling back to defaults",
            extra={"event": "config_invalid_format", "config_path": str(config_path)},
        )
        raw_config = {}

    env_config_path = config_path.parent / f"config.{effective_env}.yaml"
    if env_config_path.exists():
        env_config = _read_yaml(env_config_path)
        if not isinstance(env_config, dict):
            logger.warning(
                "Environment config is not a mapping; skipping env overlay",
                extra={
                    "event": "config_invalid_env_file",
                    "config_path": str(env_config_path),
                },
            )
            env_config = {}

        raw_config = _deep_merge_dicts(raw_config, env_config)

    vault_data = raw_config.get("vault") or {}
    if not isinstance(vault_data, dict):
        logger.warning(
            "Vault config is not a mapping; using defaults",
            extra={"event": "config_invalid_vault", "config_path": str(config_path)},
        )
        vault_data = {}

    raw_indices = vault_data.get("indices") or {}
    if not isinstance(raw_indices, dict):
        logger.warning(
            "Vault indices section is not a mapping; no indices configured",
            extra={"event": "config_invalid_indices", "config_path": str(config_path)},
        )
        raw_indices = {}

    indices: Dict[str, IndexConfig] = {}
    for index_id, index_data in raw_indices.items():
        if not isinstance(index_data, dict):
            logger.warning(
                "Index config is not a mapping; skipping entry",
                extra={
                    "event": "config_invalid_index_entry",
                    "config_path": str(config_path),
                    "index_id": str(index_id),
                },
            )
            continue
        indices[str(index_id)] = _parse_index(str(index_id), index_data)

    logging_data = raw_config.get("logging") or {}
    if not isinstance(logging_data, dict):
        logger.warning(
            "Logging config is not a mapping; using defaults",
            extra={"event": "config_invalid_logging", "config_path": str(config_path)},
        )
        logging_data = {}

    level = str(logging_data.get("level", "INFO")).upper()
    if level not in logging.getLevelNamesMapping():
        logger.warning(
            "Unknown log level %s; using INFO",
            level,
            extra={"event": "config_invalid_log_level", "config_path": str(config_path)},
        )
        level = "INFO"

    return AppConfig(
        vault=VaultConfig(
            indices=indices,
            custody_account=str(vault_data.get("custody_account", "vault")),
        ),
        logging=LoggingConfig(level=level, json=bool(logging_data.get("json", True))),
        env=effective_env,
        config_path=str(config_path),
    )
