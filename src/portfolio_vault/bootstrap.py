"""Convenience bootstrapper for loading config and building a vault service."""

import logging
from pathlib import Path
from typing import Optional, Tuple

from portfolio_vault.config import AppConfig, load_config
from portfolio_vault.logging_config import configure_logging, structured_log_extra
from portfolio_vault.operations.service import VaultService
from portfolio_vault.pool.custody import AssetCustody

logger = logging.getLogger(__name__)


def bootstrap(
    config_path: Optional[Path] = None,
    env: Optional[str] = None,
    custody: Optional[AssetCustody] = None,
    setup_logging: bool = True,
) -> Tuple[VaultService, AppConfig]:
    """Load configuration and return a service with every index registered.

    Args:
        config_path: Optional path to ``config.yaml``; defaults to the appdirs
            configuration directory.
        env: Environment overlay to apply (``dev``, ``paper`` or ``live``).
        custody: Asset custody used for deposit/withdraw transfers, if any.
        setup_logging: Whether to configure root logging from the loaded config.

    Returns:
        A tuple of ``(VaultService, AppConfig)``.
    """

    config = load_config(config_path=config_path, env=env)
    if setup_logging:
        configure_logging(
            level=logging.getLevelNamesMapping()[config.logging.level],
            env=config.env,
            json_output=config.logging.json,
        )

    service = VaultService.from_config(config, custody=custody)
    logger.info(
        "Vault service ready",
        extra=structured_log_extra(
            env=config.env,
            event="vault_bootstrap",
            indices=service.index_ids(),
            custody_enabled=custody is not None,
        ),
    )
    return service, config


__all__ = ["bootstrap", "VaultService", "AppConfig"]
