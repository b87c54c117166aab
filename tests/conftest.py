"""Shared fixtures for vault accounting tests."""
from __future__ import annotations

import pytest

from portfolio_vault.config import IndexConfig
from portfolio_vault.metrics import VaultMetrics
from portfolio_vault.operations.service import VaultService
from portfolio_vault.pool.adapter import PaperPoolAdapter
from portfolio_vault.pool.custody import PaperAssetCustody

INDEX_ID = "usdc"
BOOTSTRAP_FLOOR = 2000


@pytest.fixture
def index_config() -> IndexConfig:
    return IndexConfig(index_id=INDEX_ID, bootstrap_floor=BOOTSTRAP_FLOOR)


@pytest.fixture
def custody() -> PaperAssetCustody:
    return PaperAssetCustody()


@pytest.fixture
def pool(index_config, custody) -> PaperPoolAdapter:
    return PaperPoolAdapter(config=index_config, custody=custody)


@pytest.fixture
def metrics() -> VaultMetrics:
    return VaultMetrics(max_errors=10)


@pytest.fixture
def service(index_config, pool, metrics) -> VaultService:
    svc = VaultService(metrics=metrics)
    svc.register_index(index_config, adapter=pool)
    return svc


@pytest.fixture
def custody_service(index_config, pool, metrics, custody) -> VaultService:
    svc = VaultService(metrics=metrics, custody=custody)
    svc.register_index(index_config, adapter=pool)
    return svc

