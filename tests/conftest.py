"""
Общие fixtures: фабрики RPC объектов и клиент поверх FakeSession.
"""

import pytest

from src.core.config import RpcConfig
from src.rpc.client import SuiRpcClient

from tests.fakes import (
    TARGET,
    FakeSession,
    build_dynamic_field,
    build_page,
    build_pool_object,
    build_transaction,
)


@pytest.fixture
def target_address():
    return TARGET


@pytest.fixture
def make_transaction():
    """Фабрика raw транзакций."""
    return build_transaction


@pytest.fixture
def make_page():
    return build_page


@pytest.fixture
def make_pool_object():
    return build_pool_object


@pytest.fixture
def make_dynamic_field():
    return build_dynamic_field


@pytest.fixture
def rpc_config():
    return RpcConfig(url="https://rpc.test", timeout_sec=5.0, max_retries=0)


@pytest.fixture
def make_client(rpc_config):
    """Фабрика SuiRpcClient поверх FakeSession: make_client(responses) → (client, session)."""

    def _make(responses=None, handler=None):
        session = FakeSession(responses, handler=handler)
        return SuiRpcClient(rpc_config, session=session), session

    return _make
