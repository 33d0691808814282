"""Shared fixtures for backend tests."""

from unittest.mock import MagicMock

import pytest

from src.api.modules import build_search_module
from src.vectorstore.milvus_client import MilvusSettings


@pytest.fixture
def make_hit():
    """Build hits shaped like MilvusClient.search output."""

    def _make(record_id, text="", score=1.0, metadata=None):
        return {
            "id": record_id,
            "distance": score,
            "entity": {"id": record_id, "text": text, "metadata": metadata or {}},
        }

    return _make


@pytest.fixture
def milvus_client():
    """MilvusClient stand-in whose collection already exists."""
    client = MagicMock()
    client.has_collection.return_value = True
    client.search.return_value = [[]]
    client.get.return_value = []
    return client


@pytest.fixture
def search_module(milvus_client):
    return build_search_module(
        milvus_client, settings=MilvusSettings(collection_name="test_records")
    )


@pytest.fixture(autouse=True)
def _clear_payment_env(monkeypatch):
    """Keep the host environment out of payment config tests."""
    from src.payment import get_fapshi_config

    for name in (
        "FAPSHI_API_KEY",
        "FAPSHI_API_USER",
        "FAPSHI_WEBHOOK_URL",
        "APP_ENV",
        "NODE_ENV",
    ):
        monkeypatch.delenv(name, raising=False)
    get_fapshi_config.cache_clear()
    yield
    get_fapshi_config.cache_clear()
