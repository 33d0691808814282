"""Explicit composition of feature modules.

Each module owns its collaborators and declares which of them other parts of
the application may reuse. Building a module is plain constructor calls;
importing this file performs no I/O.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple

from fastapi import APIRouter, FastAPI
from pymilvus import MilvusClient

from src.search import SearchService, SearchServiceConfig
from src.vectorstore.data_store import DataStore
from src.vectorstore.milvus_client import MilvusSettings, get_milvus_client

from .routers.search import router as search_router


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchModule:
    """Search controller, service and database client wired together.

    Only ``service`` is exported for reuse.
    """

    exports: ClassVar[Tuple[str, ...]] = ("service",)
    router: ClassVar[APIRouter] = search_router

    client: MilvusClient
    store: DataStore
    service: SearchService

    def register(self, app: FastAPI) -> None:
        """Publish the exported service to the app's request handlers."""
        app.state.search_service = self.service

    def close(self) -> None:
        self.store.close()


def build_search_module(
    client: Optional[MilvusClient] = None,
    *,
    settings: Optional[MilvusSettings] = None,
    config: Optional[SearchServiceConfig] = None,
) -> SearchModule:
    """Construct the client, then inject it into the service."""

    settings = settings or MilvusSettings.from_env()
    config = config or SearchServiceConfig(collection_name=settings.collection_name)
    owns_client = client is None
    if owns_client:
        client = get_milvus_client(uri=settings.uri, token=settings.token)

    try:
        store = DataStore(client=client, collection=config.collection_name)
    except Exception:
        if owns_client:
            client.close()
        raise
    service = SearchService(store, config)
    logger.info("Search module ready on collection '%s'", config.collection_name)
    return SearchModule(client=client, store=store, service=service)
