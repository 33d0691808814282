from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Mapping, Optional

from pymilvus import MilvusClient

logger = logging.getLogger(__name__)

DEFAULT_URI = "http://localhost:19530"
DEFAULT_TOKEN = "root:Milvus"
DEFAULT_COLLECTION = "records"


@dataclass(frozen=True)
class MilvusSettings:
    uri: str = DEFAULT_URI
    token: str = DEFAULT_TOKEN
    collection_name: str = DEFAULT_COLLECTION

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MilvusSettings":
        """Read connection settings.

        Env overrides:
          - MILVUS_URI (default http://localhost:19530)
          - MILVUS_TOKEN (default root:Milvus)
          - SEARCH_COLLECTION (default records)
        """
        env = os.environ if environ is None else environ
        return cls(
            uri=env.get("MILVUS_URI") or DEFAULT_URI,
            token=env.get("MILVUS_TOKEN") or DEFAULT_TOKEN,
            collection_name=env.get("SEARCH_COLLECTION") or DEFAULT_COLLECTION,
        )


def get_milvus_client(
    uri: Optional[str] = None,
    token: Optional[str] = None,
    wait_ready: bool = True,
    retries: int = 10,
    backoff_sec: float = 1.0,
) -> MilvusClient:
    """Create a Milvus client and optionally wait until the server answers.

    Missing ``uri``/``token`` fall back to :meth:`MilvusSettings.from_env`.
    The last connection error is re-raised once ``retries`` is exhausted.
    """
    settings = MilvusSettings.from_env()
    uri = uri or settings.uri
    token = token or settings.token
    client = MilvusClient(uri=uri, token=token)

    if wait_ready:
        attempts = max(1, retries)
        for i in range(attempts):
            try:
                # A light call to verify connectivity
                client.list_collections()
                break
            except Exception as e:
                if i == attempts - 1:
                    raise
                logger.warning(
                    "Milvus at %s not ready (attempt %d/%d): %s", uri, i + 1, attempts, e
                )
                time.sleep(backoff_sec)
    logger.info("Connected to Milvus at %s", uri)
    return client
