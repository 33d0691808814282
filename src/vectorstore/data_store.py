import logging
from typing import List, Optional

from pymilvus import DataType, Function, FunctionType, MilvusClient

from src.utils.text_cleaning import clean_text

from .milvus_client import DEFAULT_COLLECTION, get_milvus_client
from .schemas import SearchItem, format_search_item, hit_to_item


logger = logging.getLogger(__name__)

OUTPUT_FIELDS = ["id", "text", "metadata"]
MAX_TEXT_LENGTH = 8000


class CollectionManager:
    """Manages Milvus collection lifecycle and schema for searchable records."""

    def __init__(self, client: MilvusClient, name: str = DEFAULT_COLLECTION) -> None:
        self.client = client
        self.name = name

    def ensure_collection(self) -> None:
        if self.client.has_collection(self.name):
            return

        logger.info("Creating collection '%s'.", self.name)
        schema = self.client.create_schema(auto_id=False)
        # String UUIDs (36 chars with dashes) as primary key
        schema.add_field(
            field_name="id", datatype=DataType.VARCHAR, max_length=36, is_primary=True
        )
        schema.add_field(field_name="metadata", datatype=DataType.JSON)
        schema.add_field(
            field_name="text",
            datatype=DataType.VARCHAR,
            max_length=MAX_TEXT_LENGTH,
            enable_analyzer=True,
        )
        schema.add_field(
            field_name="text_sparse", datatype=DataType.SPARSE_FLOAT_VECTOR
        )

        bm25_fn = Function(
            name="text_bm25_emb",
            input_field_names=["text"],
            output_field_names=["text_sparse"],
            function_type=FunctionType.BM25,
        )
        schema.add_function(bm25_fn)

        index_params = self.client.prepare_index_params()
        index_params.add_index(
            field_name="text_sparse",
            index_name="text_sparse_index",
            index_type="SPARSE_INVERTED_INDEX",
            metric_type="BM25",
            params={"inverted_index_algo": "DAAT_MAXSCORE"},
        )

        self.client.create_collection(
            collection_name=self.name, schema=schema, index_params=index_params
        )

    def drop_collection(self) -> None:
        if self.client.has_collection(self.name):
            logger.info("Dropping collection '%s'.", self.name)
            self.client.drop_collection(collection_name=self.name)
            logger.info("Collection dropped successfully.")

    def reset_collection(self) -> None:
        self.drop_collection()
        self.ensure_collection()


class DataStore:
    """CRUD and full-text search; delegates lifecycle to a CollectionManager."""

    def __init__(
        self,
        client: Optional[MilvusClient] = None,
        collection: str = DEFAULT_COLLECTION,
        manager: Optional[CollectionManager] = None,
    ) -> None:
        self.client = client or get_milvus_client()
        self.collection = collection
        self.manager = manager or CollectionManager(self.client, name=self.collection)
        self.manager.ensure_collection()

    def reset(self) -> None:
        self.manager.reset_collection()

    def upsert(
        self,
        ids: List[str],
        texts: List[str],
        *,
        metadatas: Optional[List[Optional[dict]]] = None,
    ) -> None:
        if len(ids) != len(texts):
            raise ValueError("ids and texts must be the same length")
        if metadatas is not None and len(metadatas) != len(ids):
            raise ValueError("metadatas (if provided) must be the same length as ids")
        if not ids:
            return

        rows = []
        for i, record_id in enumerate(ids):
            rows.append(
                {
                    "id": record_id,
                    "text": clean_text(texts[i])[:MAX_TEXT_LENGTH],
                    "metadata": (metadatas[i] if metadatas else None) or {},
                }
            )
        self.client.upsert(collection_name=self.collection, data=rows)
        logger.debug("Upserted %d rows into '%s'.", len(rows), self.collection)

    def full_text_search(
        self,
        query: str,
        limit: int = 10,
        *,
        filter_expression: Optional[str] = None,
    ) -> List[SearchItem]:
        """BM25 search over the analyzed ``text`` field."""
        if not query or not query.strip():
            return []

        results = self.client.search(
            collection_name=self.collection,
            data=[query],
            anns_field="text_sparse",
            limit=limit,
            filter=filter_expression or "",
            output_fields=OUTPUT_FIELDS,
            search_params={"metric_type": "BM25", "params": {"drop_ratio_search": 0.2}},
        )
        if not results:
            return []
        items = [hit_to_item(hit) for hit in results[0]]
        if items:
            logger.debug("Top hit for %r: %s", query, format_search_item(items[0]))
        return items

    def get(self, ids: List[str]) -> List[SearchItem]:
        if not ids:
            return []
        rows = self.client.get(
            collection_name=self.collection, ids=ids, output_fields=OUTPUT_FIELDS
        )
        return [hit_to_item(row) for row in rows or []]

    def delete(self, ids: List[str]) -> None:
        if ids:
            self.client.delete(collection_name=self.collection, ids=ids)

    def close(self) -> None:
        self.client.close()
