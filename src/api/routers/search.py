from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from src.search import SearchService, SourceItemNotFoundError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


class ObjectType(str, Enum):
    catalogue = "catalogue"
    dataset = "dataset"
    dataservice = "dataservice"
    resource = "resource"
    vocabulary = "vocabulary"


class SearchFilters(BaseModel):
    types: Optional[List[ObjectType]] = Field(
        default=None,
        description="Restrict results to these object types (e.g. ['dataset']).",
    )


class SearchOptions(BaseModel):
    top_k: int = Field(10, ge=1, le=100, description="Number of results to return.")


class QuerySearchRequest(BaseModel):
    query: str = Field(..., min_length=1, description="Natural-language search query.")
    filters: Optional[SearchFilters] = Field(
        default=None, description="Optional filters."
    )
    options: SearchOptions = Field(
        default_factory=SearchOptions, description="Search options."
    )


class SimilarSearchRequest(BaseModel):
    source_id: str = Field(
        ...,
        min_length=1,
        description="ID of an existing stored object.",
    )
    filters: Optional[SearchFilters] = Field(
        default=None, description="Optional filters."
    )
    options: SearchOptions = Field(
        default_factory=SearchOptions, description="Search options."
    )


class SearchResultItem(BaseModel):
    id: str = Field(..., description="Primary key of the matched object.")
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata stored alongside the object.",
    )


def get_search_service(request: Request) -> SearchService:
    """Resolve the search service registered on the application."""

    service = getattr(request.app.state, "search_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Search service unavailable")
    return service


def _types(filters: Optional[SearchFilters]) -> Optional[List[str]]:
    if filters and filters.types:
        return [t.value for t in filters.types]
    return None


def _to_response(results: List[Dict[str, Any]]) -> List[SearchResultItem]:
    return [
        SearchResultItem(id=str(item.get("id")), metadata=item.get("metadata") or {})
        for item in results
    ]


@router.post(
    "",
    summary="Full-text search by query",
    response_model=List[SearchResultItem],
)
async def search_by_query(
    request: QuerySearchRequest,
    service: SearchService = Depends(get_search_service),
) -> List[SearchResultItem]:
    """Search by natural-language query."""

    try:
        results = service.search_by_query(
            request.query,
            top_k=request.options.top_k,
            types=_types(request.filters),
        )
    except Exception as exc:
        logger.exception("Search failed for query %r", request.query)
        raise HTTPException(status_code=500, detail=f"Search failed: {exc}") from exc

    return _to_response(results)


@router.post(
    "/similar",
    summary="Search for items similar to a stored item",
    response_model=List[SearchResultItem],
)
async def search_similar(
    request: SimilarSearchRequest,
    service: SearchService = Depends(get_search_service),
) -> List[SearchResultItem]:
    """Search for items similar to an existing object.

    Returns 404 when ``source_id`` does not exist in the store.
    """

    try:
        results = service.search_similar_by_id(
            request.source_id,
            top_k=request.options.top_k,
            types=_types(request.filters),
        )
    except SourceItemNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Similar search failed for %r", request.source_id)
        raise HTTPException(status_code=500, detail=f"Search failed: {exc}") from exc

    return _to_response(results)
