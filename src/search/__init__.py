"""Search application layer.

This package provides the service behind the search API:
- Search by free-text query
- Search for items similar to an existing stored item (by id)

Persistence is delegated to the vectorstore module.
"""

from .service import SearchService, SearchServiceConfig, SourceItemNotFoundError

__all__ = ["SearchService", "SearchServiceConfig", "SourceItemNotFoundError"]
