"""
Pagination helper for the list endpoints.
"""

import math
from dataclasses import replace
from typing import Any, Dict

from ..repositories.base import ListQuery, OwnedRepository


def paginate(repository: OwnedRepository, owner_id: int, query: ListQuery, page: int, limit: int) -> Dict[str, Any]:
    """
    Fetches one page of records and the counts the envelope reports.

    Args:
        repository (OwnedRepository): The collection to read.
        owner_id (int): The caller's user id.
        query (ListQuery): Filters and ordering; paging fields are overwritten.
        page (int): 1-based page number.
        limit (int): Page size.

    Returns:
        dict: `success`, `count`, `total`, `total_pages`, `current_page`, `data`.
    """
    records = repository.list(owner_id, replace(query, offset=(page - 1) * limit, limit=limit))
    total = repository.count(owner_id, query)
    return {
        "success": True,
        "count": len(records),
        "total": total,
        "total_pages": math.ceil(total / limit),
        "current_page": page,
        "data": records,
    }
